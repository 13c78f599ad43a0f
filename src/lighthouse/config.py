""" Default settings for the Lighthouse client. Values that a user would
    reasonably want to change without editing code are read from the
    environment when this module is imported; the module-level variables
    can also be reassigned directly.

    The default *url* is the public Lighthouse server. The payload tagging
    used by :mod:`lighthouse.protocol.codec`, a map with a "KIND" entry, is
    this package's own convention; a server must speak the same payload
    format for frames and input events to be understood. Point
    LIGHTHOUSE_URL at such a server when using the examples.
"""

import os

from .protocol.message import Credential


url = os.environ.get('LIGHTHOUSE_URL', 'wss://lighthouse.uni-kiel.de/websocket')
username = os.environ.get('LIGHTHOUSE_USER')
token = os.environ.get('LIGHTHOUSE_TOKEN')


def credential(username=None, token=None):
    """ Return a :class:`Credential` for the given *username* and *token*,
        falling back to the LIGHTHOUSE_USER and LIGHTHOUSE_TOKEN environment
        variables for anything not specified.
    """

    if username is None:
        username = globals()['username']

    if token is None:
        token = globals()['token']

    if username is None or username == '':
        raise ValueError('no username specified, and LIGHTHOUSE_USER is not set')

    if token is None or token == '':
        raise ValueError('no token specified, and LIGHTHOUSE_TOKEN is not set')

    return Credential(username, token)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
