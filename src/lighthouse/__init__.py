""" Python client for the Lighthouse protocol. A single persistent connection
    carries verb-based requests (get, put, stream, ...) against path-addressed
    resources on the server; responses are matched back to the caller that
    issued the request, or to the stream that asked for them.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import errors
from . import frame

# Submodules used by multiple other components.

from . import protocol
from . import config
from . import transport
from . import registry

# Primary public-facing interfaces.

from .connection import Connection
from .client import Lighthouse

from .frame import Color, Frame
from .protocol.message import (
    Ack,
    ClientMessage,
    Credential,
    ErrorPayload,
    FramePayload,
    InputEvent,
    Other,
    ServerMessage,
    Verb,
)
from .errors import (
    AlreadyConnected,
    ConnectionClosed,
    DecodeError,
    EncodeError,
    LighthouseError,
    NotConnected,
    RemoteError,
    RequestTimeout,
    TransportError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
