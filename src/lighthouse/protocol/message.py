""" Class representations of Lighthouse protocol messages. A client sends
    :class:`ClientMessage` instances and receives :class:`ServerMessage`
    instances; the two are correlated by their request id. Both carry a
    payload, which is one of the :class:`Payload` subclasses defined here.

    Nothing in this module knows how a message is represented on the wire;
    see :mod:`lighthouse.protocol.codec` for that.
"""

import enum

from .. import frame as framemodule


class Verb(enum.Enum):
    """ The operation requested of the server. The enumeration value is the
        on-the-wire representation of the verb.
    """

    GET = 'GET'
    PUT = 'PUT'
    POST = 'POST'
    CREATE = 'CREATE'
    DELETE = 'DELETE'
    MKDIR = 'MKDIR'
    LIST = 'LIST'
    LINK = 'LINK'
    UNLINK = 'UNLINK'
    STREAM = 'STREAM'
    STOP = 'STOP'

    @property
    def streaming(self):
        """ True if the server may answer a request with this verb more than
            once.
        """

        return self is Verb.STREAM


    @classmethod
    def _missing_(cls, value):
        # Accept the verb in any case, "put" is as good as "PUT".

        if isinstance(value, str):
            return cls.__members__.get(value.upper())

        return None


def normalize_path(segments):
    """ Normalize and validate a resource path, returning it as a tuple of
        strings. The *segments* can be any iterable of strings, or a single
        string with slash-separated segments; leading and trailing slashes
        in a string are ignored. Empty segments, or segments containing a
        slash, are rejected with a :class:`ValueError`.
    """

    if isinstance(segments, str):
        segments = segments.strip('/').split('/')

    try:
        segments = tuple(segments)
    except TypeError:
        raise TypeError('a path is a sequence of strings, not ' + repr(segments))

    for segment in segments:
        if not isinstance(segment, str):
            raise TypeError('path segments must be strings: ' + repr(segment))
        if segment == '':
            raise ValueError('empty path segment in ' + repr(segments))
        if '/' in segment:
            raise ValueError('path segments cannot contain a slash: ' + repr(segment))

    return segments



class Payload:
    """ Base class for the data carried by a message. The *kind* is the tag
        identifying the payload variant on the wire; :class:`Other` is the
        only variant without one.
    """

    kind = None
    fields = ()

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented

        for field in self.fields:
            if getattr(self, field) != getattr(other, field):
                return False

        return True


    __hash__ = None


    def __repr__(self):
        values = list()
        for field in self.fields:
            values.append('%s=%r' % (field, getattr(self, field)))

        return '%s(%s)' % (type(self).__name__, ', '.join(values))


# end of class Payload



class FramePayload(Payload):
    """ A full image for the display, as a :class:`lighthouse.frame.Frame`.
    """

    kind = 'FRAME'
    fields = ('frame',)

    def __init__(self, frame):

        if not isinstance(frame, framemodule.Frame):
            frame = framemodule.Frame(data=frame)

        self.frame = frame


# end of class FramePayload



class InputEvent(Payload):
    """ A key or controller event forwarded from a web client. The *source*
        identifies the originating client; exactly one of *key* or *button*
        is normally set, the other being None. *down* is True for a press
        and False for a release.
    """

    kind = 'INPUT'
    fields = ('source', 'key', 'button', 'down')

    def __init__(self, source, key=None, button=None, down=True):
        self.source = source
        self.key = key
        self.button = button
        self.down = bool(down)


# end of class InputEvent



class Ack(Payload):
    """The request succeeded, and there is nothing else to say."""

    kind = 'ACK'


class ErrorPayload(Payload):
    """ The request failed. The *code* is numeric, the *message* is intended
        for human consumption.
    """

    kind = 'ERROR'
    fields = ('code', 'message')

    def __init__(self, code, message=''):
        self.code = int(code)
        self.message = str(message)


# end of class ErrorPayload



class Other(Payload):
    """ Anything else: either no payload at all (*raw* is None), or a
        payload of a kind this client does not recognize, retained as the
        *raw* decoded value.
    """

    fields = ('raw',)

    def __init__(self, raw=None):
        self.raw = raw


# end of class Other



class Credential:
    """ The *username* and *token* that identify the client. These are
        included, unmodified, in every request.
    """

    def __init__(self, username, token):
        self.username = username
        self.token = token


    def __eq__(self, other):
        if isinstance(other, Credential):
            return self.username == other.username and self.token == other.token
        return NotImplemented


    __hash__ = None


    def __repr__(self):
        # The token is a secret.
        return 'Credential(%r, ...)' % (self.username)


# end of class Credential



class ClientMessage:
    """ A request from the client. The *request_id* is assigned by the
        :class:`lighthouse.connection.Connection`; the *verb* is a
        :class:`Verb`, the *path* is normalized via :func:`normalize_path`.

        :ivar payload: A :class:`Payload` instance; :class:`Other` if not
            specified.
    """

    def __init__(self, request_id, verb, path, credential, payload=None):

        if payload is None:
            payload = Other()

        self.request_id = request_id
        self.verb = Verb(verb)
        self.path = normalize_path(path)
        self.credential = credential
        self.payload = payload


    def __eq__(self, other):
        if isinstance(other, ClientMessage):
            return (self.request_id == other.request_id and
                    self.verb == other.verb and
                    self.path == other.path and
                    self.credential == other.credential and
                    self.payload == other.payload)

        return NotImplemented


    __hash__ = None


    def __repr__(self):
        return 'ClientMessage(%r, %s, %r, %r)' % (self.request_id, self.verb.value, '/'.join(self.path), self.payload)


# end of class ClientMessage



class ServerMessage:
    """ A response from the server, for the request identified by
        *request_id*. An :class:`ErrorPayload` signals that the request
        failed; any other payload is a success or streamed data.
    """

    def __init__(self, request_id, payload=None):

        if payload is None:
            payload = Other()

        self.request_id = request_id
        self.payload = payload


    @property
    def failed(self):
        return isinstance(self.payload, ErrorPayload)


    def __eq__(self, other):
        if isinstance(other, ServerMessage):
            return self.request_id == other.request_id and self.payload == other.payload
        return NotImplemented


    __hash__ = None


    def __repr__(self):
        return 'ServerMessage(%r, %r)' % (self.request_id, self.payload)


# end of class ServerMessage


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
