""" Exception classes raised by the Lighthouse client. Every exception raised
    deliberately by this package is a subclass of :class:`LighthouseError`,
    so that a caller can catch everything with a single except clause if
    they so choose.
"""


class LighthouseError(Exception):
    """Base class for all Lighthouse client errors."""


# Connection state.

class ConnectionStateError(LighthouseError):
    """ The connection is not in a state that permits the requested
        operation.
    """


class NotConnected(ConnectionStateError):
    """The connection has not been opened."""


class AlreadyConnected(ConnectionStateError):
    """:func:`connect` was invoked on a connection that is not idle."""


class ConnectionClosed(ConnectionStateError):
    """ The connection was closed. This is how callers still waiting for a
        response, or still consuming a stream, learn that nothing further
        will arrive.
    """


# Transport.

class TransportError(LighthouseError):
    """ Base class for all transport-layer errors. The underlying failure,
        if any, is available as the ``__cause__`` of the exception.
    """


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


class TransportClosed(TransportError):
    """An operation was attempted on a transport that is not open."""


# Codec.

class CodecError(LighthouseError):
    """Base class for serialization failures."""


class EncodeError(CodecError):
    """A message could not be converted to bytes."""


class DecodeError(CodecError):
    """Inbound bytes could not be interpreted as a message."""


# Protocol.

class ProtocolError(LighthouseError):
    """Base class for request/response protocol failures."""


class RemoteError(ProtocolError):
    """ The server answered a request with an error payload. The numeric
        *code* and the human-readable *message* are retained as attributes.
    """

    def __init__(self, code, message):
        self.code = code
        self.message = message
        ProtocolError.__init__(self, code, message)


    def __str__(self):
        return '%d: %s' % (self.code, self.message)


class DuplicateRequestId(ProtocolError):
    """An entry for this request id is already registered."""


class InvalidVerbForSingleRequest(ProtocolError, ValueError):
    """ The verb can produce more than one response, and cannot be used
        for a single request/response exchange.
    """


class RequestTimeout(LighthouseError, TimeoutError):
    """No response arrived within the caller's deadline."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
