"""Transport layer implementations."""

from urllib.parse import urlsplit

from .base import (
    Transport,
    TransportClosed,
    TransportConnectionError,
    TransportError,
)
from .websocket import WebSocketTransport
from .zeromq import ZmqTransport


_BACKENDS = {
    "ws": WebSocketTransport,
    "wss": WebSocketTransport,
    "tcp": ZmqTransport,
    "ipc": ZmqTransport,
    "inproc": ZmqTransport,
}


def for_url(url: str) -> Transport:
    """ Return an unopened :class:`Transport` appropriate for *url*, based
        on the URL scheme: ws:// and wss:// use a WebSocket, tcp://, ipc://
        and inproc:// use ZeroMQ.
    """

    scheme = urlsplit(url).scheme.lower()

    try:
        backend = _BACKENDS[scheme]
    except KeyError:
        raise ValueError(f"no transport for URL scheme {scheme!r}: {url}") from None

    return backend(url)
