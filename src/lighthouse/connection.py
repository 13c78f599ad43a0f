""" The :class:`Connection` is the single point of contact with a Lighthouse
    server. It owns the transport and the :class:`lighthouse.registry.Registry`
    of in-flight requests, assigns request ids, and routes every inbound
    message to whoever is waiting for it.
"""

import enum
import itertools
import logging

from . import config
from . import transport as transportmodule
from .errors import (
    AlreadyConnected,
    ConnectionClosed,
    DecodeError,
    EncodeError,
    NotConnected,
    TransportError,
)
from .protocol import codec
from .protocol.message import ClientMessage, Verb, normalize_path
from .registry import Delivery, Mode, Registry


logger = logging.getLogger(__name__)


class State(enum.Enum):
    """ Lifecycle of a :class:`Connection`. Transitions only ever move
        forward: IDLE, CONNECTING, OPEN, CLOSED. A failed connection attempt
        returns to IDLE.
    """

    IDLE = 'idle'
    CONNECTING = 'connecting'
    OPEN = 'open'
    CLOSED = 'closed'


def discard(message):
    """ Sink for requests whose responses are of no interest to anyone.
    """

    pass



class Connection:
    """ A persistent connection to a Lighthouse server. The server is
        identified by *url*; if no *url* is specified the default from
        :mod:`lighthouse.config` is used. An already constructed, unopened
        :class:`lighthouse.transport.Transport` can be provided instead via
        the *transport* argument.

        The *credential* is the default :class:`Credential` included in every
        request that does not specify one of its own.

        A :class:`Connection` can be used as a context manager, in which case
        it is connected on entry and closed on exit.

        :ivar registry: The :class:`Registry` of requests awaiting responses.
        :ivar state: The current :class:`State`.
    """

    def __init__(self, url=None, credential=None, transport=None):

        if transport is None:
            if url is None:
                url = config.url
            transport = transportmodule.for_url(url)

        self.transport = transport
        self.credential = credential
        self.registry = Registry()
        self.state = State.IDLE

        # The registry lock also serializes state transitions and request id
        # allocation: no request is registered after close() has emptied the
        # registry, and two requests never share an id. It is re-entrant, a
        # sink invoked under it may issue requests of its own.

        self._lock = self.registry.lock
        self._id_ticker = itertools.count(0)

        # The transport only holds weak references to these.
        self.transport.on_receive(self._receive)
        self.transport.on_close(self._lost)


    def __enter__(self):
        self.connect()
        return self


    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


    def __repr__(self):
        return '<Connection %s %s>' % (self.transport.url, self.state.value)


    def connect(self):
        """ Open the transport. This is only valid for an IDLE connection; any
            other state raises :class:`AlreadyConnected`. If the transport
            fails to open, the connection is left IDLE and the failure, normally
            a :class:`TransportError`, is raised to the caller.
        """

        with self._lock:
            if self.state is not State.IDLE:
                raise AlreadyConnected('connection is ' + self.state.value)
            self.state = State.CONNECTING

        logger.debug('connecting to %s', self.transport.url)

        try:
            self.transport.open()
        except BaseException:
            with self._lock:
                self.state = State.IDLE
            raise

        with self._lock:
            self.state = State.OPEN

        logger.info('connected to %s', self.transport.url)


    def send(self, verb, path, payload=None, credential=None, mode=None, sink=discard):
        """ Send a request, returning the request id assigned to it. Any
            responses bearing that id are handed to *sink*, a callable
            accepting one argument; the default sink discards them.

            The *mode* is a :class:`lighthouse.registry.Mode`; by default it
            is STREAMING for :data:`Verb.STREAM` and SINGLE for everything
            else. If the *credential* is not specified, the connection's
            default credential is used.

            Raises :class:`NotConnected` if the connection is not open.
            Failure to encode or transmit the request is raised here, after
            the registration has been withdrawn; if the connection was closed
            while the request was being transmitted, that failure is
            :class:`ConnectionClosed`.

            The *sink* is invoked from the transport's receiving thread, and
            may itself send requests on this connection.
        """

        verb = Verb(verb)
        path = normalize_path(path)

        if mode is None:
            if verb.streaming:
                mode = Mode.STREAMING
            else:
                mode = Mode.SINGLE

        if credential is None:
            credential = self.credential

        if credential is None:
            raise ValueError('no credential specified, and no default credential set')

        with self._lock:
            if self.state is not State.OPEN:
                raise NotConnected('cannot send, connection is ' + self.state.value)

            request_id = next(self._id_ticker)
            self.registry.register(request_id, mode, sink)

        message = ClientMessage(request_id, verb, path, credential, payload)

        try:
            data = codec.encode(message)
            self.transport.send(data)
        except (EncodeError, TransportError) as e:
            self.registry.cancel(request_id)

            # A close() that raced with the send has already woken the
            # caller's sink with ConnectionClosed; report the same thing.
            if isinstance(e, TransportError) and self.state is State.CLOSED:
                raise ConnectionClosed('connection closed while sending request %d' % (request_id)) from e
            raise

        logger.debug('sent request %d: %s %s', request_id, verb.value, '/'.join(path))
        return request_id


    def cancel(self, request_id):
        """ Stop delivering responses for *request_id*. This is a purely
            local operation, no message is sent to the server.
        """

        return self.registry.cancel(request_id)


    def close(self):
        """ Close the transport. Every caller still waiting on a response is
            woken with :class:`ConnectionClosed`, every open stream ends.
            Closing an already closed connection is a no-op; closing a
            connection that was never opened raises :class:`NotConnected`.
        """

        with self._lock:
            if self.state is State.CLOSED:
                return
            if self.state is not State.OPEN:
                raise NotConnected('cannot close, connection is ' + self.state.value)

            self.state = State.CLOSED
            entries = self.registry.clear()

        self.transport.close()
        self._abandon(entries, 'connection closed')


    def _lost(self):
        """ Invoked by the transport when the connection goes away without
            having been asked to.
        """

        with self._lock:
            if self.state is State.CLOSED:
                return

            self.state = State.CLOSED
            entries = self.registry.clear()

        logger.warning('lost connection to %s', self.transport.url)
        self._abandon(entries, 'connection lost')


    def _abandon(self, entries, reason):
        """ Wake everyone still waiting on one of the removed registry
            *entries*; any sink with an abort() method receives a
            :class:`ConnectionClosed` instance.
        """

        logger.info('%s: %s, abandoning %d pending request(s)', self.transport.url, reason, len(entries))

        for entry in entries:
            try:
                abort = entry.sink.abort
            except AttributeError:
                continue

            abort(ConnectionClosed('%s (request %d)' % (reason, entry.request_id)))


    def _receive(self, data):
        """ Handle one inbound message from the transport. Nothing raised
            here propagates back into the transport: a message that cannot
            be decoded, or that nobody is waiting for, is logged and dropped.
        """

        try:
            message = codec.decode(data)
        except DecodeError as e:
            logger.warning('dropping %d undecodable bytes: %s', len(data), e)
            return

        delivery = self.registry.dispatch(message.request_id, message)

        if delivery is Delivery.UNHANDLED:
            logger.debug('no one is waiting on request %r, response dropped', message.request_id)


# end of class Connection


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
