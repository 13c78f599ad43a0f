import pytest
import threading
import time

import lighthouse
from lighthouse.protocol import codec
from lighthouse.transport.base import Transport, TransportConnectionError, TransportError


class LoopbackTransport(Transport):
    """ An in-memory stand-in for a real transport. Outbound bytes are
        recorded; a test plays the part of the server by decoding what was
        sent, and injecting responses with :func:`deliver` or :func:`reply`.
        Injected messages are dispatched synchronously, in the calling
        thread, just as a real transport dispatches from its own thread.
    """

    def __init__(self, url='loopback://test'):
        Transport.__init__(self, url)
        self.opened = False
        self.closed = False
        self.fail_open = False
        self.fail_send = False
        self.sent = list()
        self.sent_event = threading.Event()
        self._sent_lock = threading.RLock()

    @property
    def is_open(self):
        return self.opened and not self.closed

    def open(self):
        if self.fail_open:
            raise TransportConnectionError('refusing to open')
        self.opened = True

    def close(self):
        self._closing()
        self.closed = True

    def send(self, data):
        if self.fail_send:
            raise TransportError('refusing to send')
        with self._sent_lock:
            self.sent.append(bytes(data))
        self.sent_event.set()

    def requests(self):
        with self._sent_lock:
            sent = list(self.sent)
        return [codec.decode_client(data) for data in sent]

    def wait_for_requests(self, count, timeout=2):
        """ Block until at least *count* requests have been sent. """

        deadline = time.time() + timeout

        while time.time() < deadline:
            with self._sent_lock:
                if len(self.sent) >= count:
                    return self.requests()
            time.sleep(0.01)

        raise AssertionError('only %d of %d requests were sent' % (len(self.sent), count))

    def deliver(self, data):
        self._received(data)

    def reply(self, request_id, payload=None):
        message = lighthouse.ServerMessage(request_id, payload)
        self.deliver(codec.encode(message))

    def lose(self):
        self.closed = True
        self._lost()


@pytest.fixture
def credential():
    return lighthouse.Credential('alice', 'secret-token')


@pytest.fixture
def transport():
    return LoopbackTransport()


@pytest.fixture
def connection(transport, credential):
    connection = lighthouse.Connection(credential=credential, transport=transport)
    connection.connect()

    yield connection

    if connection.state is lighthouse.connection.State.OPEN:
        connection.close()


@pytest.fixture
def client(transport, credential):
    client = lighthouse.Lighthouse(credential, transport=transport)
    client.connect()

    yield client

    if client.connection.state is lighthouse.connection.State.OPEN:
        client.close()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
