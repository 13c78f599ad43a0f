import logging
import threading

import pytest

import lighthouse
from lighthouse.connection import Connection, State
from lighthouse.pending import PendingRequest
from lighthouse.registry import Mode

from conftest import LoopbackTransport


def test_state_machine(transport, credential):

    connection = Connection(credential=credential, transport=transport)
    assert connection.state is State.IDLE

    with pytest.raises(lighthouse.NotConnected):
        connection.send('GET', 'a')

    with pytest.raises(lighthouse.NotConnected):
        connection.close()

    connection.connect()
    assert connection.state is State.OPEN
    assert transport.opened

    with pytest.raises(lighthouse.AlreadyConnected):
        connection.connect()

    connection.close()
    assert connection.state is State.CLOSED
    assert transport.closed

    # Closing twice is fine, anything else is not.
    connection.close()

    with pytest.raises(lighthouse.AlreadyConnected):
        connection.connect()

    with pytest.raises(lighthouse.NotConnected):
        connection.send('GET', 'a')


def test_failed_connect(transport, credential):

    transport.fail_open = True
    connection = Connection(credential=credential, transport=transport)

    with pytest.raises(lighthouse.errors.TransportConnectionError):
        connection.connect()

    assert connection.state is State.IDLE

    # The connection can be retried.
    transport.fail_open = False
    connection.connect()
    assert connection.state is State.OPEN
    connection.close()


class BrokenTransport(LoopbackTransport):

    def open(self):
        if self.fail_open:
            raise RuntimeError('unexpected failure')
        LoopbackTransport.open(self)


def test_unexpected_connect_failure(credential):

    transport = BrokenTransport()
    transport.fail_open = True
    connection = Connection(credential=credential, transport=transport)

    with pytest.raises(RuntimeError):
        connection.connect()

    assert connection.state is State.IDLE

    with pytest.raises(lighthouse.NotConnected):
        connection.close()

    transport.fail_open = False
    connection.connect()
    assert connection.state is State.OPEN
    connection.close()


def test_context_manager(transport, credential):

    with Connection(credential=credential, transport=transport) as connection:
        assert connection.state is State.OPEN

    assert connection.state is State.CLOSED
    assert transport.closed


def test_request_envelope(connection, transport, credential):

    first = connection.send('put', ['user', 'alice', 'model'], lighthouse.Ack())
    second = connection.send(lighthouse.Verb.GET, 'user/alice/model')

    assert (first, second) == (0, 1)

    requests = transport.requests()
    assert requests[0] == lighthouse.ClientMessage(0, 'PUT', 'user/alice/model', credential, lighthouse.Ack())
    assert requests[1].verb is lighthouse.Verb.GET
    assert requests[1].payload == lighthouse.Other()

    # A per-request credential overrides the default.
    other = lighthouse.Credential('bob', 'hunter2')
    connection.send('GET', 'a', credential=other)
    assert transport.requests()[2].credential == other


def test_no_credential(transport):

    connection = Connection(transport=transport)
    connection.connect()

    with pytest.raises(ValueError):
        connection.send('GET', 'a')

    assert len(connection.registry) == 0
    connection.close()


def test_invalid_requests(connection, transport):

    with pytest.raises(ValueError):
        connection.send('FETCH', 'a')

    with pytest.raises(ValueError):
        connection.send('GET', 'a//b')

    # Nothing was sent, and no id was spent.
    assert transport.sent == list()
    assert connection.send('GET', 'a') == 0


def test_concurrent_ids(connection, transport):
    """ Concurrent senders never share a request id, and every allocated id
        is registered before its request goes out.
    """

    count = 50
    barrier = threading.Barrier(count)
    ids = list()
    ids_lock = threading.Lock()

    def send():
        barrier.wait()
        request_id = connection.send('GET', 'a')
        with ids_lock:
            ids.append(request_id)

    threads = [threading.Thread(target=send) for thread in range(count)]

    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(ids) == list(range(count))
    assert len(connection.registry) == count

    sent = set(request.request_id for request in transport.requests())
    assert sent == set(range(count))


def test_dispatch(connection, transport):

    received = list()
    request_id = connection.send('STREAM', 'a', sink=received.append)

    transport.reply(request_id, lighthouse.Ack())
    transport.reply(request_id, lighthouse.InputEvent(1, key=32))

    assert [message.payload for message in received] == [lighthouse.Ack(), lighthouse.InputEvent(1, key=32)]

    # Stream entries remain registered until cancelled.
    assert request_id in connection.registry
    assert connection.cancel(request_id) is True

    transport.reply(request_id, lighthouse.Ack())
    assert len(received) == 2


def test_single_mode(connection, transport):

    received = list()
    request_id = connection.send('GET', 'a', sink=received.append)
    assert request_id in connection.registry

    transport.reply(request_id, lighthouse.Ack())
    transport.reply(request_id, lighthouse.Ack())

    assert len(received) == 1
    assert request_id not in connection.registry


def test_explicit_mode(connection, transport):

    received = list()
    request_id = connection.send('GET', 'a', mode=Mode.STREAMING, sink=received.append)

    transport.reply(request_id, lighthouse.Ack())
    transport.reply(request_id, lighthouse.Ack())

    assert len(received) == 2


def test_send_failure(connection, transport):

    transport.fail_send = True

    with pytest.raises(lighthouse.TransportError):
        connection.send('GET', 'a')

    # The failed request left nothing behind.
    assert len(connection.registry) == 0

    with pytest.raises(lighthouse.EncodeError):
        connection.send('GET', 'a', payload='not a payload')

    assert len(connection.registry) == 0


def test_unwanted_messages(connection, transport, caplog):

    received = list()
    request_id = connection.send('STREAM', 'a', sink=received.append)

    with caplog.at_level(logging.DEBUG, logger='lighthouse.connection'):
        transport.reply(12345, lighthouse.Ack())
        transport.deliver(b'\xc1 garbage')

    assert 'undecodable' in caplog.text
    assert 'no one is waiting on request 12345' in caplog.text

    # Dispatch carries on regardless.
    transport.reply(request_id, lighthouse.Ack())
    assert len(received) == 1
    assert connection.state is State.OPEN


def test_close_aborts_pending(connection, transport):

    pending = PendingRequest()
    connection.send('GET', 'a', sink=pending)

    received = list()
    connection.send('GET', 'b', sink=received.append)

    threading.Timer(0.05, connection.close).start()

    with pytest.raises(lighthouse.ConnectionClosed):
        pending.wait(2)

    assert len(connection.registry) == 0
    assert received == list()


def test_lost_connection(connection, transport, caplog):

    pending = PendingRequest()
    connection.send('GET', 'a', sink=pending)

    with caplog.at_level(logging.WARNING, logger='lighthouse.connection'):
        transport.lose()

    assert 'lost connection' in caplog.text
    assert connection.state is State.CLOSED
    assert pending.poll()

    with pytest.raises(lighthouse.ConnectionClosed):
        pending.wait(0)

    with pytest.raises(lighthouse.NotConnected):
        connection.send('GET', 'a')

    # Closing after a loss is a no-op; the loss is only reported once.
    connection.close()
    transport.lose()


def test_default_transport(monkeypatch, credential):

    monkeypatch.setattr(lighthouse.config, 'url', 'tcp://localhost:9999')
    connection = Connection(credential=credential)

    assert isinstance(connection.transport, lighthouse.transport.ZmqTransport)
    assert connection.transport.url == 'tcp://localhost:9999'

    connection = Connection('wss://example.com/websocket', credential)
    assert isinstance(connection.transport, lighthouse.transport.WebSocketTransport)

    with pytest.raises(ValueError):
        Connection('gopher://example.com', credential)


def test_transport_holds_weak_references(credential):

    transport = LoopbackTransport()
    connection = Connection(credential=credential, transport=transport)
    connection.connect()

    del connection

    # The transport does not keep the connection alive, and a response with
    # nowhere to go is harmless.
    transport.reply(0, lighthouse.Ack())
    transport.lose()


def test_sink_sends_request(connection, transport):

    follow_ups = list()

    def chain(message):
        follow_ups.append(connection.send('GET', 'follow/up'))

    request_id = connection.send('STREAM', 'a', sink=chain)
    transport.reply(request_id, lighthouse.Ack())

    assert len(follow_ups) == 1
    assert transport.requests()[-1].path == ('follow', 'up')


def test_sink_sends_while_others_send(connection, transport):
    """ Sinks that issue requests, running on the delivery thread while
        other threads are sending, must not deadlock.
    """

    def chain(message):
        connection.send('GET', 'follow/up')

    request_id = connection.send('STREAM', 'a', sink=chain)

    def deliver():
        for count in range(200):
            transport.reply(request_id, lighthouse.Ack())

    def send():
        for count in range(200):
            connection.send('GET', 'b')

    threads = [threading.Thread(target=deliver, daemon=True)]
    threads.extend(threading.Thread(target=send, daemon=True) for count in range(4))

    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(10)

    assert not any(thread.is_alive() for thread in threads)
    assert len(transport.sent) == 1 + 200 + 4 * 200


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
