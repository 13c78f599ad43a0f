import threading

import pytest
import websockets.sync.server

import lighthouse
from lighthouse.protocol import codec
from lighthouse.transport import TransportClosed, TransportConnectionError, WebSocketTransport


def echo(websocket):
    """ Answer every request with an acknowledgement, except for requests
        against the 'hangup' path, which close the connection instead.
    """

    for message in websocket:
        request = codec.decode_client(message)

        if request.path == ('hangup',):
            websocket.close()
            return

        response = lighthouse.ServerMessage(request.request_id, lighthouse.Ack())
        websocket.send(codec.encode(response))


@pytest.fixture
def url():
    server = websockets.sync.server.serve(echo, '127.0.0.1', 0)
    port = server.socket.getsockname()[1]

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield 'ws://127.0.0.1:%d/websocket' % (port)

    server.shutdown()
    thread.join(2)


def test_exchange(url, credential):

    with lighthouse.Lighthouse(credential, url) as client:
        assert isinstance(client.connection.transport, WebSocketTransport)

        for count in range(3):
            response = client.put('user/alice/model', lighthouse.FramePayload(lighthouse.Frame()), timeout=5)
            assert response == lighthouse.ServerMessage(count, lighthouse.Ack())

    transport = client.connection.transport
    assert not transport.is_open

    with pytest.raises(TransportClosed):
        transport.send(b'too late')


def test_remote_hangup(url, credential):

    lost = threading.Event()

    def closed():
        lost.set()

    client = lighthouse.Lighthouse(credential, url)
    client.connection.transport.on_close(closed)
    client.connect()

    with pytest.raises(lighthouse.ConnectionClosed):
        client.get('hangup', timeout=5)

    assert lost.wait(2)
    assert client.connection.state is lighthouse.connection.State.CLOSED


def test_refused():

    transport = WebSocketTransport('ws://127.0.0.1:1/websocket', open_timeout=2)

    with pytest.raises(TransportConnectionError):
        transport.open()

    assert not transport.is_open


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
