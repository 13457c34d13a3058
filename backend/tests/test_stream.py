import json
import socket
import threading

import pytest

from treasure_hunt.stream_server import StreamGateway


class LineClient:
    def __init__(self, port):
        self.sock = socket.create_connection(('127.0.0.1', port), timeout=5)
        self.reader = self.sock.makefile('rb')

    def send_raw(self, data: bytes):
        self.sock.sendall(data)

    def send(self, message):
        self.send_raw((json.dumps(message) + '\n').encode('utf-8'))

    def next_event(self):
        line = self.reader.readline()
        assert line, 'server closed the connection'
        return json.loads(line)

    def close(self):
        self.reader.close()
        self.sock.close()


@pytest.fixture()
def gateway(flask_app):
    gw = StreamGateway.from_app(flask_app)
    gw.bind()
    t = threading.Thread(target=gw.serve_forever, daemon=True)
    t.start()
    yield gw
    gw.shutdown()
    t.join(timeout=5)


def test_stream_session_flow(flask_app, gateway):
    a = LineClient(gateway.port)
    init_a = a.next_event()
    assert init_a['type'] == 'init'
    assert init_a['gridSize'] == 10

    b = LineClient(gateway.port)
    init_b = b.next_event()
    joined = a.next_event()
    assert joined['type'] == 'playerJoined'
    assert joined['playerId'] == init_b['playerId']
    assert 'x' in joined['position'] and 'y' in joined['position']

    # Garbage and unknown types are dropped; the connection stays usable
    a.send_raw(b'definitely not json\n')
    a.send_raw(b'\n')
    a.send({'type': 'teleport'})
    a.send({'type': 'chat', 'message': 'hello'})
    expected = {'type': 'chat', 'playerId': init_a['playerId'], 'message': 'hello'}
    assert a.next_event() == expected
    assert b.next_event() == expected

    b.close()
    assert a.next_event() == {'type': 'playerLeft', 'playerId': init_b['playerId']}
    session = flask_app.extensions['treasure_hunt']
    assert list(session.players.snapshot()) == [init_a['playerId']]
    a.close()


def test_stream_move_is_broadcast(flask_app, gateway):
    a = LineClient(gateway.port)
    me = a.next_event()
    a.send({'type': 'move', 'direction': 'left'})
    moved = a.next_event()
    assert moved['type'] == 'playerMoved'
    assert moved['playerId'] == me['playerId']
    assert moved['position']['x'] == max(0, me['position']['x'] - 1)
    assert moved['position']['y'] == me['position']['y']
    a.close()
