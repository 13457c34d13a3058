from flask import current_app, request
from treasure_hunt import socketio
from treasure_hunt.protocol import MalformedMessage, decode_message
from treasure_hunt.services.game import GameSession
from typing import Dict, Optional

NAMESPACE = '/ws'

# Socket.IO sid -> game player id, for connections on this process
_sid_to_player: Dict[str, str] = {}


class SocketIOConnection:
    """Player connection backed by a Socket.IO client.

    Each event is emitted under its ``type`` name; the Socket.IO server
    queues packets per client, so ``send`` never waits on the network.
    """

    def __init__(self, sid: str, namespace: str = NAMESPACE):
        self.sid = sid
        self.namespace = namespace

    def send(self, event: dict) -> None:
        socketio.emit(event['type'], event, to=self.sid, namespace=self.namespace)

    def __repr__(self):
        return f"<SocketIOConnection sid={self.sid}>"


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _session() -> GameSession:
    return current_app.extensions['treasure_hunt']


def _dispatch(raw, default_type: Optional[str] = None) -> None:
    sid = _get_sid()
    player_id = _sid_to_player.get(sid)
    if not player_id:
        return
    try:
        message = decode_message(raw, default_type)
    except MalformedMessage as exc:
        current_app.logger.warning(f"[drop] sid={sid} player={player_id} {exc}")
        return
    _session().handle_message(player_id, message)


def handle_connect(auth=None):
    sid = _get_sid()
    player = _session().handle_connect(SocketIOConnection(sid))
    _sid_to_player[sid] = player.id


def handle_disconnect(reason=None):
    player_id = _sid_to_player.pop(_get_sid(), None)
    if player_id:
        _session().handle_disconnect(player_id)


def handle_move(data):
    _dispatch(data, default_type='move')


def handle_chat(data):
    _dispatch(data, default_type='chat')


def handle_message(data):
    # Generic frame: a JSON text or object carrying its own type
    _dispatch(data)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('move', handle_move, namespace=NAMESPACE)
    socketio.on_event('chat', handle_chat, namespace=NAMESPACE)
    socketio.on_event('message', handle_message, namespace=NAMESPACE)
