import contextlib
import json
import socket

from flask import Blueprint, current_app
from simple_websocket import ConnectionClosed
from treasure_hunt import sock
from treasure_hunt.connections import BufferedConnection
from treasure_hunt.protocol import MalformedMessage, decode_message

ws = Blueprint('ws', __name__)

# Seconds between checks for a connection aborted by the writer
RECEIVE_POLL_SEC = 1.0


class WebSocketConnection(BufferedConnection):
    """Plain WebSocket client: one JSON text message per frame."""

    write_errors = (ConnectionClosed, OSError)

    def __init__(self, websocket, logger, outbox_limit: int = 256):
        self.websocket = websocket
        super().__init__(logger, outbox_limit, label=f"ws={id(websocket):x}")

    def encode(self, event: dict) -> str:
        return json.dumps(event, separators=(',', ':'))

    def write(self, frame: str) -> None:
        self.websocket.send(frame)

    def shutdown(self) -> None:
        # Shut the raw socket rather than sending a close frame, which could
        # block on a client that stopped reading
        raw = getattr(self.websocket, 'sock', None)
        if raw is not None:
            with contextlib.suppress(OSError):
                raw.shutdown(socket.SHUT_RDWR)

    def __repr__(self):
        return f"<WebSocketConnection {self.label}>"


@sock.route('/ws', bp=ws)
def game_socket(websocket):
    """Browser clients speaking raw WebSocket frames share the game session."""
    session = current_app.extensions['treasure_hunt']
    logger = current_app.logger
    connection = WebSocketConnection(
        websocket, logger, int(current_app.config.get('STREAM_OUTBOX_LIMIT', 256))
    )
    player = session.handle_connect(connection)
    logger.info(f"[websocket] player={player.id} connected")
    try:
        while not connection.closed:
            raw = websocket.receive(timeout=RECEIVE_POLL_SEC)
            if raw is None:
                continue
            try:
                message = decode_message(raw)
            except MalformedMessage as exc:
                logger.warning(f"[drop] player={player.id} {exc}")
                continue
            session.handle_message(player.id, message)
    except (ConnectionClosed, OSError) as exc:
        logger.info(f"[websocket] player={player.id} closed: {exc}")
    finally:
        session.handle_disconnect(player.id)
        connection.close()
        logger.info(f"[websocket] player={player.id} disconnected")
