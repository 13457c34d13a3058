"""Newline-delimited JSON transport for console clients.

One thread reads each client socket and feeds decoded messages into the
shared ``GameSession``. Outbound frames go through a bounded per-client
queue drained by a writer thread, so a stalled client can never hold the
session lock.
"""

import contextlib
import socket
import threading
from typing import Optional

from treasure_hunt.connections import BufferedConnection
from treasure_hunt.protocol import MalformedMessage, decode_message, encode_frame


class StreamConnection(BufferedConnection):
    def __init__(self, sock: socket.socket, addr, logger, outbox_limit: int = 256):
        self.sock = sock
        self.addr = addr
        super().__init__(logger, outbox_limit, label=f"addr={addr}")

    def encode(self, event: dict) -> bytes:
        return encode_frame(event)

    def write(self, frame: bytes) -> None:
        self.sock.sendall(frame)

    def shutdown(self) -> None:
        with contextlib.suppress(OSError):
            self.sock.shutdown(socket.SHUT_RDWR)

    def release(self) -> None:
        self.sock.close()

    def __repr__(self):
        return f"<StreamConnection addr={self.addr}>"


class StreamGateway:
    """TCP listener bridging console clients into a ``GameSession``."""

    def __init__(self, session, host: str = '0.0.0.0', port: int = 3001, logger=None, outbox_limit: int = 256):
        self.session = session
        self.host = host
        self.port = port
        self.logger = logger or session.logger
        self.outbox_limit = outbox_limit
        self._sock: Optional[socket.socket] = None
        self._running = False

    @classmethod
    def from_app(cls, app, session=None):
        return cls(
            session or app.extensions['treasure_hunt'],
            host=app.config.get('STREAM_HOST', '0.0.0.0'),
            port=int(app.config.get('STREAM_PORT', 3001)),
            logger=app.logger,
            outbox_limit=int(app.config.get('STREAM_OUTBOX_LIMIT', 256)),
        )

    def bind(self) -> int:
        """Open the listening socket; returns the bound port (useful with port 0)."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((self.host, self.port))
        sock.listen()
        self._sock = sock
        self.port = sock.getsockname()[1]
        self.logger.info(f"[stream] listening on {self.host}:{self.port}")
        return self.port

    def serve_forever(self) -> None:
        if self._sock is None:
            self.bind()
        self._running = True
        try:
            while self._running:
                try:
                    client_sock, addr = self._sock.accept()
                except OSError:
                    if self._running:
                        self.logger.exception('[stream] accept failed')
                    break
                t = threading.Thread(
                    target=self._client_thread, args=(client_sock, addr), daemon=True
                )
                t.start()
        finally:
            self._running = False
            self._sock.close()

    def shutdown(self) -> None:
        self._running = False
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.shutdown(socket.SHUT_RDWR)
            self._sock.close()

    def _client_thread(self, sock: socket.socket, addr) -> None:
        connection = StreamConnection(sock, addr, self.logger, self.outbox_limit)
        player = self.session.handle_connect(connection)
        self.logger.info(f"[stream] player={player.id} connected from {addr}")
        try:
            with sock.makefile('rb') as reader:
                for line in reader:
                    if not line.strip():
                        continue
                    try:
                        message = decode_message(line)
                    except MalformedMessage as exc:
                        self.logger.warning(f"[drop] addr={addr} player={player.id} {exc}")
                        continue
                    self.session.handle_message(player.id, message)
        except OSError as exc:
            self.logger.info(f"[stream] player={player.id} connection error: {exc}")
        finally:
            self.session.handle_disconnect(player.id)
            connection.close()
            self.logger.info(f"[stream] player={player.id} disconnected")
