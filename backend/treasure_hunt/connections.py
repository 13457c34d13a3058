import queue
import threading
from typing import Optional, Tuple, Type


class BufferedConnection:
    """Player connection whose writes go through a bounded outbox.

    ``send`` only enqueues, so the session can fan out while holding its
    lock; a writer thread drains the outbox onto the transport. A full
    outbox means the client stopped reading, and the connection is
    aborted so the reader runs the normal disconnect path.

    Subclasses provide ``encode``, ``write``, ``shutdown`` (unblocks the
    reader) and optionally ``release`` (final cleanup after draining).
    """

    write_errors: Tuple[Type[BaseException], ...] = (OSError,)

    def __init__(self, logger, outbox_limit: int = 256, label: str = ''):
        self.logger = logger
        self.label = label
        self.closed = False
        self._outbox: "queue.Queue[Optional[object]]" = queue.Queue(maxsize=outbox_limit)
        self._writer = threading.Thread(target=self._drain, daemon=True)
        self._writer.start()

    def encode(self, event: dict):
        raise NotImplementedError

    def write(self, frame) -> None:
        raise NotImplementedError

    def shutdown(self) -> None:
        raise NotImplementedError

    def release(self) -> None:
        pass

    def send(self, event: dict) -> None:
        if self.closed:
            return
        try:
            self._outbox.put_nowait(self.encode(event))
        except queue.Full:
            self.logger.warning(f"[stalled] {self.label} outbox full, dropping client")
            self.abort()

    def close(self) -> None:
        """Flush what is queued, then close the transport."""
        self.closed = True
        self._wake_writer()

    def abort(self) -> None:
        """Close immediately; the reader sees EOF and runs the disconnect path."""
        self.closed = True
        self.shutdown()
        self._wake_writer()

    def _wake_writer(self) -> None:
        try:
            self._outbox.put_nowait(None)
        except queue.Full:
            # Writer is busy; the shut-down transport makes its next write fail
            self.shutdown()

    def _drain(self) -> None:
        while True:
            frame = self._outbox.get()
            if frame is None:
                break
            try:
                self.write(frame)
            except self.write_errors as exc:
                self.logger.info(f"[send-error] {self.label} {exc}")
                self.abort()
                break
        self.shutdown()
        self.release()
