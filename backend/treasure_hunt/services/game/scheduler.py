import time
from typing import Callable

from treasure_hunt import socketio


def make_reset_scheduler(app) -> Callable[[float, Callable[[], None]], None]:
    """Build the ``schedule(delay, callback)`` used by the session for resets.

    - Runs the callback on a Socket.IO background task after ``delay``
    - In TESTING mode the callback runs inline with no sleep, because the
      caller holds the session lock; set ENABLE_SCHEDULER_IN_TESTS to get
      the real delayed task instead
    """

    def schedule(delay: float, callback: Callable[[], None]) -> None:
        if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
            app.logger.info(f"[timer-inline] delay={delay}s skipped")
            callback()
            return

        deadline = time.time() + delay
        app.logger.info(f"[timer-set] delay={delay}s deadline={deadline}")

        def _worker():
            sleep_for = max(0.0, deadline - time.time())
            if sleep_for:
                time.sleep(sleep_for)
            app.logger.info(f"[timer-fire] deadline={deadline}")
            callback()

        socketio.start_background_task(_worker)

    return schedule
