import logging
import threading
import time


class TimerHandle:
    """Cancellation token for one countdown."""

    def __init__(self):
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class SocketIOTimer:
    """Runs ``callback(handle)`` every ``interval`` seconds on a Socket.IO background task.

    Uses ``socketio.sleep`` so the loop cooperates with whichever async mode
    (threading, eventlet, gevent) the server picked. Ticks are scheduled
    against a monotonic deadline so they do not drift.
    """

    def __init__(self, socketio, interval: float = 1.0, logger=None):
        self.socketio = socketio
        self.interval = interval
        self.logger = logger or logging.getLogger(__name__)

    def start(self, callback) -> TimerHandle:
        handle = TimerHandle()
        self.socketio.start_background_task(self._run, handle, callback)
        return handle

    def _run(self, handle: TimerHandle, callback) -> None:
        next_at = time.monotonic() + self.interval
        while not handle.cancelled:
            self.socketio.sleep(max(0.0, next_at - time.monotonic()))
            if handle.cancelled:
                return
            next_at += self.interval
            try:
                callback(handle)
            except Exception:
                self.logger.exception("[timer-error] countdown stopped")
                handle.cancel()
