"""Owned, restartable single-shot timer."""

from typing import Callable, Optional
from PyQt6.QtCore import QTimer


class SingleShotTimer:
    """
    Owned single-shot timer that can be restarted or cancelled.

    Each trigger discards the pending shot and schedules a new one, so at most
    one callback is ever pending per instance.

    Usage:
        self._expiry = SingleShotTimer(delay_ms=3000, handler=self._on_expired)

        def show(self):
            self._expiry.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Schedule the handler, replacing any pending shot."""
        self.cancel()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending shot."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def _fire(self):
        self._timer = None
        self._handler()
