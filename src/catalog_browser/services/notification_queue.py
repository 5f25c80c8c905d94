"""
Single-slot notification queue.

At most one notification is visible at a time. A new notification replaces
the visible one and restarts its lifetime; the fade and clear shots are owned
timers, so a replaced notification can never clear its successor.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from catalog_browser.core.single_shot_timer import SingleShotTimer
from catalog_browser.protocols.catalog_config import CatalogConfig, get_catalog_config

logger = logging.getLogger(__name__)


class NotificationSeverity(Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A user-visible notice with its creation time (monotonic seconds)."""
    message: str
    severity: NotificationSeverity
    created_at: float = field(default_factory=time.monotonic)


class NotificationQueue(QObject):
    """
    Last-writer-wins notification slot with automatic expiry.

    Signals:
        notification_changed(object): New Notification, or None when cleared
        fading(object): The current Notification entered its fade-out window
    """

    notification_changed = pyqtSignal(object)
    fading = pyqtSignal(object)

    def __init__(self, config: Optional[CatalogConfig] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        config = config or get_catalog_config()
        self._duration_ms = config.notification_duration_ms
        self._fade_ms = min(config.notification_fade_ms, self._duration_ms)
        self._current: Optional[Notification] = None
        self._is_fading = False
        self._fade_timer = SingleShotTimer(self._duration_ms - self._fade_ms, self._on_fade)
        self._clear_timer = SingleShotTimer(self._duration_ms, self.dismiss)

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    @property
    def is_fading(self) -> bool:
        return self._is_fading

    def notify(self, message: str, severity: NotificationSeverity) -> Notification:
        """Show a notification, replacing any visible one and restarting its lifetime."""
        notification = Notification(message=message, severity=severity)
        self._current = notification
        self._is_fading = False
        self._fade_timer.trigger()
        self._clear_timer.trigger()
        logger.debug(f"Notification ({severity.value}): {message}")
        self.notification_changed.emit(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationSeverity.ERROR)

    def dismiss(self):
        """Clear the visible notification immediately."""
        self._fade_timer.cancel()
        self._clear_timer.cancel()
        self._is_fading = False
        if self._current is None:
            return
        self._current = None
        self.notification_changed.emit(None)

    def shutdown(self):
        """Cancel pending timers without emitting; used on view teardown."""
        self._fade_timer.cancel()
        self._clear_timer.cancel()
        self._current = None
        self._is_fading = False

    def _on_fade(self):
        if self._current is None:
            return
        self._is_fading = True
        self.fading.emit(self._current)
