"""Background task runner with cancellation and cleanup."""

import logging
from typing import Callable, Any, Optional, Tuple
from PyQt6.QtCore import QThread, pyqtSignal

logger = logging.getLogger(__name__)

# --- Module-level constants ---
CANCEL_WAIT_MS = 100      # Wait time when cancelling previous task
CLEANUP_WAIT_MS = 200     # Wait time during owner teardown


class BackgroundTask(QThread):
    """
    Background task with cancellation.

    Usage:
        task = BackgroundTask(target=my_func, args=(a, b))
        task.result_ready.connect(on_success)
        task.error_occurred.connect(on_error)  # Receives Exception, not str
        task.start()

        # Later:
        task.cancel()  # Safe cancellation

    Error handling:
        def on_error(e: Exception):
            logger.error("Failed", exc_info=e)
            notifications.error(str(e))
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)  # Full exception, caller decides

    def __init__(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        parent=None
    ):
        super().__init__(parent)
        self._target = target
        self._args = args
        self.cancelled = False

    def run(self):
        """Execute target in background, respecting cancellation."""
        try:
            result = self._target(*self._args)
            if not self.cancelled:
                self.result_ready.emit(result)
        except Exception as e:
            if not self.cancelled:
                self.error_occurred.emit(e)  # Full exception object

    def cancel(self):
        """Cancel task; signals won't emit after this."""
        self.cancelled = True


class BackgroundTaskManager:
    """
    Manages background task lifecycle for a single owner.

    Handles:
    - Cancelling previous task before starting new one
    - Cleanup on owner teardown
    - Dropping callbacks once the owner has been torn down

    Usage:
        self._task_manager = BackgroundTaskManager()

        def refresh_data(self):
            self._task_manager.run(
                target=self.service.fetch_data,
                args=(self.query,),
                on_success=self._on_data_ready,
                on_error=self._on_error,
            )

        def close(self):
            self._task_manager.cleanup()
    """

    def __init__(self):
        self._current_task: Optional[BackgroundTask] = None
        self._closed = False

    @property
    def is_running(self) -> bool:
        return self._current_task is not None and self._current_task.isRunning()

    def run(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        on_success: Callable[[Any], None] = None,
        on_error: Callable[[Exception], None] = None,
    ) -> Optional[BackgroundTask]:
        """
        Run a background task, cancelling any previous one.

        Args:
            target: Function to execute in background
            args: Positional arguments for target
            on_success: Callback for successful result
            on_error: Callback for error (receives Exception, not str)

        Returns:
            BackgroundTask if started, None if the manager was already cleaned up
        """
        if self._closed:
            logger.debug("BackgroundTaskManager.run ignored after cleanup")
            return None

        # Cancel previous task
        if self._current_task is not None and self._current_task.isRunning():
            self._current_task.cancel()
            self._current_task.wait(CANCEL_WAIT_MS)

        # Late deliveries after cleanup are dropped here as well as in the task
        def wrapped_success(result):
            if not self._closed and on_success:
                on_success(result)

        def wrapped_error(error):
            if not self._closed and on_error:
                on_error(error)

        task = BackgroundTask(target=target, args=args)
        task.result_ready.connect(wrapped_success)
        task.error_occurred.connect(wrapped_error)

        self._current_task = task
        task.start()
        return task

    def cleanup(self):
        """Cancel and wait for current task. Call from the owner's teardown."""
        self._closed = True
        if self._current_task is not None and self._current_task.isRunning():
            self._current_task.cancel()
            self._current_task.wait(CLEANUP_WAIT_MS)
        self._current_task = None
