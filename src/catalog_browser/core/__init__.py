"""
Core PyQt6 utilities.

Pure PyQt6 utility components with no domain-specific logic: timers,
background tasks, pagination, highlighting and logging helpers.
"""

from .single_shot_timer import SingleShotTimer
from .background_task import BackgroundTask, BackgroundTaskManager
from .pagination import Paginator, PageState, DEFAULT_PAGE_SIZE
from .highlight import HighlightSpan, highlight_spans, spans_to_html
from .log_utils import configure_logging, discover_logs, get_current_log_file_path, LogFileInfo

__all__ = [
    "SingleShotTimer",
    "BackgroundTask",
    "BackgroundTaskManager",
    "Paginator",
    "PageState",
    "DEFAULT_PAGE_SIZE",
    "HighlightSpan",
    "highlight_spans",
    "spans_to_html",
    "configure_logging",
    "discover_logs",
    "get_current_log_file_path",
    "LogFileInfo",
]
