"""
Core Log Utilities for catalog-browser.

File logging setup and log file discovery for applications embedding the
catalog core.
"""

import logging
import time
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass

from catalog_browser.protocols.catalog_config import CatalogConfig, get_catalog_config

logger = logging.getLogger(__name__)

PACKAGE_LOGGER_NAME = "catalog_browser"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_log_dir(config: Optional[CatalogConfig] = None) -> Path:
    """Return configured log directory or default."""
    config = config or get_catalog_config()
    if config.log_dir:
        return Path(config.log_dir)
    return Path.home() / ".local" / "share" / "catalog_browser" / "logs"


def _get_log_prefixes(config: Optional[CatalogConfig] = None) -> List[str]:
    """Return configured log prefixes or default."""
    config = config or get_catalog_config()
    return config.log_prefixes or ["catalog_browser_"]


def configure_logging(level: Optional[str] = None, config: Optional[CatalogConfig] = None) -> Path:
    """
    Attach a file handler for the package logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Logging level name (defaults to config.log_level)
        config: Configuration to read log directory and prefix from

    Returns:
        Path of the log file being written
    """
    config = config or get_catalog_config()
    log_dir = _get_log_dir(config)
    log_dir.mkdir(parents=True, exist_ok=True)
    prefix = _get_log_prefixes(config)[0]
    log_path = log_dir / f"{prefix}{int(time.time())}.log"

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_catalog_browser_handler", False):
            package_logger.removeHandler(handler)
            handler.close()

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._catalog_browser_handler = True
    package_logger.addHandler(handler)
    package_logger.setLevel((level or config.log_level).upper())

    logger.info(f"Logging to {log_path}")
    return log_path


def get_current_log_file_path() -> str:
    """Get the current log file path from the logging system."""
    for logger_name in (PACKAGE_LOGGER_NAME, None):
        for handler in logging.getLogger(logger_name).handlers:
            if isinstance(handler, logging.FileHandler):
                return handler.baseFilename
    raise RuntimeError("No file handler configured; call configure_logging() first")


@dataclass
class LogFileInfo:
    """Information about a discovered log file."""
    path: Path
    is_current: bool = False
    display_name: Optional[str] = None

    def __post_init__(self):
        """Generate display name if not provided."""
        if not self.display_name:
            self.display_name = "Current Session" if self.is_current else self.path.name


def is_app_log_file(file_path: Path, config: Optional[CatalogConfig] = None) -> bool:
    """
    Check if a file is a recognized application log file.

    Args:
        file_path: Path to file to check
        config: Configuration providing log prefixes

    Returns:
        bool: True if file matches configured log prefixes
    """
    if not file_path.name.endswith('.log'):
        return False
    return any(file_path.name.startswith(prefix) for prefix in _get_log_prefixes(config))


def discover_logs(log_directory: Optional[Path] = None,
                  config: Optional[CatalogConfig] = None) -> List[LogFileInfo]:
    """
    Discover application log files, newest first.

    Args:
        log_directory: Directory to search (defaults to configured log directory)
        config: Configuration providing log directory and prefixes

    Returns:
        List of LogFileInfo objects for discovered log files
    """
    log_directory = log_directory or _get_log_dir(config)
    if not log_directory.exists():
        return []

    try:
        current = Path(get_current_log_file_path())
    except RuntimeError:
        current = None

    discovered = [
        LogFileInfo(log_file, is_current=(current is not None and log_file == current))
        for log_file in log_directory.glob("*.log")
        if is_app_log_file(log_file, config)
    ]
    discovered.sort(key=lambda info: info.path.stat().st_mtime, reverse=True)
    return discovered
