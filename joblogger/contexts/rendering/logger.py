"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from loguru directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

CONTEXT_PREFIX = "[render]"


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_snapshot_written(target: Path, size_bytes: int, elapsed_time: float) -> None:
    """Log a written snapshot."""
    _log_info(f"Snapshot written: {target.name} ({size_bytes} bytes, {elapsed_time:.3f}s)")
    _log_debug(f"  Path: {target}")


def log_snapshot_failed(target: Path, error: Exception) -> None:
    _log_error(f"Snapshot failed for {target}: {error}")


def log_format_substitution(requested: str, written: Optional[str]) -> None:
    """Log a requested snapshot name whose format was replaced by HTML."""
    _log_warning(f"Requested '{requested}' but snapshots are HTML; writing '{written}'")
