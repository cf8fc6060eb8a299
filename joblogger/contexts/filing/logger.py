"""
Filing context logger.

Provides logging interface for the filing context with automatic [filing] prefix.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[filing]"


def _log_info(message: str) -> None:
    """Log info message with [filing] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [filing] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [filing] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_folder_allocated(folder: Path, attempts: int) -> None:
    """Log the folder chosen for a job packet."""
    _log_info(f"Created job folder: {folder}")
    if attempts > 1:
        _log_debug(f"  Name was taken; resolved after {attempts} attempts")


def log_creation_race(candidate: Path) -> None:
    """Log a folder that appeared between the existence check and mkdir."""
    _log_warning(f"Folder appeared during creation, trying next name: {candidate}")


def log_folder_opened(folder: Path, command: str) -> None:
    _log_info(f"Opened {folder} with {command}")
