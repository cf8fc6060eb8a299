"""
Messaging context logger.

Provides logging interface for the messaging context with automatic [host] prefix.
All messaging modules should import from this module, not from utils.logger directly.
"""

import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from joblogger.contexts.messaging.envelope import PROTOCOL_VERSION
from joblogger.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[host]"
LOGS_PATH = Path(
    os.getenv("JOBLOGGER_LOGS_PATH", str(Path(tempfile.gettempdir()) / "joblogger" / "logs"))
)


def setup_host_logger(log_dir: Path = LOGS_PATH) -> Path:
    """
    Setup logger for the native host process.

    Args:
        log_dir: Directory for host logs (default: JOBLOGGER_LOGS_PATH)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="host",
        log_dir=log_dir,
        extra_provenance={"Protocol version": PROTOCOL_VERSION},
    )


def _log_info(message: str) -> None:
    """Log info message with [host] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [host] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [host] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [host] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [host] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_exception(message: str) -> None:
    """Log message with the active exception's traceback."""
    logger.opt(exception=True).error(f"{CONTEXT_PREFIX} {message}")


# High-level messaging helpers


def log_request_received(kind: str, request_id: str) -> None:
    """Log a parsed request."""
    _log_info(f"Request {kind} ({request_id or 'no id'})")


def log_response_sent(response) -> None:
    """
    Log the outcome of a request.

    Args:
        response: Response dataclass from joblogger.contexts.messaging.envelope
    """
    if response.ok:
        _log_success(f"Request {response.request_id or 'no id'} succeeded")
    else:
        _log_warning(
            f"Request {response.request_id or 'no id'} failed: "
            f"{response.error_code.value} {response.message}"
        )


def log_session_end(handled: int) -> None:
    """Log the end of a host session."""
    _log_info(f"Session ended after {handled} request(s)")
