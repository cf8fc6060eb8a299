"""
Capture context logger.

Provides logging interface for the capture context with automatic [capture] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[capture]"


def _log_info(message: str) -> None:
    """Log info message with [capture] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [capture] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [capture] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_host_call(kind: str, request_id: str, command: list[str]) -> None:
    _log_info(f"Sending {kind} ({request_id}) to native host")
    _log_debug(f"  Command: {' '.join(command)}")


def log_host_reply(request_id: str, reply: dict, elapsed_time: float) -> None:
    """Log a decoded host reply."""
    if reply.get("ok"):
        _log_info(f"Host answered {request_id} ({elapsed_time:.2f}s)")
    else:
        _log_error(
            f"Host rejected {request_id}: {reply.get('errorCode')} {reply.get('message')}"
        )
