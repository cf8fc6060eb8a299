"""
Shared utilities for JobLogger.

Common functionality used across contexts:
- Timestamps
- Loguru setup
- Process-wide error log
"""

from joblogger.utils.timestamp import now, today

__all__ = ["now", "today"]
