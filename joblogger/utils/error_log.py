"""
Process-wide error log (Tier 2 logging).

A plain append-only text file that survives the host process, so failures
can be inspected after the browser has torn the host down. Every call opens,
appends and closes the file; no handle is kept between calls.

For detailed per-context logging (Tier 1), use the context loggers instead.

Usage:
    from joblogger.utils.error_log import log_error

    try:
        ...
    except Exception as e:
        log_error(e, context="CreateJobPacket")
"""

import os
import re
import tempfile
import traceback
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from joblogger.utils.timestamp import now

load_dotenv()
ERROR_LOG_FILE = Path(
    os.getenv(
        "JOBLOGGER_ERROR_LOG",
        str(Path(tempfile.gettempdir()) / "linkedin_job_logger_error.log"),
    )
)

# Every entry starts with "[YYYY-MM-DD HH:MM:SS] ERROR:" or "... ERROR (context):"
ENTRY_START = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] ERROR[ :]", re.MULTILINE)


def format_error_entry(exc: BaseException, context: Optional[str] = None) -> str:
    """Format one log entry: timestamp header, optional context, traceback."""
    details = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
    where = f" ({context})" if context else ""
    return f"[{now()}] ERROR{where}: {details}\n"


def log_error(
    exc: BaseException, context: Optional[str] = None, log_file: Optional[Path] = None
) -> None:
    """
    Append an exception to the error log.

    Best-effort: failures to write the log are ignored so that logging can
    never take the host down.

    Args:
        exc: Exception to record
        context: Short label for where it happened (e.g., the request kind)
        log_file: Override for the log location (default: JOBLOGGER_ERROR_LOG)
    """
    path = log_file or ERROR_LOG_FILE
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(format_error_entry(exc, context))
    except Exception:
        pass


def read_error_log(n: int = 10, log_file: Optional[Path] = None) -> list[str]:
    """
    Return the last n entries of the error log, oldest first.

    Returns an empty list when the log does not exist yet.
    """
    path = log_file or ERROR_LOG_FILE
    if not path.exists():
        return []

    content = path.read_text(encoding="utf-8", errors="replace")
    starts = [m.start() for m in ENTRY_START.finditer(content)]
    entries = [
        content[start:end].rstrip()
        for start, end in zip(starts, starts[1:] + [len(content)])
    ]
    return entries[-n:] if n > 0 else []
