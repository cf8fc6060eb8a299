"""
Job folder naming and allocation.

A job folder is named "{YYYY-MM-DD} {company} - {title}" unless the caller
supplies a name. Names are sanitized for every mainstream filesystem, and a
taken name gets a " (2)", " (3)", ... suffix instead of being reused.

Examples:
    >>> sanitize_folder_name('2025-01-31 Acme: R&D - "Senior" Eng?')
    '2025-01-31 Acme_ R&D - _Senior_ Eng_'
    >>> allocate_job_folder(Path("~/Jobs").expanduser(), "Acme - Engineer")
    PosixPath('/home/me/Jobs/Acme - Engineer (2)')
"""

import os
import re
from datetime import date
from pathlib import Path
from typing import Optional, Union

from joblogger.contexts.filing.logger import log_creation_race, log_folder_allocated
from joblogger.exceptions import BasePathNotFoundError, FolderAccessDeniedError, FolderCreateError
from joblogger.utils.timestamp import today

# Characters rejected by Windows and/or POSIX path handling
INVALID_FOLDER_CHARS = re.compile(r'[<>:"/\\|?*]')
WHITESPACE_RUN = re.compile(r"\s+")

MAX_FOLDER_NAME_LENGTH = 150
FALLBACK_FOLDER_NAME = "UnknownJob"

# Bound on suffixes tried before giving up
MAX_ALLOCATION_ATTEMPTS = 10_000


def generate_folder_name(company: str, title: str, on_date: Optional[date] = None) -> str:
    """
    Build the default (unsanitized) folder name for a job.

    Args:
        company: Company name
        title: Job title
        on_date: Capture date (default: today, local time)

    Returns:
        "{YYYY-MM-DD} {company} - {title}"
    """
    return f"{today(on_date)} {company} - {title}"


def sanitize_folder_name(name: Optional[str]) -> str:
    """
    Make a name safe to use as a single folder name.

    Replaces < > : " / \\ | ? * with underscores, collapses whitespace runs to
    one space, trims, and truncates to MAX_FOLDER_NAME_LENGTH characters
    (trimming again after the cut). Blank results become FALLBACK_FOLDER_NAME.

    Sanitizing an already sanitized name returns it unchanged.
    """
    if not name or not name.strip():
        return FALLBACK_FOLDER_NAME

    sanitized = INVALID_FOLDER_CHARS.sub("_", name)
    sanitized = WHITESPACE_RUN.sub(" ", sanitized).strip()

    if len(sanitized) > MAX_FOLDER_NAME_LENGTH:
        sanitized = sanitized[:MAX_FOLDER_NAME_LENGTH].strip()

    return sanitized or FALLBACK_FOLDER_NAME


def candidate_folder(base: Path, folder_name: str, counter: int) -> Path:
    """Path for the counter-th attempt: "name", then "name (2)", "name (3)", ..."""
    if counter == 1:
        return base / folder_name
    return base / f"{folder_name} ({counter})"


def allocate_job_folder(base_folder: Union[str, Path], folder_name: str) -> Path:
    """
    Create a new, uniquely named job folder under base_folder.

    The base folder is never created here; it must already exist. Existing
    entries are skipped by numbering. The mkdir itself is the authoritative
    conflict check, so a folder created by someone else between the check and
    the mkdir only moves allocation on to the next number.

    Args:
        base_folder: Existing directory that holds job folders
        folder_name: Already sanitized folder name

    Returns:
        Absolute path of the created folder

    Raises:
        BasePathNotFoundError: base_folder is not an existing directory
        FolderAccessDeniedError: the OS refused to create the folder
        FolderCreateError: any other failure, or MAX_ALLOCATION_ATTEMPTS exhausted
    """
    base = Path(base_folder).expanduser()
    try:
        base_exists = base.is_dir()
    except PermissionError as e:
        raise FolderAccessDeniedError(base, e) from e
    if not base_exists:
        raise BasePathNotFoundError(base)

    for counter in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        target = candidate_folder(base, folder_name, counter)
        try:
            if target.exists():
                continue
            target.mkdir()
        except FileExistsError:
            log_creation_race(target)
            continue
        except PermissionError as e:
            raise FolderAccessDeniedError(target, e) from e
        except FileNotFoundError as e:
            # Base removed after the check above
            raise BasePathNotFoundError(base) from e
        except OSError as e:
            raise FolderCreateError(target, e.strerror or str(e)) from e
        except ValueError as e:
            # Names the OS cannot represent, e.g. an embedded NUL
            raise FolderCreateError(target, str(e)) from e

        folder = Path(os.path.abspath(target))
        log_folder_allocated(folder, counter)
        return folder

    raise FolderCreateError(
        base / folder_name, f"no free name after {MAX_ALLOCATION_ATTEMPTS} attempts"
    )
