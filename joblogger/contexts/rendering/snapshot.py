"""
HTML snapshot rendering for captured job packets.

A snapshot is a single self-contained HTML file (inline CSS, no external
assets) holding the job header, capture metadata and the scraped description.

Plain-text fields are autoescaped by Jinja2. The description is inserted
as-is: it is markup that the scraper has already stripped of scripts and
unsafe attributes.

The protocol still calls this file a PDF (pdfFileName, pdfPath,
PDF_RENDER_FAILED). Only HTML is produced; snapshot_path() reports the
substitution so it can be passed back to the caller as a warning.
"""

import time
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateError

from joblogger.contexts.filing.folders import INVALID_FOLDER_CHARS
from joblogger.contexts.messaging.envelope import JobPacket
from joblogger.contexts.rendering.logger import (
    log_format_substitution,
    log_snapshot_failed,
    log_snapshot_written,
)
from joblogger.exceptions import SnapshotRenderError
from joblogger.utils.timestamp import now

TEMPLATES_PATH = Path(__file__).parent / "templates"
SNAPSHOT_TEMPLATE = "job_snapshot.html.jinja"

SNAPSHOT_SUFFIX = ".html"
DEFAULT_SNAPSHOT_STEM = "ad"
HTML_SUFFIXES = {".html", ".htm"}

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_PATH)),
    autoescape=True,
    keep_trailing_newline=True,
)


def render_job_snapshot(packet: JobPacket, generated_at: Optional[str] = None) -> str:
    """
    Render a job packet as an HTML document.

    Args:
        packet: Validated job packet
        generated_at: Footer timestamp (default: now, local time)

    Returns:
        Complete HTML document
    """
    template = _env.get_template(SNAPSHOT_TEMPLATE)
    return template.render(
        title=packet.title,
        company=packet.company,
        location=packet.location,
        pay=packet.pay,
        captured_at=packet.captured_at_iso,
        source_url=packet.source_url,
        posted_age=packet.posted_age,
        applicants=packet.applicants,
        description_html=packet.description_html or "",
        generated_at=generated_at or now(),
    )


def snapshot_path(folder: Path, requested_name: Optional[str] = None) -> tuple[Path, Optional[str]]:
    """
    Choose the snapshot file inside a job folder.

    The file always gets an .html extension. If the caller asked for another
    format (e.g. the legacy "ad.pdf"), the returned warning says what was
    written instead.

    Args:
        folder: Job folder
        requested_name: File name requested by the caller, if any

    Returns:
        Tuple of (snapshot path, warning or None)
    """
    if not requested_name or not requested_name.strip():
        return folder / f"{DEFAULT_SNAPSHOT_STEM}{SNAPSHOT_SUFFIX}", None

    requested = INVALID_FOLDER_CHARS.sub("_", requested_name.strip())
    requested_path = Path(requested)
    stem = requested_path.stem.strip() or DEFAULT_SNAPSHOT_STEM
    target = folder / f"{stem}{SNAPSHOT_SUFFIX}"

    suffix = requested_path.suffix.lower()
    if suffix and suffix not in HTML_SUFFIXES:
        log_format_substitution(requested_name, target.name)
        warning = (
            f"Requested '{requested_name}' but only HTML snapshots are generated; "
            f"saved as '{target.name}'"
        )
        return target, warning

    return target, None


def write_job_snapshot(packet: JobPacket, target: Path) -> Path:
    """
    Render a packet and write it to target as UTF-8.

    Any other extension on target is replaced with .html.

    Args:
        packet: Validated job packet
        target: Destination file (its folder must exist)

    Returns:
        Path of the written file

    Raises:
        SnapshotRenderError: Rendering or writing failed
    """
    target = target.with_suffix(SNAPSHOT_SUFFIX)
    start_time = time.perf_counter()

    try:
        html = render_job_snapshot(packet)
        target.write_text(html, encoding="utf-8")
    except (OSError, TemplateError, ValueError) as e:
        log_snapshot_failed(target, e)
        raise SnapshotRenderError(target, e) from e

    log_snapshot_written(target, len(html.encode("utf-8")), time.perf_counter() - start_time)
    return target
