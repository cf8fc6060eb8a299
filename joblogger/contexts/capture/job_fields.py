"""
Scraped job fields and the CreateJobPacket requests built from them.

JobFields is the shape a page scraper hands over (the extension's content
script produces the same keys). Scraping itself happens in the browser; this
module starts from its output, e.g. a JSON file saved from the popup.
"""

import json
from dataclasses import dataclass, fields
from datetime import date
from pathlib import Path
from typing import Optional, Union

from joblogger.contexts.capture.client import build_request
from joblogger.contexts.filing.folders import generate_folder_name, sanitize_folder_name
from joblogger.contexts.messaging.envelope import RequestKind
from joblogger.utils.timestamp import utc_iso

# Snapshot name the extension has always requested; the host writes ad.html
LEGACY_PDF_FILE_NAME = "ad.pdf"


@dataclass
class JobFields:
    """Fields extracted from a job-detail page."""

    title: str = ""
    company: str = ""
    location: Optional[str] = None
    pay: Optional[str] = None
    posted_age: Optional[str] = None
    applicants: Optional[str] = None
    description_html: str = ""
    source_url: str = ""
    captured_at_iso: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "JobFields":
        """
        Build from scraper output with camelCase keys.

        Non-string values (e.g. an applicant count scraped as a number) are
        converted with str(); missing keys and None keep the default.
        """
        values = {}
        for f in fields(cls):
            value = data.get(_camel_case(f.name))
            if value is not None:
                values[f.name] = value if isinstance(value, str) else str(value)
        return cls(**values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "JobFields":
        """Load from a JSON file holding one scraper result."""
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {path}")
        return cls.from_dict(data)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def build_job_packet_payload(
    job: JobFields,
    base_folder: str,
    folder_name: Optional[str] = None,
    on_date: Optional[date] = None,
) -> dict:
    """
    Build a CreateJobPacket payload the way the extension popup does.

    Args:
        job: Scraped fields
        base_folder: Base folder from the settings store
        folder_name: Explicit folder name (default: "{date} {company} - {title}")
        on_date: Date used for the default folder name (default: today)

    Returns:
        Payload dict with camelCase keys
    """
    if folder_name is None:
        folder_name = sanitize_folder_name(generate_folder_name(job.company, job.title, on_date))

    return {
        "sourceUrl": job.source_url,
        "capturedAtIso": job.captured_at_iso or utc_iso(),
        "title": job.title,
        "company": job.company,
        "location": job.location or None,
        "pay": job.pay or None,
        "postedAge": job.posted_age or None,
        "applicants": job.applicants or None,
        "descriptionHtml": job.description_html or "",
        "baseFolder": base_folder,
        "folderName": folder_name,
        "pdfFileName": LEGACY_PDF_FILE_NAME,
    }


def build_create_job_packet_request(
    job: JobFields, base_folder: str, folder_name: Optional[str] = None
) -> dict:
    """Full CreateJobPacket envelope with a fresh request id."""
    return build_request(
        RequestKind.CREATE_JOB_PACKET, build_job_packet_payload(job, base_folder, folder_name)
    )
