"""Shared fixtures: keep logs and settings written by tests inside tmp_path."""

import io
import json

import pytest

from joblogger.contexts.messaging.framing import encode_message, read_message


@pytest.fixture(autouse=True)
def isolated_error_log(tmp_path, monkeypatch):
    """Point the process-wide error log at a per-test file."""
    log_file = tmp_path / "error.log"
    monkeypatch.setattr("joblogger.utils.error_log.ERROR_LOG_FILE", log_file)
    monkeypatch.setenv("JOBLOGGER_ERROR_LOG", str(log_file))
    monkeypatch.setenv("JOBLOGGER_LOGS_PATH", str(tmp_path / "logs"))
    return log_file


@pytest.fixture
def base_folder(tmp_path):
    """Existing base folder for job folders."""
    folder = tmp_path / "Jobs"
    folder.mkdir()
    return folder


@pytest.fixture
def job_payload(base_folder):
    """Complete CreateJobPacket payload as the extension sends it."""
    return {
        "sourceUrl": "https://www.linkedin.com/jobs/view/4012345678/",
        "capturedAtIso": "2025-03-14T09:26:53.589Z",
        "title": "Senior Data Engineer",
        "company": "Acme Corp",
        "location": "Berlin, Germany (Hybrid)",
        "pay": "€80K/yr - €95K/yr",
        "postedAge": "2 days ago",
        "applicants": "Over 100 applicants",
        "descriptionHtml": "<p>Build <strong>pipelines</strong>.</p><ul><li>Python</li></ul>",
        "baseFolder": str(base_folder),
        "folderName": "2025-03-14 Acme Corp - Senior Data Engineer",
        "pdfFileName": "ad.pdf",
    }


def _make_request(kind, payload=None, request_id="req-1", version="1.0"):
    return {"version": version, "kind": kind, "requestId": request_id, "payload": payload or {}}


def _frames(*messages) -> io.BytesIO:
    return io.BytesIO(b"".join(encode_message(m) for m in messages))


def _read_all_frames(data: bytes) -> list:
    stream = io.BytesIO(data)
    messages = []
    while True:
        text = read_message(stream)
        if text is None:
            return messages
        messages.append(json.loads(text))


@pytest.fixture
def make_request():
    """Factory for envelope dicts: make_request(kind, payload, request_id)."""
    return _make_request


@pytest.fixture
def frames():
    """Factory for an input stream holding messages framed back to back."""
    return _frames


@pytest.fixture
def read_all_frames():
    """Decoder for every framed message in a byte string."""
    return _read_all_frames
