"""
Request and response model for the native messaging protocol.

Wire envelope (camelCase JSON):

    {"version": "1.0", "kind": "CreateJobPacket", "requestId": "...", "payload": {...}}

Parsing happens in two steps. The common envelope fields are decoded first;
the payload is decoded into the kind-specific request only once the kind is
known. The result is one of the request dataclasses in ``Request``, so
everything after parse_envelope() works with typed fields.

Responses always echo ``requestId`` and use ``ok`` as the discriminant:

    {"requestId": "...", "ok": true, ...}
    {"requestId": "...", "ok": false, "errorCode": "...", "message": "..."}
"""

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

from joblogger.exceptions import (
    EnvelopeParseError,
    ErrorCode,
    InvalidPayloadError,
    JobLoggerError,
    UnknownKindError,
)

PROTOCOL_VERSION = "1.0"
PING_MESSAGE = "Native host is responding"


class RequestKind(Enum):
    """Closed set of request kinds the host understands."""

    PING = "Ping"
    CREATE_JOB_PACKET = "CreateJobPacket"
    OPEN_FOLDER = "OpenFolder"

    @classmethod
    def from_wire(cls, value: str) -> Optional["RequestKind"]:
        """Match a wire ``kind`` case-insensitively; None if unknown."""
        wanted = value.lower()
        for kind in cls:
            if kind.value.lower() == wanted:
                return kind
        return None


# =========================================================================
# REQUESTS
# =========================================================================


@dataclass(frozen=True)
class Envelope:
    """Fields common to every request."""

    version: str
    kind: str
    request_id: str


@dataclass
class JobPacket:
    """
    Payload of a CreateJobPacket request.

    title, company and base_folder are required to be non-blank, but that is
    checked by the handler (each has its own error code), not at parse time.
    """

    source_url: str = ""
    captured_at_iso: str = ""
    title: str = ""
    company: str = ""
    location: Optional[str] = None
    pay: Optional[str] = None
    posted_age: Optional[str] = None
    applicants: Optional[str] = None
    description_html: Optional[str] = None
    base_folder: str = ""
    folder_name: Optional[str] = None
    pdf_file_name: Optional[str] = None

    # Wire (camelCase) name for each field
    WIRE_NAMES: ClassVar[dict[str, str]] = {
        "source_url": "sourceUrl",
        "captured_at_iso": "capturedAtIso",
        "title": "title",
        "company": "company",
        "location": "location",
        "pay": "pay",
        "posted_age": "postedAge",
        "applicants": "applicants",
        "description_html": "descriptionHtml",
        "base_folder": "baseFolder",
        "folder_name": "folderName",
        "pdf_file_name": "pdfFileName",
    }

    @classmethod
    def from_payload(cls, payload: dict) -> "JobPacket":
        """
        Build a JobPacket from a wire payload.

        Missing keys and JSON null fall back to the field default. Unknown keys
        are ignored.

        Raises:
            ValueError: If a present value is not a string
        """
        values = {}
        for f in fields(cls):
            wire_name = cls.WIRE_NAMES[f.name]
            value = payload.get(wire_name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(f"Field '{wire_name}' must be a string")
            values[f.name] = value
        return cls(**values)

    def to_payload(self) -> dict:
        """Wire form of the packet (inverse of from_payload)."""
        return {self.WIRE_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass
class PingRequest:
    envelope: Envelope


@dataclass
class CreateJobPacketRequest:
    envelope: Envelope
    packet: JobPacket


@dataclass
class OpenFolderRequest:
    envelope: Envelope
    path: Optional[str] = None


Request = Union[PingRequest, CreateJobPacketRequest, OpenFolderRequest]


# =========================================================================
# RESPONSES
# =========================================================================


@dataclass
class SuccessResponse:
    """Bare success, used by OpenFolder."""

    request_id: str
    ok: ClassVar[bool] = True

    def to_wire(self) -> dict:
        return {"requestId": self.request_id, "ok": True}


@dataclass
class PingResponse(SuccessResponse):
    message: str = PING_MESSAGE
    version: str = PROTOCOL_VERSION

    def to_wire(self) -> dict:
        return {**super().to_wire(), "message": self.message, "version": self.version}


@dataclass
class JobPacketResponse(SuccessResponse):
    """
    Success for CreateJobPacket.

    ``pdfPath`` keeps its legacy name; it points at the HTML snapshot.
    """

    folder_path: Path = None
    pdf_path: Path = None
    warnings: list[str] = field(default_factory=list)

    def to_wire(self) -> dict:
        return {
            **super().to_wire(),
            "folderPath": str(self.folder_path),
            "pdfPath": str(self.pdf_path),
            "warnings": list(self.warnings),
        }


@dataclass
class ErrorResponse:
    request_id: str
    error_code: ErrorCode
    message: str
    ok: ClassVar[bool] = False

    def to_wire(self) -> dict:
        return {
            "requestId": self.request_id,
            "ok": False,
            "errorCode": self.error_code.value,
            "message": self.message,
        }


Response = Union[SuccessResponse, ErrorResponse]


def error_response(request_id: str, error_code: ErrorCode, message: str) -> ErrorResponse:
    """Create an ``ok: false`` response."""
    return ErrorResponse(request_id=request_id or "", error_code=error_code, message=message)


def error_response_from(exc: JobLoggerError, request_id: str = "") -> ErrorResponse:
    """
    Convert a JobLoggerError into an error response.

    The id recorded on the exception wins over request_id, since parse errors
    know the id before a request object exists.
    """
    rid = exc.request_id if exc.request_id is not None else request_id
    return error_response(rid, exc.error_code, exc.message)


# =========================================================================
# PARSING
# =========================================================================


def _optional_str(data: dict, key: str, request_id: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise EnvelopeParseError(
            f"Invalid message format: '{key}' must be a string", request_id=request_id
        )
    return value


def _parse_common(text: str) -> tuple[Envelope, Any]:
    """Decode the JSON body and the fields every envelope shares."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise EnvelopeParseError(
            "Failed to parse JSON message", error_code=ErrorCode.JSON_PARSE_ERROR, request_id=""
        ) from e

    if not isinstance(data, dict):
        raise EnvelopeParseError("Invalid message format", request_id="")

    raw_id = data.get("requestId")
    if raw_id is not None and not isinstance(raw_id, str):
        raise EnvelopeParseError(
            "Invalid message format: 'requestId' must be a string", request_id=""
        )
    request_id = raw_id or ""

    envelope = Envelope(
        version=_optional_str(data, "version", request_id),
        kind=_optional_str(data, "kind", request_id),
        request_id=request_id,
    )
    return envelope, data.get("payload")


def parse_envelope(text: str) -> Request:
    """
    Parse raw message text into a typed request.

    Args:
        text: Decoded message body

    Returns:
        PingRequest, CreateJobPacketRequest or OpenFolderRequest

    Raises:
        EnvelopeParseError: JSON_PARSE_ERROR for malformed JSON, INVALID_MESSAGE
            when the body is not an envelope
        UnknownKindError: kind is not Ping, CreateJobPacket or OpenFolder
        InvalidPayloadError: payload does not fit the kind
    """
    envelope, payload = _parse_common(text)
    rid = envelope.request_id

    kind = RequestKind.from_wire(envelope.kind)
    if kind is None:
        raise UnknownKindError(f"Unknown message kind: {envelope.kind}", request_id=rid)

    # Ping carries no data; its payload is not inspected
    if kind is RequestKind.PING:
        return PingRequest(envelope=envelope)

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidPayloadError("Invalid payload", request_id=rid)

    if kind is RequestKind.CREATE_JOB_PACKET:
        try:
            packet = JobPacket.from_payload(payload)
        except ValueError as e:
            raise InvalidPayloadError(f"Invalid payload: {e}", request_id=rid) from e
        return CreateJobPacketRequest(envelope=envelope, packet=packet)

    path = payload.get("path")
    if path is not None and not isinstance(path, str):
        raise InvalidPayloadError("Invalid payload: 'path' must be a string", request_id=rid)
    return OpenFolderRequest(envelope=envelope, path=path)
