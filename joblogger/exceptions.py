"""Error codes and exceptions shared by the host contexts."""

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorCode(str, Enum):
    """Error codes carried by ``ok: false`` responses."""

    INVALID_MESSAGE = "INVALID_MESSAGE"
    JSON_PARSE_ERROR = "JSON_PARSE_ERROR"
    UNKNOWN_KIND = "UNKNOWN_KIND"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
    MISSING_TITLE = "MISSING_TITLE"
    MISSING_COMPANY = "MISSING_COMPANY"
    BASE_PATH_MISSING = "BASE_PATH_MISSING"
    BASE_PATH_NOT_FOUND = "BASE_PATH_NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    FOLDER_CREATE_FAILED = "FOLDER_CREATE_FAILED"
    PDF_RENDER_FAILED = "PDF_RENDER_FAILED"
    OPEN_FOLDER_FAILED = "OPEN_FOLDER_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class JobLoggerError(Exception):
    """
    Base class for failures that are answered with an error response.

    Attributes:
        message: Human-readable description shown to the user by the caller
        error_code: Code sent back in the ``errorCode`` response field
        request_id: Request id to echo, when the failure happened before the
            envelope was fully parsed and the id is known
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        self.request_id = request_id
        super().__init__(message)


# Parse errors


class EnvelopeParseError(JobLoggerError):
    """Raised when the message body is not a usable envelope."""

    error_code = ErrorCode.INVALID_MESSAGE


class UnknownKindError(JobLoggerError):
    """Raised when the envelope kind is not one the host handles."""

    error_code = ErrorCode.UNKNOWN_KIND


class InvalidPayloadError(JobLoggerError):
    """Raised when the payload does not match the shape its kind requires."""

    error_code = ErrorCode.INVALID_PAYLOAD


# Validation errors


class PacketValidationError(JobLoggerError):
    """Raised when a required CreateJobPacket field is blank."""


# Filesystem errors


class BasePathNotFoundError(JobLoggerError):
    """Raised when the configured base folder does not exist."""

    error_code = ErrorCode.BASE_PATH_NOT_FOUND

    def __init__(self, base_path: Path):
        self.base_path = base_path
        super().__init__("Base folder path does not exist")


class FolderAccessDeniedError(JobLoggerError):
    """Raised when the OS refuses to create the job folder."""

    error_code = ErrorCode.ACCESS_DENIED

    def __init__(self, path: Path, original_error: Optional[Exception] = None):
        self.path = path
        self.original_error = original_error
        super().__init__("Access denied to base folder path")


class FolderCreateError(JobLoggerError):
    """Raised for any other failure while creating the job folder."""

    error_code = ErrorCode.FOLDER_CREATE_FAILED

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to create folder: {reason}")


class SnapshotRenderError(JobLoggerError):
    """
    Raised when the job snapshot cannot be rendered or written.

    The code keeps its legacy PDF name; snapshots are HTML.
    """

    error_code = ErrorCode.PDF_RENDER_FAILED

    def __init__(self, target: Path, original_error: Optional[Exception] = None):
        self.target = target
        self.original_error = original_error
        detail = str(original_error) if original_error else "unknown error"
        super().__init__(f"Failed to generate PDF: {detail}")


class OpenFolderError(JobLoggerError):
    """Raised when the system file browser could not be launched."""

    error_code = ErrorCode.OPEN_FOLDER_FAILED


# Caller-side transport errors (never sent over the wire)


class HostTransportError(Exception):
    """Raised by the host client when no usable response was received."""


class HostConnectionError(HostTransportError):
    """The host could not be started, or exited without answering."""


class HostTimeoutError(HostTransportError):
    """The host did not answer within the client timeout."""
