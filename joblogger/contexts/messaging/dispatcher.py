"""
Request dispatch for the native host.

Turns one decoded message into one response. Every failure becomes an
``ok: false`` response: JobLoggerError subclasses carry their own code, and
anything else is logged and answered with INTERNAL_ERROR. Nothing raised
while handling a request reaches the process loop.
"""

from pathlib import Path
from typing import Callable

from joblogger.contexts.filing.folders import (
    allocate_job_folder,
    generate_folder_name,
    sanitize_folder_name,
)
from joblogger.contexts.filing.opener import open_in_file_browser
from joblogger.contexts.messaging.envelope import (
    CreateJobPacketRequest,
    JobPacket,
    JobPacketResponse,
    OpenFolderRequest,
    PingRequest,
    PingResponse,
    Request,
    Response,
    SuccessResponse,
    error_response,
    error_response_from,
    parse_envelope,
)
from joblogger.contexts.messaging.logger import (
    _log_exception,
    _log_warning,
    log_request_received,
    log_response_sent,
)
from joblogger.contexts.rendering.snapshot import snapshot_path, write_job_snapshot
from joblogger.exceptions import (
    ErrorCode,
    JobLoggerError,
    OpenFolderError,
    PacketValidationError,
    SnapshotRenderError,
)
from joblogger.utils.error_log import log_error


def validate_job_packet(packet: JobPacket) -> None:
    """
    Check the required CreateJobPacket fields, in order.

    Raises:
        PacketValidationError: MISSING_TITLE, MISSING_COMPANY or BASE_PATH_MISSING
    """
    if not packet.title.strip():
        raise PacketValidationError("Job title is required", ErrorCode.MISSING_TITLE)
    if not packet.company.strip():
        raise PacketValidationError("Company name is required", ErrorCode.MISSING_COMPANY)
    if not packet.base_folder.strip():
        raise PacketValidationError("Base folder path is required", ErrorCode.BASE_PATH_MISSING)


def desired_folder_name(packet: JobPacket) -> str:
    """
    The caller's folder name, or the dated default when none was given.

    A name that is present but blank is kept; sanitizing turns it into the
    fallback folder name.
    """
    if packet.folder_name is not None:
        return packet.folder_name
    return generate_folder_name(packet.company, packet.title)


class MessageDispatcher:
    """
    Routes parsed requests to their handlers.

    Args:
        opener: Callable that shows a folder in the file browser
    """

    def __init__(self, opener: Callable[[Path], None] = open_in_file_browser):
        self.opener = opener
        self._handlers = {
            PingRequest: self.handle_ping,
            CreateJobPacketRequest: self.handle_create_job_packet,
            OpenFolderRequest: self.handle_open_folder,
        }

    def process_message(self, text: str) -> dict:
        """Handle one message and return the wire response."""
        return self.dispatch(text).to_wire()

    def dispatch(self, text: str) -> Response:
        """
        Parse and handle one message.

        Args:
            text: Decoded message body

        Returns:
            Response dataclass; never raises for a bad or failing request
        """
        request_id = ""
        try:
            request = parse_envelope(text)
            request_id = request.envelope.request_id
            log_request_received(request.envelope.kind, request_id)
            response = self.handle(request)
        except JobLoggerError as e:
            response = error_response_from(e, request_id)
        except Exception as e:
            _log_exception(f"Unhandled error in request {request_id or 'no id'}")
            log_error(e, context="dispatch")
            response = error_response(request_id, ErrorCode.INTERNAL_ERROR, "Internal server error")

        log_response_sent(response)
        return response

    def handle(self, request: Request) -> Response:
        return self._handlers[type(request)](request)

    # =========================================================================
    # HANDLERS
    # =========================================================================

    def handle_ping(self, request: PingRequest) -> PingResponse:
        return PingResponse(request_id=request.envelope.request_id)

    def handle_create_job_packet(self, request: CreateJobPacketRequest) -> JobPacketResponse:
        """
        Validate a job packet, allocate its folder and write its snapshot.

        If the snapshot cannot be written the freshly created (empty) folder
        is removed again, so a retry gets the same folder name.
        """
        packet = request.packet
        validate_job_packet(packet)

        folder_name = sanitize_folder_name(desired_folder_name(packet))
        folder = allocate_job_folder(packet.base_folder, folder_name)
        target, warning = snapshot_path(folder, packet.pdf_file_name)

        try:
            written = write_job_snapshot(packet, target)
        except SnapshotRenderError:
            _remove_empty_folder(folder)
            raise

        return JobPacketResponse(
            request_id=request.envelope.request_id,
            folder_path=folder,
            pdf_path=written,
            warnings=[warning] if warning else [],
        )

    def handle_open_folder(self, request: OpenFolderRequest) -> SuccessResponse:
        """
        Show the requested folder in the file browser.

        Paths that are missing or not directories are ignored and still
        answered with success.
        """
        if request.path:
            folder = Path(request.path)
            try:
                is_folder = folder.is_dir()
            except OSError as e:
                raise OpenFolderError(str(e)) from e
            if is_folder:
                self.opener(folder)
        return SuccessResponse(request_id=request.envelope.request_id)


def _remove_empty_folder(folder: Path) -> None:
    try:
        folder.rmdir()
    except OSError as e:
        _log_warning(f"Could not remove folder after failed snapshot: {folder} ({e})")
