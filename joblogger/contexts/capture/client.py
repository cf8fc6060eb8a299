"""
Caller side of the native messaging transport.

Does what the extension's background worker does for each call: start the
host, send one framed request, wait for the framed reply, disconnect. A reply
that does not arrive within the timeout is abandoned; the host is killed and
the call fails like any other transport failure.

Usage:
    from joblogger.contexts.capture.client import NativeHostClient

    client = NativeHostClient()
    client.ping()
    # {"requestId": "...", "ok": True, "message": "Native host is responding", "version": "1.0"}
"""

import io
import json
import os
import shlex
import subprocess
import sys
import time
import uuid
from pathlib import Path
from typing import Optional, Sequence, Union

from dotenv import load_dotenv

from joblogger.contexts.capture.logger import log_host_call, log_host_reply
from joblogger.contexts.messaging.envelope import PROTOCOL_VERSION, RequestKind
from joblogger.contexts.messaging.framing import encode_message, read_message
from joblogger.exceptions import HostConnectionError, HostTimeoutError

load_dotenv()

DEFAULT_HOST_COMMAND = [sys.executable, "-m", "joblogger.contexts.messaging.host"]
HOST_COMMAND = shlex.split(os.getenv("JOBLOGGER_HOST_COMMAND", "")) or DEFAULT_HOST_COMMAND
HOST_TIMEOUT = float(os.getenv("JOBLOGGER_HOST_TIMEOUT", "10"))


def generate_request_id() -> str:
    """Random request id (UUID4)."""
    return str(uuid.uuid4())


def build_request(kind: RequestKind, payload: dict, request_id: Optional[str] = None) -> dict:
    """Wrap a payload in a protocol envelope."""
    return {
        "version": PROTOCOL_VERSION,
        "kind": kind.value,
        "requestId": request_id or generate_request_id(),
        "payload": payload,
    }


class NativeHostClient:
    """
    One-shot client: each send() runs a fresh host process.

    Args:
        command: Host command line (default: JOBLOGGER_HOST_COMMAND, or this
            interpreter running joblogger.contexts.messaging.host)
        timeout: Seconds to wait for the reply (default: JOBLOGGER_HOST_TIMEOUT)
    """

    def __init__(self, command: Optional[Sequence[str]] = None, timeout: float = HOST_TIMEOUT):
        self.command = list(command or HOST_COMMAND)
        self.timeout = timeout

    def send(self, request: dict) -> dict:
        """
        Send one request and return the decoded reply.

        An ``ok: false`` reply is returned, not raised; only transport
        problems raise.

        Raises:
            HostConnectionError: Host could not be started or gave no readable reply
            HostTimeoutError: No reply within the timeout
        """
        request_id = request.get("requestId", "")
        log_host_call(request.get("kind", ""), request_id, self.command)
        start_time = time.perf_counter()

        try:
            process = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise HostConnectionError(f"Failed to connect to native host: {e}") from e

        try:
            stdout, _ = process.communicate(input=encode_message(request), timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.communicate()
            raise HostTimeoutError(
                f"Native host response timeout ({self.timeout:g} seconds)"
            ) from e

        reply_text = read_message(io.BytesIO(stdout))
        if reply_text is None:
            raise HostConnectionError(
                f"Native host disconnected without a response (exit code {process.returncode})"
            )

        try:
            reply = json.loads(reply_text)
        except ValueError as e:
            raise HostConnectionError("Native host sent an unreadable response") from e

        log_host_reply(request_id, reply, time.perf_counter() - start_time)
        return reply

    def ping(self) -> dict:
        return self.send(build_request(RequestKind.PING, {}))

    def open_folder(self, path: Union[str, Path]) -> dict:
        return self.send(build_request(RequestKind.OPEN_FOLDER, {"path": str(path)}))

    def create_job_packet(self, payload: dict) -> dict:
        """
        Send a CreateJobPacket request.

        Args:
            payload: CreateJobPacket payload (see job_fields.build_job_packet_payload)
        """
        return self.send(build_request(RequestKind.CREATE_JOB_PACKET, payload))
