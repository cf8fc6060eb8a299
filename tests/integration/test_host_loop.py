"""
Integration tests for the host loop - framed requests in, framed responses out.
"""

import io
import struct

import pytest

from joblogger.contexts.messaging.dispatcher import MessageDispatcher
from joblogger.contexts.messaging.framing import MAX_MESSAGE_BYTES, encode_message
from joblogger.contexts.messaging.host import HostState, NativeMessagingHost


class ClosedPipe(io.RawIOBase):
    """Output stream whose reader has gone away."""

    def writable(self):
        return True

    def write(self, data):
        raise BrokenPipeError(32, "Broken pipe")


@pytest.fixture
def opened():
    return []


@pytest.fixture
def dispatcher(opened):
    return MessageDispatcher(opener=opened.append)


@pytest.mark.integration
class TestHostLoop:
    def test_one_response_per_request_in_order(
        self, dispatcher, frames, make_request, read_all_frames, job_payload
    ):
        stream = frames(
            make_request("Ping", request_id="a"),
            make_request("CreateJobPacket", job_payload, request_id="b"),
            make_request("FrobulateJob", request_id="c"),
        )
        output = io.BytesIO()
        host = NativeMessagingHost(stream, output, dispatcher)

        assert host.run() == 3
        assert host.state is HostState.TERMINATED

        responses = read_all_frames(output.getvalue())
        assert [r["requestId"] for r in responses] == ["a", "b", "c"]
        assert [r["ok"] for r in responses] == [True, True, False]
        assert responses[2]["errorCode"] == "UNKNOWN_KIND"

    def test_job_packet_written_to_disk(
        self, dispatcher, frames, make_request, read_all_frames, job_payload, base_folder
    ):
        output = io.BytesIO()
        NativeMessagingHost(
            frames(make_request("CreateJobPacket", job_payload)), output, dispatcher
        ).run()

        (response,) = read_all_frames(output.getvalue())
        snapshot = base_folder / "2025-03-14 Acme Corp - Senior Data Engineer" / "ad.html"
        assert response["pdfPath"] == str(snapshot)
        assert "Senior Data Engineer" in snapshot.read_text(encoding="utf-8")

    def test_open_folder_after_create(
        self, dispatcher, opened, frames, make_request, read_all_frames, job_payload
    ):
        output = io.BytesIO()
        host = NativeMessagingHost(
            frames(make_request("CreateJobPacket", job_payload, request_id="create")),
            output,
            dispatcher,
        )
        host.run()
        (created,) = read_all_frames(output.getvalue())

        output = io.BytesIO()
        NativeMessagingHost(
            frames(make_request("OpenFolder", {"path": created["folderPath"]})), output, dispatcher
        ).run()

        assert read_all_frames(output.getvalue())[0]["ok"] is True
        assert [str(p) for p in opened] == [created["folderPath"]]

    def test_bad_message_does_not_end_session(self, dispatcher, make_request, read_all_frames):
        garbage = b"{not json"
        stream = io.BytesIO(
            struct.pack("<I", len(garbage)) + garbage + encode_message(make_request("Ping"))
        )
        output = io.BytesIO()

        assert NativeMessagingHost(stream, output, dispatcher).run() == 2
        first, second = read_all_frames(output.getvalue())
        assert first["errorCode"] == "JSON_PARSE_ERROR"
        assert second["ok"] is True

    def test_unencodable_request_id_does_not_end_session(
        self, dispatcher, make_request, read_all_frames
    ):
        # Valid JSON escape for a lone surrogate, which has no UTF-8 form
        body = b'{"version":"1.0","kind":"Ping","requestId":"\\ud800","payload":{}}'
        stream = io.BytesIO(
            struct.pack("<I", len(body))
            + body
            + encode_message(make_request("Ping", request_id="after"))
        )
        output = io.BytesIO()

        assert NativeMessagingHost(stream, output, dispatcher).run() == 2
        first, second = read_all_frames(output.getvalue())
        assert first["ok"] is True
        assert first["requestId"] == "?"
        assert second["requestId"] == "after"

    def test_empty_input_ends_cleanly(self, dispatcher):
        output = io.BytesIO()
        host = NativeMessagingHost(io.BytesIO(b""), output, dispatcher)

        assert host.run() == 0
        assert output.getvalue() == b""
        assert host.state is HostState.TERMINATED

    def test_oversized_frame_ends_session(self, dispatcher, frames, make_request, read_all_frames):
        stream = frames(make_request("Ping", request_id="before"))
        stream.seek(0, io.SEEK_END)
        stream.write(struct.pack("<I", MAX_MESSAGE_BYTES + 1))
        stream.write(frames(make_request("Ping", request_id="after")).getvalue())
        stream.seek(0)
        output = io.BytesIO()

        assert NativeMessagingHost(stream, output, dispatcher).run() == 1
        assert [r["requestId"] for r in read_all_frames(output.getvalue())] == ["before"]

    def test_write_failure_ends_loop_and_is_logged(
        self, dispatcher, frames, make_request, isolated_error_log
    ):
        host = NativeMessagingHost(frames(make_request("Ping")), ClosedPipe(), dispatcher)

        assert host.run() == 0
        assert host.state is HostState.TERMINATED
        assert "BrokenPipeError" in isolated_error_log.read_text(encoding="utf-8")
