"""
Native messaging framing.

Each message on the wire is a 4-byte little-endian unsigned length followed by
exactly that many bytes of UTF-8 JSON. The same framing is used in both
directions.
"""

import json
import struct
from typing import BinaryIO, Optional

from joblogger.contexts.messaging.logger import _log_debug, _log_warning

# Inbound cap; larger declared lengths are treated as a broken stream.
MAX_MESSAGE_BYTES = 1024 * 1024

LENGTH_PREFIX = struct.Struct("<I")


def _read_exact(stream: BinaryIO, size: int) -> Optional[bytes]:
    """
    Read exactly size bytes, looping over short reads.

    Returns None if the stream ends (a zero-byte read) before size bytes arrived.
    """
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            return None
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_length(prefix: bytes) -> int:
    """Decode a 4-byte little-endian length prefix."""
    return LENGTH_PREFIX.unpack(prefix)[0]


def read_message(stream: BinaryIO) -> Optional[str]:
    """
    Read one framed message from a binary stream.

    Args:
        stream: Binary input stream (e.g., sys.stdin.buffer)

    Returns:
        Decoded message text, or None when there is no message: the peer
        closed the stream, the declared length is 0 or above
        MAX_MESSAGE_BYTES, the body was cut short, or reading failed.
        None always means the session is over.
    """
    try:
        prefix = _read_exact(stream, LENGTH_PREFIX.size)
        if prefix is None:
            _log_debug("Input stream closed")
            return None

        length = decode_length(prefix)
        if length <= 0 or length > MAX_MESSAGE_BYTES:
            _log_warning(f"Rejected message with declared length {length}")
            return None

        body = _read_exact(stream, length)
        if body is None:
            _log_warning(f"Stream closed mid-message ({length} bytes declared)")
            return None
    except OSError as e:
        _log_warning(f"Failed to read from input stream: {e}")
        return None

    return body.decode("utf-8", errors="replace")


def encode_message(message) -> bytes:
    """Serialize a JSON-compatible value into a framed message."""
    text = json.dumps(message, ensure_ascii=False, separators=(",", ":"))
    # Lone surrogates (legal in JSON strings, not in UTF-8) become "?"
    body = text.encode("utf-8", errors="replace")
    return LENGTH_PREFIX.pack(len(body)) + body


def write_message(stream: BinaryIO, message) -> None:
    """
    Write one framed message and flush.

    The flush is required: the browser blocks until the whole frame arrives.
    """
    stream.write(encode_message(message))
    stream.flush()
