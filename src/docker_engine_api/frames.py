"""
Multiplexed stdout/stderr frames

Containers without a TTY send logs, attach and exec output as frames with an
8-byte header: stream type (0 stdin, 1 stdout, 2 stderr), three zero bytes
and the big-endian payload length.
"""

import struct
from typing import Iterable, Iterator, Tuple, Union

from .exceptions import TransportError

STDIN = 0
STDOUT = 1
STDERR = 2

HEADER_SIZE = 8


def parse_header(header: bytes) -> Tuple[int, int]:
    """Return (stream type, payload length) of a frame header"""
    stream_type = header[0]
    length = struct.unpack('>I', header[4:HEADER_SIZE])[0]
    return stream_type, length


def is_multiplexed(data: bytes) -> bool:
    """Whether data starts with a frame header"""
    return (
        len(data) >= HEADER_SIZE
        and data[0] in (STDIN, STDOUT, STDERR)
        and data[1:4] == b'\x00\x00\x00'
    )


def iter_frames(source: Union[bytes, Iterable[bytes]]) -> Iterator[Tuple[int, bytes]]:
    """
    Decode frames from a body or a stream of chunks

    Chunk boundaries need not line up with frame boundaries. Data that does not
    start with a frame header (TTY output) is passed through as stdout.

    Yields:
        (stream type, payload)
    """
    chunks = [source] if isinstance(source, (bytes, bytearray)) else source

    buf = bytearray()
    multiplexed = None
    for chunk in chunks:
        if not chunk:
            continue

        if multiplexed is None:
            buf.extend(chunk)
            if len(buf) < HEADER_SIZE:
                continue
            multiplexed = is_multiplexed(bytes(buf))
            if not multiplexed:
                yield STDOUT, bytes(buf)
                buf.clear()
                continue
        elif not multiplexed:
            yield STDOUT, bytes(chunk)
            continue
        else:
            buf.extend(chunk)

        while len(buf) >= HEADER_SIZE:
            stream_type, length = parse_header(bytes(buf[:HEADER_SIZE]))
            end = HEADER_SIZE + length
            if len(buf) < end:
                break
            payload = bytes(buf[HEADER_SIZE:end])
            del buf[:end]
            if payload:
                yield stream_type, payload

    if buf:
        if multiplexed:
            raise TransportError("Stream ended inside a multiplexed frame")
        yield STDOUT, bytes(buf)


def demux(data: Union[bytes, Iterable[bytes]]) -> Tuple[bytes, bytes]:
    """Split output into (stdout, stderr)"""
    stdout = bytearray()
    stderr = bytearray()
    for stream_type, payload in iter_frames(data):
        if stream_type == STDERR:
            stderr.extend(payload)
        else:
            stdout.extend(payload)
    return bytes(stdout), bytes(stderr)


def strip_headers(data: bytes) -> bytes:
    """Payloads of all frames in order, headers removed"""
    return b''.join(payload for _, payload in iter_frames(data))
