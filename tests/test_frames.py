import struct

import pytest

from docker_engine_api import frames
from docker_engine_api.exceptions import TransportError


def frame(stream_type, payload):
    return struct.pack('>BxxxI', stream_type, len(payload)) + payload


def test_parse_header():
    assert frames.parse_header(frame(frames.STDERR, b'abc')[:8]) == (frames.STDERR, 3)


def test_is_multiplexed():
    assert frames.is_multiplexed(frame(frames.STDOUT, b'hello'))
    assert not frames.is_multiplexed(b'hello world\n')
    assert not frames.is_multiplexed(b'\x01\x00')


def test_iter_frames_from_body():
    data = frame(frames.STDOUT, b'out 1\n') + frame(frames.STDERR, b'err\n') + frame(frames.STDOUT, b'out 2\n')

    assert list(frames.iter_frames(data)) == [
        (frames.STDOUT, b'out 1\n'),
        (frames.STDERR, b'err\n'),
        (frames.STDOUT, b'out 2\n'),
    ]


def test_iter_frames_across_chunk_boundaries():
    data = frame(frames.STDOUT, b'a' * 20) + frame(frames.STDERR, b'b' * 5)
    chunks = [data[i:i + 3] for i in range(0, len(data), 3)]

    assert list(frames.iter_frames(chunks)) == [
        (frames.STDOUT, b'a' * 20),
        (frames.STDERR, b'b' * 5),
    ]


def test_tty_output_passes_through():
    assert list(frames.iter_frames([b'plain ', b'tty output'])) == [
        (frames.STDOUT, b'plain tty output'),
    ]
    assert list(frames.iter_frames(b'hi')) == [(frames.STDOUT, b'hi')]


def test_truncated_frame():
    data = frame(frames.STDOUT, b'complete') + frame(frames.STDOUT, b'cut off')[:-2]

    with pytest.raises(TransportError):
        list(frames.iter_frames(data))


def test_demux_and_strip():
    data = frame(frames.STDOUT, b'one\n') + frame(frames.STDERR, b'oops\n') + frame(frames.STDOUT, b'two\n')

    assert frames.demux(data) == (b'one\ntwo\n', b'oops\n')
    assert frames.strip_headers(data) == b'one\noops\ntwo\n'
    assert frames.demux(b'') == (b'', b'')
