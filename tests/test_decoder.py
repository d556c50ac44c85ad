import pytest

from slip_core import (
    END,
    ESC,
    ESC_END,
    ESC_ESC,
    InvalidEncoding,
    NoEndDelimiter,
    SlipError,
    decode,
    decoded_size,
    encode,
    find_frame_end,
    find_frame_start,
)
from slip_core.decoder import decode_frame, unescape_into

FRAME = bytes([0xC0, 0x01, 0xDB, 0xDD, 0x49, 0xDB, 0xDC, 0x15, 0xC0])
PAYLOAD = bytes([0x01, 0xDB, 0x49, 0xC0, 0x15])


def test_decode_frame():
    assert decode(FRAME) == PAYLOAD


def test_decode_ignores_leading_noise_and_doubled_start():
    data = bytes([0xA1, 0xA2, 0xA3, END, END, 0x01, ESC, ESC_ESC, 0x49, ESC, ESC_END, 0x15, END])
    assert decode(data) == bytes([0x01, ESC, 0x49, END, 0x15])


def test_decode_ignores_trailing_noise():
    assert decode(FRAME + b"\x01\x02\x03") == PAYLOAD


def test_doubled_delimiters_decode_like_single():
    assert decode(bytes([END]) + FRAME) == decode(FRAME)
    assert decode(FRAME + bytes([END])) == decode(FRAME)


def test_decode_open_frame_runs_to_buffer_end():
    # Delimiter-at-start layout: no closing END
    data = bytes([0xA1, 0xA2, 0xA3, 0xC0, 0x01, 0xDB, 0xDD, 0x49, 0xDB, 0xDC, 0x15])
    assert decode(data) == PAYLOAD


def test_decode_without_delimiter_fails():
    with pytest.raises(NoEndDelimiter) as exc:
        decode(bytes([0x01, 0x02, 0x03]))
    assert exc.value.code == "E_NO_END_DELIMITER"
    assert isinstance(exc.value, SlipError)
    assert isinstance(exc.value, ValueError)


def test_decode_empty_buffer_fails():
    with pytest.raises(NoEndDelimiter):
        decode(b"")


def test_decode_invalid_escape_reports_offset():
    with pytest.raises(InvalidEncoding) as exc:
        decode(bytes([END, 0x01, ESC, 0x02, END]))
    assert exc.value.code == "E_INVALID_ENCODING"
    assert exc.value.offset == 2


@pytest.mark.parametrize(
    "data",
    [
        bytes([END, 0x01, ESC, END]),
        bytes([END, 0x01, ESC]),
        bytes([END, ESC]),
    ],
)
def test_dangling_escape_is_invalid(data):
    with pytest.raises(InvalidEncoding):
        decode(data)


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"\x00",
        b"hello world",
        bytes([END]),
        bytes([ESC]),
        bytes([END, END, ESC, ESC]),
        bytes([ESC, ESC_END, ESC, ESC_ESC]),
        bytes(range(256)),
    ],
)
def test_roundtrip(payload):
    assert decode(encode(payload)) == payload


def test_find_frame_start():
    assert find_frame_start(bytes([0x01, END, 0x02])) == 1
    assert find_frame_start(bytes([0x01, END, END, 0x02])) == 2
    with pytest.raises(NoEndDelimiter):
        find_frame_start(b"\x01\x02")


def test_find_frame_end():
    assert find_frame_end(bytes([END, 0x01, END, 0x09]), 0) == 2
    assert find_frame_end(bytes([END, 0x01, END, END]), 0) == 2
    # Only the start delimiter: open frame
    assert find_frame_end(bytes([END, 0x01, 0x02]), 0) == 3
    # Empty frame: END END normalized to start=1
    assert find_frame_end(bytes([END, END]), 1) == 2
    with pytest.raises(NoEndDelimiter):
        find_frame_end(b"\x01\x02", 0)


def test_decoded_size_counts_escapes_once():
    assert decoded_size(FRAME) == len(PAYLOAD)
    assert decoded_size(bytes([END, END])) == 0
    assert decoded_size(b"") == 0


@pytest.mark.parametrize("payload", [b"abc", bytes([END, ESC]) * 10, bytes(range(256))])
def test_size_pass_matches_transcode(payload):
    frame = encode(payload)
    out = bytearray(decoded_size(frame))
    written = unescape_into(frame, out)
    assert written == len(out) == len(payload)
    assert bytes(out) == payload


def test_decode_frame_uses_offset_in_errors():
    with pytest.raises(InvalidEncoding) as exc:
        decode_frame(bytes([0x01, ESC, 0x7F]), offset=100)
    assert exc.value.offset == 101
    assert "0x7F" in str(exc.value)
