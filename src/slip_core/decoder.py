"""SLIP single-buffer decoder.

Decoding is two passes over the frame range: ``decoded_size`` computes the
exact output length, then ``unescape_into`` fills a buffer of that size.
Frame boundary normalization (leading noise, doubled delimiters) is kept in
``find_frame_start`` / ``find_frame_end`` and never mixed into transcoding.
"""
from __future__ import annotations

from slip_core.errors import InvalidEncoding, NoEndDelimiter
from slip_core.protocol import END, ESC, ESC_END, ESC_ESC


def skip_empty_frame(buffer: bytes, index: int) -> int:
    """Given a delimiter at ``index``, return the true frame start.

    ``END END`` is padding: the second delimiter opens the frame.
    """
    nxt = index + 1
    if nxt < len(buffer) and buffer[nxt] == END:
        return nxt
    return index


def find_frame_start(buffer: bytes) -> int:
    """Index of the delimiter that opens the first frame."""
    idx = buffer.find(END)
    if idx == -1:
        raise NoEndDelimiter()
    return skip_empty_frame(buffer, idx)


def find_frame_end(buffer: bytes, start: int = 0) -> int:
    """Index of the delimiter that closes the frame opened at ``start``.

    Scans backward so trailing noise after the last frame is ignored. A
    doubled closing delimiter resolves to the earlier byte. If ``start`` is
    the only delimiter, the frame runs to the end of the buffer.
    """
    if buffer.find(END, start) == -1:
        raise NoEndDelimiter()

    idx = buffer.rfind(END, start + 1)
    if idx == -1:
        return len(buffer)
    if idx - 1 > start and buffer[idx - 1] == END:
        return idx - 1
    return idx


def decoded_size(frame) -> int:
    """Exact number of payload bytes ``frame`` decodes to.

    Escaped successors are skipped, not validated; ``unescape_into`` does that.
    """
    size = 0
    idx = 0
    n = len(frame)
    while idx < n:
        byte = frame[idx]
        if byte == ESC:
            size += 1
            idx += 2
            continue
        if byte != END:
            size += 1
        idx += 1
    return size


def unescape_into(frame, out: bytearray, offset: int = 0) -> int:
    """Transcode ``frame`` into ``out`` and return the number of bytes written.

    ``out`` must be at least ``decoded_size(frame)`` long. ``offset`` is the
    position of ``frame`` within the caller's buffer, used for error reports.
    """
    read_idx = 0
    write_idx = 0
    n = len(frame)
    while read_idx < n:
        byte = frame[read_idx]
        if byte == ESC:
            if read_idx + 1 >= n:
                raise InvalidEncoding("escape byte at end of frame", offset=offset + read_idx)
            nxt = frame[read_idx + 1]
            if nxt == ESC_ESC:
                out[write_idx] = ESC
            elif nxt == ESC_END:
                out[write_idx] = END
            else:
                raise InvalidEncoding(
                    f"escape followed by 0x{nxt:02X}", offset=offset + read_idx
                )
            read_idx += 2
            write_idx += 1
        elif byte == END:
            read_idx += 1
        else:
            out[write_idx] = byte
            read_idx += 1
            write_idx += 1
    return write_idx


def decode_frame(frame, offset: int = 0) -> bytes:
    """Decode an already delimited frame range into its payload."""
    out = bytearray(decoded_size(frame))
    unescape_into(frame, out, offset)
    return bytes(out)


def decode(buffer) -> bytes:
    """Decode one framed sequence back into its raw payload.

    Bytes before the first END and after the last END are ignored.

    :raises NoEndDelimiter: if ``buffer`` holds no END byte
    :raises InvalidEncoding: on an unknown or dangling escape sequence
    """
    data = bytes(memoryview(buffer))
    start = find_frame_start(data)
    end = find_frame_end(data, start)
    return decode_frame(memoryview(data)[start:end], offset=start)
