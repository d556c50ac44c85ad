"""Streaming SLIP decoder.

``decode_stream`` turns one buffer into the packets it completes plus a
remainder. The codec keeps nothing between calls: the caller prepends the
remainder to the next chunk. ``iter_packets`` does that threading for an
iterable of chunks.
"""
from __future__ import annotations

import warnings
from typing import Iterable, Iterator

from slip_core.decoder import decode_frame, find_frame_start, skip_empty_frame
from slip_core.errors import (
    FrameSkippedWarning,
    InvalidEncoding,
    NoEndDelimiter,
    TruncatedFrameWarning,
)
from slip_core.protocol import END

ON_ERROR_POLICIES = ("raise", "skip")


def _check_policy(on_error: str) -> None:
    if on_error not in ON_ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error!r}")


def decode_stream(buffer, on_error: str = "raise") -> tuple[list[bytes], bytes]:
    """Decode every complete frame in ``buffer``.

    Returns ``(packets, remainder)``. ``remainder`` starts at the delimiter
    opening the unterminated frame (or is the whole buffer when no delimiter
    was seen yet) and is empty when the buffer ends on a closing delimiter.

    A malformed escape inside a complete frame aborts the call with
    ``InvalidEncoding`` when ``on_error="raise"``. With ``on_error="skip"``
    the frame is dropped with a ``FrameSkippedWarning`` and decoding goes on.
    """
    _check_policy(on_error)
    data = bytes(memoryview(buffer))
    view = memoryview(data)
    packets: list[bytes] = []

    try:
        start = find_frame_start(data)
    except NoEndDelimiter:
        # Not enough data yet
        return packets, data

    last = len(data) - 1
    while True:
        end = data.find(END, start + 1)
        if end == -1:
            return packets, data[start:]

        # Back-to-back delimiters are padding, never an empty packet.
        if end > start + 1:
            try:
                packets.append(decode_frame(view[start + 1:end], offset=start + 1))
            except InvalidEncoding as e:
                if on_error == "raise":
                    raise
                warnings.warn(
                    f"Skipping malformed frame at offset {start}: {e}",
                    FrameSkippedWarning,
                    stacklevel=2,
                )

        if end == last:
            return packets, b""
        # The closing delimiter doubles as the next frame's opener.
        start = skip_empty_frame(data, end)


def iter_packets(
    chunks: Iterable, on_error: str = "raise", strict: bool = False
) -> Iterator[bytes]:
    """Return a generator of packets from an iterable of byte chunks, in order.

    At end of input an open frame holding data raises ``NoEndDelimiter`` when
    ``strict`` is set, otherwise it is dropped with a ``TruncatedFrameWarning``.
    """
    _check_policy(on_error)
    return _iter_packets(chunks, on_error, strict)


def _iter_packets(chunks: Iterable, on_error: str, strict: bool) -> Iterator[bytes]:
    pending = b""
    for chunk in chunks:
        packets, pending = decode_stream(pending + bytes(memoryview(chunk)), on_error)
        yield from packets

    if END in pending and pending.strip(bytes((END,))):
        if strict:
            raise NoEndDelimiter("input ended inside a frame")
        warnings.warn(
            f"Dropping {len(pending)} bytes of unterminated frame at end of input",
            TruncatedFrameWarning,
            stacklevel=2,
        )
