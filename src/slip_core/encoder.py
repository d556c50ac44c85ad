"""SLIP encoder: raw payload to framed, escaped byte sequence."""
from __future__ import annotations

from slip_core.protocol import END, ESC, ESC_END, ESC_ESC, MIN_FRAME_LEN

_ESCAPES = {
    END: bytes((ESC, ESC_END)),
    ESC: bytes((ESC, ESC_ESC)),
}


def encode(payload) -> bytes:
    """Encode ``payload`` as one frame: END + escaped payload + END.

    Accepts any bytes-like object. Never fails for byte input; an empty
    payload encodes to two back-to-back END bytes.
    """
    data = bytes(memoryview(payload))
    out = bytearray((END,))
    for byte in data:
        esc = _ESCAPES.get(byte)
        if esc is None:
            out.append(byte)
        else:
            out += esc
    out.append(END)
    return bytes(out)


def encoded_size(payload) -> int:
    """Exact length of ``encode(payload)`` without building it."""
    data = bytes(memoryview(payload))
    return len(data) + data.count(END) + data.count(ESC) + MIN_FRAME_LEN
