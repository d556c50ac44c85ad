"""SLIP Core - framing codec (RFC 1055)."""
from .protocol import END, ESC, ESC_END, ESC_ESC
from .errors import (
    ERRORS,
    SlipError,
    NoEndDelimiter,
    InvalidEncoding,
    FrameSkippedWarning,
    TruncatedFrameWarning,
)
from .encoder import encode, encoded_size
from .decoder import decode, decoded_size, find_frame_start, find_frame_end
from .stream import decode_stream, iter_packets

__all__ = [
    "END",
    "ESC",
    "ESC_END",
    "ESC_ESC",
    "ERRORS",
    "SlipError",
    "NoEndDelimiter",
    "InvalidEncoding",
    "FrameSkippedWarning",
    "TruncatedFrameWarning",
    "encode",
    "encoded_size",
    "decode",
    "decoded_size",
    "find_frame_start",
    "find_frame_end",
    "decode_stream",
    "iter_packets",
]
