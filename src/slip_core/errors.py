"""Error model for the SLIP codec.

The set is closed: every failure the codec reports is one of the classes
below. Codes and messages are kept in ``ERRORS`` so tools can report them
without importing exception classes.
"""
from __future__ import annotations

ERRORS = {
    "E_NO_END_DELIMITER": "no 'END' (0xC0) delimiter byte found in buffer",
    "E_INVALID_ENCODING": "buffer not encoded to SLIP protocol",
}


class SlipError(ValueError):
    """Base class for framing errors."""

    code = ""

    def __init__(self, detail: str | None = None, offset: int | None = None):
        self.offset = offset
        message = ERRORS.get(self.code, "framing error")
        if detail:
            message = f"{message}: {detail}"
        if offset is not None:
            message = f"{message} (offset {offset})"
        super().__init__(message)


class NoEndDelimiter(SlipError):
    code = "E_NO_END_DELIMITER"


class InvalidEncoding(SlipError):
    code = "E_INVALID_ENCODING"


class FrameSkippedWarning(UserWarning):
    """A malformed frame was dropped while streaming."""


class TruncatedFrameWarning(UserWarning):
    """Input ended while a frame was still open."""
