"""Shared constants, exceptions and parameter checks for the LZSS codec."""

VERSION = (0, 4, 1)

MIN_WINDOW_BITS = 4
MAX_WINDOW_BITS = 15
MIN_LOOKAHEAD_BITS = 3

LITERAL_MARKER = 0x01
BACKREF_MARKER = 0x00


class HeatshrinkError(Exception):
    """Base class for errors raised by the codec."""


class MisuseError(HeatshrinkError):
    """Raised when the streaming API is used in the wrong order."""


def validate_params(window_sz2, lookahead_sz2):
    """Check window and lookahead sizes (both base-2 logs).

    Raises ValueError when the combination cannot be used.
    """
    if not MIN_WINDOW_BITS <= window_sz2 <= MAX_WINDOW_BITS:
        raise ValueError(
            f"window_sz2 must be between {MIN_WINDOW_BITS} and "
            f"{MAX_WINDOW_BITS}, got {window_sz2}"
        )
    if lookahead_sz2 < MIN_LOOKAHEAD_BITS:
        raise ValueError(
            f"lookahead_sz2 must be at least {MIN_LOOKAHEAD_BITS}, "
            f"got {lookahead_sz2}"
        )
    if lookahead_sz2 >= window_sz2:
        raise ValueError(
            f"lookahead_sz2 ({lookahead_sz2}) must be smaller than "
            f"window_sz2 ({window_sz2})"
        )