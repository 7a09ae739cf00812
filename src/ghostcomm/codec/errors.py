"""Custom exception hierarchy for the codec package."""

from __future__ import annotations

from ..exceptions import GhostCommError


class CodecError(GhostCommError):
    """Base class for codec-specific exceptions."""


class AlphabetError(CodecError):
    """Raised when an alphabet table violates its construction rules."""


class PayloadTooLargeError(CodecError):
    """Raised when a payload length does not fit the 32-bit length header."""


class TruncatedStreamError(CodecError):
    """Raised by strict decoding when the stream is shorter than its header claims."""
