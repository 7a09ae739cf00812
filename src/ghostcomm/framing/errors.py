"""Exception types for the framing subsystem."""

from __future__ import annotations

from ..exceptions import GhostCommError


class FramingError(GhostCommError):
    """Base class for framing related errors."""


class VolumeFormatError(FramingError):
    """Raised when a volume header cannot be built or parsed."""
