"""Custom exception hierarchy for the ghostcomm transport codec."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


class GhostCommError(Exception):
    """Base class for all ghostcomm errors."""


class ConfigurationError(GhostCommError):
    """Raised when user-supplied configuration is invalid."""


class IntegrityError(GhostCommError):
    """Raised when a fully assembled transmission cannot be reconstructed."""


class DecompressionError(IntegrityError):
    """Raised when the inflate step rejects the reassembled payload."""


@dataclass
class MissingVolumesError(GhostCommError):
    have: int
    total: Optional[int]
    missing: Tuple[int, ...] = ()

    def __str__(self) -> str:
        if self.total is None:
            return "no volumes found"
        message = f"received {self.have}/{self.total} volumes"
        if self.missing:
            shown = ", ".join(str(i) for i in self.missing[:10])
            if len(self.missing) > 10:
                shown += ", ..."
            message += f"; missing indices: {shown}"
        return message


__all__ = [
    "ConfigurationError",
    "DecompressionError",
    "GhostCommError",
    "IntegrityError",
    "MissingVolumesError",
]
