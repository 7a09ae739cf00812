"""Volume model and the ``GC:`` wire format."""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union

from ..codec.alphabet import FIELD_DELIMITER
from .checksum import CHECKSUM_LEN, checksum
from .errors import VolumeFormatError

PREFIX = "GC"
PREFIX_DELIMITER = PREFIX + FIELD_DELIMITER


class MediaType(str, Enum):
    """Kind of media a transmission carries, encoded as one header letter."""

    IMAGE = "I"
    AUDIO = "A"
    VIDEO = "V"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @classmethod
    def coerce(cls, value: Union["MediaType", str]) -> "MediaType":
        """Accept a member, its header letter, or its name (``"image"``)."""

        if isinstance(value, MediaType):
            return value
        if isinstance(value, str):
            text = value.strip()
            try:
                return cls(text.upper())
            except ValueError:
                pass
            try:
                return cls[text.upper()]
            except KeyError:
                pass
        raise VolumeFormatError(f"unknown media type: {value!r}")

    @classmethod
    def from_filename(cls, filename: str) -> Optional["MediaType"]:
        mime, _ = mimetypes.guess_type(filename)
        if not mime:
            return None
        major = mime.split("/", 1)[0]
        return {"image": cls.IMAGE, "audio": cls.AUDIO, "video": cls.VIDEO}.get(major)


_MIME_TYPES = {
    MediaType.IMAGE: "image/webp",
    MediaType.AUDIO: "audio/webm",
    MediaType.VIDEO: "video/mp4",
}


class TransmissionKey(NamedTuple):
    media_type: MediaType
    total: int


@dataclass(frozen=True)
class Volume:
    """One validated fragment of an encoded stream."""

    media_type: MediaType
    total: int
    index: int
    checksum: str
    payload: str

    def __post_init__(self) -> None:
        if not isinstance(self.media_type, MediaType):
            object.__setattr__(self, "media_type", MediaType.coerce(self.media_type))
        if self.total <= 0:
            raise VolumeFormatError("'total' must be positive")
        if not 0 <= self.index < self.total:
            raise VolumeFormatError("'index' must satisfy 0 <= index < total")

    @property
    def key(self) -> TransmissionKey:
        return TransmissionKey(self.media_type, self.total)

    @property
    def is_intact(self) -> bool:
        return checksum(self.payload) == self.checksum

    def to_text(self) -> str:
        return format_volume(self.media_type, self.total, self.index, self.payload, self.checksum)


def header_overhead(total: int) -> int:
    """Characters reserved for a volume header of a transmission of *total* volumes.

    The index never has more digits than *total*, so ``digits(total)`` is
    reserved for both numeric fields.
    """

    digits = len(str(max(total, 1)))
    return len(PREFIX) + 1 + 1 + 1 + digits + 1 + digits + 1 + CHECKSUM_LEN + 1


def format_volume(
    media_type: Union[MediaType, str],
    total: int,
    index: int,
    payload: str,
    digest: Optional[str] = None,
) -> str:
    """Render ``GC:{type}:{total}:{index}:{checksum}:{payload}``."""

    kind = MediaType.coerce(media_type)
    if total <= 0 or not 0 <= index < total:
        raise VolumeFormatError(f"invalid index/total combination: {index}/{total}")
    if FIELD_DELIMITER in payload:
        raise VolumeFormatError("payload must not contain the field delimiter")
    if digest is None:
        digest = checksum(payload)
    return FIELD_DELIMITER.join((PREFIX, kind.value, str(total), str(index), digest, payload))


__all__ = [
    "MediaType",
    "PREFIX",
    "PREFIX_DELIMITER",
    "TransmissionKey",
    "Volume",
    "format_volume",
    "header_overhead",
]
