"""Recover volumes from arbitrary pasted text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional

from ..codec.alphabet import FIELD_DELIMITER, Alphabet, default_alphabet
from .checksum import checksum
from .volume import PREFIX_DELIMITER, MediaType, TransmissionKey, Volume

logger = logging.getLogger(__name__)

# Bounded so oversized fields are rejected before int() conversion.
_DECIMAL = re.compile(r"[0-9]{1,9}")
_MIN_FIELDS = 5


class SegmentStatus(str, Enum):
    OK = "ok"
    MALFORMED = "malformed"
    CHECKSUM_MISMATCH = "checksum-mismatch"


@dataclass(frozen=True)
class SegmentResult:
    """Outcome of parsing one ``GC:``-delimited segment."""

    position: int
    status: SegmentStatus
    volume: Optional[Volume] = None
    reason: str = ""
    declared_checksum: Optional[str] = None
    computed_checksum: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is SegmentStatus.OK


def _malformed(position: int, reason: str) -> SegmentResult:
    logger.debug("segment %d skipped: %s", position, reason)
    return SegmentResult(position=position, status=SegmentStatus.MALFORMED, reason=reason)


def _parse_segment(position: int, segment: str, alphabet: Alphabet) -> SegmentResult:
    parts = segment.split(FIELD_DELIMITER)
    if len(parts) < _MIN_FIELDS:
        return _malformed(position, f"expected at least {_MIN_FIELDS} fields, found {len(parts)}")

    type_field, total_field, index_field, declared = (part.strip() for part in parts[:4])
    try:
        media_type = MediaType(type_field)
    except ValueError:
        return _malformed(position, f"unknown media type {type_field!r}")
    if not _DECIMAL.fullmatch(total_field) or not _DECIMAL.fullmatch(index_field):
        return _malformed(position, "total and index must be decimal integers of at most 9 digits")
    total, index = int(total_field), int(index_field)
    if total <= 0 or index >= total:
        return _malformed(position, f"index {index} outside 0..{total - 1}")

    # The alphabet never contains the delimiter, so any extra fields are noise.
    payload = alphabet.clean(FIELD_DELIMITER.join(parts[4:]))
    if not payload:
        return _malformed(position, "payload holds no alphabet symbols")

    computed = checksum(payload)
    if computed != declared:
        logger.warning(
            "checksum mismatch for volume %d/%d: declared %s, computed %s",
            index,
            total,
            declared,
            computed,
        )
        return SegmentResult(
            position=position,
            status=SegmentStatus.CHECKSUM_MISMATCH,
            reason="checksum mismatch",
            declared_checksum=declared,
            computed_checksum=computed,
        )

    volume = Volume(
        media_type=media_type,
        total=total,
        index=index,
        checksum=declared,
        payload=payload,
    )
    return SegmentResult(
        position=position,
        status=SegmentStatus.OK,
        volume=volume,
        declared_checksum=declared,
        computed_checksum=computed,
    )


class VolumeExtractor:
    def __init__(self, alphabet: Optional[Alphabet] = None) -> None:
        self.alphabet = alphabet if alphabet is not None else default_alphabet()

    def scan(self, text: str) -> List[SegmentResult]:
        """Parse every non-blank segment of *text* into a tagged result."""

        results: List[SegmentResult] = []
        for position, segment in enumerate(text.split(PREFIX_DELIMITER)):
            if not segment.strip():
                continue
            results.append(_parse_segment(position, segment, self.alphabet))
        return results

    def extract(self, text: str) -> List[Volume]:
        """Return the volumes in *text* whose checksum verifies, in text order."""

        return [result.volume for result in self.scan(text) if result.volume is not None]


def scan(text: str, alphabet: Optional[Alphabet] = None) -> List[SegmentResult]:
    return VolumeExtractor(alphabet).scan(text)


def extract(text: str, alphabet: Optional[Alphabet] = None) -> List[Volume]:
    return VolumeExtractor(alphabet).extract(text)


def group_transmissions(volumes: Iterable[Volume]) -> Dict[TransmissionKey, List[Volume]]:
    """Separate interleaved transmissions by their ``(type, total)`` header pair."""

    groups: Dict[TransmissionKey, List[Volume]] = {}
    for volume in volumes:
        groups.setdefault(volume.key, []).append(volume)
    return groups


__all__ = [
    "SegmentResult",
    "SegmentStatus",
    "VolumeExtractor",
    "extract",
    "group_transmissions",
    "scan",
]
