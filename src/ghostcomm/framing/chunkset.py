"""Receiver-side accumulation and reassembly of volumes."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ..codec.alphabet import Alphabet
from ..codec.bitpack import BitPackCodec
from ..codec.errors import TruncatedStreamError
from ..exceptions import IntegrityError
from .volume import MediaType, TransmissionKey, Volume

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOTAL = 65536


class InsertStatus(str, Enum):
    ACCEPTED = "accepted"
    REPLACED = "replaced"
    OUT_OF_RANGE = "out-of-range"
    INCONSISTENT = "inconsistent"
    TOTAL_TOO_LARGE = "total-too-large"


@dataclass(frozen=True)
class InsertResult:
    status: InsertStatus
    volume: Volume
    reason: str = ""

    @property
    def stored(self) -> bool:
        return self.status in (InsertStatus.ACCEPTED, InsertStatus.REPLACED)


class ChunkSet:
    """Mutable ``index -> Volume`` map for a single transmission.

    The set binds to the ``(type, total)`` pair of the first volume it
    accepts; later volumes that disagree are rejected as inconsistent and
    counted in :attr:`inconsistencies`.  Inserts are serialised by one lock and
    are commutative per index, so the reassembled result does not depend on
    arrival order.  Nothing is dropped until :meth:`reset` is called.
    """

    def __init__(self, *, max_total: int = DEFAULT_MAX_TOTAL) -> None:
        if max_total <= 0:
            raise ValueError("max_total must be positive")
        self.max_total = max_total
        self._lock = threading.Lock()
        self._volumes: Dict[int, Volume] = {}
        self._key: Optional[TransmissionKey] = None
        self.inconsistencies = 0

    def insert(self, volume: Volume) -> InsertResult:
        with self._lock:
            if volume.total > self.max_total:
                logger.warning(
                    "rejecting volume declaring %d volumes (limit %d)", volume.total, self.max_total
                )
                return InsertResult(
                    InsertStatus.TOTAL_TOO_LARGE,
                    volume,
                    f"total {volume.total} exceeds limit {self.max_total}",
                )
            if not 0 <= volume.index < volume.total:
                return InsertResult(
                    InsertStatus.OUT_OF_RANGE,
                    volume,
                    f"index {volume.index} outside 0..{volume.total - 1}",
                )

            key = TransmissionKey(volume.media_type, volume.total)
            if self._key is None:
                self._key = key
            elif key != self._key:
                self.inconsistencies += 1
                logger.warning(
                    "volume %s:%d/%d does not belong to transmission %s:%d",
                    key.media_type.value,
                    volume.index,
                    key.total,
                    self._key.media_type.value,
                    self._key.total,
                )
                return InsertResult(
                    InsertStatus.INCONSISTENT,
                    volume,
                    f"expected {self._key.media_type.value}/{self._key.total}, "
                    f"got {key.media_type.value}/{key.total}",
                )

            replaced = volume.index in self._volumes
            self._volumes[volume.index] = volume
            return InsertResult(InsertStatus.REPLACED if replaced else InsertStatus.ACCEPTED, volume)

    def reset(self) -> None:
        with self._lock:
            self._volumes.clear()
            self._key = None
            self.inconsistencies = 0

    @property
    def key(self) -> Optional[TransmissionKey]:
        return self._key

    @property
    def total(self) -> Optional[int]:
        return self._key.total if self._key is not None else None

    @property
    def media_type(self) -> Optional[MediaType]:
        return self._key.media_type if self._key is not None else None

    @property
    def have(self) -> int:
        with self._lock:
            return len(self._volumes)

    def missing(self) -> Tuple[int, ...]:
        with self._lock:
            if self._key is None:
                return ()
            return tuple(i for i in range(self._key.total) if i not in self._volumes)

    @property
    def is_complete(self) -> bool:
        with self._lock:
            return self._key is not None and len(self._volumes) == self._key.total

    def volumes(self) -> List[Volume]:
        """Stored volumes in ascending index order."""

        with self._lock:
            return [self._volumes[i] for i in sorted(self._volumes)]

    def __len__(self) -> int:
        return self.have

    def __contains__(self, index: object) -> bool:
        with self._lock:
            return index in self._volumes


def insert_all(chunk_set: ChunkSet, candidates: Iterable[Volume]) -> List[InsertResult]:
    """Insert each candidate, returning one tagged result per candidate."""

    return [chunk_set.insert(candidate) for candidate in candidates]


@dataclass(frozen=True)
class Complete:
    data: bytes
    media_type: MediaType
    symbols: str
    total: int


@dataclass(frozen=True)
class Incomplete:
    have: int
    total: Optional[int]
    missing: Tuple[int, ...] = ()


Reassembly = Union[Complete, Incomplete]


def try_reassemble(chunk_set: ChunkSet, alphabet: Optional[Alphabet] = None) -> Reassembly:
    """Decode the transmission once every index ``0..total-1`` is present.

    Raises:
        IntegrityError: If the complete stream fails strict decoding.
    """

    volumes = chunk_set.volumes()
    key = chunk_set.key
    if key is None or len(volumes) != key.total:
        return Incomplete(have=len(volumes), total=chunk_set.total, missing=chunk_set.missing())

    symbols = "".join(volume.payload for volume in volumes)
    try:
        data = BitPackCodec(alphabet).decode(symbols, strict=True)
    except TruncatedStreamError as exc:
        raise IntegrityError(f"reassembled stream is damaged: {exc}") from exc

    logger.info(
        "reassembled %s transmission: %d volume(s), %d bytes",
        key.media_type.name.lower(),
        key.total,
        len(data),
    )
    return Complete(data=data, media_type=key.media_type, symbols=symbols, total=key.total)


__all__ = [
    "ChunkSet",
    "Complete",
    "DEFAULT_MAX_TOTAL",
    "Incomplete",
    "InsertResult",
    "InsertStatus",
    "Reassembly",
    "insert_all",
    "try_reassemble",
]
