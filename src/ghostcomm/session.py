"""Receive-side state machine driving extraction and reassembly."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from . import compression
from .codec.alphabet import Alphabet, default_alphabet
from .exceptions import IntegrityError
from .framing.chunkset import (
    DEFAULT_MAX_TOTAL,
    ChunkSet,
    Complete,
    InsertResult,
    insert_all,
    try_reassemble,
)
from .framing.extractor import SegmentResult, VolumeExtractor
from .framing.volume import MediaType

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class FeedReport:
    """What a single :meth:`ReceiveSession.feed` call did."""

    state: SessionState
    segments: Tuple[SegmentResult, ...]
    inserts: Tuple[InsertResult, ...]
    have: int
    total: Optional[int]
    data: Optional[bytes] = None
    media_type: Optional[MediaType] = None
    error: Optional[str] = None

    @property
    def stored(self) -> int:
        return sum(1 for result in self.inserts if result.stored)

    @property
    def rejected(self) -> int:
        bad_segments = sum(1 for result in self.segments if not result.ok)
        return bad_segments + sum(1 for result in self.inserts if not result.stored)


class ReceiveSession:
    """Accumulate pasted text until one transmission can be rebuilt.

    ``IDLE`` moves to ``ACCUMULATING`` once a valid volume is stored, and to
    ``COMPLETE`` when the last missing index arrives and the payload decodes
    (and inflates, when *decompress* is set).  A damaged final stream moves
    the session to ``ERROR``.  Bad individual fragments never change the
    state; they are reported and dropped.  ``COMPLETE`` and ``ERROR`` are
    terminal until :meth:`reset`.
    """

    def __init__(
        self,
        alphabet: Optional[Alphabet] = None,
        *,
        decompress: bool = True,
        max_total: int = DEFAULT_MAX_TOTAL,
    ) -> None:
        self.alphabet = alphabet if alphabet is not None else default_alphabet()
        self.decompress = decompress
        self.chunk_set = ChunkSet(max_total=max_total)
        self._extractor = VolumeExtractor(self.alphabet)
        self.state = SessionState.IDLE
        self.data: Optional[bytes] = None
        self.media_type: Optional[MediaType] = None
        self.error: Optional[IntegrityError] = None
        logger.debug("receive session using alphabet %s", self.alphabet.fingerprint)

    @property
    def progress(self) -> Tuple[int, Optional[int]]:
        return self.chunk_set.have, self.chunk_set.total

    def feed(self, text: str) -> FeedReport:
        if self.state in (SessionState.COMPLETE, SessionState.ERROR):
            logger.info("session is %s; ignoring input until reset", self.state.value)
            return self._report((), ())

        segments = tuple(self._extractor.scan(text))
        volumes = [result.volume for result in segments if result.volume is not None]
        inserts = tuple(insert_all(self.chunk_set, volumes))
        if any(result.stored for result in inserts):
            self.state = SessionState.ACCUMULATING

        if self.state is SessionState.ACCUMULATING:
            self._try_finish()
        return self._report(segments, inserts)

    def reset(self) -> None:
        self.chunk_set.reset()
        self.state = SessionState.IDLE
        self.data = None
        self.media_type = None
        self.error = None

    def _try_finish(self) -> None:
        try:
            outcome = try_reassemble(self.chunk_set, self.alphabet)
            if not isinstance(outcome, Complete):
                logger.debug("received %d/%s volumes", outcome.have, outcome.total)
                return
            payload = outcome.data
            if self.decompress:
                payload = compression.decompress(payload)
        except IntegrityError as exc:
            logger.error("transmission failed integrity checks: %s", exc)
            self.state = SessionState.ERROR
            self.error = exc
            return

        self.state = SessionState.COMPLETE
        self.data = payload
        self.media_type = outcome.media_type

    def _report(
        self, segments: Tuple[SegmentResult, ...], inserts: Tuple[InsertResult, ...]
    ) -> FeedReport:
        have, total = self.progress
        return FeedReport(
            state=self.state,
            segments=segments,
            inserts=inserts,
            have=have,
            total=total,
            data=self.data,
            media_type=self.media_type,
            error=str(self.error) if self.error is not None else None,
        )


__all__ = ["FeedReport", "ReceiveSession", "SessionState"]
