"""High level pack/unpack pipeline around the transport codec."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from . import compression
from .codec.alphabet import Alphabet, default_alphabet
from .codec.bitpack import BitPackCodec
from .config import Settings, resolve_profile
from .exceptions import ConfigurationError, MissingVolumesError
from .framing.chunker import VolumeChunker
from .framing.chunkset import DEFAULT_MAX_TOTAL
from .framing.volume import MediaType
from .session import ReceiveSession, SessionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unpacked:
    data: bytes
    media_type: MediaType
    volumes: int


def _resolve_max_chars(profile: Optional[str], max_chars: Optional[int]) -> int:
    if max_chars is not None:
        if max_chars <= 0:
            raise ConfigurationError("max_chars must be positive")
        return max_chars
    if profile is not None:
        return resolve_profile(profile).max_chars
    return Settings.from_env().transport.max_chars


def pack(
    data: bytes,
    media_type: Union[MediaType, str],
    *,
    profile: Optional[str] = None,
    max_chars: Optional[int] = None,
    compress: bool = True,
    alphabet: Optional[Alphabet] = None,
) -> List[str]:
    """Turn *data* into volume strings ready to paste into a text channel.

    *max_chars* takes precedence over *profile*; with neither, the profile
    from ``GHOSTCOMM_PROFILE`` (default ``safe``) is used.
    """

    alphabet = alphabet if alphabet is not None else default_alphabet()
    limit = _resolve_max_chars(profile, max_chars)
    payload = compression.compress(data) if compress else bytes(data)
    symbols = BitPackCodec(alphabet).encode(payload)
    volumes = VolumeChunker(alphabet).chunk(media_type, symbols, limit)
    logger.info(
        "packed %d bytes (%d after compression) into %d volume(s) of <= %d chars with alphabet %s",
        len(data),
        len(payload),
        len(volumes),
        limit,
        alphabet.fingerprint,
    )
    return volumes


def unpack(
    texts: Union[str, Iterable[str]],
    *,
    decompress: bool = True,
    alphabet: Optional[Alphabet] = None,
    max_total: int = DEFAULT_MAX_TOTAL,
) -> Unpacked:
    """Rebuild the payload from one or more pasted texts.

    Raises:
        MissingVolumesError: If some volumes of the transmission are absent.
        IntegrityError: If the complete transmission fails to decode or inflate.
    """

    if isinstance(texts, str):
        texts = [texts]
    session = ReceiveSession(alphabet, decompress=decompress, max_total=max_total)
    for text in texts:
        session.feed(text)
        if session.state in (SessionState.COMPLETE, SessionState.ERROR):
            break

    if session.state is SessionState.ERROR:
        assert session.error is not None
        raise session.error
    if session.state is not SessionState.COMPLETE:
        have, total = session.progress
        raise MissingVolumesError(have=have, total=total, missing=session.chunk_set.missing())

    assert session.data is not None and session.media_type is not None
    return Unpacked(data=session.data, media_type=session.media_type, volumes=session.chunk_set.have)


__all__ = ["Unpacked", "pack", "unpack"]
