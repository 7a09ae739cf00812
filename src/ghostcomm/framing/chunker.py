"""Split an encoded symbol stream into size-bounded volumes."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from ..codec.alphabet import Alphabet, default_alphabet
from ..exceptions import ConfigurationError
from .checksum import checksum
from .errors import VolumeFormatError
from .volume import MediaType, format_volume, header_overhead

logger = logging.getLogger(__name__)


def plan_volumes(symbol_count: int, max_chars: int) -> Tuple[int, int]:
    """Return ``(effective_size, total)`` for *symbol_count* symbols.

    The header width depends on the digit count of ``total``, which in turn
    depends on the payload room left by the header, so the two are iterated
    until they agree.

    Raises:
        ConfigurationError: If *max_chars* leaves no room for payload symbols.
    """

    if symbol_count < 0:
        raise ValueError("symbol_count must be non-negative")
    assumed_total = 1
    while True:
        effective = max_chars - header_overhead(assumed_total)
        if effective <= 0:
            raise ConfigurationError(
                f"max_chars={max_chars} is too small to carry any payload"
            )
        total = -(-symbol_count // effective)
        if len(str(max(total, 1))) <= len(str(assumed_total)):
            return effective, total
        assumed_total = total


class VolumeChunker:
    def __init__(self, alphabet: Optional[Alphabet] = None) -> None:
        self.alphabet = alphabet if alphabet is not None else default_alphabet()

    def chunk(
        self,
        media_type: Union[MediaType, str],
        symbols: str,
        max_chars: int,
        *,
        validate: bool = False,
    ) -> List[str]:
        """Split *symbols* into volume strings of at most *max_chars* characters.

        Args:
            media_type: The transmission's media type or its header letter.
            symbols: An encoded stream produced by the bit-pack codec.
            max_chars: Character limit of the target channel.
            validate: Reject symbols outside the chunker's alphabet.

        Returns:
            The volume strings in index order; empty input yields no volumes.
        """

        kind = MediaType.coerce(media_type)
        if validate and self.alphabet.clean(symbols) != symbols:
            raise VolumeFormatError("symbol stream contains characters outside the alphabet")

        effective, total = plan_volumes(len(symbols), max_chars)
        volumes: List[str] = []
        for index in range(total):
            payload = symbols[index * effective : (index + 1) * effective]
            volumes.append(format_volume(kind, total, index, payload, checksum(payload)))

        logger.debug(
            "split %d symbols into %d %s volume(s) of up to %d symbols",
            len(symbols),
            total,
            kind.name.lower(),
            effective,
        )
        return volumes


def chunk(
    media_type: Union[MediaType, str],
    symbols: str,
    max_chars: int,
    *,
    alphabet: Optional[Alphabet] = None,
    validate: bool = False,
) -> List[str]:
    return VolumeChunker(alphabet).chunk(media_type, symbols, max_chars, validate=validate)


__all__ = ["VolumeChunker", "chunk", "plan_volumes"]
