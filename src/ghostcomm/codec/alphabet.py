"""The fixed 32768-symbol alphabet mapping 15-bit values to code points."""

from __future__ import annotations

import hashlib
from functools import lru_cache
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import ConfigurationError
from .errors import AlphabetError

SYMBOL_BITS = 15
ALPHABET_SIZE = 1 << SYMBOL_BITS
FIELD_DELIMITER = ":"

CodepointRange = Tuple[int, int]
"""Half-open ``[start, stop)`` range of code points."""

STABLE_RANGES: Tuple[CodepointRange, ...] = (
    (0x4E00, 0xA000),  # CJK Unified Ideographs
    (0xAC00, 0xD7A4),  # Hangul Syllables
    (0x3400, 0x4DC0),  # CJK Unified Ideographs Extension A
)

# Single contiguous block starting at U+4E00, as emitted by the GhostComm web client.
LEGACY_RANGES: Tuple[CodepointRange, ...] = ((0x4E00, 0x4E00 + ALPHABET_SIZE),)

DEFAULT_RANGES = STABLE_RANGES

PRESETS: Dict[str, Tuple[CodepointRange, ...]] = {
    "stable": STABLE_RANGES,
    "ghostcomm-v1": LEGACY_RANGES,
}
DEFAULT_ALPHABET = "stable"


def text_to_codepoints(text: str) -> np.ndarray:
    """Return the code points of *text* as a ``uint32`` array."""

    return np.frombuffer(text.encode("utf-32-le", "surrogatepass"), dtype="<u4")


def codepoints_to_text(codepoints: np.ndarray) -> str:
    """Inverse of :func:`text_to_codepoints`."""

    return np.asarray(codepoints, dtype="<u4").tobytes().decode("utf-32-le")


def _is_excluded(codepoint: int) -> bool:
    if 0xD800 <= codepoint <= 0xDFFF:
        return True
    char = chr(codepoint)
    return char == FIELD_DELIMITER or char.isspace()


class Alphabet:
    """Immutable bijection between ``0..32767`` and a table of symbols.

    Instances are cheap to share: both lookup directions are held in read-only
    numpy arrays, so a single alphabet can back any number of codecs, chunkers
    and receive sessions.  Two alphabets compare equal when their tables are
    identical; sender and receiver must agree on one, since nothing on the
    wire identifies the table in use.
    """

    __slots__ = ("_codepoints", "_lookup", "_fingerprint")

    def __init__(self, symbols: str) -> None:
        if not isinstance(symbols, str):
            raise AlphabetError("alphabet symbols must be given as a string")
        codepoints = text_to_codepoints(symbols).copy()
        if codepoints.size != ALPHABET_SIZE:
            raise AlphabetError(
                f"alphabet must contain exactly {ALPHABET_SIZE} symbols, got {codepoints.size}"
            )
        if np.unique(codepoints).size != ALPHABET_SIZE:
            raise AlphabetError("alphabet contains duplicate symbols")
        excluded = [int(cp) for cp in codepoints if _is_excluded(int(cp))]
        if excluded:
            raise AlphabetError(
                f"alphabet contains reserved or whitespace code point U+{excluded[0]:04X}"
            )

        lookup = np.full(int(codepoints.max()) + 1, -1, dtype=np.int32)
        lookup[codepoints] = np.arange(ALPHABET_SIZE, dtype=np.int32)

        codepoints.setflags(write=False)
        lookup.setflags(write=False)
        self._codepoints = codepoints
        self._lookup = lookup
        self._fingerprint = hashlib.sha256(codepoints.tobytes()).hexdigest()[:16]

    @property
    def codepoints(self) -> np.ndarray:
        """Read-only ``uint32`` array, ``codepoints[i]`` being the symbol for *i*."""

        return self._codepoints

    @property
    def symbols(self) -> str:
        return codepoints_to_text(self._codepoints)

    @property
    def fingerprint(self) -> str:
        """Short hex digest identifying the table, useful when comparing peers."""

        return self._fingerprint

    def symbol_of(self, index: int) -> str:
        if not 0 <= index < ALPHABET_SIZE:
            raise ValueError(f"symbol index out of range: {index}")
        return chr(int(self._codepoints[index]))

    def index_of(self, symbol: str) -> Optional[int]:
        """Return the index of *symbol*, or ``None`` when it is not in the table."""

        if len(symbol) != 1:
            return None
        codepoint = ord(symbol)
        if codepoint >= self._lookup.size:
            return None
        index = int(self._lookup[codepoint])
        return index if index >= 0 else None

    def indices_of(self, text: str) -> np.ndarray:
        """Map *text* to an ``int64`` index array, dropping unrecognised characters."""

        codepoints = text_to_codepoints(text)
        if codepoints.size == 0:
            return np.zeros(0, dtype=np.int64)
        known = codepoints < self._lookup.size
        indices = np.full(codepoints.size, -1, dtype=np.int64)
        indices[known] = self._lookup[codepoints[known]]
        return indices[indices >= 0]

    def symbols_for(self, indices: Sequence[int] | np.ndarray) -> str:
        array = np.asarray(indices, dtype=np.int64)
        if array.size and (array.min() < 0 or array.max() >= ALPHABET_SIZE):
            raise ValueError("symbol indices must lie in 0..32767")
        return codepoints_to_text(self._codepoints[array])

    def clean(self, text: str) -> str:
        """Return *text* with every character outside the alphabet removed."""

        return self.symbols_for(self.indices_of(text))

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and self.index_of(symbol) is not None

    def __len__(self) -> int:
        return ALPHABET_SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return bool(np.array_equal(self._codepoints, other._codepoints))

    def __hash__(self) -> int:
        return hash(self._fingerprint)

    def __repr__(self) -> str:
        return f"Alphabet(fingerprint={self._fingerprint!r})"


def build(ranges: Iterable[CodepointRange] = DEFAULT_RANGES) -> Alphabet:
    """Build an alphabet by concatenating code-point *ranges*.

    The field delimiter, whitespace and surrogates are skipped, and the result
    is truncated at exactly :data:`ALPHABET_SIZE` symbols.

    Raises:
        AlphabetError: If the ranges supply fewer than 32768 usable symbols or
            overlap each other.
    """

    collected = []
    for start, stop in ranges:
        if start < 0 or stop > 0x110000 or start >= stop:
            raise AlphabetError(f"invalid code point range: {start:#x}..{stop:#x}")
        for codepoint in range(start, stop):
            if _is_excluded(codepoint):
                continue
            collected.append(chr(codepoint))
            if len(collected) == ALPHABET_SIZE:
                return Alphabet("".join(collected))
    raise AlphabetError(
        f"ranges supply only {len(collected)} usable symbols, {ALPHABET_SIZE} required"
    )


@lru_cache(maxsize=None)
def get_alphabet(name: str = DEFAULT_ALPHABET) -> Alphabet:
    """Return the shared alphabet for preset *name*."""

    name_norm = name.strip().lower()
    if name_norm not in PRESETS:
        known = ", ".join(sorted(PRESETS))
        raise ConfigurationError(f"unknown alphabet preset: {name} (known: {known})")
    return build(PRESETS[name_norm])


def default_alphabet() -> Alphabet:
    return get_alphabet(DEFAULT_ALPHABET)


__all__ = [
    "ALPHABET_SIZE",
    "Alphabet",
    "CodepointRange",
    "DEFAULT_ALPHABET",
    "FIELD_DELIMITER",
    "LEGACY_RANGES",
    "PRESETS",
    "STABLE_RANGES",
    "SYMBOL_BITS",
    "build",
    "codepoints_to_text",
    "default_alphabet",
    "get_alphabet",
    "text_to_codepoints",
]
