"""Pack length-prefixed byte buffers into 15-bit alphabet symbols and back."""

from __future__ import annotations

import logging
import struct
from typing import Optional

import numpy as np

from .alphabet import SYMBOL_BITS, Alphabet, default_alphabet
from .errors import PayloadTooLargeError, TruncatedStreamError

logger = logging.getLogger(__name__)

HEADER_BYTES = 4
MAX_PAYLOAD_BYTES = 0xFFFFFFFF

# 15 bytes == 120 bits == 8 symbols, so blocks of these sizes never need padding.
_ALIGN_BYTES = 15
_ALIGN_SYMBOLS = 8
_BLOCK_BYTES = _ALIGN_BYTES * 8192
_BLOCK_SYMBOLS = _ALIGN_SYMBOLS * 8192

_WEIGHTS = (1 << np.arange(SYMBOL_BITS - 1, -1, -1)).astype(np.int64)
_SHIFTS = np.arange(SYMBOL_BITS - 1, -1, -1, dtype=np.int64)


def encoded_length(payload_len: int) -> int:
    """Number of symbols :func:`encode` emits for a payload of *payload_len* bytes."""

    bits = 8 * (payload_len + HEADER_BYTES)
    return -(-bits // SYMBOL_BITS)


def _bytes_to_indices(block: bytes) -> np.ndarray:
    bits = np.unpackbits(np.frombuffer(block, dtype=np.uint8))
    pad = (-bits.size) % SYMBOL_BITS
    if pad:
        bits = np.concatenate([bits, np.zeros(pad, dtype=np.uint8)])
    return bits.reshape(-1, SYMBOL_BITS).astype(np.int64) @ _WEIGHTS


def _indices_to_bytes(indices: np.ndarray) -> bytes:
    bits = ((indices[:, None] >> _SHIFTS) & 1).astype(np.uint8).ravel()
    usable = bits.size - bits.size % 8
    return np.packbits(bits[:usable]).tobytes()


class BitPackCodec:
    """Encoder/decoder bound to one :class:`Alphabet`.

    Bits are taken most-significant first; the final partial group is padded
    with zeros on its low end.  Decoding ignores any character outside the
    alphabet, so whitespace or reformatting injected by a text channel is
    harmless.
    """

    def __init__(self, alphabet: Optional[Alphabet] = None) -> None:
        self.alphabet = alphabet if alphabet is not None else default_alphabet()

    def encode(self, data: bytes) -> str:
        """Encode *data* behind a big-endian ``u32`` length header."""

        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("data must be bytes-like")
        data = bytes(data)
        if len(data) > MAX_PAYLOAD_BYTES:
            raise PayloadTooLargeError(
                f"payload of {len(data)} bytes does not fit the 32-bit length header"
            )

        combined = struct.pack(">I", len(data)) + data
        pieces = []
        for start in range(0, len(combined), _BLOCK_BYTES):
            indices = _bytes_to_indices(combined[start : start + _BLOCK_BYTES])
            pieces.append(self.alphabet.symbols_for(indices))
        encoded = "".join(pieces)
        logger.debug("encoded %d bytes into %d symbols", len(data), len(encoded))
        return encoded

    def decode(self, symbols: str, *, strict: bool = False) -> bytes:
        """Decode *symbols* back into the payload bytes.

        With ``strict=False`` a stream too short to hold its header decodes to
        ``b""`` and a header claiming more bytes than available yields the
        bytes that are present.  ``strict=True`` raises
        :class:`TruncatedStreamError` in both cases instead.
        """

        indices = self.alphabet.indices_of(symbols)
        pieces = []
        for start in range(0, indices.size, _BLOCK_SYMBOLS):
            pieces.append(_indices_to_bytes(indices[start : start + _BLOCK_SYMBOLS]))
        full = b"".join(pieces)

        if len(full) < HEADER_BYTES:
            if strict:
                raise TruncatedStreamError(
                    f"stream holds {len(full)} bytes, too short for the length header"
                )
            return b""

        (length,) = struct.unpack(">I", full[:HEADER_BYTES])
        available = len(full) - HEADER_BYTES
        if length > available:
            if strict:
                raise TruncatedStreamError(
                    f"length header declares {length} bytes but only {available} are present"
                )
            logger.debug("length header %d exceeds %d available bytes", length, available)
        return full[HEADER_BYTES : HEADER_BYTES + length]


def encode(data: bytes, alphabet: Optional[Alphabet] = None) -> str:
    return BitPackCodec(alphabet).encode(data)


def decode(symbols: str, alphabet: Optional[Alphabet] = None, *, strict: bool = False) -> bytes:
    return BitPackCodec(alphabet).decode(symbols, strict=strict)


__all__ = [
    "BitPackCodec",
    "HEADER_BYTES",
    "MAX_PAYLOAD_BYTES",
    "decode",
    "encode",
    "encoded_length",
]
