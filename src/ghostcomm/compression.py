"""Deflate collaborator applied around the codec by the pack/unpack pipeline.

The zlib container matches what browsers emit for
``CompressionStream('deflate')``, so volumes produced here interoperate with
the web client.
"""

from __future__ import annotations

import zlib

from .exceptions import DecompressionError

DEFAULT_LEVEL = 9


def compress(data: bytes, level: int = DEFAULT_LEVEL) -> bytes:
    if not -1 <= level <= 9:
        raise ValueError("compression level must be between -1 and 9")
    return zlib.compress(bytes(data), level)


def decompress(data: bytes) -> bytes:
    """Inflate *data*, raising :class:`DecompressionError` on a corrupt stream."""

    decompressor = zlib.decompressobj()
    try:
        inflated = decompressor.decompress(bytes(data)) + decompressor.flush()
    except zlib.error as exc:
        raise DecompressionError(f"corrupted deflate stream: {exc}") from exc
    if not decompressor.eof:
        raise DecompressionError("deflate stream is truncated")
    if decompressor.unused_data:
        raise DecompressionError(
            f"{len(decompressor.unused_data)} trailing bytes after the end of the deflate stream"
        )
    return inflated


__all__ = ["DEFAULT_LEVEL", "compress", "decompress"]
