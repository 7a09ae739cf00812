"""Framing utilities: volume headers, chunking and reassembly."""

from .errors import FramingError, VolumeFormatError
from .checksum import CHECKSUM_LEN, checksum, verify
from .volume import PREFIX, MediaType, TransmissionKey, Volume, format_volume, header_overhead
from .chunker import VolumeChunker, chunk, plan_volumes
from .extractor import (
    SegmentResult,
    SegmentStatus,
    VolumeExtractor,
    extract,
    group_transmissions,
    scan,
)
from .chunkset import (
    ChunkSet,
    Complete,
    Incomplete,
    InsertResult,
    InsertStatus,
    insert_all,
    try_reassemble,
)

__all__ = [
    "CHECKSUM_LEN",
    "ChunkSet",
    "Complete",
    "FramingError",
    "Incomplete",
    "InsertResult",
    "InsertStatus",
    "MediaType",
    "PREFIX",
    "SegmentResult",
    "SegmentStatus",
    "TransmissionKey",
    "Volume",
    "VolumeChunker",
    "VolumeExtractor",
    "VolumeFormatError",
    "checksum",
    "chunk",
    "extract",
    "format_volume",
    "group_transmissions",
    "header_overhead",
    "insert_all",
    "plan_volumes",
    "scan",
    "try_reassemble",
    "verify",
]
