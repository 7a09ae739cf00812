"""Binary-to-text transport codec for character-limited chat channels."""

from .api import Unpacked, pack, unpack
from .codec import Alphabet, BitPackCodec, build, decode, default_alphabet, encode, get_alphabet
from .compression import compress, decompress
from .config import PROFILES, Settings, TransportProfile
from .exceptions import (
    ConfigurationError,
    DecompressionError,
    GhostCommError,
    IntegrityError,
    MissingVolumesError,
)
from .framing import (
    ChunkSet,
    Complete,
    Incomplete,
    MediaType,
    Volume,
    checksum,
    chunk,
    extract,
    group_transmissions,
    insert_all,
    scan,
    try_reassemble,
)
from .session import ReceiveSession, SessionState

__version__ = "1.2.0"

__all__ = [
    "Alphabet",
    "BitPackCodec",
    "ChunkSet",
    "Complete",
    "ConfigurationError",
    "DecompressionError",
    "GhostCommError",
    "Incomplete",
    "IntegrityError",
    "MediaType",
    "MissingVolumesError",
    "PROFILES",
    "ReceiveSession",
    "SessionState",
    "Settings",
    "TransportProfile",
    "Unpacked",
    "Volume",
    "build",
    "checksum",
    "chunk",
    "compress",
    "decode",
    "decompress",
    "default_alphabet",
    "encode",
    "extract",
    "get_alphabet",
    "group_transmissions",
    "insert_all",
    "pack",
    "scan",
    "try_reassemble",
    "unpack",
]
