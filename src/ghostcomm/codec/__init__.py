"""Symbol-level codec: the alphabet and the 15-bit packer."""

from .alphabet import (
    ALPHABET_SIZE,
    Alphabet,
    build,
    default_alphabet,
    get_alphabet,
)
from .bitpack import BitPackCodec, decode, encode, encoded_length
from .errors import AlphabetError, CodecError, PayloadTooLargeError, TruncatedStreamError

__all__ = [
    "ALPHABET_SIZE",
    "Alphabet",
    "AlphabetError",
    "BitPackCodec",
    "CodecError",
    "PayloadTooLargeError",
    "TruncatedStreamError",
    "build",
    "decode",
    "default_alphabet",
    "encode",
    "encoded_length",
    "get_alphabet",
]
