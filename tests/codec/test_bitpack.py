import math
import os

import pytest

from ghostcomm.codec import BitPackCodec, decode, encode, encoded_length, get_alphabet
from ghostcomm.codec.errors import TruncatedStreamError


@pytest.mark.parametrize("size", [0, 1, 2, 3, 11, 15, 16, 29, 30, 31, 255, 4096, 122_881])
def test_roundtrip_various_lengths(size):
    data = os.urandom(size)
    symbols = encode(data)
    assert len(symbols) == math.ceil(8 * (size + 4) / 15)
    assert len(symbols) == encoded_length(size)
    assert decode(symbols) == data


def test_empty_payload_roundtrip():
    symbols = encode(b"")
    assert len(symbols) == 3
    assert decode(symbols) == b""


def test_sixteen_zero_bytes_roundtrip():
    assert decode(encode(bytes(16))) == bytes(16)


def test_known_vector_matches_reference_layout():
    # header 00 00 00 01 + payload ff -> 40 bits -> three symbols
    codec = BitPackCodec(get_alphabet("ghostcomm-v1"))
    symbols = codec.encode(b"\xff")
    indices = [ord(ch) - 0x4E00 for ch in symbols]
    bits = "".join(f"{i:015b}" for i in indices)
    assert bits[:40] == "0" * 31 + "1" + "1" * 8
    assert bits[40:] == "0" * 5


def test_decode_skips_noise():
    data = b"transport noise is harmless"
    symbols = encode(data)
    noisy = "\n".join(symbols[i : i + 5] + "  abc" for i in range(0, len(symbols), 5))
    assert decode(noisy) == data


def test_decode_short_input_returns_empty():
    symbols = encode(b"abc")
    assert decode(symbols[:2]) == b""
    assert decode("") == b""
    assert decode("hello world") == b""


def test_decode_truncated_stream_is_lenient_unless_strict():
    data = bytes(range(64))
    symbols = encode(data)
    truncated = symbols[:10]
    partial = decode(truncated)
    assert data.startswith(partial)
    assert len(partial) < len(data)
    with pytest.raises(TruncatedStreamError):
        decode(truncated, strict=True)
    with pytest.raises(TruncatedStreamError):
        decode(symbols[:1], strict=True)


def test_trailing_padding_is_discarded():
    data = b"\x01\x02\x03"
    symbols = encode(data)
    assert decode(symbols, strict=True) == data


def test_alphabets_are_not_interchangeable():
    data = b"\xff" * 64
    symbols = BitPackCodec(get_alphabet("stable")).encode(data)
    assert BitPackCodec(get_alphabet("ghostcomm-v1")).decode(symbols) != data


def test_encode_rejects_non_bytes():
    with pytest.raises(TypeError):
        encode("text")  # type: ignore[arg-type]
