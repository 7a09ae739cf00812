import pytest

from ghostcomm.codec import encode
from ghostcomm.framing.checksum import checksum, rolling_hash, verify


@pytest.mark.parametrize(
    "text, expected_hash",
    [
        ("", 0),
        ("a", 97),
        ("ab", 3105),
        ("hello", 99162322),
        ("polygenelubricants", -(2**31)),
    ],
)
def test_rolling_hash_known_values(text, expected_hash):
    assert rolling_hash(text) == expected_hash


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", "0"),
        ("a", "2P"),
        ("ab", "2E9"),
        ("hello", "1N1E"),
        ("polygenelubricants", "ZIK0"),
    ],
)
def test_checksum_known_values(text, expected):
    assert checksum(text) == expected


def test_checksum_matches_sequential_fold():
    text = encode(bytes(range(256)) * 4)
    value = 0
    for ch in text:
        value = (value * 31 + ord(ch)) & 0xFFFFFFFF
    if value >= 2**31:
        value -= 2**32
    assert rolling_hash(text) == value


def test_checksum_is_stable_and_sensitive():
    payload = encode(b"integrity matters" * 20)
    digest = checksum(payload)
    assert checksum(payload) == digest
    assert verify(payload, digest)
    assert len(digest) <= 4
    assert digest == digest.upper()

    changed = 0
    for position in range(0, len(payload), 7):
        replacement = "丁" if payload[position] != "丁" else "七"
        mutated = payload[:position] + replacement + payload[position + 1 :]
        changed += checksum(mutated) != digest
    assert changed == len(range(0, len(payload), 7))

    assert checksum(payload[:-1]) != digest
    assert checksum(payload + payload[-1]) != digest
