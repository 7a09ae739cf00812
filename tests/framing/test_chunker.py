import math
import os

import pytest

from ghostcomm.codec import encode
from ghostcomm.exceptions import ConfigurationError
from ghostcomm.framing import (
    ChunkSet,
    Complete,
    MediaType,
    VolumeFormatError,
    checksum,
    chunk,
    extract,
    header_overhead,
    insert_all,
    plan_volumes,
    try_reassemble,
)


def _payloads(volumes):
    return [volume.split(":", 5)[5] for volume in volumes]


@pytest.mark.parametrize("max_chars", [40, 57, 100, 4000])
def test_chunk_roundtrip_and_count(max_chars):
    symbols = encode(os.urandom(3000))
    volumes = chunk(MediaType.IMAGE, symbols, max_chars)

    effective, total = plan_volumes(len(symbols), max_chars)
    assert len(volumes) == total == math.ceil(len(symbols) / effective)
    assert "".join(_payloads(volumes)) == symbols
    assert all(len(volume) <= max_chars for volume in volumes)


def test_volume_header_layout():
    symbols = encode(b"header layout")
    volumes = chunk("A", symbols, 40)
    total = len(volumes)
    for index, volume in enumerate(volumes):
        prefix, kind, total_field, index_field, digest, payload = volume.split(":", 5)
        assert prefix == "GC"
        assert kind == "A"
        assert int(total_field) == total
        assert int(index_field) == index
        assert digest == checksum(payload)


def test_overhead_counts_every_header_character():
    assert header_overhead(1) == len("GC:I:1:0:ABCD:")
    assert header_overhead(12) == len("GC:I:12:11:ABCD:")
    # the index field is reserved at the width of total
    assert header_overhead(100) == len("GC:I:100:099:ABCD:")


def test_plan_grows_header_when_total_gains_digits():
    # 20 chars leaves 6 symbols with a one-digit total; 60 symbols would need
    # ten volumes, whose two-digit header leaves only 4 symbols each.
    assert plan_volumes(60, 20) == (4, 15)
    assert plan_volumes(54, 20) == (6, 9)


def test_chunk_rejects_tiny_limits():
    with pytest.raises(ConfigurationError):
        chunk(MediaType.VIDEO, encode(b"x"), header_overhead(1))


def test_chunk_empty_stream_yields_nothing():
    assert chunk(MediaType.IMAGE, "", 100) == []


def test_chunk_rejects_unknown_media_type():
    with pytest.raises(VolumeFormatError):
        chunk("X", encode(b"x"), 100)


def test_chunk_validate_rejects_foreign_symbols():
    with pytest.raises(VolumeFormatError):
        chunk(MediaType.IMAGE, encode(b"x") + "Z", 100, validate=True)


def test_scenario_c_small_limit_reassembles():
    symbols = encode(b"scenario C payload that needs several volumes")
    volumes = chunk("I", symbols, 40)
    assert len(volumes) > 1
    chunk_set = ChunkSet()
    insert_all(chunk_set, extract("\n".join(volumes)))
    outcome = try_reassemble(chunk_set)
    assert isinstance(outcome, Complete)
    assert outcome.symbols == symbols
    assert outcome.data == b"scenario C payload that needs several volumes"
