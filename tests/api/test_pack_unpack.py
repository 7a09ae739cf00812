import os
import zlib

import pytest

from ghostcomm import MediaType, get_alphabet, pack, unpack
from ghostcomm.exceptions import ConfigurationError, IntegrityError, MissingVolumesError


def test_pack_unpack_roundtrip_with_profile():
    data = os.urandom(20_000)
    volumes = pack(data, "image", profile="safe")
    assert len(volumes) > 1
    assert all(len(volume) <= 4000 for volume in volumes)

    result = unpack("\n".join(volumes))
    assert result.data == data
    assert result.media_type is MediaType.IMAGE
    assert result.volumes == len(volumes)


def test_pack_compresses_by_default():
    data = b"spam and eggs " * 2000
    compressed = pack(data, MediaType.AUDIO, max_chars=4000)
    raw = pack(data, MediaType.AUDIO, max_chars=4000, compress=False)
    assert len(compressed) < len(raw)
    assert unpack(compressed).data == data
    assert unpack(raw, decompress=False).data == data


def test_single_volume_payload_is_deflate_stream():
    volumes = pack(b"hello", "V", max_chars=4000)
    assert len(volumes) == 1
    result = unpack(volumes, decompress=False)
    assert zlib.decompress(result.data) == b"hello"


def test_max_chars_wins_over_profile():
    volumes = pack(os.urandom(2000), "I", profile="god", max_chars=300)
    assert all(len(volume) <= 300 for volume in volumes)
    assert len(volumes) > 1


def test_profile_from_environment(monkeypatch):
    data = os.urandom(30_000)
    monkeypatch.setenv("GHOSTCOMM_PROFILE", "high")
    volumes = pack(data, "I")
    assert max(len(volume) for volume in volumes) > 4000
    assert all(len(volume) <= 15000 for volume in volumes)


def test_pastes_in_any_order_and_grouping():
    data = os.urandom(5000)
    volumes = pack(data, "A", max_chars=600)
    pastes = ["".join(volumes[1::2]), "chat noise " + "".join(volumes[::2])]
    assert unpack(pastes).data == data


def test_missing_volumes_are_reported():
    volumes = pack(os.urandom(5000), "A", max_chars=600)
    with pytest.raises(MissingVolumesError) as excinfo:
        unpack(volumes[:-1])
    assert excinfo.value.total == len(volumes)
    assert excinfo.value.missing == (len(volumes) - 1,)
    assert "missing indices" in str(excinfo.value)

    with pytest.raises(MissingVolumesError) as excinfo:
        unpack("no volumes here")
    assert excinfo.value.total is None


def test_uncompressed_stream_fails_inflate():
    volumes = pack(b"not compressed", "I", max_chars=4000, compress=False)
    with pytest.raises(IntegrityError):
        unpack(volumes)


def test_legacy_alphabet_roundtrip():
    legacy = get_alphabet("ghostcomm-v1")
    data = os.urandom(3000)
    volumes = pack(data, "I", max_chars=1000, alphabet=legacy)
    assert unpack(volumes, alphabet=legacy).data == data


def test_invalid_limits_are_rejected():
    with pytest.raises(ConfigurationError):
        pack(b"x", "I", max_chars=0)
    with pytest.raises(ConfigurationError):
        pack(b"x", "I", profile="warp")


def test_unpack_survives_oversized_header_noise():
    data = os.urandom(2000)
    volumes = pack(data, "I", max_chars=600)
    noise = "GC:I:" + "9" * 5000 + ":0:ABCD:一丁\n"
    assert unpack([noise, "\n".join(volumes)]).data == data
