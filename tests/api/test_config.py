import pytest

from ghostcomm.config import DEFAULT_PROFILE, PROFILES, Settings, resolve_profile
from ghostcomm.exceptions import ConfigurationError


def test_builtin_profiles():
    assert {name: profile.max_chars for name, profile in PROFILES.items()} == {
        "safe": 4000,
        "high": 15000,
        "titan": 64000,
        "god": 200000,
    }
    assert DEFAULT_PROFILE == "safe"
    assert resolve_profile(" Titan ").max_chars == 64000
    with pytest.raises(ConfigurationError):
        resolve_profile("ludicrous")


def test_settings_defaults():
    settings = Settings()
    assert settings.transport.max_chars == 4000
    assert settings.to_dict() == {
        "profile": "safe",
        "alphabet": "stable",
        "compress": True,
        "max_total": 65536,
    }


def test_settings_from_dict_coerces_values():
    settings = Settings.from_dict(
        {"profile": "GOD", "alphabet": "ghostcomm-v1", "compress": "off", "max_total": "512"}
    )
    assert settings.profile == "god"
    assert settings.alphabet == "ghostcomm-v1"
    assert settings.compress is False
    assert settings.max_total == 512
    assert Settings.from_dict(settings.to_dict()) == settings
    assert Settings.from_dict(None) == Settings()


@pytest.mark.parametrize(
    "data",
    [
        {"profile": "warp"},
        {"alphabet": "emoji"},
        {"compress": "maybe"},
        {"max_total": 0},
        {"max_total": "many"},
        {"max_total": True},
        {"colour": "blue"},
    ],
)
def test_settings_from_dict_rejects_bad_values(data):
    with pytest.raises(ConfigurationError):
        Settings.from_dict(data)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("GHOSTCOMM_PROFILE", "high")
    monkeypatch.setenv("GHOSTCOMM_COMPRESS", "no")
    monkeypatch.delenv("GHOSTCOMM_ALPHABET", raising=False)
    monkeypatch.delenv("GHOSTCOMM_MAX_TOTAL", raising=False)
    settings = Settings.from_env()
    assert settings.profile == "high"
    assert settings.compress is False
    assert settings.alphabet == "stable"


def test_settings_from_explicit_environ():
    settings = Settings.from_env({"GHOSTCOMM_MAX_TOTAL": "99", "GHOSTCOMM_PROFILE": ""})
    assert settings.max_total == 99
    assert settings.profile == "safe"
    with pytest.raises(ConfigurationError):
        Settings.from_env({"GHOSTCOMM_ALPHABET": "klingon"})
