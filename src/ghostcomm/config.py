"""Transport profiles and package-wide settings."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .codec.alphabet import DEFAULT_ALPHABET, PRESETS
from .exceptions import ConfigurationError
from .framing.chunkset import DEFAULT_MAX_TOTAL

ENV_PREFIX = "GHOSTCOMM_"


@dataclass(frozen=True)
class TransportProfile:
    """Character limit of one kind of text channel."""

    name: str
    label: str
    max_chars: int


PROFILES: Dict[str, TransportProfile] = {
    profile.name: profile
    for profile in (
        TransportProfile("safe", "Safe (4k)", 4000),
        TransportProfile("high", "Fast (15k)", 15000),
        TransportProfile("titan", "Titan (64k)", 64000),
        TransportProfile("god", "God (200k)", 200000),
    )
}
DEFAULT_PROFILE = "safe"


def resolve_profile(name: str) -> TransportProfile:
    name_norm = name.strip().lower()
    try:
        return PROFILES[name_norm]
    except KeyError:
        known = ", ".join(PROFILES)
        raise ConfigurationError(f"unknown transport profile: {name} (known: {known})") from None


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce_bool(value: Any, *, field: str) -> bool:
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"'{field}' must be a boolean, got {value!r}")


def _coerce_positive_int(value: Any, *, field: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"'{field}' must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{field}' must be a positive integer, got {value!r}") from None
    if number <= 0:
        raise ConfigurationError(f"'{field}' must be a positive integer, got {value!r}")
    return number


@dataclass(frozen=True)
class Settings:
    profile: str = DEFAULT_PROFILE
    alphabet: str = DEFAULT_ALPHABET
    compress: bool = True
    max_total: int = DEFAULT_MAX_TOTAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "profile", resolve_profile(self.profile).name)
        alphabet = self.alphabet.strip().lower()
        if alphabet not in PRESETS:
            known = ", ".join(sorted(PRESETS))
            raise ConfigurationError(f"unknown alphabet preset: {self.alphabet} (known: {known})")
        object.__setattr__(self, "alphabet", alphabet)
        if not isinstance(self.max_total, int) or isinstance(self.max_total, bool) or self.max_total <= 0:
            raise ConfigurationError("'max_total' must be a positive integer")

    @property
    def transport(self) -> TransportProfile:
        return PROFILES[self.profile]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile,
            "alphabet": self.alphabet,
            "compress": self.compress,
            "max_total": self.max_total,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Settings":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigurationError("settings must be a mapping")
        unknown = set(data) - {"profile", "alphabet", "compress", "max_total"}
        if unknown:
            raise ConfigurationError(f"unknown settings: {', '.join(sorted(unknown))}")
        kwargs: Dict[str, Any] = {}
        if "profile" in data:
            kwargs["profile"] = str(data["profile"])
        if "alphabet" in data:
            kwargs["alphabet"] = str(data["alphabet"])
        if "compress" in data:
            kwargs["compress"] = _coerce_bool(data["compress"], field="compress")
        if "max_total" in data:
            kwargs["max_total"] = _coerce_positive_int(data["max_total"], field="max_total")
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``GHOSTCOMM_*`` environment variables."""

        env = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        for key in ("profile", "alphabet", "compress", "max_total"):
            value = env.get(ENV_PREFIX + key.upper())
            if value:
                data[key] = value
        return cls.from_dict(data)


__all__ = [
    "DEFAULT_PROFILE",
    "PROFILES",
    "Settings",
    "TransportProfile",
    "resolve_profile",
]
