"""Volume payload fingerprint."""

from __future__ import annotations

import numpy as np

from ..codec.alphabet import text_to_codepoints

CHECKSUM_LEN = 4
_BASE36_DIGITS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def rolling_hash(text: str) -> int:
    """Return ``h = h * 31 + codepoint`` folded over *text* as a signed 32-bit int.

    The fold is evaluated as ``sum(c[i] * 31 ** (n - 1 - i))`` in wrapping
    ``uint32`` arithmetic, which is the same value modulo ``2**32``.
    """

    codepoints = text_to_codepoints(text).astype(np.uint32)
    n = codepoints.size
    if n == 0:
        return 0
    powers = np.ones(n, dtype=np.uint32)
    if n > 1:
        powers[1:] = np.cumprod(np.full(n - 1, 31, dtype=np.uint32), dtype=np.uint32)
    value = int((codepoints * powers[::-1]).sum(dtype=np.uint32))
    if value >= 1 << 31:
        value -= 1 << 32
    return value


def checksum(text: str) -> str:
    """Compute the volume fingerprint of *text*.

    The absolute value of :func:`rolling_hash` is rendered in base 36 and the
    first :data:`CHECKSUM_LEN` digits are kept, upper-cased.  Small hashes
    therefore produce shorter fingerprints (``checksum("") == "0"``).
    """

    return _to_base36(abs(rolling_hash(text)))[:CHECKSUM_LEN]


def verify(text: str, declared: str) -> bool:
    return checksum(text) == declared


__all__ = ["CHECKSUM_LEN", "checksum", "rolling_hash", "verify"]
