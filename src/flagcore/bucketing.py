"""Consistent bucketing for percentage rollouts.

A target is hashed into one of 100 buckets with MurmurHash3 (x86, 32-bit,
seed 0) over ``"{bucket_by}:{value}"``, where ``bucket_by`` is the attribute
actually used (``identifier`` when the target lacks the requested one). The
hash and the key layout are shared by every SDK of the family, so a target
lands in the same bucket whichever implementation evaluates it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flagcore.attributes import to_text
from flagcore.target import IDENTIFIER_ATTRIBUTE

if TYPE_CHECKING:
    from flagcore.models.serve import Distribution
    from flagcore.target import Target

__all__ = [
    "BUCKET_COUNT",
    "EmptyDistributionError",
    "get_bucket",
    "murmur3_32",
    "resolve_bucket_value",
    "select_variation",
]

BUCKET_COUNT = 100

_C1 = 0xCC9E2D51
_C2 = 0x1B873593
_MASK = 0xFFFFFFFF


class EmptyDistributionError(ValueError):
    """Raised when a distribution lists no variations."""


def _rotl32(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _mix_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK
    k1 = _rotl32(k1, 15)
    return (k1 * _C2) & _MASK


def murmur3_32(data: bytes, seed: int = 0) -> int:
    """Compute the unsigned MurmurHash3 x86 32-bit hash of ``data``.

    Args:
        data: Bytes to hash.
        seed: Hash seed.

    Returns:
        The hash as an integer in ``[0, 2**32)``.

    """
    length = len(data)
    h1 = seed & _MASK
    rounded_end = length & ~0x3

    for i in range(0, rounded_end, 4):
        k1 = data[i] | (data[i + 1] << 8) | (data[i + 2] << 16) | (data[i + 3] << 24)
        h1 ^= _mix_k1(k1)
        h1 = _rotl32(h1, 13)
        h1 = (h1 * 5 + 0xE6546B64) & _MASK

    tail = length & 0x3
    k1 = 0
    if tail == 3:
        k1 ^= data[rounded_end + 2] << 16
    if tail >= 2:
        k1 ^= data[rounded_end + 1] << 8
    if tail >= 1:
        k1 ^= data[rounded_end]
        h1 ^= _mix_k1(k1)

    # finalization
    h1 ^= length
    h1 ^= h1 >> 16
    h1 = (h1 * 0x85EBCA6B) & _MASK
    h1 ^= h1 >> 13
    h1 = (h1 * 0xC2B2AE35) & _MASK
    h1 ^= h1 >> 16
    return h1


def get_bucket(bucket_by: str, value: str) -> int:
    """Map a bucketing attribute and its value to a bucket in ``[1, 100]``.

    Example:
        >>> get_bucket("identifier", "test")
        57

    """
    hashed = murmur3_32(f"{bucket_by}:{value}".encode())
    return (hashed % BUCKET_COUNT) + 1


def resolve_bucket_value(target: Target, bucket_by: str) -> tuple[str, str]:
    """Resolve the attribute a target is bucketed on and its value.

    Falls back to ``identifier`` and the target identifier when the target
    does not carry the ``bucket_by`` attribute, so every target buckets
    deterministically.

    Returns:
        The attribute name actually used and its value as text.

    """
    value = target.get(bucket_by)
    if value is None or value == "":
        return IDENTIFIER_ATTRIBUTE, target.identifier
    return bucket_by, to_text(value)


def select_variation(distribution: Distribution, target: Target, flag_key: str) -> str:
    """Pick the variation identifier a target receives from a distribution.

    Each entry owns the bucket range ``(previous_total, previous_total + weight]``.
    Buckets past the cumulative total (weights adding up to less than 100)
    are served the last entry.

    Raises:
        EmptyDistributionError: If the distribution lists no variations.

    """
    if not distribution.variations:
        raise EmptyDistributionError(f"Distribution for flag '{flag_key}' has no variations")

    bucket = get_bucket(*resolve_bucket_value(target, distribution.bucket_by))
    total = 0
    for weighted in distribution.variations:
        total += weighted.weight
        if bucket <= total:
            return weighted.variation
    return distribution.variations[-1].variation
