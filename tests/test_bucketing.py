"""Tests for consistent bucketing."""

from __future__ import annotations

from collections import Counter

import pytest

from flagcore import Distribution, Target, WeightedVariation
from flagcore.bucketing import (
    BUCKET_COUNT,
    EmptyDistributionError,
    get_bucket,
    murmur3_32,
    resolve_bucket_value,
    select_variation,
)


class TestMurmur3Hash:
    """Tests for the MurmurHash3 x86 32-bit implementation."""

    @pytest.mark.parametrize(
        ("data", "seed", "expected"),
        [
            (b"", 0, 0),
            (b"", 1, 0x514E28B7),
            (b"hello", 0, 0x248BFA47),
            (b"The quick brown fox jumps over the lazy dog", 0, 0x2E4FF723),
        ],
    )
    def test_known_vectors(self, data: bytes, seed: int, expected: int) -> None:
        """Test the hash against published reference values."""
        assert murmur3_32(data, seed) == expected

    def test_hash_is_unsigned_32_bit(self) -> None:
        """Test that every hash fits in an unsigned 32-bit integer."""
        for i in range(200):
            assert 0 <= murmur3_32(f"key-{i}".encode()) < 2**32

    def test_all_tail_lengths(self) -> None:
        """Test inputs whose length leaves 0 to 3 tail bytes produce distinct hashes."""
        hashes = {murmur3_32(b"abcd"[:n] + b"efgh") for n in range(4)}

        assert len(hashes) == 4


class TestBuckets:
    """Tests for bucket assignment."""

    def test_bucket_range(self) -> None:
        """Test that buckets are always within 1..100."""
        buckets = {get_bucket("identifier", f"user-{i}") for i in range(2000)}

        assert min(buckets) >= 1
        assert max(buckets) <= BUCKET_COUNT

    def test_known_bucket(self) -> None:
        """Test the bucket shared by every SDK for ``identifier:test``."""
        assert get_bucket("identifier", "test") == 57

    def test_flag_key_does_not_affect_bucket(self) -> None:
        """Test that a target keeps its bucket across flags with the same distribution attribute."""
        distribution = Distribution(
            "i_do_not_exist",
            (WeightedVariation("a", 56), WeightedVariation("b", 1), WeightedVariation("c", 43)),
        )

        assert {select_variation(distribution, Target("test"), key) for key in ("flag", "other", "x")} == {"b"}

    def test_bucket_by_attribute_is_part_of_key(self) -> None:
        """Test that the attribute name is hashed together with the value."""
        assert get_bucket("identifier", "test") != get_bucket("test", "identifier")

    def test_consistent_hashing(self) -> None:
        """Test that the same attribute and value always land in the same bucket."""
        assert len({get_bucket("org", "acme") for _ in range(100)}) == 1

    def test_roughly_uniform(self) -> None:
        """Test that buckets are spread roughly evenly."""
        counts = Counter(get_bucket("identifier", f"user-{i}") for i in range(10_000))
        low = sum(count for bucket, count in counts.items() if bucket <= 50)

        assert 4500 < low < 5500


class TestBucketValue:
    """Tests for resolving the bucketing attribute."""

    def test_uses_attribute(self) -> None:
        """Test that the bucket_by attribute is used when present."""
        target = Target("user-1", attributes={"org": "acme"})

        assert resolve_bucket_value(target, "org") == ("org", "acme")

    def test_falls_back_to_identifier(self) -> None:
        """Test that a missing attribute falls back to the identifier."""
        assert resolve_bucket_value(Target("user-1"), "org") == ("identifier", "user-1")

    def test_empty_attribute_falls_back_to_identifier(self) -> None:
        """Test that an empty attribute falls back to the identifier."""
        assert resolve_bucket_value(Target("user-1", attributes={"org": ""}), "org") == ("identifier", "user-1")

    def test_name_attribute(self) -> None:
        """Test bucketing on the target name."""
        assert resolve_bucket_value(Target("user-1", name="Alice"), "name") == ("name", "Alice")


class TestSelectVariation:
    """Tests for picking a variation from a distribution."""

    def test_bucket_57_selects_second_variation(self) -> None:
        """Test that bucket 57 falls into the second range of 56/1/43."""
        distribution = Distribution(
            "identifier",
            (WeightedVariation("a", 56), WeightedVariation("b", 1), WeightedVariation("c", 43)),
        )

        assert select_variation(distribution, Target("test"), "flag") == "b"

    def test_full_weight_always_selected(self) -> None:
        """Test that a 100 weight variation is always served."""
        distribution = Distribution("identifier", (WeightedVariation("on", 100), WeightedVariation("off", 0)))

        assert all(select_variation(distribution, Target(f"u{i}"), "f") == "on" for i in range(200))

    def test_zero_weight_never_selected(self) -> None:
        """Test that a 0 weight variation in first position is never served."""
        distribution = Distribution("identifier", (WeightedVariation("off", 0), WeightedVariation("on", 100)))

        assert all(select_variation(distribution, Target(f"u{i}"), "f") == "on" for i in range(200))

    def test_weights_below_100_serve_last_entry(self) -> None:
        """Test that buckets past the cumulative total are served the last entry."""
        distribution = Distribution("identifier", (WeightedVariation("a", 10), WeightedVariation("b", 10)))

        served = Counter(select_variation(distribution, Target(f"u{i}"), "f") for i in range(2000))

        assert set(served) == {"a", "b"}
        assert served["b"] > served["a"]

    def test_split_proportions(self) -> None:
        """Test that a 50/50 split serves both variations in similar proportions."""
        distribution = Distribution("identifier", (WeightedVariation("a", 50), WeightedVariation("b", 50)))

        served = Counter(select_variation(distribution, Target(f"user-{i}"), "ab-test") for i in range(10_000))

        assert 4500 < served["a"] < 5500

    def test_empty_distribution_raises(self) -> None:
        """Test that a distribution without variations raises."""
        with pytest.raises(EmptyDistributionError):
            select_variation(Distribution("identifier"), Target("u1"), "f")
