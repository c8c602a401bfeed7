"""Tests for storage backends."""

from __future__ import annotations

import threading

import pytest

from flagcore import (
    Clause,
    ClauseOperator,
    FeatureFlag,
    FlagStore,
    MemoryStorageBackend,
    Segment,
    Serve,
    Snapshot,
    SnapshotProvider,
    TargetingRule,
    VariationOverride,
)


class TestSnapshot:
    """Tests for Snapshot."""

    def test_from_iterables(self, enabled_flag: FeatureFlag) -> None:
        """Test building a snapshot from flag and segment iterables."""
        snapshot = Snapshot([enabled_flag], [Segment("beta")])

        assert snapshot.get_flag("enabled-flag") is enabled_flag
        assert snapshot.get_segment("beta") is not None
        assert snapshot.get_flag("missing") is None
        assert snapshot.get_segment("missing") is None

    def test_from_mappings(self, enabled_flag: FeatureFlag) -> None:
        """Test building a snapshot from mappings."""
        snapshot = Snapshot({"enabled-flag": enabled_flag}, {"beta": Segment("beta")})

        assert set(snapshot.flags) == {"enabled-flag"}
        assert set(snapshot.segments) == {"beta"}

    def test_is_read_only(self, enabled_flag: FeatureFlag) -> None:
        """Test that the snapshot mappings cannot be mutated."""
        snapshot = Snapshot([enabled_flag])

        with pytest.raises(TypeError):
            snapshot.flags["other"] = enabled_flag  # type: ignore[index]

    def test_find_flags_by_segment(self, make_flag) -> None:
        """Test finding flags that reference a segment through overrides or rules."""
        by_override = make_flag("by-override", overrides=(VariationOverride("true", target_segments=("beta",)),))
        by_rule = make_flag(
            "by-rule",
            rules=(
                TargetingRule(
                    "r1",
                    clauses=(Clause("", ClauseOperator.SEGMENT_MATCH, ("beta",)),),
                    serve=Serve(variation="true"),
                ),
            ),
        )
        unrelated = make_flag("unrelated")
        snapshot = Snapshot([by_override, by_rule, unrelated])

        assert snapshot.find_flags_by_segment("beta") == {"by-override", "by-rule"}
        assert snapshot.find_flags_by_segment("other") == set()

    def test_implements_flag_store(self) -> None:
        """Test that snapshots satisfy the FlagStore protocol."""
        assert isinstance(Snapshot(), FlagStore)


class TestMemoryStorageBackend:
    """Tests for MemoryStorageBackend."""

    def test_set_and_get_flag(self, storage: MemoryStorageBackend, enabled_flag: FeatureFlag) -> None:
        """Test storing and retrieving a flag."""
        storage.set_flag(enabled_flag)

        assert storage.get_flag("enabled-flag") is enabled_flag
        assert len(storage) == 1

    def test_get_nonexistent_flag(self, storage: MemoryStorageBackend) -> None:
        """Test that an unknown key returns None."""
        assert storage.get_flag("nonexistent") is None

    def test_set_flag_replaces(self, storage: MemoryStorageBackend, make_flag) -> None:
        """Test that storing a flag with an existing key replaces it."""
        storage.set_flag(make_flag("f", default="true"))
        storage.set_flag(make_flag("f", default="false"))

        assert storage.get_flag("f").default_serve.variation == "false"
        assert len(storage) == 1

    def test_delete_flag(self, storage: MemoryStorageBackend, enabled_flag: FeatureFlag) -> None:
        """Test deleting a flag."""
        storage.set_flag(enabled_flag)

        assert storage.delete_flag("enabled-flag") is True
        assert storage.delete_flag("enabled-flag") is False
        assert storage.get_flag("enabled-flag") is None

    def test_segments(self, storage: MemoryStorageBackend) -> None:
        """Test storing and deleting segments."""
        storage.set_segment(Segment("beta"))

        assert storage.get_segment("beta") is not None
        assert storage.delete_segment("beta") is True
        assert storage.delete_segment("beta") is False

    def test_snapshot_is_immutable_view(self, storage: MemoryStorageBackend, make_flag) -> None:
        """Test that a taken snapshot does not observe later writes."""
        storage.set_flag(make_flag("a"))
        before = storage.snapshot()

        storage.set_flag(make_flag("b"))
        storage.delete_flag("a")

        assert set(before.flags) == {"a"}
        assert set(storage.snapshot().flags) == {"b"}

    def test_replace(self, storage: MemoryStorageBackend, make_flag) -> None:
        """Test replacing the whole flag set at once."""
        storage.set_flag(make_flag("old"))

        storage.replace([make_flag("new")], [Segment("s")])

        assert set(storage.snapshot().flags) == {"new"}
        assert storage.get_segment("s") is not None

    def test_clear(self, storage: MemoryStorageBackend, enabled_flag: FeatureFlag) -> None:
        """Test removing everything."""
        storage.set_flag(enabled_flag)
        storage.set_segment(Segment("beta"))

        storage.clear()

        assert len(storage) == 0
        assert storage.get_segment("beta") is None

    def test_initial_contents(self, enabled_flag: FeatureFlag) -> None:
        """Test seeding storage at construction."""
        storage = MemoryStorageBackend(flags=[enabled_flag], segments=[Segment("beta")])

        assert storage.get_flag("enabled-flag") is enabled_flag
        assert storage.find_flags_by_segment("beta") == set()

    def test_implements_protocols(self, storage: MemoryStorageBackend) -> None:
        """Test that the backend satisfies both storage protocols."""
        assert isinstance(storage, FlagStore)
        assert isinstance(storage, SnapshotProvider)

    def test_concurrent_writers(self, storage: MemoryStorageBackend, make_flag) -> None:
        """Test that concurrent writes are all applied."""

        def write(start: int) -> None:
            for i in range(start, start + 50):
                storage.set_flag(make_flag(f"flag-{i}"))

        threads = [threading.Thread(target=write, args=(n * 50,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(storage) == 400
