"""Tests for Target."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from flagcore import Target


class TestTarget:
    """Tests for Target."""

    def test_create_minimal_target(self) -> None:
        """Test creating a target with only an identifier."""
        target = Target("user-1")

        assert target.identifier == "user-1"
        assert target.name is None
        assert target.anonymous is False
        assert target.attributes == {}

    def test_display_name_falls_back_to_identifier(self) -> None:
        """Test that display_name uses the identifier when no name is set."""
        assert Target("user-1").display_name == "user-1"
        assert Target("user-1", name="Alice").display_name == "Alice"

    def test_get_reserved_attributes(self) -> None:
        """Test that identifier and name resolve to the target fields."""
        target = Target("user-1", name="Alice")

        assert target.get("identifier") == "user-1"
        assert target.get("name") == "Alice"

    def test_get_custom_attribute(self) -> None:
        """Test getting a custom attribute."""
        target = Target("user-1", attributes={"plan": "premium"})

        assert target.get("plan") == "premium"

    def test_get_missing_attribute(self) -> None:
        """Test that a missing attribute returns None."""
        assert Target("user-1").get("plan") is None

    def test_name_attribute_without_name(self) -> None:
        """Test that ``name`` falls through to the attributes when the field is unset."""
        target = Target("user-1", attributes={"name": "from-attributes"})

        assert target.get("name") == "from-attributes"

    def test_with_attributes(self) -> None:
        """Test deriving a target with additional attributes."""
        target = Target("user-1", attributes={"plan": "free"})

        derived = target.with_attributes(plan="premium", country="US")

        assert derived.attributes == {"plan": "premium", "country": "US"}
        assert target.attributes == {"plan": "free"}

    def test_target_is_frozen(self) -> None:
        """Test that targets are immutable."""
        target = Target("user-1")

        with pytest.raises(FrozenInstanceError):
            target.identifier = "user-2"  # type: ignore[misc]

    def test_dict_round_trip(self) -> None:
        """Test serializing and loading a target."""
        target = Target("user-1", name="Alice", anonymous=True, attributes={"beta": True})

        assert Target.from_dict(target.to_dict()) == target
