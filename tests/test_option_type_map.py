#!/usr/bin/env python3
"""
Tests for the OptionTypeMap registry.
"""

import pytest

from dataclass_getopt import OptionTypeMap


class TestOptionTypeMap:
    """Test suite for type name to option suffix registration."""

    @pytest.mark.parametrize(
        "type_name, suffix",
        [
            ("Bool", "!"),
            ("Int", "=i"),
            ("Num", "=f"),
            ("Float", "=f"),
            ("Str", "=s"),
            ("ArrayRef", "=s@"),
            ("HashRef", "=s%"),
            ("ArrayRef[Int]", "=i@"),
        ],
    )
    def test_default_entries(self, type_name, suffix):
        """Test that the standard types are registered out of the box."""
        assert OptionTypeMap.has_option_type(type_name)
        assert OptionTypeMap.get_option_type(type_name) == suffix

    def test_unknown_type(self):
        """Test that looking up an unregistered type raises LookupError."""
        assert not OptionTypeMap.has_option_type("ArrayOfPorts")
        with pytest.raises(LookupError) as exc:
            OptionTypeMap.get_option_type("ArrayOfPorts")
        assert "ArrayOfPorts" in str(exc.value)

    def test_add_and_override(self):
        """Test that registering inserts new types and silently overrides old ones."""
        OptionTypeMap.add_option_type_to_map("ArrayOfPorts", "=i@")
        assert OptionTypeMap.get_option_type("ArrayOfPorts") == "=i@"

        OptionTypeMap.add_option_type_to_map("Str", ":s")
        assert OptionTypeMap.get_option_type("Str") == ":s"

    def test_lookup_is_exact(self):
        """Test that no ancestor matching happens at the registry level."""
        assert not OptionTypeMap.has_option_type("ArrayRef[Port]")
        assert not OptionTypeMap.has_option_type("bool")

    def test_empty_type_name_rejected(self):
        with pytest.raises(ValueError):
            OptionTypeMap.add_option_type_to_map("", "=s")
