#!/usr/bin/env python3
"""
Tests for build_options: option strings, inferred types, defaults and
configuration errors.
"""

from dataclasses import dataclass, field

import pytest

from dataclass_getopt import (
    MISSING,
    AttributeDescriptor,
    ConfigurationError,
    OptionTypeMap,
    attributes_from_dataclass,
    build_options,
)


class Port(int):
    pass


@dataclass
class AppConfig:
    """Configuration with one attribute per interesting option form."""

    bar: int = field(metadata={"help": "The bar value"})
    verbose: bool = field(default=False, metadata={"cmd_aliases": ["v"]})
    name: str = field(default="app", metadata={"cmd_flag": "app-name"})
    include: list[str] = field(default_factory=list)
    define: dict[str, int] = field(default_factory=dict)
    port: Port = field(default=Port(80))
    _internal: str = field(default="hidden")


class TestBuildOptions:
    """Test suite for option descriptor derivation."""

    def test_option_strings(self):
        options, _ = build_options(attributes_from_dataclass(AppConfig))
        assert [o.opt_string for o in options] == [
            "bar=i",
            "verbose|v!",
            "app-name=s",
            "include=s@",
            "define=i%",
            "port=i",
        ]

    def test_name_to_init_arg(self):
        options, name_to_init_arg = build_options(
            attributes_from_dataclass(AppConfig)
        )
        assert name_to_init_arg["app-name"] == "name"
        assert name_to_init_arg["bar"] == "bar"
        assert "_internal" not in name_to_init_arg
        assert [o.name for o in options] == list(name_to_init_arg)

    def test_required_and_doc_are_copied(self):
        options, _ = build_options(attributes_from_dataclass(AppConfig))
        bar = options[0]
        assert bar.required
        assert bar.doc == "The bar value"
        assert not options[1].required
        assert options[1].doc is None

    def test_boolean_gets_negatable_suffix(self):
        """Test that a boolean attribute enables --verbose and --noverbose."""
        options, _ = build_options([AttributeDescriptor("verbose", type_name="Bool")])
        assert options[0].opt_string == "verbose!"

    def test_untyped_attribute_is_a_plain_flag(self):
        options, _ = build_options([AttributeDescriptor("dry_run")])
        assert options[0].opt_string == "dry_run"

    def test_inferred_type_uses_nearest_registered_ancestor(self):
        attr = AttributeDescriptor(
            "nums", type_name="ArrayOfInts", type_parents=("ArrayRef",)
        )
        options, _ = build_options([attr])
        assert options[0].opt_string == "nums=s@"

    def test_registered_type_wins_over_ancestors(self):
        attr = AttributeDescriptor(
            "nums", type_name="ArrayOfInts", type_parents=("ArrayRef",)
        )
        OptionTypeMap.add_option_type_to_map("ArrayOfInts", "=i@")
        options, _ = build_options([attr])
        assert options[0].opt_string == "nums=i@"

    def test_registry_is_read_at_build_time(self):
        attr = AttributeDescriptor("level", type_name="Int")
        assert build_options([attr])[0][0].opt_string == "level=i"
        OptionTypeMap.add_option_type_to_map("Int", "+")
        assert build_options([attr])[0][0].opt_string == "level+"

    def test_unregistered_type_falls_back_to_string(self):
        attr = AttributeDescriptor("path", type_name="Path", type_parents=("PurePath",))
        options, _ = build_options([attr])
        assert options[0].opt_string == "path=s"

    def test_build_is_idempotent(self):
        descriptors = attributes_from_dataclass(AppConfig)
        assert build_options(descriptors) == build_options(descriptors)


class TestOptionDefaults:
    """Test suite pinning when a default is reported on the option."""

    @pytest.mark.parametrize(
        "kwargs, lazy, expected",
        [
            ({}, False, MISSING),
            ({}, True, MISSING),
            ({"default": 5}, False, MISSING),
            ({"default": 5}, True, 5),
            ({"default_factory": lambda: 7}, False, 7),
            ({"default_factory": lambda: 7}, True, MISSING),
        ],
    )
    def test_truth_table(self, kwargs, lazy, expected):
        """
        A default is included only when the attribute has one and exactly one
        of (default is a factory, attribute is lazy) holds.
        """
        attr = AttributeDescriptor("value", type_name="Int", lazy=lazy, **kwargs)
        (option,), _ = build_options([attr])
        if expected is MISSING:
            assert not option.has_default
        else:
            assert option.has_default
            assert option.default == expected

    def test_lazy_factory_is_not_called(self):
        calls = []

        def factory():
            calls.append(1)
            return "expensive"

        attr = AttributeDescriptor("value", default_factory=factory, lazy=True)
        build_options([attr])
        assert calls == []

    def test_eager_factory_is_called(self):
        attr = AttributeDescriptor("items", type_name="ArrayRef", default_factory=list)
        (option,), _ = build_options([attr])
        assert option.default == []

    def test_none_is_a_valid_default(self):
        attr = AttributeDescriptor("value", type_name="Str", default=None, lazy=True)
        (option,), _ = build_options([attr])
        assert option.has_default
        assert option.default is None


class TestConfigurationErrors:
    """Test suite for grammar problems detected before parsing."""

    def test_duplicate_option_string(self):
        """Test that two attributes resolving to the same option string fail."""
        attrs = [
            AttributeDescriptor("output", type_name="Str"),
            AttributeDescriptor("out_file", cmd_flag="output", type_name="Str"),
        ]
        with pytest.raises(ConfigurationError) as exc:
            build_options(attrs)
        assert "output=s" in str(exc.value)

    def test_alias_clashing_with_name(self):
        attrs = [
            AttributeDescriptor("verbose", cmd_aliases=("v",), type_name="Bool"),
            AttributeDescriptor("v", type_name="Int"),
        ]
        with pytest.raises(ConfigurationError) as exc:
            build_options(attrs)
        assert "'v'" in str(exc.value)

    @pytest.mark.parametrize("init_arg", [None, ""])
    def test_missing_init_arg(self, init_arg):
        with pytest.raises(ConfigurationError):
            build_options([AttributeDescriptor("value", init_arg=init_arg)])

    @pytest.mark.parametrize("bad_name", ["", "a|b", "x=s", "-dash", "two words"])
    def test_invalid_option_names(self, bad_name):
        with pytest.raises(ConfigurationError):
            build_options([AttributeDescriptor("value", cmd_flag=bad_name)])

    def test_configuration_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            build_options([AttributeDescriptor("value", init_arg=None)])
