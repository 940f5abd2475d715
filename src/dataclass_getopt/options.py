"""Derivation of option descriptors from attribute descriptors."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .attributes import MISSING, AttributeDescriptor, eligible_attributes
from .errors import ConfigurationError
from .option_type_map import OptionTypeMap

logger = logging.getLogger(__name__)

FALLBACK_OPTION_TYPE = "=s"

_VALID_OPTION_NAME = re.compile(r"^[^\s|=:!+-][^\s|=:!+]*$")


@dataclass(frozen=True)
class OptionDescriptor:
    """
    Command-line grammar entry for one attribute.

    `opt_string` is the Getopt-style spec, e.g. "verbose|v!" or "include=s@".
    `name` is the display name the parsed value is reported under before it
    is translated to `init_arg`.
    """

    opt_string: str
    name: str
    init_arg: str
    required: bool = False
    default: Any = MISSING
    doc: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


def resolve_option_type(attr: AttributeDescriptor) -> str:
    """
    Return the option suffix for an attribute.

    The attribute's own type name is tried first, then its ancestors in
    order. A typed attribute whose whole chain is unregistered becomes a
    plain string option; an untyped attribute gets no suffix at all.
    """
    chain = attr.type_chain
    if not chain:
        return ""
    for type_name in chain:
        try:
            return OptionTypeMap.get_option_type(type_name)
        except LookupError:
            continue
    logger.debug(
        "No option type registered for %s (tried %s), using '%s'",
        attr.name,
        ", ".join(chain),
        FALLBACK_OPTION_TYPE,
    )
    return FALLBACK_OPTION_TYPE


def _check_option_name(attr: AttributeDescriptor, name: Any) -> None:
    if not isinstance(name, str) or not _VALID_OPTION_NAME.match(name):
        raise ConfigurationError(
            f"Invalid option name {name!r} for attribute '{attr.name}'"
        )


def _option_default(attr: AttributeDescriptor) -> Any:
    # Eager factories and lazy static defaults only.
    if attr.has_default and (attr.default_is_callable != attr.lazy):
        if attr.default_is_callable:
            return attr.default_factory()
        return attr.default
    return MISSING


def build_options(
    descriptors: Iterable[AttributeDescriptor],
) -> tuple[list[OptionDescriptor], dict[str, str]]:
    """
    Convert eligible attributes into option descriptors.

    Returns:
        The option descriptors in declaration order, and the mapping from
        option display name to init-arg.

    Raises:
        ConfigurationError: If two attributes share an option string or an
            option name, if an option name is malformed, or if an attribute
            has no init-arg.
    """
    options: list[OptionDescriptor] = []
    name_to_init_arg: dict[str, str] = {}
    seen_strings: dict[str, str] = {}
    seen_names: dict[str, str] = {}

    for attr in eligible_attributes(descriptors):
        if not attr.init_arg:
            raise ConfigurationError(
                f"Attribute '{attr.name}' has no init-arg and cannot be set "
                "from the command line"
            )

        name = attr.cmd_flag if attr.cmd_flag is not None else attr.name
        names = [name, *attr.cmd_aliases]
        opt_string = "|".join(map(str, names)) + resolve_option_type(attr)
        if opt_string in seen_strings:
            raise ConfigurationError(
                f"Option string conflict: '{opt_string}' is generated by both "
                f"'{seen_strings[opt_string]}' and '{attr.name}'"
            )
        seen_strings[opt_string] = attr.name

        for option_name in names:
            _check_option_name(attr, option_name)
            if option_name in seen_names:
                raise ConfigurationError(
                    f"Option name conflict: '{option_name}' is used by both "
                    f"'{seen_names[option_name]}' and '{attr.name}'"
                )
            seen_names[option_name] = attr.name

        options.append(
            OptionDescriptor(
                opt_string=opt_string,
                name=name,
                init_arg=attr.init_arg,
                required=attr.required,
                default=_option_default(attr),
                doc=attr.documentation,
            )
        )
        name_to_init_arg[name] = attr.init_arg
        logger.debug("Attribute %s -> option '%s'", attr.name, opt_string)

    return options, name_to_init_arg
