"""
Registry mapping type names to Getopt-style option suffixes.

A suffix tells the parser backends how an option takes its value:

    ""      value-less flag (stores True)
    "!"     negatable flag: --name / --noname
    "+"     counter
    "=s"    mandatory value (s string, i integer, f float, o extended integer)
    ":s"    optional value
    "=s@"   repeatable, collected into a list
    "=s%"   repeatable key=value, collected into a dict
"""

from typing import ClassVar


class OptionTypeMap:
    """
    Process-wide mapping of type names to option suffixes.

    Lookups are by exact name only. Fallback to an ancestor type is done by
    the caller, see `dataclass_getopt.options.resolve_option_type`.

    Example:
        OptionTypeMap.add_option_type_to_map("ArrayOfPorts", "=i@")
    """

    _option_type_map: ClassVar[dict[str, str]] = {
        "Bool": "!",
        "Str": "=s",
        "Int": "=i",
        "Num": "=f",
        "Float": "=f",
        "ArrayRef": "=s@",
        "HashRef": "=s%",
        "ArrayRef[Int]": "=i@",
        "ArrayRef[Num]": "=f@",
        "HashRef[Int]": "=i%",
        "HashRef[Num]": "=f%",
    }

    @classmethod
    def has_option_type(cls, type_name: str) -> bool:
        return type_name in cls._option_type_map

    @classmethod
    def get_option_type(cls, type_name: str) -> str:
        """
        Return the suffix registered for `type_name`.

        Raises:
            LookupError: If no suffix is registered for the type.
        """
        try:
            return cls._option_type_map[type_name]
        except KeyError:
            raise LookupError(
                f"No option type registered for type constraint '{type_name}'"
            ) from None

    @classmethod
    def add_option_type_to_map(cls, type_name: str, option_string: str) -> None:
        """Register (or replace) the suffix used for `type_name`."""
        if not type_name:
            raise ValueError("Type name must be a non-empty string")
        cls._option_type_map[type_name] = option_string
