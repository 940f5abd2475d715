"""Exceptions raised while building option grammars and parsing arguments."""

from typing import Iterable


class GetoptError(Exception):
    """Base class for all dataclass_getopt errors."""


class ConfigurationError(GetoptError, ValueError):
    """
    Raised when attribute metadata cannot be turned into a valid option grammar.

    Examples are two attributes resolving to the same option string, or an
    attribute without a usable init-arg. These are detected before any
    arguments are parsed.
    """


class ParseError(GetoptError):
    """
    Raised when the command line cannot be parsed.

    Every diagnostic produced during a single parse (parser errors, unknown
    options, missing mandatory options and warnings) is collected into
    `messages`; the string form joins them one per line.
    """

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: list[str] = [m.rstrip("\n") for m in messages if m]
        super().__init__("\n".join(self.messages))
