"""
Parsing of argument lists against Getopt-style option descriptors.

Two interchangeable backends translate option strings such as "verbose|v!",
"count=i" or "define=s%" into an argparse.ArgumentParser and run it over a
private copy of the arguments:

- PlainArgvParser only collects values.
- DescriptiveArgvParser also documents every option, enforces required
  options and returns a Usage handle with the formatted help.

Both report values keyed by init-arg, keep unrecognized tokens in their
original order, and raise a single ParseError carrying every diagnostic
produced during the parse.
"""

import argparse
import logging
import re
import sys
import warnings
from dataclasses import dataclass
from typing import IO, Any, Collection, Optional, Sequence

from .attributes import MISSING
from .errors import ConfigurationError, ParseError
from .options import OptionDescriptor

logger = logging.getLogger(__name__)

_OPT_STRING = re.compile(
    r"^(?P<names>[^=:!+]+)"
    r"(?P<spec>!|\+|(?P<mode>[=:])(?P<type>[sifo])(?P<container>[@%])?)?$"
)
_NEGATIVE_NUMBER = re.compile(r"^-(\d+|\d*\.\d+)$")

ARGV_TERMINATOR = "--"


def _parse_extended_int(value: str) -> int:
    """Parse decimal, hex (0x), octal (0o) or binary (0b) integers."""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")


_VALUE_TYPES = {
    "s": (str, "STRING", ""),
    "i": (int, "INT", 0),
    "f": (float, "FLOAT", 0.0),
    "o": (_parse_extended_int, "INT", 0),
}


class _ParserFailure(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def error(self, message: str):  # type: ignore[override]
        raise _ParserFailure(message)


class _KeyValueAction(argparse.Action):
    """Collect repeated KEY=VALUE arguments into a dict."""

    def __init__(self, option_strings, dest, value_type=str, **kwargs):
        self.value_type = value_type
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        key, sep, raw = values.partition("=")
        if not sep or not key:
            raise argparse.ArgumentError(
                self, f"expected KEY=VALUE, got '{values}'"
            )
        try:
            value = self.value_type(raw)
        except (ValueError, argparse.ArgumentTypeError):
            raise argparse.ArgumentError(
                self, f"invalid value for key '{key}': '{raw}'"
            )
        mapping = dict(getattr(namespace, self.dest, None) or {})
        mapping[key] = value
        setattr(namespace, self.dest, mapping)


class Usage:
    """
    Formatted usage and help for the options of one parse.

    Returned by the descriptive backend alongside the parsed values.
    """

    def __init__(self, parser: argparse.ArgumentParser) -> None:
        self._parser = parser

    def text(self) -> str:
        return self._parser.format_help()

    def print_help(self, file: Optional[IO[str]] = None) -> None:
        self._parser.print_help(file if file is not None else sys.stderr)

    def die(self, message: Optional[str] = None):
        """Raise a ParseError carrying `message` followed by the help text."""
        raise ParseError([message or "", self.text()])

    def __str__(self) -> str:
        return self.text()


@dataclass(frozen=True)
class ParseResult:
    """Raw outcome of one parse, keyed by init-arg."""

    params: dict[str, Any]
    argv_copy: tuple[str, ...]
    argv: tuple[str, ...]
    usage: Optional[Usage] = None


def _match_opt_string(opt_string: str) -> "re.Match[str]":
    match = _OPT_STRING.match(opt_string)
    if not match:
        raise ConfigurationError(f"Invalid option specification: '{opt_string}'")
    return match


def split_opt_string(opt_string: str) -> tuple[list[str], str]:
    """
    Split a Getopt-style option string into its names and suffix.

    Example:
        split_opt_string("include|I=s@") -> (["include", "I"], "=s@")

    Raises:
        ConfigurationError: If the option string cannot be understood.
    """
    match = _match_opt_string(opt_string)
    return match.group("names").split("|"), match.group("spec") or ""


def _flags(name: str) -> list[str]:
    """Option strings for one name: "-x" for single letters, "-name" and "--name" otherwise."""
    if len(name) == 1:
        return [f"-{name}"]
    return [f"-{name}", f"--{name}"]


def _format_description(description: str, default_value: Any) -> str:
    """Append default value info to the option description."""
    description = description.strip()
    if default_value is MISSING:
        return description
    default_suffix = f"(default: {default_value})"
    return f"{description} {default_suffix}" if description else default_suffix


def _add_option(
    parser: argparse.ArgumentParser,
    opt_string: str,
    help: Optional[str] = None,
) -> None:
    """Register the argparse action(s) for one option string, stored under its first name."""
    match = _match_opt_string(opt_string)
    names = match.group("names").split("|")
    suffix = match.group("spec") or ""
    dest = names[0]
    flags = [flag for n in names for flag in _flags(n)]
    if help is not None:
        # argparse expands %-formatting in help strings
        help = help.replace("%", "%%")
    common: dict[str, Any] = {"dest": dest, "default": argparse.SUPPRESS}

    try:
        if suffix == "":
            parser.add_argument(
                *flags, action="store_const", const=True, help=help, **common
            )
        elif suffix == "!":
            parser.add_argument(
                *flags, action="store_const", const=True, help=help, **common
            )
            negations = [
                flag
                for n in names
                if len(n) > 1
                for flag in (f"-no{n}", f"--no{n}", f"--no-{n}")
            ]
            if negations:
                parser.add_argument(
                    *negations,
                    action="store_const",
                    const=False,
                    help=argparse.SUPPRESS if help is None else f"Disable {flags[0]}",
                    **common,
                )
        elif suffix == "+":
            parser.add_argument(*flags, action="count", help=help, **common)
        else:
            value_type, metavar, empty_value = _VALUE_TYPES[match.group("type")]
            container = match.group("container")
            if container == "%":
                parser.add_argument(
                    *flags,
                    action=_KeyValueAction,
                    value_type=value_type,
                    metavar="KEY=VALUE",
                    help=help,
                    **common,
                )
            elif container == "@":
                parser.add_argument(
                    *flags,
                    action="append",
                    type=value_type,
                    metavar=metavar,
                    help=help,
                    **common,
                )
            elif match.group("mode") == ":":
                parser.add_argument(
                    *flags,
                    nargs="?",
                    const=empty_value,
                    type=value_type,
                    metavar=metavar,
                    help=help,
                    **common,
                )
            else:
                parser.add_argument(
                    *flags, type=value_type, metavar=metavar, help=help, **common
                )
    except argparse.ArgumentError as e:
        raise ConfigurationError(f"Cannot register option '{opt_string}': {e}")


def _split_at_terminator(argv: list[str]) -> tuple[list[str], list[str]]:
    if ARGV_TERMINATOR in argv:
        index = argv.index(ARGV_TERMINATOR)
        return argv[:index], argv[index + 1 :]
    return argv, []


def _looks_like_option(token: str) -> bool:
    return (
        token.startswith("-") and token != "-" and not _NEGATIVE_NUMBER.match(token)
    )


def _unknown_option_name(token: str) -> str:
    return token.lstrip("-").split("=", 1)[0]


class ArgvParser:
    """
    Base class of the parsing backends.

    Subclasses describe how option descriptors become argparse actions
    (`_spec` and `_build_parser`) and what extra checks run after parsing.
    """

    name = "base"
    descriptive = False

    def __init__(self, prog: Optional[str] = None, usage: Optional[str] = None):
        self.prog = prog
        self.usage = usage

    def _new_parser(self) -> argparse.ArgumentParser:
        return _ArgumentParser(prog=self.prog, usage=self.usage, add_help=False)

    def _spec(
        self, options: Sequence[OptionDescriptor], supplied: Collection[str]
    ) -> tuple[list[Any], dict[str, str]]:
        raise NotImplementedError

    def _build_parser(self, spec: list[Any]) -> argparse.ArgumentParser:
        raise NotImplementedError

    def _check_parsed(
        self, spec: list[Any], parsed: dict[str, Any]
    ) -> list[str]:
        return []

    def parse(
        self,
        argv: Sequence[str],
        options: Sequence[OptionDescriptor],
        supplied: Collection[str] = (),
    ) -> ParseResult:
        """
        Parse `argv` against `options` without touching `argv` itself.

        Args:
            argv: The arguments to parse (the program name excluded).
            options: Option descriptors, as produced by build_options.
            supplied: Init-args already provided by the caller; required
                options for these are not enforced.

        Raises:
            ParseError: With every diagnostic collected during the parse.
            ConfigurationError: If the options cannot be registered.
        """
        argv_copy = tuple(argv)
        spec, name_to_init_arg = self._spec(options, supplied)
        parser = self._build_parser(spec)
        head, tail = _split_at_terminator(list(argv_copy))

        logger.debug(
            "Parsing %d argument(s) against %d option(s) with the %s backend",
            len(argv_copy),
            len(options),
            self.name,
        )

        errors: list[str] = []
        parsed: Optional[dict[str, Any]] = None
        extras: list[str] = []
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                namespace, extras = parser.parse_known_args(head)
                parsed = vars(namespace)
            except _ParserFailure as e:
                errors.append(str(e))
        errors.extend(str(w.message) for w in caught)

        if parsed is not None:
            errors.extend(
                f"Unknown option: {_unknown_option_name(token)}"
                for token in extras
                if _looks_like_option(token)
            )
            errors.extend(self._check_parsed(spec, parsed))

        if errors or parsed is None:
            raise ParseError(errors)

        return ParseResult(
            params={name_to_init_arg[name]: value for name, value in parsed.items()},
            argv_copy=argv_copy,
            argv=tuple(extras) + tuple(tail),
            usage=Usage(parser) if self.descriptive else None,
        )


class PlainArgvParser(ArgvParser):
    """Backend working from a flat list of option strings."""

    name = "plain"

    def _spec(self, options, supplied):
        opt_strings = []
        name_to_init_arg = {}
        for option in options:
            opt_strings.append(option.opt_string)
            name_to_init_arg[option.name] = option.init_arg
        return opt_strings, name_to_init_arg

    def _build_parser(self, spec):
        parser = self._new_parser()
        for opt_string in spec:
            _add_option(parser, opt_string)
        return parser


class DescriptiveArgvParser(ArgvParser):
    """
    Backend working from (option string, description, settings) entries.

    Produces a Usage handle and reports missing required options, except for
    those whose init-arg was supplied by the caller.
    """

    name = "descriptive"
    descriptive = True

    def _spec(self, options, supplied):
        entries = []
        name_to_init_arg = {}
        for option in options:
            settings: dict[str, Any] = {}
            if option.required and option.init_arg not in supplied:
                settings["required"] = True
            if option.has_default:
                settings["default"] = option.default
            entries.append((option.opt_string, option.doc or " ", settings))
            name_to_init_arg[option.name] = option.init_arg
        return entries, name_to_init_arg

    def _build_parser(self, spec):
        parser = self._new_parser()
        for opt_string, doc, settings in spec:
            description = _format_description(doc, settings.get("default", MISSING))
            if settings.get("required"):
                description = f"{description} (required)".strip()
            _add_option(parser, opt_string, help=description)
        return parser

    def _check_parsed(self, spec, parsed):
        missing = []
        for opt_string, _doc, settings in spec:
            name = split_opt_string(opt_string)[0][0]
            if settings.get("required") and name not in parsed:
                missing.append(f"Mandatory parameter '{name}' missing")
        return missing


BACKENDS: dict[str, type[ArgvParser]] = {
    PlainArgvParser.name: PlainArgvParser,
    DescriptiveArgvParser.name: DescriptiveArgvParser,
}


def get_backend(name: str) -> type[ArgvParser]:
    try:
        return BACKENDS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown parser backend '{name}'. "
            f"Available backends are: {', '.join(sorted(BACKENDS))}"
        ) from None


def parse_argv(
    argv: Sequence[str],
    options: Sequence[OptionDescriptor],
    backend: str = DescriptiveArgvParser.name,
    supplied: Collection[str] = (),
    prog: Optional[str] = None,
    usage: Optional[str] = None,
) -> ParseResult:
    """Parse `argv` with the named backend. See ArgvParser.parse."""
    parser = get_backend(backend)(prog=prog, usage=usage)
    return parser.parse(argv, options, supplied=supplied)
