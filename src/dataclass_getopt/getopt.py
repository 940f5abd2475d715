"""
Mixins giving dataclasses an alternate constructor driven by the command line.

Example:
    @dataclass
    class App(Getopt):
        out: str = field(metadata={"help": "Output file"})
        verbose: bool = field(default=False, metadata={"cmd_aliases": "v"})

    app = App.new_with_options()
    # python app.py --out result.txt -v extra.txt
    # app.out == "result.txt", app.verbose is True, app.extra_argv == ["extra.txt"]
"""

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Sequence

import yaml
from result import Err, Ok, Result

from .attributes import AttributeDescriptor, attributes_from_dataclass
from .errors import GetoptError, ParseError
from .options import OptionDescriptor, build_options
from .parser import Usage, parse_argv
from .processed_args import ProcessedArgs

logger = logging.getLogger(__name__)

CONFIGFILE_INIT_ARG = "configfile"


@dataclass
class Getopt:
    """
    Build instances from parsed command-line options.

    Every init field of the dataclass becomes an option named after the
    field, unless its name starts with an underscore or its metadata sets
    `"getopt": False`. The type annotation decides how the option takes its
    value, see OptionTypeMap.

    Class-level settings:
        getopt_backend: "descriptive" (default) or "plain".
        getopt_prog, getopt_usage: Passed to argparse for the usage text.

    The keyword `argv` of process_args and new_with_options is reserved for
    the argument list to parse; it defaults to sys.argv[1:].
    """

    getopt_backend: ClassVar[str] = "descriptive"
    getopt_prog: ClassVar[Optional[str]] = None
    getopt_usage: ClassVar[Optional[str]] = None

    ARGV: list[str] = field(
        default_factory=list, kw_only=True, repr=False, metadata={"getopt": False}
    )
    extra_argv: list[str] = field(
        default_factory=list, kw_only=True, metadata={"getopt": False}
    )
    usage: Optional[Usage] = field(
        default=None,
        kw_only=True,
        repr=False,
        compare=False,
        metadata={"getopt": False},
    )

    @classmethod
    def getopt_attributes(cls) -> list[AttributeDescriptor]:
        """Attribute descriptors options are derived from. Override to declare them explicitly."""
        return attributes_from_dataclass(cls)

    @classmethod
    def has_config_capability(cls) -> bool:
        return issubclass(cls, ConfigFromFile)

    @classmethod
    def getopt_options(cls) -> list[OptionDescriptor]:
        options, _ = build_options(cls.getopt_attributes())
        return options

    @classmethod
    def process_args(
        cls, *, argv: Optional[Sequence[str]] = None, **params: Any
    ) -> ProcessedArgs:
        """
        Parse the command line without constructing an instance.

        For ConfigFromFile classes no option is demanded on the command line,
        since the config file may still provide it; new_with_options checks
        required options once the file has been merged.

        Args:
            argv: Arguments to parse. If None, uses sys.argv[1:].
            **params: Explicit constructor parameters. Required options whose
                init-arg appears here are not demanded on the command line.

        Raises:
            ConfigurationError: If the attributes do not form a valid grammar.
            ParseError: If the arguments cannot be parsed.
        """
        if argv is None:
            argv = sys.argv[1:]

        options = cls.getopt_options()
        if cls.has_config_capability():
            supplied = {option.init_arg for option in options}
        else:
            supplied = set(params)
        parsed = parse_argv(
            argv,
            options,
            backend=cls.getopt_backend,
            supplied=supplied,
            prog=cls.getopt_prog,
            usage=cls.getopt_usage,
        )
        return ProcessedArgs(
            argv_copy=parsed.argv_copy,
            extra_argv=parsed.argv,
            usage=parsed.usage,
            constructor_params=params,
            cli_params=parsed.params,
        )

    @classmethod
    def new_with_options(cls, *, argv: Optional[Sequence[str]] = None, **params: Any):
        """
        Parse the command line and construct an instance.

        Values are merged in increasing order of precedence: command-line
        options, the config file (for ConfigFromFile classes, when a
        configfile was given), then the explicit `params`.

        Raises:
            ConfigurationError, ParseError: See process_args. ParseError is
                also raised when a required option is given by no source.
            FileNotFoundError, ValueError: If the config file cannot be read.
            TypeError: If the constructor rejects the merged parameters.
        """
        processed = cls.process_args(argv=argv, **params)

        merged = dict(processed.cli_params)
        if cls.has_config_capability():
            configfile = processed.constructor_params.get(
                CONFIGFILE_INIT_ARG, processed.cli_params.get(CONFIGFILE_INIT_ARG)
            )
            if configfile is not None:
                merged.update(cls.load_config(configfile))  # type: ignore[attr-defined]
        merged.update(processed.constructor_params)

        if cls.has_config_capability() and processed.usage is not None:
            missing = [
                f"Mandatory parameter '{option.name}' missing"
                for option in cls.getopt_options()
                if option.required and option.init_arg not in merged
            ]
            if missing:
                raise ParseError(missing)

        return cls(
            **{
                "ARGV": list(processed.argv_copy),
                "extra_argv": list(processed.extra_argv),
                "usage": processed.usage,
                **merged,
            }
        )

    @classmethod
    def safe_process_args(
        cls, *, argv: Optional[Sequence[str]] = None, **params: Any
    ) -> Result[ProcessedArgs, str]:
        """
        Like process_args, but returns Ok(ProcessedArgs) or Err(message).
        """
        try:
            return Ok(cls.process_args(argv=argv, **params))
        except GetoptError as e:
            return Err(str(e))

    @classmethod
    def safe_new_with_options(
        cls, *, argv: Optional[Sequence[str]] = None, **params: Any
    ) -> Result[Any, str]:
        """
        Like new_with_options, but returns Ok(instance) or Err(message).

        Construction and config file failures are reported as Err as well.
        """
        try:
            return Ok(cls.new_with_options(argv=argv, **params))
        except (GetoptError, TypeError, ValueError, OSError) as e:
            return Err(str(e))


@dataclass
class ConfigFromFile:
    """
    Adds a `--configfile` option whose YAML or JSON contents feed new_with_options.

    The file must hold a mapping of init-args to values. Config values
    override command-line values and are overridden by explicit parameters.
    """

    configfile: Optional[str] = field(
        default=None,
        kw_only=True,
        metadata={"help": "Path to configuration file (YAML or JSON format)"},
    )

    @classmethod
    def load_config(cls, config_path: str) -> dict[str, Any]:
        """
        Load configuration from a YAML or JSON file.

        Args:
            config_path (str): Path to the configuration file.

        Returns:
            dict[str, Any]: Dictionary containing the configuration data.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the file format is not supported or invalid.
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        file_ext = os.path.splitext(config_path)[1].lower()
        logger.debug("Loading configuration from %s", config_path)

        with open(config_path, "r") as f:
            if file_ext in [".yaml", ".yml"]:
                try:
                    data = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ValueError(f"Invalid YAML file: {e}")
            elif file_ext == ".json":
                try:
                    data = json.load(f)
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON file: {e}")
            else:
                raise ValueError(
                    f"Unsupported file format: {file_ext}. "
                    "Supported formats are: .yaml, .yml, .json"
                )

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Configuration file must contain a mapping, got {type(data).__name__}"
            )
        return data
