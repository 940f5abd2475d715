"""
dataclass_getopt - Construct dataclass instances from command-line options.

Option names, types, aliases, defaults and documentation are derived from the
declared fields, the arguments are parsed with argparse, and the parsed values
are merged with explicit constructor parameters and, optionally, a YAML or
JSON config file.
"""

from .attributes import (
    MISSING,
    AttributeDescriptor,
    attributes_from_dataclass,
    eligible_attributes,
    type_constraint_chain,
)
from .errors import ConfigurationError, GetoptError, ParseError
from .getopt import ConfigFromFile, Getopt
from .option_type_map import OptionTypeMap
from .options import OptionDescriptor, build_options
from .parser import (
    DescriptiveArgvParser,
    ParseResult,
    PlainArgvParser,
    Usage,
    parse_argv,
)
from .processed_args import ProcessedArgs

__version__ = "1.0.0"
__all__ = [
    "MISSING",
    "AttributeDescriptor",
    "ConfigFromFile",
    "ConfigurationError",
    "DescriptiveArgvParser",
    "Getopt",
    "GetoptError",
    "OptionDescriptor",
    "OptionTypeMap",
    "ParseError",
    "ParseResult",
    "PlainArgvParser",
    "ProcessedArgs",
    "Usage",
    "attributes_from_dataclass",
    "build_options",
    "eligible_attributes",
    "parse_argv",
    "type_constraint_chain",
]
