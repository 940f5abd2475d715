"""The record returned by Getopt.process_args."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .parser import Usage


@dataclass(frozen=True)
class ProcessedArgs:
    """
    Everything new_with_options needs to construct an object.

    Attributes:
        argv_copy: The arguments exactly as they were when parsing started.
        extra_argv: Arguments the parser did not consume, in original order.
        usage: The Usage handle, when the descriptive backend was used.
        constructor_params: The parameters passed explicitly by the caller.
        cli_params: The parameters parsed from the command line, keyed by
            init-arg. Only options actually given appear here.
    """

    argv_copy: tuple[str, ...]
    extra_argv: tuple[str, ...]
    usage: Optional[Usage]
    constructor_params: Mapping[str, Any]
    cli_params: Mapping[str, Any]

    def __post_init__(self) -> None:
        object.__setattr__(self, "argv_copy", tuple(self.argv_copy))
        object.__setattr__(self, "extra_argv", tuple(self.extra_argv))
        object.__setattr__(
            self, "constructor_params", MappingProxyType(dict(self.constructor_params))
        )
        object.__setattr__(self, "cli_params", MappingProxyType(dict(self.cli_params)))
