#!/usr/bin/env python3
"""
Example demonstrating config files, explicit parameters and the safe variant.

Values are merged with explicit parameters first, then the config file given
with --configfile, then the command line:

    python config_file_example.py --configfile example_config.yaml --workers 8
"""

from dataclasses import dataclass, field

from dataclass_getopt import ConfigFromFile, Getopt


@dataclass
class ProcessConfig(Getopt, ConfigFromFile):
    """Configuration for process parameters."""

    process_type: str = field(
        default="typeA", metadata={"help": "Type of processing to use"}
    )
    workers: int = field(
        default=4, metadata={"help": "Maximum number of worker processes"}
    )
    timeout: float = field(default=300.0, metadata={"help": "Timeout in seconds"})
    env: dict[str, str] = field(
        default_factory=dict, metadata={"help": "Environment variables (KEY=VALUE)"}
    )


if __name__ == "__main__":
    result = ProcessConfig.safe_new_with_options(timeout=60.0)
    if result.is_err():
        print(f"error: {result.err_value}")
        raise SystemExit(2)

    config = result.ok_value
    print(f"process_type: {config.process_type}")
    print(f"workers: {config.workers}")
    print(f"timeout: {config.timeout} (always 60.0, set explicitly)")
    print(f"env: {config.env}")
