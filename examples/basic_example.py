#!/usr/bin/env python3
"""
Example script demonstrating the usage of the Getopt mixin.

Run it with, for example:

    python basic_example.py --name run1 --temperature 30 -v --tag a --tag b data.csv
"""

from dataclasses import dataclass, field

from dataclass_getopt import Getopt, ParseError


@dataclass
class SimulationConfig(Getopt):
    """Configuration for simulation parameters."""

    name: str = field(metadata={"help": "Name of the simulation"})
    temperature: float = field(
        default=27.0, metadata={"help": "Temperature in Celsius"}
    )
    num_simulations: int = field(
        default=100,
        metadata={"help": "Number of simulations to run", "cmd_aliases": ["n"]},
    )
    verbose: bool = field(
        default=False, metadata={"help": "Enable verbose output", "cmd_aliases": "v"}
    )
    tag: list[str] = field(default_factory=list, metadata={"help": "Tags to attach"})
    _run_id: str = field(default="local")


def main() -> None:
    """Main function demonstrating the parser."""
    try:
        config = SimulationConfig.new_with_options()
    except ParseError as e:
        print(e)
        print(SimulationConfig.process_args(argv=[], name="").usage)
        raise SystemExit(2)

    print(f"Simulation: {config.name}")
    print(f"  temperature: {config.temperature}")
    print(f"  simulations: {config.num_simulations}")
    print(f"  verbose: {config.verbose}")
    print(f"  tags: {config.tag}")
    print(f"  files: {config.extra_argv}")


if __name__ == "__main__":
    main()
