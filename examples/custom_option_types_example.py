#!/usr/bin/env python3
"""
Example demonstrating custom option types and inferred types.

`Percent` is an int subtype: without a registration it is parsed like an
int. `Level` is registered as a counter, so `-l -l -l` gives 3.

    python custom_option_types_example.py --percent 80 -l -l --level
"""

from dataclasses import dataclass, field

from dataclass_getopt import Getopt, OptionTypeMap


class Percent(int):
    """An integer between 0 and 100."""


class Level(int):
    """Verbosity level, raised by repeating the flag."""


OptionTypeMap.add_option_type_to_map("Level", "+")


@dataclass
class Report(Getopt):
    percent: Percent = field(default=Percent(50), metadata={"help": "Share to report"})
    level: Level = field(default=Level(0), metadata={"cmd_aliases": ["l"]})

    def __post_init__(self) -> None:
        if not 0 <= self.percent <= 100:
            raise ValueError(f"percent must be between 0 and 100, got {self.percent}")


if __name__ == "__main__":
    report = Report.new_with_options()
    print(f"percent: {report.percent}")
    print(f"level: {report.level}")
