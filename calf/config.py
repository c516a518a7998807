"""
Configuration for the CALF front end.
"""

from dataclasses import dataclass, field
from typing import Any

from .lexer.numbers import NumberConverter, resolve_number_type


# The grammar peeks at most one token past the read point
MIN_LOOKAHEAD = 2


@dataclass
class FrontendConfiguration:
    """Configuration for tokenizing and parsing one source buffer"""
    number_type: Any = float  # name, Python/numpy type or converter callable
    filename: str = "<string>"  # reported in diagnostics
    max_lookahead: int = 8  # lookahead buffer capacity

    converter: NumberConverter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Fail on a bad number type before any source is read
        self.converter = resolve_number_type(self.number_type)
        if self.max_lookahead < MIN_LOOKAHEAD:
            raise ValueError(f"max_lookahead must be at least {MIN_LOOKAHEAD}")
