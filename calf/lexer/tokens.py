"""
Token definitions for the CALF lexer.

This module defines the lexical vocabulary of CALF:
- Particles (operators and punctuation), a closed set of kinds
- Lexemes (number, identifier, particle, skip, end of input)
- Source positions attached to every token

The particle kinds double as operator tags inside AST nodes, so the
parser never needs a second operator table.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Union


class TokenType(Enum):
    """
    Enumeration of all token kinds in CALF.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Classification kinds (never carried by a Particle)
    # ========================================================================
    COMMENT = auto()               # // to end of line
    NEWLINE = auto()               # \n
    INTEGER = auto()               # 42, -7
    FLOAT = auto()                 # 3.14, -0.5
    IDENTIFIER = auto()            # name, _tmp, número

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }
    COMMA = auto()                  # ,
    QUESTION = auto()               # ?
    COLON = auto()                  # :
    SEMICOLON = auto()              # ;
    DOT = auto()                    # .
    RANGE = auto()                  # ..
    HASH = auto()                   # # (index/slice marker)

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULO = auto()                 # %

    # Comparison
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Equality
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=

    # Bitwise and logical markers
    BIT_AND = auto()                # &
    LOGICAL_AND = auto()            # &&
    BIT_OR = auto()                 # |
    LOGICAL_OR = auto()             # ||
    LOGICAL_NOT = auto()            # !

    # Assignment
    ASSIGN = auto()                 # =

    @property
    def symbol(self) -> str:
        """Source text of a particle kind, or the kind name otherwise."""
        return SYMBOLS.get(self, self.name)


@dataclass(frozen=True)
class Position:
    """
    A (row, column) coordinate in the source, both zero based.

    Copied by value into every token, AST node and error.
    """
    row: int
    col: int

    def __str__(self) -> str:
        return f"{self.row}:{self.col}"

    def __repr__(self) -> str:
        return f"Position({self.row}, {self.col})"


# ============================================================================
# Lexemes
# ============================================================================

@dataclass(frozen=True)
class Number:
    """Numeric literal, already converted to the configured number type."""
    value: Any

    def matches(self, kind: TokenType) -> bool:
        # Integer and float literals are not told apart past the lexer
        return kind in (TokenType.INTEGER, TokenType.FLOAT)


@dataclass(frozen=True)
class Ident:
    """Identifier."""
    name: str

    def matches(self, kind: TokenType) -> bool:
        return kind == TokenType.IDENTIFIER


@dataclass(frozen=True)
class Particle:
    """Operator or punctuation."""
    kind: TokenType

    def matches(self, kind: TokenType) -> bool:
        return kind == self.kind


@dataclass(frozen=True)
class Skip:
    """Comment or line break: advances the position, never parsed."""

    def matches(self, kind: TokenType) -> bool:
        return False


@dataclass(frozen=True)
class EndOfInput:
    """Sentinel produced once the buffer is exhausted."""

    def matches(self, kind: TokenType) -> bool:
        return False


Lexeme = Union[Number, Ident, Particle, Skip, EndOfInput]


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the CALF language.

    Contains the classified lexeme, its source position and the raw text
    it was scanned from.
    """
    lexeme: Lexeme
    pos: Position
    text: str = ""

    def __str__(self) -> str:
        lexeme = self.lexeme
        if isinstance(lexeme, Number):
            return f"NUMBER({self.text!r} -> {lexeme.value!r})@{self.pos}"
        if isinstance(lexeme, Ident):
            return f"IDENTIFIER({lexeme.name!r})@{self.pos}"
        if isinstance(lexeme, Particle):
            return f"{lexeme.kind.name}({self.text!r})@{self.pos}"
        if isinstance(lexeme, Skip):
            return f"SKIP({self.text!r})@{self.pos}"
        return f"EOF@{self.pos}"

    @property
    def is_number(self) -> bool:
        return isinstance(self.lexeme, Number)

    @property
    def is_identifier(self) -> bool:
        return isinstance(self.lexeme, Ident)

    @property
    def is_particle(self) -> bool:
        return isinstance(self.lexeme, Particle)

    @property
    def is_skip(self) -> bool:
        return isinstance(self.lexeme, Skip)

    @property
    def is_end(self) -> bool:
        return isinstance(self.lexeme, EndOfInput)

    def matches(self, kind: TokenType) -> bool:
        """Check whether this token answers a lookahead query for ``kind``."""
        return self.lexeme.matches(kind)


# Lookup table for operator and punctuation recognition.
# Two-character operators must be tried before one-character ones.
OPERATORS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ",": TokenType.COMMA,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "&": TokenType.BIT_AND,
    "&&": TokenType.LOGICAL_AND,
    "|": TokenType.BIT_OR,
    "||": TokenType.LOGICAL_OR,
    "!": TokenType.LOGICAL_NOT,
    "=": TokenType.ASSIGN,
    ".": TokenType.DOT,
    "..": TokenType.RANGE,
    "#": TokenType.HASH,
}

SYMBOLS = {kind: text for text, kind in OPERATORS.items()}
