"""
CALF Lexer Package

Implements a position-tracking tokenizer for the CALF expression language.

Key Features:
- Pull-based scanning, one token per call
- Row/column tracking for every token and error
- Numeric literals converted into a caller-chosen number type
- Unicode identifiers

"""

from .tokens import (
    Token, TokenType, Position, Number, Ident, Particle, Skip, EndOfInput, OPERATORS
)
from .lexer import Lexer, advance_position, scan_token, tokenize_string, token_kinds
from .errors import CalfError, LexerError, Diagnostic
from .numbers import NUMBER_TYPES, resolve_number_type

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "Position",
    "Number",
    "Ident",
    "Particle",
    "Skip",
    "EndOfInput",
    "OPERATORS",
    "advance_position",
    "scan_token",
    "tokenize_string",
    "token_kinds",
    "CalfError",
    "LexerError",
    "Diagnostic",
    "NUMBER_TYPES",
    "resolve_number_type",
]
