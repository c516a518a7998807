"""
CALF Front End

Source text in, abstract syntax tree out, for the small expression-oriented
CALF language.

Architecture:
    calf/
    ├── lexer/           # Tokenization, positions, numeric literal types
    ├── parser/          # Lookahead buffer, grammar and AST nodes
    ├── config.py        # Front-end configuration
    └── cli.py           # Command line harness

"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import FrontendConfiguration
from .lexer import Lexer, Position, Token, TokenType, scan_token, tokenize_string
from .lexer import CalfError, LexerError
from .parser import AST, Parser, ParseError, build_ast, format_node

__all__ = [
    # Entry points
    "scan_token",
    "build_ast",

    # Core classes
    "Lexer",
    "Parser",
    "AST",
    "Token",
    "TokenType",
    "Position",
    "FrontendConfiguration",
    "tokenize_string",
    "format_node",

    # Errors
    "CalfError",
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__license__",
]
