"""
Error handling for the CALF parser.

Syntax errors are fatal: the first one aborts the build of the AST and is
reported at the position of the earliest offending token.
"""

from typing import Optional

from ..lexer.tokens import Token, Position
from ..lexer.errors import CalfError


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P003": "Unexpected comma",
    "P004": "Unclosed delimiter",
    "P005": "Invalid expression",
    "P006": "Invalid assignment target",
    "P007": "Unexpected end of input",
    "P008": "Invalid range literal",
    "P009": "Parser made no progress",
}


class ParseError(CalfError):
    """
    Exception raised when the parser encounters a syntax error.

    Carries the offending token when there is one.
    """

    error_codes = PARSER_ERROR_CODES

    def __init__(self, message: str, position: Position, token: Optional[Token] = None, **kwargs):
        super().__init__(message, position, **kwargs)
        self.token = token


# Helper functions for creating common parser errors

def create_unexpected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a token that cannot appear here."""
    return ParseError(
        message=f"Expecting {expected}",
        position=found.pos,
        token=found,
        code="P001",
        help_text=f"Found '{found.text}' where {expected} was expected.",
    )


def create_missing_token_error(message: str, position: Position,
                               found: Optional[Token] = None) -> ParseError:
    """Create an error for an expected particle that is not there."""
    help_text = None
    if found is not None:
        help_text = f"Found '{found.text}' instead."
    return ParseError(
        message=message,
        position=position,
        token=found,
        code="P002",
        help_text=help_text,
    )


def create_unexpected_comma_error(comma: Token, trailing: bool = False) -> ParseError:
    """Create an error for a comma that does not separate two items."""
    if trailing:
        message = "Unexpected trailing comma"
        help_text = "Remove the comma before the closing delimiter."
    else:
        message = "Not expecting a comma"
        help_text = "Commas separate items; an item is missing before this one."
    return ParseError(
        message=message,
        position=comma.pos,
        token=comma,
        code="P003",
        help_text=help_text,
    )


def create_unclosed_delimiter_error(message: str, position: Position,
                                    token: Optional[Token] = None) -> ParseError:
    """Create an error for a group or aggregate that is never closed."""
    return ParseError(
        message=message,
        position=position,
        token=token,
        code="P004",
    )


def create_invalid_expression_error(position: Position, token: Optional[Token] = None,
                                    message: str = "Could not parse a valid expression") -> ParseError:
    """Create an error for a token that cannot start an expression."""
    help_text = None
    if token is not None and not token.is_end:
        help_text = f"'{token.text}' cannot start an expression."
    return ParseError(
        message=message,
        position=position,
        token=token,
        code="P005",
        help_text=help_text,
    )


def create_invalid_assignment_error(target: Token) -> ParseError:
    """Create an error for an assignment whose target is not an identifier."""
    return ParseError(
        message="Invalid identifier for assignment",
        position=target.pos,
        token=target,
        code="P006",
    )


def create_unexpected_eof_error(expected: str, position: Position) -> ParseError:
    """Create an error for unexpected end of input."""
    return ParseError(
        message=f"Unexpected end of input, expected {expected}",
        position=position,
        code="P007",
        help_text=f"The parser reached the end of the source while expecting {expected}.",
    )


def create_invalid_range_error(reason: str, token: Token) -> ParseError:
    """Create an error for a malformed range literal."""
    return ParseError(
        message=reason,
        position=token.pos,
        token=token,
        code="P008",
    )
