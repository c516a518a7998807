"""
Error handling for the CALF lexer.

Provides error reporting with source position information. Every failure
in the front end is raised as a CalfError subclass carrying a message and
the position of the earliest offending token.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass

from .tokens import Position


@dataclass
class Diagnostic:
    """Structured description of a front-end error."""
    message: str
    position: Position
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None
    filename: str = "<string>"

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix += f"[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.filename}:{self.position}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class CalfError(Exception):
    """
    Base class of every error raised while building an AST.

    Attributes:
        message: Human-readable description
        position: Source position the error is anchored to
        diagnostic: Full diagnostic used for rendering
    """

    # Codes a subclass may raise, mapped to their descriptions
    error_codes: Dict[str, str] = {}

    def __init__(
        self,
        message: str,
        position: Position,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        filename: str = "<string>",
    ):
        if code is not None and code not in self.error_codes:
            raise ValueError(f"Unknown error code {code!r} for {type(self).__name__}")
        super().__init__(message)
        self.message = message
        self.position = position
        self.diagnostic = Diagnostic(
            message=message,
            position=position,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions,
            filename=filename,
        )

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def description(self) -> Optional[str]:
        """Category of the error, looked up from its code."""
        return self.error_codes.get(self.code)

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common error codes for categorization
ERROR_CODES = {
    "L001": "Unrecognized lexeme",
    "L002": "Invalid numeric literal",
    "L003": "Number literal overflow",
}


class LexerError(CalfError):
    """Raised when source text cannot be split into tokens."""

    error_codes = ERROR_CODES


# Helper functions for creating common errors
def create_unrecognized_lexeme_error(fragment: str, position: Position,
                                     filename: str = "<string>") -> LexerError:
    """Create an error for a fragment no lexical rule accepts."""
    if fragment.isprintable():
        help_text = f"The character '{fragment}' is not valid in CALF source code."
    else:
        help_text = f"Non-printable character (Unicode: U+{ord(fragment[0]):04X}) is not allowed."

    return LexerError(
        message=f"Unrecognized lexeme: '{fragment}'",
        position=position,
        code="L001",
        help_text=help_text,
        filename=filename,
    )


def create_invalid_number_error(text: str, position: Position, reason: str,
                                filename: str = "<string>") -> LexerError:
    """Create an error for a literal the number type rejects."""
    return LexerError(
        message=f"Invalid numeric literal: '{text}'",
        position=position,
        code="L002",
        help_text=reason,
        suggestions=["Check the numeric format", "Use a float number type for decimal literals"],
        filename=filename,
    )


def create_number_overflow_error(text: str, position: Position, reason: str,
                                 filename: str = "<string>") -> LexerError:
    """Create an error for a literal that does not fit the number type."""
    return LexerError(
        message=f"Numeric literal overflow: '{text}'",
        position=position,
        code="L003",
        help_text=reason,
        suggestions=["Use a wider number type"],
        filename=filename,
    )
