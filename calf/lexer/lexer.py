"""
CALF Lexer - turns source text into classified tokens, one at a time.

The scanner is a pure state-advancing function: given the source, an
offset and the position at that offset it returns the next token plus the
new offset and position. ``Lexer`` wraps that state for the parser, which
pulls tokens on demand instead of tokenizing the whole buffer up front.
"""

import logging
import re
import unicodedata
from typing import List, Tuple

from .tokens import (
    Token, TokenType, Position, Number, Ident, Particle, Skip, EndOfInput, OPERATORS
)
from .errors import (
    create_unrecognized_lexeme_error, create_invalid_number_error,
    create_number_overflow_error
)
from .numbers import NumberConverter, NumberTypeSpec, resolve_number_type


logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r'[ \t]+')
_COMMENT_RE = re.compile(r'//[^\n]*')
_NUMBER_RE = re.compile(r'-?[0-9]+(?:\.[0-9]+)?')

# Letters and letter numbers (Roman numerals and the like)
_ALPHABETIC_CATEGORIES = ('Lu', 'Ll', 'Lt', 'Lm', 'Lo', 'Nl')
# Vowel signs and viramas that continue words in Indic and other scripts
_COMBINING_MARK_CATEGORIES = ('Mn', 'Mc')


def advance_position(pos: Position, fragment: str) -> Position:
    """
    Compute the position following a consumed fragment.

    A line terminator moves to column 0 of the next row; anything else
    advances the column by the fragment's character length.
    """
    if fragment == "\n":
        return Position(pos.row + 1, 0)
    return Position(pos.row, pos.col + len(fragment))


def _is_identifier_start(char: str) -> bool:
    """Check if character can start an identifier."""
    return char == '_' or unicodedata.category(char) in _ALPHABETIC_CATEGORIES


def _is_identifier_continue(char: str) -> bool:
    """Check if character can continue an identifier."""
    # Digits must be ASCII; other decimal digits are not alphabetic
    return (_is_identifier_start(char) or '0' <= char <= '9' or
            unicodedata.category(char) in _COMBINING_MARK_CATEGORIES)


def _scan(source: str, offset: int, prev_pos: Position, convert: NumberConverter,
          filename: str = "<string>") -> Tuple[Token, int, Position]:
    """Scan one token starting at ``offset``; see ``scan_token``."""
    pos = prev_pos
    start = offset

    match = _WHITESPACE_RE.match(source, start)
    if match:
        pos = advance_position(pos, match.group(0))
        start = match.end()

    if start >= len(source):
        # End of input consumes nothing, not even trailing whitespace
        return Token(EndOfInput(), prev_pos), offset, prev_pos

    char = source[start]

    if char == '\n':
        return Token(Skip(), pos, char), start + 1, advance_position(pos, char)

    match = _COMMENT_RE.match(source, start)
    if match:
        text = match.group(0)
        return Token(Skip(), pos, text), match.end(), advance_position(pos, text)

    match = _NUMBER_RE.match(source, start)
    if match:
        text = match.group(0)
        try:
            value = convert(text)
        except OverflowError as e:
            raise create_number_overflow_error(text, pos, str(e), filename)
        except (ValueError, ArithmeticError, TypeError) as e:
            raise create_invalid_number_error(text, pos, str(e), filename)
        return Token(Number(value), pos, text), match.end(), advance_position(pos, text)

    if _is_identifier_start(char):
        end = start + 1
        while end < len(source) and _is_identifier_continue(source[end]):
            end += 1
        text = source[start:end]
        return Token(Ident(text), pos, text), end, advance_position(pos, text)

    # Operators and punctuation (longer operators first)
    for op_len in (2, 1):
        text = source[start:start + op_len]
        if len(text) == op_len and text in OPERATORS:
            token = Token(Particle(OPERATORS[text]), pos, text)
            return token, start + op_len, advance_position(pos, text)

    raise create_unrecognized_lexeme_error(char, pos, filename)


def scan_token(code: str, prev_pos: Position,
               number_type: NumberTypeSpec = float) -> Tuple[Token, str, Position]:
    """
    Tokenize one lexical unit from the start of ``code``.

    Args:
        code: Remaining source text
        prev_pos: Position of the first character of ``code``
        number_type: Type numeric literals are converted into

    Returns:
        Tuple of the token, the text left after it and the position there

    Raises:
        LexerError: If the leading fragment matches no lexical rule or a
            numeric literal cannot be converted
    """
    token, end, next_pos = _scan(code, 0, prev_pos, resolve_number_type(number_type))
    return token, code[end:], next_pos


class Lexer:
    """
    Cursor over one immutable source buffer.

    Each call to ``scan_token`` returns the next token and advances the
    cursor; after end of input it keeps returning ``EndOfInput``.
    """

    def __init__(self, source: str, number_type: NumberTypeSpec = float,
                 filename: str = "<string>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            number_type: Type numeric literals are converted into
            filename: Name reported in diagnostics
        """
        self.source = source
        self.filename = filename
        self.offset = 0
        self.pos = Position(0, 0)
        self._convert = resolve_number_type(number_type)

    def scan_token(self) -> Token:
        """Scan the next token, including Skip tokens."""
        token, self.offset, self.pos = _scan(
            self.source, self.offset, self.pos, self._convert, self.filename
        )
        return token

    def tokenize(self, include_skips: bool = False) -> List[Token]:
        """
        Tokenize the rest of the source code.

        Returns:
            List of tokens ending with the EndOfInput token
        """
        tokens: List[Token] = []
        while True:
            token = self.scan_token()
            if token.is_skip and not include_skips:
                continue
            tokens.append(token)
            if token.is_end:
                break
        logger.debug("Tokenized %s into %d tokens", self.filename, len(tokens))
        return tokens


def tokenize_string(source: str, number_type: NumberTypeSpec = float,
                    filename: str = "<string>", include_skips: bool = False) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, number_type, filename).tokenize(include_skips)


def token_kinds(tokens: List[Token]) -> List[TokenType]:
    """Particle kinds of a token list; numbers and identifiers map to their class."""
    kinds = []
    for token in tokens:
        if token.is_particle:
            kinds.append(token.lexeme.kind)
        elif token.is_number:
            kinds.append(TokenType.FLOAT if '.' in token.text else TokenType.INTEGER)
        elif token.is_identifier:
            kinds.append(TokenType.IDENTIFIER)
        elif token.is_skip:
            kinds.append(TokenType.COMMENT if token.text.startswith('//') else TokenType.NEWLINE)
    return kinds
