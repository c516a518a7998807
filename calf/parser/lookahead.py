"""
Lookahead buffer between the lexer and the parser.

The parser peeks at tokens by offset before committing to a grammar rule.
Tokens are pulled from the lexer only when a peek needs them, Skip tokens
never enter the buffer, and once EndOfInput is seen the lexer is not asked
again.
"""

import logging
from collections import deque
from typing import Deque, Optional

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType, Ident, Position


logger = logging.getLogger(__name__)


class TokenBuffer:
    """
    FIFO queue of pre-fetched tokens.

    Args:
        lexer: Source of tokens; only ever advanced forward
        capacity: Largest number of tokens a single peek may require
    """

    def __init__(self, lexer: Lexer, capacity: int = 8):
        self.lexer = lexer
        self.capacity = capacity
        self.tokens: Deque[Token] = deque()
        self.exhausted = False
        self.consumed = 0
        self.last_pos: Optional[Position] = None

    def _fill(self, offset: int):
        """Fetch tokens until ``offset`` is buffered or input is exhausted."""
        if offset >= self.capacity:
            raise ValueError(f"Lookahead offset {offset} exceeds buffer capacity {self.capacity}")

        while len(self.tokens) <= offset and not self.exhausted:
            token = self.lexer.scan_token()
            if token.is_skip:
                continue
            if token.is_end:
                self.exhausted = True
                break
            logger.debug("Buffered %s", token)
            self.tokens.append(token)

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Token at ``offset`` from the read point, or None past the end."""
        self._fill(offset)
        if offset < len(self.tokens):
            return self.tokens[offset]
        return None

    def has_kind(self, kind: TokenType, offset: int = 0) -> bool:
        """Check whether the token at ``offset`` answers to ``kind``."""
        token = self.peek(offset)
        return token is not None and token.matches(kind)

    def has_identifier(self, name: str, offset: int = 0) -> bool:
        """Check whether the token at ``offset`` is the identifier ``name``."""
        token = self.peek(offset)
        return token is not None and isinstance(token.lexeme, Ident) and token.lexeme.name == name

    def pop(self) -> Optional[Token]:
        """Consume the token at the read point, or return None at the end."""
        self._fill(0)
        if not self.tokens:
            return None
        token = self.tokens.popleft()
        self.consumed += 1
        self.last_pos = token.pos
        return token

    def is_end(self) -> bool:
        """True once no token remains to be consumed."""
        self._fill(0)
        return not self.tokens

    def __len__(self) -> int:
        return len(self.tokens)
