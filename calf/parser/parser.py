"""
CALF Recursive Descent Parser

Implements a precedence-climbing parser for CALF. Each binary precedence
tier parses its operands with the next tighter tier, so operator
precedence falls out of the call structure rather than a table.

Precedence, loosest to tightest:
    ternary     ? :
    equality    == !=
    comparison  > < >= <= && ||
    logic       & |
    term        + -
    factor      * / %
    unary       ! -          (prefix)
    call        name{args}
    lambda      fn(params) body
    primary     number, identifier, (expr), [list], [range]

There is no error recovery: the first error aborts the parse.
"""

import logging
from typing import Callable, List, Optional, Tuple

from ..config import FrontendConfiguration
from ..lexer.lexer import Lexer
from ..lexer.numbers import NumberTypeSpec
from ..lexer.tokens import Token, TokenType
from .ast_nodes import (
    AST, Statement, Assign, ExpressionStatement, Expression, Number, Identifier,
    Group, UnaryOp, BinaryOp, TernaryOp, Call, Lambda, ListLiteral, RangeLiteral
)
from .errors import (
    ParseError, create_unexpected_token_error, create_missing_token_error,
    create_unexpected_comma_error, create_unclosed_delimiter_error,
    create_invalid_expression_error, create_invalid_assignment_error,
    create_unexpected_eof_error, create_invalid_range_error
)
from .lookahead import TokenBuffer


logger = logging.getLogger(__name__)


# Operators legal at each precedence tier
EQUALITY_OPERATORS = (TokenType.EQUAL, TokenType.NOT_EQUAL)
COMPARISON_OPERATORS = (
    TokenType.GREATER_THAN, TokenType.LESS_THAN,
    TokenType.GREATER_EQUAL, TokenType.LESS_EQUAL,
    TokenType.LOGICAL_AND, TokenType.LOGICAL_OR,
)
LOGIC_OPERATORS = (TokenType.BIT_AND, TokenType.BIT_OR)
TERM_OPERATORS = (TokenType.PLUS, TokenType.MINUS)
FACTOR_OPERATORS = (TokenType.MULTIPLY, TokenType.DIVIDE, TokenType.MODULO)
UNARY_OPERATORS = (TokenType.LOGICAL_NOT, TokenType.MINUS)

LAMBDA_KEYWORD = "fn"


def _is_whole(value) -> bool:
    try:
        return value >= 0 and value == int(value)
    except (TypeError, ValueError, OverflowError):
        return False


class Parser:
    """
    CALF parser over a single source buffer.

    Pulls tokens from its own lexer through a lookahead buffer and builds
    one statement per ``scan_statement`` call.
    """

    def __init__(self, source: str, number_type: Optional[NumberTypeSpec] = None,
                 config: Optional[FrontendConfiguration] = None):
        """
        Initialize parser with source code.

        Args:
            source: Source code string
            number_type: Type numeric literals are converted into; overrides
                the configuration when given
            config: Front-end configuration
        """
        self.config = config or FrontendConfiguration()
        if number_type is None:
            number_type = self.config.converter
        self.filename = self.config.filename
        self.lexer = Lexer(source, number_type, self.filename)
        self.tokens = TokenBuffer(self.lexer, self.config.max_lookahead)

    def parse(self) -> AST:
        """
        Parse the whole buffer into an AST.

        Returns:
            AST holding every statement in source order

        Raises:
            LexerError: If a token cannot be scanned
            ParseError: If the token stream is not a valid program
        """
        statements = []
        while not self.is_end():
            consumed = self.tokens.consumed
            statements.append(self.scan_statement())
            if self.tokens.consumed == consumed:
                raise ParseError("Parser made no progress", self.lexer.pos, code="P009",
                                 filename=self.filename)

        logger.debug("Built AST with %d statements from %s", len(statements), self.filename)
        return AST(tuple(statements))

    def scan_statement(self) -> Statement:
        """Parse the next statement."""
        try:
            statement = self._statement()
        except ParseError as e:
            e.diagnostic.filename = self.filename
            raise
        logger.debug("Parsed %s at %s", type(statement).__name__, statement.pos)
        return statement

    def is_end(self) -> bool:
        """True when no token is left to parse."""
        return self.tokens.is_end()

    # ------------------------------------------------------------------ statements

    def _statement(self) -> Statement:
        if self._check(TokenType.IDENTIFIER) and self._check(TokenType.ASSIGN, 1):
            return self._assign_statement()
        # Otherwise, expression statement
        return self._expression_statement()

    def _assign_statement(self) -> Assign:
        target = self._advance("an identifier")
        if not target.is_identifier:
            raise create_invalid_assignment_error(target)
        self._advance("'='")  # consume "="
        value = self._expression()
        return Assign(target.lexeme.name, value, target.pos)

    def _expression_statement(self) -> ExpressionStatement:
        expr = self._expression()
        return ExpressionStatement(expr, expr.pos)

    # ------------------------------------------------------------------ expressions

    def _expression(self) -> Expression:
        return self._ternary()

    def _ternary(self) -> Expression:
        """Parse ``cond ? then : else``; both branches nest to the right."""
        condition = self._equality()
        if not self._check(TokenType.QUESTION):
            return condition

        self._advance("'?'")
        then = self._ternary()
        if not self._check(TokenType.COLON):
            raise create_missing_token_error("Expected a colon operator", then.pos,
                                             self.tokens.peek())
        self._advance("':'")
        otherwise = self._ternary()
        return TernaryOp(condition, then, otherwise, condition.pos)

    def _binary(self, operators: Tuple[TokenType, ...],
                operand: Callable[[], Expression]) -> Expression:
        """Parse one left-associative tier whose operands come from ``operand``."""
        expr = operand()
        while self._check_any(operators):
            op = self._advance("an operator").lexeme.kind
            right = operand()
            expr = BinaryOp(op, expr, right, expr.pos)
        return expr

    def _equality(self) -> Expression:
        return self._binary(EQUALITY_OPERATORS, self._comparison)

    def _comparison(self) -> Expression:
        return self._binary(COMPARISON_OPERATORS, self._logic)

    def _logic(self) -> Expression:
        return self._binary(LOGIC_OPERATORS, self._term)

    def _term(self) -> Expression:
        return self._binary(TERM_OPERATORS, self._factor)

    def _factor(self) -> Expression:
        return self._binary(FACTOR_OPERATORS, self._unary)

    def _unary(self) -> Expression:
        if self._check_any(UNARY_OPERATORS):
            op = self._advance("an operator").lexeme.kind
            operand = self._unary()
            return UnaryOp(op, operand, operand.pos)
        return self._call()

    def _call(self) -> Expression:
        if self._check(TokenType.IDENTIFIER) and self._check(TokenType.LEFT_BRACE, 1):
            name = self._advance("a function name")
            self._advance("'{'")  # consume "{"
            args = self._delimited(TokenType.RIGHT_BRACE, self._expression)
            return Call(name.lexeme.name, tuple(args), name.pos)
        return self._lambda()

    def _lambda(self) -> Expression:
        if self.tokens.has_identifier(LAMBDA_KEYWORD, 0) and self._check(TokenType.LEFT_PAREN, 1):
            keyword = self._advance(f"'{LAMBDA_KEYWORD}'")
            self._advance("'('")  # consume "("
            params = self._delimited(TokenType.RIGHT_PAREN, self._parameter)
            body = self._expression()
            return Lambda(tuple(params), body, keyword.pos)
        return self._primary()

    def _primary(self) -> Expression:
        if self._check(TokenType.INTEGER) or self._check(TokenType.FLOAT):
            token = self._advance("a number")
            return Number(token.lexeme.value, token.pos)

        if self._check(TokenType.IDENTIFIER):
            token = self._advance("an identifier")
            return Identifier(token.lexeme.name, token.pos)

        if self._check(TokenType.LEFT_PAREN):
            open_paren = self._advance("'('")
            inner = self._expression()
            self._expect_closing(TokenType.RIGHT_PAREN,
                                 "Expected a closing parenthesis after expression")
            return Group(inner, open_paren.pos)

        if self._check(TokenType.LEFT_BRACKET):
            return self._aggregate()

        # Nothing here can start an expression
        raise create_invalid_expression_error(self.lexer.pos, self.tokens.peek())

    def _aggregate(self) -> Expression:
        """Parse ``[a, b, ...]`` or ``[start .. length ; step]``."""
        open_bracket = self._advance("'['")
        if self._check(TokenType.INTEGER) and self._check(TokenType.RANGE, 1):
            return self._range(open_bracket)

        values = self._delimited(TokenType.RIGHT_BRACKET, self._expression)
        return ListLiteral(tuple(values), open_bracket.pos)

    def _range(self, open_bracket: Token) -> RangeLiteral:
        start = self._advance("a range start")
        self._advance("'..'")  # consume ".."

        length = self._number("a range length")
        if not _is_whole(length.lexeme.value):
            raise create_invalid_range_error("Range length must be a non-negative integer", length)

        step = None
        if self._check(TokenType.SEMICOLON):
            self._advance("';'")
            step = self._number("a range step").lexeme.value

        self._expect_closing(TokenType.RIGHT_BRACKET, "Expected a closing bracket")
        return RangeLiteral(start.lexeme.value, int(length.lexeme.value), step, open_bracket.pos)

    # ------------------------------------------------------------------ sequences

    def _delimited(self, closing: TokenType, item: Callable[[], object]) -> List:
        """
        Parse comma separated items up to and including ``closing``.

        Items and commas must strictly alternate: no leading, doubled or
        trailing comma, and no two items without a comma between them.
        """
        items = []
        expect_item = True
        last_comma = None
        while True:
            if self._check(closing):
                if expect_item and items:
                    raise create_unexpected_comma_error(last_comma, trailing=True)
                self._advance(f"'{closing.symbol}'")
                return items

            if expect_item:
                if self._check(TokenType.COMMA):
                    raise create_unexpected_comma_error(self._advance("','"))
                items.append(item())
                expect_item = False
            elif self._check(TokenType.COMMA):
                last_comma = self._advance("','")
                expect_item = True
            else:
                found = self._advance(f"a comma or '{closing.symbol}'")
                raise create_unexpected_token_error("a comma", found)

    def _parameter(self) -> str:
        if self._check(TokenType.IDENTIFIER):
            return self._advance("a parameter").lexeme.name
        found = self._advance("a parameter")
        raise create_unexpected_token_error("a parameter", found)

    def _number(self, expected: str) -> Token:
        if self._check(TokenType.INTEGER):
            return self._advance(expected)
        found = self._advance(expected)
        raise create_unexpected_token_error(expected, found)

    # ------------------------------------------------------------------ utility methods

    def _check(self, kind: TokenType, offset: int = 0) -> bool:
        """Check the token at ``offset`` without consuming it."""
        return self.tokens.has_kind(kind, offset)

    def _check_any(self, kinds: Tuple[TokenType, ...]) -> bool:
        return any(self.tokens.has_kind(kind) for kind in kinds)

    def _advance(self, expected: str) -> Token:
        """Consume the next token; running out of tokens is an error."""
        token = self.tokens.pop()
        if token is None:
            raise create_unexpected_eof_error(expected, self.lexer.pos)
        return token

    def _expect_closing(self, kind: TokenType, message: str) -> Token:
        """Consume a closing delimiter or fail at the token found instead."""
        if self._check(kind):
            return self._advance(f"'{kind.symbol}'")
        found = self.tokens.pop()
        if found is None:
            raise create_unclosed_delimiter_error(message, self.tokens.last_pos or self.lexer.pos)
        raise create_unclosed_delimiter_error(message, found.pos, found)


def build_ast(source: str, number_type: Optional[NumberTypeSpec] = None,
              config: Optional[FrontendConfiguration] = None) -> AST:
    """
    Convenience function to parse a source string.

    Args:
        source: Source code string
        number_type: Type numeric literals are converted into (float when
            neither this nor ``config`` says otherwise)
        config: Front-end configuration

    Returns:
        AST of the source

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    return Parser(source, number_type, config).parse()
