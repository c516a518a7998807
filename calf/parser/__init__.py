"""
CALF Parser Package

Implements a recursive descent, precedence-climbing parser for the CALF
expression language. Produces an AST whose nodes carry the source position
of the token they are anchored to.

Key Features:
- Precedence climbing over a fixed ten-tier grammar
- Bounded lookahead over a pull-based lexer
- Right-nested ternaries, variable-arity calls and lambdas
- Fail-fast diagnostics anchored to source coordinates

"""

from .ast_nodes import *
from .lookahead import TokenBuffer
from .parser import Parser, build_ast
from .errors import ParseError

__all__ = [
    # Core parser
    "Parser", "build_ast", "TokenBuffer",

    # AST nodes
    "AST", "ASTNode", "Expression", "Statement",
    "Number", "Identifier", "Group", "UnaryOp", "BinaryOp", "TernaryOp",
    "Call", "Lambda", "ListLiteral", "RangeLiteral",
    "Assign", "ExpressionStatement",
    "ASTVisitor", "SExpressionPrinter", "format_node",

    # Error handling
    "ParseError",
]
