"""
Abstract Syntax Tree node definitions for CALF.

Each node records the position of the token it is anchored to and owns
its children outright: sequences are tuples, nodes are frozen, and two
trees compare equal when their structure, values and positions match.
"""

from dataclasses import dataclass, fields
from typing import Any, Iterator, List, Optional, Tuple

from ..lexer.tokens import Position, TokenType


class ASTNode:
    """Base class for all AST nodes."""

    pos: Position

    def accept(self, visitor: 'ASTVisitor') -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    def children(self) -> List['ASTNode']:
        """Get all child nodes, in source order."""
        result = []
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                result.append(value)
            elif isinstance(value, tuple):
                result.extend(item for item in value if isinstance(item, ASTNode))
        return result


# ============================================================================
# Expressions
# ============================================================================

class Expression(ASTNode):
    """Base class for expressions (syntagmas)."""


@dataclass(frozen=True)
class Number(Expression):
    """Numeric literal."""
    value: Any
    pos: Position


@dataclass(frozen=True)
class Identifier(Expression):
    """Identifier expression."""
    name: str
    pos: Position


@dataclass(frozen=True)
class Group(Expression):
    """Parenthesized expression, kept distinct from its inner expression."""
    inner: Expression
    pos: Position


@dataclass(frozen=True)
class UnaryOp(Expression):
    """Prefix operation; ``op`` is LOGICAL_NOT or MINUS."""
    op: TokenType
    operand: Expression
    pos: Position


@dataclass(frozen=True)
class BinaryOp(Expression):
    """Binary operation expression."""
    op: TokenType
    left: Expression
    right: Expression
    pos: Position


@dataclass(frozen=True)
class TernaryOp(Expression):
    """Conditional expression ``condition ? then : otherwise``."""
    condition: Expression
    then: Expression
    otherwise: Expression
    pos: Position


@dataclass(frozen=True)
class Call(Expression):
    """Function call ``name{arg, ...}``."""
    function_name: str
    arguments: Tuple[Expression, ...]
    pos: Position


@dataclass(frozen=True)
class Lambda(Expression):
    """Anonymous function ``fn(param, ...) body``."""
    parameters: Tuple[str, ...]
    body: Expression
    pos: Position


@dataclass(frozen=True)
class ListLiteral(Expression):
    """List literal ``[value, ...]``."""
    values: Tuple[Expression, ...]
    pos: Position


@dataclass(frozen=True)
class RangeLiteral(Expression):
    """Range literal ``[start .. length]`` or ``[start .. length ; step]``."""
    start: Any
    length: int
    step: Optional[Any]
    pos: Position


# ============================================================================
# Statements
# ============================================================================

class Statement(ASTNode):
    """Base class for statements."""


@dataclass(frozen=True)
class Assign(Statement):
    """Assignment statement ``name = value``."""
    name: str
    value: Expression
    pos: Position


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """Statement made of a single expression."""
    expression: Expression
    pos: Position


@dataclass(frozen=True)
class AST:
    """Root of the tree: the ordered statements of one source buffer."""
    statements: Tuple[Statement, ...] = ()

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)

    def __len__(self) -> int:
        return len(self.statements)

    def __getitem__(self, index: int) -> Statement:
        return self.statements[index]


# ============================================================================
# Visitors
# ============================================================================

class ASTVisitor:
    """
    Visitor dispatching on the node class name.

    ``visit(node)`` calls ``visit_<ClassName>(node)`` when the subclass
    defines it and ``generic_visit(node)`` otherwise.
    """

    def visit(self, node: ASTNode) -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: ASTNode) -> Any:
        for child in node.children():
            self.visit(child)
        return None


class SExpressionPrinter(ASTVisitor):
    """Render nodes in a parenthesised prefix notation, e.g. ``(- (- 1 2) 3)``."""

    def visit_Number(self, node: Number) -> str:
        return str(node.value)

    def visit_Identifier(self, node: Identifier) -> str:
        return node.name

    def visit_Group(self, node: Group) -> str:
        return f"(group {self.visit(node.inner)})"

    def visit_UnaryOp(self, node: UnaryOp) -> str:
        return f"({node.op.symbol} {self.visit(node.operand)})"

    def visit_BinaryOp(self, node: BinaryOp) -> str:
        return f"({node.op.symbol} {self.visit(node.left)} {self.visit(node.right)})"

    def visit_TernaryOp(self, node: TernaryOp) -> str:
        return (f"(? {self.visit(node.condition)} {self.visit(node.then)} "
                f"{self.visit(node.otherwise)})")

    def visit_Call(self, node: Call) -> str:
        args = "".join(f" {self.visit(arg)}" for arg in node.arguments)
        return f"(call {node.function_name}{args})"

    def visit_Lambda(self, node: Lambda) -> str:
        return f"(fn ({' '.join(node.parameters)}) {self.visit(node.body)})"

    def visit_ListLiteral(self, node: ListLiteral) -> str:
        return f"(list{''.join(f' {self.visit(value)}' for value in node.values)})"

    def visit_RangeLiteral(self, node: RangeLiteral) -> str:
        if node.step is None:
            return f"(range {node.start} {node.length})"
        return f"(range {node.start} {node.length} {node.step})"

    def visit_Assign(self, node: Assign) -> str:
        return f"(= {node.name} {self.visit(node.value)})"

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> str:
        return self.visit(node.expression)

    def generic_visit(self, node: ASTNode) -> str:
        raise TypeError(f"Cannot format {type(node).__name__}")


def format_node(node: ASTNode) -> str:
    """Render a statement or expression in prefix notation."""
    return SExpressionPrinter().visit(node)
