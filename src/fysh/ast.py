"""
Fysh Abstract Syntax Tree (AST) Definitions
===========================================

This module defines the AST node types built by the Fysh parser and
consumed by the printers.

Node Hierarchy
--------------
ASTNode (base)
├── ProgramNode - root node, top-level items in source order
├── Declarations
│   └── SubroutineNode - sub NAME(params) { ... }
├── Statements
│   ├── BlockStatement - ><> ... <><
│   ├── ExpressionStatement - expression followed by '~'
│   ├── AssignmentStatement - NAME = value, optionally negated
│   ├── IfStatement - if/else
│   ├── WhileStatement - while loop
│   ├── ReturnStatement - return with optional value
│   └── BreakStatement - break
└── Expressions
    ├── NumberLiteral - signed integer
    ├── IdentifierExpression - name reference
    ├── UnaryExpression - negate, logical not, bitwise not
    ├── BinaryExpression - + * / | ^ and comparisons
    ├── CallExpression - NAME(args)
    ├── ArrayLiteral - [e1, e2, ...]
    ├── StepExpression - NAME++ / NAME--
    ├── OpaqueLiteral - fysh kept as verbatim text
    └── OpaqueOperation - compound glyph kept verbatim with its operands

Design Notes
------------
- All nodes are frozen dataclasses; child sequences are tuples
- The source location is carried on every node but excluded from
  equality, so two trees compare structurally
- The tree is strict: children are never shared between parents
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional, Union

from fysh.errors import SourceLocation


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location where this node starts (keyword-only,
            ignored by equality)
    """
    location: Optional[SourceLocation] = field(
        default=None, compare=False, repr=False, kw_only=True
    )


@dataclass(frozen=True)
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass(frozen=True)
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


@dataclass(frozen=True)
class Declaration(ASTNode):
    """Base class for declarations (only subroutines in Fysh)."""
    pass


# =============================================================================
# Operators
# =============================================================================

class UnaryOperator(Enum):
    """Unary operator types."""
    NEGATE = auto()       # left-facing fysh
    LOGICAL_NOT = auto()  # !!
    BITWISE_NOT = auto()  # !


class BinaryOperator(Enum):
    """Binary operator types."""
    # Implicit (juxtaposition)
    ADD = auto()

    # Multiplicative
    MULTIPLY = auto()
    DIVIDE = auto()

    # Bitwise
    BITWISE_OR = auto()
    BITWISE_XOR = auto()

    # Comparison
    LESS = auto()
    GREATER = auto()
    LESS_EQ = auto()
    GREATER_EQ = auto()
    EQUAL = auto()
    NOT_EQUAL = auto()


class StepDirection(Enum):
    """Direction of a step expression."""
    INCREMENT = auto()  # >><name>
    DECREMENT = auto()  # <name><<


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class NumberLiteral(Expression):
    """
    Integer literal.

    Attributes:
        value: Signed value; negative for left-facing fysh
    """
    value: int


@dataclass(frozen=True)
class IdentifierExpression(Expression):
    """
    Name reference.

    Attributes:
        name: The name between the fysh header and trailer
    """
    name: str


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Unary operation.

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator
    operand: Expression


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Binary operation.

    Attributes:
        operator: The binary operator
        left: Left operand
        right: Right operand
    """
    operator: BinaryOperator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class CallExpression(Expression):
    """
    Subroutine call.

    A left-facing callee is represented by wrapping this node in a
    NEGATE UnaryExpression; the call itself carries no sign.

    Attributes:
        callee: Name of the subroutine
        arguments: Argument expressions in source order
    """
    callee: str
    arguments: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    """
    Tank of values: [e1 - e2 - ...].

    Attributes:
        elements: Element expressions in source order
    """
    elements: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class StepExpression(Expression):
    """
    Increment or decrement of a named fysh.

    Attributes:
        name: The stepped name
        direction: INCREMENT or DECREMENT
    """
    name: str
    direction: StepDirection


@dataclass(frozen=True)
class OpaqueLiteral(Expression):
    """
    A fysh whose scales are neither a digit run nor a name.

    Attributes:
        text: The fysh exactly as written
    """
    text: str


@dataclass(frozen=True)
class OpaqueOperation(Expression):
    """
    A compound glyph operator ('(+o', 'o+)') whose meaning the front end
    does not decode.

    Attributes:
        glyph: The operator glyph as written
        operand: Expression following the glyph
        left: Expression preceding the glyph, None in prefix position
    """
    glyph: str
    operand: Expression
    left: Optional[Expression] = None


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class BlockStatement(Statement):
    """
    Block enclosed in ><> ... <><.

    Attributes:
        statements: Statements in the block
    """
    statements: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    """
    Expression used as a statement.

    Attributes:
        expression: The expression
    """
    expression: Expression


@dataclass(frozen=True)
class AssignmentStatement(Statement):
    """
    Assignment to a named fysh.

    Attributes:
        target: The assigned name
        value: The right-hand expression
        negate: True when the target was written left-facing, meaning the
            negation of value is stored
    """
    target: str
    value: Expression
    negate: bool = False


@dataclass(frozen=True)
class IfStatement(Statement):
    """
    If statement with optional else block.

    Attributes:
        condition: The condition expression
        then_block: Block executed if condition is true
        else_block: Optional block executed otherwise
    """
    condition: Expression
    then_block: BlockStatement
    else_block: Optional[BlockStatement] = None


@dataclass(frozen=True)
class WhileStatement(Statement):
    """
    While loop statement.

    Attributes:
        condition: Loop condition
        body: Loop body block
    """
    condition: Expression
    body: BlockStatement


@dataclass(frozen=True)
class ReturnStatement(Statement):
    """
    Return statement.

    Attributes:
        value: Return value expression (None for bare return)
    """
    value: Optional[Expression] = None


@dataclass(frozen=True)
class BreakStatement(Statement):
    """Break statement."""
    pass


# =============================================================================
# Declarations and Program Root
# =============================================================================

@dataclass(frozen=True)
class SubroutineNode(Declaration):
    """
    Subroutine definition.

    Attributes:
        name: Subroutine name
        parameters: Parameter names in declaration order
        body: The subroutine body
    """
    name: str
    parameters: tuple[str, ...]
    body: BlockStatement


TopLevel = Union[Statement, Declaration]


@dataclass(frozen=True)
class ProgramNode(ASTNode):
    """
    Root node of the AST representing a complete Fysh program.

    Attributes:
        body: Top-level subroutines and statements in source order
    """
    body: tuple[TopLevel, ...] = ()

    @property
    def subroutines(self) -> list[SubroutineNode]:
        """Top-level subroutine declarations."""
        return [item for item in self.body if isinstance(item, SubroutineNode)]


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Provides a visitor pattern for traversing the AST. Subclasses
    override visit_* methods for specific node types they care about.

    Usage:
        class NameCollector(ASTVisitor):
            def __init__(self):
                self.names = set()

            def visit_IdentifierExpression(self, node):
                self.names.add(node.name)

        collector = NameCollector()
        collector.visit(program)
    """

    def visit(self, node: ASTNode) -> Any:
        """
        Visit a node by dispatching to the appropriate method.

        Args:
            node: The AST node to visit

        Returns:
            The result of the visit method (varies by visitor)
        """
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        """
        Default visit method for unhandled node types.

        Visits all children of the node in field order.
        """
        for field_value in node.__dict__.values():
            if isinstance(field_value, ASTNode):
                self.visit(field_value)
            elif isinstance(field_value, tuple):
                for item in field_value:
                    if isinstance(item, ASTNode):
                        self.visit(item)
