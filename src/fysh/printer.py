"""
Fysh AST Printers
=================

Two visitors over the Fysh AST:

CanonicalPrinter
    Renders any node as normalized, C-like text. Every unary and binary
    operation is parenthesized whatever the source grouping was, so two
    trees are equal exactly when their renderings are equal:

        ><fysh> <3 ><{({o> ~          (fysh * 5);
        <fysh>< = ><(({o> ~           fysh = (-1);
        [(average)< ><numbers>] ~     (-average(numbers));

TreePrinter
    Indented one-node-per-line dump for debugging.

The printers never look at tokens or glyphs, except for opaque nodes
which carry their glyph text verbatim.
"""

from fysh.ast import (
    ASTNode,
    ASTVisitor,
    Expression,
    ProgramNode,
    SubroutineNode,
    BlockStatement,
    ExpressionStatement,
    AssignmentStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    BreakStatement,
    NumberLiteral,
    IdentifierExpression,
    UnaryExpression,
    BinaryExpression,
    CallExpression,
    ArrayLiteral,
    StepExpression,
    OpaqueLiteral,
    OpaqueOperation,
    UnaryOperator,
    BinaryOperator,
    StepDirection,
)


UNARY_SYMBOLS = {
    UnaryOperator.NEGATE: "-",
    UnaryOperator.LOGICAL_NOT: "!",
    UnaryOperator.BITWISE_NOT: "~",
}

BINARY_SYMBOLS = {
    BinaryOperator.ADD: "+",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.BITWISE_OR: "|",
    BinaryOperator.BITWISE_XOR: "^",
    BinaryOperator.LESS: "<",
    BinaryOperator.GREATER: ">",
    BinaryOperator.LESS_EQ: "<=",
    BinaryOperator.GREATER_EQ: ">=",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
}

STEP_SYMBOLS = {
    StepDirection.INCREMENT: "++",
    StepDirection.DECREMENT: "--",
}


# =============================================================================
# Canonical Printer
# =============================================================================

class CanonicalPrinter(ASTVisitor):
    """
    Renders nodes as canonical text.

    Each visit method returns the text for its node; nothing is
    accumulated, so one printer can be reused for any number of nodes.

    Usage:
        printer = CanonicalPrinter()
        text = printer.render(program)
    """

    def render(self, node: ASTNode) -> str:
        """Render a node (usually the ProgramNode root) as canonical text."""
        return self.visit(node)

    def generic_visit(self, node: ASTNode) -> str:
        raise TypeError(f"cannot render {node.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Program and declarations
    # -------------------------------------------------------------------------

    def visit_ProgramNode(self, node: ProgramNode) -> str:
        return "\n".join(self.visit(item) for item in node.body)

    def visit_SubroutineNode(self, node: SubroutineNode) -> str:
        params = ", ".join(node.parameters)
        return f"sub {node.name}({params}) {self.visit(node.body)}"

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def visit_BlockStatement(self, node: BlockStatement) -> str:
        lines = ["{"]
        lines.extend(self.visit(stmt) for stmt in node.statements)
        lines.append("}")
        return "\n".join(lines)

    def visit_ExpressionStatement(self, node: ExpressionStatement) -> str:
        return f"{self.visit(node.expression)};"

    def visit_AssignmentStatement(self, node: AssignmentStatement) -> str:
        value = self.visit(node.value)
        if node.negate:
            value = f"(-{value})"
        return f"{node.target} = {value};"

    def visit_IfStatement(self, node: IfStatement) -> str:
        text = f"if ({self.visit(node.condition)}) {self.visit(node.then_block)}"
        if node.else_block is not None:
            text += f" else {self.visit(node.else_block)}"
        return text

    def visit_WhileStatement(self, node: WhileStatement) -> str:
        return f"while ({self.visit(node.condition)}) {self.visit(node.body)}"

    def visit_ReturnStatement(self, node: ReturnStatement) -> str:
        if node.value is None:
            return "return;"
        return f"return {self.visit(node.value)};"

    def visit_BreakStatement(self, node: BreakStatement) -> str:
        return "break;"

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def visit_NumberLiteral(self, node: NumberLiteral) -> str:
        return str(node.value)

    def visit_IdentifierExpression(self, node: IdentifierExpression) -> str:
        return node.name

    def visit_UnaryExpression(self, node: UnaryExpression) -> str:
        return self._render_operators(node)

    def visit_BinaryExpression(self, node: BinaryExpression) -> str:
        return self._render_operators(node)

    def visit_CallExpression(self, node: CallExpression) -> str:
        args = ", ".join(self.visit(arg) for arg in node.arguments)
        return f"{node.callee}({args})"

    def visit_ArrayLiteral(self, node: ArrayLiteral) -> str:
        elements = ", ".join(self.visit(element) for element in node.elements)
        return f"[{elements}]"

    def visit_StepExpression(self, node: StepExpression) -> str:
        return f"{node.name}{STEP_SYMBOLS[node.direction]}"

    def visit_OpaqueLiteral(self, node: OpaqueLiteral) -> str:
        return node.text

    def visit_OpaqueOperation(self, node: OpaqueOperation) -> str:
        return self._render_operators(node)

    def _render_operators(self, node: Expression) -> str:
        """
        Render a tree of unary, binary and opaque operations.

        Operator chains can be thousands deep ('a b c ...' or a long '!'
        run), so they are walked with an explicit stack. Any other node
        met along the way is rendered through its visit method.
        """
        pending: list[tuple[Expression, bool]] = [(node, False)]
        rendered: list[str] = []

        while pending:
            current, children_done = pending.pop()

            if isinstance(current, UnaryExpression):
                children = (current.operand,)
            elif isinstance(current, BinaryExpression):
                children = (current.left, current.right)
            elif isinstance(current, OpaqueOperation):
                if current.left is None:
                    children = (current.operand,)
                else:
                    children = (current.left, current.operand)
            else:
                rendered.append(self.visit(current))
                continue

            if not children_done:
                pending.append((current, True))
                pending.extend((child, False) for child in reversed(children))
                continue

            parts = rendered[-len(children):]
            del rendered[-len(children):]
            rendered.append(self._format_operation(current, parts))

        return rendered[0]

    @staticmethod
    def _format_operation(node: Expression, parts: list[str]) -> str:
        if isinstance(node, UnaryExpression):
            return f"({UNARY_SYMBOLS[node.operator]}{parts[0]})"
        if isinstance(node, BinaryExpression):
            return f"({parts[0]} {BINARY_SYMBOLS[node.operator]} {parts[1]})"
        if node.left is None:
            return f"{node.glyph} {parts[0]}"
        return f"({parts[0]} {node.glyph} {parts[1]})"


def render(node: ASTNode) -> str:
    """Render any AST node as canonical text."""
    return CanonicalPrinter().render(node)


# =============================================================================
# Tree Printer
# =============================================================================

class TreePrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Produces a human-readable, indented representation of the AST
    structure. Expressions below statement level are shown in canonical
    form on the statement's line.

    Usage:
        printer = TreePrinter()
        output = printer.print(program)
        print(output)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0
        self._canonical = CanonicalPrinter()

    def print(self, node: ASTNode) -> str:
        """Print the AST and return as string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        self.indent_level += 1

    def _dedent(self) -> None:
        self.indent_level = max(0, self.indent_level - 1)

    def _expr_str(self, expr) -> str:
        return self._canonical.render(expr)

    def generic_visit(self, node: ASTNode) -> None:
        # Bare expressions (rendering a subtree directly)
        self._emit(f"Expr: {self._expr_str(node)}")

    def visit_ProgramNode(self, node: ProgramNode):
        self._emit("Program")
        self._indent()
        for item in node.body:
            self.visit(item)
        self._dedent()

    def visit_SubroutineNode(self, node: SubroutineNode):
        params = ", ".join(node.parameters)
        self._emit(f"Sub: {node.name}({params})")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_BlockStatement(self, node: BlockStatement):
        self._emit("Block")
        self._indent()
        for stmt in node.statements:
            self.visit(stmt)
        self._dedent()

    def visit_IfStatement(self, node: IfStatement):
        self._emit(f"If ({self._expr_str(node.condition)})")
        self._indent()
        self._emit("Then:")
        self._indent()
        self.visit(node.then_block)
        self._dedent()
        if node.else_block is not None:
            self._emit("Else:")
            self._indent()
            self.visit(node.else_block)
            self._dedent()
        self._dedent()

    def visit_WhileStatement(self, node: WhileStatement):
        self._emit(f"While ({self._expr_str(node.condition)})")
        self._indent()
        self.visit(node.body)
        self._dedent()

    def visit_ReturnStatement(self, node: ReturnStatement):
        if node.value is not None:
            self._emit(f"Return {self._expr_str(node.value)}")
        else:
            self._emit("Return")

    def visit_BreakStatement(self, node: BreakStatement):
        self._emit("Break")

    def visit_AssignmentStatement(self, node: AssignmentStatement):
        sign = " (negated)" if node.negate else ""
        self._emit(f"Assign{sign}: {node.target} = {self._expr_str(node.value)}")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")
