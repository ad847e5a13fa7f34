"""
Fysh Recursive Descent Parser
=============================

This module implements a recursive descent parser for Fysh. It takes
the token stream from the lexer and builds an Abstract Syntax Tree.

Grammar (Simplified EBNF)
-------------------------
program         ::= (sub_decl | statement)* EOF
sub_decl        ::= '>(name)' '><name>'* block
block           ::= '><>' statement* '<><'
statement       ::= if_stmt | while_stmt | return_stmt | break_stmt
                  | assignment | expr_stmt

if_stmt         ::= '><(((^>' condition block ('><(((*>' block)?
while_stmt      ::= '><(((@>' condition block
condition       ::= '[' expr ']' | '(' expr ')'
return_stmt     ::= '<~' expr? '~'
break_stmt      ::= ('><\\/>' | '<\\/><') '~'
assignment      ::= NAME '=' expr '~'
expr_stmt       ::= expr '~'

Expression Precedence (lowest to highest)
-----------------------------------------
1. opaque          (+o o+)        prefix or infix, kept verbatim
2. implicit        juxtaposition  addition, right-associative
3. bitwise_or      |
4. bitwise_xor     ^
5. multiplicative  <3 </3 ♡ 💔   left-associative
6. comparison      o~ ~o o~≈ ~o≈ ≈≈ ~≈
7. unary           !! !
8. primary         literal, name, step, opaque fysh, '(' expr ')', tank

Tanks
-----
A bracketed tank is a call when its first token is a subroutine fysh,
and an array otherwise:

    [>(average) ><numbers>]      average(numbers)
    [(average)< ><numbers>]      (-average(numbers))
    [><{> - ><{(> - <{{><]        [1, 2, -3]

Call arguments are parsed at the bitwise-or tier, so juxtaposition
separates arguments instead of adding them.

Example Usage
-------------
>>> from fysh.parser import parse_source
>>> program = parse_source("><fysh> <3 ><{({o> ~")
>>> len(program.body)
1
"""

import logging
from typing import Callable, Iterable, Optional

from fysh.errors import (
    SourceLocation,
    UnexpectedTokenError,
    MissingTokenError,
    NestingTooDeepError,
)
from fysh.lexer import FyshLexer, FyshToken, FyshTokenType
from fysh.ast import (
    ProgramNode,
    SubroutineNode,
    BlockStatement,
    ExpressionStatement,
    AssignmentStatement,
    IfStatement,
    WhileStatement,
    ReturnStatement,
    BreakStatement,
    Statement,
    Expression,
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

logger = logging.getLogger(__name__)


# Tokens that can begin an operand; two of these in a row mean addition.
OPERAND_START = frozenset({
    FyshTokenType.NUMBER,
    FyshTokenType.IDENTIFIER,
    FyshTokenType.OPAQUE_LITERAL,
    FyshTokenType.INCREMENT,
    FyshTokenType.DECREMENT,
    FyshTokenType.LPAREN,
    FyshTokenType.LBRACKET,
    FyshTokenType.LOGICAL_NOT,
    FyshTokenType.BITWISE_NOT,
})

UNARY_OPERATORS = {
    FyshTokenType.LOGICAL_NOT: UnaryOperator.LOGICAL_NOT,
    FyshTokenType.BITWISE_NOT: UnaryOperator.BITWISE_NOT,
}


class FyshParser:
    """
    Recursive descent parser for Fysh.

    Parses a stream of tokens into an Abstract Syntax Tree (AST).
    Statements and declarations use plain recursive descent; each
    expression tier has its own routine because implicit addition is
    right-associative while every explicit operator is left-associative.

    Tokens are pulled from the stream only as the grammar needs them, so
    a syntax error is reported before any lexical error further on. The
    parser stops at the first error and never synthesizes a partial tree.

    Operator chains are built in loops, so their length is unbounded;
    only bracket and group nesting recurses.

    Attributes:
        tokens: Tokens pulled from the stream so far (the whole stream,
            EOF included, once parse() returns)
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: Iterable[FyshToken],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Token stream from the lexer; an EOF is supplied if
                the stream stops without one
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self._stream = iter(tokens)
        self.tokens: list[FyshToken] = []
        self.filename = filename
        self.source_lines = source_lines or []

        # Current position in token stream
        self._pos = 0

    def parse(self) -> ProgramNode:
        """
        Parse the token stream into an AST.

        Returns:
            ProgramNode containing all top-level items in source order

        Raises:
            FyshSyntaxError: At the first structural violation
            NestingTooDeepError: When nesting exhausts the recursion limit
        """
        body = []

        try:
            while not self._at_end():
                if self._is_subroutine_header():
                    body.append(self._parse_subroutine())
                else:
                    body.append(self._parse_statement())
        except RecursionError:
            # Deepest token reached before giving up
            token = self.tokens[-1]
            raise NestingTooDeepError(
                location=token.location,
                source_line=self._get_source_line(token.line),
            ) from None

        logger.debug(f"Parsed {len(body)} top-level items from {self.filename}")

        return ProgramNode(
            body=tuple(body),
            location=SourceLocation(self.filename, 1, 1),
        )

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of tokens."""
        return self._peek().type == FyshTokenType.EOF

    def _fill(self, pos: int) -> None:
        """Pull tokens from the stream until index pos is buffered or EOF is seen."""
        while len(self.tokens) <= pos:
            if self.tokens and self.tokens[-1].type == FyshTokenType.EOF:
                return
            token = next(self._stream, None)
            if token is None:
                token = self._end_of_stream()
            self.tokens.append(token)

    def _end_of_stream(self) -> FyshToken:
        """EOF for a token stream that stopped without one, just past its last token."""
        if not self.tokens:
            return FyshToken(FyshTokenType.EOF, None, 1, 1, self.filename)
        last = self.tokens[-1]
        return FyshToken(
            FyshTokenType.EOF,
            None,
            last.line,
            last.column + len(last.text),
            last.filename,
        )

    def _peek(self, offset: int = 0) -> FyshToken:
        """Look at token at current position + offset."""
        pos = self._pos + offset
        self._fill(pos)
        if pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[pos]

    def _advance(self) -> FyshToken:
        """Consume and return the current token."""
        if not self._at_end():
            token = self.tokens[self._pos]
            self._pos += 1
            return token
        return self.tokens[-1]

    def _check(self, *types: FyshTokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: FyshTokenType) -> Optional[FyshToken]:
        """
        Consume current token if it matches one of the types.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*types):
            return self._advance()
        return None

    def _expect(
        self,
        token_type: FyshTokenType,
        expected: str,
        hint: Optional[str] = None,
    ) -> FyshToken:
        """
        Expect and consume a specific token type.

        Args:
            token_type: The expected token type
            expected: Description of the expected token for the message
            hint: Optional fix suggestion

        Returns:
            The consumed token

        Raises:
            MissingTokenError: If the expected token is not found
        """
        if self._check(token_type):
            return self._advance()

        current = self._peek()
        raise MissingTokenError(
            expected,
            found=self._describe(current),
            location=current.location,
            source_line=self._get_source_line(current.line),
            hint=hint,
        )

    def _unexpected(self, token: FyshToken, expected: str) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            token.describe(),
            expected=expected,
            location=token.location,
            source_line=self._get_source_line(token.line),
        )

    @staticmethod
    def _describe(token: FyshToken) -> str:
        if token.type == FyshTokenType.EOF:
            return "end of input"
        return f"'{token.text}'"

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _is_subroutine_header(self) -> bool:
        token = self._peek()
        return token.type == FyshTokenType.SUB and not token.is_left_facing

    # =========================================================================
    # Declaration Parsing
    # =========================================================================

    def _parse_subroutine(self) -> SubroutineNode:
        """Parse a subroutine: >(name) ><param>* block."""
        header = self._advance()

        parameters = []
        while self._check(FyshTokenType.IDENTIFIER):
            param = self._peek()
            if param.is_left_facing:
                raise self._unexpected(param, "a right-facing parameter fysh")
            self._advance()
            parameters.append(param.value)

        body = self._parse_block()

        logger.debug(f"Parsed subroutine '{header.value}' ({len(parameters)} parameters)")

        return SubroutineNode(
            name=header.value,
            parameters=tuple(parameters),
            body=body,
            location=header.location,
        )

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _parse_block(self) -> BlockStatement:
        """Parse a block ><> ... <><."""
        location = self._peek().location
        self._expect(FyshTokenType.BLOCK_OPEN, "'><>'", hint="blocks open with '><>'")

        statements = []
        while not self._check(FyshTokenType.BLOCK_CLOSE) and not self._at_end():
            statements.append(self._parse_statement())

        self._expect(FyshTokenType.BLOCK_CLOSE, "'<><'", hint="blocks close with '<><'")

        return BlockStatement(statements=tuple(statements), location=location)

    def _parse_statement(self) -> Statement:
        """Parse any statement."""
        token = self._peek()

        if token.type == FyshTokenType.IF:
            return self._parse_if_statement()
        if token.type == FyshTokenType.WHILE:
            return self._parse_while_statement()
        if token.type == FyshTokenType.RETURN:
            return self._parse_return_statement()
        if token.type == FyshTokenType.BREAK:
            return self._parse_break_statement()

        if (token.type == FyshTokenType.IDENTIFIER and
                self._peek(1).type == FyshTokenType.ASSIGN):
            return self._parse_assignment()

        if self._is_subroutine_header():
            raise self._unexpected(token, "a statement (subroutines are declared at top level)")

        return self._parse_expression_statement()

    def _parse_condition(self) -> Expression:
        """Parse a condition: [expr] or the bowl form (expr)."""
        if self._match(FyshTokenType.LBRACKET):
            condition = self._parse_expression()
            self._expect(FyshTokenType.RBRACKET, "']'")
            return condition

        if self._match(FyshTokenType.LPAREN):
            condition = self._parse_expression()
            self._expect(FyshTokenType.RPAREN, "')'")
            return condition

        current = self._peek()
        raise MissingTokenError(
            "condition",
            found=self._describe(current),
            location=current.location,
            source_line=self._get_source_line(current.line),
            hint="wrap the condition in '[ ]' or '( )'",
        )

    def _parse_if_statement(self) -> IfStatement:
        """Parse if statement."""
        location = self._advance().location
        condition = self._parse_condition()
        then_block = self._parse_block()

        else_block = None
        if self._match(FyshTokenType.ELSE):
            else_block = self._parse_block()

        return IfStatement(
            condition=condition,
            then_block=then_block,
            else_block=else_block,
            location=location,
        )

    def _parse_while_statement(self) -> WhileStatement:
        """Parse while statement."""
        location = self._advance().location
        condition = self._parse_condition()
        body = self._parse_block()

        return WhileStatement(condition=condition, body=body, location=location)

    def _parse_return_statement(self) -> ReturnStatement:
        location = self._advance().location

        value = None
        if not self._check(FyshTokenType.TERMINATOR):
            value = self._parse_expression()

        self._expect_terminator()
        return ReturnStatement(value=value, location=location)

    def _parse_break_statement(self) -> BreakStatement:
        location = self._advance().location
        self._expect_terminator()
        return BreakStatement(location=location)

    def _parse_assignment(self) -> AssignmentStatement:
        """
        Parse an assignment.

        A left-facing target stores the negation of the value.
        """
        target = self._advance()
        self._advance()  # '='
        value = self._parse_expression()
        self._expect_terminator()

        return AssignmentStatement(
            target=target.value,
            value=value,
            negate=target.is_left_facing,
            location=target.location,
        )

    def _parse_expression_statement(self) -> ExpressionStatement:
        location = self._peek().location
        expression = self._parse_expression()
        self._expect_terminator()
        return ExpressionStatement(expression=expression, location=location)

    def _expect_terminator(self) -> None:
        self._expect(
            FyshTokenType.TERMINATOR,
            "'~'",
            hint="every statement ends with the '~' terminator",
        )

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """
        Parse a full expression, including opaque compound operators.

        '(+o' and 'o+)' bind loosest and take everything to their right,
        so a run of them nests from the right. The run is collected in a
        loop and folded afterwards.
        """
        pending: list[tuple[FyshToken, Optional[Expression]]] = []

        while True:
            if self._check(FyshTokenType.OPAQUE_OPERATOR):
                pending.append((self._advance(), None))
                continue

            expr = self._parse_implicit()
            if not self._check(FyshTokenType.OPAQUE_OPERATOR):
                break
            pending.append((self._advance(), expr))

        for glyph, left in reversed(pending):
            expr = OpaqueOperation(
                glyph=glyph.value,
                operand=expr,
                left=left,
                location=glyph.location if left is None else left.location,
            )

        return expr

    def _parse_implicit(self) -> Expression:
        """
        Parse implicit addition: adjacent operands with no operator.

        Right-associative, so 'a b c' is a + (b + c).
        """
        operands = [self._parse_bitwise_or()]
        while self._peek().type in OPERAND_START:
            operands.append(self._parse_bitwise_or())

        expr = operands.pop()
        while operands:
            left = operands.pop()
            expr = BinaryExpression(
                operator=BinaryOperator.ADD,
                left=left,
                right=expr,
                location=left.location,
            )

        return expr

    def _parse_bitwise_or(self) -> Expression:
        return self._parse_binary(
            self._parse_bitwise_xor,
            {FyshTokenType.PIPE: BinaryOperator.BITWISE_OR},
        )

    def _parse_bitwise_xor(self) -> Expression:
        return self._parse_binary(
            self._parse_multiplicative,
            {FyshTokenType.CARET: BinaryOperator.BITWISE_XOR},
        )

    def _parse_multiplicative(self) -> Expression:
        return self._parse_binary(
            self._parse_comparison,
            {
                FyshTokenType.MULTIPLY: BinaryOperator.MULTIPLY,
                FyshTokenType.DIVIDE: BinaryOperator.DIVIDE,
            },
        )

    def _parse_comparison(self) -> Expression:
        return self._parse_binary(
            self._parse_unary,
            {
                FyshTokenType.GT: BinaryOperator.GREATER,
                FyshTokenType.LT: BinaryOperator.LESS,
                FyshTokenType.GE: BinaryOperator.GREATER_EQ,
                FyshTokenType.LE: BinaryOperator.LESS_EQ,
                FyshTokenType.EQ: BinaryOperator.EQUAL,
                FyshTokenType.NE: BinaryOperator.NOT_EQUAL,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[FyshTokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._peek().type in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                operator=operators[op_token.type],
                left=expr,
                right=right,
                location=expr.location,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse unary expression (!! !). Stacked operators nest right to left."""
        operators = []
        while self._peek().type in UNARY_OPERATORS:
            operators.append(self._advance())

        expr = self._parse_primary()

        for token in reversed(operators):
            expr = UnaryExpression(
                operator=UNARY_OPERATORS[token.type],
                operand=expr,
                location=token.location,
            )

        return expr

    def _parse_primary(self) -> Expression:
        """Parse primary expression."""
        token = self._peek()

        if token.type == FyshTokenType.NUMBER:
            self._advance()
            return NumberLiteral(value=token.value, location=token.location)

        if token.type == FyshTokenType.IDENTIFIER:
            self._advance()
            expr = IdentifierExpression(name=token.value, location=token.location)
            if token.is_left_facing:
                return UnaryExpression(
                    operator=UnaryOperator.NEGATE,
                    operand=expr,
                    location=token.location,
                )
            return expr

        if token.type in (FyshTokenType.INCREMENT, FyshTokenType.DECREMENT):
            self._advance()
            direction = (
                StepDirection.INCREMENT
                if token.type == FyshTokenType.INCREMENT
                else StepDirection.DECREMENT
            )
            return StepExpression(name=token.value, direction=direction, location=token.location)

        if token.type == FyshTokenType.OPAQUE_LITERAL:
            self._advance()
            return OpaqueLiteral(text=token.value, location=token.location)

        if token.type == FyshTokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(FyshTokenType.RPAREN, "')'")
            return expr

        if token.type == FyshTokenType.LBRACKET:
            return self._parse_tank()

        if token.type == FyshTokenType.EOF:
            raise MissingTokenError(
                "expression",
                found="end of input",
                location=token.location,
                source_line=self._get_source_line(token.line),
            )

        raise self._unexpected(token, "expression")

    def _parse_tank(self) -> Expression:
        """Parse a bracketed tank: a call or an array literal."""
        open_bracket = self._advance()

        if self._check(FyshTokenType.SUB):
            return self._parse_call(open_bracket)

        elements = []
        if not self._check(FyshTokenType.RBRACKET):
            elements.append(self._parse_expression())
            while self._match(FyshTokenType.SEPARATOR):
                elements.append(self._parse_expression())

        self._expect(
            FyshTokenType.RBRACKET,
            "']'",
            hint="separate tank elements with '-'",
        )

        return ArrayLiteral(elements=tuple(elements), location=open_bracket.location)

    def _parse_call(self, open_bracket: FyshToken) -> Expression:
        """
        Parse [>(name) args...] or [(name)< args...].

        A left-facing callee negates the call result.
        """
        callee = self._advance()

        arguments = []
        while self._peek().type in OPERAND_START:
            arguments.append(self._parse_bitwise_or())

        self._expect(FyshTokenType.RBRACKET, "']'")

        call = CallExpression(
            callee=callee.value,
            arguments=tuple(arguments),
            location=open_bracket.location,
        )
        if callee.is_left_facing:
            return UnaryExpression(
                operator=UnaryOperator.NEGATE,
                operand=call,
                location=open_bracket.location,
            )
        return call


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> ProgramNode:
    """
    Parse Fysh source code into an AST.

    This is a convenience function that combines lexing and parsing.

    Args:
        source: The Fysh source code
        filename: Source filename for error messages

    Returns:
        The root ProgramNode of the AST

    Raises:
        LexicalError: At the first unrecognised glyph sequence
        FyshSyntaxError: At the first structural violation
    """
    lexer = FyshLexer(source, filename)
    source_lines = source.splitlines()
    parser = FyshParser(lexer.tokenize(), filename, source_lines)
    return parser.parse()
