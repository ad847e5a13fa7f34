"""
Fysh Parser Test Suite
======================

Parser tests are written as source / canonical-rendering pairs: the
canonical printer parenthesizes every operation, so the rendering pins
down the exact tree shape.

Test Organization
-----------------
- TestExpressions: precedence, associativity, unary runs, tanks
- TestStatements: assignment, steps, if/else, while, return, break
- TestSubroutines: declarations
- TestPrograms: complete multi-statement programs
- TestTreeShape: node types, locations and token streams
- TestLongInputs: long operator chains and excessive nesting
- TestErrors: first-error reporting
"""

import pytest
from fysh.parser import FyshParser, parse_source
from fysh.lexer import scan
from fysh.printer import render
from fysh.ast import (
    ProgramNode,
    SubroutineNode,
    ExpressionStatement,
    AssignmentStatement,
    BinaryExpression,
    UnaryExpression,
    IdentifierExpression,
    NumberLiteral,
    CallExpression,
    BinaryOperator,
    UnaryOperator,
)
from fysh.errors import (
    FyshError,
    FyshSyntaxError,
    LexicalError,
    MissingTokenError,
    NestingTooDeepError,
    UnexpectedTokenError,
)


def rendered(source: str) -> list[str]:
    """Render each top-level item of a program."""
    return [render(item) for item in parse_source(source).body]


EXPRESSIONS = [
    ("><(({o> ~", "1;"),
    ("><fysh> ~", "fysh;"),
    ("><fysh> <3 ><{({o> ~", "(fysh * 5);"),
    ("><fysh> ><{({o> <3 ><(({o> ~", "(fysh + (5 * 1));"),
    ("><fyshy> | ><{({o> ^ ><(({o> ~", "(fyshy | (5 ^ 1));"),
    ("><fysh1> ><fysh2> ><fysh3> ~", "(fysh1 + (fysh2 + fysh3));"),
    ("><{{> <3 ><{(({({> <3 ><{({{{{({{> ~", "((3 * 37) * 379);"),
    ("><{{> <3 (><{(({({> <3 ><{({{{{({{>) ~", "(3 * (37 * 379));"),
    ("><fysh> o~ ><{({{{{({{> ~", "(fysh > 379);"),
    ("[>(sub) ><{({{{{({{>] ~", "sub(379);"),
    ("[><{({{{{({{>] ~", "[379];"),
    ("[><{({{{{({{> - ><{({{{{({{>] ~", "[379, 379];"),
    ("<{{{>< ~", "-7;"),
    ("!!><}> ~", "(!1);"),
    ("!><}> ~", "(~1);"),
    ("!!!><}> ~", "(!(~1));"),
    ("!(!!><}>) ~", "(~(!1));"),
    ("><{{(({(> </3 ><{(> <3 ><{(> ><{({(> ~", "(((50 / 2) * 2) + 10);"),
]


# =============================================================================
# Expression Tests
# =============================================================================

class TestExpressions:
    """Tests for expression parsing."""

    @pytest.mark.parametrize("source,expected", EXPRESSIONS)
    def test_expression(self, source, expected):
        assert rendered(source) == [expected]

    def test_expressions_without_whitespace_between_statements(self):
        """Statements run together still split on the terminator."""
        source = "".join(source for source, _ in EXPRESSIONS)
        assert rendered(source) == [expected for _, expected in EXPRESSIONS]

    def test_comparison_binds_tighter_than_multiply(self):
        assert rendered("><a> <3 ><b> o~ ><c> ~") == ["(a * (b > c));"]

    def test_xor_below_multiply(self):
        assert rendered("><a> ^ ><b> <3 ><c> ~") == ["(a ^ (b * c));"]

    def test_or_is_left_associative(self):
        assert rendered("><a> | ><b> | ><c> ~") == ["((a | b) | c);"]

    @pytest.mark.parametrize("glyph,symbol", [
        ("o~", ">"),
        ("~o", "<"),
        ("o~≈", ">="),
        ("~o≈", "<="),
        ("≈≈", "=="),
        ("~≈", "!="),
    ])
    def test_comparisons(self, glyph, symbol):
        assert rendered(f"><a> {glyph} ><b> ~") == [f"(a {symbol} b);"]

    def test_heart_glyphs(self):
        assert rendered("><a> ♡ ><b> 💔 ><c> ~") == ["((a * b) / c);"]

    def test_left_facing_name_is_negation(self):
        assert rendered("<num>< ~") == ["(-num);"]

    def test_group_overrides_implicit_addition(self):
        assert rendered("(><a> ><b>) <3 ><c> ~") == ["((a + b) * c);"]

    def test_step_in_expression(self):
        assert rendered(">><i> ><{> ~") == ["(i++ + 1);"]

    def test_call_with_several_arguments(self):
        assert rendered("[>(f) ><a> ><b>] ~") == ["f(a, b);"]

    def test_call_arguments_parse_at_bitwise_or(self):
        assert rendered("[>(f) ><a> | ><b> ><c>] ~") == ["f((a | b), c);"]

    def test_call_without_arguments(self):
        assert rendered("[>(tick)] ~") == ["tick();"]

    def test_empty_tank(self):
        assert rendered("[] ~") == ["[];"]

    def test_nested_tank(self):
        assert rendered("[[><{>] - ><{(>] ~") == ["[[1], 2];"]

    def test_tank_elements_allow_implicit_addition(self):
        assert rendered("[><a> ><b> - ><c>] ~") == ["[(a + b), c];"]


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Tests for statement parsing."""

    def test_assignment(self):
        source = """
><fysh> = ><(({o> ~
<fysh>< = ><(({o> ~
"""
        assert rendered(source) == ["fysh = 1;", "fysh = (-1);"]

    def test_increment_decrement(self):
        assert rendered(">><fysh> ~ <fysh><< ~") == ["fysh++;", "fysh--;"]

    def test_tanks(self):
        source = """
><numbers> = [><})}> - ><}})> - ><}}}> - <({><] ~
><avg> = [>(average) ><numbers>] ~
><avg> = [(average)< ><numbers>] ~
"""
        assert rendered(source) == [
            "numbers = [5, 6, 7, -1];",
            "avg = average(numbers);",
            "avg = (-average(numbers));",
        ]

    def test_bare_return(self):
        assert rendered("<~ ~") == ["return;"]

    def test_if_without_else(self):
        source = "><(((^> [><a>] ><> <~ ><a> ~ <><"
        assert rendered(source) == ["if (a) {\nreturn a;\n}"]

    def test_if_else(self):
        source = "><(((^> [><a>] ><> <~ ><{> ~ <>< ><(((*> ><> <~ ><(> ~ <><"
        assert rendered(source) == ["if (a) {\nreturn 1;\n} else {\nreturn 0;\n}"]

    def test_while_with_bowl_condition(self):
        source = r"><(((@> (><{>) ><> ><\/> ~ <><"
        assert rendered(source) == ["while (1) {\nbreak;\n}"]

    def test_nested_blocks(self):
        source = """
><(((@> [><i> ~o ><{{>]
><>
    ><(((^> [><i> ≈≈ ><{>] ><> <\\/>< ~ <><
    >><i> ~
<><
"""
        assert rendered(source) == [
            "while ((i < 3)) {\nif ((i == 1)) {\nbreak;\n}\ni++;\n}"
        ]

    def test_empty_block(self):
        assert rendered("><(((@> [><{>] ><> <><") == ["while (1) {\n}"]


# =============================================================================
# Subroutine Tests
# =============================================================================

class TestSubroutines:
    """Tests for subroutine declarations."""

    def test_sub(self):
        source = """
>(abs) ><num>
><>
	><(((^> [><num> o~ ><)))>]
	><>
		<~ ><num> ~
	<><
	><(((*>
	><>
		<~ <num>< ~
	<><
<><
"""
        assert rendered(source) == [
            "sub abs(num) {\n"
            "if ((num > 0)) {\n"
            "return num;\n"
            "} else {\n"
            "return (-num);\n"
            "}\n"
            "}"
        ]

    def test_sub_with_two_parameters(self):
        source = ">(add) ><a> ><b> ><> <~ ><a> ><b> ~ <><"
        assert rendered(source) == ["sub add(a, b) {\nreturn (a + b);\n}"]

    def test_sub_without_parameters(self):
        assert rendered(">(noop) ><> <><") == ["sub noop() {\n}"]

    def test_sub_node(self):
        program = parse_source(">(add) ><a> ><b> ><> <~ ><a> ~ <><")
        sub = program.body[0]
        assert isinstance(sub, SubroutineNode)
        assert sub.name == "add"
        assert sub.parameters == ("a", "b")
        assert len(sub.body.statements) == 1
        assert program.subroutines == [sub]


# =============================================================================
# Program Tests
# =============================================================================

class TestPrograms:
    """Complete programs."""

    def test_blink(self):
        source = r"""
><{{(((> (+o ><{> ~

o+) ><steven> ~
(+o ><###> ~

><(((^> [><steven> o~ ><}}>]
><>
        <~ ><steven> ~
<><

><(((@> [><{>]
><>
        ><{{(((o> (+o ><{> ~
        ><{{(((o> (+o ><(> ~
<><

><//> With Fysh Bowl
><(((@> (><{>)
><>
	><\/> ~
	<\/>< ~
<><
"""
        assert rendered(source) == [
            "(24 (+o 1);",
            "o+) steven;",
            "(+o ><###>;",
            "if ((steven > 3)) {\nreturn steven;\n}",
            "while (1) {\n(24 (+o 1);\n(24 (+o 0);\n}",
            "while (1) {\nbreak;\nbreak;\n}",
        ]

    def test_empty_program(self):
        program = parse_source("")
        assert isinstance(program, ProgramNode)
        assert program.body == ()

    def test_comments_only(self):
        assert parse_source("><//> nothing here\n").body == ()

    def test_top_level_order_is_kept(self):
        source = "><a> = ><{> ~ >(f) ><> <>< ><a> ~"
        assert rendered(source) == ["a = 1;", "sub f() {\n}", "a;"]


# =============================================================================
# Tree Shape Tests
# =============================================================================

class TestTreeShape:
    """Node types, equality and locations."""

    def test_binary_tree(self):
        statement = parse_source("><fysh> <3 ><{({o> ~").body[0]
        assert statement == ExpressionStatement(
            BinaryExpression(
                BinaryOperator.MULTIPLY,
                IdentifierExpression("fysh"),
                NumberLiteral(5),
            )
        )

    def test_left_facing_call_wraps_negation(self):
        statement = parse_source("[(average)< ><numbers>] ~").body[0]
        expr = statement.expression
        assert isinstance(expr, UnaryExpression)
        assert expr.operator == UnaryOperator.NEGATE
        assert expr.operand == CallExpression("average", (IdentifierExpression("numbers"),))

    def test_assignment_negate_flag(self):
        statement = parse_source("<fysh>< = ><{> ~").body[0]
        assert isinstance(statement, AssignmentStatement)
        assert statement.target == "fysh"
        assert statement.negate is True
        assert statement.value == NumberLiteral(1)

    def test_equal_trees_from_different_glyphs(self):
        """Equivalent digit pairs and eyes produce equal trees."""
        first = parse_source("><a> <3 ><{({o> ~")
        second = parse_source("><a> ♡ ><})}°> ~")
        assert first == second
        assert render(first) == render(second)

    def test_locations(self):
        statement = parse_source("\n  ><a> ~", "prog.fysh").body[0]
        assert statement.location.filename == "prog.fysh"
        assert (statement.location.line, statement.location.column) == (2, 3)

    def test_parser_accepts_token_list(self):
        tokens = scan("><a> ~")
        program = FyshParser(tokens).parse()
        assert render(program) == "a;"

    def test_token_stream_without_eof(self):
        tokens = scan("><a> ~")[:-1]
        program = FyshParser(iter(tokens)).parse()
        assert render(program) == "a;"

    def test_truncated_token_stream_reports_end_of_input(self):
        tokens = scan("><a>", "cut.fysh")[:-1]
        with pytest.raises(MissingTokenError) as exc_info:
            FyshParser(iter(tokens), "cut.fysh").parse()
        assert exc_info.value.found == "end of input"
        assert str(exc_info.value.location) == "cut.fysh:1:5"

    def test_empty_token_stream(self):
        assert FyshParser([]).parse() == ProgramNode()


# =============================================================================
# Long Input Tests
# =============================================================================

class TestLongInputs:
    """Operator chains are parsed and rendered without deep recursion."""

    def test_long_implicit_sum(self):
        source = " ".join(["><{>"] * 1000) + " ~"
        expected = "(1 + " * 999 + "1" + ")" * 999 + ";"
        assert rendered(source) == [expected]

    def test_long_implicit_sum_is_right_nested(self):
        expr = parse_source(" ".join(["><{>"] * 1000) + " ~").body[0].expression
        depth = 0
        while isinstance(expr, BinaryExpression):
            assert expr.operator == BinaryOperator.ADD
            assert isinstance(expr.left, NumberLiteral)
            expr = expr.right
            depth += 1
        assert depth == 999

    def test_long_multiply_chain(self):
        source = " <3 ".join(["><a>"] * 1000) + " ~"
        expected = "(" * 999 + "a" + " * a)" * 999 + ";"
        assert rendered(source) == [expected]

    def test_long_toggle_run(self):
        source = "!" * 2400 + "><{> ~"
        assert rendered(source) == ["(!" * 1200 + "1" + ")" * 1200 + ";"]

    def test_long_opaque_prefix_run(self):
        source = "(+o " * 1000 + "><a> ~"
        assert rendered(source) == ["(+o " * 1000 + "a;"]

    def test_long_call_argument_list(self):
        source = "[>(f) " + " ".join(["><a>"] * 1000) + "] ~"
        assert rendered(source) == ["f(" + ", ".join(["a"] * 1000) + ");"]

    def test_deep_grouping_is_a_syntax_error(self):
        source = "(" * 5000 + "><a>" + ")" * 5000 + " ~"
        with pytest.raises(NestingTooDeepError) as exc_info:
            parse_source(source, "deep.fysh")
        assert isinstance(exc_info.value, FyshSyntaxError)
        assert "nested too deeply" in str(exc_info.value)
        assert exc_info.value.location.filename == "deep.fysh"

    def test_deep_tanks_are_a_syntax_error(self):
        with pytest.raises(NestingTooDeepError):
            parse_source("[" * 5000 + "]" * 5000 + " ~")


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """The parser reports exactly one error, for the earliest problem."""

    def test_unterminated_statement(self):
        with pytest.raises(FyshSyntaxError) as exc_info:
            parse_source("><fysh>")
        assert "expected '~' before end of input" in str(exc_info.value)

    def test_missing_terminator_after_assignment(self):
        with pytest.raises(MissingTokenError):
            parse_source("><a> = ><{>")

    def test_unterminated_block(self):
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("><(((@> [><{>] ><> ><a> ~")
        assert exc_info.value.expected == "'<><'"

    def test_unmatched_bracket(self):
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("[><a> ~")
        assert exc_info.value.expected == "']'"

    def test_unmatched_paren(self):
        with pytest.raises(MissingTokenError):
            parse_source("(><a> ~")

    def test_missing_condition(self):
        with pytest.raises(MissingTokenError) as exc_info:
            parse_source("><(((^> ><a> ><> <><")
        assert exc_info.value.expected == "condition"

    def test_stray_else(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("><(((*> ><> <><")

    def test_lone_terminator(self):
        with pytest.raises(UnexpectedTokenError) as exc_info:
            parse_source("~")
        assert exc_info.value.found == "~"

    def test_left_facing_parameter(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source(">(f) <a>< ><> <><")

    def test_sub_inside_block(self):
        with pytest.raises(UnexpectedTokenError):
            parse_source("><(((@> [><{>] ><> >(f) ><> <>< <><")

    def test_sub_without_block(self):
        with pytest.raises(MissingTokenError):
            parse_source(">(f) ><a> ~")

    def test_lexical_error_propagates(self):
        with pytest.raises(LexicalError):
            parse_source("><a> % ~")

    def test_syntax_error_before_later_lexical_error(self):
        """The earliest failure wins even when a bad glyph follows."""
        with pytest.raises(UnexpectedTokenError):
            parse_source("~ %")

    def test_error_location(self):
        with pytest.raises(FyshError) as exc_info:
            parse_source("><a> ~\n<~ ><a>", "prog.fysh")
        assert str(exc_info.value.location) == "prog.fysh:2:8"
