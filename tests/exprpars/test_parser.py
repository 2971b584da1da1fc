"""
Tests for expression parser.
"""

# pyright: reportAttributeAccessIssue=false

from dataclasses import FrozenInstanceError

import pytest

from exprpars import (
    ErrorKind,
    ExpressionLimits,
    LimitExceededError,
    ParseError,
    Parser,
    TokenizerError,
    Tokenizer,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
    parse,
)


class TestPrimaries:
    """Tests for primary expression parsing."""

    def test_parses_number(self):
        ast = parse("42")
        assert ast.type == "Constant"
        assert ast.position == 0
        assert ast.value == 42

    def test_parses_decimal_number(self):
        ast = parse("3.14")
        assert ast.type == "Constant"
        assert ast.value == pytest.approx(3.14)

    def test_parses_variable(self):
        ast = parse("foo")
        assert ast.type == "Variable"
        assert ast.name == "foo"

    def test_parenthesized_expression_yields_inner_node(self):
        ast = parse("(x)")
        assert ast.type == "Variable"
        assert ast.name == "x"


class TestFunctionCalls:
    """Tests for function call parsing."""

    def test_parses_function_with_no_args(self):
        ast = parse("now()")
        assert ast.type == "FunctionCall"
        assert ast.name == "now"
        assert ast.args == ()

    def test_parses_function_with_one_arg(self):
        ast = parse("sqrt(16)")
        assert ast.type == "FunctionCall"
        assert ast.name == "sqrt"
        assert len(ast.args) == 1
        assert ast.args[0].value == 16

    def test_parses_function_with_multiple_args(self):
        ast = parse("max(a, b + 1, 3)")
        assert len(ast.args) == 3
        assert ast.args[1].type == "BinaryOp"

    def test_parses_nested_calls(self):
        ast = parse("min(max(1, 2), 3)")
        assert ast.args[0].type == "FunctionCall"
        assert ast.args[0].name == "max"

    def test_rejects_trailing_comma(self):
        with pytest.raises(ParseError, match="Unexpected token: '\\)'"):
            parse("f(1,)")

    def test_rejects_missing_close_paren(self):
        with pytest.raises(ParseError, match="after arguments to function 'f'"):
            parse("f(1, 2")


class TestBinaryOperators:
    """Tests for binary operator parsing."""

    @pytest.mark.parametrize("operator", ["+", "-", "*", "/", "%", "^"])
    def test_parses_operator(self, operator):
        ast = parse(f"a {operator} b")
        assert ast.type == "BinaryOp"
        assert ast.operator == operator
        assert ast.left.name == "a"
        assert ast.right.name == "b"
        assert ast.position == 2


class TestOperatorPrecedence:
    """Tests for operator precedence and associativity."""

    def test_multiplication_before_addition(self):
        ast = parse("a + b * c")
        assert ast.operator == "+"
        assert ast.right.operator == "*"

    def test_modulo_binds_like_multiplication(self):
        ast = parse("a + b % c")
        assert ast.operator == "+"
        assert ast.right.operator == "%"

    def test_power_before_multiplication(self):
        ast = parse("a * b ^ c")
        assert ast.operator == "*"
        assert ast.right.operator == "^"

    def test_parentheses_override_precedence(self):
        ast = parse("(a + b) * c")
        assert ast.operator == "*"
        assert ast.left.operator == "+"

    def test_subtraction_is_left_associative(self):
        ast = parse("a - b - c")
        assert ast.operator == "-"
        assert ast.left.operator == "-"
        assert ast.right.name == "c"

    def test_division_is_left_associative(self):
        ast = parse("a / b / c")
        assert ast.left.operator == "/"

    def test_power_is_right_associative(self):
        ast = parse("a ^ b ^ c")
        assert ast.operator == "^"
        assert ast.left.name == "a"
        assert ast.right.operator == "^"


class TestUnaryOperators:
    """Tests for unary operator parsing."""

    def test_parses_unary_minus(self):
        ast = parse("-x")
        assert ast.type == "UnaryOp"
        assert ast.operator == "-"
        assert ast.operand.name == "x"

    def test_parses_unary_plus(self):
        ast = parse("+x")
        assert ast.type == "UnaryOp"
        assert ast.operator == "+"

    def test_unary_minus_binds_looser_than_power(self):
        ast = parse("-2 ^ 2")
        assert ast.type == "UnaryOp"
        assert ast.operand.type == "BinaryOp"
        assert ast.operand.operator == "^"

    def test_unary_minus_binds_tighter_than_multiplication(self):
        ast = parse("-2 * 3")
        assert ast.type == "BinaryOp"
        assert ast.operator == "*"
        assert ast.left.type == "UnaryOp"

    def test_unary_minus_after_binary_operator(self):
        ast = parse("2 * -3")
        assert ast.operator == "*"
        assert ast.right.type == "UnaryOp"

    def test_nested_unary_minus(self):
        ast = parse("--x")
        assert ast.operand.type == "UnaryOp"


class TestErrorHandling:
    """Tests for error handling."""

    def test_throws_on_empty_input(self):
        with pytest.raises(ParseError, match="Unexpected end of expression"):
            parse("")

    def test_throws_on_missing_operand(self):
        with pytest.raises(ParseError, match="Unexpected end of expression") as exc:
            parse("2 +")
        assert exc.value.position == 3
        assert exc.value.kind == ErrorKind.SYNTAX

    def test_throws_on_unclosed_parenthesis(self):
        with pytest.raises(ParseError, match="Expected '\\)' to close '\\('") as exc:
            parse("(1 + 2")
        assert exc.value.kind == ErrorKind.SYNTAX

    def test_throws_on_stray_close_paren(self):
        with pytest.raises(ParseError, match="Unexpected token after expression: '\\)'"):
            parse("1 + 2)")

    def test_throws_on_trailing_tokens(self):
        with pytest.raises(ParseError, match="Unexpected token after expression: 'b'"):
            parse("a b")

    def test_throws_on_leading_operator(self):
        with pytest.raises(ParseError, match="Unexpected token: '\\*'"):
            parse("* 2")

    def test_invalid_character_is_lexical_error(self):
        with pytest.raises(TokenizerError, match="Invalid token: '\\$'") as exc:
            parse("1 + $")
        assert exc.value.kind == ErrorKind.LEXICAL
        assert exc.value.position == 4

    def test_trailing_invalid_character_is_lexical_error(self):
        with pytest.raises(TokenizerError, match="'#'"):
            parse("1 #")

    def test_malformed_number_is_lexical_error(self):
        with pytest.raises(TokenizerError, match="'1e'"):
            parse("1e + 2")

    def test_error_context_points_at_token(self):
        with pytest.raises(ParseError) as exc:
            parse("1 + )")
        assert exc.value.format_with_context() == (
            "Unexpected token: ')'\n  1 + )\n      ^"
        )


class TestLimits:
    """Tests for parser limits."""

    def test_rejects_deep_nesting_during_descent(self):
        limits = ExpressionLimits(max_ast_depth=10)
        with pytest.raises(LimitExceededError, match="max_ast_depth"):
            parse("(" * 50 + "1" + ")" * 50, limits)

    def test_deep_nesting_does_not_exhaust_the_stack(self):
        with pytest.raises(LimitExceededError):
            parse("(" * 2000 + "1" + ")" * 2000)

    def test_long_operator_chain_uses_default_limits(self):
        ast = parse(" - ".join(["1"] * 200))
        assert calculate_ast_depth(ast) == 200

    def test_rejects_deep_trees(self):
        limits = ExpressionLimits(max_ast_depth=4)
        with pytest.raises(LimitExceededError, match="max_ast_depth"):
            parse("1 + 2 + 3 + 4 + 5", limits)

    def test_rejects_too_many_nodes(self):
        limits = ExpressionLimits(max_ast_nodes=5)
        with pytest.raises(LimitExceededError, match="max_ast_nodes"):
            parse("max(1, 2) + max(3, 4)", limits)

    def test_rejects_too_many_arguments(self):
        limits = ExpressionLimits(max_function_args=2)
        with pytest.raises(LimitExceededError, match="max_function_args"):
            parse("f(1, 2, 3)", limits)

    def test_limit_error_kind(self):
        with pytest.raises(LimitExceededError) as exc:
            parse("f(1, 2, 3)", ExpressionLimits(max_function_args=2))
        assert exc.value.kind == ErrorKind.LIMIT_EXCEEDED
        assert exc.value.limit == 2
        assert exc.value.actual == 3


class TestParserClass:
    """Tests for using Parser directly."""

    def test_parses_from_tokenizer(self):
        ast = Parser(Tokenizer("1 + 2")).parse()
        assert ast.operator == "+"


class TestAstUtilities:
    """Tests for AST helpers."""

    def test_counts_nodes(self):
        assert count_ast_nodes(parse("1")) == 1
        assert count_ast_nodes(parse("-f(1, x) * 2")) == 6

    def test_calculates_depth(self):
        assert calculate_ast_depth(parse("1")) == 1
        assert calculate_ast_depth(parse("1 + 2 * 3")) == 3

    def test_renders_tree(self):
        assert ast_to_string(parse("-x + f(2)")) == (
            "BinaryOp: +\n"
            "  UnaryOp: -\n"
            "    Variable: x\n"
            "  FunctionCall: f\n"
            "    Constant: 2.0"
        )

    def test_nodes_are_immutable(self):
        ast = parse("1")
        with pytest.raises(FrozenInstanceError):
            ast.value = 2
