"""
Parser for the expression language.

Builds an Abstract Syntax Tree (AST) from the tokenizer's token stream
using precedence climbing.

Binding powers (lowest to highest):
1. Additive: +, -
2. Multiplicative: *, /, %
3. Power: ^ (right-associative)

Unary minus and plus parse their operand at the power level, so they
bind tighter than the arithmetic operators but looser than ``^``:
``-2 ^ 2`` is ``-(2 ^ 2)`` and ``-2 * 3`` is ``(-2) * 3``.
"""

import logging
from typing import Dict, List, Optional, cast

from .ast import (
    AstNode,
    BinaryOperator,
    BinaryOpNode,
    ConstantNode,
    FunctionCallNode,
    UnaryOperator,
    UnaryOpNode,
    VariableNode,
    calculate_ast_depth,
    count_ast_nodes,
)
from .errors import LimitExceededError, ParseError, TokenizerError
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_function_arg_count,
)
from .tokenizer import Token, Tokenizer, TokenType

logger = logging.getLogger("exprpars.parser")

PRECEDENCE: Dict[TokenType, int] = {
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
    TokenType.STAR: 2,
    TokenType.SLASH: 2,
    TokenType.PERCENT: 2,
    TokenType.CARET: 3,
}

UNARY_PRECEDENCE = 3

RIGHT_ASSOCIATIVE = frozenset({TokenType.CARET})


class Parser:
    """Parser for expression strings."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        source: Optional[str] = None,
        limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
    ):
        self._tokenizer = tokenizer
        self._source = source if source is not None else tokenizer.source
        self._limits = limits
        self._depth = 0

    def parse(self) -> AstNode:
        """Parses the token stream into an AST."""
        ast = self._parse_expression(0)

        token = self._peek()
        if token.type == TokenType.INVALID:
            raise TokenizerError(token.value, token.position, self._source)
        if token.type != TokenType.EOF:
            raise ParseError(
                f"Unexpected token after expression: '{token.value}'",
                token.position,
                self._source,
            )

        # Validate AST limits
        node_count = count_ast_nodes(ast)
        check_ast_node_count(node_count, self._limits)

        depth = calculate_ast_depth(ast)
        check_ast_depth(depth, self._limits)

        return ast

    # ============================================================
    # Token Helpers
    # ============================================================

    def _peek(self) -> Token:
        return self._tokenizer.current()

    def _advance(self) -> Token:
        """Consumes the current token and returns it."""
        token = self._tokenizer.current()
        self._tokenizer.advance()
        return token

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _match(self, token_type: TokenType) -> bool:
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        token = self._peek()
        if token.type == TokenType.INVALID:
            raise TokenizerError(token.value, token.position, self._source)
        raise ParseError(message, token.position, self._source)

    def _enter(self) -> None:
        self._depth += 1
        if self._depth > self._limits.max_ast_depth:
            raise LimitExceededError(
                "max_ast_depth", self._limits.max_ast_depth, self._depth
            )

    def _leave(self) -> None:
        self._depth -= 1

    # ============================================================
    # Expression Parsing
    # ============================================================

    def _parse_expression(self, min_precedence: int) -> AstNode:
        """Parses ``primary (binop primary)*`` with operators binding at least min_precedence."""
        self._enter()
        try:
            node = self._parse_primary()

            while True:
                token = self._peek()
                precedence = PRECEDENCE.get(token.type, -1)
                if precedence < min_precedence:
                    break

                self._advance()
                if token.type in RIGHT_ASSOCIATIVE:
                    next_precedence = precedence
                else:
                    next_precedence = precedence + 1

                right = self._parse_expression(next_precedence)
                operator: BinaryOperator = token.value  # type: ignore[assignment]
                node = BinaryOpNode(
                    position=token.position,
                    operator=operator,
                    left=node,
                    right=right,
                )

            return node
        finally:
            self._leave()

    def _parse_primary(self) -> AstNode:
        """Parses primary expressions: numbers, calls, variables, parentheses, unary ops."""
        token = self._peek()
        position = token.position

        if self._match(TokenType.NUMBER):
            return ConstantNode(position=position, value=cast(float, token.number))

        if self._match(TokenType.IDENTIFIER):
            if self._match(TokenType.LPAREN):
                args = self._parse_argument_list(token.value)
                check_function_arg_count(len(args), self._limits)
                return FunctionCallNode(
                    position=position,
                    name=token.value,
                    args=tuple(args),
                )
            return VariableNode(position=position, name=token.value)

        if self._match(TokenType.LPAREN):
            expr = self._parse_expression(0)
            self._consume(
                TokenType.RPAREN,
                f"Expected ')' to close '(' at position {position}",
            )
            return expr

        if self._check(TokenType.MINUS) or self._check(TokenType.PLUS):
            self._advance()
            operator: UnaryOperator = "-" if token.type == TokenType.MINUS else "+"
            operand = self._parse_expression(UNARY_PRECEDENCE)
            return UnaryOpNode(position=position, operator=operator, operand=operand)

        if token.type == TokenType.INVALID:
            raise TokenizerError(token.value, position, self._source)

        if token.type == TokenType.EOF:
            raise ParseError("Unexpected end of expression", position, self._source)

        raise ParseError(
            f"Unexpected token: '{token.value}'",
            position,
            self._source,
        )

    def _parse_argument_list(self, function_name: str) -> List[AstNode]:
        """Parses function argument list (already consumed opening paren)."""
        args: List[AstNode] = []

        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression(0))
            while self._match(TokenType.COMMA):
                args.append(self._parse_expression(0))

        self._consume(
            TokenType.RPAREN,
            f"Expected ')' after arguments to function '{function_name}'",
        )
        return args


def parse(
    source: str, limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS
) -> AstNode:
    """
    Parses an expression string into an AST.

    Args:
        source: The expression string to parse
        limits: Optional expression limits

    Returns:
        The parsed AST

    Raises:
        TokenizerError: If an invalid character or number is encountered
        ParseError: If parsing fails
        LimitExceededError: If the expression exceeds the configured limits
    """
    tokenizer = Tokenizer(source, limits)
    parser = Parser(tokenizer, source, limits)
    ast = parser.parse()
    logger.debug(
        "expression_parsed",
        extra={"expression": source, "node_count": count_ast_nodes(ast)},
    )
    return ast
