"""
Facade bundling a stored expression with an environment.

    parser = ExpressionParser()
    parser.set_expression("abs(x) * 2")
    parser.set_variable("x", -3)
    parser.register_function("abs", lambda args: abs(args[0]), arity=1)
    parser.evaluate()  # 6.0
"""

from __future__ import annotations

import logging
from typing import Optional

from .ast import AstNode
from .builtins import create_default_environment
from .config import ExpressionEngineConfig
from .environment import ArityMismatchHandler, Environment, ExprFunction
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    evaluate_expression,
)
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .parser import parse

logger = logging.getLogger("exprpars.expression_parser")


class ExpressionParser:
    """Stores an expression and evaluates it against its own environment."""

    def __init__(
        self,
        environment: Optional[Environment] = None,
        limits: Optional[ExpressionLimits] = None,
        config: Optional[ExpressionEngineConfig] = None,
    ):
        if config is not None:
            self._environment = environment or config.create_environment()
            self._limits = limits or config.resolve_limits()
        else:
            self._environment = environment or create_default_environment()
            self._limits = limits or DEFAULT_EXPRESSION_LIMITS
        self._expression = ""

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def expression(self) -> str:
        return self._expression

    def set_expression(self, expression: str) -> None:
        """Stores the expression; it is not validated until evaluation."""
        self._expression = expression

    def set_variable(self, name: str, value: float) -> None:
        self._environment.variables.set(name, value)

    def get_variable(self, name: str) -> float:
        return self._environment.variables.get(name)

    def register_function(
        self,
        name: str,
        fn: ExprFunction,
        arity: Optional[int] = None,
        on_arity_mismatch: Optional[ArityMismatchHandler] = None,
    ) -> None:
        self._environment.functions.register(name, fn, arity, on_arity_mismatch)

    def parse(self) -> AstNode:
        """Parses the stored expression into a reusable AST."""
        return parse(self._expression, self._limits)

    def evaluate(self) -> float:
        """
        Parses and evaluates the stored expression.

        Raises:
            ExpressionError: The first error met while tokenizing, parsing
                or evaluating
        """
        ast = self.parse()
        context = EvaluationContext(
            environment=self._environment, source=self._expression
        )
        return Evaluator(context).evaluate(ast)

    def try_evaluate(self) -> EvaluationResult:
        """Like evaluate(), but reports failure through the result."""
        result = evaluate_expression(
            self._expression, self._environment, self._limits
        )
        if not result.success:
            logger.debug(
                "expression_evaluation_failed",
                extra={"expression": self._expression, "error": result.error},
            )
        return result
