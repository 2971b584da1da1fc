"""
Expression evaluator.

Evaluates an AST against an Environment and returns a float.

Evaluation semantics:
- Operands and function arguments are evaluated left to right, each
  completely before the next; no operator short-circuits.
- Variables and functions are looked up at evaluation time, so a tree
  can be re-evaluated against a different environment.
- Division and remainder by zero raise DivisionByZeroError. Other
  numeric edge cases (overflow, invalid power domains) produce inf or
  NaN as C's math library would.
- A function called with the wrong number of arguments raises
  ArityMismatchError, unless it was registered with an arity-mismatch
  handler. In that case the handler runs once, the function itself is
  not called, and the call evaluates to NaN. A handler that raises
  aborts the evaluation with its own exception.
- An exception raised by a registered function, or a non-numeric
  return value, becomes an EvaluationError carrying the call position.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, cast

from .ast import (
    AstNode,
    BinaryOperator,
    BinaryOpNode,
    ConstantNode,
    FunctionCallNode,
    UnaryOperator,
    UnaryOpNode,
    VariableNode,
)
from .builtins import create_default_environment
from .environment import Environment, RegisteredFunction, VariableResolver
from .errors import (
    ArityMismatchError,
    DivisionByZeroError,
    ErrorKind,
    EvaluationError,
    ExpressionError,
    UnknownFunctionError,
    UnknownVariableError,
)
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .parser import parse

logger = logging.getLogger("exprpars.evaluator")


@dataclass
class EvaluationContext:
    """Evaluation context binding an environment to an evaluation."""

    environment: Environment = field(default_factory=create_default_environment)
    """Variables and functions available to the expression."""

    source: Optional[str] = None
    """Source expression for error reporting."""

    resolver: Optional[VariableResolver] = None
    """Custom variable resolver used instead of the environment's variable store."""


@dataclass
class EvaluationResult:
    """Result of expression evaluation."""

    value: float
    """The evaluated value (NaN when evaluation failed)."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""

    error_kind: Optional[ErrorKind] = None
    """Category of the failure, if any."""

    exception: Optional[ExpressionError] = None
    """The error raised during parsing or evaluation, if any."""


def _is_odd_integer(value: float) -> bool:
    return math.isfinite(value) and value == int(value) and int(value) % 2 == 1


def _power(base: float, exponent: float) -> float:
    """Raises base to exponent with C ``pow`` semantics for edge cases."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        if base == 0 and exponent < 0:
            # Pole: zero to a negative power
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _truncating_remainder(left: float, right: float) -> float:
    """
    Remainder of both operands truncated toward zero to integers.

    The result takes the sign of the dividend.
    """
    if not (math.isfinite(left) and math.isfinite(right)):
        return math.nan
    dividend = int(left)
    divisor = int(right)
    remainder = abs(dividend) % abs(divisor)
    return float(-remainder if dividend < 0 else remainder)


def _failure(error: ExpressionError) -> EvaluationResult:
    logger.debug(
        "expression_evaluation_failed",
        extra={"error": error.message, "error_kind": error.kind.value},
    )
    return EvaluationResult(
        value=math.nan,
        success=False,
        error=error.message,
        error_kind=error.kind,
        exception=error,
    )


class Evaluator:
    """Evaluates an AST node and returns the result."""

    def __init__(self, context: EvaluationContext):
        self._context = context
        self._environment = context.environment
        self._source = context.source

    def evaluate(self, node: AstNode) -> float:
        """Evaluates an AST node and returns the value."""
        node_type = node.type

        if node_type == "Constant":
            return cast(ConstantNode, node).value

        if node_type == "Variable":
            n = cast(VariableNode, node)
            return self._evaluate_variable(n.name, n.position)

        if node_type == "FunctionCall":
            return self._evaluate_function_call(cast(FunctionCallNode, node))

        if node_type == "UnaryOp":
            n = cast(UnaryOpNode, node)
            return self._evaluate_unary_op(n.operator, n.operand, n.position)

        if node_type == "BinaryOp":
            n = cast(BinaryOpNode, node)
            return self._evaluate_binary_op(n.operator, n.left, n.right, n.position)

        raise EvaluationError(
            f"Unknown node type: {node_type}", node.position, self._source
        )

    def _evaluate_variable(self, name: str, position: int) -> float:
        """Evaluates a variable reference."""
        resolver = self._context.resolver
        if resolver is not None:
            value = resolver(name)
            if value is None:
                raise UnknownVariableError(name, position, self._source)
            return float(value)

        variables = self._environment.variables
        if not variables.has(name):
            raise UnknownVariableError(name, position, self._source)
        return variables.get(name)

    def _evaluate_function_call(self, node: FunctionCallNode) -> float:
        """Evaluates a function call."""
        args = [self.evaluate(arg) for arg in node.args]

        functions = self._environment.functions
        if not functions.has(node.name):
            raise UnknownFunctionError(node.name, node.position, self._source)
        entry = functions.get(node.name)

        if not entry.accepts(len(args)):
            expected = cast(int, entry.arity)
            if entry.on_arity_mismatch is None:
                raise ArityMismatchError(
                    node.name, expected, len(args), node.position, self._source
                )
            entry.on_arity_mismatch(node.name, expected, len(args))
            logger.warning(
                "arity_mismatch_handled",
                extra={
                    "function_name": node.name,
                    "expected": expected,
                    "actual": len(args),
                },
            )
            return math.nan

        return self._call_host_function(entry, args, node)

    def _call_host_function(
        self, entry: RegisteredFunction, args: List[float], node: FunctionCallNode
    ) -> float:
        """Calls a registered function, wrapping host failures in EvaluationError."""
        try:
            result = entry.fn(args)
        except ExpressionError:
            raise
        except Exception as error:
            raise EvaluationError(
                f"{node.name}: {error}", node.position, self._source
            ) from error

        if not isinstance(result, (int, float)):
            raise EvaluationError(
                f"{node.name}: expected a numeric result, got {type(result).__name__}",
                node.position,
                self._source,
            )
        return float(result)

    def _evaluate_unary_op(
        self, operator: UnaryOperator, operand: AstNode, position: int
    ) -> float:
        """Evaluates a unary operation."""
        value = self.evaluate(operand)

        if operator == "+":
            return value

        if operator == "-":
            return -value

        raise EvaluationError(
            f"Unknown unary operator: {operator}", position, self._source
        )

    def _evaluate_binary_op(
        self,
        operator: BinaryOperator,
        left: AstNode,
        right: AstNode,
        position: int,
    ) -> float:
        """Evaluates a binary operation."""
        left_value = self.evaluate(left)
        right_value = self.evaluate(right)

        if operator == "+":
            return left_value + right_value

        if operator == "-":
            return left_value - right_value

        if operator == "*":
            return left_value * right_value

        if operator == "/":
            if right_value == 0:
                raise DivisionByZeroError(operator, position, self._source)
            return left_value / right_value

        if operator == "%":
            # Truncation can turn a fractional divisor into zero
            if right_value == 0 or (
                math.isfinite(right_value) and int(right_value) == 0
            ):
                raise DivisionByZeroError(operator, position, self._source)
            return _truncating_remainder(left_value, right_value)

        if operator == "^":
            return _power(left_value, right_value)

        raise EvaluationError(
            f"Unknown binary operator: {operator}", position, self._source
        )


def evaluate(ast: AstNode, context: EvaluationContext) -> EvaluationResult:
    """
    Evaluates an AST against a context and returns the result.

    Args:
        ast: The AST to evaluate
        context: The evaluation context with the environment

    Returns:
        The evaluation result with value and success status
    """
    try:
        evaluator = Evaluator(context)
        value = evaluator.evaluate(ast)
        return EvaluationResult(value=value, success=True)
    except ExpressionError as error:
        return _failure(error)


def evaluate_expression(
    source: str,
    environment: Optional[Environment] = None,
    limits: ExpressionLimits = DEFAULT_EXPRESSION_LIMITS,
) -> EvaluationResult:
    """
    Parses and evaluates an expression string in one step.

    Parse errors are reported through the returned result, like
    evaluation errors.
    """
    if environment is None:
        environment = create_default_environment()
    try:
        ast = parse(source, limits)
    except ExpressionError as error:
        return _failure(error)
    return evaluate(ast, EvaluationContext(environment=environment, source=source))
