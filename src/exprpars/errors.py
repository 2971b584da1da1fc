"""
Error types for the expression evaluation engine.

All expression errors extend ExpressionError for consistent handling.
Each error carries an ErrorKind so callers can branch on the failure
category without matching on exception classes.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Category of an expression failure."""

    LEXICAL = "LEXICAL"
    SYNTAX = "SYNTAX"
    UNKNOWN_VARIABLE = "UNKNOWN_VARIABLE"
    UNKNOWN_FUNCTION = "UNKNOWN_FUNCTION"
    ARITY_MISMATCH = "ARITY_MISMATCH"
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    BUILTIN = "BUILTIN"
    EVALUATION = "EVALUATION"


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class TokenizerError(ExpressionError):
    """
    Error raised for an invalid character or malformed number literal.

    The tokenizer itself never raises this; the parser does when it
    meets an invalid token.
    """

    kind = ErrorKind.LEXICAL

    def __init__(
        self,
        text: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Invalid token: '{text}'", position, expression)
        self.text = text


class ParseError(ExpressionError):
    """
    Error thrown during parsing (syntax analysis).
    """

    kind = ErrorKind.SYNTAX


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    kind = ErrorKind.LIMIT_EXCEEDED

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    kind = ErrorKind.EVALUATION


class UnknownVariableError(EvaluationError):
    """
    Error thrown when a variable name cannot be resolved.
    """

    kind = ErrorKind.UNKNOWN_VARIABLE

    def __init__(
        self,
        name: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Unknown variable: {name}", position, expression)
        self.name = name


class UnknownFunctionError(EvaluationError):
    """
    Error thrown when a function name is not registered.
    """

    kind = ErrorKind.UNKNOWN_FUNCTION

    def __init__(
        self,
        name: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(f"Unknown function: {name}", position, expression)
        self.name = name


class ArityMismatchError(EvaluationError):
    """
    Error thrown when a function is called with the wrong number of arguments.
    """

    kind = ErrorKind.ARITY_MISMATCH

    def __init__(
        self,
        function_name: str,
        expected: int,
        actual: int,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        message = (
            f"Function '{function_name}' expects {expected} argument(s), got {actual}"
        )
        super().__init__(message, position, expression)
        self.function_name = function_name
        self.expected = expected
        self.actual = actual


class DivisionByZeroError(EvaluationError):
    """
    Error thrown when dividing or taking a remainder by zero.
    """

    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(
        self,
        operator: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__("Division by zero", position, expression)
        self.operator = operator


class BuiltinError(EvaluationError):
    """
    Error thrown when a built-in function encounters an error.
    """

    kind = ErrorKind.BUILTIN

    def __init__(
        self,
        function_name: str,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        full_message = f"{function_name}: {message}"
        super().__init__(full_message, position, expression)
        self.function_name = function_name
