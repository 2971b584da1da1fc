"""
Built-in functions and default variables for the expression language.

All built-in functions are pure and deterministic. Each is registered
with a fixed arity, so a wrong argument count is caught by the evaluator
before the function runs. The functions still validate their own
argument count so they are safe to call directly.

Numeric domain semantics follow C's math library: an argument outside
a function's domain produces NaN rather than an error.
"""

import math
import string
from typing import Dict, Sequence

from .environment import Environment, ExprFunction, FunctionRegistry, VariableStore
from .errors import BuiltinError


def _assert_arg_count(args: Sequence[float], expected: int, function_name: str) -> None:
    """Asserts argument count."""
    if len(args) != expected:
        raise BuiltinError(
            function_name, f"expected {expected} argument(s), got {len(args)}"
        )


# ============================================================
# Trigonometric Helpers
# ============================================================


def _sin(args: Sequence[float]) -> float:
    """sin(x) -> float - Sine of x (radians)."""
    _assert_arg_count(args, 1, "sin")
    if math.isinf(args[0]):
        return math.nan
    return math.sin(args[0])


def _cos(args: Sequence[float]) -> float:
    """cos(x) -> float - Cosine of x (radians)."""
    _assert_arg_count(args, 1, "cos")
    if math.isinf(args[0]):
        return math.nan
    return math.cos(args[0])


# ============================================================
# Numeric Helpers
# ============================================================


def _sqrt(args: Sequence[float]) -> float:
    """sqrt(x) -> float - Square root of x; NaN for negative x."""
    _assert_arg_count(args, 1, "sqrt")
    x = args[0]
    if x < 0:
        return math.nan
    return math.sqrt(x)


def _min(args: Sequence[float]) -> float:
    """min(a, b) -> float - The smaller of a and b."""
    _assert_arg_count(args, 2, "min")
    return min(args[0], args[1])


def _max(args: Sequence[float]) -> float:
    """max(a, b) -> float - The larger of a and b."""
    _assert_arg_count(args, 2, "max")
    return max(args[0], args[1])


# ============================================================
# Registry
# ============================================================

# Built-in functions with their arity.
BUILTIN_FUNCTIONS: Dict[str, tuple[ExprFunction, int]] = {
    "sin": (_sin, 1),
    "cos": (_cos, 1),
    "sqrt": (_sqrt, 1),
    "min": (_min, 2),
    "max": (_max, 2),
}


def create_default_registry() -> FunctionRegistry:
    """Returns a new registry populated with the built-in functions."""
    registry = FunctionRegistry()
    for name, (fn, arity) in BUILTIN_FUNCTIONS.items():
        registry.register(name, fn, arity=arity)
    return registry


def create_default_variables() -> VariableStore:
    """
    Returns a new variable store with every single ASCII letter bound
    to its character code (``a`` is 97, ``A`` is 65).
    """
    return VariableStore({ch: float(ord(ch)) for ch in string.ascii_letters})


def create_default_environment() -> Environment:
    """
    Returns a new Environment seeded with default variables and built-ins.

    Every call builds a fresh instance, so mutating one never affects
    another.
    """
    return Environment(
        variables=create_default_variables(),
        functions=create_default_registry(),
    )


def is_builtin_function(name: str) -> bool:
    """Checks if a name is a built-in function."""
    return name in BUILTIN_FUNCTIONS
