"""
Variable store and function registry consulted during evaluation.

An Environment bundles both. Nothing here is global: callers build an
Environment (or take a fresh default one from ``builtins``) and pass it
explicitly to the evaluator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence

from .errors import UnknownFunctionError, UnknownVariableError

logger = logging.getLogger("exprpars.environment")


# Signature of a callable exposed to expressions.
ExprFunction = Callable[[Sequence[float]], float]

# Called with (name, expected, actual) when a call has the wrong arity.
ArityMismatchHandler = Callable[[str, int, int], None]

# Maps a variable name to its value, or None when the name is unknown.
VariableResolver = Callable[[str], Optional[float]]


class VariableStore:
    """Case-sensitive mapping from variable name to float value."""

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        self._values: Dict[str, float] = {}
        if values:
            for name, value in values.items():
                self.set(name, value)

    def set(self, name: str, value: float) -> None:
        self._values[name] = float(value)

    def get(self, name: str) -> float:
        """Returns the value bound to name, raising UnknownVariableError if absent."""
        try:
            return self._values[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def has(self, name: str) -> bool:
        return name in self._values

    def remove(self, name: str) -> None:
        if name not in self._values:
            raise UnknownVariableError(name)
        del self._values[name]

    def names(self) -> List[str]:
        return sorted(self._values)

    def copy(self) -> VariableStore:
        return VariableStore(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)


@dataclass(frozen=True)
class RegisteredFunction:
    """A function entry together with its optional arity contract."""

    name: str
    fn: ExprFunction
    arity: Optional[int] = None
    on_arity_mismatch: Optional[ArityMismatchHandler] = None

    def accepts(self, arg_count: int) -> bool:
        """Returns True when no arity is declared or the count matches it."""
        return self.arity is None or self.arity == arg_count


class FunctionRegistry:
    """Mapping from function name to a registered callable."""

    def __init__(self) -> None:
        self._functions: Dict[str, RegisteredFunction] = {}

    def register(
        self,
        name: str,
        fn: ExprFunction,
        arity: Optional[int] = None,
        on_arity_mismatch: Optional[ArityMismatchHandler] = None,
    ) -> None:
        """
        Registers (or replaces) a function.

        Args:
            name: Name used to call the function in expressions
            fn: Callable receiving the evaluated arguments as a sequence
            arity: Expected argument count, or None to accept any count
            on_arity_mismatch: Called with (name, expected, actual) instead of
                failing when a call does not match ``arity``
        """
        if arity is not None and arity < 0:
            raise ValueError(f"Invalid arity for function '{name}': {arity}")
        self._functions[name] = RegisteredFunction(
            name=name,
            fn=fn,
            arity=arity,
            on_arity_mismatch=on_arity_mismatch,
        )
        logger.debug(
            "function_registered",
            extra={"function_name": name, "arity": arity},
        )

    def get(self, name: str) -> RegisteredFunction:
        """Returns the entry for name, raising UnknownFunctionError if absent."""
        try:
            return self._functions[name]
        except KeyError:
            raise UnknownFunctionError(name) from None

    def has(self, name: str) -> bool:
        return name in self._functions

    def unregister(self, name: str) -> None:
        if name not in self._functions:
            raise UnknownFunctionError(name)
        del self._functions[name]

    def names(self) -> List[str]:
        return sorted(self._functions)

    def copy(self) -> FunctionRegistry:
        registry = FunctionRegistry()
        registry._functions = dict(self._functions)
        return registry

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)


@dataclass
class Environment:
    """Variables and functions available to an evaluation."""

    variables: VariableStore = field(default_factory=VariableStore)
    functions: FunctionRegistry = field(default_factory=FunctionRegistry)

    def copy(self) -> Environment:
        """Returns an independent copy; later changes to either side do not leak."""
        return Environment(
            variables=self.variables.copy(),
            functions=self.functions.copy(),
        )
