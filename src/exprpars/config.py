"""
Configuration for embedding the expression engine.

A host application can describe limits and seed variables in YAML:

    expressionLimits:
      maxAstDepth: 32
    variables:
      rate: 0.25
    includeDefaultVariables: false
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, InstanceOf

from .builtins import create_default_registry, create_default_variables
from .environment import Environment, FunctionRegistry, VariableStore
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

logger = logging.getLogger("exprpars.config")

ENV_VAR_EXPRPARS_CONFIG = "EXPRPARS_CONFIG"


class ExpressionLimitsConfig(BaseModel):
    """Limit overrides as written in a config document."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    max_expression_length: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_expression_length,
        ge=0,
        alias="maxExpressionLength",
    )
    max_ast_depth: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_ast_depth, ge=1, alias="maxAstDepth"
    )
    max_ast_nodes: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_ast_nodes, ge=1, alias="maxAstNodes"
    )
    max_function_args: int = Field(
        default=DEFAULT_EXPRESSION_LIMITS.max_function_args,
        ge=0,
        alias="maxFunctionArgs",
    )

    def to_limits(self) -> ExpressionLimits:
        return ExpressionLimits(**self.model_dump())


class ExpressionEngineConfig(BaseModel):
    """Configuration for creating an expression engine environment."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    # Expression limits - a mapping of overrides or an ExpressionLimits instance
    expression_limits: Optional[
        Union[ExpressionLimitsConfig, InstanceOf[ExpressionLimits]]
    ] = Field(default=None, alias="expressionLimits", union_mode="left_to_right")

    # Extra variables seeded into the environment
    variables: dict[str, float] = Field(default_factory=dict)

    # Whether to seed the single-letter default variables
    include_default_variables: bool = Field(
        default=True, alias="includeDefaultVariables"
    )

    # Whether to register sin, cos, sqrt, min and max
    include_builtin_functions: bool = Field(
        default=True, alias="includeBuiltinFunctions"
    )

    def resolve_limits(self) -> ExpressionLimits:
        """Returns the configured limits as an ExpressionLimits instance."""
        limits = self.expression_limits
        if limits is None:
            return DEFAULT_EXPRESSION_LIMITS
        if isinstance(limits, ExpressionLimits):
            return limits
        return limits.to_limits()

    def create_environment(self) -> Environment:
        """Builds a new Environment from this configuration."""
        if self.include_default_variables:
            variables = create_default_variables()
        else:
            variables = VariableStore()
        for name, value in self.variables.items():
            variables.set(name, value)

        if self.include_builtin_functions:
            functions = create_default_registry()
        else:
            functions = FunctionRegistry()

        return Environment(variables=variables, functions=functions)


def load_config(path: Union[str, Path]) -> ExpressionEngineConfig:
    """
    Loads engine configuration from a YAML file.

    An empty file yields the default configuration.
    """
    content = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(content or "")
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ValueError(
            f"Expression engine config must be a mapping, got {type(parsed).__name__}"
        )

    config = ExpressionEngineConfig.model_validate(parsed)
    logger.info(
        "config_loaded",
        extra={"path": str(path), "variable_count": len(config.variables)},
    )
    return config


def load_config_from_env() -> ExpressionEngineConfig:
    """
    Loads configuration from the file named by EXPRPARS_CONFIG.

    Returns the default configuration when the variable is unset.
    """
    config_path: Optional[str] = os.getenv(ENV_VAR_EXPRPARS_CONFIG)
    if not config_path:
        return ExpressionEngineConfig()
    return load_config(config_path)
