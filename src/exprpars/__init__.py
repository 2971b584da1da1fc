"""
Arithmetic expression engine.

This module provides a small, embeddable engine that evaluates
arithmetic expressions with user-defined variables and functions.
"""

# Core types and utilities
from .ast import (
    AstNode,
    AstNodeBase,
    BinaryOperator,
    BinaryOpNode,
    ConstantNode,
    FunctionCallNode,
    UnaryOperator,
    UnaryOpNode,
    VariableNode,
    ast_to_string,
    calculate_ast_depth,
    count_ast_nodes,
)

# Builtins
from .builtins import (
    BUILTIN_FUNCTIONS,
    create_default_environment,
    create_default_registry,
    create_default_variables,
    is_builtin_function,
)
from .config import (
    ENV_VAR_EXPRPARS_CONFIG,
    ExpressionEngineConfig,
    ExpressionLimitsConfig,
    load_config,
    load_config_from_env,
)

# Environment
from .environment import (
    ArityMismatchHandler,
    Environment,
    ExprFunction,
    FunctionRegistry,
    RegisteredFunction,
    VariableResolver,
    VariableStore,
)
from .errors import (
    ArityMismatchError,
    BuiltinError,
    DivisionByZeroError,
    ErrorKind,
    EvaluationError,
    ExpressionError,
    LimitExceededError,
    ParseError,
    TokenizerError,
    UnknownFunctionError,
    UnknownVariableError,
)

# Evaluator
from .evaluator import (
    EvaluationContext,
    EvaluationResult,
    Evaluator,
    evaluate,
    evaluate_expression,
)
from .expression_parser import ExpressionParser
from .limits import (
    DEFAULT_EXPRESSION_LIMITS,
    ExpressionLimits,
    check_ast_depth,
    check_ast_node_count,
    check_expression_length,
    check_function_arg_count,
)

# Parser
from .parser import (
    Parser,
    parse,
)

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    tokenize,
)

__all__ = [
    # AST types
    "AstNode",
    "AstNodeBase",
    "ConstantNode",
    "VariableNode",
    "FunctionCallNode",
    "UnaryOpNode",
    "BinaryOpNode",
    "UnaryOperator",
    "BinaryOperator",
    "count_ast_nodes",
    "calculate_ast_depth",
    "ast_to_string",
    # Errors
    "ErrorKind",
    "ExpressionError",
    "TokenizerError",
    "ParseError",
    "LimitExceededError",
    "EvaluationError",
    "UnknownVariableError",
    "UnknownFunctionError",
    "ArityMismatchError",
    "DivisionByZeroError",
    "BuiltinError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    "check_expression_length",
    "check_ast_depth",
    "check_ast_node_count",
    "check_function_arg_count",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    # Environment
    "ExprFunction",
    "ArityMismatchHandler",
    "VariableResolver",
    "VariableStore",
    "RegisteredFunction",
    "FunctionRegistry",
    "Environment",
    # Builtins
    "BUILTIN_FUNCTIONS",
    "create_default_registry",
    "create_default_variables",
    "create_default_environment",
    "is_builtin_function",
    # Evaluator
    "EvaluationContext",
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "evaluate_expression",
    # Config
    "ENV_VAR_EXPRPARS_CONFIG",
    "ExpressionEngineConfig",
    "ExpressionLimitsConfig",
    "load_config",
    "load_config_from_env",
    # Facade
    "ExpressionParser",
]
