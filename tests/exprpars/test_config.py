"""
Tests for engine configuration loading.
"""

import logging

import pytest
from pydantic import ValidationError

from exprpars import (
    DEFAULT_EXPRESSION_LIMITS,
    ENV_VAR_EXPRPARS_CONFIG,
    ExpressionEngineConfig,
    ExpressionLimits,
    ExpressionLimitsConfig,
    load_config,
    load_config_from_env,
)


class TestExpressionEngineConfig:
    """Tests for the config model."""

    def test_defaults(self):
        config = ExpressionEngineConfig()
        assert config.resolve_limits() == DEFAULT_EXPRESSION_LIMITS
        assert config.variables == {}
        assert config.include_default_variables is True
        assert config.include_builtin_functions is True

    def test_accepts_camel_case_aliases(self):
        config = ExpressionEngineConfig.model_validate(
            {
                "expressionLimits": {"maxAstDepth": 8, "maxFunctionArgs": 4},
                "includeDefaultVariables": False,
            }
        )
        limits = config.resolve_limits()
        assert limits.max_ast_depth == 8
        assert limits.max_function_args == 4
        assert limits.max_ast_nodes == DEFAULT_EXPRESSION_LIMITS.max_ast_nodes
        assert config.include_default_variables is False

    def test_accepts_snake_case_names(self):
        config = ExpressionEngineConfig(
            expression_limits={"max_expression_length": 100},
            include_builtin_functions=False,
        )
        assert config.resolve_limits().max_expression_length == 100
        assert config.include_builtin_functions is False

    def test_accepts_limits_instance(self):
        limits = ExpressionLimits(max_ast_depth=3)
        config = ExpressionEngineConfig(expression_limits=limits)
        assert config.resolve_limits() == limits

    def test_rejects_unknown_limit(self):
        with pytest.raises(ValidationError):
            ExpressionEngineConfig(expression_limits={"maxRegexLength": 1})

    def test_rejects_non_integer_limit(self):
        with pytest.raises(ValidationError, match="maxAstDepth"):
            ExpressionEngineConfig.model_validate(
                {"expressionLimits": {"maxAstDepth": "deep"}}
            )

    def test_rejects_negative_limit(self):
        with pytest.raises(ValidationError):
            ExpressionEngineConfig.model_validate(
                {"expressionLimits": {"maxFunctionArgs": -1}}
            )

    def test_limits_model_defaults_match_dataclass(self):
        assert ExpressionLimitsConfig().to_limits() == DEFAULT_EXPRESSION_LIMITS

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ExpressionEngineConfig.model_validate({"cache": True})

    def test_rejects_non_numeric_variables(self):
        with pytest.raises(ValidationError):
            ExpressionEngineConfig.model_validate({"variables": {"x": "abc"}})

    def test_create_environment_with_defaults(self):
        config = ExpressionEngineConfig(variables={"rate": 0.5})
        environment = config.create_environment()
        assert environment.variables.get("rate") == 0.5
        assert environment.variables.get("a") == 97
        assert environment.functions.has("sqrt")

    def test_create_environment_without_defaults(self):
        config = ExpressionEngineConfig(
            variables={"rate": 0.5},
            include_default_variables=False,
            include_builtin_functions=False,
        )
        environment = config.create_environment()
        assert environment.variables.names() == ["rate"]
        assert len(environment.functions) == 0

    def test_configured_variables_override_defaults(self):
        config = ExpressionEngineConfig(variables={"a": 1})
        assert config.create_environment().variables.get("a") == 1


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_loads_yaml_file(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text(
            "expressionLimits:\n"
            "  maxAstDepth: 16\n"
            "variables:\n"
            "  rate: 0.25\n"
            "  count: 3\n"
            "includeBuiltinFunctions: false\n"
        )
        config = load_config(path)
        assert config.resolve_limits().max_ast_depth == 16
        assert config.variables == {"rate": 0.25, "count": 3.0}
        assert config.include_builtin_functions is False

    def test_empty_file_yields_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ExpressionEngineConfig()

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_logs_config_loaded(self, tmp_path, caplog):
        path = tmp_path / "engine.yaml"
        path.write_text("variables: {x: 1}\n")
        with caplog.at_level(logging.INFO, logger="exprpars.config"):
            load_config(str(path))
        assert "config_loaded" in caplog.text


class TestLoadConfigFromEnv:
    """Tests for environment-variable driven loading."""

    def test_unset_env_yields_defaults(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR_EXPRPARS_CONFIG, raising=False)
        assert load_config_from_env() == ExpressionEngineConfig()

    def test_reads_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "engine.yaml"
        path.write_text("variables:\n  x: 42\n")
        monkeypatch.setenv(ENV_VAR_EXPRPARS_CONFIG, str(path))
        assert load_config_from_env().variables == {"x": 42.0}
