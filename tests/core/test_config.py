"""Tests for ResolverConfig."""

import pytest

from taskresolver.core.config import (
    DEFAULT_MAX_ITERATIONS,
    ENV_MAX_ITERATIONS,
    ENV_WITH_LOADING_STATE,
    ResolverConfig,
    validate_max_iterations,
)


class TestResolverConfig:
    """Tests for ResolverConfig defaults and validation."""

    def test_defaults(self):
        config = ResolverConfig()
        assert config.with_loading_state is False
        assert config.max_iterations == DEFAULT_MAX_ITERATIONS == 100

    @pytest.mark.parametrize("value", [0, -1, 1.5, "10", True])
    def test_invalid_max_iterations(self, value):
        with pytest.raises(ValueError, match="max_iterations"):
            ResolverConfig(max_iterations=value)

    def test_invalid_loading_state(self):
        with pytest.raises(ValueError, match="with_loading_state"):
            ResolverConfig(with_loading_state="yes")

    def test_validate_max_iterations_returns_value(self):
        assert validate_max_iterations(5) == 5


class TestResolverConfigFromEnv:
    """Tests for ResolverConfig.from_env()."""

    def test_defaults_without_env(self, clean_env):
        assert ResolverConfig.from_env() == ResolverConfig()

    def test_reads_environment(self, clean_env):
        clean_env.setenv(ENV_WITH_LOADING_STATE, "true")
        clean_env.setenv(ENV_MAX_ITERATIONS, "7")

        config = ResolverConfig.from_env()

        assert config.with_loading_state is True
        assert config.max_iterations == 7

    @pytest.mark.parametrize(("raw", "expected"), [("1", True), ("ON", True), ("no", False)])
    def test_boolean_spellings(self, clean_env, raw, expected):
        clean_env.setenv(ENV_WITH_LOADING_STATE, raw)
        assert ResolverConfig.from_env().with_loading_state is expected

    def test_arguments_win_over_environment(self, clean_env):
        clean_env.setenv(ENV_WITH_LOADING_STATE, "true")
        clean_env.setenv(ENV_MAX_ITERATIONS, "7")

        config = ResolverConfig.from_env(with_loading_state=False, max_iterations=3)

        assert config.with_loading_state is False
        assert config.max_iterations == 3

    def test_invalid_environment_raises(self, clean_env):
        clean_env.setenv(ENV_MAX_ITERATIONS, "many")
        with pytest.raises(ValueError, match=ENV_MAX_ITERATIONS):
            ResolverConfig.from_env()

        clean_env.setenv(ENV_MAX_ITERATIONS, "5")
        clean_env.setenv(ENV_WITH_LOADING_STATE, "maybe")
        with pytest.raises(ValueError, match=ENV_WITH_LOADING_STATE):
            ResolverConfig.from_env()

    def test_loads_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"{ENV_MAX_ITERATIONS}=12\n{ENV_WITH_LOADING_STATE}=yes\n")

        config = ResolverConfig.from_env(env_file=env_file)

        assert config.max_iterations == 12
        assert config.with_loading_state is True

    def test_environment_wins_over_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(f"{ENV_MAX_ITERATIONS}=12\n")
        clean_env.setenv(ENV_MAX_ITERATIONS, "4")

        assert ResolverConfig.from_env(env_file=env_file).max_iterations == 4
