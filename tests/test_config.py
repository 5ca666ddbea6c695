"""Tests for the configuration system."""

import pytest

from homewise_core.config import HomewiseConfig, load_config
from homewise_core.defaults import LendingPolicy
from homewise_core.exceptions import ConfigurationError


class TestHomewiseConfig:
    """Tests for root configuration."""

    def test_defaults(self):
        """Test default configuration."""
        config = HomewiseConfig(_env_file=None)
        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.json_logs is False
        assert config.lending.max_dti_percent == 43
        assert config.solver.max_price == 5_000_000

    def test_env_validation(self):
        """Test environment name validation."""
        config = HomewiseConfig(env="PRODUCTION", _env_file=None)
        assert config.env == "production"
        assert config.is_production

        with pytest.raises(ValueError):
            HomewiseConfig(env="invalid", _env_file=None)

    def test_log_level_validation(self):
        """Test log level validation."""
        config = HomewiseConfig(log_level="debug", _env_file=None)
        assert config.log_level == "DEBUG"
        assert config.is_debug

        with pytest.raises(ValueError):
            HomewiseConfig(log_level="INVALID", _env_file=None)

    def test_nested_override(self):
        """Policy sections accept model overrides."""
        config = HomewiseConfig(lending=LendingPolicy(max_dti_percent=45), _env_file=None)
        assert config.lending.max_dti_percent == 45
        assert config.lending.housing_ratio_percent == 28

    def test_policy_bounds(self):
        """Out-of-range policy values are rejected."""
        with pytest.raises(ValueError):
            HomewiseConfig(withholding={"tax_pct": 140}, _env_file=None)


class TestEnvironmentVariables:
    """Tests for environment variable loading."""

    def test_env_prefix(self, monkeypatch):
        """Test that HOMEWISE_ prefix works."""
        monkeypatch.setenv("HOMEWISE_ENV", "staging")
        monkeypatch.setenv("HOMEWISE_LOG_LEVEL", "warning")

        config = HomewiseConfig(_env_file=None)
        assert config.env == "staging"
        assert config.log_level == "WARNING"

    def test_nested_env_vars(self, monkeypatch):
        """Test double-underscore nested section overrides."""
        monkeypatch.setenv("HOMEWISE_LENDING__MAX_DTI_PERCENT", "45")
        monkeypatch.setenv("HOMEWISE_SOLVER__MONTHLY_TOLERANCE", "25")

        config = HomewiseConfig(_env_file=None)
        assert config.lending.max_dti_percent == 45
        assert config.solver.monthly_tolerance == 25

    def test_env_file(self, tmp_path):
        """Test values are read from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("HOMEWISE_ENV=test\nHOMEWISE_JSON_LOGS=true\n")

        config = HomewiseConfig(_env_file=env_file)
        assert config.env == "test"
        assert config.json_logs is True


class TestLoadConfig:
    """Tests for load_config."""

    def test_overrides(self, monkeypatch):
        """Keyword overrides win over the environment."""
        monkeypatch.setenv("HOMEWISE_ENV", "staging")
        config = load_config(env="test", _env_file=None)
        assert config.env == "test"

    def test_invalid_raises_configuration_error(self):
        """Validation failures become ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(env="bogus", _env_file=None)

        error = exc_info.value
        assert error.config_key == "env"
        assert error.actual == "bogus"
        assert error.recoverable is False
