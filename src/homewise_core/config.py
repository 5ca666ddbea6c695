"""Configuration system for Homewise.

This module provides Pydantic Settings-based configuration with environment
variable support. The policy sections reuse the models from
``homewise_core.defaults`` so a deployment can override any constant
without the engines reading the environment themselves.

Usage:
    from homewise_core.config import load_config
    from homewise_core.affordability import calculate_max_affordability

    # Load from environment variables and .env file
    config = load_config()

    result = calculate_max_affordability(
        inputs,
        policy=config.lending,
        settings=config.solver,
    )

Environment variables for nested sections use a double underscore, e.g.
``HOMEWISE_LENDING__MAX_DTI_PERCENT=45``.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .defaults import (
    LendingPolicy,
    MortgageOptionLimits,
    SolverSettings,
    WithholdingDefaults,
)
from .exceptions import ConfigurationError


class HomewiseConfig(BaseSettings):
    """Root configuration for Homewise.

    Environment Variables:
        HOMEWISE_ENV: Environment name (development, staging, production, test)
        HOMEWISE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        HOMEWISE_JSON_LOGS: Render log events as JSON lines
        HOMEWISE_LENDING__<FIELD>: Override a lending policy constant
        HOMEWISE_WITHHOLDING__<FIELD>: Override a default withholding percent
        HOMEWISE_SOLVER__<FIELD>: Override a solver tolerance or ceiling
        HOMEWISE_MORTGAGE_OPTIONS__<FIELD>: Override a mortgage option bound

    Example:
        # Override specific settings
        config = HomewiseConfig(
            lending=LendingPolicy(max_dti_percent=45),
            log_level="debug",
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="HOMEWISE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Render log events as JSON instead of console text",
    )

    lending: LendingPolicy = Field(default_factory=LendingPolicy)
    withholding: WithholdingDefaults = Field(default_factory=WithholdingDefaults)
    solver: SolverSettings = Field(default_factory=SolverSettings)
    mortgage_options: MortgageOptionLimits = Field(default_factory=MortgageOptionLimits)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def load_config(**overrides: Any) -> HomewiseConfig:
    """Load configuration from the environment, applying keyword overrides.

    Raises:
        ConfigurationError: If any value fails validation.
    """
    try:
        return HomewiseConfig(**overrides)
    except PydanticValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid configuration: {first.get('msg', 'validation failed')}",
            config_key=key or None,
            expected=first.get("type"),
            actual=first.get("input"),
            details={"error_count": e.error_count()},
        ) from e


__all__ = ["HomewiseConfig", "load_config"]
