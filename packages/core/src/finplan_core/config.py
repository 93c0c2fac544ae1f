"""Configuration system for finplan-core.

This module provides Pydantic Settings-based configuration with environment
variable support and defaults matching the engine's documented behavior.

Usage:
    from finplan_core.config import FinPlanConfig, configure_logging

    # Load from environment variables and .env file
    config = FinPlanConfig()
    configure_logging(config)

    # Access engine settings
    print(config.engine.payoff_max_months)
"""

import logging
from decimal import Decimal

import structlog
from pydantic import Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .models import PayoffStrategy


class EngineConfig(BaseSettings):
    """Calculation engine settings.

    Environment Variables:
        FINPLAN_ENGINE_PAYOFF_MAX_MONTHS: Hard cap on payoff simulation length
        FINPLAN_ENGINE_PAYOFF_EPSILON: Balance at or below which a debt is paid off
        FINPLAN_ENGINE_SCHEDULE_MAX_MONTHS: Default length cap for payment schedules
        FINPLAN_ENGINE_MINIMUM_PAYMENT_PERCENT: Minimum payment as % of balance
        FINPLAN_ENGINE_MINIMUM_PAYMENT_FLAT: Flat minimum payment floor
        FINPLAN_ENGINE_PMI_THRESHOLD_PERCENT: Down payment % below which PMI applies
        FINPLAN_ENGINE_DEFAULT_STRATEGY: avalanche or snowball
        FINPLAN_ENGINE_VALIDATE_INPUTS: Run range validation before calculating
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    payoff_max_months: int = Field(
        default=600,
        gt=0,
        le=1200,
        description="Hard cap on payoff simulation length (600 = 50 years)",
    )
    payoff_epsilon: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Remaining balance treated as fully paid",
    )
    schedule_max_months: int = Field(
        default=120,
        gt=0,
        le=1200,
        description="Default number of entries in a payment schedule",
    )
    minimum_payment_percent: Decimal = Field(
        default=Decimal("2"),
        ge=0,
        le=100,
        description="Minimum payment as a percentage of the balance",
    )
    minimum_payment_flat: Decimal = Field(
        default=Decimal("25"),
        ge=0,
        description="Flat floor for the minimum payment",
    )
    pmi_threshold_percent: Decimal = Field(
        default=Decimal("20"),
        ge=0,
        le=100,
        description="PMI applies when the down payment percentage is below this",
    )
    default_strategy: PayoffStrategy = Field(
        default=PayoffStrategy.AVALANCHE,
        description="Strategy used when a plan does not name one",
    )
    validate_inputs: bool = Field(
        default=True,
        description="Run range validation in the calculators",
    )


class FinPlanConfig(BaseSettings):
    """Root configuration for finplan-core.

    Environment Variables:
        FINPLAN_ENV: Environment name (development, staging, production, test)
        FINPLAN_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = FinPlanConfig(engine=EngineConfig(payoff_max_months=360))
    """

    model_config = SettingsConfigDict(
        env_prefix="FINPLAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    engine: EngineConfig = Field(default_factory=EngineConfig)

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


def configure_logging(config: FinPlanConfig) -> None:
    """Configure structlog to filter below the configured level.

    Production gets JSON lines; everything else the console renderer.
    """
    renderer = (
        structlog.processors.JSONRenderer()
        if config.is_production
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(config.log_level)
        ),
        cache_logger_on_first_use=False,
    )


def load_config(**overrides) -> FinPlanConfig:
    """Load configuration from the environment, applying any overrides.

    Raises:
        ConfigurationError: If a setting fails validation
    """
    try:
        return FinPlanConfig(**overrides)
    except PydanticValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first["loc"])
        raise ConfigurationError(
            f"Invalid configuration for {key}: {first['msg']}",
            config_key=key,
            expected=first["msg"],
            actual=first.get("input"),
            details={"error_count": e.error_count()},
        ) from e
