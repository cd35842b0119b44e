"""Adapter configuration with environment-based settings."""
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from dotenv import load_dotenv


DEFAULT_BODY_METHODS = "PATCH,POST,PUT"


def _parse_methods(value: str) -> FrozenSet[str]:
    """Split a comma separated list of HTTP methods."""
    return frozenset(m.strip().upper() for m in value.split(",") if m.strip())


class Config:
    """Base configuration class read once from the environment."""

    # Load environment variables
    load_dotenv()

    # Marshaler defaults
    SNAKE_CASE_ERRORS: bool = os.getenv("XMLMARSHAL_SNAKE_CASE_ERRORS", "false").lower() == "true"
    BODY_METHODS: FrozenSet[str] = _parse_methods(
        os.getenv("XMLMARSHAL_BODY_METHODS", DEFAULT_BODY_METHODS)
    )

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration values."""
        if not cls.BODY_METHODS:
            raise ValueError("XMLMARSHAL_BODY_METHODS must name at least one method")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    ENABLE_METRICS = False
    SENTRY_DSN = None


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)


@dataclass(frozen=True)
class MarshalerOptions:
    """
    Per-adapter options.

    Attributes:
        snake_case_http_equiv_errors: Name HTTP-equivalent errors after their
            status text (``not_found``) instead of their type name
        body_methods: HTTP methods whose requests carry a body to decode
        enable_metrics: Record Prometheus metrics for each request, on by
            default like ``ENABLE_METRICS``
    """

    snake_case_http_equiv_errors: bool = False
    body_methods: FrozenSet[str] = field(default_factory=lambda: _parse_methods(DEFAULT_BODY_METHODS))
    enable_metrics: bool = True

    def __post_init__(self):
        """Normalize method names."""
        object.__setattr__(self, "body_methods", frozenset(m.upper() for m in self.body_methods))

    @classmethod
    def from_config(cls, config: Optional[type[Config]] = None) -> "MarshalerOptions":
        """
        Build options from a configuration class.

        Args:
            config: Configuration class, defaults to the environment's one

        Returns:
            MarshalerOptions instance
        """
        config = config or get_config()
        return cls(
            snake_case_http_equiv_errors=config.SNAKE_CASE_ERRORS,
            body_methods=config.BODY_METHODS,
            enable_metrics=config.ENABLE_METRICS,
        )
