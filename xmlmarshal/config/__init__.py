"""Configuration module."""
from xmlmarshal.config.settings import (
    Config,
    get_config,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    MarshalerOptions,
)

__all__ = [
    "Config",
    "get_config",
    "DevelopmentConfig",
    "ProductionConfig",
    "TestingConfig",
    "MarshalerOptions",
]
