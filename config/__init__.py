"""Configuration module for ShareBudget.

Provides centralized configuration, logging, exceptions, environment
resolution and the configuration registry.
"""
from config.constants import (
    BACKEND,
    MARKERS,
    STORAGE,
    BackendConfig,
    EnvironmentMarkers,
    StorageConfig,
)
from config.exceptions import (
    ConfigurationError,
    ShareBudgetError,
    StorageError,
)
from config.logging_config import get_logger, setup_logging
from config.environment import BuildFlags, Environment, EnvironmentResolver, resolve_environment
from config.registry import (
    ConfigurationRegistry,
    ConnectionDescriptor,
)

__all__ = [
    # Constants
    "BACKEND",
    "MARKERS",
    "STORAGE",
    "BackendConfig",
    "EnvironmentMarkers",
    "StorageConfig",
    # Exceptions
    "ShareBudgetError",
    "ConfigurationError",
    "StorageError",
    # Logging
    "setup_logging",
    "get_logger",
    # Environment
    "BuildFlags",
    "Environment",
    "EnvironmentResolver",
    "resolve_environment",
    # Registry
    "ConfigurationRegistry",
    "ConnectionDescriptor",
]
