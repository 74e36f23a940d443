"""Centralized constants and configuration for ShareBudget.

This module contains the magic strings and numbers shared by the
environment resolver, the configuration registry and the storage layer.
Centralizing them keeps the writer and the reader of every key in sync.

Usage:
    from config.constants import BACKEND, STORAGE, MARKERS

    # Access values
    api_version = BACKEND.API_VERSION
    namespace = STORAGE.NAMESPACE_TESTING
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class StorageConfig:
    """Storage and file-related configuration."""
    # Directory and file names
    DATA_DIR_NAME: str = ".sharebudget"
    LOG_FILE: str = "sharebudget.log"

    # Namespaces select which persistent store instance is opened
    NAMESPACE_DEFAULT: str = "ShareBudget"
    NAMESPACE_TESTING: str = "ShareBudgetTest"

    # Preferences substrate
    PREFERENCES_SUFFIX_JSON: str = ".json"
    PREFERENCES_SUFFIX_SQLITE: str = ".db"
    CHECKPOINT_KEY_SUFFIX: str = "_timestamp"

    # Log rotation
    LOG_MAX_BYTES: int = 5_000_000  # 5MB
    LOG_BACKUP_COUNT: int = 3


@dataclass(frozen=True)
class BackendConfig:
    """Backend connection values for each deployment environment."""
    API_VERSION: str = "v1"

    # Local development server
    LOCAL_SCHEME: str = "http"
    LOCAL_HOST: str = "127.0.0.1"
    LOCAL_PORT: int = 5000

    # Remote deployments (development and production share a host)
    REMOTE_SCHEME: str = "https"
    REMOTE_HOST: str = "sharebudget-development.herokuapp.com"

    # Ports implied by scheme when none is set
    DEFAULT_HTTP_PORT: int = 80
    DEFAULT_HTTPS_PORT: int = 443


@dataclass(frozen=True)
class EnvironmentMarkers:
    """Process environment variables consulted during environment resolution."""
    # Test harness marker: points at a test configuration file
    TEST_CONFIGURATION_VAR: str = "SHAREBUDGET_TEST_CONFIGURATION_PATH"
    TEST_CONFIGURATION_SUFFIX: str = ".testconfiguration"

    # Build switches (DevelopmentLocal wins when both are set)
    DEVELOPMENT_LOCAL_VAR: str = "SHAREBUDGET_DEVELOPMENT_LOCAL"
    DEVELOPMENT_REMOTE_VAR: str = "SHAREBUDGET_DEVELOPMENT_REMOTE"

    # Optional override of the data directory
    DATA_DIR_VAR: str = "SHAREBUDGET_DATA_DIR"


# Global instances - import these
STORAGE = StorageConfig()
BACKEND = BackendConfig()
MARKERS = EnvironmentMarkers()


# Values accepted as "on" for boolean switches
TRUTHY_VALUES = frozenset({'1', 'true', 't', 'yes', 'y'})
