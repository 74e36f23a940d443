"""Dependency injection container for ShareBudget.

Configuration is resolved once at startup and handed to consumers through
this container instead of being looked up globally, which keeps every
component testable in isolation.

Usage:
    from app.dependencies import create_dependencies

    deps = create_dependencies()
    deps.registry.connection.url("budgets")
    deps.checkpoints[EntityKind.BUDGET].get()
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from config import MARKERS, STORAGE, get_logger
from config.environment import BuildFlags, EnvironmentResolver
from config.registry import ConfigurationRegistry
from storage.checkpoints import EntityKind, SyncCheckpointStore, create_checkpoint_stores
from storage.preferences import PreferencesStore, open_preferences

logger = get_logger(__name__)


@dataclass
class AppDependencies:
    """Container for all application dependencies.

    Each field represents a component that can be injected.
    """

    registry: ConfigurationRegistry
    preferences: PreferencesStore
    checkpoints: Dict[EntityKind, SyncCheckpointStore] = field(default_factory=dict)
    data_dir: Optional[Path] = None

    def __post_init__(self):
        if not self.checkpoints:
            self.checkpoints = create_checkpoint_stores(self.preferences)
        logger.debug("AppDependencies container created")

    def checkpoint(self, kind: EntityKind) -> SyncCheckpointStore:
        return self.checkpoints[EntityKind(kind)]


def default_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Data directory, honouring the SHAREBUDGET_DATA_DIR override."""
    environ = os.environ if environ is None else environ
    override = environ.get(MARKERS.DATA_DIR_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / STORAGE.DATA_DIR_NAME


def create_dependencies(
    data_dir: Optional[Path] = None,
    build_flags: Optional[BuildFlags] = None,
    environ: Optional[Mapping[str, str]] = None,
    credentials: Any = None,
    app_logger: Optional[logging.Logger] = None,
    preferences_backend: str = "json",
) -> AppDependencies:
    """Create all application dependencies.

    Configures the registry first, because the resolved storage namespace
    decides which preferences store is opened.

    Args:
        data_dir: Override the default data directory.
        build_flags: Build switches; read from the environment when omitted.
        environ: Process environment mapping; os.environ when omitted.
        credentials: Opaque user credentials handle.
        app_logger: Logger handed to the registry.
        preferences_backend: "json" or "sqlite".

    Returns:
        AppDependencies container with all components.
    """
    logger.info("Creating application dependencies...")

    if data_dir is None:
        data_dir = default_data_dir(environ)

    resolver = EnvironmentResolver(build_flags=build_flags, environ=environ)
    registry = ConfigurationRegistry(
        resolver=resolver,
        credentials=credentials,
        app_logger=app_logger,
    )
    registry.configure()

    preferences = open_preferences(
        registry.storage_namespace,
        data_dir=data_dir,
        backend=preferences_backend,
    )

    deps = AppDependencies(
        registry=registry,
        preferences=preferences,
        data_dir=data_dir,
    )

    logger.info("All dependencies created successfully")
    return deps


def create_mock_dependencies(environment_flags: Optional[BuildFlags] = None) -> AppDependencies:
    """Create dependencies backed by in-memory fakes.

    The registry resolves against an empty environment, so only the build
    flags decide the environment.
    """
    from tests.mocks import MockCredentials, MockPreferences

    logger.debug("Creating mock dependencies for testing")

    resolver = EnvironmentResolver(
        build_flags=environment_flags or BuildFlags(),
        environ={},
    )
    registry = ConfigurationRegistry(resolver=resolver, credentials=MockCredentials())
    registry.configure()

    return AppDependencies(registry=registry, preferences=MockPreferences())
