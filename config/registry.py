"""Process-wide configuration for ShareBudget.

The registry resolves the deployment environment once and derives from it
everything that depends on the environment: the backend connection
descriptor, the REST API version and the storage namespace. It also holds
the credential and logger handles handed to it at startup.

Usage:
    from config.registry import ConfigurationRegistry

    registry = ConfigurationRegistry()
    registry.configure()
    url = registry.connection.url("budgets")
"""
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode, urlunsplit

from config.constants import BACKEND, STORAGE
from config.environment import Environment, EnvironmentResolver
from config.exceptions import ConfigurationError
from config.logging_config import get_logger, set_log_environment

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Where the backend lives for one environment.

    A port of None means the scheme's default port.
    """
    scheme: str = ""
    host: Optional[str] = None
    port: Optional[int] = None
    path_prefix: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.scheme and not self.host

    @property
    def effective_port(self) -> Optional[int]:
        if self.port is not None:
            return self.port
        if self.scheme == "https":
            return BACKEND.DEFAULT_HTTPS_PORT
        if self.scheme == "http":
            return BACKEND.DEFAULT_HTTP_PORT
        return None

    @property
    def netloc(self) -> str:
        if not self.host:
            return ""
        if self.port is None:
            return self.host
        return f"{self.host}:{self.port}"

    def base_url(self) -> str:
        """URL of the API root, e.g. ``http://127.0.0.1:5000/v1``."""
        return self.url()

    def url(self, *segments: str, query: Optional[Dict[str, Any]] = None) -> str:
        """Build a request target below the path prefix.

        Empty descriptors produce a relative path only.
        """
        parts = [self.path_prefix] if self.path_prefix else []
        parts.extend(str(segment).strip("/") for segment in segments)
        path = "/".join(part for part in parts if part)
        if self.netloc and path:
            path = "/" + path
        return urlunsplit((
            self.scheme,
            self.netloc,
            path,
            urlencode(query) if query else "",
            "",
        ))

    def to_dict(self) -> dict:
        return asdict(self)


EMPTY_CONNECTION = ConnectionDescriptor()

# Fixed environment -> backend mapping
CONNECTIONS: Dict[Environment, ConnectionDescriptor] = {
    Environment.DEVELOPMENT_LOCAL: ConnectionDescriptor(
        scheme=BACKEND.LOCAL_SCHEME,
        host=BACKEND.LOCAL_HOST,
        port=BACKEND.LOCAL_PORT,
        path_prefix=BACKEND.API_VERSION,
    ),
    Environment.DEVELOPMENT_REMOTE: ConnectionDescriptor(
        scheme=BACKEND.REMOTE_SCHEME,
        host=BACKEND.REMOTE_HOST,
        path_prefix=BACKEND.API_VERSION,
    ),
    Environment.PRODUCTION: ConnectionDescriptor(
        scheme=BACKEND.REMOTE_SCHEME,
        host=BACKEND.REMOTE_HOST,
        path_prefix=BACKEND.API_VERSION,
    ),
    Environment.TESTING: EMPTY_CONNECTION,
}

# Environments that ship logs to the remote collector
REMOTE_LOGGING_ENVIRONMENTS = frozenset({
    Environment.PRODUCTION,
    Environment.DEVELOPMENT_REMOTE,
})


def connection_for(environment: Any) -> ConnectionDescriptor:
    """Look up the descriptor for an environment.

    Unknown values get the empty descriptor instead of an error.
    """
    try:
        return CONNECTIONS[Environment(environment)]
    except (KeyError, ValueError):
        logger.warning(f"No backend connection for environment {environment!r}")
        return EMPTY_CONNECTION


def storage_namespace_for(environment: Any) -> str:
    if environment == Environment.TESTING:
        return STORAGE.NAMESPACE_TESTING
    return STORAGE.NAMESPACE_DEFAULT


class ConfigurationRegistry:
    """Configure-once, read-everywhere application configuration.

    Call `configure()` at startup. Accessors configure lazily if that has
    not happened yet, and running `configure()` again recomputes the same
    values.

    Attributes:
        resolver: Source of the active environment.
    """

    def __init__(self, resolver: Optional[EnvironmentResolver] = None,
                 credentials: Any = None,
                 app_logger: Optional[logging.Logger] = None):
        self.resolver = resolver or EnvironmentResolver()
        self._credentials = credentials
        self._logger = app_logger
        self._environment: Optional[Environment] = None
        self._connection: ConnectionDescriptor = EMPTY_CONNECTION
        self._storage_namespace: str = STORAGE.NAMESPACE_DEFAULT
        self._api_version: str = BACKEND.API_VERSION
        self._configured = False

    def configure(self) -> 'ConfigurationRegistry':
        """Resolve the environment and derive everything from it."""
        environment = self.resolver.resolve()
        self._environment = environment
        set_log_environment(environment.value)
        self._api_version = BACKEND.API_VERSION
        self._connection = connection_for(environment)
        self._storage_namespace = storage_namespace_for(environment)
        self._configured = True

        self.logger.info(f"Environment: {environment.value}")
        logger.debug(
            f"Configured backend={self._connection.base_url() or '<none>'}, "
            f"namespace={self._storage_namespace}"
        )
        return self

    def _ensure_configured(self) -> None:
        if not self._configured:
            self.configure()

    @property
    def is_configured(self) -> bool:
        return self._configured

    @property
    def environment(self) -> Environment:
        self._ensure_configured()
        return self._environment

    @property
    def connection(self) -> ConnectionDescriptor:
        """Descriptor for the current environment."""
        self._ensure_configured()
        return self._connection

    def connection_descriptor(self, environment: Optional[Environment] = None) -> ConnectionDescriptor:
        """Descriptor for `environment`, defaulting to the current one."""
        if environment is None:
            return self.connection
        return connection_for(environment)

    @property
    def api_version(self) -> str:
        self._ensure_configured()
        return self._api_version

    @property
    def storage_namespace(self) -> str:
        self._ensure_configured()
        return self._storage_namespace

    @property
    def remote_logging_enabled(self) -> bool:
        return self.environment in REMOTE_LOGGING_ENVIRONMENTS

    # === Injected handles ===

    @property
    def credentials(self) -> Any:
        if self._credentials is None:
            raise ConfigurationError("User credentials not configured")
        return self._credentials

    def set_credentials(self, credentials: Any) -> None:
        self._credentials = credentials

    @property
    def logger(self) -> logging.Logger:
        return self._logger or logger

    def set_logger(self, app_logger: Optional[logging.Logger]) -> None:
        self._logger = app_logger

    def summary(self) -> dict:
        """Resolved values, for logging and diagnostics."""
        return {
            "environment": self.environment.value,
            "api_version": self.api_version,
            "storage_namespace": self.storage_namespace,
            "remote_logging": self.remote_logging_enabled,
            "connection": self.connection.to_dict(),
        }
