"""Deployment environment resolution.

The active environment is decided once per process. A test harness marker
in the process environment always wins, so automated tests never reach
production configuration however the application was built. Otherwise
the build switches pick between the two development flavours, falling
back to production.

Usage:
    from config.environment import EnvironmentResolver

    environment = EnvironmentResolver().resolve()
"""
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from typing import Mapping, Optional

from dotenv import dotenv_values

from config.constants import MARKERS, TRUTHY_VALUES


class Environment(str, Enum):
    """Deployment environments."""
    TESTING = "testing"
    PRODUCTION = "production"
    DEVELOPMENT_LOCAL = "development_local"
    DEVELOPMENT_REMOTE = "development_remote"


def parse_bool(value: Optional[str]) -> bool:
    """Strict boolean parsing for environment switches."""
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


@dataclass(frozen=True)
class BuildFlags:
    """Build switches selecting the non-testing environment.

    Production has no switch of its own: it is what remains when neither
    development switch is on.
    """
    development_local: bool = False
    development_remote: bool = False

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None,
                     load_env_file: bool = True) -> 'BuildFlags':
        """Read the switches from the process environment.

        Unless `load_env_file` is off, a `.env` file in the working
        directory fills in switches the process environment leaves unset.
        The file is never merged into os.environ.
        """
        if environ is None:
            environ = os.environ
            if load_env_file:
                file_values = dotenv_values(Path.cwd() / ".env")
                environ = {**file_values, **environ}
        return cls(
            development_local=parse_bool(environ.get(MARKERS.DEVELOPMENT_LOCAL_VAR)),
            development_remote=parse_bool(environ.get(MARKERS.DEVELOPMENT_REMOTE_VAR)),
        )

    @property
    def environment(self) -> Environment:
        if self.development_local:
            return Environment.DEVELOPMENT_LOCAL
        if self.development_remote:
            return Environment.DEVELOPMENT_REMOTE
        return Environment.PRODUCTION


def has_test_marker(environ: Mapping[str, str]) -> bool:
    """Check whether the process was launched by the test harness."""
    test_path = environ.get(MARKERS.TEST_CONFIGURATION_VAR)
    if not test_path:
        return False
    return PurePath(test_path).suffix == MARKERS.TEST_CONFIGURATION_SUFFIX


class EnvironmentResolver:
    """Determines the active deployment environment.

    Both inputs are injected so each branch can be exercised without
    mutating the real process environment.

    Attributes:
        build_flags: Build switches; read from the environment when omitted.
        environ: Mapping consulted for the test marker; os.environ when omitted.
    """

    def __init__(self, build_flags: Optional[BuildFlags] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        if build_flags is None:
            build_flags = BuildFlags.from_environ(environ)
        self.build_flags = build_flags

    def resolve(self) -> Environment:
        """Return the active environment. Never raises."""
        if has_test_marker(self.environ):
            return Environment.TESTING
        return self.build_flags.environment


def resolve_environment(build_flags: Optional[BuildFlags] = None,
                        environ: Optional[Mapping[str, str]] = None) -> Environment:
    """Shortcut for `EnvironmentResolver(...).resolve()`."""
    return EnvironmentResolver(build_flags, environ).resolve()
