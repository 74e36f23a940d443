"""Custom exception hierarchy for ShareBudget.

Provides specific exceptions for different error categories,
enabling better error handling and debugging.
"""

from typing import Optional


class ShareBudgetError(Exception):
    """Base exception for all ShareBudget errors.

    All custom exceptions in this application should inherit from this class.
    This allows catching all application-specific errors with a single except clause.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(ShareBudgetError):
    """Settings and configuration errors.

    Raised when there are issues with:
    - Reading a dependency handle that was never injected
    - Requesting configuration the registry cannot provide

    Examples:
        >>> raise ConfigurationError("User credentials not configured")
    """

    pass


class StorageError(ShareBudgetError):
    """Data persistence errors.

    Raised when there are issues with:
    - Reading/writing the preferences file
    - Database operations
    - File permissions
    - Data corruption

    Examples:
        >>> raise StorageError("Failed to save preferences", {"path": "/path/to/file"})
    """

    pass
