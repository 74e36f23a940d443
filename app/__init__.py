"""Application module for ShareBudget.

Contains the startup wiring:
- AppDependencies: Explicit container for configuration and storage
- create_dependencies: Builds the container from process context
"""

from app.dependencies import AppDependencies, create_dependencies, default_data_dir

__all__ = [
    "AppDependencies",
    "create_dependencies",
    "default_data_dir",
]
