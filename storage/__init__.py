"""Data persistence components."""

from .checkpoints import (
    CHECKPOINT_KEYS,
    EntityKind,
    SyncCheckpointStore,
    checkpoint_key,
    create_checkpoint_stores,
)
from .preferences import JsonPreferences, PreferencesStore, SQLitePreferences, open_preferences

__all__ = [
    "CHECKPOINT_KEYS",
    "EntityKind",
    "JsonPreferences",
    "PreferencesStore",
    "SQLitePreferences",
    "SyncCheckpointStore",
    "checkpoint_key",
    "create_checkpoint_stores",
    "open_preferences",
]
