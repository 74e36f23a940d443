"""Per-entity synchronization checkpoints.

Each tracked entity kind remembers when it was last synchronized
successfully, as an opaque timestamp string stored under its own
preferences key. Kinds never share a key, so their sync cycles stay
independent.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from config import STORAGE, get_logger
from storage.preferences import PreferencesStore

logger = get_logger(__name__)


class EntityKind(str, Enum):
    """Domain entities tracked by the sync engine."""
    USER = "user"
    BUDGET = "budget"
    BUDGET_LIMIT = "budgetLimit"
    USER_GROUP = "userGroup"


# Preference key for each kind, e.g. "budgetLimit_timestamp"
CHECKPOINT_KEYS: Dict[EntityKind, str] = {
    kind: f"{kind.value}{STORAGE.CHECKPOINT_KEY_SUFFIX}" for kind in EntityKind
}


def checkpoint_key(kind: EntityKind) -> str:
    return CHECKPOINT_KEYS[EntityKind(kind)]


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with a trailing Z, e.g. 2024-01-01T00:00:00Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat().replace("+00:00", "Z")


class SyncCheckpointStore:
    """Last successful sync timestamp for one entity kind.

    Reads and writes go straight to the preferences store; failures from
    the store are not caught here.

    Attributes:
        kind: The entity kind this store tracks.
        key: Preferences key the timestamp is stored under.
    """

    def __init__(self, kind: EntityKind, preferences: PreferencesStore):
        self._kind = EntityKind(kind)
        self._preferences = preferences

    @property
    def kind(self) -> EntityKind:
        return self._kind

    @property
    def key(self) -> str:
        return CHECKPOINT_KEYS[self._kind]

    def get(self) -> Optional[str]:
        """Return the stored timestamp, or None if never synchronized."""
        return self._preferences.get(self.key)

    def set(self, value: Optional[str]) -> None:
        """Store a new timestamp. None clears the checkpoint."""
        self._preferences.set(self.key, value)
        if value is None:
            logger.debug(f"Cleared {self._kind.value} checkpoint")
        else:
            logger.debug(f"{self._kind.value} checkpoint -> {value}")

    def clear(self) -> None:
        self.set(None)

    timestamp = property(get, set)

    def mark_synced(self, moment: Optional[datetime] = None) -> str:
        """Record a sync at `moment` (now by default) and return the stored string."""
        value = format_timestamp(moment or datetime.now(timezone.utc))
        self.set(value)
        return value

    def __repr__(self) -> str:
        return f"SyncCheckpointStore(kind={self._kind.value!r})"


def create_checkpoint_stores(preferences: PreferencesStore) -> Dict[EntityKind, SyncCheckpointStore]:
    """One checkpoint store per entity kind, sharing the same preferences."""
    return {kind: SyncCheckpointStore(kind, preferences) for kind in EntityKind}
