"""Persisted sync state."""

import json
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..models.config import DEFAULT_TARGET_DIR
from .storage import write_json_atomic


class StateFileError(Exception):
    """Raised when the state file exists but cannot be read."""


@dataclass
class SyncStateData:
    """Everything the client remembers between runs."""

    token: str = ""  # Bearer token; empty means not connected
    target_dir: str = DEFAULT_TARGET_DIR  # Vault folder recipes are written to
    is_syncing: bool = False
    last_sync_failed: bool = False
    last_sync_time: int | None = None  # Epoch milliseconds of the last successful write
    imported_recipe_ids: set[int] = field(default_factory=set)
    auto_sync_on_start: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "token": self.token,
            "target_dir": self.target_dir,
            "is_syncing": self.is_syncing,
            "last_sync_failed": self.last_sync_failed,
            "last_sync_time": self.last_sync_time,
            "imported_recipe_ids": sorted(self.imported_recipe_ids),
            "auto_sync_on_start": self.auto_sync_on_start,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncStateData":
        """Create from dictionary, merging stored values over defaults."""
        defaults = cls()
        known = {f.name for f in fields(cls)}
        merged = defaults.to_dict()
        merged.update({k: v for k, v in data.items() if k in known and v is not None})

        imported = merged["imported_recipe_ids"]
        if not isinstance(imported, list):
            raise TypeError(f"imported_recipe_ids must be a list, got {type(imported).__name__}")

        last_sync_time = merged.get("last_sync_time")
        return cls(
            token=str(merged["token"] or ""),
            target_dir=str(merged["target_dir"] or DEFAULT_TARGET_DIR),
            is_syncing=bool(merged["is_syncing"]),
            last_sync_failed=bool(merged["last_sync_failed"]),
            last_sync_time=int(last_sync_time) if last_sync_time is not None else None,
            imported_recipe_ids={int(i) for i in imported},
            auto_sync_on_start=bool(merged["auto_sync_on_start"]),
        )


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class SyncState:
    """Owns the sync state and persists it after every durable change."""

    def __init__(self, state_file: Path) -> None:
        """Initialize state manager.

        Args:
            state_file: Path to the data.json settings blob
        """
        self.state_file = Path(state_file)
        self._state: SyncStateData | None = None

    @property
    def state(self) -> SyncStateData:
        """Get or load the state data."""
        if self._state is None:
            self._state = self._load_state()
        return self._state

    def _load_state(self) -> SyncStateData:
        """Load state from disk or create defaults."""
        if not self.state_file.exists():
            return SyncStateData()
        try:
            with open(self.state_file) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StateFileError(f"Cannot read state file {self.state_file}: {e}") from e
        if not isinstance(data, dict):
            raise StateFileError(f"State file {self.state_file} does not hold an object")
        try:
            return SyncStateData.from_dict(data)
        except (TypeError, ValueError) as e:
            raise StateFileError(f"State file {self.state_file} has invalid values: {e}") from e

    def save(self) -> None:
        """Save state to disk."""
        write_json_atomic(self.state_file, self.state.to_dict())

    # -------------------------------------------------------------------------
    # Mutations (each one persists)
    # -------------------------------------------------------------------------

    def set_token(self, token: str) -> None:
        self.state.token = token
        self.save()

    def mark_sync_started(self) -> None:
        self.state.is_syncing = True
        self.save()

    def mark_sync_finished(self, failed: bool) -> None:
        self.state.is_syncing = False
        self.state.last_sync_failed = failed
        self.save()

    def record_import(self, recipe_id: int, when: int | None = None) -> None:
        """Remember a recipe whose file has been written.

        Must only be called after the write succeeded. ``last_sync_time``
        never moves backwards.
        """
        when = now_ms() if when is None else when
        self.state.imported_recipe_ids.add(recipe_id)
        if self.state.last_sync_time is None or when > self.state.last_sync_time:
            self.state.last_sync_time = when
        self.save()

    def set_target_dir(self, target_dir: str) -> None:
        self.state.target_dir = target_dir
        self.save()

    def set_auto_sync_on_start(self, enabled: bool) -> None:
        self.state.auto_sync_on_start = enabled
        self.save()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_stale(self, now: int, max_age_ms: int) -> bool:
        """True if there was never a successful write, or it is too old."""
        last = self.state.last_sync_time
        return last is None or last < now - max_age_ms

    def get_status_summary(self) -> dict[str, Any]:
        """Get a summary of sync state."""
        last = self.state.last_sync_time
        last_sync = None
        if last is not None:
            last_sync = datetime.fromtimestamp(last / 1000, tz=timezone.utc).isoformat()
        return {
            "state_file": str(self.state_file),
            "connected": bool(self.state.token),
            "target_dir": self.state.target_dir,
            "is_syncing": self.state.is_syncing,
            "last_sync_failed": self.state.last_sync_failed,
            "last_sync": last_sync,
            "imported_recipes": len(self.state.imported_recipe_ids),
            "auto_sync_on_start": self.state.auto_sync_on_start,
        }
