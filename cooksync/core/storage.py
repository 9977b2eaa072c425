"""Device-scoped key/value storage."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any


class StorageError(Exception):
    """Raised when the local storage file exists but cannot be read."""


def write_json_atomic(path: Path, data: Any) -> None:
    """Durably write JSON: temp file in the same directory, fsync, replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class LocalStorage:
    """Key/value store that stays on this machine.

    Kept apart from the settings blob so a synced data directory never
    carries another device's identifiers.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._items: dict[str, str] | None = None

    @property
    def items(self) -> dict[str, str]:
        if self._items is None:
            self._items = self._load()
        return self._items

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read local storage {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Local storage {self.path} does not hold an object")
        return {str(k): str(v) for k, v in data.items()}

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
        write_json_atomic(self.path, self.items)
