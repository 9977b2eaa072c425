"""Write exported recipes into the vault."""

from dataclasses import dataclass
from typing import Callable, Iterable

from loguru import logger

from ..models.config import sanitize_title
from ..models.recipe import RecipeRecord
from .notifier import Notifier
from .state import SyncState, now_ms
from .vault import Vault, VaultError, normalize_path


@dataclass
class MaterializeResult:
    """Result of writing one recipe."""

    success: bool
    recipe_id: int
    path: str
    message: str


class RecipeMaterializer:
    """Turns recipe records into uniquely named Markdown files."""

    EXTENSION = "md"

    def __init__(
        self,
        vault: Vault,
        state: SyncState,
        notifier: Notifier,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.vault = vault
        self.state = state
        self.notifier = notifier
        self.clock = clock

    def target_path(self, record: RecipeRecord) -> str:
        title = sanitize_title(record.title)
        return normalize_path(f"{self.state.state.target_dir}/{title}.{self.EXTENSION}")

    def _ensure_parent(self, path: str) -> None:
        if "/" not in path:
            return
        parent = path.rsplit("/", 1)[0]
        if not self.vault.exists(parent):
            self.vault.create_folder(parent)

    def unique_path(self, path: str) -> str:
        """First free name among ``Title.md``, ``Title (1).md``, ``Title (2).md``...

        Probes sequentially, so each write costs one existence check per
        file already holding the name.
        """
        base, _, extension = path.rpartition(".")
        candidate = path
        count = 1
        while self.vault.exists(candidate):
            candidate = f"{base} ({count}).{extension}"
            count += 1
        return candidate

    def materialize_one(self, record: RecipeRecord) -> MaterializeResult:
        path = self.target_path(record)
        try:
            self._ensure_parent(path)
            path = self.unique_path(path)
            self.vault.create(path, record.content)
        except (VaultError, OSError) as e:
            logger.error(f"Error writing {path}: {e}")
            self.notifier.notify(f"Error writing file {path}: {e}")
            return MaterializeResult(False, record.id, path, str(e))

        # Only now is the recipe considered imported
        self.state.record_import(record.id, self.clock())
        logger.info(f"Wrote recipe {record.id} to {path}")
        return MaterializeResult(True, record.id, path, f"Wrote {path}")

    def materialize(self, records: Iterable[RecipeRecord]) -> list[MaterializeResult]:
        """Write every record in order; one failure never stops the batch."""
        return [self.materialize_one(record) for record in records]
