"""Sync cycle orchestration."""

from enum import Enum
from typing import Any, Callable

from loguru import logger

from ..models.config import DEFAULT_TARGET_DIR
from .credentials import CredentialStore
from .export import ExportFailedError, ExportRequester
from .handshake import AuthHandshake, AuthOutcome
from .materializer import MaterializeResult, RecipeMaterializer
from .notifier import Notifier
from .state import SyncState, SyncStateData, now_ms
from .storage import StorageError
from .vault import normalize_path

AUTO_SYNC_MAX_AGE_MS = 1000 * 60 * 60 * 2

# Labels shown by a UI control that tracks the sync itself
STATUS_SYNCING = "Syncing..."
STATUS_IDLE = "Run sync"


class SyncOutcome(Enum):
    """How a call to start_sync ended."""

    ALREADY_RUNNING = "already_running"
    NOT_AUTHENTICATED = "not_authenticated"
    FAILED = "failed"
    UP_TO_DATE = "up_to_date"
    COMPLETED = "completed"


class SyncController:
    """Runs sync cycles, one at a time, and records how they ended.

    The controller is the only writer of the sync state. A UI reads it
    through ``state`` and changes it through the command methods.
    """

    def __init__(
        self,
        state: SyncState,
        credentials: CredentialStore,
        requester: ExportRequester,
        materializer: RecipeMaterializer,
        notifier: Notifier,
        handshake: AuthHandshake | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._state = state
        self.credentials = credentials
        self.requester = requester
        self.materializer = materializer
        self.notifier = notifier
        self.handshake = handshake
        self.clock = clock
        self.last_results: list[MaterializeResult] = []

    @property
    def state(self) -> SyncStateData:
        return self._state.state

    def status_summary(self) -> dict[str, Any]:
        return self._state.get_status_summary()

    def start_sync(self, status: Callable[[str], None] | None = None) -> SyncOutcome:
        """Run one sync cycle.

        Args:
            status: Callback of a UI control with its own status display.
                When given, export errors are not shown as notices.
        """
        if self.state.is_syncing:
            self.notifier.notify("Cooksync sync already in progress")
            return SyncOutcome.ALREADY_RUNNING
        if not self.credentials.has_token():
            # No sync without a token
            return SyncOutcome.NOT_AUTHENTICATED

        self._state.mark_sync_started()
        if status:
            status(STATUS_SYNCING)

        try:
            outcome = self._run_cycle(quiet=status is not None)
        except StorageError as e:
            logger.error(f"Sync cycle aborted: {e}")
            self._state.mark_sync_finished(failed=True)
            raise
        except BaseException:
            logger.exception("Sync cycle aborted")
            self._state.mark_sync_finished(failed=True)
            raise
        finally:
            if status:
                status(STATUS_IDLE)
        return outcome

    def _run_cycle(self, quiet: bool) -> SyncOutcome:
        try:
            manifest = self.requester.request_export(set(self.state.imported_recipe_ids))
        except ExportFailedError as e:
            self._state.mark_sync_finished(failed=True)
            # A control with its own status display shows the failure itself
            if not quiet:
                self.notifier.notify(str(e))
            return SyncOutcome.FAILED

        if manifest is None:
            self._state.mark_sync_finished(failed=False)
            self.notifier.notify("Cooksync data is already up to date")
            return SyncOutcome.UP_TO_DATE

        self.last_results = self.materializer.materialize(manifest.recipes)
        failed = sum(1 for r in self.last_results if not r.success)
        if failed:
            logger.warning(f"{failed} of {len(self.last_results)} recipes could not be written")

        self._state.mark_sync_finished(failed=False)
        self.notifier.notify("Cooksync: sync completed")
        return SyncOutcome.COMPLETED

    def on_startup(self) -> SyncOutcome | None:
        """What the host runs once when it starts.

        Returns the outcome of the automatic sync, or None when none ran.
        """
        if self.state.is_syncing:
            # Only one process runs per installation, so this is a crashed cycle
            logger.warning("Clearing sync flag left behind by an interrupted run")
            self._state.mark_sync_finished(failed=True)

        if self.state.auto_sync_on_start and self._state.is_stale(self.clock(), AUTO_SYNC_MAX_AGE_MS):
            return self.start_sync()
        return None

    def connect(self) -> AuthOutcome:
        """Authenticate, unless a token is already present."""
        if self.credentials.has_token():
            return AuthOutcome.SUCCEEDED
        if self.handshake is None:
            raise RuntimeError("No authorization handshake configured")
        return self.handshake.run()

    def update_target_dir(self, value: str) -> str:
        """Change where recipes are written; blank means the default folder."""
        target_dir = normalize_path(value) if value and value.strip() else DEFAULT_TARGET_DIR
        if target_dir == "/":
            target_dir = DEFAULT_TARGET_DIR
        self._state.set_target_dir(target_dir)
        return target_dir

    def set_auto_sync_on_start(self, enabled: bool) -> None:
        self._state.set_auto_sync_on_start(enabled)
