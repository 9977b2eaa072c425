"""Core sync functionality."""

from .client import CooksyncAPIError, CooksyncClient, ServiceError, TransportError
from .controller import SyncController, SyncOutcome
from .credentials import CredentialStore
from .export import ExportFailedError, ExportRequester
from .handshake import AuthHandshake, AuthOutcome
from .materializer import MaterializeResult, RecipeMaterializer
from .notifier import ConsoleNotifier, Notifier
from .state import StateFileError, SyncState, SyncStateData
from .storage import LocalStorage, StorageError
from .vault import Vault, VaultError, normalize_path

__all__ = [
    "AuthHandshake",
    "AuthOutcome",
    "ConsoleNotifier",
    "CooksyncAPIError",
    "CooksyncClient",
    "CredentialStore",
    "ExportFailedError",
    "ExportRequester",
    "LocalStorage",
    "MaterializeResult",
    "Notifier",
    "RecipeMaterializer",
    "ServiceError",
    "StateFileError",
    "StorageError",
    "SyncController",
    "SyncOutcome",
    "SyncState",
    "SyncStateData",
    "TransportError",
    "Vault",
    "VaultError",
    "normalize_path",
]
