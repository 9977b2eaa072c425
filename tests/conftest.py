"""Shared fixtures for the Cooksync tests."""

import json
from pathlib import Path
from typing import Any

import pytest
import requests

from cooksync.core.credentials import CredentialStore
from cooksync.core.state import SyncState
from cooksync.core.storage import LocalStorage
from cooksync.core.vault import Vault


class RecordingNotifier:
    """Notifier that remembers what it was asked to show."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)


def make_response(status_code: int = 200, json_data: Any = None, text: str | None = None) -> requests.Response:
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if json_data is not None:
        response._content = json.dumps(json_data).encode("utf-8")
    elif text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = b""
    return response


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def state(tmp_path: Path) -> SyncState:
    return SyncState(tmp_path / "data" / "data.json")


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "data" / "local-storage.json")


@pytest.fixture
def credentials(state: SyncState, storage: LocalStorage) -> CredentialStore:
    return CredentialStore(state, storage)


@pytest.fixture
def vault(tmp_path: Path) -> Vault:
    root = tmp_path / "vault"
    root.mkdir()
    return Vault(root)
