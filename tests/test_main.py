"""Tests for the command line interface."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from cooksync.main import main


@pytest.fixture
def vault_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


def run(*args: str) -> int:
    with patch.dict(os.environ, {}, clear=True), patch("cooksync.models.config.load_dotenv"):
        return main(list(args))


class TestCli:
    """Tests for CLI commands that need no network."""

    def test_no_command_prints_help(self, vault_dir: Path) -> None:
        assert run() == 1

    def test_status(self, vault_dir: Path) -> None:
        assert run("--vault", str(vault_dir), "status") == 0

    def test_sync_requires_connection(self, vault_dir: Path) -> None:
        with patch("cooksync.core.client.requests.Session.request") as request:
            assert run("--vault", str(vault_dir), "sync") == 1

        request.assert_not_called()

    def test_set_dir_and_auto_sync(self, vault_dir: Path) -> None:
        assert run("--vault", str(vault_dir), "set-dir", "Kitchen/Recipes") == 0
        assert run("--vault", str(vault_dir), "auto-sync", "off") == 0

        data = json.loads((vault_dir / ".cooksync" / "data.json").read_text())
        assert data["target_dir"] == "Kitchen/Recipes"
        assert data["auto_sync_on_start"] is False

    def test_corrupt_state_reports_error(self, vault_dir: Path) -> None:
        data_dir = vault_dir / ".cooksync"
        data_dir.mkdir()
        (data_dir / "data.json").write_text("{broken")

        assert run("--vault", str(vault_dir), "status") == 1

    def test_wrong_typed_state_reports_error(self, vault_dir: Path) -> None:
        data_dir = vault_dir / ".cooksync"
        data_dir.mkdir()
        (data_dir / "data.json").write_text(json.dumps({"imported_recipe_ids": 5}))

        assert run("--vault", str(vault_dir), "status") == 1

    def test_corrupt_local_storage_reports_error(self, vault_dir: Path) -> None:
        data_dir = vault_dir / ".cooksync"
        data_dir.mkdir()
        (data_dir / "data.json").write_text(json.dumps({"token": "tok"}))
        (data_dir / "local-storage.json").write_text("{broken")

        with patch("cooksync.core.client.requests.Session.request") as request:
            assert run("--vault", str(vault_dir), "sync") == 1

        request.assert_not_called()
        data = json.loads((data_dir / "data.json").read_text())
        assert data["is_syncing"] is False
        assert data["last_sync_failed"] is True

    def test_connect_with_corrupt_local_storage(self, vault_dir: Path) -> None:
        data_dir = vault_dir / ".cooksync"
        data_dir.mkdir()
        (data_dir / "local-storage.json").write_text("{broken")

        assert run("--vault", str(vault_dir), "connect") == 1

    def test_stuck_sync_flag_points_at_startup(self, vault_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        data_dir = vault_dir / ".cooksync"
        data_dir.mkdir()
        (data_dir / "data.json").write_text(json.dumps({"token": "tok", "is_syncing": True}))

        assert run("--vault", str(vault_dir), "sync") == 1
        assert "cooksync startup" in capsys.readouterr().out

        assert run("--vault", str(vault_dir), "status") == 0
        assert "cooksync startup" in capsys.readouterr().out
