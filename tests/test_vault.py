"""Tests for the vault filesystem layer."""

import pytest

from cooksync.core.vault import Vault, VaultError, normalize_path


class TestNormalizePath:
    """Tests for vault path normalization."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Cooksync/Soup.md", "Cooksync/Soup.md"),
            ("Cooksync//Soup.md", "Cooksync/Soup.md"),
            ("/Cooksync/Soup.md/", "Cooksync/Soup.md"),
            ("Cooksync\\Dinner\\Soup.md", "Cooksync/Dinner/Soup.md"),
            ("  Cooksync/Soup.md ", "Cooksync/Soup.md"),
            ("Café.md", "Café.md"),
            ("", "/"),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_path(raw) == expected


class TestVault:
    """Tests for Vault operations."""

    def test_create_and_exists(self, vault: Vault) -> None:
        vault.create_folder("Cooksync")
        path = vault.create("Cooksync//Soup.md", "# Soup\n")

        assert path == "Cooksync/Soup.md"
        assert vault.exists("Cooksync/Soup.md")
        assert (vault.root / "Cooksync" / "Soup.md").read_text() == "# Soup\n"

    def test_create_never_overwrites(self, vault: Vault) -> None:
        vault.create("Soup.md", "original")

        with pytest.raises(VaultError, match="already exists"):
            vault.create("Soup.md", "replacement")

        assert (vault.root / "Soup.md").read_text() == "original"

    def test_create_folder_is_idempotent(self, vault: Vault) -> None:
        vault.create_folder("A/B")
        vault.create_folder("A/B")

        assert (vault.root / "A" / "B").is_dir()

    def test_create_in_missing_folder_fails(self, vault: Vault) -> None:
        with pytest.raises(VaultError):
            vault.create("Missing/Soup.md", "x")

    def test_content_written_verbatim(self, vault: Vault) -> None:
        content = "line one\r\nline two\n\n  indented"
        vault.create("Soup.md", content)

        assert (vault.root / "Soup.md").read_bytes() == content.encode("utf-8")

    def test_rejects_paths_outside_vault(self, vault: Vault) -> None:
        with pytest.raises(VaultError, match="escapes"):
            vault.create("../outside.md", "x")

    def test_rejects_nul_in_path(self, vault: Vault) -> None:
        with pytest.raises(VaultError, match="NUL"):
            vault.exists("Bad\x00Title.md")
        with pytest.raises(VaultError, match="NUL"):
            vault.create("Bad\x00Title.md", "x")

    def test_unencodable_content_leaves_no_file(self, vault: Vault) -> None:
        # A lone surrogate decodes fine from JSON but cannot be written as UTF-8
        with pytest.raises(VaultError, match="Cannot write"):
            vault.create("Soup.md", "x\ud800y")

        assert not (vault.root / "Soup.md").exists()
        vault.create("Soup.md", "fine")
        assert (vault.root / "Soup.md").read_text() == "fine"
