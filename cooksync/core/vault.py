"""Vault: the local document store recipes are written into."""

import re
import unicodedata
from pathlib import Path


class VaultError(OSError):
    """A vault operation failed."""


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path.

    Uses forward slashes, collapses repeated separators, trims surrounding
    whitespace and slashes, and applies Unicode NFC.
    """
    path = path.replace("\u00a0", " ").replace("\u202f", " ")
    path = path.replace("\\", "/")
    path = re.sub(r"/+", "/", path)
    path = path.strip().strip("/")
    path = unicodedata.normalize("NFC", path)
    return path or "/"


class Vault:
    """Filesystem operations on a directory tree, addressed by vault paths."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def resolve(self, path: str) -> Path:
        """Map a vault path to a real path, refusing anything outside the root."""
        normalized = normalize_path(path)
        if normalized == "/":
            return self.root
        if "\x00" in normalized:
            raise VaultError(f"Path contains a NUL character: {path!r}")
        parts = normalized.split("/")
        if any(part in ("..", ".") for part in parts):
            raise VaultError(f"Path escapes the vault: {path}")
        return self.root.joinpath(*parts)

    def exists(self, path: str) -> bool:
        return self.resolve(path).exists()

    def create_folder(self, path: str) -> None:
        """Create a folder and any missing parents."""
        target = self.resolve(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise VaultError(f"Cannot create folder {path}: {e}") from e

    def create(self, path: str, content: str) -> str:
        """Create a new file. Never overwrites an existing one.

        Returns:
            The normalized vault path of the created file
        """
        target = self.resolve(path)
        created = False
        try:
            with open(target, "x", encoding="utf-8", newline="") as f:
                created = True
                f.write(content)
        except FileExistsError as e:
            raise VaultError(f"File already exists: {path}") from e
        except (OSError, ValueError) as e:
            # Never leave a half-written file behind
            if created:
                target.unlink(missing_ok=True)
            raise VaultError(f"Cannot write {path}: {e}") from e
        return normalize_path(path)
