"""Configuration for the Cooksync client."""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://go.cooksync.app"
DEFAULT_TARGET_DIR = "Cooksync"
DEFAULT_DATA_DIRNAME = ".cooksync"

# Characters that are not allowed in recipe file names
ILLEGAL_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def sanitize_title(title: str) -> str:
    """Turn a recipe title into a file name stem.

    Strips characters that are illegal in file names and collapses the
    whitespace they leave behind, e.g. "Pan/Fried: Eggs" -> "Pan Fried Eggs".
    """
    sanitized = ILLEGAL_FILENAME_CHARS.sub(" ", title)
    sanitized = re.sub(r"\s+", " ", sanitized).strip()
    return sanitized or "Untitled"


@dataclass
class CooksyncConfig:
    """Main configuration for the sync client.

    Values come from an optional YAML file; environment variables (or a
    .env file) override them.
    """

    vault_path: str = "."
    data_dir: str | None = None
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 30
    log_level: str = "INFO"
    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @property
    def vault_dir(self) -> Path:
        return Path(self.vault_path).expanduser()

    @property
    def data_path(self) -> Path:
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return self.vault_dir / DEFAULT_DATA_DIRNAME

    @property
    def state_file(self) -> Path:
        return self.data_path / "data.json"

    @property
    def local_storage_file(self) -> Path:
        return self.data_path / "local-storage.json"

    @property
    def log_file(self) -> Path:
        return self.data_path / "cooksync.log"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CooksyncConfig":
        """Create from dictionary."""
        known = {"vault_path", "data_dir", "base_url", "request_timeout", "log_level"}
        return cls(
            vault_path=str(data.get("vault_path", ".")),
            data_dir=data.get("data_dir"),
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            request_timeout=float(data.get("request_timeout", 30)),
            log_level=str(data.get("log_level", "INFO")).upper(),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> "CooksyncConfig":
        """Load configuration from a YAML file and the environment.

        A missing config file is not an error; defaults are used instead.
        """
        load_dotenv()

        data: dict[str, Any] = {}
        if config_path is not None and Path(config_path).exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

        # Environment wins over the file
        env_overrides = {
            "vault_path": os.getenv("COOKSYNC_VAULT"),
            "data_dir": os.getenv("COOKSYNC_DATA_DIR"),
            "base_url": os.getenv("COOKSYNC_BASE_URL"),
            "log_level": os.getenv("COOKSYNC_LOG_LEVEL"),
        }
        for key, value in env_overrides.items():
            if value:
                data[key] = value

        return cls.from_dict(data)

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        data: dict[str, Any] = {
            "vault_path": self.vault_path,
            "base_url": self.base_url,
            "request_timeout": self.request_timeout,
            "log_level": self.log_level,
        }
        if self.data_dir:
            data["data_dir"] = self.data_dir
        data.update(self.extra)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
