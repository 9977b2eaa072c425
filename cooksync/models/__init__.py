"""Data models for the Cooksync client."""

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TARGET_DIR,
    CooksyncConfig,
    sanitize_title,
)
from .recipe import ExportManifest, MalformedRecipeError, RecipeRecord

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_TARGET_DIR",
    "CooksyncConfig",
    "ExportManifest",
    "MalformedRecipeError",
    "RecipeRecord",
    "sanitize_title",
]
