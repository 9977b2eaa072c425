"""Recipe records returned by the export endpoint."""

from dataclasses import dataclass, field
from typing import Any

from loguru import logger


class MalformedRecipeError(ValueError):
    """Raised when a manifest entry does not have the expected shape."""


@dataclass(frozen=True)
class RecipeRecord:
    """A single recipe as delivered by the service."""

    id: int
    title: str
    content: str

    @classmethod
    def from_dict(cls, data: Any) -> "RecipeRecord":
        """Create from a wire entry, rejecting anything malformed."""
        if not isinstance(data, dict):
            raise MalformedRecipeError(f"Expected an object, got {type(data).__name__}")

        recipe_id = data.get("id")
        # bool is an int subclass, but never a valid id
        if not isinstance(recipe_id, int) or isinstance(recipe_id, bool):
            raise MalformedRecipeError(f"Invalid recipe id: {recipe_id!r}")

        title = data.get("title")
        if not isinstance(title, str):
            raise MalformedRecipeError(f"Recipe {recipe_id} has no title")

        content = data.get("content")
        if not isinstance(content, str):
            raise MalformedRecipeError(f"Recipe {recipe_id} has no content")

        return cls(id=recipe_id, title=title, content=content)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"id": self.id, "title": self.title, "content": self.content}


@dataclass
class ExportManifest:
    """Ordered batch of recipes from one export request."""

    recipes: list[RecipeRecord] = field(default_factory=list)
    latest_id: int | None = None
    status: str | None = None
    rejected: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.recipes)

    @classmethod
    def from_payload(cls, payload: Any) -> "ExportManifest":
        """Build a manifest from the decoded response body.

        The service either answers with a top-level array of records or with
        an object carrying ``latest_id``/``status`` and the records under
        ``recipes`` (older deployments used ``data``).
        """
        latest_id = None
        status = None

        if isinstance(payload, list):
            entries = payload
        elif isinstance(payload, dict):
            latest_id = payload.get("latest_id")
            status = payload.get("status")
            entries = payload.get("recipes", payload.get("data")) or []
            if not isinstance(entries, list):
                raise MalformedRecipeError("Export payload records are not a list")
        else:
            raise MalformedRecipeError(f"Unexpected export payload: {type(payload).__name__}")

        manifest = cls(latest_id=latest_id, status=status)
        for entry in entries:
            try:
                manifest.recipes.append(RecipeRecord.from_dict(entry))
            except MalformedRecipeError as e:
                logger.warning(f"Skipping malformed manifest entry: {e}")
                manifest.rejected.append(entry)

        return manifest
