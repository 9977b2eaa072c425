"""One-way sync of Cooksync recipes into a Markdown vault."""

__version__ = "0.1.0"
