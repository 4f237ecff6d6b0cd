"""Push gateway turning monitoring records into versioned Markdown reports."""

__version__ = "0.1.0"
