"""Git repository browsing: commit models, filtered views, tags and settings."""

__version__ = "0.1.0"

__all__ = [
    "config",
    "models",
    "repository",
    "tag_rules",
    "tag_types",
    "tags",
    "views",
]