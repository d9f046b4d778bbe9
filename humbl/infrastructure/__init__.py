"""Infrastructure package exports."""

from . import database, providers, repositories

__all__ = ["database", "providers", "repositories"]
