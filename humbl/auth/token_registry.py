"""In-memory registry holding the single valid access token of each user."""
from __future__ import annotations

from asyncio import Lock
from typing import Dict

_registry: Dict[str, str] = {}
_lock = Lock()


async def register(user_id: str, token: str) -> None:
    """Store the latest token; earlier tokens of the user stop validating."""

    async with _lock:
        _registry[user_id] = token


async def validate(user_id: str, token: str) -> bool:
    async with _lock:
        current = _registry.get(user_id)
    return current is not None and current == token


async def revoke(user_id: str) -> None:
    """Forget the user's token, logging them out."""

    async with _lock:
        _registry.pop(user_id, None)


def clear() -> None:
    _registry.clear()


__all__ = ["register", "validate", "revoke", "clear"]
