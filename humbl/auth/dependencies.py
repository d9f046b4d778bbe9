"""Authentication dependencies."""
from __future__ import annotations

import inspect
import logging
from functools import update_wrapper
from typing import Any, Awaitable, Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi_users import FastAPIUsers
from fastapi_users.authentication import AuthenticationBackend

from ..config import Settings
from ..dependencies import get_settings
from ..infrastructure.database import User
from .auth_backend import get_auth_backend
from .constants import ADMIN_ROLE_NAME
from .user_manager import get_user_manager

LOGGER = logging.getLogger(__name__)


class _ConfigurableDependency:
    """Dependency placeholder bound to a fastapi-users callable once auth is configured."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._dependency: Optional[Callable[..., Awaitable[Any]]] = None

    def configure(self, dependency: Callable[..., Awaitable[Any]]) -> None:
        self._dependency = dependency
        update_wrapper(self, dependency)
        self.__signature__ = inspect.signature(dependency)

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        if self._dependency is None:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Authentication dependency '{self._name}' is not configured.",
            )
        return await self._dependency(*args, **kwargs)


_auth_backend: AuthenticationBackend | None = None
current_active_user = _ConfigurableDependency("current_active_user")
current_optional_user = _ConfigurableDependency("current_optional_user")


def configure_auth(settings: Settings) -> FastAPIUsers[User, str]:
    """Build the fastapi-users integration and bind the user dependencies to it."""

    global _auth_backend
    backend = get_auth_backend(settings)
    users = FastAPIUsers[User, str](get_user_manager, [backend])
    current_active_user.configure(users.current_user(active=True))
    current_optional_user.configure(users.current_user(active=True, optional=True))
    _auth_backend = backend
    return users


def get_auth_backend_instance() -> AuthenticationBackend:
    if _auth_backend is None:
        configure_auth(get_settings())
    assert _auth_backend is not None
    return _auth_backend


async def get_current_user(user: User = Depends(current_active_user)) -> User:
    return user


async def get_optional_user(user: Optional[User] = Depends(current_optional_user)) -> Optional[User]:
    """Return the authenticated user, or ``None`` for anonymous requests."""

    return user


def require_roles(*allowed_roles: str) -> Callable[[User], Awaitable[User]]:
    """Admit only users holding at least one of ``allowed_roles``."""

    required = frozenset(allowed_roles)

    async def dependency(user: User = Depends(current_active_user)) -> User:
        if required and required.isdisjoint(role.name for role in user.roles):
            LOGGER.warning("Access denied | user=%s required=%s", user.id, ",".join(sorted(required)))
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return dependency


def admin_required() -> Callable[[User], Awaitable[User]]:
    return require_roles(ADMIN_ROLE_NAME)


# Bind the placeholders at import so routers can declare them before the app exists.
configure_auth(get_settings())


__all__ = [
    "admin_required",
    "configure_auth",
    "current_active_user",
    "current_optional_user",
    "get_auth_backend_instance",
    "get_current_user",
    "get_optional_user",
    "require_roles",
]
