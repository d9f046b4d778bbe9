"""Startup seeding of roles and the bootstrap administrator."""
from __future__ import annotations

import logging

from fastapi_users.password import PasswordHelper

from ..config import Settings
from ..infrastructure.database import AsyncSessionFactory
from ..infrastructure.repositories.user_repo import UserRepository
from .constants import ADMIN_ROLE_DESCRIPTION, ADMIN_ROLE_NAME, DEFAULT_ROLE_DESCRIPTION, DEFAULT_ROLE_NAME

LOGGER = logging.getLogger(__name__)

ROLE_DESCRIPTIONS = {
    DEFAULT_ROLE_NAME: DEFAULT_ROLE_DESCRIPTION,
    ADMIN_ROLE_NAME: ADMIN_ROLE_DESCRIPTION,
}


async def ensure_bootstrap_admin(session_factory: AsyncSessionFactory, settings: Settings) -> bool:
    """Create the roles and the configured admin account when missing.

    Returns ``True`` when a new admin was created.
    """

    async with session_factory() as session:  # type: ignore[call-arg]
        repo = UserRepository(session)
        roles = [await repo.ensure_role(name, description) for name, description in ROLE_DESCRIPTIONS.items()]

        email = settings.bootstrap.admin_email
        if await repo.get_by_email(email) is not None:
            return False

        await repo.create_user(
            email=email,
            hashed_password=PasswordHelper().hash(settings.bootstrap.admin_password),
            full_name=settings.bootstrap.admin_full_name,
            roles=roles,
            is_active=True,
            is_superuser=True,
            is_verified=True,
        )
    LOGGER.info("Bootstrap admin created | email=%s", email)
    return True


__all__ = ["ROLE_DESCRIPTIONS", "ensure_bootstrap_admin"]
