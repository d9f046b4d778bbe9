"""User manager integration for fastapi-users."""
from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any, Optional, Union

from fastapi import Depends, Request, Response
from fastapi_users import BaseUserManager, exceptions, schemas
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase

from ..config import Settings
from ..dependencies import get_db_session, get_settings
from ..infrastructure.database import User
from ..infrastructure.repositories.user_repo import UserRepository
from .constants import DEFAULT_ROLE_DESCRIPTION, DEFAULT_ROLE_NAME

LOGGER = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserManager(BaseUserManager[User, str]):
    """Registers users with the default role and enforces the password policy."""

    user_db_model = User

    def __init__(self, user_db: SQLAlchemyUserDatabase[User, str], settings: Settings) -> None:
        super().__init__(user_db)
        self._settings = settings

    @property
    def reset_password_token_secret(self) -> str:
        return self._settings.fastapi.secret_key

    @property
    def verification_token_secret(self) -> str:
        return self._settings.fastapi.secret_key

    def parse_id(self, value: Any) -> str:
        if value is None or not str(value):
            raise exceptions.InvalidID()
        return str(value)

    async def validate_password(self, password: str, user: Union[schemas.UC, User]) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise exceptions.InvalidPasswordException(
                reason=f"Password should be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if user.email and user.email.lower() in password.lower():
            raise exceptions.InvalidPasswordException(reason="Password should not contain e-mail")

    async def on_after_register(self, user: User, request: Optional[Request] = None) -> None:  # noqa: ARG002
        repo = UserRepository(self.user_db.session)
        role = await repo.ensure_role(DEFAULT_ROLE_NAME, DEFAULT_ROLE_DESCRIPTION)
        await repo.assign_role(user, role)
        await self.user_db.session.refresh(user)
        LOGGER.info("User registered | user=%s", user.id)

    async def on_after_login(
        self,
        user: User,
        request: Optional[Request] = None,  # noqa: ARG002
        response: Optional[Response] = None,  # noqa: ARG002
    ) -> None:
        LOGGER.info("User logged in | user=%s", user.id)


async def get_user_db(session=Depends(get_db_session)) -> AsyncGenerator[SQLAlchemyUserDatabase[User, str], None]:
    yield SQLAlchemyUserDatabase(session, User)


async def get_user_manager(
    user_db: SQLAlchemyUserDatabase[User, str] = Depends(get_user_db),
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[UserManager, None]:
    yield UserManager(user_db, settings)


__all__ = ["MIN_PASSWORD_LENGTH", "UserManager", "get_user_manager", "get_user_db"]
