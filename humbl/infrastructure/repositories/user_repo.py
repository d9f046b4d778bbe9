"""User and role persistence."""
from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select

from ..database import Role, User, UserRole
from .base import AsyncRepository


class UserRepository(AsyncRepository[User]):
    """Users, their roles and account status."""

    model = User

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_by_email(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.email))
        return list(result.scalars())

    async def create_user(
        self,
        *,
        email: str,
        hashed_password: str,
        full_name: str | None = None,
        roles: Sequence[Role] = (),
        is_active: bool = True,
        is_superuser: bool = False,
        is_verified: bool = False,
    ) -> User:
        user = User(
            email=email,
            hashed_password=hashed_password,
            full_name=full_name,
            is_active=is_active,
            is_superuser=is_superuser,
            is_verified=is_verified,
        )
        await self.add(user)
        await self._link_roles(user, roles)
        await self.commit()
        await self.session.refresh(user)
        return user

    async def _link_roles(self, user: User, roles: Sequence[Role]) -> None:
        held = await self.session.execute(select(UserRole.role_id).where(UserRole.user_id == user.id))
        held_ids = set(held.scalars())
        for role in roles:
            if role.id not in held_ids:
                self.session.add(UserRole(user_id=user.id, role_id=role.id))
                held_ids.add(role.id)
        await self.session.flush()

    async def assign_role(self, user: User, role: Role) -> None:
        await self._link_roles(user, [role])
        await self.commit()

    async def set_active(self, user: User, is_active: bool) -> User:
        user.is_active = is_active
        return await self.save(user)

    async def get_role_by_name(self, name: str) -> Optional[Role]:
        result = await self.session.execute(select(Role).where(Role.name == name))
        return result.scalar_one_or_none()

    async def ensure_role(self, name: str, description: str | None = None) -> Role:
        """Return the named role, creating it or refreshing its description."""

        role = await self.get_role_by_name(name)
        if role is None:
            role = Role(name=name, description=description)
            self.session.add(role)
            await self.session.flush()
        elif description is not None and role.description != description:
            role.description = description
            await self.session.flush()
        await self.commit()
        await self.session.refresh(role)
        return role


__all__ = ["UserRepository"]
