"""Base repository helpers."""
from __future__ import annotations

from typing import Generic, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...exceptions import RepositoryError
from ..database import Base

ModelT = TypeVar("ModelT", bound=Base)


class AsyncRepository(Generic[ModelT]):
    """Shared repository base class."""

    model: type[ModelT]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, entity: ModelT) -> ModelT:
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def save(self, entity: ModelT) -> ModelT:
        """Persist pending changes for ``entity`` and reload server defaults."""

        try:
            self.session.add(entity)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise RepositoryError(f"Failed to persist {self.model.__name__}", cause=exc) from exc
        await self.session.refresh(entity)
        return entity

    async def get(self, entity_id: str) -> Optional[ModelT]:
        stmt = select(self.model).where(getattr(self.model, "id") == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_owned(self, entity_id: str, user_id: str) -> Optional[ModelT]:
        """Return the entity only when it belongs to ``user_id``."""

        stmt = select(self.model).where(
            getattr(self.model, "id") == entity_id,
            getattr(self.model, "user_id") == user_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)

    async def commit(self) -> None:
        await self.session.commit()
