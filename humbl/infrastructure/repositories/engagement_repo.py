"""Votes, feedback and report persistence."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import Feedback, MessageVote, Report
from .base import AsyncRepository


class VoteRepository(AsyncRepository[MessageVote]):
    """Store one vote per user and message."""

    model = MessageVote

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_user_vote(self, user_id: str, message_id: str) -> Optional[MessageVote]:
        stmt = select(MessageVote).where(MessageVote.user_id == user_id, MessageVote.message_id == message_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert_vote(self, *, user_id: str, conversation_id: str, message_id: str, vote: int) -> MessageVote:
        existing = await self.get_user_vote(user_id, message_id)
        if existing is None:
            existing = MessageVote(
                user_id=user_id,
                conversation_id=conversation_id,
                message_id=message_id,
                vote=vote,
            )
        else:
            existing.vote = vote
        return await self.save(existing)

    async def count_votes(self, message_id: str) -> dict[str, int]:
        stmt = (
            select(MessageVote.vote, func.count(MessageVote.id))
            .where(MessageVote.message_id == message_id)
            .group_by(MessageVote.vote)
        )
        result = await self.session.execute(stmt)
        counts = {"up": 0, "down": 0}
        for value, total in result.all():
            counts["up" if value > 0 else "down"] += int(total)
        return counts


class FeedbackRepository(AsyncRepository[Feedback]):
    """Persist product feedback."""

    model = Feedback

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create_feedback(self, content: str, user_id: str | None) -> Feedback:
        return await self.save(Feedback(content=content, user_id=user_id))

    async def list_recent(self, *, status: str | None = None) -> list[Feedback]:
        stmt = select(Feedback).order_by(Feedback.created_at.desc())
        if status:
            stmt = stmt.where(Feedback.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars())


class ReportRepository(AsyncRepository[Report]):
    """Persist conversation reports."""

    model = Report

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def create_report(
        self,
        *,
        user_id: str,
        conversation_id: str,
        category: str,
        sub_category: str | None = None,
        details: str | None = None,
    ) -> Report:
        report = Report(
            user_id=user_id,
            conversation_id=conversation_id,
            category=category,
            sub_category=sub_category,
            details=details,
        )
        return await self.save(report)

    async def list_recent(self, *, status: str | None = None) -> list[Report]:
        stmt = select(Report).order_by(Report.created_at.desc())
        if status:
            stmt = stmt.where(Report.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars())


__all__ = ["VoteRepository", "FeedbackRepository", "ReportRepository"]
