"""Engagement service handling votes, feedback and reports."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..infrastructure.database import Feedback, Report
from ..infrastructure.repositories.conversation_repo import ConversationRepository
from ..infrastructure.repositories.engagement_repo import FeedbackRepository, ReportRepository, VoteRepository
from .schemas import (
    FEEDBACK_MAX_CHARS,
    FEEDBACK_MIN_CHARS,
    FeedbackCreate,
    ReportCreate,
    VoteCounts,
    VoteRequest,
    VoteResponse,
)

LOGGER = logging.getLogger(__name__)


class EngagementService:
    """Record user reactions to conversations."""

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        vote_repo: VoteRepository,
        feedback_repo: FeedbackRepository,
        report_repo: ReportRepository,
    ) -> None:
        self.conversation_repo = conversation_repo
        self.vote_repo = vote_repo
        self.feedback_repo = feedback_repo
        self.report_repo = report_repo

    async def cast_vote(self, user_id: str, payload: VoteRequest) -> VoteResponse:
        """Upsert the user's vote on the message at ``message_index``.

        Any existing conversation can be voted on, so readers of a public share
        can rate answers they do not own.
        """

        conversation = await self.conversation_repo.get(payload.conversation_id)
        if conversation is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
        messages = await self.conversation_repo.list_messages(conversation.id)
        if payload.message_index < 0 or payload.message_index >= len(messages):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid message index")
        message = messages[payload.message_index]
        saved = await self.vote_repo.upsert_vote(
            user_id=user_id,
            conversation_id=conversation.id,
            message_id=message.id,
            vote=1 if payload.vote == "up" else -1,
        )
        counts = await self.vote_repo.count_votes(message.id)
        LOGGER.info("Vote recorded | message=%s user=%s vote=%d", message.id, user_id, saved.vote)
        return VoteResponse(vote=saved.vote, counts=VoteCounts(**counts), message_id=message.id)

    async def submit_feedback(self, user_id: str | None, payload: FeedbackCreate) -> Feedback:
        content = payload.content.strip()
        if not content:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Feedback content is required")
        if len(content) < FEEDBACK_MIN_CHARS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Feedback must be at least {FEEDBACK_MIN_CHARS} characters long",
            )
        if len(content) > FEEDBACK_MAX_CHARS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Feedback must be no more than {FEEDBACK_MAX_CHARS} characters long",
            )
        feedback = await self.feedback_repo.create_feedback(content, user_id)
        LOGGER.info("Feedback submitted | feedback=%s anonymous=%s", feedback.id, user_id is None)
        return feedback

    async def file_report(self, user_id: str, payload: ReportCreate) -> Report:
        if not payload.conversation_id or not payload.category.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Conversation ID and category are required"
            )
        if await self.conversation_repo.get(payload.conversation_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")
        report = await self.report_repo.create_report(
            user_id=user_id,
            conversation_id=payload.conversation_id,
            category=payload.category.strip(),
            sub_category=payload.sub_category or None,
            details=payload.details or None,
        )
        LOGGER.info("Report filed | report=%s conversation=%s", report.id, payload.conversation_id)
        return report


__all__ = ["EngagementService"]
