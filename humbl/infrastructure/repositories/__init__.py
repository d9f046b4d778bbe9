"""Repository package exports."""

from .base import AsyncRepository
from .conversation_repo import ConversationRepository
from .engagement_repo import FeedbackRepository, ReportRepository, VoteRepository
from .folder_repo import FolderRepository
from .share_repo import ShareRepository
from .user_repo import UserRepository

__all__ = [
    "AsyncRepository",
    "ConversationRepository",
    "FeedbackRepository",
    "FolderRepository",
    "ReportRepository",
    "ShareRepository",
    "UserRepository",
    "VoteRepository",
]
