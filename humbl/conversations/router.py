"""Conversation endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from ..auth.dependencies import get_current_user
from ..infrastructure.database import User
from .dependencies import get_conversation_service
from .schemas import (
    BranchRequest,
    BranchResponse,
    ConversationCreate,
    ConversationDetail,
    ConversationResponse,
    ConversationUpdate,
    MessageCreate,
    MessageResponse,
)
from .service import ConversationService

router = APIRouter()


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> list[ConversationResponse]:
    conversations = await service.list_conversations(user.id)
    return [ConversationResponse.model_validate(conversation) for conversation in conversations]


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    payload: ConversationCreate,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    conversation = await service.create_conversation(user.id, payload.title)
    return ConversationResponse.model_validate(conversation)


@router.get("/archived", response_model=list[ConversationResponse])
async def list_archived(
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> list[ConversationResponse]:
    conversations = await service.list_conversations(user.id, archived=True)
    return [ConversationResponse.model_validate(conversation) for conversation in conversations]


@router.post("/branch", response_model=BranchResponse)
async def branch_conversation(
    payload: BranchRequest,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> BranchResponse:
    return await service.branch(user.id, payload)


@router.get("/{conversation_id}", response_model=ConversationDetail)
async def get_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationDetail:
    return await service.get_detail(conversation_id, user.id)


@router.get("/{conversation_id}/public", response_model=ConversationDetail)
async def get_public_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationDetail:
    return await service.get_public(conversation_id)


@router.patch("/{conversation_id}", response_model=ConversationResponse)
async def update_conversation(
    conversation_id: str,
    payload: ConversationUpdate,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    conversation = await service.update_conversation(conversation_id, user.id, payload)
    return ConversationResponse.model_validate(conversation)


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> Response:
    await service.delete_conversation(conversation_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{conversation_id}/archive", response_model=ConversationResponse)
async def archive_conversation(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> ConversationResponse:
    conversation = await service.archive(conversation_id, user.id)
    return ConversationResponse.model_validate(conversation)


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> list[MessageResponse]:
    messages = await service.list_messages(conversation_id, user.id)
    return [MessageResponse.model_validate(message) for message in messages]


@router.post(
    "/{conversation_id}/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def add_message(
    conversation_id: str,
    payload: MessageCreate,
    user: User = Depends(get_current_user),
    service: ConversationService = Depends(get_conversation_service),
) -> MessageResponse:
    message = await service.add_message(conversation_id, user.id, payload)
    return MessageResponse.model_validate(message)


__all__ = ["router"]
