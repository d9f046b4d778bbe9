"""Chat endpoints: streaming search, titles, suggestions and daily prompts."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from .dependencies import get_chat_service, get_suggestion_client
from .prompts import daily_prompts
from .schemas import (
    DailyPromptsResponse,
    GenerateTitleRequest,
    SearchRequest,
    SuggestionsResponse,
    TitleResponse,
)
from .service import ChatService
from .suggestions import SuggestionClient

router = APIRouter()


@router.post("/search", response_class=StreamingResponse)
async def search(payload: SearchRequest, service: ChatService = Depends(get_chat_service)) -> StreamingResponse:
    stream = await service.stream_search(payload)
    response = StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )
    response.enable_compression = False
    return response


@router.post("/conversations/generate-title", response_model=TitleResponse)
async def generate_title(
    payload: GenerateTitleRequest, service: ChatService = Depends(get_chat_service)
) -> TitleResponse:
    return TitleResponse(title=await service.generate_title(payload))


@router.get("/suggest", response_model=SuggestionsResponse)
async def suggest(
    q: str = Query(default=""),
    client: SuggestionClient = Depends(get_suggestion_client),
) -> SuggestionsResponse:
    return SuggestionsResponse(suggestions=await client.suggest(q))


@router.get("/daily-prompts", response_model=DailyPromptsResponse)
async def get_daily_prompts() -> DailyPromptsResponse:
    return DailyPromptsResponse(prompts=daily_prompts())


__all__ = ["router"]
