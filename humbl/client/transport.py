"""HTTP access to the chat API used by the streaming controller."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx

from ..exceptions import PlatformError

LOGGER = logging.getLogger(__name__)


class TransportError(PlatformError):
    """Network failure or non-2xx response from the chat API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(payload, dict):
        detail = payload.get("detail") or payload.get("error") or payload.get("message")
        if detail:
            return str(detail)
    return response.reason_phrase


def _json_object(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError as exc:
        raise TransportError("Unexpected response format", status_code=response.status_code) from exc
    if not isinstance(data, dict):
        raise TransportError("Unexpected response format", status_code=response.status_code)
    return data


class ChatTransport(ABC):
    """Requests issued by the controller; implementations raise :class:`TransportError`."""

    @abstractmethod
    def stream_search(self, payload: dict[str, Any]) -> AsyncIterator[bytes]:
        """Yield raw bytes of the ``text/event-stream`` search response."""

    @abstractmethod
    async def generate_image(self, prompt: str) -> dict[str, Any]:
        """Return the JSON body of an image generation response."""

    @abstractmethod
    async def edit_image(self, instruction: str, reference_image: str) -> dict[str, Any]:
        """Return the JSON body of an image edit response."""

    @abstractmethod
    async def remix_image(self, prompt: str, reference_images: Sequence[str]) -> dict[str, Any]:
        """Return the JSON body of an image remix response."""

    @abstractmethod
    async def add_message(self, conversation_id: str, message: dict[str, Any]) -> dict[str, Any]:
        """Append a message to a persisted conversation."""


class HttpChatTransport(ChatTransport):
    """:class:`ChatTransport` over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str,
        *,
        access_token: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self._timeout = timeout
        self._transport = transport

    def _client(self, *, read_timeout: float | None = None) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self._timeout, read=read_timeout)
        headers = {"Authorization": f"Bearer {self.access_token}"} if self.access_token else None
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, headers=headers, transport=self._transport
        )

    async def login(self, email: str, password: str) -> str:
        async with self._client(read_timeout=self._timeout) as client:
            try:
                response = await client.post("/auth/jwt/login", data={"username": email, "password": password})
            except httpx.HTTPError as exc:
                raise TransportError(str(exc)) from exc
        if response.is_error:
            raise TransportError(_error_detail(response), status_code=response.status_code)
        self.access_token = str(_json_object(response).get("access_token") or "")
        if not self.access_token:
            raise TransportError("Login response did not include an access token")
        return self.access_token

    async def create_conversation(self, title: str | None = None) -> dict[str, Any]:
        return await self._post_json("/api/conversations", {"title": title})

    async def stream_search(self, payload: dict[str, Any]) -> AsyncIterator[bytes]:
        try:
            async with self._client() as client:
                async with client.stream("POST", "/api/search", json=payload) as response:
                    if response.is_error:
                        await response.aread()
                        raise TransportError(_error_detail(response), status_code=response.status_code)
                    async for chunk in response.aiter_bytes():
                        yield chunk
        except httpx.HTTPError as exc:
            raise TransportError(str(exc)) from exc

    async def generate_image(self, prompt: str) -> dict[str, Any]:
        return await self._post_json("/api/generate-image", {"prompt": prompt})

    async def edit_image(self, instruction: str, reference_image: str) -> dict[str, Any]:
        return await self._post_json(
            "/api/edit-image", {"edit_instruction": instruction, "reference_image": reference_image}
        )

    async def remix_image(self, prompt: str, reference_images: Sequence[str]) -> dict[str, Any]:
        return await self._post_json(
            "/api/remix-image", {"prompt": prompt, "reference_images": list(reference_images)}
        )

    async def add_message(self, conversation_id: str, message: dict[str, Any]) -> dict[str, Any]:
        return await self._post_json(f"/api/conversations/{conversation_id}/messages", message)

    async def _post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with self._client(read_timeout=self._timeout) as client:
                response = await client.post(path, json=payload)
        except httpx.HTTPError as exc:
            raise TransportError(str(exc)) from exc
        if response.is_error:
            LOGGER.warning("Chat API request failed | path=%s status=%d", path, response.status_code)
            raise TransportError(_error_detail(response), status_code=response.status_code)
        return _json_object(response)


__all__ = ["ChatTransport", "HttpChatTransport", "TransportError"]
