"""Streaming conversation controller: one request/response cycle at a time."""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from contextlib import aclosing, suppress
from dataclasses import dataclass
from functools import partial
from enum import Enum
from time import perf_counter
from typing import Any, Literal, Optional, TypeVar

from ..chat.stream import StreamEvent
from .progress import ProgressTicker
from .retry import RetryFlavor, resolve_retry_inputs, transform_query
from .session import Citation, ConversationMessage, ConversationSession
from .sse import FrameDecoder
from .transport import ChatTransport, TransportError

LOGGER = logging.getLogger(__name__)

SEARCH_FAILED_MESSAGE = "Failed to search. Please try again."
FALLBACK_REPLY = "Sorry, I encountered an error. Please try again."
IMAGE_FAILED_MESSAGE = "Failed to generate image"
IMAGE_GENERATED = "Image generated successfully!"
IMAGE_EDITED = "Image edited successfully!"
IMAGE_REMIXED = "Image remixed successfully!"

ImageTransformKind = Literal["edit", "remix"]
T = TypeVar("T")


class SendStatus(str, Enum):
    completed = "completed"
    cancelled = "cancelled"
    failed = "failed"
    ignored = "ignored"


@dataclass(slots=True)
class SendResult:
    status: SendStatus
    message: Optional[ConversationMessage] = None
    error: Optional[str] = None


@dataclass(slots=True)
class _StreamState:
    buffer: str = ""
    citations: Optional[list[Citation]] = None
    message: Optional[ConversationMessage] = None
    finished: bool = False
    error: Optional[str] = None


Listener = Callable[["StreamingConversationController"], None]


class StreamingConversationController:
    """Drive the search stream and keep a :class:`ConversationSession` in step with it.

    At most one request is active; ``send``, ``retry`` and ``transform_image``
    return ``ignored`` while another one runs. ``cancel`` stops the active
    request cooperatively: streamed text keeps whatever arrived so far, image
    placeholders are removed.
    """

    def __init__(
        self,
        transport: ChatTransport,
        session: ConversationSession | None = None,
        *,
        progress_interval: float = 0.5,
        listener: Listener | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.transport = transport
        self.session = session if session is not None else ConversationSession()
        self.progress_interval = progress_interval
        self.listener = listener
        self._rng = rng
        self._cancel = asyncio.Event()
        self.streaming = False
        self.streaming_text = ""
        self.progress: Optional[float] = None
        self.error: Optional[str] = None

    def cancel(self) -> None:
        if self.streaming:
            LOGGER.info("Cancellation requested")
            self._cancel.set()

    async def send(
        self,
        query: str,
        images: Sequence[str] | None = None,
        mode: str = "default",
        *,
        retry_of: ConversationMessage | None = None,
    ) -> SendResult:
        """Submit a turn, or regenerate ``retry_of`` when given."""

        query = query.strip()
        images = list(images or [])[: self.session.max_user_images]
        if self.streaming:
            LOGGER.info("Send ignored while a request is active")
            return SendResult(SendStatus.ignored)
        if not query and not images:
            return SendResult(SendStatus.ignored)

        self._begin()
        try:
            if mode == "image":
                if retry_of is None:
                    self.session.add_user_message(query, images)
                return await self._run_image(
                    partial(self.transport.generate_image, query), query=query, success_text=IMAGE_GENERATED
                )
            history = self._history(exclude=retry_of)
            if retry_of is None:
                self.session.add_user_message(query, images)
            return await self._run_stream(query, images, mode, history, retry_of)
        finally:
            self._end()

    async def retry(
        self,
        index: int,
        flavor: RetryFlavor | str = RetryFlavor.try_again,
        custom_prompt: str | None = None,
    ) -> SendResult:
        if self.streaming:
            LOGGER.info("Retry ignored while a request is active")
            return SendResult(SendStatus.ignored)
        inputs = resolve_retry_inputs(self.session, index, custom_prompt)
        if inputs is None:
            LOGGER.info("Retry skipped, nothing to resubmit | index=%d", index)
            return SendResult(SendStatus.ignored)
        query, mode = transform_query(RetryFlavor(flavor), inputs.query, inputs.mode, custom_prompt)
        LOGGER.info("Retry started | index=%d flavor=%s mode=%s", index, RetryFlavor(flavor).value, mode)
        return await self.send(query, inputs.images, mode, retry_of=self.session[index])

    async def transform_image(
        self, instruction: str, images: Sequence[str], kind: ImageTransformKind = "edit"
    ) -> SendResult:
        """Edit one image, or remix several, following ``instruction``."""

        instruction = instruction.strip()
        references = list(images)
        if self.streaming or not instruction or not references:
            return SendResult(SendStatus.ignored)

        self._begin()
        try:
            if kind == "edit":
                label, success_text = "Edit image", IMAGE_EDITED
                request = partial(self.transport.edit_image, instruction, references[0])
            else:
                label, success_text = "Remix image", IMAGE_REMIXED
                request = partial(self.transport.remix_image, instruction, references)
            self.session.add_user_message(f"{label}: {instruction}", references)
            return await self._run_image(request, query=instruction, success_text=success_text)
        finally:
            self._end()

    def _begin(self) -> None:
        self.streaming = True
        self.streaming_text = ""
        self.error = None
        self._cancel.clear()
        self._notify()

    def _end(self) -> None:
        self.streaming = False
        self.streaming_text = ""
        self.progress = None
        self._cancel.clear()
        self._notify()

    def _notify(self) -> None:
        if self.listener is not None:
            self.listener(self)

    def _history(self, *, exclude: ConversationMessage | None) -> list[dict[str, str]]:
        return [
            {"role": message.role, "content": message.content}
            for message in self.session.snapshot()
            if message is not exclude and message.content.strip()
        ]

    async def _run_cancellable(self, awaitable: Awaitable[T]) -> tuple[bool, Optional[T]]:
        """Await ``awaitable`` unless ``cancel`` fires first; returns ``(finished, result)``."""

        task = asyncio.ensure_future(awaitable)
        stop = asyncio.ensure_future(self._cancel.wait())
        try:
            await asyncio.wait({task, stop}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop.cancel()
            if not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task
        if task.cancelled():
            return False, None
        return True, task.result()

    async def _run_stream(
        self,
        query: str,
        images: list[str],
        mode: str,
        history: list[dict[str, str]],
        retry_of: ConversationMessage | None,
    ) -> SendResult:
        payload = {"query": query, "images": images, "mode": mode, "conversation_history": history}
        recorded_mode = "default" if mode == "auto" else mode
        state = _StreamState()
        start_time = perf_counter()

        try:
            await self._run_cancellable(self._consume(payload, state, fresh=retry_of is None))
        except TransportError as exc:
            LOGGER.warning("Search stream failed | status=%s error=%s", exc.status_code, exc)
            self.error = SEARCH_FAILED_MESSAGE
            if state.buffer:
                message = self._finalize(state, query, images, recorded_mode, retry_of)
            elif retry_of is None:
                message = self.session.add_assistant_message(FALLBACK_REPLY)
            else:
                message = None
            return SendResult(SendStatus.failed, message, self.error)

        if state.error:
            LOGGER.warning("Search stream reported an error | error=%s", state.error)
            self.error = state.error
            if state.message is not None:
                self.session.remove(state.message)
            return SendResult(SendStatus.failed, error=state.error)

        cancelled = self._cancel.is_set() and not state.finished
        message = self._finalize(state, query, images, recorded_mode, retry_of)
        LOGGER.info(
            "Search stream %s | chars=%d retry=%s duration=%.2fs",
            "cancelled" if cancelled else "completed",
            len(state.buffer),
            retry_of is not None,
            perf_counter() - start_time,
        )
        if cancelled:
            return SendResult(SendStatus.cancelled, message)
        if retry_of is None and message is not None:
            await self._persist(query, images, recorded_mode, message)
        return SendResult(SendStatus.completed, message)

    async def _consume(self, payload: dict[str, Any], state: _StreamState, *, fresh: bool) -> None:
        decoder = FrameDecoder()
        async with aclosing(self.transport.stream_search(payload)) as chunks:
            async for chunk in chunks:
                if self._apply(decoder.feed(chunk), state, fresh=fresh):
                    return
        self._apply(decoder.flush(), state, fresh=fresh)

    def _apply(self, events: list[StreamEvent], state: _StreamState, *, fresh: bool) -> bool:
        """Fold frames into ``state``; returns True once reading should stop."""

        for event in events:
            if self._cancel.is_set():
                return True
            if event.type == "error":
                state.error = str(event.data.get("error"))
                return True
            if event.type == "done":
                if event.citations_list:
                    state.citations = [Citation.from_dict(item) for item in event.citations_list]
                state.finished = True
                return True
            if event.type == "citations":
                state.citations = [Citation.from_dict(item) for item in event.citations_list]
                continue
            state.buffer += event.text
            self.streaming_text = state.buffer
            if fresh:
                if state.message is None:
                    state.message = self.session.add_assistant_message()
                state.message.content = state.buffer
            self._notify()
        return False

    def _finalize(
        self,
        state: _StreamState,
        query: str,
        images: list[str],
        mode: str,
        retry_of: ConversationMessage | None,
    ) -> Optional[ConversationMessage]:
        if not state.buffer:
            return state.message
        citations = list(state.citations or [])
        if retry_of is not None:
            if retry_of.role == "assistant" and self.session.index_of(retry_of) is not None:
                retry_of.add_retry_version(state.buffer, citations)
                if retry_of.original_query is None:
                    retry_of.original_query = query
                    retry_of.original_images = list(images)
                    retry_of.original_mode = mode
                return retry_of
            LOGGER.warning("Retry target is no longer in the session, appending a new message")

        message = state.message
        if message is None or self.session.index_of(message) is None:
            message = self.session.add_assistant_message()
        message.content = state.buffer
        message.citations = citations
        message.original_query = query
        message.original_images = list(images)
        message.original_mode = mode
        return message

    async def _run_image(
        self,
        request: Callable[[], Awaitable[dict[str, Any]]],
        *,
        query: str,
        success_text: str,
    ) -> SendResult:
        placeholder = self.session.add_assistant_message(
            "", original_query=query, original_images=[], original_mode="image"
        )
        try:
            async with ProgressTicker(
                self.progress_interval, listener=self._on_progress, rng=self._rng
            ) as ticker:
                finished, result = await self._run_cancellable(request())
                if finished:
                    ticker.complete()
        except TransportError as exc:
            LOGGER.warning("Image request failed | status=%s error=%s", exc.status_code, exc)
            self.session.remove(placeholder)
            self.error = str(exc) or IMAGE_FAILED_MESSAGE
            return SendResult(SendStatus.failed, error=self.error)

        if not finished:
            LOGGER.info("Image request cancelled")
            self.session.remove(placeholder)
            return SendResult(SendStatus.cancelled)

        image_url = result.get("image_url") if isinstance(result, dict) else None
        if not image_url:
            self.session.remove(placeholder)
            self.error = IMAGE_FAILED_MESSAGE
            return SendResult(SendStatus.failed, error=self.error)

        placeholder.content = success_text
        placeholder.images = [image_url]
        return SendResult(SendStatus.completed, placeholder)

    def _on_progress(self, value: float) -> None:
        self.progress = value
        self._notify()

    async def _persist(self, query: str, images: list[str], mode: str, message: ConversationMessage) -> None:
        conversation_id = self.session.conversation_id
        if not conversation_id:
            return
        try:
            await self.transport.add_message(
                conversation_id, {"role": "user", "content": query, "images": images, "mode": mode}
            )
            await self.transport.add_message(
                conversation_id,
                {
                    "role": "assistant",
                    "content": message.content,
                    "images": [],
                    "citations": [citation.to_dict() for citation in message.citations],
                    "mode": mode,
                },
            )
        except TransportError as exc:
            LOGGER.warning("Failed to persist turn | conversation=%s error=%s", conversation_id, exc)


__all__ = [
    "FALLBACK_REPLY",
    "SEARCH_FAILED_MESSAGE",
    "SendResult",
    "SendStatus",
    "StreamingConversationController",
]
