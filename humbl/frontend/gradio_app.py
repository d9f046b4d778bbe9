"""Gradio console that drives the streaming conversation controller."""
from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from textwrap import dedent
from typing import Any, AsyncIterator, Dict, Sequence

import gradio as gr

from ..client import (
    ConversationSession,
    HttpChatTransport,
    RetryFlavor,
    SendStatus,
    StreamingConversationController,
    TransportError,
)
from ..client.session import ConversationMessage
from ..config import Settings

LOGGER = logging.getLogger(__name__)

MODES = ["default", "search", "auto", "image"]
NOT_LOGGED_IN = "⚠️ Please log in first."


def _normalise_base_url(base_url: str | None, default: str) -> str:
    base = (base_url or default).strip().rstrip("/")
    return base or default


def _as_data_url(path: str) -> str:
    mime_type = mimetypes.guess_type(path)[0] or "image/png"
    encoded = base64.b64encode(Path(path).read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _render_message(index: int, message: ConversationMessage) -> str:
    speaker = "You" if message.role == "user" else "Humbl"
    header = f"**[{index}] {speaker}**"
    if message.retry_versions:
        header += f" _(version {message.current_retry_index + 1}/{message.version_count})_"
    lines = [header, message.displayed_content or "…"]
    if message.images:
        lines.append(" ".join(f"🖼️ image {position + 1}" for position in range(len(message.images))))
    citations = message.displayed_citations
    if citations:
        lines.append("\n".join(f"- [{citation.title}]({citation.url})" for citation in citations))
    return "\n\n".join(lines)


def _render(controller: StreamingConversationController | None) -> str:
    if controller is None:
        return ""
    return "\n\n---\n\n".join(
        _render_message(index, message) for index, message in enumerate(controller.session.snapshot())
    )


def _status(controller: StreamingConversationController) -> str:
    if controller.error:
        return f"❌ {controller.error}"
    if controller.progress is not None:
        return f"🎨 Generating image… {controller.progress:.0f}%"
    if controller.streaming:
        return "⏳ Streaming…"
    return "✅ Ready."


def _result_status(controller: StreamingConversationController, status: SendStatus) -> str:
    if status is SendStatus.ignored:
        return "ℹ️ Nothing to send."
    if status is SendStatus.cancelled:
        return "⏹️ Stopped."
    return _status(controller)


async def _drive(
    controller: StreamingConversationController, operation: Any
) -> AsyncIterator[tuple[str, str]]:
    """Run ``operation`` and yield a rendering each time the controller changes."""

    updates: asyncio.Queue[None] = asyncio.Queue()
    controller.listener = lambda _controller: updates.put_nowait(None)
    task = asyncio.ensure_future(operation)
    try:
        while not task.done():
            waiter = asyncio.ensure_future(updates.get())
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
            waiter.cancel()
            yield _render(controller), _status(controller)
        result = task.result()
    finally:
        controller.listener = None
    yield _render(controller), _result_status(controller, result.status)


def create_frontend(settings: Settings) -> gr.Blocks:
    """Return a configured Gradio Blocks interface."""

    title = settings.fastapi.title or "Humbl AI"
    client_settings = settings.client

    async def login_action(
        email: str, password: str, base_url: str, state: Dict[str, Any] | None
    ) -> tuple[str, Dict[str, Any] | None, str]:
        if not email or not password:
            return "⚠️ Please enter e-mail and password.", state, _render(_controller(state))
        base = _normalise_base_url(base_url, client_settings.api_base_url)
        transport = HttpChatTransport(base, timeout=client_settings.request_timeout)
        try:
            await transport.login(email, password)
        except TransportError as exc:
            return f"❌ Login failed: {exc}", state, _render(_controller(state))

        session = ConversationSession(
            limit=client_settings.history_limit, max_user_images=client_settings.max_user_images
        )
        try:
            conversation = await transport.create_conversation()
        except TransportError as exc:
            LOGGER.warning("Console could not create a conversation | error=%s", exc)
            session.start()
            message = "✅ Logged in. Turns are kept in this browser session only."
        else:
            session.start(str(conversation.get("id")))
            message = f"✅ Logged in. Conversation {session.conversation_id} started."
        controller = StreamingConversationController(
            transport, session, progress_interval=client_settings.progress_interval
        )
        return message, {"controller": controller}, ""

    async def logout_action(state: Dict[str, Any] | None) -> tuple[str, None, str]:
        controller = _controller(state)
        if controller is not None:
            controller.cancel()
            controller.session.end()
        return "ℹ️ Logged out.", None, ""

    async def send_action(
        query: str, mode: str, files: Sequence[str] | None, state: Dict[str, Any] | None
    ) -> AsyncIterator[tuple[str, str, str]]:
        controller = _controller(state)
        if controller is None:
            yield "", NOT_LOGGED_IN, query
            return
        try:
            images = [_as_data_url(path) for path in files or []]
        except OSError as exc:
            yield _render(controller), f"❌ Could not read image: {exc}", query
            return
        async for rendered, status in _drive(controller, controller.send(query, images, mode)):
            yield rendered, status, ""

    async def stop_action(state: Dict[str, Any] | None) -> str:
        controller = _controller(state)
        if controller is None:
            return NOT_LOGGED_IN
        controller.cancel()
        return "⏹️ Stopping…"

    async def retry_action(
        index: float, flavor: str, custom_prompt: str, state: Dict[str, Any] | None
    ) -> AsyncIterator[tuple[str, str]]:
        controller = _controller(state)
        if controller is None:
            yield "", NOT_LOGGED_IN
            return
        operation = controller.retry(int(index), RetryFlavor(flavor), custom_prompt or None)
        async for update in _drive(controller, operation):
            yield update

    def version_action(index: float, direction: str, state: Dict[str, Any] | None) -> tuple[str, str]:
        controller = _controller(state)
        if controller is None:
            return "", NOT_LOGGED_IN
        position = int(index)
        if not 0 <= position < len(controller.session):
            return _render(controller), "⚠️ No message at that index."
        controller.session[position].select_version("prev" if direction == "prev" else "next")
        return _render(controller), _status(controller)

    async def transform_action(
        index: float, instruction: str, kind: str, state: Dict[str, Any] | None
    ) -> AsyncIterator[tuple[str, str]]:
        controller = _controller(state)
        if controller is None:
            yield "", NOT_LOGGED_IN
            return
        position = int(index)
        if not 0 <= position < len(controller.session) or not controller.session[position].images:
            yield _render(controller), "⚠️ That message has no image."
            return
        images = controller.session[position].images
        operation = controller.transform_image(instruction, images, "remix" if kind == "remix" else "edit")
        async for update in _drive(controller, operation):
            yield update

    with gr.Blocks(title=f"{title} Console") as demo:
        controller_state: gr.State = gr.State(None)

        gr.Markdown(
            dedent(
                f"""
                # {title}

                Log in with your account, then ask questions, search the web or generate images.
                """
            ).strip()
        )

        with gr.Accordion("Login", open=True):
            base_url_input = gr.Textbox(label="API Base URL", value=client_settings.api_base_url)
            email_input = gr.Textbox(label="E-Mail", placeholder="you@example.com")
            password_input = gr.Textbox(label="Password", type="password")
            with gr.Row():
                login_button = gr.Button("Log in", variant="primary")
                logout_button = gr.Button("Log out")

        status_output = gr.Markdown("Please log in.")
        conversation_output = gr.Markdown("")

        with gr.Row():
            query_input = gr.Textbox(label="Ask anything", lines=2, scale=4)
            mode_input = gr.Radio(MODES, value="default", label="Mode", scale=1)
        image_input = gr.File(label="Images", file_count="multiple", file_types=["image"], type="filepath")
        with gr.Row():
            send_button = gr.Button("Send", variant="primary")
            stop_button = gr.Button("Stop", variant="stop")

        with gr.Accordion("Retry and versions", open=False):
            index_input = gr.Number(label="Message index", value=1, precision=0)
            flavor_input = gr.Dropdown(
                [flavor.value for flavor in RetryFlavor], value=RetryFlavor.try_again.value, label="Retry flavor"
            )
            custom_prompt_input = gr.Textbox(label="Custom prompt")
            with gr.Row():
                retry_button = gr.Button("Retry")
                previous_button = gr.Button("◀ Previous version")
                next_button = gr.Button("Next version ▶")

        with gr.Accordion("Edit or remix an image", open=False):
            image_index_input = gr.Number(label="Message index", value=1, precision=0)
            instruction_input = gr.Textbox(label="Instruction")
            kind_input = gr.Radio(["edit", "remix"], value="edit", label="Operation")
            transform_button = gr.Button("Apply")

        login_button.click(
            login_action,
            inputs=[email_input, password_input, base_url_input, controller_state],
            outputs=[status_output, controller_state, conversation_output],
        )
        logout_button.click(
            logout_action,
            inputs=[controller_state],
            outputs=[status_output, controller_state, conversation_output],
        )
        send_button.click(
            send_action,
            inputs=[query_input, mode_input, image_input, controller_state],
            outputs=[conversation_output, status_output, query_input],
        )
        stop_button.click(stop_action, inputs=[controller_state], outputs=[status_output])
        retry_button.click(
            retry_action,
            inputs=[index_input, flavor_input, custom_prompt_input, controller_state],
            outputs=[conversation_output, status_output],
        )
        previous_button.click(
            lambda index, state: version_action(index, "prev", state),
            inputs=[index_input, controller_state],
            outputs=[conversation_output, status_output],
        )
        next_button.click(
            lambda index, state: version_action(index, "next", state),
            inputs=[index_input, controller_state],
            outputs=[conversation_output, status_output],
        )
        transform_button.click(
            transform_action,
            inputs=[image_index_input, instruction_input, kind_input, controller_state],
            outputs=[conversation_output, status_output],
        )

    return demo


def _controller(state: Dict[str, Any] | None) -> StreamingConversationController | None:
    if not state:
        return None
    return state.get("controller")


__all__ = ["create_frontend"]
