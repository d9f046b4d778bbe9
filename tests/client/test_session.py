"""Conversation session and retry input tests."""
from __future__ import annotations

import pytest

from humbl.client.retry import RETRY_SUFFIXES, RetryFlavor, resolve_retry_inputs, transform_query
from humbl.client.session import Citation, ConversationMessage, ConversationSession


def test_session_keeps_only_the_most_recent_messages() -> None:
    session = ConversationSession(limit=100)
    for index in range(105):
        session.add_user_message(f"message {index}")

    assert len(session) == 100
    assert session[0].content == "message 5"
    assert session[-1].content == "message 104"


def test_user_images_are_clipped() -> None:
    session = ConversationSession(max_user_images=3)
    message = session.add_user_message("look", ["a", "b", "c", "d"])
    assert message.images == ["a", "b", "c"]


def test_messages_are_tracked_by_identity() -> None:
    session = ConversationSession()
    first = session.add_assistant_message("same")
    second = session.add_assistant_message("same")

    assert session.index_of(second) == 1
    assert session.remove(first) is True
    assert session.index_of(second) == 0
    assert session.remove(first) is False
    assert session.remove(7) is False
    assert session.index_of(ConversationMessage(role="assistant", content="same")) is None


def test_update_rejects_unknown_fields() -> None:
    session = ConversationSession()
    session.add_assistant_message("draft")

    session.update(0, content="final", citations=[Citation("A", "https://a")])
    assert session[0].content == "final"
    with pytest.raises(AttributeError):
        session.update(0, colour="blue")


def test_start_and_end() -> None:
    session = ConversationSession()
    session.start("conv-9")
    session.add_user_message("hi")
    assert session.started is True
    assert session.conversation_id == "conv-9"

    session.end()
    assert session.started is False
    assert [message.content for message in session] == ["hi"]

    session.clear()
    assert len(session) == 0


def test_version_navigation_clamps() -> None:
    message = ConversationMessage(role="assistant", content="v0", citations=[Citation("Orig", "https://o")])
    message.add_retry_version("v1")
    message.add_retry_version("v2", [Citation("New", "https://n")])

    assert message.current_retry_index == 2
    assert message.select_version("next") == 2
    assert message.displayed_citations == [Citation("New", "https://n")]
    assert message.select_version("prev") == 1
    assert message.displayed_content == "v1"
    assert message.displayed_citations == [Citation("Orig", "https://o")]
    message.select_version("prev")
    assert message.select_version("prev") == 0
    assert message.displayed_content == "v0"


def test_retry_inputs_prefer_recorded_query() -> None:
    session = ConversationSession()
    session.add_user_message("earlier question", ["img"])
    session.add_assistant_message("answer", original_query="rewritten", original_images=[], original_mode="search")

    inputs = resolve_retry_inputs(session, 1)

    assert inputs is not None
    assert inputs.query == "rewritten"
    assert inputs.images == []
    assert inputs.mode == "search"


def test_retry_inputs_fall_back_to_previous_user_message() -> None:
    session = ConversationSession()
    session.add_user_message("first", ["one"])
    session.add_assistant_message("a")
    session.add_user_message("second", ["two"])
    session.add_assistant_message("b")

    inputs = resolve_retry_inputs(session, 3)

    assert inputs is not None
    assert (inputs.query, inputs.images, inputs.mode) == ("second", ["two"], "default")
    assert resolve_retry_inputs(session, 4) is None


def test_retry_inputs_allow_image_only_turns() -> None:
    session = ConversationSession()
    session.add_user_message("", ["pic"])
    session.add_assistant_message("a picture of a cat")

    inputs = resolve_retry_inputs(session, 1)
    assert inputs is not None
    assert inputs.images == ["pic"]


def test_transform_query_per_flavor() -> None:
    assert transform_query(RetryFlavor.try_again, "q", "default") == ("q", "default")
    assert transform_query(RetryFlavor.more_concise, "q", "default") == (
        "q" + RETRY_SUFFIXES[RetryFlavor.more_concise],
        "default",
    )
    assert transform_query(RetryFlavor.think_longer, "q", "search")[1] == "search"
    assert transform_query(RetryFlavor.search_web, "q", "default") == ("q", "search")
    assert transform_query(RetryFlavor.custom, "q", "default", "  other  ") == ("other", "default")
    assert transform_query(RetryFlavor.custom, "q", "default", "   ") == ("q", "default")


def test_retry_inputs_reject_user_turns() -> None:
    session = ConversationSession()
    session.add_user_message("first")
    session.add_assistant_message("a")
    session.add_user_message("second")

    assert resolve_retry_inputs(session, 0) is None
    assert resolve_retry_inputs(session, 2) is None
