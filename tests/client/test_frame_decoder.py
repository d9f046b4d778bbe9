"""Stream frame encoding and incremental decoding tests."""
from __future__ import annotations

from humbl.chat.stream import StreamEvent
from humbl.client.sse import FrameDecoder


def test_encoded_frames_have_data_prefix_and_blank_line() -> None:
    assert StreamEvent.content(text="hi").encode() == b'data: {"content": "hi"}\n\n'
    assert StreamEvent.done().encode() == b'data: {"done": true}\n\n'
    assert StreamEvent.error(message="boom").encode() == b'data: {"error": "boom"}\n\n'


def test_from_payload_classifies_frames() -> None:
    assert StreamEvent.from_payload({"content": "x"}) == StreamEvent.content(text="x")
    assert StreamEvent.from_payload({"error": "bad"}).type == "error"

    done = StreamEvent.from_payload({"done": True, "citations": [{"title": "T"}, "junk"]})
    assert done is not None and done.type == "done"
    assert done.citations_list == [{"title": "T", "url": "#"}]

    citations = StreamEvent.from_payload({"citations": []})
    assert citations is not None and citations.type == "citations"

    assert StreamEvent.from_payload({"unexpected": 1}) is None
    assert StreamEvent.from_payload(["not", "a", "dict"]) is None


def test_decoder_handles_frames_split_mid_character() -> None:
    data = 'data: {"content": "naïve ☕"}\n\ndata: {"done": true}\n\n'.encode("utf-8")
    decoder = FrameDecoder()
    events = []
    for index in range(len(data)):
        events.extend(decoder.feed(data[index : index + 1]))
    events.extend(decoder.flush())

    assert [event.type for event in events] == ["content", "done"]
    assert events[0].text == "naïve ☕"


def test_decoder_skips_noise_and_flushes_trailing_frame() -> None:
    decoder = FrameDecoder()
    events = decoder.feed(b": ping\n\nevent: message\ndata:\ndata: {oops}\n\ndata: {\"content\": \"a\"}\r\n")
    assert [event.text for event in events] == ["a"]

    assert decoder.feed(b'data: {"content": "tail"}') == []
    assert [event.text for event in decoder.flush()] == ["tail"]
    assert decoder.flush() == []
