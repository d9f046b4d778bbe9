"""Incremental decoder for ``data: {json}`` stream frames."""
from __future__ import annotations

import codecs
import json
import logging

from ..chat.stream import FRAME_PREFIX, StreamEvent

LOGGER = logging.getLogger(__name__)


class FrameDecoder:
    """Turn arbitrary byte chunks into stream events.

    Frames may be split across chunks, including inside a multi-byte character.
    Lines that are not ``data:`` frames, or whose payload is not valid JSON, are
    skipped.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        return self._parse(lines)

    def flush(self) -> list[StreamEvent]:
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        return self._parse([remainder])

    def _parse(self, lines: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        for raw_line in lines:
            line = raw_line.strip()
            if not line.startswith(FRAME_PREFIX):
                continue
            body = line[len(FRAME_PREFIX):].strip()
            if not body:
                continue
            try:
                payload = json.loads(body)
            except ValueError:
                LOGGER.debug("Skipping malformed frame | frame=%s", body[:200])
                continue
            event = StreamEvent.from_payload(payload)
            if event is not None:
                events.append(event)
        return events


__all__ = ["FrameDecoder"]
