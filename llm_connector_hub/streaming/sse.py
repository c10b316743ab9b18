"""
Server-sent event decoding.

Bytes arrive in arbitrary chunks: a record may be split across chunks and a
chunk may hold several records. The decoder buffers the trailing partial
record and only ever emits complete ones. Two record grammars are supported:

* ``LINES``: every non-empty ``data:`` line is a record (sentinel terminated
  streams such as OpenAI's ``data: [DONE]``);
* ``BLOCKS``: records are separated by a blank line and may carry an
  ``event:`` name plus several ``data:`` lines joined with ``\\n``.

Comment lines (starting with ``:``) are heartbeats and are dropped.
"""

import codecs
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


def normalize_newlines(text: str) -> str:
    """Map the CRLF and bare CR line terminators to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


class RecordGrammar(str, Enum):
    LINES = "lines"
    BLOCKS = "blocks"


@dataclass
class SSEEvent:
    """A single decoded server-sent event."""
    data: str
    event: Optional[str] = None
    id: Optional[str] = None
    retry: Optional[int] = None


class SSEDecoder:
    """Incremental decoder turning byte chunks into SSEEvents."""

    def __init__(self, grammar: RecordGrammar = RecordGrammar.LINES):
        self.grammar = grammar
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: bytes) -> List[SSEEvent]:
        """Consume a chunk and return every record completed by it."""
        text = self._buffer + self._decoder.decode(chunk)
        # a trailing \r may be the first half of \r\n
        held = "\r" if text.endswith("\r") else ""
        text = normalize_newlines(text[:len(text) - len(held)])

        separator = "\n" if self.grammar == RecordGrammar.LINES else "\n\n"
        *records, rest = text.split(separator)
        self._buffer = rest + held
        return [event for event in map(self._parse_record, records) if event is not None]

    def flush(self) -> List[SSEEvent]:
        """Emit whatever remains buffered once the byte stream has ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = normalize_newlines(self._buffer), ""
        if not remainder.strip():
            return []
        if self.grammar == RecordGrammar.LINES:
            records = remainder.split("\n")
        else:
            records = remainder.split("\n\n")
        return [event for event in map(self._parse_record, records) if event is not None]

    def _parse_record(self, record: str) -> Optional[SSEEvent]:
        data_lines: List[str] = []
        event_name = None
        event_id = None
        retry = None

        for line in record.split("\n"):
            line = line.rstrip("\r")
            if not line or line.startswith(":"):
                continue
            field, _, value = line.partition(":")
            if value.startswith(" "):
                value = value[1:]
            if field == "data":
                data_lines.append(value)
            elif field == "event":
                event_name = value.strip()
            elif field == "id":
                event_id = value.strip()
            elif field == "retry":
                try:
                    retry = int(value.strip())
                except ValueError:
                    pass

        if not data_lines:
            return None
        return SSEEvent(data="\n".join(data_lines), event=event_name, id=event_id, retry=retry)


async def iter_sse_events(
    chunks: AsyncIterator[bytes],
    grammar: RecordGrammar = RecordGrammar.LINES,
) -> AsyncIterator[SSEEvent]:
    """Decode an async byte stream into complete SSE records."""
    decoder = SSEDecoder(grammar)
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
    for event in decoder.flush():
        yield event


def decode_event_data(event: SSEEvent) -> Optional[Any]:
    """
    Parse the JSON payload of a record.

    Undecodable payloads are logged and skipped (``None``); they never
    abort the stream.
    """
    try:
        return json.loads(event.data)
    except ValueError:
        logger.warning("Skipping undecodable stream record: %.200s", event.data)
        return None


async def iter_stream_payloads(
    chunks: AsyncIterator[bytes],
    grammar: RecordGrammar = RecordGrammar.LINES,
    sentinel: Optional[str] = None,
) -> AsyncIterator[Tuple[SSEEvent, Any]]:
    """
    Yield ``(event, payload)`` for every record with a JSON payload.

    Iteration stops at the first record whose data equals ``sentinel``.
    """
    async for event in iter_sse_events(chunks, grammar):
        if sentinel is not None and event.data.strip() == sentinel:
            return
        payload = decode_event_data(event)
        if payload is not None:
            yield event, payload
