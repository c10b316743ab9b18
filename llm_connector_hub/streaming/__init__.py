"""Streaming primitives: SSE record decoding."""

from .sse import (
    RecordGrammar,
    SSEDecoder,
    SSEEvent,
    decode_event_data,
    iter_sse_events,
    iter_stream_payloads,
)

__all__ = [
    "RecordGrammar",
    "SSEDecoder",
    "SSEEvent",
    "decode_event_data",
    "iter_sse_events",
    "iter_stream_payloads",
]
