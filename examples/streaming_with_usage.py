"""
Example: Streaming with Usage Data

Streams a completion from any configured vendor and prints the text as it
arrives, followed by the finish reason and token usage reported on the
final chunk.

Set the vendor's API key first, e.g. ``OPENAI_API_KEY`` or
``ANTHROPIC_API_KEY`` (a ``.env`` file in the working directory works too),
then run:

    python examples/streaming_with_usage.py openai gpt-4o-mini
"""

import asyncio
import logging
import sys

from llm_connector_hub import CompletionRequest, ProviderError, system_message, user_message
from llm_connector_hub.providers import create_provider_from_env


async def stream_haiku(provider_name: str, model: str) -> None:
    """Stream a short answer and report usage."""
    async with create_provider_from_env(provider_name) as provider:
        request = CompletionRequest(
            model=model,
            messages=[
                system_message("You are a poet."),
                user_message("Write a haiku about Python programming"),
            ],
            temperature=0.7,
            max_tokens=100,
        )

        usage = None
        finish_reason = None
        async for chunk in provider.stream(request):
            if chunk.content:
                print(chunk.content, end="", flush=True)
            if chunk.finish_reason:
                finish_reason = chunk.finish_reason
            if chunk.usage:
                usage = chunk.usage

        print(f"\n\nFinish reason: {finish_reason.value if finish_reason else 'n/a'}")
        if usage is None:
            print("Usage not reported by the vendor")
        else:
            print(f"  Prompt tokens: {usage.prompt_tokens}")
            print(f"  Completion tokens: {usage.completion_tokens}")
            print(f"  Total tokens: {usage.total_tokens}")


def main():
    logging.basicConfig(level=logging.INFO)
    provider_name = sys.argv[1] if len(sys.argv) > 1 else "openai"
    model = sys.argv[2] if len(sys.argv) > 2 else "gpt-4o-mini"
    try:
        asyncio.run(stream_haiku(provider_name, model))
    except ProviderError as e:
        print(f"\n{e.kind.value}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
