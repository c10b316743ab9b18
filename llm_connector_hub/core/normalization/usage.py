"""
Usage normalization.

Vendors name their token counters differently and sometimes omit them.
These helpers turn raw counters into a ``Usage`` or ``None`` so that an
absent report is never confused with a zero count.
"""

from typing import Any, Mapping, Optional

from ...models.generation import Usage


def build_usage(prompt_tokens: Optional[int], completion_tokens: Optional[int]) -> Optional[Usage]:
    """
    Build a Usage from raw counters; ``None`` when neither was reported.

    A single missing counter counts as zero: vendors drop zero-valued
    counters from the JSON (Gemini omits ``candidatesTokenCount`` for an
    empty answer) rather than leaving them unreported.
    """
    if prompt_tokens is None and completion_tokens is None:
        return None
    return Usage(
        prompt_tokens=int(prompt_tokens or 0),
        completion_tokens=int(completion_tokens or 0),
    )


def usage_from_mapping(
    data: Optional[Mapping[str, Any]],
    prompt_key: str,
    completion_key: str,
) -> Optional[Usage]:
    """Read counters out of a vendor usage object."""
    if not data:
        return None
    return build_usage(data.get(prompt_key), data.get(completion_key))
