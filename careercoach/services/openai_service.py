"""Wrapper utilities around the OpenAI client."""

from __future__ import annotations

import os
from typing import Any, Optional

from openai import OpenAI

DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-4.1-mini")


def get_openai_client(
    api_key: Optional[str] = None,
    *,
    timeout: float = 30.0,
    max_retries: int = 0,
) -> OpenAI:
    """Instantiate an OpenAI client using the given or configured API key."""
    api_key = api_key or os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")
    return OpenAI(api_key=api_key, timeout=timeout, max_retries=max_retries)


def create_response(
    client: OpenAI,
    prompt: str,
    *,
    model: Optional[str] = None,
    max_output_tokens: int = 600,
):
    """Invoke the Responses API with shared defaults."""
    return client.responses.create(
        model=model or DEFAULT_MODEL,
        input=prompt,
        max_output_tokens=max_output_tokens,
    )


def response_text(completion: Any) -> str:
    """Return the aggregated output text of a Responses API result."""
    text = getattr(completion, "output_text", None)
    return text if isinstance(text, str) else ""
