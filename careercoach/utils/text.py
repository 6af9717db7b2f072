"""Text normalization and model-output parsing helpers."""

from __future__ import annotations

import json
import re
from typing import Any

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?", re.IGNORECASE)

CONVERSATIONAL_PREFIXES = (
    "here is your cover letter:",
    "here's your cover letter:",
    "here is the cover letter:",
    "here's the cover letter:",
    "here is a cover letter:",
    "here's a cover letter:",
    "below is your cover letter:",
    "below is the cover letter:",
)


def clamp_text(value: Any, limit: int) -> str:
    """Coerce a user supplied value to a trimmed string no longer than ``limit``."""
    if value is None:
        return ""
    return str(value).strip()[:limit]


def make_text_excerpt(text: str, limit: int = 200) -> str:
    """Normalize raw text and clamp it to a preview-friendly length."""
    if not text:
        return ""
    cleaned = " ".join(text.split())
    return cleaned[:limit]


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (optionally tagged ``json``) around model output."""
    if not text:
        return ""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def parse_json_payload(text: str) -> Any:
    """Parse a JSON document out of raw model output.

    Raises:
        ValueError: if the text is empty or is not valid JSON once the
            surrounding fences are removed.
    """
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise ValueError("Empty JSON payload")
    # json.JSONDecodeError is a ValueError subclass
    return json.loads(cleaned)


def has_non_empty_list(payload: Any, field: str) -> bool:
    """Shape guard: ``payload[field]`` exists and is a non-empty list.

    Entries inside the list are not inspected.
    """
    if not isinstance(payload, dict):
        return False
    value = payload.get(field)
    return isinstance(value, list) and len(value) > 0


def strip_conversational_prefix(text: str) -> str:
    """Drop a leading 'Here is your cover letter:' style preamble from model output."""
    if not text:
        return text

    lowered = text.lower()
    for prefix in CONVERSATIONAL_PREFIXES:
        if lowered.startswith(prefix):
            return text[len(prefix):].lstrip()
    return text

