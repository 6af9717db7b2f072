"""Text generation with deterministic fallbacks.

Every AI-backed feature goes through :class:`GenerationOrchestrator`. It sends
at most one prompt to the OpenAI Responses API, shapes the answer (free text
or JSON), and substitutes the caller's fallback whenever the service is not
configured, fails, or returns something unusable. It never raises; callers
always get a :class:`Generated` value whose ``source`` says where it came from.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from flask import current_app

from careercoach.services import openai_service
from careercoach.utils.text import make_text_excerpt, parse_json_payload

_LOGGER = logging.getLogger(__name__)

SOURCE_AI = "ai"
SOURCE_FALLBACK = "fallback"

REASON_NOT_CONFIGURED = "not_configured"
REASON_EMPTY_RESPONSE = "empty_response"
REASON_INVALID_JSON = "invalid_json"
REASON_INVALID_SHAPE = "invalid_shape"
REASON_SERVICE_ERROR = "service_error"

EXTENSION_KEY = "generation_orchestrator"

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_OUTPUT_TOKENS = 1500


@dataclass(frozen=True)
class GenerationConfig:
    """Process-wide settings for the text-generation service."""

    api_key: Optional[str] = None
    model: str = openai_service.DEFAULT_MODEL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_retries: int = 0
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "GenerationConfig":
        """Build the configuration from ``OPENAI_*`` environment variables."""
        return cls(
            api_key=os.getenv("OPENAI_API_KEY") or None,
            model=os.getenv("OPENAI_MODEL", openai_service.DEFAULT_MODEL),
            timeout_seconds=float(os.getenv("OPENAI_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
            max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "0")),
            max_output_tokens=int(os.getenv("OPENAI_MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS)),
        )


@dataclass(frozen=True)
class Generated:
    """Tagged generation result: either model output or a fallback with its reason."""

    value: Any
    source: str
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: Any) -> "Generated":
        return cls(value=value, source=SOURCE_AI)

    @classmethod
    def fallback(cls, value: Any, reason: str) -> "Generated":
        return cls(value=value, source=SOURCE_FALLBACK, reason=reason)

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


class GenerationOrchestrator:
    """Coordinates the external call, response shaping and fallback selection."""

    def __init__(self, config: Optional[GenerationConfig] = None, client: Any = None):
        self.config = config or GenerationConfig()
        self._client = None
        if self.config.enabled:
            self._client = client or openai_service.get_openai_client(
                self.config.api_key,
                timeout=self.config.timeout_seconds,
                max_retries=self.config.max_retries,
            )

    @classmethod
    def from_env(cls) -> "GenerationOrchestrator":
        return cls(GenerationConfig.from_env())

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def generate_text(self, prompt: str, fallback: Any) -> Generated:
        """Return trimmed free text from the model, or ``fallback``."""
        if not self.enabled:
            return self._fallback(fallback, REASON_NOT_CONFIGURED)

        try:
            text = self._complete(prompt).strip()
        except Exception:
            _LOGGER.exception("Text generation request failed")
            return self._fallback(fallback, REASON_SERVICE_ERROR)

        if not text:
            return self._fallback(fallback, REASON_EMPTY_RESPONSE)
        return Generated.ok(text)

    def generate_json(
        self,
        prompt: str,
        fallback: Any,
        validate: Optional[Callable[[Any], bool]] = None,
    ) -> Generated:
        """Return the parsed JSON answer when it passes ``validate``, else ``fallback``."""
        if not self.enabled:
            return self._fallback(fallback, REASON_NOT_CONFIGURED)

        try:
            raw = self._complete(prompt)
        except Exception:
            _LOGGER.exception("JSON generation request failed")
            return self._fallback(fallback, REASON_SERVICE_ERROR)

        try:
            payload = parse_json_payload(raw)
        except (ValueError, RecursionError):
            _LOGGER.warning("Discarding unparseable model output: %s", make_text_excerpt(raw))
            return self._fallback(fallback, REASON_INVALID_JSON)

        try:
            valid = validate is None or validate(payload)
        except Exception:
            _LOGGER.exception("Shape validation raised for model output")
            valid = False

        if not valid:
            return self._fallback(fallback, REASON_INVALID_SHAPE)
        return Generated.ok(payload)

    def _complete(self, prompt: str) -> str:
        completion = openai_service.create_response(
            self._client,
            prompt,
            model=self.config.model,
            max_output_tokens=self.config.max_output_tokens,
        )
        return openai_service.response_text(completion)

    @staticmethod
    def _fallback(value: Any, reason: str) -> Generated:
        if reason != REASON_NOT_CONFIGURED:
            _LOGGER.warning("Using fallback value (%s)", reason)
        # Fallback constants are module-level and shared.
        return Generated.fallback(copy.deepcopy(value), reason)


def current_orchestrator() -> GenerationOrchestrator:
    """Return the orchestrator installed on the running Flask app."""
    return current_app.extensions[EXTENSION_KEY]
