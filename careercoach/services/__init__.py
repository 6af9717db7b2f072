"""Service layer modules for the Career Coach API."""

from . import (
    auth_service,
    cover_letter_service,
    generation,
    insight_service,
    interview_service,
    openai_service,
    user_service,
)

__all__ = [
    "auth_service",
    "cover_letter_service",
    "generation",
    "insight_service",
    "interview_service",
    "openai_service",
    "user_service",
]
