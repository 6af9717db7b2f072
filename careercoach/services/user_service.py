"""Profile store: users keyed by their external identity subject."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from careercoach import database
from careercoach.services.prompts import normalize_skills

MAX_BIO_LENGTH = 2_000
MAX_INDUSTRY_LENGTH = 120


def upsert_user(
    subject: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    image_url: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Ensure a user document exists for the identity subject.

    Existing users are left untouched; a single upsert avoids duplicate
    documents when two logins race.

    Args:
        subject: Stable identifier issued by the identity provider
        name: Display name for new users
        email: Primary email address for new users
        image_url: Avatar URL for new users

    Returns:
        The stored user document
    """
    collection = database.get_collection("users")
    now = datetime.utcnow()

    collection.update_one(
        {"subject": subject},
        {
            "$setOnInsert": {
                "name": (name or "").strip(),
                "email": email,
                "image_url": image_url,
                "industry": None,
                "experience": None,
                "skills": [],
                "bio": None,
                "created_at": now,
                "updated_at": now,
            }
        },
        upsert=True,
    )
    return get_user_by_subject(subject)


def get_user_by_subject(subject: str) -> Optional[Dict[str, Any]]:
    """Return the serialized user for the subject, or None when it was never created."""
    collection = database.get_collection("users")
    return database.serialize_document(collection.find_one({"subject": subject}))


def _validate_experience(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("experience must be a whole number of years.")
    try:
        years = int(value)
    except (TypeError, ValueError):
        raise ValueError("experience must be a whole number of years.")
    if years < 0 or years > 80:
        raise ValueError("experience must be between 0 and 80.")
    return years


def update_profile(
    subject: str,
    industry: Any,
    experience: Any = None,
    skills: Any = None,
    bio: Any = None,
) -> Dict[str, Any]:
    """
    Store the onboarding fields that feed every prompt.

    Raises:
        ValueError: if the industry is missing or experience is not a valid number
        LookupError: if no user exists for the subject
    """
    normalized_industry = str(industry or "").strip()[:MAX_INDUSTRY_LENGTH]
    if not normalized_industry:
        raise ValueError("industry is required.")

    normalized_skills: List[str] = normalize_skills(skills)
    normalized_bio = str(bio).strip()[:MAX_BIO_LENGTH] if bio else None

    collection = database.get_collection("users")
    result = collection.update_one(
        {"subject": subject},
        {
            "$set": {
                "industry": normalized_industry,
                "experience": _validate_experience(experience),
                "skills": normalized_skills,
                "bio": normalized_bio,
                "updated_at": datetime.utcnow(),
            }
        },
    )
    if result.matched_count == 0:
        raise LookupError("User not found.")

    return get_user_by_subject(subject)
