"""Business logic for generating and storing cover letters."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from careercoach import database
from careercoach.errors import PersistenceError
from careercoach.services.fallbacks import build_fallback_cover_letter
from careercoach.services.generation import SOURCE_FALLBACK, GenerationOrchestrator
from careercoach.services.prompts import build_cover_letter_prompt, sanitize_cover_letter_request
from careercoach.utils.text import strip_conversational_prefix

_LOGGER = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"


def _to_object_id(letter_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(letter_id)
    except (InvalidId, TypeError):
        return None


def _letter_document(user: Mapping[str, Any], request: Mapping[str, str], content: str, source: str) -> Dict[str, Any]:
    timestamp = datetime.utcnow()
    return {
        "user_id": user["id"],
        "content": content,
        "job_description": request["job_description"],
        "company_name": request["company_name"],
        "job_title": request["job_title"],
        "status": STATUS_COMPLETED,
        "source": source,
        "created_at": timestamp,
        "updated_at": timestamp,
    }


def generate_cover_letter(
    orchestrator: GenerationOrchestrator,
    user: Mapping[str, Any],
    data: Mapping[str, Any],
) -> Dict[str, Any]:
    """
    Generate a cover letter for the user and persist it.

    The letter is always stored: when the first insert fails, the templated
    fallback letter is inserted instead.

    Raises:
        ValueError: if the job title or company name is missing
        PersistenceError: if neither insert succeeds
    """
    request = sanitize_cover_letter_request(data)
    fallback = build_fallback_cover_letter(user, request)

    generated = orchestrator.generate_text(build_cover_letter_prompt(user, request), fallback)
    content, source = generated.value, generated.source
    if not generated.is_fallback:
        content = strip_conversational_prefix(content)
        if not content:
            content, source = fallback, SOURCE_FALLBACK

    collection = database.get_collection("cover_letters")
    document = _letter_document(user, request, content, source)
    try:
        result = collection.insert_one(document)
    except PyMongoError:
        _LOGGER.exception("Failed to store cover letter for user %s; retrying with fallback", user["id"])
        document = _letter_document(user, request, fallback, SOURCE_FALLBACK)
        try:
            result = collection.insert_one(document)
        except PyMongoError as exc:
            raise PersistenceError("Failed to save cover letter") from exc

    document["_id"] = result.inserted_id
    return database.serialize_document(document)


def get_cover_letters(user: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return the user's cover letters, newest first."""
    collection = database.get_collection("cover_letters")
    cursor = collection.find({"user_id": user["id"]}).sort("created_at", -1)
    return [database.serialize_document(record) for record in cursor]


def get_cover_letter(user: Mapping[str, Any], letter_id: str) -> Optional[Dict[str, Any]]:
    """Return a single cover letter if it exists and belongs to the user."""
    object_id = _to_object_id(letter_id)
    if object_id is None:
        return None

    collection = database.get_collection("cover_letters")
    record = collection.find_one({"_id": object_id, "user_id": user["id"]})
    return database.serialize_document(record)


def delete_cover_letter(user: Mapping[str, Any], letter_id: str) -> bool:
    """Delete a cover letter owned by the user; False when nothing matched."""
    object_id = _to_object_id(letter_id)
    if object_id is None:
        return False

    collection = database.get_collection("cover_letters")
    result = collection.delete_one({"_id": object_id, "user_id": user["id"]})
    return result.deleted_count > 0
