"""/api/cover-letters endpoints."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from careercoach.errors import PersistenceError
from careercoach.services import cover_letter_service
from careercoach.services.generation import current_orchestrator
from careercoach.utils.auth import require_user

bp = Blueprint("cover_letters", __name__, url_prefix="/api/cover-letters")


def serialize_cover_letter(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": record["id"],
        "content": record["content"],
        "jobTitle": record["job_title"],
        "companyName": record["company_name"],
        "jobDescription": record["job_description"],
        "status": record["status"],
        "source": record.get("source"),
        "userId": record["user_id"],
        "createdAt": record["created_at"].isoformat(),
        "updatedAt": record["updated_at"].isoformat(),
    }


@bp.post("")
def create_cover_letter():
    """Generate a cover letter from the job details in the request body."""
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        record = cover_letter_service.generate_cover_letter(current_orchestrator(), user, payload)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    except PersistenceError as exc:
        current_app.logger.exception("Failed to store cover letter")
        return jsonify(error=str(exc)), 500

    return jsonify(coverLetter=serialize_cover_letter(record)), 201


@bp.get("")
def list_cover_letters():
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    try:
        records = cover_letter_service.get_cover_letters(user)
    except PyMongoError:
        current_app.logger.exception("Failed to list cover letters")
        return jsonify(error="Failed to fetch cover letters."), 500

    return jsonify(coverLetters=[serialize_cover_letter(record) for record in records]), 200


@bp.get("/<letter_id>")
def get_cover_letter(letter_id: str):
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    record = cover_letter_service.get_cover_letter(user, letter_id)
    if record is None:
        return jsonify(error="Cover letter not found."), 404

    return jsonify(coverLetter=serialize_cover_letter(record)), 200


@bp.delete("/<letter_id>")
def delete_cover_letter(letter_id: str):
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    if not cover_letter_service.delete_cover_letter(user, letter_id):
        return jsonify(error="Cover letter not found."), 404

    return jsonify(deleted=True, id=letter_id), 200
