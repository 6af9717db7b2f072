"""/api/users endpoints for the signed-in user's profile."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from careercoach.services import user_service
from careercoach.utils.auth import require_user

bp = Blueprint("users", __name__, url_prefix="/api/users")


def serialize_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "imageUrl": user.get("image_url"),
        "industry": user.get("industry"),
        "experience": user.get("experience"),
        "skills": user.get("skills") or [],
        "bio": user.get("bio"),
        "onboarded": bool(user.get("industry")),
    }


@bp.get("/me")
def get_current_user():
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    return jsonify(user=serialize_user(user)), 200


@bp.put("/me")
def update_current_user():
    """Save the onboarding profile (industry, experience, skills, bio)."""
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    payload: Dict[str, Any] = request.get_json(silent=True) or {}

    try:
        updated = user_service.update_profile(
            user["subject"],
            industry=payload.get("industry"),
            experience=payload.get("experience"),
            skills=payload.get("skills"),
            bio=payload.get("bio"),
        )
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    except LookupError:
        return jsonify(error="User not found."), 404
    except PyMongoError:
        current_app.logger.exception("Failed to update profile")
        return jsonify(error="Failed to update profile."), 500

    return jsonify(user=serialize_user(updated)), 200
