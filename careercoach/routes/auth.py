"""/api/auth routes handling workspace-code login and sessions."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pymongo.errors import PyMongoError

from careercoach.services import auth_service, user_service
from careercoach.utils.auth import (
    CODE_TTL_SECONDS,
    SESSION_TTL_SECONDS,
    bearer_token,
    generate_code,
    generate_token,
    now_seconds,
    require_session,
)

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/request-code")
def request_code():
    """Issue a workspace code; the code doubles as the user's identity subject.

    Returning users can pass their existing code as ``code`` to log back in.
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    provided_code = payload.get("code")

    if provided_code and isinstance(provided_code, str) and provided_code.strip():
        code = provided_code.strip().upper()
    else:
        code = generate_code()

    expires_at = now_seconds() + CODE_TTL_SECONDS

    try:
        auth_service.issue_code(code, expires_at)
    except PyMongoError:
        current_app.logger.exception("Failed to save verification code")
        return jsonify(error="Could not issue a code right now."), 500

    return (
        jsonify(
            code=code,
            expiresAt=expires_at * 1000,
        ),
        200,
    )


@bp.post("/verify")
def verify_code():
    """Exchange a workspace code for a session token and make sure the user exists."""
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    code = str(payload.get("code") or "").strip().upper()

    if not code:
        return jsonify(error="Code is required."), 400

    try:
        redeemed = auth_service.redeem_code(code, now_seconds())
        # An existing workspace can be re-entered without a fresh code.
        if not redeemed and user_service.get_user_by_subject(code) is None:
            return jsonify(error="Invalid or expired code."), 401
        subject = code

        user = user_service.upsert_user(
            subject,
            name=payload.get("name"),
            email=payload.get("email"),
            image_url=payload.get("imageUrl"),
        )

        expires_at = now_seconds() + SESSION_TTL_SECONDS
        token = generate_token("sess")
        auth_service.open_session(token, subject, expires_at)
    except PyMongoError:
        current_app.logger.exception("Failed to create session")
        return jsonify(error="Could not start a session right now."), 500

    return (
        jsonify(
            token=token,
            userId=user["id"],
            expiresAt=expires_at * 1000,
        ),
        200,
    )


@bp.get("/session")
def get_session_info():
    """Return information about the current session token if it is valid."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    return (
        jsonify(
            token=session["token"],
            subject=session["subject"],
            expiresAt=session["expires_at"] * 1000,
        ),
        200,
    )


@bp.post("/logout")
def logout():
    """Revoke the bearer token used for this request."""
    session, error_response = require_session()
    if error_response is not None:
        return error_response

    auth_service.close_session(bearer_token())
    return jsonify(message="Logged out."), 200
