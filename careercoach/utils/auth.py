"""Authentication helpers for session and token management."""

from __future__ import annotations

import secrets
import time
from typing import Any, Dict, Optional, Tuple

from flask import Flask, current_app, jsonify, request

from careercoach.services import auth_service, user_service

# Session and code expiry windows (seconds).
CODE_TTL_SECONDS = 5 * 60
SESSION_TTL_SECONDS = 24 * 60 * 60

# Minimum gap between two housekeeping sweeps.
CLEANUP_INTERVAL_SECONDS = 60

_last_cleanup = 0


def now_seconds() -> int:
    """Return the current UNIX timestamp in seconds."""
    return int(time.time())


def generate_code() -> str:
    """Return a pseudo-random six character workspace code."""
    # Excludes look-alike characters (0, O, 1, I)
    chars = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
    return ''.join(secrets.choice(chars) for _ in range(6))


def generate_token(prefix: str = "sess") -> str:
    """Return a random token with the given prefix."""
    return f"{prefix}_{secrets.token_urlsafe(24)}"


def bearer_token() -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


def require_session() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Validate the Bearer token from the request and return the associated session."""
    token = bearer_token()
    if token is None:
        return None, (jsonify(error="Missing authorization token."), 401)

    session = auth_service.find_session(token)
    if not session:
        return None, (jsonify(error="Invalid or expired session."), 401)

    if session["expires_at"] <= now_seconds():
        auth_service.close_session(token)
        return None, (jsonify(error="Session expired."), 401)

    return session, None


def require_user() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """Resolve the session's subject to its stored profile."""
    session, error_response = require_session()
    if error_response is not None:
        return None, error_response

    user = user_service.get_user_by_subject(session["subject"])
    if user is None:
        return None, (jsonify(error="User not found."), 404)

    return user, None


def register_session_cleanup(app: Flask) -> None:
    """Attach a before-request handler that prunes expired codes and sessions."""

    @app.before_request  # pragma: no cover - trivial wiring
    def _cleanup_state() -> None:
        global _last_cleanup
        current = now_seconds()
        if current - _last_cleanup < CLEANUP_INTERVAL_SECONDS:
            return
        _last_cleanup = current
        try:
            auth_service.purge_expired(current)
        except Exception:
            current_app.logger.warning("Failed to prune expired sessions", exc_info=True)
