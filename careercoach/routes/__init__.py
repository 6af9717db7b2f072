"""Blueprint registration helper."""

from __future__ import annotations

from flask import Flask, jsonify

from .auth import bp as auth_bp
from .cover_letters import bp as cover_letters_bp
from .insights import bp as insights_bp
from .interview import bp as interview_bp
from .users import bp as users_bp


def register_routes(app: Flask) -> None:
    """Register all application blueprints on the provided Flask app."""
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(cover_letters_bp)
    app.register_blueprint(insights_bp)
    app.register_blueprint(interview_bp)

    @app.get("/")
    def index():
        return jsonify(message="Hello from the Career Coach API"), 200
