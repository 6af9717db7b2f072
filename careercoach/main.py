"""Flask application setup and blueprint wiring."""

from __future__ import annotations

import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from careercoach import database
from careercoach.routes import register_routes
from careercoach.services.generation import EXTENSION_KEY, GenerationOrchestrator
from careercoach.utils.auth import register_session_cleanup

REQUEST_LIMIT_BYTES = 1 * 1024 * 1024  # 1 MB per request


def create_app(orchestrator: Optional[GenerationOrchestrator] = None) -> Flask:
    """Configure and return the Flask application instance.

    The generation orchestrator is built once here from the ``OPENAI_*``
    environment unless one is passed in.
    """
    app = Flask(__name__)
    origins = os.getenv("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": origins}})

    app.config["MAX_CONTENT_LENGTH"] = REQUEST_LIMIT_BYTES

    if orchestrator is None:
        orchestrator = GenerationOrchestrator.from_env()
    app.extensions[EXTENSION_KEY] = orchestrator
    if orchestrator.enabled:
        app.logger.info("Text generation enabled (model %s)", orchestrator.config.model)
    else:
        app.logger.warning("OPENAI_API_KEY is not set; serving fallback content only")

    register_session_cleanup(app)
    register_routes(app)

    try:
        with app.app_context():
            database.create_indexes()
            app.logger.info("MongoDB indexes created successfully")
    except Exception as e:
        app.logger.warning(f"Failed to create MongoDB indexes: {e}")

    return app
