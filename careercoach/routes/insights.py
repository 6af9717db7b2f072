"""/api/insights endpoint backing the industry dashboard."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify

from careercoach.errors import PersistenceError
from careercoach.services import insight_service
from careercoach.services.generation import current_orchestrator
from careercoach.utils.auth import require_user

bp = Blueprint("insights", __name__, url_prefix="/api/insights")


def serialize_insight(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": record["id"],
        "industry": record["industry"],
        "salaryRanges": record.get("salary_ranges") or [],
        "growthRate": record.get("growth_rate"),
        "demandLevel": record.get("demand_level"),
        "topSkills": record.get("top_skills") or [],
        "marketOutlook": record.get("market_outlook"),
        "keyTrends": record.get("key_trends") or [],
        "recommendedSkills": record.get("recommended_skills") or [],
        "source": record.get("source"),
        "lastUpdated": record["last_updated"].isoformat(),
        "nextUpdate": record["next_update"].isoformat(),
    }


@bp.get("")
def get_industry_insights():
    """Return the insights for the signed-in user's industry, generating them on first use."""
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    try:
        record = insight_service.get_industry_insights(current_orchestrator(), user)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    except PersistenceError as exc:
        current_app.logger.exception("Failed to store industry insights")
        return jsonify(error=str(exc)), 500

    return jsonify(insights=serialize_insight(record)), 200
