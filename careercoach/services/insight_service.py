"""Industry insights: generated once per industry and then served from storage."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Mapping, Optional

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from careercoach import database
from careercoach.errors import PersistenceError
from careercoach.services.fallbacks import DEFAULT_INDUSTRY_INSIGHTS
from careercoach.services.generation import SOURCE_FALLBACK, Generated, GenerationOrchestrator
from careercoach.services.prompts import build_insights_prompt
from careercoach.utils.text import has_non_empty_list

_LOGGER = logging.getLogger(__name__)

# nextUpdate is informational; stored insights are never regenerated.
REFRESH_INTERVAL = timedelta(days=7)

INSIGHT_FIELDS = {
    "salaryRanges": "salary_ranges",
    "growthRate": "growth_rate",
    "demandLevel": "demand_level",
    "topSkills": "top_skills",
    "marketOutlook": "market_outlook",
    "keyTrends": "key_trends",
    "recommendedSkills": "recommended_skills",
}


def is_valid_insight_payload(payload: Any) -> bool:
    return has_non_empty_list(payload, "salaryRanges")


def generate_ai_insights(orchestrator: GenerationOrchestrator, industry: str) -> Generated:
    """Ask the model for insights on ``industry``; falls back to the default table."""
    return orchestrator.generate_json(
        build_insights_prompt(industry),
        DEFAULT_INDUSTRY_INSIGHTS,
        validate=is_valid_insight_payload,
    )


def _insight_document(industry: str, insights: Mapping[str, Any], source: str) -> Dict[str, Any]:
    now = datetime.utcnow()
    document: Dict[str, Any] = {"industry": industry}
    for payload_key, field in INSIGHT_FIELDS.items():
        document[field] = insights.get(payload_key)
    document.update(
        {
            "source": source,
            "last_updated": now,
            "next_update": now + REFRESH_INTERVAL,
            "created_at": now,
        }
    )
    return document


def get_insight_for_industry(industry: str) -> Optional[Dict[str, Any]]:
    collection = database.get_collection("industry_insights")
    return database.serialize_document(collection.find_one({"industry": industry}))


def _insert_insight(collection: Collection, document: Dict[str, Any]) -> Dict[str, Any]:
    try:
        collection.insert_one(document)
    except DuplicateKeyError:
        # Another request stored this industry first.
        winner = get_insight_for_industry(document["industry"])
        if winner is None:
            raise PersistenceError("Failed to save industry insights")
        return winner
    return database.serialize_document(document)


def get_industry_insights(orchestrator: GenerationOrchestrator, user: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return the insights for the user's industry, generating them on first use.

    Raises:
        ValueError: if the user has not chosen an industry yet
        PersistenceError: if the generated insights cannot be stored
    """
    industry = (user.get("industry") or "").strip()
    if not industry:
        raise ValueError("Complete your profile with an industry first.")

    existing = get_insight_for_industry(industry)
    if existing is not None:
        return existing

    generated = generate_ai_insights(orchestrator, industry)
    collection = database.get_collection("industry_insights")

    try:
        return _insert_insight(collection, _insight_document(industry, generated.value, generated.source))
    except PyMongoError:
        _LOGGER.exception("Failed to store insights for %s; retrying with defaults", industry)

    fallback = copy.deepcopy(DEFAULT_INDUSTRY_INSIGHTS)
    try:
        return _insert_insight(collection, _insight_document(industry, fallback, SOURCE_FALLBACK))
    except PyMongoError as exc:
        raise PersistenceError("Failed to save industry insights") from exc
