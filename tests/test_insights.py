"""Tests for industry insight generation and caching."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from pymongo.errors import PyMongoError

from careercoach import database
from careercoach.errors import PersistenceError
from careercoach.services import insight_service
from careercoach.services.fallbacks import DEFAULT_INDUSTRY_INSIGHTS

AI_INSIGHTS = {
    "salaryRanges": [
        {"role": "Data Engineer", "min": 90000, "max": 160000, "median": 125000, "location": "US"},
        {"role": "ML Engineer", "min": 110000, "max": 190000, "median": 150000, "location": "US"},
        {"role": "Analytics Engineer", "min": 85000, "max": 140000, "median": 110000, "location": "US"},
        {"role": "Platform Engineer", "min": 100000, "max": 170000, "median": 135000, "location": "EU"},
        {"role": "Data Scientist", "min": 95000, "max": 175000, "median": 130000, "location": "EU"},
    ],
    "growthRate": 11.2,
    "demandLevel": "High",
    "topSkills": ["Python", "Spark", "SQL", "dbt", "Airflow"],
    "marketOutlook": "Positive",
    "keyTrends": ["Lakehouses", "LLM tooling", "Streaming", "Data contracts", "FinOps"],
    "recommendedSkills": ["Kafka", "Terraform", "Rust", "Iceberg", "Kubernetes"],
}


def test_valid_ai_insights_are_returned_unchanged(ai_orchestrator):
    orchestrator, client = ai_orchestrator(json.dumps(AI_INSIGHTS))

    generated = insight_service.generate_ai_insights(orchestrator, "Data")

    assert generated.source == "ai"
    assert generated.value == AI_INSIGHTS
    assert len(generated.value["salaryRanges"]) == 5
    assert "Analyze the current state of the Data industry" in client.calls[0]["input"]


def test_fenced_ai_insights_are_parsed(ai_orchestrator):
    orchestrator, _ = ai_orchestrator("```json\n" + json.dumps(AI_INSIGHTS) + "\n```")

    generated = insight_service.generate_ai_insights(orchestrator, "Data")

    assert generated.value == AI_INSIGHTS


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({**AI_INSIGHTS, "salaryRanges": []}),
        json.dumps({"growthRate": 3}),
    ],
)
def test_unusable_ai_insights_fall_back(ai_orchestrator, raw):
    orchestrator, _ = ai_orchestrator(raw)

    generated = insight_service.generate_ai_insights(orchestrator, "Data")

    assert generated.is_fallback
    assert generated.value == DEFAULT_INDUSTRY_INSIGHTS


def test_insights_are_created_once_per_industry(ai_orchestrator, user, mongo_db):
    orchestrator, client = ai_orchestrator(json.dumps(AI_INSIGHTS))

    first = insight_service.get_industry_insights(orchestrator, user)
    second = insight_service.get_industry_insights(orchestrator, user)

    assert len(client.calls) == 1
    assert first["id"] == second["id"]
    assert first["industry"] == "Software Development"
    assert first["salary_ranges"] == AI_INSIGHTS["salaryRanges"]
    assert first["demand_level"] == "High"
    assert first["source"] == "ai"
    assert mongo_db.industry_insights.count_documents({}) == 1


def test_offline_insights_use_defaults_and_schedule_next_update(offline_orchestrator, user):
    record = insight_service.get_industry_insights(offline_orchestrator, user)

    assert record["source"] == "fallback"
    assert record["growth_rate"] == DEFAULT_INDUSTRY_INSIGHTS["growthRate"]
    assert record["top_skills"] == DEFAULT_INDUSTRY_INSIGHTS["topSkills"]
    assert record["next_update"] - record["last_updated"] == timedelta(days=7)


def test_insights_are_shared_between_users_of_an_industry(offline_orchestrator, user, mongo_db):
    colleague = dict(user, id="someone-else")

    first = insight_service.get_industry_insights(offline_orchestrator, user)
    second = insight_service.get_industry_insights(offline_orchestrator, colleague)

    assert first["id"] == second["id"]


def test_missing_industry_is_rejected(offline_orchestrator, user):
    with pytest.raises(ValueError):
        insight_service.get_industry_insights(offline_orchestrator, dict(user, industry=None))


def test_write_failure_retries_with_defaults_then_raises(monkeypatch, offline_orchestrator, user, mongo_db):
    attempts = []

    class BrokenInsights:
        def insert_one(self, document):
            attempts.append(document)
            raise PyMongoError("write failed")

        def find_one(self, *args, **kwargs):
            return None

    real = database.get_collection
    monkeypatch.setattr(
        database,
        "get_collection",
        lambda name: BrokenInsights() if name == "industry_insights" else real(name),
    )

    with pytest.raises(PersistenceError):
        insight_service.get_industry_insights(offline_orchestrator, user)

    assert len(attempts) == 2
    assert attempts[1]["source"] == "fallback"
