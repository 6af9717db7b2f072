"""Interview quizzes and graded assessments."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pymongo.errors import PyMongoError

from careercoach import database
from careercoach.errors import PersistenceError
from careercoach.services.fallbacks import FALLBACK_QUIZ_QUESTIONS
from careercoach.services.generation import GenerationOrchestrator
from careercoach.services.prompts import build_improvement_prompt, build_quiz_prompt
from careercoach.utils.text import has_non_empty_list

_LOGGER = logging.getLogger(__name__)

ASSESSMENT_CATEGORY = "Technical"


def is_valid_quiz_payload(payload: Any) -> bool:
    return has_non_empty_list(payload, "questions")


def generate_quiz(orchestrator: GenerationOrchestrator, user: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return a batch of multiple-choice questions tailored to the user's profile."""
    generated = orchestrator.generate_json(
        build_quiz_prompt(user),
        {"questions": FALLBACK_QUIZ_QUESTIONS},
        validate=is_valid_quiz_payload,
    )
    return generated.value["questions"]


def grade_answers(questions: Sequence[Mapping[str, Any]], answers: Sequence[Any]) -> List[Dict[str, Any]]:
    """Compare each submitted answer with the question's correct answer."""
    results = []
    for index, question in enumerate(questions):
        user_answer = answers[index] if index < len(answers) else None
        correct_answer = question.get("correctAnswer")
        results.append(
            {
                "question": question.get("question"),
                "correct_answer": correct_answer,
                "user_answer": user_answer,
                "is_correct": user_answer is not None and correct_answer == user_answer,
                "explanation": question.get("explanation"),
            }
        )
    return results


def calculate_score(results: Sequence[Mapping[str, Any]]) -> float:
    """Fraction of correctly answered questions (0.0 for an empty quiz)."""
    if not results:
        return 0.0
    correct = sum(1 for result in results if result["is_correct"])
    return correct / len(results)


def generate_improvement_tip(
    orchestrator: GenerationOrchestrator,
    user: Mapping[str, Any],
    results: Sequence[Mapping[str, Any]],
) -> Optional[str]:
    """Return a short study tip for the wrong answers, or None."""
    wrong_answers = [result for result in results if not result["is_correct"]]
    if not wrong_answers or not orchestrator.enabled:
        return None

    generated = orchestrator.generate_text(
        build_improvement_prompt(user.get("industry"), wrong_answers),
        None,
    )
    return generated.value


def _assessment_document(
    user: Mapping[str, Any],
    results: List[Dict[str, Any]],
    score: float,
    improvement_tip: Optional[str],
) -> Dict[str, Any]:
    return {
        "user_id": user["id"],
        "quiz_score": score,
        "questions": results,
        "category": ASSESSMENT_CATEGORY,
        "improvement_tip": improvement_tip,
        "created_at": datetime.utcnow(),
    }


def save_quiz_result(
    orchestrator: GenerationOrchestrator,
    user: Mapping[str, Any],
    questions: Sequence[Mapping[str, Any]],
    answers: Sequence[Any],
) -> Dict[str, Any]:
    """
    Grade a quiz submission and store the assessment.

    Raises:
        ValueError: if there are no questions
        PersistenceError: if the assessment cannot be stored
    """
    if not questions:
        raise ValueError("At least one question is required.")

    results = grade_answers(questions, answers)
    score = calculate_score(results)
    improvement_tip = generate_improvement_tip(orchestrator, user, results)

    collection = database.get_collection("assessments")
    document = _assessment_document(user, results, score, improvement_tip)
    try:
        collection.insert_one(document)
    except PyMongoError:
        _LOGGER.exception("Failed to save quiz result for user %s; retrying without tip", user["id"])
        document = _assessment_document(user, results, score, None)
        try:
            collection.insert_one(document)
        except PyMongoError as exc:
            raise PersistenceError("Failed to save quiz result") from exc

    return database.serialize_document(document)


def get_assessments(user: Mapping[str, Any]) -> List[Dict[str, Any]]:
    """Return the user's assessments, oldest first."""
    collection = database.get_collection("assessments")
    try:
        cursor = collection.find({"user_id": user["id"]}).sort("created_at", 1)
        return [database.serialize_document(record) for record in cursor]
    except PyMongoError as exc:
        raise PersistenceError("Failed to fetch assessments") from exc
