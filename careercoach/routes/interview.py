"""/api/interview endpoints for quizzes and assessments."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request

from careercoach.errors import PersistenceError
from careercoach.services import interview_service
from careercoach.services.generation import current_orchestrator
from careercoach.utils.auth import require_user

bp = Blueprint("interview", __name__, url_prefix="/api/interview")


def serialize_assessment(record: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": record["id"],
        "userId": record["user_id"],
        "quizScore": record["quiz_score"],
        "category": record["category"],
        "improvementTip": record.get("improvement_tip"),
        "questions": [
            {
                "question": item["question"],
                "correctAnswer": item["correct_answer"],
                "userAnswer": item["user_answer"],
                "isCorrect": item["is_correct"],
                "explanation": item["explanation"],
            }
            for item in record["questions"]
        ],
        "createdAt": record["created_at"].isoformat(),
    }


@bp.post("/quiz")
def create_quiz():
    """Generate a fresh batch of multiple-choice questions."""
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    questions = interview_service.generate_quiz(current_orchestrator(), user)
    return jsonify(questions=questions), 200


@bp.post("/assessments")
def create_assessment():
    """Grade the submitted answers and store the assessment."""
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    questions = payload.get("questions")
    answers = payload.get("answers")

    if not isinstance(questions, list) or not all(isinstance(item, dict) for item in questions):
        return jsonify(error="'questions' must be a list of question objects."), 400
    if not isinstance(answers, list):
        return jsonify(error="'answers' must be a list."), 400

    try:
        record = interview_service.save_quiz_result(current_orchestrator(), user, questions, answers)
    except ValueError as exc:
        return jsonify(error=str(exc)), 400
    except PersistenceError as exc:
        current_app.logger.exception("Failed to save quiz result")
        return jsonify(error=str(exc)), 500

    return jsonify(assessment=serialize_assessment(record)), 201


@bp.get("/assessments")
def list_assessments():
    user, error_response = require_user()
    if error_response is not None:
        return error_response

    try:
        records = interview_service.get_assessments(user)
    except PersistenceError as exc:
        current_app.logger.exception("Failed to fetch assessments")
        return jsonify(error=str(exc)), 500

    return jsonify(assessments=[serialize_assessment(record) for record in records]), 200
