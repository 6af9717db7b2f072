"""Prompt builders for the AI-backed features.

All functions here are pure: they only format the profile and request data
they are given.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from careercoach.utils.text import clamp_text

JOB_TITLE_MAX_LENGTH = 120
COMPANY_NAME_MAX_LENGTH = 120
JOB_DESCRIPTION_MAX_LENGTH = 4_000

MISSING_VALUE = "N/A"
QUIZ_QUESTION_COUNT = 10


def normalize_skills(value: Any) -> List[str]:
    """Return the profile skills as a list of non-empty strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(skill).strip() for skill in value if str(skill).strip()]
    text = str(value).strip()
    return [text] if text else []


def _field(profile: Mapping[str, Any], key: str) -> str:
    value = profile.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return MISSING_VALUE
    return str(value).strip()


def sanitize_cover_letter_request(data: Mapping[str, Any]) -> Dict[str, str]:
    """Trim and truncate the cover letter fields; job title and company are required."""
    request = {
        "job_title": clamp_text(data.get("jobTitle"), JOB_TITLE_MAX_LENGTH),
        "company_name": clamp_text(data.get("companyName"), COMPANY_NAME_MAX_LENGTH),
        "job_description": clamp_text(data.get("jobDescription"), JOB_DESCRIPTION_MAX_LENGTH),
    }
    if not request["job_title"]:
        raise ValueError("jobTitle is required.")
    if not request["company_name"]:
        raise ValueError("companyName is required.")
    return request


def build_cover_letter_prompt(profile: Mapping[str, Any], request: Mapping[str, str]) -> str:
    skills = normalize_skills(profile.get("skills"))
    lines = [
        f"Write a professional cover letter for a {request['job_title']} position at {request['company_name']}.",
        "",
        "About the candidate:",
        f"- Industry: {_field(profile, 'industry')}",
        f"- Years of Experience: {_field(profile, 'experience')}",
        f"- Skills: {', '.join(skills) if skills else MISSING_VALUE}",
        f"- Professional Background: {_field(profile, 'bio')}",
        "",
        "Job Description:",
        request["job_description"] or MISSING_VALUE,
        "",
        "Requirements:",
        "1. Use a professional, enthusiastic tone",
        "2. Highlight relevant skills and experience",
        "3. Show understanding of the company's needs",
        "4. Keep it concise (max 400 words)",
        "5. Use proper business letter formatting in markdown",
        "6. Include specific examples of achievements",
        "7. Relate candidate's background to job requirements",
        "",
        "Format the letter in markdown. Output ONLY the letter, with no introduction or commentary.",
    ]
    return "\n".join(lines)


def build_insights_prompt(industry: str) -> str:
    return "\n".join(
        [
            f"Analyze the current state of the {industry} industry and provide insights in ONLY the "
            "following JSON format without any additional notes or explanations:",
            "{",
            '  "salaryRanges": [',
            '    { "role": "string", "min": number, "max": number, "median": number, "location": "string" }',
            "  ],",
            '  "growthRate": number,',
            '  "demandLevel": "High" | "Medium" | "Low",',
            '  "topSkills": ["skill1", "skill2"],',
            '  "marketOutlook": "Positive" | "Neutral" | "Negative",',
            '  "keyTrends": ["trend1", "trend2"],',
            '  "recommendedSkills": ["skill1", "skill2"]',
            "}",
            "",
            "IMPORTANT: Return ONLY the JSON. No additional text, notes, or markdown formatting.",
            "Include at least 5 common roles for salary ranges.",
            "Growth rate should be a percentage.",
            "Include at least 5 skills and trends.",
        ]
    )


def build_quiz_prompt(profile: Mapping[str, Any]) -> str:
    skills = normalize_skills(profile.get("skills"))
    expertise = f" with expertise in {', '.join(skills)}" if skills else ""
    return "\n".join(
        [
            f"Generate {QUIZ_QUESTION_COUNT} technical interview questions for a "
            f"{_field(profile, 'industry')} professional{expertise}.",
            "",
            "Each question should be multiple choice with 4 options.",
            "",
            "Return the response in this JSON format only, no additional text:",
            "{",
            '  "questions": [',
            "    {",
            '      "question": "string",',
            '      "options": ["string", "string", "string", "string"],',
            '      "correctAnswer": "string",',
            '      "explanation": "string"',
            "    }",
            "  ]",
            "}",
        ]
    )


def build_improvement_prompt(industry: Any, wrong_answers: List[Mapping[str, Any]]) -> str:
    """Ask for a short study tip based on the questions the user got wrong."""
    details = "\n\n".join(
        f'Question: "{item["question"]}"\n'
        f'Correct Answer: "{item["correct_answer"]}"\n'
        f'User Answer: "{item["user_answer"] if item.get("user_answer") is not None else MISSING_VALUE}"'
        for item in wrong_answers
    )
    industry_label = str(industry).strip() if industry else MISSING_VALUE
    return "\n".join(
        [
            f"The user got the following {industry_label} technical interview questions wrong:",
            "",
            details,
            "",
            "Based on these mistakes, provide a concise, specific improvement tip.",
            "Focus on the knowledge gaps revealed by these wrong answers.",
            "Keep the response under 2 sentences and make it encouraging.",
            "Don't explicitly mention the mistakes, instead focus on what to learn/practice.",
        ]
    )
