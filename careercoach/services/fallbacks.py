"""Deterministic substitutes used when text generation is unavailable."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from careercoach.services.prompts import normalize_skills

DEFAULT_INDUSTRY_INSIGHTS: Dict[str, Any] = {
    "salaryRanges": [
        {"role": "Software Engineer", "min": 40000, "max": 120000, "median": 80000, "location": "Remote"},
        {"role": "Data Analyst", "min": 35000, "max": 90000, "median": 60000, "location": "Remote"},
        {"role": "Product Manager", "min": 50000, "max": 140000, "median": 90000, "location": "Remote"},
        {"role": "QA Engineer", "min": 30000, "max": 80000, "median": 55000, "location": "Remote"},
        {"role": "DevOps Engineer", "min": 50000, "max": 130000, "median": 85000, "location": "Remote"},
    ],
    "growthRate": 8.5,
    "demandLevel": "High",
    "topSkills": ["JavaScript", "SQL", "Cloud", "APIs", "Problem Solving"],
    "marketOutlook": "Positive",
    "keyTrends": ["AI adoption", "Cloud migration", "Automation", "Security focus", "Remote work"],
    "recommendedSkills": ["TypeScript", "Python", "System Design", "Docker", "Kubernetes"],
}

FALLBACK_QUIZ_QUESTIONS: List[Dict[str, Any]] = [
    {
        "question": "Which HTTP method is idempotent?",
        "options": ["POST", "PUT", "PATCH", "CREATE"],
        "correctAnswer": "PUT",
        "explanation": "PUT is idempotent; multiple identical requests have the same effect.",
    },
    {
        "question": "What does ACID stand for in databases?",
        "options": [
            "Atomicity, Consistency, Isolation, Durability",
            "Availability, Consistency, Isolation, Durability",
            "Atomicity, Concurrency, Integrity, Durability",
            "Availability, Concurrency, Integrity, Durability",
        ],
        "correctAnswer": "Atomicity, Consistency, Isolation, Durability",
        "explanation": "ACID describes key transaction properties in RDBMS.",
    },
    {
        "question": "Which is NOT a JavaScript primitive?",
        "options": ["string", "number", "object", "boolean"],
        "correctAnswer": "object",
        "explanation": "Objects are reference types, not primitives.",
    },
    {
        "question": "In Git, which command creates a new branch and switches to it?",
        "options": ["git checkout -b", "git branch -m", "git switch -c", "Both 1 and 3"],
        "correctAnswer": "Both 1 and 3",
        "explanation": "Both 'git checkout -b' and 'git switch -c' create and switch.",
    },
    {
        "question": "Which Big-O represents binary search on a sorted array?",
        "options": ["O(n)", "O(log n)", "O(n log n)", "O(1)"],
        "correctAnswer": "O(log n)",
        "explanation": "Binary search halves the search space each step.",
    },
    {
        "question": "What is the purpose of a load balancer?",
        "options": [
            "Distribute traffic across servers",
            "Store session data",
            "Encrypt database records",
            "Compile application code",
        ],
        "correctAnswer": "Distribute traffic across servers",
        "explanation": "Balances requests for availability and performance.",
    },
    {
        "question": "What does 'idempotent' mean in REST APIs?",
        "options": [
            "Multiple identical requests result in the same state",
            "The server never returns errors",
            "The request has no side effects",
            "The response is always cached",
        ],
        "correctAnswer": "Multiple identical requests result in the same state",
        "explanation": "Idempotency allows safe retries.",
    },
    {
        "question": "Which SQL clause filters rows?",
        "options": ["ORDER BY", "GROUP BY", "WHERE", "JOIN"],
        "correctAnswer": "WHERE",
        "explanation": "WHERE filters rows before grouping.",
    },
    {
        "question": "Which AWS service is serverless compute?",
        "options": ["EC2", "Lambda", "ECS", "EBS"],
        "correctAnswer": "Lambda",
        "explanation": "Lambda runs code without managing servers.",
    },
    {
        "question": "Which data structure is best for LRU cache?",
        "options": ["Stack", "Queue", "HashMap + Doubly Linked List", "Binary Tree"],
        "correctAnswer": "HashMap + Doubly Linked List",
        "explanation": "Enables O(1) get/put and eviction.",
    },
]


def _or_default(value: Any, default: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return str(value).strip()


def build_fallback_cover_letter(profile: Mapping[str, Any], request: Mapping[str, str]) -> str:
    """Fill the stock cover letter template from the profile and sanitized request."""
    job_title = request["job_title"]
    company_name = request["company_name"]
    experience = _or_default(profile.get("experience"), "relevant")
    industry = _or_default(profile.get("industry"), "the industry")
    name = _or_default(profile.get("name"), "Candidate")
    skills = normalize_skills(profile.get("skills"))[:5]
    strengths = ", ".join(skills) if skills else "collaboration and problem solving"

    paragraphs = [
        "Dear Hiring Manager,",
        f"I am excited to apply for the {job_title} role at {company_name}. "
        f"With {experience} years of experience and strengths in {strengths}, "
        "I believe I can contribute meaningfully to your team.",
        "In my recent work, I have delivered measurable outcomes through collaboration, ownership, "
        "and continuous improvement. I am particularly drawn to this opportunity because it aligns "
        f"with my background in {industry} and my interest in driving impact for {company_name}.",
        "Highlights:\n"
        "- Built solutions that improved efficiency and customer outcomes.\n"
        "- Communicated clearly with cross-functional partners to deliver on goals.\n"
        "- Continuously learned new tools and best practices to raise quality.",
        f"I would welcome the opportunity to discuss how my skills can support {company_name}. "
        "Thank you for your time and consideration.",
        f"Sincerely,\n{name}",
    ]
    return "\n\n".join(paragraphs)
