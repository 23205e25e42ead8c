import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import mongomock
import pytest
from fastapi.testclient import TestClient

from careercatalyst.db import mongodb
from careercatalyst.services.career_service import CareerGuidanceService
from careercatalyst.services.groq_client import GroqClient


@pytest.fixture
def mongo(monkeypatch):
    """In-memory MongoDB with the production indexes."""
    monkeypatch.setattr(mongodb, "_client", mongomock.MongoClient())
    monkeypatch.setattr(mongodb, "_db", None)
    mongodb.init_mongo_indexes()
    return mongodb.get_mongo_db()


@pytest.fixture
def client(mongo):
    from careercatalyst.main import app
    return TestClient(app)


def completion(content):
    """Chat completion shaped like the openai SDK's response object."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_mock():
    return MagicMock()


@pytest.fixture
def queue_replies(openai_mock):
    """Queue model replies (dicts are JSON-encoded) for successive calls."""
    def _queue(*replies):
        openai_mock.chat.completions.create.side_effect = [
            completion(r if isinstance(r, str) else json.dumps(r)) for r in replies
        ]
    return _queue


@pytest.fixture
def career_service(openai_mock):
    return CareerGuidanceService(ai_client=GroqClient(client=openai_mock))


def register_and_login(client, user_type, email=None, password="secret123"):
    email = email or f"{user_type.lower()}@example.com"
    response = client.post("/api/auth/register", json={
        "name": f"Test {user_type}",
        "email": email,
        "password": password,
        "userType": user_type,
    })
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    body = response.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]


# ============================================================
# Sample model replies
# ============================================================

GAP_ANALYSIS = {
    "analysis": {
        "role": "Frontend Developer",
        "currentSkillsAssessment": {
            "strengths": ["JavaScript"],
            "relevance": "JavaScript is the core language of the web."
        },
        "missingSkills": [
            {
                "skill": "React",
                "priority": "high",
                "timeToAcquire": "2 months",
                "impact": "Most frontend roles require a component framework.",
                "learningPath": {
                    "steps": ["Learn JSX", "Build a todo app"],
                    "resources": [{"name": "React docs", "type": "documentation"}]
                }
            }
        ]
    }
}

ROADMAP = {
    "roadmap": {
        "estimatedTotalDuration": "3 months",
        "phases": [
            {
                "phase": 1,
                "title": "Foundations",
                "duration": "4 weeks",
                "focusAreas": ["Components", "State"],
                "skills": [
                    {
                        "skill": "React",
                        "level": "Intermediate",
                        "resources": [
                            {"type": "course", "name": "React Basics", "platform": "Coursera",
                             "duration": "4 weeks", "cost": "Free"}
                        ],
                        "projects": [
                            {"title": "Todo App", "description": "A small CRUD app",
                             "skills": ["React"], "difficulty": "Beginner"}
                        ]
                    }
                ],
                "milestones": ["Ship a React app"]
            }
        ]
    }
}

RECOMMENDATIONS = {
    "careerMatches": [
        {
            "role": "Frontend Developer",
            "matchPercentage": "85%",
            "averageSalary": "$70k - $90k",
            "marketDemand": "High",
            "description": "Builds user interfaces.",
            "requiredSkills": ["JavaScript", "React"],
            "skillGaps": [
                {"skill": "React", "priority": "High", "timeToAcquire": "2 months",
                 "impact": "Required by most job posts"}
            ],
            "learningRoadmap": [
                {"phase": 1, "focus": "React", "duration": "2 months",
                 "resources": [{"type": "course", "name": "React Basics", "platform": "Coursera"}]}
            ]
        }
    ]
}
