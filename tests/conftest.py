"""
Shared fixtures: in-memory MongoDB (mongomock), API test client and helpers
for registering users and posting jobs.
"""
import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("COLLEGE_EMAIL_DOMAIN", "@cmrec.ac.in")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from jobboard.db import mongodb
from jobboard.main import app

CURRENT_YEAR = datetime.utcnow().year


@pytest.fixture(autouse=True)
def mongo_db():
    """Fresh in-memory database per test, with the uniqueness indexes."""
    mongodb.reset_mongo_client(mongomock.MongoClient())
    db = mongodb.get_mongo_db()
    mongodb.ensure_user_indexes(db)
    mongodb.ensure_application_indexes(db)
    yield db
    mongodb.reset_mongo_client()


@pytest.fixture
def client():
    return TestClient(app)


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def student_payload(**overrides) -> dict:
    payload = {
        "name": "Asha Rao",
        "email": "asha@cmrec.ac.in",
        "password": "secret1",
        "role": "student",
        "major": "Computer Science",
    }
    payload.update(overrides)
    return payload


def alumni_payload(**overrides) -> dict:
    payload = {
        "name": "Vikram Shah",
        "email": "vikram@example.com",
        "password": "secret1",
        "role": "alumni",
        "major": "Mechanical",
        "graduationYear": CURRENT_YEAR - 5,
    }
    payload.update(overrides)
    return payload


def job_payload(**overrides) -> dict:
    payload = {
        "title": "Backend Engineer Intern",
        "description": "Work with the platform team on APIs, data pipelines and internal tooling for six months.",
        "company": "Acme Labs",
        "location": "Hyderabad",
        "jobType": "internship",
        "experienceLevel": "entry",
        "salaryRange": {"min": 20000, "max": 30000, "currency": "INR"},
        "skills": ["Python", " MongoDB ", ""],
        "requirements": ["Final year student"],
        "applicationDeadline": (datetime.utcnow() + timedelta(days=30)).isoformat() + "Z",
        "contactEmail": "hr@acme.example.com",
        "applicationLink": "https://acme.example.com/careers/123",
    }
    payload.update(overrides)
    return payload


def register(client: TestClient, payload: dict) -> dict:
    """Register and return {"token", "user"}."""
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()


def post_job(client: TestClient, token: str, **overrides) -> dict:
    response = client.post("/api/jobs", json=job_payload(**overrides), headers=auth_header(token))
    assert response.status_code == 201, response.json()
    return response.json()["job"]


@pytest.fixture
def alumni(client):
    return register(client, alumni_payload())


@pytest.fixture
def student(client):
    return register(client, student_payload())
