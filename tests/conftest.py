import json
import os
from io import BytesIO

os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest

from config import Config
from cvportal import create_app
from cvportal.extensions import db
from cvportal.services import report_renderer
from cvportal.services.assessment import FitAssessor

SAMPLE_ANALYSIS = {
    "overall_score": 78,
    "matched_skills": ["Python", "SQL"],
    "partial_skills": ["Airflow"],
    "missing_skills": ["Spark"],
    "experience_level": "Mid",
    "education_match": True,
    "language_skills": ["English", "Turkish"],
    "strengths": ["Solid ETL background"],
    "weaknesses": ["No big data experience"],
    "recommendation": "Invite to a first interview.",
    "ats_feedback": ["Add measurable results"],
    "summary": "Good fit for a mid-level data role.",
}

FAKE_PDF = b"%PDF-1.4 fake report"


class FakeBackend:
    """Returns canned replies and remembers the prompts it was sent."""

    def __init__(self, reply=None):
        self.replies = [reply if reply is not None else json.dumps(SAMPLE_ANALYSIS)]
        self.prompts = []

    def queue(self, *replies):
        self.replies = list(replies)

    def complete(self, system_prompt, prompt):
        self.prompts.append(prompt)
        reply = self.replies[0] if len(self.replies) == 1 else self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def app(tmp_path, monkeypatch):
    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.sqlite'}"
        UPLOAD_FOLDER = str(tmp_path / "uploads" / "cvs")
        REPORTS_FOLDER = str(tmp_path / "uploads" / "reports")
        JWT_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
        BCRYPT_LOG_ROUNDS = 4
        SEED_HR_EMAIL = "admin@ik.com"
        SEED_HR_PASSWORD = "admin123"

    monkeypatch.setattr(report_renderer, "rasterize_html", lambda html: FAKE_PDF)

    app = create_app(TestConfig)
    app.extensions["fit_assessor"] = FitAssessor(FakeBackend())

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def backend(app):
    return app.extensions["fit_assessor"].backend


@pytest.fixture
def token(client):
    response = client.post("/api/hr/login", json={"email": "admin@ik.com", "password": "admin123"})
    assert response.status_code == 200
    return response.get_json()["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def upload(client):
    def _upload(filename="Jane_Doe-CV.txt", content=b"Python developer with 5 years of SQL", mimetype="text/plain"):
        return client.post(
            "/api/cv/upload",
            data={"cv": (BytesIO(content), filename, mimetype)},
            content_type="multipart/form-data",
        )

    return _upload


@pytest.fixture
def candidate_id(client, auth, upload):
    response = upload()
    assert response.status_code == 200
    candidates = client.get("/api/hr/candidates", headers=auth).get_json()
    return candidates[0]["id"]


@pytest.fixture
def job_id(client, auth):
    response = client.post(
        "/api/hr/jobs",
        json={
            "title": "Data Engineer",
            "description": "Build data pipelines",
            "requirements": "Python, SQL, Airflow, Spark",
            "location": "Istanbul",
        },
        headers=auth,
    )
    assert response.status_code == 201
    return response.get_json()["id"]
