import pytest

from ai_client import AIServiceError
from app import create_app
from models import db


class StubAIClient:
    """Stands in for the Gemini client; unset answers behave like an unavailable service"""

    def __init__(self):
        self.analysis = None
        self.sql = None
        self.chat_response = None
        self.calls = []

    def analyze_dataset(self, records, file_name):
        self.calls.append(("analyze", file_name))
        if self.analysis is None:
            raise AIServiceError("GEMINI_API_KEY is not configured")
        return self.analysis

    def generate_sql(self, tables, prompt):
        self.calls.append(("sql", prompt))
        if self.sql is None:
            raise AIServiceError("GEMINI_API_KEY is not configured")
        return self.sql

    def chat(self, message, context):
        self.calls.append(("chat", message))
        if self.chat_response is None:
            raise AIServiceError("GEMINI_API_KEY is not configured")
        return self.chat_response


@pytest.fixture
def ai_client():
    return StubAIClient()


@pytest.fixture
def app(tmp_path, ai_client):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "SQLALCHEMY_ENGINE_OPTIONS": {},
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "EXPORT_FOLDER": str(tmp_path / "exports"),
        "GEMINI_API_KEY": None,
    })
    app.extensions["ai_client"] = ai_client
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def linear_records():
    return [{"a": 1, "b": 2}, {"a": 2, "b": 4}, {"a": 3, "b": 6}, {"a": 4, "b": 8}]
