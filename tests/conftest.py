"""Shared fixtures: isolated document store, stub tutor, test client."""

import copy
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from lingo_tutor.api.app import create_app
from lingo_tutor.config import Settings
from lingo_tutor.conversation.practice import PracticeGenerator
from lingo_tutor.models.tutor import TutorReply
from lingo_tutor.storage.conversations import ConversationStore
from lingo_tutor.storage.documents import DocumentStore
from lingo_tutor.storage.users import UserStore

CLEAN_REPLY = {
    "response": "Hola",
    "correction": {"hasError": False},
    "newWords": [],
}

ERROR_REPLY = {
    "response": "Casi! Se dice 'soy estudiante'.",
    "correction": {
        "hasError": True,
        "original": "estoy estudiante",
        "corrected": "soy estudiante",
        "explanation": "use 'ser' not 'estar'",
    },
    "newWords": [
        {"word": "estudiante", "translation": "student", "example": "Soy estudiante."}
    ],
}

SIGNUP_BODY = {
    "email": "ana@example.com",
    "password": "secret123",
    "name": "Ana",
    "nativeLanguage": "English",
    "targetLanguage": "Spanish",
    "languageLevel": "beginner",
    "interests": ["music", "travel"],
    "learningGoals": ["order food"],
}


class StubTutor:
    """TutorResponder that replays queued replies (dicts or exceptions)."""

    def __init__(self):
        self.replies: list = []
        self.calls: list[dict] = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    async def generate(self, system_prompt, history, message):
        self.calls.append(
            {"system_prompt": system_prompt, "history": list(history), "message": message}
        )
        item = self.replies.pop(0) if self.replies else CLEAN_REPLY
        if isinstance(item, Exception):
            raise item
        return TutorReply.model_validate(item)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="test-key",
        jwt_secret="test-secret",
        database_path=tmp_path / "db",
        allowed_origins="http://testserver",
    )


@pytest.fixture
def document_store(tmp_path):
    return DocumentStore(tmp_path / "store")


@pytest.fixture
def user_store(document_store):
    return UserStore(document_store)


@pytest.fixture
def conversation_store(document_store):
    return ConversationStore(document_store)


@pytest.fixture
def stub_tutor():
    return StubTutor()


@pytest.fixture
def stub_practice():
    return AsyncMock(spec=PracticeGenerator)


@pytest.fixture
def app(settings, stub_tutor, stub_practice):
    return create_app(settings, tutor=stub_tutor, practice_generator=stub_practice)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup_user(client):
    """Factory: sign a user up over HTTP and return (user, token)."""

    def _signup(**overrides) -> tuple[dict, str]:
        body = {**SIGNUP_BODY, **overrides}
        response = client.post("/api/auth/signup", json=body)
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"], data["token"]

    return _signup


@pytest.fixture
def clean_reply() -> dict:
    return copy.deepcopy(CLEAN_REPLY)


@pytest.fixture
def error_reply() -> dict:
    return copy.deepcopy(ERROR_REPLY)
