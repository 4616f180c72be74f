"""
Shared fixtures: in-memory database, fake Gemini client, authenticated client.
Zero network calls; every model reply is scripted per test.
"""
import os

os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from writing_assistant import models  # noqa: F401  (registers tables)
from writing_assistant.db import Base, get_db
from writing_assistant.gemini_client import GroundedResult, get_gemini_client
from writing_assistant.main import app


class FakeGeminiClient:
    """Stands in for GeminiClient; records every call."""

    def __init__(self):
        self.text_reply = "ok"
        self.grounded_reply = GroundedResult(text="grounded", sources=[])
        self.multimodal_reply = "extracted"
        self.error = None
        self.calls = []

    async def generate(self, prompt, **kwargs):
        self.calls.append(("generate", prompt, kwargs))
        if self.error:
            raise self.error
        return self.text_reply

    async def generate_grounded(self, prompt, **kwargs):
        self.calls.append(("generate_grounded", prompt, kwargs))
        if self.error:
            raise self.error
        return self.grounded_reply

    async def generate_multimodal(self, parts, **kwargs):
        self.calls.append(("generate_multimodal", parts, kwargs))
        if self.error:
            raise self.error
        return self.multimodal_reply

    async def aclose(self):
        pass


@pytest.fixture
def db_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    yield factory
    engine.dispose()


@pytest.fixture
def fake_gemini():
    return FakeGeminiClient()


@pytest.fixture
def client(db_session_factory, fake_gemini):
    def _get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    async def _get_gemini():
        yield fake_gemini

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_gemini_client] = _get_gemini
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def guest_token(client):
    resp = client.post("/auth/token", data={"username": "guest", "password": "guest"})
    assert resp.status_code == 200
    return resp.json()["access_token"]


@pytest.fixture
def auth_headers(guest_token):
    return {"Authorization": f"Bearer {guest_token}"}
