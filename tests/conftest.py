"""Shared fixtures: an in-memory store per test and an API client wired to it."""

from datetime import datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from planner import crud
from planner.database import Store
from planner.main import create_app
from planner.routers.auth import create_session_token
from planner.transcription import Transcription, TranscriptionError


class FakeTranscriber:
    """Stands in for the OpenAI-backed transcriber."""

    def __init__(self):
        self.calls = []
        self.error: Optional[TranscriptionError] = None

    def transcribe(self, audio_url: str, language: Optional[str] = None) -> Transcription:
        self.calls.append((audio_url, language))
        if self.error is not None:
            raise self.error
        return Transcription(text="buy milk tomorrow", language=language or "en", duration=1.5)


@pytest.fixture()
def store() -> Store:
    store = Store.from_url("sqlite://")
    store.create_tables()
    yield store
    store.dispose()


@pytest.fixture()
def offline_store() -> Store:
    """A store with no backend: every call reports unavailable."""
    return Store(None)


@pytest.fixture()
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture()
def client(store, transcriber) -> TestClient:
    return TestClient(create_app(store=store, transcriber=transcriber))


def auth_headers(open_id: str = "user-1", **claims) -> dict:
    token = create_session_token(open_id, **claims)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def headers() -> dict:
    return auth_headers("user-1", name="Test User 1", email="user1@example.com", login_method="manus")


@pytest.fixture()
def other_headers() -> dict:
    return auth_headers("user-2", name="Test User 2")


@pytest.fixture()
def user(store):
    signed_in = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return crud.upsert_user(store, "owner-a", name="Owner A", last_signed_in=signed_in).value


@pytest.fixture()
def other_user(store):
    signed_in = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return crud.upsert_user(store, "owner-b", name="Owner B", last_signed_in=signed_in).value
