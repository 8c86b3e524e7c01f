"""Global test fixtures."""

import os

# Required settings must exist before course_api.core.config is imported.
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-signing")

from typing import Iterator, List, Optional  # noqa: E402
from urllib.parse import urlencode  # noqa: E402

import pytest  # noqa: E402
from authlib.oauth2.rfc7636 import create_s256_code_challenge  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from course_api.app import create_app  # noqa: E402
from course_api.core import AuthProviderError, Database, Settings  # noqa: E402
from course_api.models import Lesson, User  # noqa: E402
from course_api.services import GoogleProfile  # noqa: E402

FAKE_AUTH_BASE = "https://accounts.example.com/o/oauth2/auth"


class FakeIdentityProvider:
    """In-process stand-in for Google that records every call."""

    def __init__(self) -> None:
        self.profile = GoogleProfile(
            provider_id="g-1001",
            name="Ana",
            email="ana@example.com",
            avatar_url="https://example.com/ana.png",
        )
        self.exchanges: List[tuple[str, str]] = []
        self.profile_requests: List[str] = []
        self.exchange_error: Optional[AuthProviderError] = None
        self.profile_error: Optional[AuthProviderError] = None

    def authorization_url(self, state: str, code_verifier: str) -> str:
        params = {
            "state": state,
            "code_challenge": create_s256_code_challenge(code_verifier),
            "code_challenge_method": "S256",
        }
        return f"{FAKE_AUTH_BASE}?{urlencode(params)}"

    async def exchange_code(self, code: str, code_verifier: str) -> str:
        self.exchanges.append((code, code_verifier))
        if self.exchange_error is not None:
            raise self.exchange_error
        return "access-token"

    async def fetch_profile(self, access_token: str) -> GoogleProfile:
        self.profile_requests.append(access_token)
        if self.profile_error is not None:
            raise self.profile_error
        return self.profile


@pytest.fixture
def settings() -> Settings:
    return Settings(
        google_client_id="test-client-id",
        google_client_secret="test-client-secret",
        secret_key="test-secret-key-for-signing",
        frontend_url="http://localhost:4321",
        database_url="sqlite://",
        environment="test",
    )


@pytest.fixture
def database() -> Iterator[Database]:
    db = Database("sqlite://")
    assert db.initialize()
    yield db
    db.dispose()


@pytest.fixture
def file_database(tmp_path) -> Iterator[Database]:
    """On-disk SQLite store, shared safely between threads."""

    db = Database(f"sqlite:///{tmp_path / 'app.db'}")
    assert db.initialize()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database) -> Iterator[Session]:
    with Session(database.engine) as session:
        yield session


def seed_lessons(db: Database) -> List[int]:
    """Insert three lessons out of playback order; return ids by order."""

    with Session(db.engine) as session:
        lessons = [
            Lesson(title="Signals", video_url="https://videos.example.com/3", order=30),
            Lesson(title="Nodes and scenes", video_url="https://videos.example.com/1", order=10),
            Lesson(title="Scripting", video_url="https://videos.example.com/2", order=20),
        ]
        session.add_all(lessons)
        session.commit()
        return [
            lesson.id
            for lesson in sorted(lessons, key=lambda lesson: lesson.order)
        ]


def seed_user(db: Database, google_id: str = "g-2002") -> int:
    with Session(db.engine) as session:
        user = User(username="Bo", email="bo@example.com", google_id=google_id)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user.id


@pytest.fixture
def lesson_ids(database: Database) -> List[int]:
    return seed_lessons(database)


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def client(settings, database, provider) -> Iterator[TestClient]:
    app = create_app(settings, database=database, identity_provider=provider)
    with TestClient(app) as test_client:
        yield test_client
