"""Shared pytest fixtures for test suite"""
import pytest
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch
from fastapi.testclient import TestClient
import fakeredis

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from lessonhub.main import app
from lessonhub.core.config import SETTINGS_COLLECTION, USERS_COLLECTION, VIDEOS_COLLECTION
from lessonhub.core.exceptions import NotAuthenticatedError
from lessonhub.db.firestore import get_db
from lessonhub.db import redis as redis_module

from fakes import FakeFirestore


# Bearer tokens accepted by the patched verifier, mapped to their claims
TEST_TOKENS = {
    "admin-token": {"uid": "admin-1", "email": "admin@example.com", "name": "Ada Admin"},
    "subscriber-token": {"uid": "sub-1", "email": "sub@example.com", "name": "Sam Subscriber"},
    "member-token": {"uid": "member-1", "email": "member@example.com", "name": "Mo Member"},
    "newcomer-token": {"uid": "new-1", "email": "new@example.com", "name": "Nia New"},
}


@pytest.fixture(scope="function")
def fake_db() -> FakeFirestore:
    """Empty in-memory Firestore"""
    return FakeFirestore()


@pytest.fixture(scope="function")
def seeded_db(fake_db: FakeFirestore) -> FakeFirestore:
    """Store with an admin, a subscriber, a plain member, two coaches and four videos"""
    fake_db.seed(USERS_COLLECTION, "admin-1", {
        "displayName": "Ada Admin", "email": "admin@example.com",
        "isAdmin": True, "isCoach": False, "isSubscriber": False,
    })
    fake_db.seed(USERS_COLLECTION, "sub-1", {
        "displayName": "Sam Subscriber", "email": "sub@example.com",
        "isAdmin": False, "isCoach": False, "isSubscriber": True,
    })
    fake_db.seed(USERS_COLLECTION, "member-1", {
        "displayName": "Mo Member", "email": "member@example.com",
        "isAdmin": False, "isCoach": False, "isSubscriber": False,
    })
    fake_db.seed(USERS_COLLECTION, "jane-q", {
        "displayName": "Jane Q", "photoURL": "/jane.png", "isCoach": True,
    })
    fake_db.seed(USERS_COLLECTION, "bob", {
        "name": "bob", "avatar": "/bob.png", "isCoach": True,
    })

    fake_db.seed(VIDEOS_COLLECTION, "html-basics", {
        "title": "HTML Basics", "date": "2023-09-15", "category": "HTML",
        "level": "Level 1", "tag": "Recommended by Coach", "coachId": "jane-q",
    })
    fake_db.seed(VIDEOS_COLLECTION, "css-flexbox", {
        "title": "CSS Flexbox", "date": "2023-10-08", "category": "CSS",
        "level": "Level 2", "tag": "Live Session", "coachId": "bob",
    })
    fake_db.seed(VIDEOS_COLLECTION, "react-intro", {
        "title": "Intro to React", "date": "2023-11-01", "category": "React",
        "level": "Level 3", "tag": "Recommended by Coach", "teacherId": "jane-q",
    })
    fake_db.seed(VIDEOS_COLLECTION, "css-grid", {
        "title": "CSS Grid", "date": "2023-08-20", "category": "CSS",
        "level": "Level 1", "tag": "Live Session", "coachId": "bob",
    })
    return fake_db


@pytest.fixture(scope="function")
def subscription_required(seeded_db: FakeFirestore) -> FakeFirestore:
    """Turn on the global subscription gate"""
    seeded_db.seed(SETTINGS_COLLECTION, "app", {"requireSubscriptionForVideos": True})
    return seeded_db


@pytest.fixture(scope="function")
def mock_redis():
    """Swap the rate limiter's Redis client for fakeredis"""
    fake_redis = fakeredis.FakeStrictRedis(decode_responses=True)
    redis_module.set_redis_client(fake_redis)
    try:
        yield fake_redis
    finally:
        redis_module.set_redis_client(None)


@pytest.fixture(scope="function")
def mock_verify_token():
    """Accept the tokens in TEST_TOKENS and reject anything else"""
    def verify(token):
        if token not in TEST_TOKENS:
            raise NotAuthenticatedError("Session expired or invalid. Please sign in again.")
        return dict(TEST_TOKENS[token])

    with patch('lessonhub.core.security.verify_id_token', side_effect=verify) as mock_verify:
        yield mock_verify


@pytest.fixture(scope="function")
def client(seeded_db: FakeFirestore, mock_redis, mock_verify_token) -> Generator[TestClient, None, None]:
    """FastAPI test client backed by the seeded fake store and fakeredis"""
    app.dependency_overrides[get_db] = lambda: seeded_db

    try:
        # Keep startup offline: no OTLP exporters, no real Firebase app
        with patch('lessonhub.main.initialize_otel', return_value=False):
            with patch('lessonhub.main.initialize_firebase'):
                with TestClient(app) as test_client:
                    yield test_client
    finally:
        # Cleanup - always clear overrides
        app.dependency_overrides.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict:
    return auth_headers("admin-token")


@pytest.fixture
def subscriber_headers() -> dict:
    return auth_headers("subscriber-token")


@pytest.fixture
def member_headers() -> dict:
    return auth_headers("member-token")


@pytest.fixture
def newcomer_headers() -> dict:
    return auth_headers("newcomer-token")
