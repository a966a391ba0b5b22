import os
import tempfile
import time
from unittest import mock

_TMP = tempfile.mkdtemp(prefix="itinerary-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_URL"] = "https://auth.example.test"
os.environ["SUPABASE_ANON_KEY"] = "anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-secret"
os.environ["PUBLIC_APP_URL"] = "https://app.example.test"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP, "uploads")
os.environ["LOG_DIR"] = os.path.join(_TMP, "logs")
os.environ["FIREBASE_CREDENTIALS_PATH"] = os.path.join(_TMP, "missing.json")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


def make_token(user_id: str, email: str, audience: str = "authenticated", secret: str = "test-secret") -> str:
    claims = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "exp": int(time.time()) + 3600,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user_id: str, email: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, email)}"}


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def no_push_notifications():
    with mock.patch("routes.collaborators.notify_trip_invitation", return_value=True) as notify:
        yield notify


@pytest.fixture
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def alice():
    return auth_headers("user-alice", "alice@example.com")


@pytest.fixture
def bob():
    return auth_headers("user-bob", "bob@example.com")


@pytest.fixture
def carol():
    return auth_headers("user-carol", "carol@example.com")


@pytest.fixture
def trip(client, alice):
    res = client.post(
        "/trips/",
        json={"title": "Summer in Rome", "startDate": "2025-07-01", "endDate": "2025-07-08", "city": "Rome"},
        headers=alice,
    )
    assert res.status_code == 201
    return res.json()


def share_trip_with(client, owner_headers, member_headers, trip_id, email, role="editor"):
    """Invite `email` to the trip and accept as that user; returns the invitation id."""
    res = client.post(
        "/collaborate/invite",
        json={"tripId": trip_id, "email": email, "role": role},
        headers=owner_headers,
    )
    assert res.status_code == 201, res.text
    invitation_id = res.json()["invitation"]["id"]
    # the invitee's profile must exist before accepting
    client.get("/profile/", headers=member_headers)
    res = client.post("/collaborate/accept", json={"invitationId": invitation_id}, headers=member_headers)
    assert res.status_code == 200, res.text
    return invitation_id
