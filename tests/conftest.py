"""Pytest fixtures and configuration for seatmanager tests."""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from svix.webhooks import Webhook

from seatmanager.config import AppConfig
from seatmanager.database.database import Base, get_db
from seatmanager.database.user_repository import UserRepository
from seatmanager.engine.reconciler import UserReconciler
from seatmanager.engine.user_service import UserService


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"seatmanager-test-webhook-secret!").decode("ascii")


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from seatmanager.database import models  # noqa: F401

    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def user_repository(db_session: Session):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session)


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository)


@pytest.fixture
def reconciler(user_service):
    return UserReconciler(user_service)


@pytest.fixture(scope="session")
def rsa_private_key():
    """RSA key standing in for the identity provider's token signing key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def rsa_public_pem(rsa_private_key):
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@pytest.fixture
def app_config(rsa_public_pem):
    return AppConfig(
        webhook_secrets=[TEST_WEBHOOK_SECRET],
        jwt_key=rsa_public_pem,
    )


@pytest.fixture
def sign_webhook():
    """Return a function building svix signature headers for a body, signed now."""
    signer = Webhook(TEST_WEBHOOK_SECRET)

    def _sign(msg_id: str, body: bytes, signed_body: bytes = None) -> dict:
        sent_at = datetime.now(tz=timezone.utc)
        return {
            "svix-id": msg_id,
            "svix-timestamp": str(int(sent_at.timestamp())),
            "svix-signature": signer.sign(msg_id, sent_at, (signed_body or body).decode("utf-8")),
        }
    return _sign


@pytest.fixture
def make_session_token(rsa_private_key):
    """Return a function that issues RS256 session tokens for a subject."""
    def _make(sub: str, expires_in: timedelta = timedelta(hours=1), **claims) -> str:
        now = datetime.utcnow()
        payload = {"sub": sub, "iat": now, "exp": now + expires_in, **claims}
        return jwt.encode(payload, rsa_private_key, algorithm="RS256")
    return _make


@pytest.fixture
def user_payload():
    """Return a function building an identity-provider user object (webhook `data`)."""
    def _build(external_id: str = "user_ext_1", **overrides) -> dict:
        data = {
            "id": external_id,
            "object": "user",
            "email_addresses": [{"email_address": "ann@example.com"}],
            "first_name": "Ann",
            "last_name": "Lee",
            "image_url": "https://img.example.com/ann.png",
            "external_accounts": [],
            "password_enabled": True,
        }
        data.update(overrides)
        return data
    return _build


@pytest.fixture
def test_client(db_session: Session, app_config):
    """Create a FastAPI test client with overridden database dependency."""
    from seatmanager.api.app import create_app

    app = create_app(app_config, init_database=False)

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def send_webhook(test_client, sign_webhook):
    """Return a function that POSTs a correctly signed webhook event."""
    counter = {"n": 0}

    def _send(event_type: str, data, msg_id: str = None):
        counter["n"] += 1
        msg_id = msg_id or f"msg_{counter['n']}"
        body = json.dumps({"type": event_type, "object": "event", "data": data}).encode("utf-8")
        headers = {"Content-Type": "application/json", **sign_webhook(msg_id, body)}
        return test_client.post("/api/webhooks/clerk", content=body, headers=headers)

    return _send
