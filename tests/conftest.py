import os
import tempfile
from pathlib import Path

import pytest

# Must be set before the application modules are imported
_tmp_dir = Path(tempfile.mkdtemp(prefix="docspot-tests-"))
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_tmp_dir / "uploads")
os.environ["ADMIN_EMAILS"] = '["admin@example.com", "second.admin@example.com"]'
os.environ["SECRET_KEY"] = "test-secret-key"

from fastapi.testclient import TestClient

from docspot.main import app
from docspot.core.database import Base, SessionLocal, engine, get_redis
from docspot import models  # noqa: F401

from .utils import ADMIN_EMAIL, api, doctor_application, register_and_login


class FakeRedis:
    """In-memory stand-in for the Redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = str(value)
        return True

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_redis():
    redis_client = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: redis_client
    yield redis_client
    app.dependency_overrides.pop(get_redis, None)


@pytest.fixture
def client(test_db, fake_redis):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    """Capture password reset emails instead of talking to an SMTP server."""
    sent = []

    def fake_send(to_email, name, reset_link):
        sent.append({"to": to_email, "name": name, "link": reset_link})

    monkeypatch.setattr(
        "docspot.services.auth_service.send_password_reset_email", fake_send
    )
    return sent


@pytest.fixture
def admin(client):
    return register_and_login(client, "Admin", ADMIN_EMAIL)


@pytest.fixture
def patient(client):
    return register_and_login(client, "Alice", "alice@example.com")


@pytest.fixture
def doctor_user(client):
    return register_and_login(client, "Grace", "grace@example.com")


@pytest.fixture
def approved_doctor(client, admin, doctor_user):
    """A doctor whose application was approved; returns (headers, doctor json)."""
    headers, _ = doctor_user
    response = client.post(api("/doctors/apply-doctor"), json=doctor_application(), headers=headers)
    assert response.status_code == 200, response.text

    doctor = client.get(api("/doctors/get-all-doctors")).json()[0]
    admin_headers, _ = admin
    response = client.post(
        api("/doctors/change-status"),
        json={"doctorId": doctor["id"], "status": "approved"},
        headers=admin_headers,
    )
    assert response.status_code == 200, response.text
    return headers, response.json()
