import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BREVO_API_KEY"] = ""
os.environ["OTP_EXPIRE_MINUTES"] = "5"
os.environ["OTP_RESEND_COOLDOWN_SECONDS"] = "60"

import re

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rentflow.core.database import Base, get_db
from rentflow.core.security import create_access_token, get_password_hash
from rentflow.main import app
from rentflow.models import user, otp, product, device_token, notification  # noqa: F401
from rentflow.models.user import User
from rentflow.services.notification_sink import NotificationSink, get_notification_sink

CODE_RE = re.compile(r"verification code is: (\d{4})")


class RecordingSink(NotificationSink):
    """Captures deliveries instead of sending email."""

    def __init__(self, result=True, error=None):
        self.sent = []
        self.result = result
        self.error = error

    async def deliver(self, destination, subject, body):
        self.sent.append((destination, subject, body))
        if self.error:
            raise self.error
        return self.result

    def last_code(self):
        return CODE_RE.search(self.sent[-1][2]).group(1)


@pytest.fixture()
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def sink():
    return RecordingSink()


@pytest.fixture()
def client(db, sink):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_notification_sink] = lambda: sink
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make_user(email="renter@example.com", password="Rent@12345", verified=True):
        u = User(email=email, password_hash=get_password_hash(password), is_verified=verified)
        db.add(u)
        db.commit()
        db.refresh(u)
        return u
    return _make_user


@pytest.fixture()
def auth_headers():
    def _auth_headers(u):
        token = create_access_token({"sub": u.id, "email": u.email})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
