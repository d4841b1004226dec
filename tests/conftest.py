import os

# Keep the module-level engine off disk; tests bind their own
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from socialgraph.main import app
from socialgraph.common.deps import get_otp_vendor, get_push_client
from socialgraph.core.errors import InvalidCode, PushDeliveryError
from socialgraph.core.security import create_access_token
from socialgraph.db.base_class import Base
from socialgraph.db.session import get_db
from socialgraph.models.profile import Profile
from socialgraph.services.notification_service import NotificationDispatcher


class FakeOtpVendor:
    """Accepts `valid_code` once per request id, like the real vendor."""

    def __init__(self, valid_code="123456"):
        self.valid_code = valid_code
        self.start_error = None
        self.started = []
        self.checked = []
        self._consumed = set()

    def start(self, phone):
        if self.start_error is not None:
            raise self.start_error
        request_id = f"req-{len(self.started) + 1}"
        self.started.append((request_id, phone))
        return request_id

    def check(self, request_id, code):
        self.checked.append((request_id, code))
        if request_id in self._consumed or code != self.valid_code:
            raise InvalidCode()
        self._consumed.add(request_id)


class FakePushClient:
    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, token, title, body, data=None):
        if self.fail:
            raise PushDeliveryError("DeviceNotRegistered")
        self.sent.append({"token": token, "title": title, "body": body, "data": data})
        return {"status": "ok", "id": f"ticket-{len(self.sent)}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def otp_vendor():
    return FakeOtpVendor()


@pytest.fixture
def push_client():
    return FakePushClient()


@pytest.fixture
def dispatcher(db, push_client):
    return NotificationDispatcher(db=db, push_client=push_client)


@pytest.fixture
def make_profile(db):
    counter = {"n": 0}

    def _make(name=None, push_token=None, phone_hash=None):
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        profile = Profile(
            email=f"{name.lower()}@example.com",
            username=name.lower(),
            display_name=name,
            push_token=push_token,
            phone_hash=phone_hash,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


def auth_headers(profile):
    token = create_access_token({"sub": profile.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db, otp_vendor, push_client):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_otp_vendor] = lambda: otp_vendor
    app.dependency_overrides[get_push_client] = lambda: push_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    return auth_headers
