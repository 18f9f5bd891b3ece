import os
import uuid
from datetime import date, time

import pytest
from fastapi.testclient import TestClient

from reclaim.db.db import create_db_engine
from reclaim.errors import EmailInUse, InvalidCredentials, NotFound, WeakPassword
from reclaim.main import create_app
from reclaim.models.user import Actor, UserProfile
from reclaim.services.identity import IdentityProvider, ProfileStore
from reclaim.services.store import LifecycleStore
from reclaim.utils.auth_helper import create_access_token

TEST_JWT_SECRET = "test-secret-key"

# tokens built at import time in test modules need the secret already
os.environ["JWT_SECRET"] = TEST_JWT_SECRET


class FakeProfileStore(ProfileStore):
    def __init__(self):
        self.profiles = {}

    def get_profile(self, user_id):
        if user_id not in self.profiles:
            raise NotFound("User not found")
        return self.profiles[user_id]

    def save_profile(self, user_id, profile):
        self.profiles[user_id] = profile


class FakeIdentityProvider(IdentityProvider):
    def __init__(self, profiles):
        self.profiles = profiles
        self.accounts = {}
        self.reset_requests = []

    def create_account(self, email, password, profile):
        if email in self.accounts:
            raise EmailInUse("EMAIL_EXISTS", "EMAIL_EXISTS")
        if len(password) < 6:
            raise WeakPassword("WEAK_PASSWORD : Password should be at least 6 characters", "WEAK_PASSWORD")

        user_id = uuid.uuid4().hex
        self.accounts[email] = (password, user_id)
        self.profiles.save_profile(user_id, profile)
        return user_id

    def sign_in(self, email, password):
        account = self.accounts.get(email)
        if not account or account[0] != password:
            raise InvalidCredentials("INVALID_LOGIN_CREDENTIALS", "INVALID_LOGIN_CREDENTIALS")
        return account[1]

    def send_password_reset(self, email):
        self.reset_requests.append(email)


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", TEST_JWT_SECRET)


@pytest.fixture
def store():
    store = LifecycleStore(engine=create_db_engine("sqlite://"))
    yield store
    store.dispose()


@pytest.fixture
def profiles():
    return FakeProfileStore()


@pytest.fixture
def identity(profiles):
    return FakeIdentityProvider(profiles)


@pytest.fixture
def client(store, identity, profiles):
    app = create_app(store=store, identity=identity, profiles=profiles)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def reporter():
    return Actor(user_id="user1", name="John Doe")


@pytest.fixture
def claimant():
    return Actor(user_id="user2", name="Jane Smith")


@pytest.fixture
def admin():
    return Actor(user_id="admin1", name="Guard Admin", role="admin")


@pytest.fixture
def submit_report(store, reporter):
    def _submit(item_type="Wallet", questions=None, actor=None, **kwargs):
        return store.reports.submit_report(
            item_type=item_type,
            location=kwargs.pop("location", "Library - 2nd Floor"),
            date_found=kwargs.pop("date_found", date(2025, 10, 1)),
            time_found=kwargs.pop("time_found", time(14, 30)),
            questions=questions or [{"question": "color?", "answer": "red"}],
            reporter=actor or reporter,
            **kwargs,
        )

    return _submit


def auth_header(user_id, full_name="Test User", role="user"):
    profile = UserProfile(
        full_name=full_name,
        student_id="23-1234",
        contact_number="09123456789",
        email="someone@plv.edu.ph",
        role=role,
    )
    return {"Authorization": f"Bearer {create_access_token(user_id, profile)}"}
