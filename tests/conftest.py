"""
Pytest configuration and fixtures for all tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from api.user.crud import UserStore
from auth.passwords import hash_password
from auth.service import add_permission_for_user
from auth.tokens import TokenStore
from config.settings import Settings
from core.permissions import DEFAULT_PERMISSIONS
from database.models import TokenScope, User
from main import create_app
from services.background import BackgroundRunner
from services.mailer import Mailer


class RecordingMailer(Mailer):
    """Renders every message like the real mailer but keeps it instead of sending."""

    def __init__(self):
        super().__init__(host="localhost", port=25, username="", password="", sender="test@example.com")
        self.sent = []

    def send(self, recipient, template_name, data):
        rendered = self.render(template_name, data)
        self.sent.append({"recipient": recipient, "template": template_name, "data": data, "message": rendered})


class InlineRunner(BackgroundRunner):
    """Runs background tasks synchronously so tests can observe their effects."""

    def submit(self, fn, *args, **kwargs):
        self._run(fn, *args, **kwargs)
        return None


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        limiter_enabled=False,
        admin_email="admin@example.com",
        admin_password="admin-pa55word",
        shutdown_timeout=1.0,
        # Cheap bcrypt rounds
        bcrypt_cost=4,
    )


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(settings, mailer):
    return create_app(settings=settings, mailer=mailer, background=InlineRunner(max_workers=1))


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan: tables are created and seeded
    with TestClient(app) as client:
        yield client


@pytest.fixture
def engine(app, client):
    return app.state.container.engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def create_user(session, settings):
    """Insert a user directly and return it with ready-to-use auth headers."""

    def _create(
        email: str = "alice@example.com",
        password: str = "pa55word1234",
        name: str = "Alice Smith",
        activated: bool = True,
        role: str = "user",
        permissions: tuple[str, ...] = tuple(DEFAULT_PERMISSIONS),
    ):
        user = UserStore(session).insert(
            User(
                name=name,
                email=email,
                password_hash=hash_password(password, cost=settings.bcrypt_cost),
                activated=activated,
                role=role,
            )
        )
        add_permission_for_user(session, user.id, *permissions)
        plaintext, _ = TokenStore(session).new(
            user.id, settings.authentication_token_ttl, TokenScope.AUTHENTICATION
        )
        return user, {"Authorization": f"Bearer {plaintext}"}

    return _create


@pytest.fixture
def admin_headers(client):
    res = client.post(
        "/v1/tokens/authentication",
        json={"email": "admin@example.com", "password": "admin-pa55word"},
    )
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['authentication_token']['token']}"}
