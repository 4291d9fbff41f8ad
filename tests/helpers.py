"""Test helpers shared by the unit and HTTP tests."""

from datetime import datetime, timedelta

from staff_auth.core.config import Settings
from staff_auth.core.security import PasswordHasher, TokenIssuer
from staff_auth.services.auth import AuthService

TEST_SECRET = "test-jwt-secret"
PASSWORD = "secret1"


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "DATABASE_URL": f"sqlite:///{tmp_path / 'auth.db'}",
        "JWT_SECRET_KEY": TEST_SECRET,
        "PASSWORD_HASH_ROUNDS": 1,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def register(client, username="ada", role="employee", **extra):
    body = {"name": "Ada", "username": username, "password": PASSWORD, "role": role}
    body.update(extra)
    return client.post("/api/register", json=body)


def login(client, username="ada", password=PASSWORD):
    return client.post("/api/login", json={"username": username, "password": password})


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def build_service(db, settings, clock) -> AuthService:
    return AuthService(
        db,
        settings,
        PasswordHasher(settings.PASSWORD_HASH_ROUNDS),
        TokenIssuer.from_settings(settings),
        clock=clock,
    )
