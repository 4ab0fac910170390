# tests/conftest.py
import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

# shopapi.config reads the environment on import
os.environ.setdefault("JWT_HMAC_KEY", "test-hmac-key-that-is-long-enough-for-hs256")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_DIR", tempfile.gettempdir())

import jwt
import pytest
from fastapi.testclient import TestClient

from shopapi.app import create_app
from shopapi.constants import Roles
from shopapi.utils.security import TokenAuthenticator

JWT_KEY = os.environ["JWT_HMAC_KEY"]

ALL_ROLES = [value for name, value in vars(Roles).items() if not name.startswith("_")]


def make_token(subject: Optional[str] = "alice", roles: Optional[Iterable[str]] = (),
               key: str = JWT_KEY, **claims) -> str:
    payload = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5)}
    if subject is not None:
        payload["sub"] = subject
    if roles is not None:
        payload["realm_access"] = {"roles": list(roles)}
    payload.update(claims)
    return jwt.encode(payload, key, algorithm="HS256")


def bearer(subject: str = "alice", roles: Iterable[str] = ()) -> dict:
    return {"Authorization": f"Bearer {make_token(subject, roles)}"}


@pytest.fixture
def authenticator():
    return TokenAuthenticator(JWT_KEY)


@pytest.fixture
def client():
    with TestClient(create_app(database_url="sqlite+aiosqlite://", jwt_key=JWT_KEY)) as client:
        yield client


@pytest.fixture
def admin():
    return bearer("admin", ALL_ROLES)


@pytest.fixture
def alice():
    return bearer("alice")


@pytest.fixture
def bob():
    return bearer("bob")
