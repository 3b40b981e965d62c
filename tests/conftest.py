"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema rebuilt for each test
- Staff users per role and an active patient
- JWT token minting for authenticated tests
- HTTPX AsyncClient factory with cookie + CSRF headers
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

# Must be set before practice_api reads settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ["SENTRY_DSN"] = ""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from practice_api.main import app
from practice_api.db.base import Base
from practice_api.db.session import engine, SessionLocal
from practice_api.core.deps import COOKIE_NAME, CSRF_HEADER, CSRF_HEADER_VALUE, get_db
from practice_api.core.security import create_session_token
from practice_api.db.enums import PatientStatus, Role
from practice_api.db.models import Patient, User


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; the tables are dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


def make_user(db: Session, role: Role, *, is_active: bool = True, first_name: str | None = None) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{role.value}-{uuid.uuid4().hex[:8]}@practice.test",
        first_name=first_name or role.value.title(),
        last_name="Tester",
        role=role.value,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    return user


def make_patient(db: Session, first_name: str = "Pat", last_name: str = "Client") -> Patient:
    patient = Patient(
        id=uuid.uuid4(),
        first_name=first_name,
        last_name=last_name,
        status=PatientStatus.ACTIVE.value,
    )
    db.add(patient)
    db.commit()
    return patient


@pytest.fixture(scope="function")
def admin(db: Session) -> User:
    return make_user(db, Role.ADMIN)


@pytest.fixture(scope="function")
def supervisor(db: Session) -> User:
    return make_user(db, Role.SUPERVISOR)


@pytest.fixture(scope="function")
def therapist(db: Session) -> User:
    return make_user(db, Role.THERAPIST)


@pytest.fixture(scope="function")
def frontdesk(db: Session) -> User:
    return make_user(db, Role.FRONTDESK)


@pytest.fixture(scope="function")
def patient(db: Session) -> Patient:
    return make_patient(db)


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str
    cookie_name: str = COOKIE_NAME


def token_for(user: User) -> str:
    return create_session_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client_for(db: Session) -> AsyncGenerator[Callable[..., AsyncClient], None]:
    """
    Factory for AsyncClients authenticated as a given user.

    Usage:
        async def test_x(client_for, supervisor):
            resp = await client_for(supervisor).get("/api/discharge-requests/pending")
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    clients: list[AsyncClient] = []

    def _make(user: User, *, csrf: bool = True) -> AsyncClient:
        auth = TestAuth(user=user, token=token_for(user))
        headers = {CSRF_HEADER: CSRF_HEADER_VALUE} if csrf else {}
        c = AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
            cookies={auth.cookie_name: auth.token},
            headers=headers,
        )
        clients.append(c)
        return c

    yield _make

    for c in clients:
        await c.aclose()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def user_factory(db: Session) -> Callable[..., User]:
    def _make(role: Role, **kwargs) -> User:
        return make_user(db, role, **kwargs)
    return _make


@pytest.fixture(scope="function")
def patient_factory(db: Session) -> Callable[..., Patient]:
    def _make(first_name: str = "Pat", last_name: str = "Client") -> Patient:
        return make_patient(db, first_name, last_name)
    return _make
