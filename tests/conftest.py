# tests/conftest.py

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from taskly.config import JwtOptions
from taskly.database import create_tables, get_db
from taskly.main import app
from taskly.routers.auth import get_password_hasher, get_token_issuer
from taskly.services.auth import AuthService
from taskly.services.passwords import PasswordHasher
from taskly.services.tasks import TaskService
from taskly.services.tokens import TokenIssuer

from .fakes import FakeClock


@pytest.fixture()
def engine():
    # One shared in-memory database per test, usable from TestClient threads.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hasher() -> PasswordHasher:
    # Cheapest work factor; the format and checks are what we test.
    return PasswordHasher(rounds=1)


@pytest.fixture()
def jwt_opts() -> JwtOptions:
    return JwtOptions(
        secret="test-secret-with-enough-length-for-hs256",
        issuer="taskly-test",
        audience="taskly-test-clients",
        expire_minutes=60,
    )


@pytest.fixture()
def issuer(jwt_opts) -> TokenIssuer:
    return TokenIssuer(jwt_opts)


@pytest.fixture()
def auth_service(db, hasher, issuer, clock) -> AuthService:
    return AuthService(db, hasher, issuer, clock=clock)


@pytest.fixture()
def task_service(db, clock) -> TaskService:
    return TaskService(db, clock=clock)


@pytest.fixture()
def alice(auth_service):
    return auth_service.register("alice", "alice@x.com", "secret1").user


@pytest.fixture()
def bob(auth_service):
    return auth_service.register("bob", "bob@x.com", "secret2").user


@pytest.fixture()
def client(session_factory, hasher, issuer):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_issuer] = lambda: issuer
    try:
        # No context manager: startup hooks (real DB, logging) stay off.
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

