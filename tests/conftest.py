"""Shared fixtures: an in-memory database per test and API clients bound to it."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import init_db
from database.deps import get_db_read, get_db_write
from database.models import Role
from main import app
from services import auth_service

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client(db):
    """Return a factory of TestClients, each with its own cookie jar."""

    def override_db():
        yield db

    app.dependency_overrides[get_db_write] = override_db
    app.dependency_overrides[get_db_read] = override_db

    def factory() -> TestClient:
        return TestClient(app)

    yield factory
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Register an active user straight through the service layer."""

    def factory(email, name=None, role=Role.CLIENT, nutritionist=None, password=PASSWORD):
        return auth_service.register_user(
            db,
            email=email,
            password=password,
            name=name or email.split("@")[0].capitalize(),
            role=role,
            nutritionist_id=nutritionist.id if nutritionist is not None else None,
        )

    return factory


@pytest.fixture
def nutritionist(make_user):
    return make_user("cristina@nutri.es", name="Cristina", role=Role.NUTRITIONIST)


@pytest.fixture
def other_nutritionist(make_user):
    return make_user("pablo@nutri.es", name="Pablo", role=Role.NUTRITIONIST)


@pytest.fixture
def client_user(make_user, nutritionist):
    return make_user("ana@mail.com", name="Ana", nutritionist=nutritionist)


def login(api: TestClient, email: str, password: str = PASSWORD):
    response = api.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response
