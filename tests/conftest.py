"""Shared fixtures: an in-memory database and test clients for each service."""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from credito.database import Base, get_db
from credito.main import avaliador_app, cartoes_app, clientes_app


@pytest.fixture
def engine():
    """SQLite in-memory engine shared across threads for one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """A database session for service-level tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def override_db(session_factory):
    """Point get_db at the test database for every service app."""

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    apps = (clientes_app, cartoes_app, avaliador_app)
    for app in apps:
        app.dependency_overrides[get_db] = _get_test_db
    yield
    for app in apps:
        app.dependency_overrides.clear()


@pytest.fixture
def clientes_client(override_db):
    return TestClient(clientes_app)


@pytest.fixture
def cartoes_client(override_db):
    return TestClient(cartoes_app)


@pytest.fixture
def avaliador_client():
    yield TestClient(avaliador_app)
    avaliador_app.dependency_overrides.clear()
