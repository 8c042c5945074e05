import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db, build_engine_kwargs, register_sqlite_functions
from app.main import app
from app.models.user import UserRole
from app.services.omdb_service import OMDBService
from tests.factories import create_user

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    poolclass=StaticPool,
    **build_engine_kwargs(SQLALCHEMY_DATABASE_URL),
)
register_sqlite_functions(engine)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def offline_omdb(monkeypatch):
    """No test talks to OMDb; tests that need it patch the gateway methods."""
    monkeypatch.setattr(OMDBService, "API_KEY", None)


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session, monkeypatch):
    """FastAPI test client with the database dependency overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setenv("ENVIRONMENT", "test")

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def user(db_session):
    return create_user(db_session)


@pytest.fixture
def other_user(db_session):
    return create_user(db_session, email="other@example.com", name="Other User")


@pytest.fixture
def admin(db_session):
    return create_user(db_session, email="admin@example.com", name="Admin", role=UserRole.ADMIN)
