"""
Pytest configuration and fixtures.
Each test gets a fresh in-memory SQLite database shared by the app and the test.
"""
import pytest
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from article_service.config import Settings
from article_service.database import Base, create_db_engine, create_session_factory, get_db
from article_service.main import create_app

SQLALCHEMY_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def engine():
    """In-memory engine; StaticPool keeps one connection so all sessions see the same data."""
    engine = create_db_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def app(engine):
    """Application wired to the test engine."""
    return create_app(Settings(database_url=SQLALCHEMY_DATABASE_URL), engine=engine)


@pytest.fixture(scope="function")
def db_session(app, engine):
    """Create a fresh database for each test."""
    db = create_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(app, db_session):
    """Create a test client with a test database."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_article():
    """Build a POST /articles body from (type, content, metadata) tuples."""
    def _make(name, *paragraphs):
        return {
            "name": name,
            "content": [
                {"type": p_type, "content": content, "metadata": metadata}
                for p_type, content, metadata in paragraphs
            ],
        }
    return _make
