import pytest
import uuid
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from library_store.main import app
from library_store.db.session import build_engine, get_db, init_db


@pytest.fixture
def test_engine(tmp_path):
    """Fresh SQLite database file per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test_library.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)


@pytest.fixture
def db_session(session_factory):
    """Create a fresh database session for each test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client(session_factory):
    """Create a test client for FastAPI app bound to the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def book_payload():
    """Valid create payload with a unique ISBN."""
    unique_suffix = uuid.uuid4().hex[:8]
    return {
        "title": f"Test Book {unique_suffix}",
        "author": "Test Author",
        "isbn": f"978-{unique_suffix}",
        "genre": "Fiction",
        "publication_year": 2001,
        "available_copies": 2,
        "total_copies": 3,
    }


@pytest.fixture
def sample_book(test_client, book_payload):
    """Create a sample book through the API."""
    response = test_client.post("/books", json=book_payload)

    assert response.status_code == 201, f"Failed to create sample book: {response.text}"
    return response.json()["newBook"]


@pytest.fixture
def headers_with_correlation():
    """HTTP headers with correlation ID."""
    return {"X-Request-ID": str(uuid.uuid4())}
