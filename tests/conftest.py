import pytest
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from app.database import get_db
from app.auth.dependencies import get_current_admin
from app.auth.sessions import InMemorySessionStore, get_session_store
from app.models import Base


@pytest.fixture(autouse=True)
def no_redis_publish():
    """Realtime events go to a mock instead of a live Redis"""
    fake = MagicMock()
    with patch("app.services.realtime.get_redis_client", return_value=fake):
        yield fake


@pytest.fixture
def mock_db():
    """Mock database session"""
    db = MagicMock()
    db.query.return_value = db
    db.filter.return_value = db
    db.order_by.return_value = db
    db.offset.return_value = db
    db.limit.return_value = db
    db.first.return_value = None
    db.all.return_value = []
    db.count.return_value = 0
    return db


@pytest.fixture
def mock_owner():
    return {"id": 1, "username": "owner", "role": "OWNER"}


@pytest.fixture
def mock_admin():
    return {"id": 2, "username": "moderator", "role": "ADMIN"}


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def client_with_owner(mock_db, mock_owner, session_store):
    """TestClient with owner auth and mocked DB"""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_admin] = lambda: mock_owner
    app.dependency_overrides[get_session_store] = lambda: session_store
    client = TestClient(app)
    yield client, mock_db, mock_owner
    app.dependency_overrides.clear()


@pytest.fixture
def client_with_admin(mock_db, mock_admin, session_store):
    """TestClient with ADMIN-role auth and mocked DB"""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_admin] = lambda: mock_admin
    app.dependency_overrides[get_session_store] = lambda: session_store
    client = TestClient(app)
    yield client, mock_db, mock_admin
    app.dependency_overrides.clear()


@pytest.fixture
def unauthenticated_client(mock_db, session_store):
    """TestClient with mocked DB but no auth"""
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    client = TestClient(app)
    yield client, mock_db
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    """In-memory SQLite session with every table created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def sqlite_client(db_session, mock_admin, session_store):
    """TestClient backed by a real SQLite session, ADMIN auth"""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_current_admin] = lambda: mock_admin
    app.dependency_overrides[get_session_store] = lambda: session_store
    client = TestClient(app)
    yield client, db_session
    app.dependency_overrides.clear()


@pytest.fixture
def sqlite_owner_client(db_session, mock_owner, session_store):
    """TestClient backed by a real SQLite session, OWNER auth"""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_current_admin] = lambda: mock_owner
    app.dependency_overrides[get_session_store] = lambda: session_store
    client = TestClient(app)
    yield client, db_session
    app.dependency_overrides.clear()
