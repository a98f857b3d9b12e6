"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from walkin_queue.config import settings
from walkin_queue.core.rate_limit import limiter
from walkin_queue.core.security import create_access_token
from walkin_queue.database import Base, build_engine
from walkin_queue.dependencies import get_db
from walkin_queue.main import app
from walkin_queue.models import Category, Staff, SubCategory, Window, WindowAssignment
from walkin_queue.models.enums import StaffRole
from walkin_queue.services.queue_service import queue_service
from walkin_queue.services.staff_service import staff_service

# 2026-01-25 10:00 in Manila (UTC+8)
MORNING = datetime(2026, 1, 25, 2, 0)


@pytest.fixture(scope="function")
def engine():
    """In-memory SQLite shared by the test session and the API client."""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def test_db(session_factory):
    """Create a test database session."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def file_engine(tmp_path):
    """File-backed SQLite for tests that hit the database from many threads."""
    engine = build_engine(f"sqlite:///{tmp_path / 'queue.db'}", poolclass=NullPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_session_factory(file_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=file_engine)


def make_category(db, name="Billing", sub_names=("Payment", "Refund")):
    category = Category(name=name)
    category.sub_categories = [SubCategory(name=sub) for sub in sub_names]
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def make_staff(db, username, role=StaffRole.STAFF, window=None, category_ids=()):
    staff = staff_service.create_staff(
        db,
        username=username,
        name=username.title(),
        password="secret123",
        role=role,
        category_ids=category_ids,
    )
    if window is not None:
        db.add(WindowAssignment(staff_id=staff.id, window_id=window.id, is_active=True))
        db.commit()
    return staff


def make_window(db, label):
    window = Window(label=label, is_active=True)
    db.add(window)
    db.commit()
    db.refresh(window)
    return window


def join(db, name, client_type="REGULAR", category=None, now=None, sub_category_ids=None):
    return queue_service.submit_queue_entry(
        db,
        client_name=name,
        client_type=client_type,
        category_ids=[category.id],
        sub_category_ids=sub_category_ids,
        now=now,
    )


@pytest.fixture
def billing(test_db):
    """Billing category with Payment and Refund subcategories."""
    return make_category(test_db)


@pytest.fixture
def records(test_db):
    return make_category(test_db, name="Records", sub_names=("Transcript",))


@pytest.fixture
def window_one(test_db):
    return make_window(test_db, "Window 1")


@pytest.fixture
def window_two(test_db):
    return make_window(test_db, "Window 2")


@pytest.fixture
def staff_one(test_db, window_one):
    """Staff member attached to Window 1, all categories."""
    return make_staff(test_db, "alice", window=window_one)


@pytest.fixture
def staff_two(test_db, window_two):
    return make_staff(test_db, "bob", window=window_two)


@pytest.fixture
def admin(test_db) -> Staff:
    return make_staff(test_db, "admin", role=StaffRole.ADMIN)


def bearer(staff) -> dict:
    token = create_access_token(subject=staff.id, additional_claims={"role": staff.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(session_factory, monkeypatch):
    """Create test client bound to the in-memory database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    # Keep staff sessions valid regardless of when the suite runs
    monkeypatch.setattr(settings, "staff_logout_hour", 24)

    # Not used as a context manager so the lifespan does not touch the real database
    yield TestClient(app)

    app.dependency_overrides.clear()
    limiter.enabled = True
