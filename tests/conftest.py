"""
Pytest configuration.

Points the application at an in-memory SQLite database before anything from
``frontdesk`` is imported, and recreates the schema for every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_SCHEMA"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from frontdesk.db import Base, SessionLocal, engine  # noqa: E402
from frontdesk.main import app  # noqa: E402
from frontdesk.models import Category, Room  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    """Fresh tables for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_category(db):
    """Create a category with rooms; returns the committed Category."""

    def _make(name="Deluxe", rooms=(), status="available"):
        category = Category(name=name)
        db.add(category)
        db.flush()
        for number in rooms:
            db.add(Room(room_number=str(number), category_id=category.id, status=status))
        db.commit()
        return category

    return _make


def rooms_of(db, category_id):
    db.expire_all()
    return {r.room_number: r.status for r in db.query(Room).filter(Room.category_id == category_id)}
