"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests. Every
table is emptied after each test.
"""
import os

SQLITE_URL = "sqlite:///./test_tracker.db"
os.environ["DATABASE_URL"] = SQLITE_URL

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from zoneinfo import ZoneInfo

from app.core.deps import get_calendar
from app.db.base import Base, get_db
from app.main import app
from tests.helpers import FixedCalendar, register_and_login

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def calendar():
    return FixedCalendar(tz=ZoneInfo("UTC"))


@pytest.fixture()
def client(calendar):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_calendar] = lambda: calendar
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers(client):
    return register_and_login(client)
