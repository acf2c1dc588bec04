"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mileage.api.deps import get_db
from mileage.core.database import Base
from mileage.main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _fk_on(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # no context manager: the lifespan would create tables on the configured database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Register a user and return ``(auth_headers, user)``."""

    def _signup(username: str = "rider1", **overrides):
        user = {
            "first_name": "Ada",
            "last_name": "Byron",
            "username": username,
            "email": f"{username}@rider.io",
            "password": "Secret1!",
            "password_confirmation": "Secret1!",
            **overrides,
        }
        response = client.post("/signup", json={"user": user})
        assert response.status_code == 201, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    return _signup


def future(hours: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


def meetup_body(**overrides):
    location = {
        "address": "1 Trail Rd",
        "city": "Portland",
        "state": "OR",
        "zip_code": "97201",
        "country": "US",
    }
    location.update(overrides.pop("location_attributes", {}))
    meetup = {
        "title": "Saturday long run",
        "activity": "run",
        "start_date_time": future(24),
        "end_date_time": future(26),
        "guests": 3,
        "location_attributes": location,
    }
    meetup.update(overrides)
    return {"meetup": meetup}


@pytest.fixture
def create_meetup(client):
    def _create(headers, **overrides):
        response = client.post("/meetups", json=meetup_body(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def make_meetup_body():
    return meetup_body
