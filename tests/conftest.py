import os

os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SMTP_HOST"] = ""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import auth
import models
from database import get_db, make_engine
from main import app

BASE_DAY = datetime(2030, 3, 4)


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'test.db'}")
    models.Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    counter = {"n": 0}

    def _make(role=models.Role.STUDENT, name=None, email=None, password="secret123"):
        counter["n"] += 1
        n = counter["n"]
        with session_factory() as db:
            user = models.User(
                name=name or f"User {n}",
                email=email or f"user{n}@campus.edu",
                hashed_password=auth.get_password_hash(password),
                role=role,
            )
            db.add(user)
            db.commit()
            return user.id

    return _make


@pytest.fixture
def headers_for():
    def _headers(user_id, role=models.Role.STUDENT):
        return {"Authorization": f"Bearer {auth.create_access_token(user_id, role)}"}

    return _headers


@pytest.fixture
def make_event(session_factory):
    def _make(organizer_id, start_hour=10, end_hour=11, day=0, capacity=10, price=0.0,
              title="Workshop", category="Tech", venue="Tech Park"):
        with session_factory() as db:
            event = models.Event(
                title=title,
                description=f"{title} at {venue}",
                venue=venue,
                category=category,
                start_time=BASE_DAY + timedelta(days=day, hours=start_hour),
                end_time=BASE_DAY + timedelta(days=day, hours=end_hour),
                capacity=capacity,
                price=price,
                organizer_id=organizer_id,
            )
            event.analytics = models.Analytics(registrations_count=0, revenue=0)
            db.add(event)
            db.commit()
            return event.id

    return _make


@pytest.fixture
def organizer(make_user):
    return make_user(models.Role.ORGANIZER, name="Organizer One", email="organizer1@campus.edu")
