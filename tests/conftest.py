import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_FILE", "test.log")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from booking_app.database import Base, get_db
from booking_app.main import app
from booking_app.models.booking_model import Booking
from booking_app.models.user_model import User

# One in-memory database shared by every session of a test
engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

MONDAY = "2026-01-19"
TUESDAY = "2026-01-20"
SATURDAY = "2026-01-17"
SUNDAY = "2026-01-18"


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make_user(name="Alia Hassan", email=None, role="user", password_hash="not-a-real-hash"):
        user = User(
            name=name,
            email=email or f"{name.split()[0].lower()}@example.com",
            password_hash=password_hash,
            role=role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_booking(db):
    def _make_booking(user_id, date=TUESDAY, time="10:00", service="haircut", status="pending", note=""):
        booking = Booking(user_id=str(user_id), date=date, time=time, service=service, status=status, note=note)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture()
def user(make_user):
    return make_user("Alia Hassan", "alia@example.com")


@pytest.fixture()
def admin(make_user):
    return make_user("Omar Admin", "admin@example.com", role="admin")
