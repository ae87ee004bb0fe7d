import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("ADMIN_SECRET_KEY", "test-admin-secret")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from cinebook.booking.seat_map import total_seats
from cinebook.core.security import create_access_token
from cinebook.db.base import Base
from cinebook.db.session import get_db
from cinebook.main import app
from cinebook.models import Cinema, Movie, MembershipTier, Showtime, ShowFormat, User

SHOWTIME_ID = "S1"


@pytest.fixture()
def engine(tmp_path):
    # File database so independent sessions (and threads) see each other's commits
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_user(db, email, role="user", tier=MembershipTier.BASIC, points=0):
    user = User(
        email=email,
        full_name=email.split("@")[0],
        password_hash="not-a-real-hash",
        role=role,
        membership_tier=tier,
        membership_points=points,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest.fixture()
def showtime(db):
    movie = Movie(id="m1", title="Dune: Part Two", duration_minutes=166)
    cinema = Cinema(id="c1", name="Galaxy Nguyen Du", city="Ho Chi Minh City")
    start = datetime.now(timezone.utc) + timedelta(days=1)
    showtime = Showtime(
        id=SHOWTIME_ID,
        movie_id=movie.id,
        cinema_id=cinema.id,
        screen_id="screen-1",
        start_time=start,
        end_time=start + timedelta(minutes=movie.duration_minutes),
        base_price=Decimal("90000"),
        total_seats=total_seats(),
        available_seats=total_seats(),
        format=ShowFormat.TWO_D,
    )
    db.add_all([movie, cinema, showtime])
    db.commit()
    db.refresh(showtime)
    return showtime


@pytest.fixture()
def alice(db):
    return make_user(db, "alice@example.com")


@pytest.fixture()
def bob(db):
    return make_user(db, "bob@example.com")


@pytest.fixture()
def admin(db):
    return make_user(db, "admin@example.com", role="admin")


def available_seats(session_factory, showtime_id=SHOWTIME_ID):
    """Read the counter through a fresh session, bypassing any identity map."""
    session = session_factory()
    try:
        return session.get(Showtime, showtime_id).available_seats
    finally:
        session.close()
