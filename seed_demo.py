"""Insert a demo movie, cinema, showtime and admin user into the configured database."""
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from cinebook.core.config import settings
from cinebook.core.security import get_password_hash
from cinebook.booking.seat_map import total_seats
from cinebook.db.base import Base
from cinebook.db.session import engine, SessionLocal
from cinebook.models.catalog import Movie, Cinema
from cinebook.models.showtime import Showtime, ShowFormat
from cinebook.models.user import User

logger = logging.getLogger(__name__)

DEMO_SHOWTIME_ID = "S1"


def seed_demo():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.get(Showtime, DEMO_SHOWTIME_ID):
            logger.info("Demo data already present.")
            return

        admin = db.query(User).filter(User.email == "admin@cinebook.local").first()
        if not admin:
            db.add(User(
                email="admin@cinebook.local",
                full_name="CineBook Admin",
                password_hash=get_password_hash("adminpassword"),
                role="admin",
            ))

        movie = Movie(title="Dune: Part Two", duration_minutes=166)
        cinema = Cinema(name="Galaxy Nguyen Du", city="Ho Chi Minh City", address="116 Nguyen Du, District 1")
        db.add_all([movie, cinema])
        db.flush()

        start = (datetime.now(timezone.utc) + timedelta(days=1)).replace(minute=0, second=0, microsecond=0)
        db.add(Showtime(
            id=DEMO_SHOWTIME_ID,
            movie_id=movie.id,
            cinema_id=cinema.id,
            screen_id="screen-1",
            start_time=start,
            end_time=start + timedelta(minutes=movie.duration_minutes),
            base_price=Decimal("90000"),
            total_seats=total_seats(),
            available_seats=total_seats(),
            format=ShowFormat.IMAX,
        ))
        db.commit()
        logger.info("Seeded demo showtime %s into %s", DEMO_SHOWTIME_ID, settings.DATABASE_URL)
    finally:
        db.close()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_demo()
