from sqlalchemy import inspect
from sqlalchemy.orm import configure_mappers

from cinebook.db.base import Base
from cinebook.models import Booking, SeatClaim


def test_orm_mappings_are_valid():
    configure_mappers()


def test_all_tables_registered():
    assert {"users", "movies", "cinemas", "showtimes", "bookings", "seat_claims"} <= set(Base.metadata.tables)


def test_seat_claim_is_keyed_on_showtime_and_seat():
    # The composite key is what rejects a second live claim on the same seat
    pk = [c.name for c in inspect(SeatClaim).primary_key]
    assert pk == ["showtime_id", "seat_id"]


def test_booking_number_is_unique():
    assert Booking.__table__.c.booking_number.unique
