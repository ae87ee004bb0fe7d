import logging
from typing import Dict, List, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cinebook.booking.errors import StorageError
from cinebook.models.booking import Booking, LIVE_STATUSES

logger = logging.getLogger(__name__)


def _live_bookings(db: Session, showtime_id: str) -> List[Tuple[str, list]]:
    try:
        return (
            db.query(Booking.id, Booking.seats)
            .filter(
                Booking.showtime_id == showtime_id,
                Booking.status.in_(LIVE_STATUSES),
            )
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception("Could not read booked seats for showtime %s", showtime_id)
        raise StorageError("Seat availability is temporarily unknown") from exc


def booked_seat_ids(db: Session, showtime_id: str) -> Set[str]:
    """
    Return the seat ids held by live (pending, confirmed or completed)
    bookings of a showtime. Cancelled bookings release their seats.

    A query failure is raised as StorageError. Callers must never treat a
    failed read as "nothing booked".
    """
    return set(booked_seat_owners(db, showtime_id))


def booked_seat_owners(db: Session, showtime_id: str) -> Dict[str, str]:
    """Map each booked seat id of a showtime to the live booking holding it."""
    return {
        seat_id: booking_id
        for booking_id, seats in _live_bookings(db, showtime_id)
        for seat_id in seats or []
    }
