"""
Booking status state machine.

    PENDING ──> CONFIRMED ──> COMPLETED
       │
       └──────> CANCELLED

CANCELLED and COMPLETED are terminal. Cancelling releases seats, so it is
routed through the booking transaction; the other moves only change status.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from cinebook.booking.errors import BookingNotFound, InvalidStateTransition
from cinebook.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return BookingStatus(target) in ALLOWED_TRANSITIONS[BookingStatus(current)]


def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
    if not can_transition(current, target):
        logger.warning("Rejected booking transition %s -> %s", current, target)
        raise InvalidStateTransition(current, target)


def transition_booking(
    db: Session,
    booking_id: str,
    target: BookingStatus,
    *,
    user_id: Optional[str] = None,
) -> Booking:
    """Move a booking to ``target`` if the graph allows it, applying side effects."""
    from cinebook.booking.transaction import atomic, cancel_booking, load_booking

    target = BookingStatus(target)
    if target == BookingStatus.CANCELLED:
        return cancel_booking(db, booking_id, user_id=user_id)

    booking = load_booking(db, booking_id, user_id)
    current = booking.status
    ensure_transition(current, target)

    with atomic(db):
        updated = (
            db.query(Booking)
            .filter(Booking.id == booking_id, Booking.status == current)
            .update({Booking.status: target}, synchronize_session="fetch")
        )
        if updated != 1:
            raise InvalidStateTransition(current, target)

    logger.info("Booking %s moved %s -> %s", booking_id, current.value, target.value)
    return booking


def confirm_booking(db: Session, booking_id: str, *, user_id: Optional[str] = None) -> Booking:
    """Mark a pending booking as paid."""
    return transition_booking(db, booking_id, BookingStatus.CONFIRMED, user_id=user_id)


def complete_booking(db: Session, booking_id: str) -> Booking:
    return transition_booking(db, booking_id, BookingStatus.COMPLETED)
