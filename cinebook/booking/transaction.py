"""
Atomic booking create/cancel.

Each operation is a single unit of work: either every effect (booking row,
seat claims, seat counter) is committed or none is. Double booking is
prevented by the database, not by client-side checks:

* ``seat_claims`` has one row per (showtime, seat) of a live booking, keyed
  on that pair, so the second of two overlapping commits fails with a
  uniqueness violation.
* the available-seat counter is adjusted with a conditional
  ``UPDATE ... WHERE available_seats >= n`` instead of read-then-write.

The early ``booked_seat_ids`` check only gives a friendlier error for the
common case; the constraints above are what enforce correctness.
"""
import logging
import random
import string
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cinebook.booking.booked_seats import booked_seat_ids
from cinebook.booking.errors import (
    BookingError,
    BookingNotFound,
    BookingValidationError,
    InvalidStateTransition,
    NotAuthenticated,
    SeatConflict,
    StorageError,
)
from cinebook.booking.lifecycle import ensure_transition
from cinebook.booking.seat_map import is_in_layout
from cinebook.booking.seat_ref import SeatRef
from cinebook.models.booking import Booking, BookingStatus, SeatClaim
from cinebook.models.showtime import Showtime

logger = logging.getLogger(__name__)


def is_seat_claim_violation(exc: IntegrityError) -> bool:
    """True when ``exc`` is a duplicate (showtime, seat) key in seat_claims."""
    message = str(exc.orig).lower()
    return SeatClaim.__tablename__ in message and ("unique" in message or "duplicate" in message)


# ---------------------------------------------------------------------------
# Unit of work
# ---------------------------------------------------------------------------


@contextmanager
def atomic(db: Session, on_conflict: Optional[Callable[[], BookingError]] = None):
    """
    Commit everything done inside the block as one unit, or roll it all back.

    A duplicate seat claim becomes ``on_conflict()`` when given. Any other
    database failure, including other constraint violations, becomes
    StorageError. Errors raised by the block itself roll back and propagate
    unchanged.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if on_conflict is not None and is_seat_claim_violation(exc):
            raise on_conflict() from exc
        logger.exception("Integrity error during booking write")
        raise StorageError("Booking could not be saved") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure during booking write")
        raise StorageError("Booking could not be saved") from exc
    except Exception:
        db.rollback()
        raise


@contextmanager
def _reading(what: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Could not read %s", what)
        raise StorageError(f"Could not read {what}") from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _generate_booking_number(db: Session) -> str:
    """Generate a unique 'CB-XXXXXXXX' booking reference."""
    chars = string.ascii_uppercase + string.digits
    while True:
        number = "CB-" + "".join(random.choices(chars, k=8))
        if not db.query(Booking.id).filter(Booking.booking_number == number).first():
            return number


def _as_amount(value, field: str) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise BookingValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise BookingValidationError(f"{field} must be a number")
    return amount


def validate_selection(showtime_id: str, seat_ids: Iterable[str]) -> List[SeatRef]:
    """Parse a seat selection and check it is non-empty, unique and inside the layout."""
    seat_ids = list(seat_ids)
    if not seat_ids:
        raise BookingValidationError("Please select at least one seat")
    if len(set(seat_ids)) != len(seat_ids):
        raise BookingValidationError("A seat was selected more than once")

    refs = []
    for seat_id in seat_ids:
        ref = SeatRef.parse(seat_id)
        if ref.showtime_id != showtime_id:
            raise BookingValidationError(f"Seat {seat_id} does not belong to showtime {showtime_id}")
        if not is_in_layout(ref):
            raise BookingValidationError(f"Seat {seat_id} is not part of the seat layout")
        refs.append(ref)
    return refs


def load_booking(db: Session, booking_id: str, user_id: Optional[str]) -> Booking:
    with _reading("booking"):
        booking = db.get(Booking, booking_id)
    # Other users' bookings are reported as missing
    if booking is None or (user_id is not None and booking.user_id != user_id):
        raise BookingNotFound(booking_id)
    return booking


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def create_booking(
    db: Session,
    *,
    user_id: Optional[str],
    showtime_id: str,
    movie_id: str,
    cinema_id: str,
    seat_ids: Iterable[str],
    total_amount,
    discount_amount=0,
    payment_method: str = "",
) -> Booking:
    """
    Book a set of seats for a user as one atomic write.

    Availability is re-read here rather than trusted from the seat map the
    user was looking at. Returns the new PENDING booking.
    """
    if not user_id:
        raise NotAuthenticated()

    seat_ids = list(seat_ids)
    validate_selection(showtime_id, seat_ids)

    amount = _as_amount(total_amount, "total_amount")
    if amount <= 0:
        raise BookingValidationError("total_amount must be positive")
    discount = _as_amount(discount_amount, "discount_amount")
    if discount < 0 or discount > amount:
        raise BookingValidationError("discount_amount must be between 0 and total_amount")

    with _reading("showtime"):
        showtime = db.get(Showtime, showtime_id)
    if showtime is None:
        raise BookingValidationError(f"Showtime {showtime_id} not found")
    if showtime.movie_id != movie_id:
        raise BookingValidationError(f"Showtime {showtime_id} is not a screening of movie {movie_id}")
    if showtime.cinema_id != cinema_id:
        raise BookingValidationError(f"Showtime {showtime_id} is not at cinema {cinema_id}")

    taken = booked_seat_ids(db, showtime_id).intersection(seat_ids)
    if taken:
        logger.warning("Seats %s already booked for showtime %s", sorted(taken), showtime_id)
        raise SeatConflict(taken)

    with _reading("booking numbers"):
        booking_number = _generate_booking_number(db)

    quantity = len(seat_ids)
    booking = Booking(
        id=str(uuid.uuid4()),
        booking_number=booking_number,
        user_id=user_id,
        showtime_id=showtime_id,
        movie_id=movie_id,
        cinema_id=cinema_id,
        seats=seat_ids,
        total_amount=amount,
        discount_amount=discount,
        payment_method=payment_method or "",
        status=BookingStatus.PENDING,
        booking_date=datetime.now(timezone.utc),
    )

    try:
        with atomic(db, on_conflict=lambda: SeatConflict(seat_ids)):
            updated = (
                db.query(Showtime)
                .filter(
                    Showtime.id == showtime_id,
                    Showtime.available_seats >= quantity,
                )
                .update(
                    {Showtime.available_seats: Showtime.available_seats - quantity},
                    synchronize_session="fetch",
                )
            )
            if updated != 1:
                # Counter cannot cover the selection: seats went elsewhere
                raise SeatConflict(seat_ids)

            db.add(booking)
            db.add_all(
                SeatClaim(showtime_id=showtime_id, seat_id=seat_id, booking=booking)
                for seat_id in seat_ids
            )
    except SeatConflict:
        logger.warning("Seat conflict creating booking for showtime %s (seats %s)", showtime_id, seat_ids)
        raise

    logger.info(
        "Created booking %s (%s) for user %s: %d seat(s) on showtime %s",
        booking.booking_number, booking.id, user_id, quantity, showtime_id,
    )
    return booking


# ---------------------------------------------------------------------------
# Cancel
# ---------------------------------------------------------------------------


def cancel_booking(db: Session, booking_id: str, *, user_id: Optional[str] = None) -> Booking:
    """
    Cancel a PENDING booking, releasing its seats and restoring the
    showtime counter in the same unit of work.

    When ``user_id`` is given, only that user's booking can be cancelled.
    """
    booking = load_booking(db, booking_id, user_id)
    ensure_transition(booking.status, BookingStatus.CANCELLED)

    showtime_id = booking.showtime_id
    quantity = len(booking.seats)
    now = datetime.now(timezone.utc)

    try:
        with atomic(db):
            # Guarded on the status so a concurrent confirm/cancel wins cleanly
            updated = (
                db.query(Booking)
                .filter(Booking.id == booking_id, Booking.status == BookingStatus.PENDING)
                .update(
                    {Booking.status: BookingStatus.CANCELLED, Booking.cancelled_at: now},
                    synchronize_session="fetch",
                )
            )
            if updated != 1:
                current = db.query(Booking.status).filter(Booking.id == booking_id).scalar()
                raise InvalidStateTransition(current, BookingStatus.CANCELLED)

            db.query(SeatClaim).filter(SeatClaim.booking_id == booking_id).delete(
                synchronize_session="fetch"
            )
            db.query(Showtime).filter(Showtime.id == showtime_id).update(
                {Showtime.available_seats: Showtime.available_seats + quantity},
                synchronize_session="fetch",
            )
    except InvalidStateTransition:
        logger.warning("Booking %s changed state before it could be cancelled", booking_id)
        raise

    logger.info("Cancelled booking %s, released %d seat(s) on showtime %s", booking_id, quantity, showtime_id)
    return booking
