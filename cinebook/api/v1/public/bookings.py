from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from cinebook.db.session import get_db
from cinebook.api.deps import get_current_user, get_current_user_id
from cinebook.booking.errors import BookingValidationError
from cinebook.booking.lifecycle import confirm_booking
from cinebook.booking.pricing import quote
from cinebook.booking.seat_map import seat_for_id
from cinebook.booking.seat_ref import SeatRef
from cinebook.booking.transaction import cancel_booking, create_booking, load_booking, validate_selection
from cinebook.models.user import User
from cinebook.models.booking import Booking, BookingStatus
from cinebook.models.showtime import Showtime
from cinebook.schemas.booking import (
    BookingCreate,
    Booking as BookingSchema,
    BookingCancelResponse,
)
from cinebook.schemas.common import PaginatedResponse

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def serialize_booking(booking: Booking) -> BookingSchema:
    """Convert a Booking ORM object to its schema representation."""
    return BookingSchema(
        id=booking.id,
        booking_number=booking.booking_number,
        user_id=booking.user_id,
        showtime_id=booking.showtime_id,
        movie_id=booking.movie_id,
        cinema_id=booking.cinema_id,
        seats=list(booking.seats),
        seat_labels=[SeatRef.parse(seat_id).label for seat_id in booking.seats],
        total_amount=booking.total_amount,
        discount_amount=booking.discount_amount,
        payable_amount=booking.total_amount - booking.discount_amount,
        payment_method=booking.payment_method,
        status=booking.status,
        booking_date=booking.booking_date,
        cancelled_at=booking.cancelled_at,
    )


# ---------------------------------------------------------------------------
# POST /bookings: create a pending booking
# ---------------------------------------------------------------------------


@router.post("/", response_model=BookingSchema, status_code=status.HTTP_201_CREATED)
def create(
    data: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Book seats for a showtime.

    - The total is priced server-side from the showtime base price and seat types.
    - The member's discount is stored alongside the total.
    - Availability is re-checked at write time; a taken seat returns 409 and
      the client should refresh the seat map.
    """
    showtime = db.get(Showtime, data.showtime_id)
    if not showtime:
        raise BookingValidationError(f"Showtime {data.showtime_id} not found")

    validate_selection(showtime.id, data.seat_ids)
    seats = [seat_for_id(seat_id) for seat_id in data.seat_ids]
    q = quote(showtime.base_price, seats, current_user.membership_tier)

    booking = create_booking(
        db,
        user_id=current_user.id,
        showtime_id=showtime.id,
        movie_id=showtime.movie_id,
        cinema_id=showtime.cinema_id,
        seat_ids=data.seat_ids,
        total_amount=q.subtotal,
        discount_amount=q.discount,
        payment_method=data.payment_method,
    )
    return serialize_booking(booking)


# ---------------------------------------------------------------------------
# GET /bookings: list current user's bookings
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_my_bookings(
    status: Optional[BookingStatus] = Query(
        None, description="Filter by status: PENDING, CONFIRMED, CANCELLED, COMPLETED"
    ),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Return the authenticated user's bookings, newest first."""
    query = db.query(Booking).filter(Booking.user_id == current_user.id)
    if status:
        query = query.filter(Booking.status == status)

    total = query.count()
    bookings = (
        query.order_by(Booking.booking_date.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        data=[serialize_booking(b) for b in bookings],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


# ---------------------------------------------------------------------------
# GET /bookings/{id}: single booking detail
# ---------------------------------------------------------------------------


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Return a single booking. Only the owning user can access it."""
    return serialize_booking(load_booking(db, booking_id, user_id))


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/cancel
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/cancel", response_model=BookingCancelResponse)
def cancel(
    booking_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Cancel a pending booking.
    - Releases its seats back to the seat map.
    - Restores the showtime's available seat count.
    Confirmed and completed bookings cannot be cancelled here (409).
    """
    booking = cancel_booking(db, booking_id, user_id=user_id)
    return BookingCancelResponse(
        id=booking.id,
        booking_number=booking.booking_number,
        status=booking.status,
        cancelled_at=booking.cancelled_at,
        released_seats=list(booking.seats),
    )


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/confirm: payment succeeded
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/confirm", response_model=BookingSchema)
def confirm(
    booking_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Mark a pending booking as confirmed once payment has gone through."""
    booking = confirm_booking(db, booking_id, user_id=user_id)
    return serialize_booking(booking)
