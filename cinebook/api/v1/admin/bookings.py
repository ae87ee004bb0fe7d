from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cinebook.db.session import get_db
from cinebook.api.deps import get_current_admin_user
from cinebook.api.v1.public.bookings import serialize_booking
from cinebook.booking.lifecycle import complete_booking
from cinebook.booking.transaction import cancel_booking
from cinebook.models.user import User
from cinebook.models.booking import Booking, BookingStatus
from cinebook.schemas.booking import Booking as BookingSchema
from cinebook.schemas.common import PaginatedResponse

router = APIRouter(prefix="/admin/bookings", tags=["Admin - Bookings"])


@router.get("/", response_model=PaginatedResponse[BookingSchema])
def list_all_bookings(
    # --- Filters ---
    showtime_id: Optional[str] = Query(None, description="Filter by showtime"),
    user_id: Optional[str] = Query(None, description="Filter by user"),
    status: Optional[BookingStatus] = Query(None, description="Filter by booking status"),
    # --- Pagination ---
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Return all bookings, newest first."""
    query = db.query(Booking)
    if showtime_id:
        query = query.filter(Booking.showtime_id == showtime_id)
    if user_id:
        query = query.filter(Booking.user_id == user_id)
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


@router.patch("/{booking_id}/complete", response_model=BookingSchema)
def complete(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Mark a confirmed booking as completed after its showtime has run."""
    return serialize_booking(complete_booking(db, booking_id))


@router.patch("/{booking_id}/cancel", response_model=BookingSchema)
def cancel(
    booking_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Cancel any user's pending booking."""
    return serialize_booking(cancel_booking(db, booking_id))
