from typing import List, Optional
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from cinebook.db.session import get_db
from cinebook.api.deps import get_current_user
from cinebook.booking.booked_seats import booked_seat_ids
from cinebook.booking.pricing import quote, seat_price
from cinebook.booking.seat_map import Seat, generate_seat_map, seat_for_id
from cinebook.booking.transaction import validate_selection
from cinebook.models.user import User
from cinebook.models.showtime import Showtime
from cinebook.schemas.showtime import Showtime as ShowtimeSchema
from cinebook.schemas.seat import (
    SeatMapResponse,
    SeatRow,
    SeatStatus,
    QuoteRequest,
    QuoteResponse,
)

router = APIRouter(prefix="/showtimes", tags=["Showtimes"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_showtime_or_404(db: Session, showtime_id: str) -> Showtime:
    showtime = db.get(Showtime, showtime_id)
    if not showtime:
        raise HTTPException(status_code=404, detail="Showtime not found")
    return showtime


def build_seat_rows(showtime: Showtime, seats: List[Seat], seat_bookings: Optional[dict] = None) -> List[SeatRow]:
    """Group a generated seat list by row, pricing each row from the showtime base price."""
    rows_dict: dict[str, dict] = {}
    for seat in seats:
        key = seat.row
        if key not in rows_dict:
            rows_dict[key] = {
                "label": seat.row,
                "type": seat.type,
                "price": seat_price(showtime.base_price, seat.type),
                "seats": [],
            }
        rows_dict[key]["seats"].append(SeatStatus(
            id=seat.id,
            label=seat.ref.label,
            number=seat.number,
            is_available=seat.is_available,
            booking_id=(seat_bookings or {}).get(seat.id),
        ))
    return [SeatRow(**r) for r in rows_dict.values()]


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[ShowtimeSchema])
def list_showtimes(
    movie_id: Optional[str] = Query(None),
    cinema_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Return upcoming showtimes, soonest first, optionally for one movie or cinema."""
    query = db.query(Showtime).filter(Showtime.start_time > datetime.now(timezone.utc))
    if movie_id:
        query = query.filter(Showtime.movie_id == movie_id)
    if cinema_id:
        query = query.filter(Showtime.cinema_id == cinema_id)
    return query.order_by(Showtime.start_time).all()


@router.get("/{showtime_id}", response_model=ShowtimeSchema)
def get_showtime(showtime_id: str, db: Session = Depends(get_db)):
    return _get_showtime_or_404(db, showtime_id)


@router.get("/{showtime_id}/seat-map", response_model=SeatMapResponse)
def get_seat_map(showtime_id: str, db: Session = Depends(get_db)):
    """
    Return the seat map for a showtime, grouped by row.
    Does not require authentication: anyone can view availability.
    """
    showtime = _get_showtime_or_404(db, showtime_id)
    seats = generate_seat_map(showtime.id, booked_seat_ids(db, showtime.id))
    return SeatMapResponse(
        showtime_id=showtime.id,
        total_seats=showtime.total_seats,
        available_seats=showtime.available_seats,
        rows=build_seat_rows(showtime, seats),
    )


@router.post("/{showtime_id}/quote", response_model=QuoteResponse)
def quote_seats(
    showtime_id: str,
    body: QuoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Price a seat selection, including the caller's membership discount."""
    showtime = _get_showtime_or_404(db, showtime_id)
    validate_selection(showtime.id, body.seat_ids)
    seats = [seat_for_id(seat_id) for seat_id in body.seat_ids]
    q = quote(showtime.base_price, seats, current_user.membership_tier)
    return QuoteResponse(
        showtime_id=showtime.id,
        seat_ids=body.seat_ids,
        membership_tier=current_user.membership_tier,
        subtotal=q.subtotal,
        discount=q.discount,
        payable=q.payable,
    )
