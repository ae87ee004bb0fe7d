import logging
import uuid
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from cinebook.db.session import get_db
from cinebook.api.deps import get_current_admin_user
from cinebook.api.v1.public.showtimes import build_seat_rows
from cinebook.booking.booked_seats import booked_seat_owners
from cinebook.booking.seat_map import generate_seat_map, total_seats
from cinebook.models.user import User
from cinebook.models.catalog import Movie, Cinema
from cinebook.models.showtime import Showtime
from cinebook.models.booking import Booking
from cinebook.schemas.showtime import (
    ShowtimeCreate,
    ShowtimeUpdate,
    Showtime as ShowtimeSchema,
)
from cinebook.schemas.seat import SeatMapResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/showtimes", tags=["Admin - Showtimes"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_showtime_or_404(db: Session, showtime_id: str) -> Showtime:
    showtime = db.get(Showtime, showtime_id)
    if not showtime:
        raise HTTPException(status_code=404, detail="Showtime not found")
    return showtime


def _end_time(start_time, movie: Movie):
    return start_time + timedelta(minutes=movie.duration_minutes)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.post("/", response_model=ShowtimeSchema, status_code=status.HTTP_201_CREATED)
def create_showtime(
    data: ShowtimeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """
    Schedule a showtime.
    End time is derived from the movie duration; seat counters start at the
    full layout capacity.
    """
    movie = db.get(Movie, data.movie_id)
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    if not db.get(Cinema, data.cinema_id):
        raise HTTPException(status_code=404, detail="Cinema not found")
    if data.id and db.get(Showtime, data.id):
        raise HTTPException(status_code=409, detail=f"Showtime {data.id} already exists")

    capacity = total_seats()
    showtime = Showtime(
        id=data.id or str(uuid.uuid4()),
        movie_id=movie.id,
        cinema_id=data.cinema_id,
        screen_id=data.screen_id,
        start_time=data.start_time,
        end_time=_end_time(data.start_time, movie),
        base_price=data.base_price,
        total_seats=capacity,
        available_seats=capacity,
        format=data.format,
    )
    db.add(showtime)
    db.commit()
    db.refresh(showtime)
    logger.info("Admin %s created showtime %s", current_user.id, showtime.id)
    return showtime


@router.patch("/{showtime_id}", response_model=ShowtimeSchema)
def update_showtime(
    showtime_id: str,
    data: ShowtimeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Edit schedule details. Seat counters are never edited by hand."""
    showtime = _get_showtime_or_404(db, showtime_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(showtime, field, value)
    if data.start_time is not None:
        showtime.end_time = _end_time(data.start_time, showtime.movie)
    db.commit()
    db.refresh(showtime)
    return showtime


@router.delete("/{showtime_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_showtime(
    showtime_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Delete a showtime that no booking has ever referenced."""
    showtime = _get_showtime_or_404(db, showtime_id)
    if db.query(Booking.id).filter(Booking.showtime_id == showtime_id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Showtime has bookings and cannot be deleted",
        )
    db.delete(showtime)
    db.commit()
    logger.info("Admin %s deleted showtime %s", current_user.id, showtime_id)


# ---------------------------------------------------------------------------
# Seat view: same layout as the customer seat map, plus booking ids
# ---------------------------------------------------------------------------


@router.get("/{showtime_id}/seats", response_model=SeatMapResponse)
def get_showtime_seats(
    showtime_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    showtime = _get_showtime_or_404(db, showtime_id)
    seat_bookings = booked_seat_owners(db, showtime.id)
    seats = generate_seat_map(showtime.id, seat_bookings.keys())
    return SeatMapResponse(
        showtime_id=showtime.id,
        total_seats=showtime.total_seats,
        available_seats=showtime.available_seats,
        rows=build_seat_rows(showtime, seats, seat_bookings),
    )
