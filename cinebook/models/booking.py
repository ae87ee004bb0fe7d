import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, DECIMAL, ForeignKey, JSON, Enum as SAEnum
from sqlalchemy.orm import relationship
from cinebook.db.session import Base


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"


# Statuses whose seats are taken
LIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.COMPLETED)


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_number = Column(String(20), unique=True, nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    showtime_id = Column(String(64), ForeignKey("showtimes.id"), nullable=False, index=True)
    movie_id = Column(String(36), ForeignKey("movies.id"), nullable=False)
    cinema_id = Column(String(36), ForeignKey("cinemas.id"), nullable=False)
    seats = Column(JSON, nullable=False)  # ordered list of seat ids
    total_amount = Column(DECIMAL(12, 2), nullable=False)
    discount_amount = Column(DECIMAL(12, 2), nullable=False, default=0)
    payment_method = Column(String(30), nullable=False, default="")
    status = Column(SAEnum(BookingStatus, native_enum=False), default=BookingStatus.PENDING, nullable=False, index=True)
    booking_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User")
    showtime = relationship("Showtime", back_populates="bookings")
    movie = relationship("Movie")
    cinema = relationship("Cinema")
    claims = relationship("SeatClaim", back_populates="booking")


class SeatClaim(Base):
    """A seat held by a live booking. At most one row per (showtime, seat)."""

    __tablename__ = "seat_claims"

    showtime_id = Column(String(64), ForeignKey("showtimes.id"), primary_key=True)
    seat_id = Column(String(128), primary_key=True)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False, index=True)

    booking = relationship("Booking", back_populates="claims")
