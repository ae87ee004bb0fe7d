import uuid
import enum
from sqlalchemy import Column, String, DateTime, Integer, DECIMAL, ForeignKey, func, Enum as SAEnum
from sqlalchemy.orm import relationship
from cinebook.db.session import Base


class ShowFormat(str, enum.Enum):
    TWO_D = "2D"
    THREE_D = "3D"
    IMAX = "IMAX"


class Showtime(Base):
    __tablename__ = "showtimes"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    movie_id = Column(String(36), ForeignKey("movies.id"), nullable=False, index=True)
    cinema_id = Column(String(36), ForeignKey("cinemas.id"), nullable=False, index=True)
    screen_id = Column(String(64), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=False)  # start_time + movie duration
    base_price = Column(DECIMAL(12, 2), nullable=False)
    total_seats = Column(Integer, nullable=False)
    # Written only by the booking transaction (see cinebook.booking.transaction)
    available_seats = Column(Integer, nullable=False)
    format = Column(
        SAEnum(ShowFormat, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=ShowFormat.TWO_D,
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    movie = relationship("Movie", back_populates="showtimes")
    cinema = relationship("Cinema", back_populates="showtimes")
    bookings = relationship("Booking", back_populates="showtime")
