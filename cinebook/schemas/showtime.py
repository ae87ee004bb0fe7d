from typing import Optional
from pydantic import BaseModel, Field
from decimal import Decimal
from datetime import datetime

from cinebook.models.showtime import ShowFormat


# Showtime: Create (admin POST /admin/showtimes)
class ShowtimeCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")
    movie_id: str
    cinema_id: str
    screen_id: str
    start_time: datetime
    base_price: Decimal = Field(..., gt=0)
    format: ShowFormat = ShowFormat.TWO_D


# Showtime: Update (admin PATCH /admin/showtimes/{id})
# Seat counters are deliberately absent: only bookings move them.
class ShowtimeUpdate(BaseModel):
    screen_id: Optional[str] = None
    start_time: Optional[datetime] = None
    base_price: Optional[Decimal] = Field(None, gt=0)
    format: Optional[ShowFormat] = None


class Showtime(BaseModel):
    id: str
    movie_id: str
    cinema_id: str
    screen_id: str
    start_time: datetime
    end_time: datetime
    base_price: Decimal
    total_seats: int
    available_seats: int
    format: ShowFormat

    class Config:
        from_attributes = True
