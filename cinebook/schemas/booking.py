from typing import Annotated, Optional, List
from pydantic import BaseModel, Field
from decimal import Decimal
from datetime import datetime

from cinebook.models.booking import BookingStatus


# Booking: Create (POST /bookings)
class BookingCreate(BaseModel):
    showtime_id: str
    seat_ids: Annotated[List[str], Field(max_length=10)]
    payment_method: str = "CREDIT_CARD"


# Booking: Full response (POST /bookings, GET /bookings/{id})
class Booking(BaseModel):
    id: str
    booking_number: str
    user_id: str
    showtime_id: str
    movie_id: str
    cinema_id: str
    seats: List[str]
    seat_labels: List[str]
    total_amount: Decimal
    discount_amount: Decimal
    payable_amount: Decimal
    payment_method: str
    status: BookingStatus
    booking_date: datetime
    cancelled_at: Optional[datetime] = None


# Booking: Cancel response (PATCH /bookings/{id}/cancel)
class BookingCancelResponse(BaseModel):
    id: str
    booking_number: str
    status: BookingStatus
    cancelled_at: Optional[datetime] = None
    released_seats: List[str]
