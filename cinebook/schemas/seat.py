from typing import Annotated, List, Optional
from pydantic import BaseModel, Field
from decimal import Decimal

from cinebook.booking.seat_map import SeatType
from cinebook.models.user import MembershipTier


# --- Seat Map (user-facing) ---

class SeatStatus(BaseModel):
    id: str
    label: str
    number: int
    is_available: bool
    booking_id: Optional[str] = None  # admin seat view only


class SeatRow(BaseModel):
    label: str
    type: SeatType
    price: Decimal
    seats: List[SeatStatus]


class SeatMapResponse(BaseModel):
    showtime_id: str
    total_seats: int
    available_seats: int
    rows: List[SeatRow]


# --- Price quote ---

class QuoteRequest(BaseModel):
    seat_ids: Annotated[List[str], Field(min_length=1, max_length=10)]


class QuoteResponse(BaseModel):
    showtime_id: str
    seat_ids: List[str]
    membership_tier: MembershipTier
    subtotal: Decimal
    discount: Decimal
    payable: Decimal
