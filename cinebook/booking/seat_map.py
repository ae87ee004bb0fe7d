"""
Seat map synthesis.

Seats are not stored. A showtime's seats are expanded on demand from one
canonical layout (rows A-H, 10 seats each) and marked available unless
their id appears in the booked-seat set. The same layout backs the customer
seat map and the admin seat view.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from cinebook.booking.seat_ref import SeatRef

SEAT_ROWS = ("A", "B", "C", "D", "E", "F", "G", "H")
SEATS_PER_ROW = 10


class SeatType(str, Enum):
    STANDARD = "STANDARD"
    PREMIUM = "PREMIUM"
    VIP = "VIP"
    COUPLE = "COUPLE"


_ROW_TYPES = {
    "A": SeatType.STANDARD,
    "B": SeatType.STANDARD,
    "C": SeatType.PREMIUM,
    "D": SeatType.PREMIUM,
    "E": SeatType.PREMIUM,
    "F": SeatType.VIP,
}


@dataclass(frozen=True)
class Seat:
    ref: SeatRef
    type: SeatType
    is_available: bool

    @property
    def id(self) -> str:
        return self.ref.format()

    @property
    def row(self) -> str:
        return self.ref.row

    @property
    def number(self) -> int:
        return self.ref.number


def seat_type_for_row(row: str) -> SeatType:
    # Rows past F are couple seats
    return _ROW_TYPES.get(row, SeatType.COUPLE)


def total_seats() -> int:
    return len(SEAT_ROWS) * SEATS_PER_ROW


def is_in_layout(ref: SeatRef) -> bool:
    return ref.row in SEAT_ROWS and 1 <= ref.number <= SEATS_PER_ROW


def generate_seat_map(showtime_id: str, booked_seat_ids: Iterable[str] = ()) -> List[Seat]:
    """Expand a showtime into its ordered seat list, row-major."""
    booked = set(booked_seat_ids)
    seats = []
    for row in SEAT_ROWS:
        seat_type = seat_type_for_row(row)
        for number in range(1, SEATS_PER_ROW + 1):
            ref = SeatRef(showtime_id, row, number)
            seats.append(Seat(ref=ref, type=seat_type, is_available=ref.format() not in booked))
    return seats


def seat_for_id(seat_id: str, booked_seat_ids: Iterable[str] = ()) -> Seat:
    """Build the Seat for one id; the id must already be validated against the layout."""
    ref = SeatRef.parse(seat_id)
    return Seat(ref=ref, type=seat_type_for_row(ref.row), is_available=seat_id not in set(booked_seat_ids))
