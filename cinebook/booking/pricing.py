from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from cinebook.booking.errors import BookingValidationError
from cinebook.booking.membership import discount_rate
from cinebook.booking.seat_map import Seat, SeatType
from cinebook.models.user import MembershipTier

SEAT_MULTIPLIERS = {
    SeatType.STANDARD: Decimal("1.0"),
    SeatType.PREMIUM: Decimal("1.3"),
    SeatType.VIP: Decimal("1.8"),
    SeatType.COUPLE: Decimal("2.2"),
}

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Quote:
    subtotal: Decimal
    discount: Decimal
    payable: Decimal


def seat_price(base_price, seat_type: SeatType) -> Decimal:
    return (Decimal(base_price) * SEAT_MULTIPLIERS[seat_type]).quantize(CENTS)


def total_price(base_price, seats: Iterable[Seat]) -> Decimal:
    """Sum the per-seat prices of a selection. An empty selection is an error, not zero."""
    seats = list(seats)
    if not seats:
        raise BookingValidationError("Please select at least one seat")
    return sum((seat_price(base_price, seat.type) for seat in seats), Decimal("0.00"))


def quote(base_price, seats: Iterable[Seat], tier: MembershipTier = MembershipTier.BASIC) -> Quote:
    subtotal = total_price(base_price, seats)
    discount = (subtotal * discount_rate(tier)).quantize(CENTS)
    return Quote(subtotal=subtotal, discount=discount, payable=subtotal - discount)
