from cinebook.booking.errors import (
    BookingError,
    BookingNotFound,
    BookingValidationError,
    InvalidStateTransition,
    NotAuthenticated,
    SeatConflict,
    StorageError,
)
from cinebook.booking.seat_ref import SeatRef
from cinebook.booking.seat_map import Seat, SeatType, generate_seat_map, seat_type_for_row, total_seats
from cinebook.booking.booked_seats import booked_seat_ids, booked_seat_owners
from cinebook.booking.pricing import Quote, quote, seat_price, total_price
from cinebook.booking.lifecycle import (
    ALLOWED_TRANSITIONS,
    can_transition,
    complete_booking,
    confirm_booking,
    ensure_transition,
    transition_booking,
)
from cinebook.booking.transaction import atomic, cancel_booking, create_booking
