"""
Error types raised by the booking core.

Every error is local to a single booking attempt. The API layer turns them
into JSON responses through one exception handler (see cinebook.main).
"""
from typing import Iterable, Optional


class BookingError(Exception):
    status_code = 400
    code = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(BookingError):
    status_code = 401
    code = "not_authenticated"

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class BookingValidationError(BookingError):
    status_code = 422
    code = "validation_error"


class BookingNotFound(BookingError):
    status_code = 404
    code = "not_found"

    def __init__(self, booking_id: str):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class SeatConflict(BookingError):
    status_code = 409
    code = "seat_conflict"

    def __init__(self, seat_ids: Optional[Iterable[str]] = None):
        self.seat_ids = sorted(seat_ids or [])
        super().__init__(
            "One or more selected seats were just taken, please reselect seats"
        )


class InvalidStateTransition(BookingError):
    status_code = 409
    code = "invalid_state_transition"

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move booking from {getattr(current, 'value', current)} "
            f"to {getattr(target, 'value', target)}"
        )


class StorageError(BookingError):
    status_code = 503
    code = "storage_error"
