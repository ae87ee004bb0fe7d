from dataclasses import dataclass

from cinebook.booking.errors import BookingValidationError


def _is_row(row: str) -> bool:
    return row.isascii() and row.isalpha() and row.isupper()


def _is_number(number: str) -> bool:
    # Canonical form only: "01" or "١" would alias seat 1 under a different id
    return number.isascii() and number.isdigit() and str(int(number)) == number


@dataclass(frozen=True, order=True)
class SeatRef:
    """Structured form of a seat id ``{showtime_id}_{row}_{number}``."""

    showtime_id: str
    row: str
    number: int

    def format(self) -> str:
        return f"{self.showtime_id}_{self.row}_{self.number}"

    @property
    def label(self) -> str:
        """Short display form, e.g. ``C5``."""
        return f"{self.row}{self.number}"

    @classmethod
    def parse(cls, seat_id: str) -> "SeatRef":
        # Split from the right: showtime ids may themselves contain underscores
        parts = seat_id.rsplit("_", 2) if isinstance(seat_id, str) else []
        if len(parts) != 3 or not all(parts):
            raise BookingValidationError(f"Malformed seat id: {seat_id!r}")
        showtime_id, row, number = parts
        if not _is_row(row) or not _is_number(number):
            raise BookingValidationError(f"Malformed seat id: {seat_id!r}")
        return cls(showtime_id=showtime_id, row=row, number=int(number))

    def __str__(self) -> str:
        return self.format()
