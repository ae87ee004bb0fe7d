import pytest

from cinebook.booking.errors import BookingValidationError
from cinebook.booking.seat_map import (
    SEAT_ROWS,
    SEATS_PER_ROW,
    SeatType,
    generate_seat_map,
    is_in_layout,
    seat_type_for_row,
    total_seats,
)
from cinebook.booking.seat_ref import SeatRef


def test_layout_is_eight_rows_of_ten():
    seats = generate_seat_map("show123")
    assert len(seats) == total_seats() == 80
    assert [s.row for s in seats[:: SEATS_PER_ROW]] == list(SEAT_ROWS)
    assert [s.number for s in seats[:SEATS_PER_ROW]] == list(range(1, 11))


def test_seat_id_is_deterministic():
    first = {s.id: s for s in generate_seat_map("show123")}
    second = {s.id: s for s in reversed(generate_seat_map("show123"))}
    seat = first["show123_C_5"]
    assert seat.row == "C"
    assert seat.number == 5
    assert seat.type is SeatType.PREMIUM
    assert second["show123_C_5"] == seat


@pytest.mark.parametrize("row,expected", [
    ("A", SeatType.STANDARD),
    ("B", SeatType.STANDARD),
    ("C", SeatType.PREMIUM),
    ("E", SeatType.PREMIUM),
    ("F", SeatType.VIP),
    ("G", SeatType.COUPLE),
    ("H", SeatType.COUPLE),
])
def test_row_types(row, expected):
    assert seat_type_for_row(row) is expected


def test_booked_seats_are_unavailable():
    seats = generate_seat_map("S1", {"S1_A_1", "S1_H_10", "OTHER_A_2"})
    unavailable = {s.id for s in seats if not s.is_available}
    assert unavailable == {"S1_A_1", "S1_H_10"}


def test_seat_ref_round_trip_with_underscored_showtime():
    ref = SeatRef.parse("show_2024_12_F_3")
    assert ref == SeatRef("show_2024_12", "F", 3)
    assert ref.format() == "show_2024_12_F_3"
    assert ref.label == "F3"


@pytest.mark.parametrize("bad", [
    "", "S1", "S1_A", "S1_a_1", "S1_A_x", "_A_1", "S1_A_",
    "S1_A_01", "S1_A_001", "S1_A_\u0661", "S1_A_+1", "S1_\u00c4_1",
])
def test_seat_ref_rejects_malformed_ids(bad):
    with pytest.raises(BookingValidationError):
        SeatRef.parse(bad)


def test_layout_bounds():
    assert is_in_layout(SeatRef("S1", "H", 10))
    assert not is_in_layout(SeatRef("S1", "I", 1))
    assert not is_in_layout(SeatRef("S1", "A", 11))
    assert not is_in_layout(SeatRef("S1", "A", 0))
