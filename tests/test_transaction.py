from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from cinebook.booking import transaction
from cinebook.booking.booked_seats import booked_seat_ids, booked_seat_owners
from cinebook.booking.errors import (
    BookingNotFound,
    BookingValidationError,
    InvalidStateTransition,
    NotAuthenticated,
    SeatConflict,
    StorageError,
)
from cinebook.booking.lifecycle import confirm_booking
from cinebook.booking.seat_map import generate_seat_map
from cinebook.booking.transaction import cancel_booking, create_booking
from cinebook.models import Booking, BookingStatus, SeatClaim, Showtime

from conftest import SHOWTIME_ID, available_seats


def book(db, user, seats, amount=Decimal("180000"), **overrides):
    kwargs = dict(
        user_id=user.id,
        showtime_id=SHOWTIME_ID,
        movie_id="m1",
        cinema_id="c1",
        seat_ids=[f"{SHOWTIME_ID}_{s}" for s in seats],
        total_amount=amount,
    )
    kwargs.update(overrides)
    return create_booking(db, **kwargs)


def booking_count(session_factory):
    session = session_factory()
    try:
        return session.query(Booking).count()
    finally:
        session.close()


def test_create_then_conflict(db, session_factory, showtime, alice, bob):
    booking = book(db, alice, ["A_1", "A_2"])

    assert booking.status == BookingStatus.PENDING
    assert booking.seats == ["S1_A_1", "S1_A_2"]
    assert booking.total_amount == Decimal("180000")
    assert booking.booking_number.startswith("CB-")
    assert available_seats(session_factory) == 78

    with pytest.raises(SeatConflict) as exc_info:
        book(db, bob, ["A_1", "B_1"])
    assert exc_info.value.seat_ids == ["S1_A_1"]
    assert available_seats(session_factory) == 78
    assert booking_count(session_factory) == 1


def test_seat_conflict_caught_by_storage_when_read_is_stale(db, session_factory, showtime, alice, bob, monkeypatch):
    book(db, alice, ["C_5"])

    # Second request read availability before the first committed
    monkeypatch.setattr(transaction, "booked_seat_ids", lambda db, showtime_id: set())
    other = session_factory()
    try:
        with pytest.raises(SeatConflict):
            book(other, bob, ["C_4", "C_5"], amount=Decimal("234000"))
    finally:
        other.close()

    assert available_seats(session_factory) == 79
    assert booking_count(session_factory) == 1


def test_storage_failure_leaves_no_partial_state(db, session_factory, showtime, alice, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(StorageError):
        book(db, alice, ["A_1", "A_2"])

    assert available_seats(session_factory) == 80
    assert booking_count(session_factory) == 0


def test_counter_guard_rejects_oversell(db, session_factory, showtime, alice):
    showtime.available_seats = 1
    db.commit()

    with pytest.raises(SeatConflict):
        book(db, alice, ["A_1", "A_2"])
    assert available_seats(session_factory) == 1
    assert booking_count(session_factory) == 0


def test_booked_seat_read_failure_is_not_empty(db, showtime, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("network down"))

    monkeypatch.setattr(db, "query", broken_query)
    with pytest.raises(StorageError):
        booked_seat_ids(db, SHOWTIME_ID)


def test_cancel_restores_counter_and_seats(db, session_factory, showtime, alice, bob):
    booking = book(db, alice, ["A_1", "A_2"])
    cancelled = cancel_booking(db, booking.id, user_id=alice.id)

    assert cancelled.status == BookingStatus.CANCELLED
    assert cancelled.cancelled_at is not None
    assert available_seats(session_factory) == 80
    assert db.query(SeatClaim).count() == 0

    seats = {s.id: s for s in generate_seat_map(SHOWTIME_ID, booked_seat_ids(db, SHOWTIME_ID))}
    assert seats["S1_A_1"].is_available
    assert seats["S1_A_2"].is_available

    # Released seats can be booked again
    rebooked = book(db, bob, ["A_1"], amount=Decimal("90000"))
    assert rebooked.status == BookingStatus.PENDING
    assert available_seats(session_factory) == 79


def test_cancel_other_users_booking_is_not_found(db, showtime, alice, bob):
    booking = book(db, alice, ["A_1"], amount=Decimal("90000"))
    with pytest.raises(BookingNotFound):
        cancel_booking(db, booking.id, user_id=bob.id)


def test_cancel_unknown_booking(db, showtime):
    with pytest.raises(BookingNotFound):
        cancel_booking(db, "missing")


@pytest.mark.parametrize("overrides,seats", [
    ({}, []),
    ({}, ["A_1", "A_1"]),
    ({}, ["Z_1"]),
    ({}, ["A_11"]),
    ({"seat_ids": ["S2_A_1"]}, ["A_1"]),
    ({"total_amount": Decimal("0")}, ["A_1"]),
    ({"total_amount": Decimal("-5")}, ["A_1"]),
    ({"total_amount": "abc"}, ["A_1"]),
    ({"discount_amount": Decimal("999999")}, ["A_1"]),
    ({"showtime_id": "nope"}, ["A_1"]),
    ({"movie_id": "m2"}, ["A_1"]),
    ({"cinema_id": "c2"}, ["A_1"]),
])
def test_validation_errors(db, session_factory, showtime, alice, overrides, seats):
    with pytest.raises(BookingValidationError):
        book(db, alice, seats, **overrides)
    assert available_seats(session_factory) == 80
    assert booking_count(session_factory) == 0


def test_anonymous_user_is_refused(db, showtime):
    with pytest.raises(NotAuthenticated):
        create_booking(
            db, user_id=None, showtime_id=SHOWTIME_ID, movie_id="m1", cinema_id="c1",
            seat_ids=["S1_A_1"], total_amount=Decimal("90000"),
        )


def test_concurrent_overlapping_bookings_never_double_book(session_factory, showtime, alice):
    # Each request overlaps its neighbours on one seat
    selections = [[f"S1_D_{n}", f"S1_D_{n + 1}"] for n in range(1, 9)]
    user_id = alice.id

    def attempt(seat_ids):
        session = session_factory()
        try:
            create_booking(
                session, user_id=user_id, showtime_id=SHOWTIME_ID, movie_id="m1",
                cinema_id="c1", seat_ids=seat_ids, total_amount=Decimal("234000"),
            )
            return "ok"
        except SeatConflict:
            return "conflict"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=4) as pool:
        outcomes = list(pool.map(attempt, selections))

    assert set(outcomes) <= {"ok", "conflict"}
    assert "ok" in outcomes

    session = session_factory()
    try:
        live = session.query(Booking).filter(Booking.status == BookingStatus.PENDING).all()
        taken = [seat for booking in live for seat in booking.seats]
        assert len(taken) == len(set(taken))
        assert len(live) == outcomes.count("ok")
        assert session.get(Showtime, SHOWTIME_ID).available_seats == 80 - len(taken)
    finally:
        session.close()


@pytest.mark.parametrize("alias", ["A_01", "A_001", "A_١"])
def test_seat_cannot_be_rebooked_under_another_spelling(db, session_factory, showtime, alice, bob, alias):
    book(db, alice, ["A_1"], amount=Decimal("90000"))

    with pytest.raises(BookingValidationError):
        book(db, bob, [alias], amount=Decimal("90000"))
    assert available_seats(session_factory) == 79
    assert booking_count(session_factory) == 1


def test_selection_cannot_repeat_a_seat_under_another_spelling(db, session_factory, showtime, alice):
    with pytest.raises(BookingValidationError):
        book(db, alice, ["A_1", "A_001"])
    assert available_seats(session_factory) == 80
    assert booking_count(session_factory) == 0


def test_booking_number_collision_is_a_storage_error(db, session_factory, showtime, alice, bob, monkeypatch):
    first = book(db, alice, ["A_1"], amount=Decimal("90000"))

    monkeypatch.setattr(transaction, "_generate_booking_number", lambda db: first.booking_number)
    with pytest.raises(StorageError):
        book(db, bob, ["B_1"], amount=Decimal("90000"))
    assert available_seats(session_factory) == 79
    assert booking_count(session_factory) == 1


def test_booked_seat_owners(db, showtime, alice, bob):
    first = book(db, alice, ["A_1", "A_2"])
    second = book(db, bob, ["B_3"], amount=Decimal("90000"))
    cancel_booking(db, second.id)

    assert booked_seat_owners(db, SHOWTIME_ID) == {"S1_A_1": first.id, "S1_A_2": first.id}


def test_booked_seat_owners_read_failure_is_not_empty(db, showtime, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("network down"))

    monkeypatch.setattr(db, "query", broken_query)
    with pytest.raises(StorageError):
        booked_seat_owners(db, SHOWTIME_ID)


def test_cancel_losing_race_reports_actual_status(db, session_factory, showtime, alice):
    booking = book(db, alice, ["A_1"], amount=Decimal("90000"))
    # Loaded as PENDING in this session before another request confirms it
    assert db.get(Booking, booking.id).status == BookingStatus.PENDING

    other = session_factory()
    try:
        confirm_booking(other, booking.id)
    finally:
        other.close()

    with pytest.raises(InvalidStateTransition) as exc_info:
        cancel_booking(db, booking.id, user_id=alice.id)
    assert exc_info.value.current == BookingStatus.CONFIRMED
    assert exc_info.value.target == BookingStatus.CANCELLED
    assert available_seats(session_factory) == 79
