"""
Reservation service properties, exercised without HTTP.
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY
from sqlalchemy import func, select

from cinebook.core.exceptions import AuthenticationError, SeatAlreadyBooked, ValidationError
from cinebook.models.booking import Booking
from cinebook.services.booking_service import (
    MAX_MOVIE_ID,
    list_for_user,
    parse_movie_id,
    parse_seat_label,
    reserve,
)


def _attempts(status: str) -> float:
    return REGISTRY.get_sample_value("cinebook_booking_attempts_total", {"status": status}) or 0.0


async def _reserve_in_own_session(session_factory, username, movie_id, seat_label):
    async with session_factory() as session:
        return await reserve(session, username, movie_id, seat_label)


@pytest.mark.asyncio
async def test_reserve_then_conflict(db_session):
    booking = await reserve(db_session, "alice", 42, "A1")
    assert booking.id is not None
    assert booking.movie_id == 42
    assert booking.seat_label == "A1"
    assert booking.username == "alice"
    assert booking.booked_at is not None

    with pytest.raises(SeatAlreadyBooked) as exc_info:
        await reserve(db_session, "bob", 42, "A1")
    assert exc_info.value.movie_id == 42
    assert exc_info.value.seat_label == "A1"
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_same_user_two_seats(db_session):
    first = await reserve(db_session, "alice", 42, "A1")
    second = await reserve(db_session, "alice", 42, "B2")
    assert first.id != second.id

    bookings = await list_for_user(db_session, "alice")
    assert {b.seat_label for b in bookings} == {"A1", "B2"}


@pytest.mark.asyncio
async def test_session_usable_after_conflict(db_session):
    await reserve(db_session, "alice", 42, "A1")
    with pytest.raises(SeatAlreadyBooked):
        await reserve(db_session, "bob", 42, "A1")

    booking = await reserve(db_session, "bob", 42, "A2")
    assert booking.username == "bob"


@pytest.mark.asyncio
async def test_exactly_one_winner_under_race(session_factory, db_session):
    contenders = [f"user{i}" for i in range(8)]
    results = await asyncio.gather(
        *(_reserve_in_own_session(session_factory, u, 99, "H8") for u in contenders),
        return_exceptions=True,
    )

    winners = [r for r in results if isinstance(r, Booking)]
    conflicts = [r for r in results if isinstance(r, SeatAlreadyBooked)]
    assert len(winners) == 1
    assert len(conflicts) == len(contenders) - 1

    count = await db_session.scalar(
        select(func.count()).select_from(Booking).where(
            Booking.movie_id == 99, Booking.seat_label == "H8",
        )
    )
    assert count == 1


@pytest.mark.asyncio
async def test_validation_happens_before_storage():
    db = MagicMock()
    with pytest.raises(ValidationError):
        await reserve(db, "alice", "not-a-number", "A1")
    db.add.assert_not_called()
    db.flush.assert_not_called()
    db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_missing_username_rejected():
    with pytest.raises(AuthenticationError):
        await reserve(MagicMock(), "", 42, "A1")


@pytest.mark.asyncio
async def test_list_for_user_is_stable(db_session):
    await reserve(db_session, "alice", 1, "A1")
    await reserve(db_session, "alice", 2, "A1")

    first = [b.id for b in await list_for_user(db_session, "alice")]
    second = [b.id for b in await list_for_user(db_session, "alice")]
    assert first == second
    assert len(first) == 2


@pytest.mark.asyncio
async def test_list_for_user_empty(db_session):
    assert await list_for_user(db_session, "nobody") == []


@pytest.mark.asyncio
async def test_outcomes_are_counted(db_session):
    success_before = _attempts("success")
    conflict_before = _attempts("conflict")
    invalid_before = _attempts("invalid")

    await reserve(db_session, "alice", 5, "E1")
    with pytest.raises(SeatAlreadyBooked):
        await reserve(db_session, "bob", 5, "E1")
    with pytest.raises(ValidationError):
        await reserve(db_session, "bob", "five", "E1")

    assert _attempts("success") == success_before + 1
    assert _attempts("conflict") == conflict_before + 1
    assert _attempts("invalid") == invalid_before + 1


@pytest.mark.parametrize(
    "raw, expected",
    [(42, 42), ("42", 42), (" 7 ", 7), (MAX_MOVIE_ID, MAX_MOVIE_ID), (str(MAX_MOVIE_ID), MAX_MOVIE_ID)],
)
def test_parse_movie_id_accepts(raw, expected):
    assert parse_movie_id(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, True, 0, -1, "", "abc", "1e3", "4.2", "-3", MAX_MOVIE_ID + 1, "99999999999999999999", "1" * 5000],
)
def test_parse_movie_id_rejects(raw):
    with pytest.raises(ValidationError):
        parse_movie_id(raw)


def test_parse_seat_label_limits():
    assert parse_seat_label("  A1 ") == "A1"
    assert parse_seat_label("S" * 20) == "S" * 20
    with pytest.raises(ValidationError):
        parse_seat_label("S" * 21)


@pytest.mark.asyncio
async def test_overlong_seat_label_rejected_before_storage():
    db = MagicMock()
    with pytest.raises(ValidationError):
        await reserve(db, "alice", 42, "S" * 21)
    db.add.assert_not_called()
    db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_reserve_accepts_largest_movie_id(db_session):
    booking = await reserve(db_session, "alice", str(MAX_MOVIE_ID), "A1")
    assert booking.movie_id == MAX_MOVIE_ID
