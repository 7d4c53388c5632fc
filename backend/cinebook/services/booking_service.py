"""
Reservation service: exclusive seat booking.

CONCURRENCY STRATEGY: Unique constraint, single insert
=======================================================

Problem:
  Two users ask for seat A1 of movie 42 at the same moment.
  A "check if taken, then insert" flow lets both pass the check.

Solution:
  There is no check. Every attempt goes straight to one INSERT into
  `bookings`, which carries UNIQUE (movie_id, seat_label). The database
  serialises the two inserts on the index entry: one commits, the other
  fails with an IntegrityError that the ledger reports as
  UniqueConstraintViolation, and we answer SeatAlreadyBooked (409).

  - No row locks, no version column, no retry loop.
  - Retrying a conflict would fail the same way, so we never do.
  - Any other database failure is not a conflict and surfaces as a 500.

The catalog is not consulted: a booking for a seat label the catalog does
not know about is accepted. Seat validation belongs to the catalog service.
"""

import time
from datetime import datetime, timezone
from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import (
    AuthenticationError,
    SeatAlreadyBooked,
    UniqueConstraintViolation,
    ValidationError,
)
from cinebook.core.logging import get_logger
from cinebook.core.metrics import booking_latency, record_booking_attempt
from cinebook.models.booking import SEAT_LABEL_MAX_LENGTH, Booking
from cinebook.repositories.booking_ledger import BookingLedger

logger = get_logger(__name__)

# Widest value the BIGINT movie_id column holds
MAX_MOVIE_ID = 2**63 - 1


def parse_movie_id(raw: Union[int, str, None]) -> int:
    """Accept a positive int or a string holding one."""
    if isinstance(raw, bool) or raw is None:
        raise ValidationError("Invalid movieId format")
    if isinstance(raw, int):
        movie_id = raw
    else:
        text = str(raw).strip()
        if not text.isdecimal() or len(text) > len(str(MAX_MOVIE_ID)):
            raise ValidationError("Invalid movieId format")
        movie_id = int(text)
    if movie_id <= 0:
        raise ValidationError("movieId must be a positive integer")
    if movie_id > MAX_MOVIE_ID:
        raise ValidationError("Invalid movieId format")
    return movie_id


def parse_seat_label(raw: Union[str, None]) -> str:
    label = (raw or "").strip()
    if not label:
        raise ValidationError("seatLabel is required")
    if len(label) > SEAT_LABEL_MAX_LENGTH:
        raise ValidationError(f"seatLabel must be at most {SEAT_LABEL_MAX_LENGTH} characters")
    return label


async def reserve(
    db: AsyncSession,
    username: str,
    movie_id: Union[int, str],
    seat_label: str,
) -> Booking:
    """
    Book `seat_label` of `movie_id` for `username`.

    Raises ValidationError before touching storage if the input is malformed,
    and SeatAlreadyBooked if someone already holds the seat key.
    """
    if not username:
        raise AuthenticationError("Missing authenticated user")
    try:
        parsed_movie_id = parse_movie_id(movie_id)
        label = parse_seat_label(seat_label)
    except ValidationError:
        record_booking_attempt("invalid")
        raise

    booking = Booking(
        movie_id=parsed_movie_id,
        seat_label=label,
        username=username,
        booked_at=datetime.now(timezone.utc),
    )

    start = time.perf_counter()
    try:
        await BookingLedger(db).insert(booking)
    except UniqueConstraintViolation as exc:
        record_booking_attempt("conflict")
        logger.info(
            "booking_conflict",
            movie_id=parsed_movie_id,
            seat_label=label,
            username=username,
        )
        raise SeatAlreadyBooked(parsed_movie_id, label) from exc
    except Exception:
        record_booking_attempt("error")
        logger.error(
            "booking_failed",
            movie_id=parsed_movie_id,
            seat_label=label,
            username=username,
        )
        raise
    finally:
        booking_latency.observe(time.perf_counter() - start)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        movie_id=booking.movie_id,
        seat_label=booking.seat_label,
        username=username,
    )
    return booking


async def list_for_user(db: AsyncSession, username: str) -> list[Booking]:
    """All bookings held by `username`, oldest first. Empty list if none."""
    bookings = await BookingLedger(db).query_by_username(username)
    logger.debug("bookings_listed", username=username, count=len(bookings))
    return bookings
