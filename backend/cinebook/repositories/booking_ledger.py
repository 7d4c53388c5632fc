"""
Ledger store for booking rows.

`insert` is the only write and runs as its own transaction: add, flush,
commit. Duplicate detection is left entirely to the seat-key unique
constraint. An IntegrityError for that constraint becomes
UniqueConstraintViolation; every other database error is re-raised as is.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import UniqueConstraintViolation
from cinebook.core.logging import get_logger
from cinebook.models.booking import Booking, SEAT_KEY_CONSTRAINT

logger = get_logger(__name__)

# SQLite reports the columns instead of the constraint name
_SQLITE_SEAT_KEY_MESSAGE = "UNIQUE constraint failed: bookings.movie_id, bookings.seat_label"


def is_seat_key_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    cause = getattr(orig, "__cause__", None)

    # asyncpg exposes constraint_name on the driver exception,
    # psycopg on orig.diag
    for source in (orig, cause, getattr(orig, "diag", None)):
        if getattr(source, "constraint_name", None) == SEAT_KEY_CONSTRAINT:
            return True

    text = str(orig if orig is not None else exc)
    return SEAT_KEY_CONSTRAINT in text or _SQLITE_SEAT_KEY_MESSAGE in text


class BookingLedger:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, booking: Booking) -> Booking:
        """Persist a new booking and return it with its id assigned."""
        self.db.add(booking)
        try:
            await self.db.flush()
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            if is_seat_key_violation(exc):
                raise UniqueConstraintViolation(SEAT_KEY_CONSTRAINT) from exc
            logger.error("ledger_insert_failed", error=str(exc.orig))
            raise
        return booking

    async def query_by_username(self, username: str) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.username == username)
            .order_by(Booking.booked_at.asc(), Booking.id.asc())
        )
        return list(result.scalars().all())
