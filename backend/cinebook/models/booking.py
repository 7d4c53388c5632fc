"""
Booking ledger row: one seat of one movie, held by one user, forever.

The unique constraint on (movie_id, seat_label) is the only thing standing
between two concurrent requests and a double booking. There is no version
column and no pre-check; the insert itself decides who wins.
"""

from sqlalchemy import BigInteger, Column, Integer, String, DateTime, UniqueConstraint, CheckConstraint

from cinebook.db.base import Base

SEAT_KEY_CONSTRAINT = "uq_bookings_movie_seat"
SEAT_LABEL_MAX_LENGTH = 20


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Catalog movies live in another service; no foreign key
    movie_id = Column(BigInteger, nullable=False)
    seat_label = Column(String(SEAT_LABEL_MAX_LENGTH), nullable=False)
    username = Column(String(100), nullable=False, index=True)
    booked_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("movie_id", "seat_label", name=SEAT_KEY_CONSTRAINT),
        CheckConstraint("movie_id > 0", name="check_booking_movie_id_positive"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, movie={self.movie_id}, seat={self.seat_label}, user={self.username})>"
