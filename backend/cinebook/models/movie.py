"""
Catalog models: movies and their seats.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from cinebook.db.base import Base, TimestampMixin


class Movie(Base, TimestampMixin):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    duration = Column(Integer, nullable=False)  # minutes
    genre = Column(String(50), nullable=False)
    language = Column(String(50), nullable=False)
    rating = Column(String(10), nullable=False)  # PG, PG-13, R
    poster_url = Column(String(500), nullable=True)
    ticket_price = Column(Float, nullable=False)

    seats = relationship("Seat", back_populates="movie", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("duration > 0", name="check_movie_duration_positive"),
        CheckConstraint("ticket_price >= 0", name="check_movie_price_non_negative"),
        Index("ix_movies_genre_language", "genre", "language"),
    )

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title={self.title})>"


class Seat(Base):
    __tablename__ = "seats"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_number = Column(String(20), nullable=False)  # "A1"
    row_name = Column(String(10), nullable=False)  # "A"
    seat_in_row = Column(Integer, nullable=False)  # 1
    is_available = Column(Boolean, nullable=False, default=True)
    seat_type = Column(String(20), nullable=False, default="Regular")
    additional_price = Column(Float, nullable=False, default=0.0)

    movie = relationship("Movie", back_populates="seats")

    __table_args__ = (
        UniqueConstraint("movie_id", "seat_number", name="uq_seats_movie_seat_number"),
        CheckConstraint("seat_in_row > 0", name="check_seat_in_row_positive"),
        CheckConstraint("additional_price >= 0", name="check_seat_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, movie={self.movie_id}, number={self.seat_number})>"
