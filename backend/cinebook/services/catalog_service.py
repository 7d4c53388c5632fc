"""
Catalog service: movies and their seats.

Read-mostly metadata. Seat availability here is the catalog's own flag and is
not derived from the booking ledger.
"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import Conflict, NotFoundError
from cinebook.core.logging import get_logger
from cinebook.models.movie import Movie, Seat
from cinebook.schemas.movie import MovieCreate, SeatCreate

logger = get_logger(__name__)


async def create_movie(db: AsyncSession, movie_data: MovieCreate) -> Movie:
    movie = Movie(**movie_data.model_dump())
    db.add(movie)
    await db.commit()
    await db.refresh(movie)

    logger.info("movie_created", movie_id=movie.id, title=movie.title)
    return movie


async def get_movie(db: AsyncSession, movie_id: int) -> Movie:
    result = await db.execute(select(Movie).where(Movie.id == movie_id))
    movie = result.scalar_one_or_none()

    if not movie:
        raise NotFoundError(f"Movie {movie_id} not found")
    return movie


async def list_movies(
    db: AsyncSession,
    genre: Optional[str] = None,
    language: Optional[str] = None,
    rating: Optional[str] = None,
    title: Optional[str] = None,
) -> list[Movie]:
    """
    List movies matching every given filter.
    Genre, language and rating match case-insensitively; title is a substring match.
    """
    query = select(Movie)

    if genre:
        query = query.where(func.lower(Movie.genre) == genre.lower())
    if language:
        query = query.where(func.lower(Movie.language) == language.lower())
    if rating:
        query = query.where(func.lower(Movie.rating) == rating.lower())
    if title:
        query = query.where(Movie.title.ilike(f"%{title}%"))

    result = await db.execute(query.order_by(Movie.id.asc()))
    return list(result.scalars().all())


async def add_seats(db: AsyncSession, movie_id: int, seats: list[SeatCreate]) -> list[Seat]:
    """Attach seats to an existing movie. All or nothing."""
    await get_movie(db, movie_id)

    numbers = [seat.seat_number for seat in seats]
    if len(set(numbers)) != len(numbers):
        raise Conflict("Duplicate seat numbers in request")

    created = [Seat(movie_id=movie_id, **seat.model_dump()) for seat in seats]
    db.add_all(created)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("seats_conflict", movie_id=movie_id, seat_numbers=numbers)
        raise Conflict("Seat already exists for this movie")

    for seat in created:
        await db.refresh(seat)

    logger.info("seats_added", movie_id=movie_id, count=len(created))
    return created


async def list_seats(
    db: AsyncSession,
    movie_id: int,
    available: Optional[bool] = None,
    seat_type: Optional[str] = None,
    row_name: Optional[str] = None,
) -> list[Seat]:
    query = select(Seat).where(Seat.movie_id == movie_id)

    if available is not None:
        query = query.where(Seat.is_available == available)
    if seat_type:
        query = query.where(Seat.seat_type == seat_type)
    if row_name:
        query = query.where(Seat.row_name == row_name)

    result = await db.execute(query.order_by(Seat.row_name.asc(), Seat.seat_in_row.asc()))
    return list(result.scalars().all())


async def list_rows(db: AsyncSession, movie_id: int) -> list[str]:
    result = await db.execute(
        select(Seat.row_name)
        .where(Seat.movie_id == movie_id)
        .distinct()
        .order_by(Seat.row_name.asc())
    )
    return list(result.scalars().all())
