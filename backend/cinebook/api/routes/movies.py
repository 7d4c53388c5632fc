"""
Movie and seat catalog endpoints. Movie listings are cached in Redis.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.db.session import get_db
from cinebook.schemas.movie import (
    MovieCreate, MovieResponse, MovieListResponse, SeatCreate, SeatResponse,
)
from cinebook.services import catalog_service
from cinebook.services.cache_service import (
    get_cached_movies, set_cached_movies, invalidate_movie_cache,
)
from cinebook.core.security import get_current_username
from cinebook.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("", response_model=MovieListResponse)
async def list_movies_endpoint(
    genre: Optional[str] = Query(None),
    language: Optional[str] = Query(None),
    rating: Optional[str] = Query(None),
    title: Optional[str] = Query(None, description="Case-insensitive substring"),
    db: AsyncSession = Depends(get_db),
):
    """List movies. Cached for REDIS_CACHE_TTL seconds per filter set."""
    filters = {"genre": genre, "language": language, "rating": rating, "title": title}

    cached = await get_cached_movies(filters)
    if cached:
        logger.info("movies_list_cache_hit")
        cached["cached"] = True
        return MovieListResponse(**cached)

    movies = await catalog_service.list_movies(db, **filters)
    response_data = {
        "movies": [MovieResponse.model_validate(m).model_dump() for m in movies],
        "total": len(movies),
        "cached": False,
    }
    await set_cached_movies(filters, response_data)
    return MovieListResponse(**response_data)


@router.post("", response_model=MovieResponse, status_code=status.HTTP_201_CREATED)
async def create_movie_endpoint(
    movie_data: MovieCreate,
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
):
    """Add a movie to the catalog. Requires authentication."""
    movie = await catalog_service.create_movie(db, movie_data)
    await invalidate_movie_cache()
    return movie


@router.get("/{movie_id}", response_model=MovieResponse)
async def get_movie_endpoint(movie_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.get_movie(db, movie_id)


@router.get("/{movie_id}/seats", response_model=list[SeatResponse])
async def list_seats_endpoint(
    movie_id: int,
    available: Optional[bool] = Query(None),
    seat_type: Optional[str] = Query(None),
    row_name: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await catalog_service.list_seats(
        db, movie_id, available=available, seat_type=seat_type, row_name=row_name,
    )


@router.post(
    "/{movie_id}/seats",
    response_model=list[SeatResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_seats_endpoint(
    movie_id: int,
    seats: list[SeatCreate],
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
):
    """Register seats for a movie. Layout is supplied by the caller."""
    return await catalog_service.add_seats(db, movie_id, seats)


@router.get("/{movie_id}/rows", response_model=list[str])
async def list_rows_endpoint(movie_id: int, db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_rows(db, movie_id)
