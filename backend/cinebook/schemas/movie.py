"""
Pydantic schemas for the movie/seat catalog.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class MovieCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    duration: int = Field(..., gt=0, le=1000)
    genre: str = Field(..., min_length=1, max_length=50)
    language: str = Field(..., min_length=1, max_length=50)
    rating: str = Field(..., min_length=1, max_length=10)
    poster_url: Optional[str] = Field(None, max_length=500)
    ticket_price: float = Field(..., ge=0)


class MovieResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    duration: int
    genre: str
    language: str
    rating: str
    poster_url: Optional[str]
    ticket_price: float
    created_at: datetime

    model_config = {"from_attributes": True}


class MovieListResponse(BaseModel):
    movies: list[MovieResponse]
    total: int
    cached: bool = False


class SeatCreate(BaseModel):
    seat_number: str = Field(..., min_length=1, max_length=20)
    row_name: str = Field(..., min_length=1, max_length=10)
    seat_in_row: int = Field(..., gt=0)
    is_available: bool = True
    seat_type: str = Field("Regular", max_length=20)
    additional_price: float = Field(0.0, ge=0)


class SeatResponse(BaseModel):
    id: int
    movie_id: int
    seat_number: str
    row_name: str
    seat_in_row: int
    is_available: bool
    seat_type: str
    additional_price: float

    model_config = {"from_attributes": True}
