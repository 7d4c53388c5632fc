from cinebook.schemas.user import UserCreate, UserResponse, UserLogin, UserSummary, Token
from cinebook.schemas.movie import (
    MovieCreate, MovieResponse, MovieListResponse, SeatCreate, SeatResponse,
)
from cinebook.schemas.booking import BookingCreate, BookingResponse

__all__ = [
    "UserCreate", "UserResponse", "UserLogin", "UserSummary", "Token",
    "MovieCreate", "MovieResponse", "MovieListResponse", "SeatCreate", "SeatResponse",
    "BookingCreate", "BookingResponse",
]
