from cinebook.models.user import User
from cinebook.models.movie import Movie, Seat
from cinebook.models.booking import Booking

__all__ = ["User", "Movie", "Seat", "Booking"]
