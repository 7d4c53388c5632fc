"""
Central API router: auth (users), movies (catalog) and bookings.
"""

from fastapi import APIRouter
from cinebook.api.routes import auth, movies, bookings

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(movies.router)
api_router.include_router(bookings.router)
