"""
Booking endpoints. Seat exclusivity is enforced by the ledger's unique
constraint, see cinebook.services.booking_service.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.db.session import get_db
from cinebook.schemas.booking import BookingCreate, BookingResponse
from cinebook.services.booking_service import reserve, list_for_user
from cinebook.core.security import get_current_username

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse)
async def create_booking(
    booking_data: BookingCreate,
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
):
    """
    Book one seat of one movie.

    409 "Seat already booked" if anyone, including the caller, already holds it.
    """
    return await reserve(db, username, booking_data.movie_id, booking_data.seat_label)


@router.get("/me", response_model=list[BookingResponse])
async def my_bookings(
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
):
    """All bookings held by the caller. Empty list when there are none."""
    return await list_for_user(db, username)
