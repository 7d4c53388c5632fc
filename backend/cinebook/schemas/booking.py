"""
Pydantic schemas for booking request/response validation.

Booking JSON uses camelCase keys on the wire (movieId, seatLabel, bookedAt).
"""

from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cinebook.models.booking import SEAT_LABEL_MAX_LENGTH


class BookingCreate(BaseModel):
    # Numeric strings are accepted here and parsed by the reservation service,
    # so a malformed id is reported the same way from HTTP and from code.
    movie_id: Union[int, str] = Field(..., alias="movieId")
    seat_label: str = Field(..., alias="seatLabel", max_length=SEAT_LABEL_MAX_LENGTH)

    model_config = ConfigDict(populate_by_name=True)


class BookingResponse(BaseModel):
    id: int
    movie_id: int
    seat_label: str
    username: str
    booked_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
