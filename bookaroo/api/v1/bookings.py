"""Bookings API router.

The caller is always the guest: bookings are created for, and listed for,
the authenticated user.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.api.deps import get_current_active_user, get_db
from bookaroo.models.booking import Booking
from bookaroo.models.user import User
from bookaroo.schemas.booking import BookingCreate, BookingResponse, GuestBookingsResponse
from bookaroo.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Reserve a property for the current user.

    Fails with 404 if the property does not exist and 409 if an active
    booking on the property overlaps the requested dates. New bookings start
    out ``pending``.
    """
    booking = await booking_service.create_booking(
        db,
        property_id=body.property_id,
        guest_id=current_user.id,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    logger.info(
        "Booking %s created: property=%s guest=%s total=%s",
        booking.id,
        booking.property_id,
        booking.guest_id,
        booking.total_price,
    )
    return booking


@router.get(
    "",
    response_model=GuestBookingsResponse,
    summary="List the current user's bookings with spend statistics",
)
async def list_my_bookings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> GuestBookingsResponse:
    """Return every booking the current user made, plus totals."""
    return await booking_service.get_guest_booking_summary(db, current_user.id)
