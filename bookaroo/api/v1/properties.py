"""Properties API routes.

Browsing is public. Creating and updating are limited to owners, and only the
owner of a property may change it or see its booking details.
"""

import logging
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.api.deps import get_db, require_role
from bookaroo.errors import ForbiddenError
from bookaroo.models.property import Property, PropertyImage
from bookaroo.models.user import User, UserRole
from bookaroo.schemas.booking import PropertyDetailResponse
from bookaroo.schemas.property import (
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from bookaroo.services.booking_service import get_owner_property_detail, get_property

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

_require_owner = require_role(UserRole.OWNER)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_owner),
) -> PropertyResponse:
    """Create a property owned by the authenticated owner."""
    data = body.model_dump(exclude={"images"})
    prop = Property(
        owner_id=current_user.id,
        images=[PropertyImage(image_url=img.image_url, position=i) for i, img in enumerate(body.images)],
        **data,
    )
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    logger.info("Owner %s created property %s", current_user.id, prop.id)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List and search properties",
)
async def list_properties(
    location: str | None = Query(None, description="Case-insensitive substring of the location"),
    min_price: Decimal | None = Query(None, ge=0, description="Minimum nightly price"),
    max_price: Decimal | None = Query(None, ge=0, description="Maximum nightly price"),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> PropertyListResponse:
    """Return a page of properties matching the optional filters."""
    filters = []
    if location:
        filters.append(Property.location.ilike(f"%{location}%"))
    if min_price is not None:
        filters.append(Property.price_per_night >= min_price)
    if max_price is not None:
        filters.append(Property.price_per_night <= max_price)

    count_query = select(func.count()).select_from(Property).where(*filters)
    total = (await db.execute(count_query)).scalar_one()

    items_query = select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p) for p in items],
        total=total,
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def read_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> PropertyResponse:
    """Retrieve a single property with its images."""
    prop = await get_property(db, property_id)
    return PropertyResponse.model_validate(prop)


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_owner),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    prop = await get_property(db, property_id)
    if prop.owner_id != current_user.id:
        raise ForbiddenError("You don't have permission to update this property")

    update_data = body.model_dump(exclude_unset=True, exclude={"images"})
    for field, value in update_data.items():
        setattr(prop, field, value)
    if body.images is not None:
        prop.images = [PropertyImage(image_url=img.image_url, position=i) for i, img in enumerate(body.images)]

    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return PropertyResponse.model_validate(prop)


@router.get(
    "/{property_id}/details",
    response_model=PropertyDetailResponse,
    summary="Owner view: availability, booking history, and revenue",
)
async def read_property_details(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(_require_owner),
) -> PropertyDetailResponse:
    """Property detail for its owner. Other owners get 403."""
    return await get_owner_property_detail(db, property_id, current_user.id)
