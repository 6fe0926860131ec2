"""Dashboard API router: one endpoint, shaped by the caller's role."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookaroo.api.deps import get_current_active_user, get_db
from bookaroo.models.user import User
from bookaroo.schemas.dashboard import GuestDashboardResponse, OwnerDashboardResponse
from bookaroo.services.dashboard_service import build_dashboard

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=OwnerDashboardResponse | GuestDashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> OwnerDashboardResponse | GuestDashboardResponse:
    """Owners see their properties' availability and revenue; guests see their bookings."""
    return await build_dashboard(db, current_user)
