"""Analytics endpoint."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from sp.auth import get_current_user
from sp.db.base import get_db
from sp.schemas.analytics import Analytics
from sp.services.analytics import AnalyticsService

router = APIRouter()


@router.get("", response_model=Analytics)
async def get_analytics(
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user),
) -> Analytics:
    """Aggregate progress, feedback and activity statistics for the user."""
    service = AnalyticsService(db)
    return await service.get_user_analytics(user_id)
