"""Washline — Dashboard endpoint."""
from fastapi import APIRouter

from washline.api.deps import DbSession, RedisClient
from washline.schemas.common import ApiResponse
from washline.schemas.dashboard import DashboardSummary
from washline.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/summary", response_model=ApiResponse[DashboardSummary])
async def get_summary(db: DbSession, r: RedisClient):
    """Order and assignment counters, cached in Redis."""
    summary = await DashboardService.get_summary(db, r)
    return ApiResponse(data=DashboardSummary(**summary))
