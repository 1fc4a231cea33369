"""
Dashboard endpoint
"""
from fastapi import APIRouter, Depends

from followuply.deps import get_current_user_id, get_dashboard_service
from followuply.services.dashboard import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/")
async def get_dashboard_stats(
    user_id: str = Depends(get_current_user_id),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    """Get dashboard statistics"""
    return await dashboard.get_stats(user_id)
