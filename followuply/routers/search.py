"""
Search across clients, reminders and invoices
"""
from fastapi import APIRouter, Depends

from followuply.deps import get_current_user_id, get_dashboard_service
from followuply.middleware.rate_limiter import rate_limited
from followuply.services.dashboard import DashboardService

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("/", dependencies=[Depends(rate_limited("search"))])
async def search_everything(
    q: str = "",
    user_id: str = Depends(get_current_user_id),
    dashboard: DashboardService = Depends(get_dashboard_service),
):
    return await dashboard.search(user_id, q)
