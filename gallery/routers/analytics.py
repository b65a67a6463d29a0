from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gallery.core.database import get_db
from gallery.core.dependencies import get_current_admin
from gallery.models.user import User
from gallery.schemas.analytics import AnalyticsResponse
from gallery.services.analytics import DEFAULT_TIME_RANGE, AnalyticsService

router = APIRouter(prefix="/admin", tags=["Analytics"])


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    time_range: str = Query(DEFAULT_TIME_RANGE, alias="timeRange"),
    db: Session = Depends(get_db),
    current_admin: User = Depends(get_current_admin),
):
    """Revenue, orders, users and community totals. Admin only."""
    return AnalyticsService(db).get_analytics(time_range)
