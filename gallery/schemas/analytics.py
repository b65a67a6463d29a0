from datetime import datetime
from typing import List, Optional

from gallery.schemas.common import CamelModel


class AnalyticsOverview(CamelModel):
    total_revenue: float
    total_orders: int
    average_order_value: float
    total_users: int
    new_users: int
    conversion_rate: float


class DailyRevenue(CamelModel):
    date: str
    revenue: float
    orders: int


class RecentOrder(CamelModel):
    order_number: str
    customer_email: Optional[str] = None
    total_amount: float
    status: str
    created_at: datetime


class CommunityTotals(CamelModel):
    artworks: int
    comments: int
    reactions: int


class AnalyticsResponse(CamelModel):
    time_range: str
    overview: AnalyticsOverview
    daily_revenue: List[DailyRevenue]
    recent_orders: List[RecentOrder]
    community: CommunityTotals
