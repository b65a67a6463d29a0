# gallery/services/analytics.py
import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from gallery.models.artwork import Artwork
from gallery.models.comment import Comment
from gallery.models.order import Order
from gallery.models.reaction import Reaction
from gallery.models.user import User

logger = logging.getLogger(__name__)

TIME_RANGES = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}
DEFAULT_TIME_RANGE = "30d"
RECENT_ORDERS_LIMIT = 10


class AnalyticsService:
    def __init__(self, db: Session):
        self.db = db

    def get_analytics(self, time_range: str = DEFAULT_TIME_RANGE) -> dict:
        """Sales and community figures for the admin dashboard."""
        if time_range not in TIME_RANGES:
            time_range = DEFAULT_TIME_RANGE

        now = datetime.now(timezone.utc)
        start = now - TIME_RANGES[time_range]

        orders = (
            self.db.query(Order.created_at, Order.total_amount)
            .filter(Order.created_at >= start)
            .all()
        )
        total_revenue = float(sum(o.total_amount or 0 for o in orders))
        total_orders = len(orders)

        total_users = self.db.query(func.count(User.id)).scalar()
        new_users = (
            self.db.query(func.count(User.id)).filter(User.created_at >= start).scalar()
        )

        overview = {
            "total_revenue": round(total_revenue, 2),
            "total_orders": total_orders,
            "average_order_value": (
                round(total_revenue / total_orders, 2) if total_orders else 0.0
            ),
            "total_users": total_users,
            "new_users": new_users,
            "conversion_rate": (
                round(total_orders / new_users * 100, 2) if new_users else 0.0
            ),
        }

        return {
            "time_range": time_range,
            "overview": overview,
            "daily_revenue": self._daily_revenue(orders, start, now),
            "recent_orders": self._recent_orders(),
            "community": {
                "artworks": self.db.query(func.count(Artwork.id)).scalar(),
                "comments": self.db.query(func.count(Comment.id)).scalar(),
                "reactions": self.db.query(func.count(Reaction.id)).scalar(),
            },
        }

    @staticmethod
    def _daily_revenue(orders, start: datetime, end: datetime) -> list:
        """One entry per day in the range, zero-filled."""
        buckets = defaultdict(lambda: [0.0, 0])
        for created_at, amount in orders:
            key = created_at.date().isoformat()
            buckets[key][0] += float(amount or 0)
            buckets[key][1] += 1

        series = []
        day = start.date()
        while day <= end.date():
            revenue, count = buckets.get(day.isoformat(), (0.0, 0))
            series.append(
                {"date": day.isoformat(), "revenue": round(revenue, 2), "orders": count}
            )
            day += timedelta(days=1)
        return series

    def _recent_orders(self) -> list:
        orders = (
            self.db.query(Order)
            .options(joinedload(Order.user))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(RECENT_ORDERS_LIMIT)
            .all()
        )
        return [
            {
                "order_number": o.order_number,
                "customer_email": o.user.email if o.user else None,
                "total_amount": float(o.total_amount),
                "status": o.status,
                "created_at": o.created_at,
            }
            for o in orders
        ]
