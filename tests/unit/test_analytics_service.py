"""Unit tests for the admin analytics aggregation."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from gallery.models.comment import Comment
from gallery.models.order import Order
from gallery.models.reaction import Reaction
from gallery.services.analytics import AnalyticsService


def add_order(db, number, amount, user=None, days_ago=0):
    order = Order(
        order_number=number,
        user_id=user.id if user else None,
        total_amount=Decimal(amount),
        created_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
    )
    db.add(order)
    db.commit()
    return order


class TestAnalyticsService:
    """Tests for AnalyticsService.get_analytics."""

    def test_empty_store(self, db):
        result = AnalyticsService(db).get_analytics("7d")

        assert result["time_range"] == "7d"
        assert result["overview"]["total_revenue"] == 0
        assert result["overview"]["average_order_value"] == 0
        assert result["overview"]["conversion_rate"] == 0
        assert len(result["daily_revenue"]) in (7, 8)
        assert result["recent_orders"] == []

    def test_unknown_range_defaults_to_30_days(self, db):
        assert AnalyticsService(db).get_analytics("forever")["time_range"] == "30d"

    def test_overview_figures(self, db, user):
        add_order(db, "137-00000001-AAAA", "100.00", user)
        add_order(db, "137-00000002-BBBB", "50.00", user, days_ago=2)
        add_order(db, "137-00000003-CCCC", "999.00", user, days_ago=60)

        overview = AnalyticsService(db).get_analytics("30d")["overview"]

        assert overview["total_revenue"] == 150.0
        assert overview["total_orders"] == 2
        assert overview["average_order_value"] == 75.0
        assert overview["total_users"] == 1
        assert overview["new_users"] == 1
        assert overview["conversion_rate"] == 200.0

    def test_daily_series_buckets_orders(self, db, user):
        add_order(db, "137-00000004-DDDD", "20.00", user)
        add_order(db, "137-00000005-EEEE", "30.00", user)

        series = AnalyticsService(db).get_analytics("7d")["daily_revenue"]

        today = series[-1]
        assert today["orders"] == 2
        assert today["revenue"] == 50.0
        assert sum(day["orders"] for day in series) == 2

    def test_recent_orders_are_capped_and_newest_first(self, db, user):
        for i in range(12):
            add_order(db, f"137-{i:08d}-ZZZZ", "1.00", user, days_ago=12 - i)

        recent = AnalyticsService(db).get_analytics("1y")["recent_orders"]

        assert len(recent) == 10
        assert recent[0]["order_number"] == "137-00000011-ZZZZ"
        assert recent[0]["customer_email"] == user.email

    def test_community_totals(self, db, user, artwork):
        db.add(Comment(user_id=user.id, artwork_id=artwork.id, content="wow"))
        db.add(Reaction(user_id=user.id, artwork_id=artwork.id, type="love"))
        db.commit()

        community = AnalyticsService(db).get_analytics()["community"]

        assert community == {"artworks": 1, "comments": 1, "reactions": 1}
