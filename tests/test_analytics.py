"""
Tests for dashboard analytics: daily summary and popular items.
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from restaurant_pos.db.orders import Order, OrderItem, OrderStatus
from restaurant_pos.db.tables import TableSession
from restaurant_pos.services.analytics import (
    local_day_bounds,
    revenue_in_database,
    revenue_in_memory,
)

DAY = datetime(2026, 3, 14, 12, 0)


def _order(db, session_id, created_at, status, lines):
    order = Order(session_id=session_id, created_at=created_at, status=status)
    db.add(order)
    db.commit()
    for item_id, quantity in lines:
        db.add(OrderItem(order_id=order.id, item_id=item_id, quantity=quantity))
    db.commit()
    return order


@pytest.fixture
def sales_day(db, menu, table_session):
    """Orders and sessions around 2026-03-14, including both edges of the day."""
    table_id = table_session["table_id"]
    for start in (
        datetime(2026, 3, 14, 0, 0),
        datetime(2026, 3, 14, 23, 59, 59, 999000),
        datetime(2026, 3, 15, 0, 0),
    ):
        db.add(TableSession(table_id=table_id, start_time=start, end_time=start + timedelta(minutes=30)))
    db.commit()

    sid = table_session["session_id"]
    _order(db, sid, datetime(2026, 3, 14, 0, 0), OrderStatus.COMPLETED,
           [(menu["coke"], 2), (menu["spring_rolls"], 1)])
    _order(db, sid, datetime(2026, 3, 14, 23, 59, 59, 999000), OrderStatus.COMPLETED,
           [(menu["garlic_bread"], 3)])
    _order(db, sid, datetime(2026, 3, 14, 12, 0), OrderStatus.PENDING,
           [(menu["lemonade"], 10)])
    _order(db, sid, datetime(2026, 3, 15, 0, 0), OrderStatus.COMPLETED,
           [(menu["coke"], 5)])
    _order(db, sid, datetime(2026, 3, 13, 23, 59, 59, 999000), OrderStatus.COMPLETED,
           [(menu["coke"], 5)])


class TestDailySummary:
    """Tests for GET /analytics/daily-summary."""

    def test_counts_and_revenue_for_day(self, client, auth_headers, sales_day):
        """Only COMPLETED orders inside [00:00, 23:59:59.999] contribute revenue."""
        response = client.get(
            "/analytics/daily-summary", params={"date": DAY.isoformat()}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 3
        assert data["total_sessions"] == 2
        # 2 x 2.00 + 1 x 5.99 + 3 x 4.50
        assert Decimal(data["total_revenue"]) == Decimal("23.49")

    def test_empty_day(self, client, auth_headers, sales_day):
        response = client.get(
            "/analytics/daily-summary",
            params={"date": datetime(2026, 1, 1, 9, 0).isoformat()},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 0
        assert data["total_sessions"] == 0
        assert Decimal(data["total_revenue"]) == Decimal("0")

    def test_defaults_to_today(self, client, auth_headers, menu, table_session, db):
        _order(db, table_session["session_id"], datetime.now(), OrderStatus.COMPLETED, [(menu["lemonade"], 2)])

        response = client.get("/analytics/daily-summary", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_orders"] == 1
        assert data["total_sessions"] == 1
        assert Decimal(data["total_revenue"]) == Decimal("5.00")

    def test_requires_auth(self, client):
        response = client.get("/analytics/daily-summary")

        assert response.status_code == 401


class TestRevenueAggregation:
    """In-database and in-memory revenue must agree."""

    def test_same_result_for_busy_day(self, db, sales_day):
        start, end = local_day_bounds(DAY)

        assert revenue_in_database(db, start, end) == revenue_in_memory(db, start, end) == Decimal("23.49")

    def test_same_result_for_empty_day(self, db, sales_day):
        start, end = local_day_bounds(datetime(2026, 1, 1))

        assert revenue_in_database(db, start, end) == revenue_in_memory(db, start, end) == Decimal("0.00")

    def test_day_bounds(self):
        start, end = local_day_bounds(DAY)

        assert start == datetime(2026, 3, 14, 0, 0)
        assert end == datetime(2026, 3, 14, 23, 59, 59, 999000)


@pytest.fixture
def recent_sales(db, menu, table_session):
    """Within the last week: coke 6+4, garlic bread 7, lemonade 3. A month ago: lemonade 100."""
    sid = table_session["session_id"]
    yesterday = datetime.now() - timedelta(days=1)
    _order(db, sid, yesterday, OrderStatus.COMPLETED, [(menu["coke"], 6), (menu["garlic_bread"], 7)])
    _order(db, sid, yesterday, OrderStatus.PENDING, [(menu["coke"], 4), (menu["lemonade"], 3)])
    _order(db, sid, datetime.now() - timedelta(days=30), OrderStatus.COMPLETED, [(menu["lemonade"], 100)])


class TestPopularItems:
    """Tests for GET /analytics/popular-items."""

    def test_top_two_descending(self, client, auth_headers, menu, recent_sales):
        response = client.get(
            "/analytics/popular-items", params={"limit": 2, "days": 7}, headers=auth_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert [row["item"]["id"] for row in data] == [menu["coke"], menu["garlic_bread"]]
        assert [row["total_quantity"] for row in data] == [10, 7]
        assert data[0]["order_count"] == 2
        assert data[0]["item"]["category"]["name"] == "Beverages"

    def test_defaults_exclude_old_orders(self, client, auth_headers, menu, recent_sales):
        """Lemonade's month-old order does not count towards the last 7 days."""
        response = client.get("/analytics/popular-items", headers=auth_headers)

        data = response.json()
        assert [row["total_quantity"] for row in data] == [10, 7, 3]

    def test_wider_window(self, client, auth_headers, menu, recent_sales):
        response = client.get("/analytics/popular-items", params={"days": 60}, headers=auth_headers)

        data = response.json()
        assert data[0]["item"]["id"] == menu["lemonade"]
        assert data[0]["total_quantity"] == 103

    def test_no_orders(self, client, auth_headers, menu):
        response = client.get("/analytics/popular-items", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == []

    def test_rejects_zero_limit(self, client, auth_headers):
        response = client.get("/analytics/popular-items", params={"limit": 0}, headers=auth_headers)

        assert response.status_code == 422


class TestLocalDayBounds:

    def test_aware_date_converted_to_local_day(self):
        """Shortly after local midnight, whatever the day is in UTC."""
        local = datetime(2026, 3, 14, 0, 15).astimezone()
        utc = local.astimezone(timezone.utc)

        start, end = local_day_bounds(utc)

        assert start == datetime(2026, 3, 14, 0, 0)
        assert end == datetime(2026, 3, 14, 23, 59, 59, 999000)
        assert start.tzinfo is None

    def test_aware_date_just_before_local_midnight(self):
        local = datetime(2026, 3, 14, 23, 50).astimezone()
        utc = local.astimezone(timezone.utc)

        start, _ = local_day_bounds(utc)

        assert start == datetime(2026, 3, 14, 0, 0)
