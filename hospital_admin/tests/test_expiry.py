"""Tests for stock expiry alerts."""
from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from hospital_admin.app.models.inventory import StockItem
from hospital_admin.app.services.expiry import get_expiry_alerts, parse_expiry
from hospital_admin.tests.factories import AS_OF


def add_item(db: Session, name: str, expiry: str | None, stock: int = 10) -> StockItem:
    item = StockItem(name=name, batch_no=f"B-{name}", category="BNX", expiry_date=expiry, current_stock=stock)
    db.add(item)
    db.flush()
    return item


def in_days(days: int) -> str:
    return (AS_OF + timedelta(days=days)).isoformat()


class TestParseExpiry:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2027-03-31", date(2027, 3, 31)),
            ("2027-02", date(2027, 2, 28)),
            ("02/2028", date(2028, 2, 29)),
            ("11/27", date(2027, 11, 30)),
            ("15/06/2027", date(2027, 6, 15)),
            (" 2027-03-31 ", date(2027, 3, 31)),
        ],
    )
    def test_formats(self, raw: str, expected: date) -> None:
        assert parse_expiry(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "  ", "N/A", "n/a", "soon", "13/2027", "2027-13-01"])
    def test_unreadable(self, raw: str | None) -> None:
        assert parse_expiry(raw) is None


class TestExpiryAlerts:
    def test_counts_by_bucket(self, db: Session) -> None:
        add_item(db, "Expired", in_days(-3))
        add_item(db, "Today", in_days(0))
        add_item(db, "Soon", in_days(30))
        add_item(db, "Month2", in_days(31))
        add_item(db, "Month3", in_days(90))
        add_item(db, "Later", in_days(91))
        add_item(db, "Unknown", "N/A")
        add_item(db, "Blank", None)

        result = get_expiry_alerts(db, AS_OF)
        assert result["counts"] == {
            "expired": 2,
            "within_30": 1,
            "within_60": 1,
            "within_90": 1,
        }
        assert result["total_alerts"] == 5
        assert [i["name"] for i in result["items"]] == [
            "Expired", "Today", "Soon", "Month2", "Month3",
        ]
        assert result["items"][0]["days_left"] == -3
        assert result["items"][0]["bucket"] == "expired"

    def test_period_filters(self, db: Session) -> None:
        add_item(db, "Expired", in_days(-1))
        add_item(db, "Soon", in_days(10))
        add_item(db, "Month2", in_days(45))

        assert [i["name"] for i in get_expiry_alerts(db, AS_OF, "expired")["items"]] == ["Expired"]
        assert [i["name"] for i in get_expiry_alerts(db, AS_OF, "30")["items"]] == ["Soon"]
        assert [i["name"] for i in get_expiry_alerts(db, AS_OF, "60")["items"]] == ["Soon", "Month2"]
        # Counts are independent of the filter.
        assert get_expiry_alerts(db, AS_OF, "30")["total_alerts"] == 3

    def test_unknown_period_rejected(self, db: Session) -> None:
        with pytest.raises(ValueError):
            get_expiry_alerts(db, AS_OF, "45")

    def test_stock_listing_cache_invalidated_on_create(
        self, client: TestClient, db: Session
    ) -> None:
        assert client.get("/api/v1/inventory/stock-items").json() == []

        # Rows written behind the API's back are not seen until invalidation.
        add_item(db, "Hidden", in_days(5))
        assert client.get("/api/v1/inventory/stock-items").json() == []

        resp = client.post(
            "/api/v1/inventory/stock-items",
            json={"name": "Amoxicillin 500", "batch_no": "AMX1", "expiry_date": in_days(20), "current_stock": 40},
        )
        assert resp.status_code == 201
        names = [i["name"] for i in client.get("/api/v1/inventory/stock-items").json()]
        assert names == ["Hidden", "Amoxicillin 500"]

    def test_endpoint(self, client: TestClient, db: Session) -> None:
        add_item(db, "Insulin", in_days(12))
        resp = client.get(
            "/api/v1/reports/expiry-alerts",
            params={"as_of_date": str(AS_OF), "period": "30"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["counts"]["within_30"] == 1
        assert body["items"][0]["name"] == "Insulin"

    def test_endpoint_bad_period(self, client: TestClient) -> None:
        resp = client.get("/api/v1/reports/expiry-alerts", params={"period": "week"})
        assert resp.status_code == 400
