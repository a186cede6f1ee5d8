"""Tests for supplier payment reminders."""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from hospital_admin.app.models.supplier import (
    PaymentStatus,
    POPaymentStatus,
    POStatus,
    Supplier,
)
from hospital_admin.app.services.payables import get_aging_summary
from hospital_admin.app.services.reminders import get_payment_reminders
from hospital_admin.tests.factories import AS_OF, make_payment, make_po

ZERO = Decimal("0")


class TestPaymentReminders:
    def test_no_reminders(self, db: Session) -> None:
        result = get_payment_reminders(db, AS_OF)
        assert result["has_reminders"] is False
        assert result["overdue"] == []
        assert result["upcoming"] == []
        assert result["window_days"] == 7

    def test_overdue_and_upcoming_payments(self, db: Session, acme: Supplier) -> None:
        make_payment(
            db, acme, "100", status=PaymentStatus.PENDING,
            due_date=AS_OF - timedelta(days=4), reference="CHQ-1",
        )
        make_payment(
            db, acme, "200", status=PaymentStatus.SCHEDULED,
            due_date=AS_OF, reference="CHQ-2",
        )
        make_payment(
            db, acme, "300", status=PaymentStatus.SCHEDULED,
            due_date=AS_OF + timedelta(days=7), reference="CHQ-3",
        )
        # Outside the window, completed, and cancelled payments are ignored.
        make_payment(
            db, acme, "400", status=PaymentStatus.SCHEDULED,
            due_date=AS_OF + timedelta(days=8),
        )
        make_payment(db, acme, "500", due_date=AS_OF - timedelta(days=2))
        make_payment(
            db, acme, "600", status=PaymentStatus.CANCELLED,
            due_date=AS_OF - timedelta(days=2),
        )

        result = get_payment_reminders(db, AS_OF)
        assert [e["reference"] for e in result["overdue"]] == ["CHQ-1"]
        assert result["overdue"][0]["days_overdue"] == 4
        assert [e["reference"] for e in result["upcoming"]] == ["CHQ-2", "CHQ-3"]
        assert result["upcoming"][1]["days_until_due"] == 7
        assert Decimal(result["total_overdue"]) == Decimal("100")
        assert Decimal(result["total_upcoming"]) == Decimal("500")
        assert result["has_reminders"] is True

    def test_purchase_orders_use_pending_amount(self, db: Session, acme: Supplier) -> None:
        po = make_po(db, acme, "1000", "PO1", due_days_ago=10)
        make_payment(db, acme, "250", po=po)
        make_po(db, acme, "300", "PO2", due_days_ago=-3)

        result = get_payment_reminders(db, AS_OF)
        (overdue,) = result["overdue"]
        assert overdue["kind"] == "PURCHASE_ORDER"
        assert overdue["reference"] == "PO1"
        assert Decimal(overdue["amount"]) == Decimal("750")
        (upcoming,) = result["upcoming"]
        assert upcoming["reference"] == "PO2"
        assert upcoming["days_until_due"] == 3

    def test_overdue_status_flag_counts_without_due_date(
        self, db: Session, acme: Supplier
    ) -> None:
        make_po(db, acme, "80", "PO1", payment_status=POPaymentStatus.OVERDUE)

        result = get_payment_reminders(db, AS_OF)
        assert [e["reference"] for e in result["overdue"]] == ["PO1"]
        assert result["overdue"][0]["due_date"] is None

    def test_paid_and_cancelled_orders_ignored(self, db: Session, acme: Supplier) -> None:
        make_po(db, acme, "100", "PO1", due_days_ago=5, payment_status=POPaymentStatus.PAID)
        make_po(db, acme, "100", "PO2", due_days_ago=5, status=POStatus.CANCELLED)
        po = make_po(db, acme, "100", "PO3", due_days_ago=5)
        make_payment(db, acme, "100", po=po)

        assert get_payment_reminders(db, AS_OF)["has_reminders"] is False

    def test_custom_window(self, db: Session, acme: Supplier) -> None:
        make_po(db, acme, "100", "PO1", due_days_ago=-20)
        assert get_payment_reminders(db, AS_OF)["upcoming"] == []
        assert len(get_payment_reminders(db, AS_OF, window_days=30)["upcoming"]) == 1

    def test_negative_window_rejected(self, db: Session) -> None:
        with pytest.raises(ValueError):
            get_payment_reminders(db, AS_OF, window_days=-1)

    def test_endpoint(self, client: TestClient, db: Session, acme: Supplier) -> None:
        make_po(db, acme, "100", "PO1", due_days_ago=2)
        resp = client.get(
            "/api/v1/reports/payment-reminders",
            params={"as_of_date": str(AS_OF), "window_days": 14},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["window_days"] == 14
        assert body["overdue_count"] == 1
        assert body["overdue"][0]["supplier"] == "Acme Pharma"

    def test_payment_linked_to_listed_order_not_counted_twice(
        self, db: Session, acme: Supplier
    ) -> None:
        po = make_po(db, acme, "1000", "PO1", due_days_ago=10)
        make_payment(
            db, acme, "1000", po=po, status=PaymentStatus.SCHEDULED,
            due_date=AS_OF - timedelta(days=10), reference="CHQ-1",
        )

        result = get_payment_reminders(db, AS_OF)
        summary = get_aging_summary(db, AS_OF)
        assert [e["reference"] for e in result["overdue"]] == ["PO1"]
        assert Decimal(result["total_overdue"]) == Decimal(summary["total_overdue"])
        assert result["overdue_count"] == summary["overdue_count"]

    def test_unreceived_order_not_reminded(self, db: Session, acme: Supplier) -> None:
        make_po(db, acme, "400", "PO1", due_days_ago=3, status=POStatus.PENDING)
        make_po(db, acme, "400", "PO2", due_days_ago=-3, status=POStatus.PENDING)

        assert get_payment_reminders(db, AS_OF)["has_reminders"] is False
        assert Decimal(get_aging_summary(db, AS_OF)["total_pending"]) == ZERO

    def test_amounts_have_two_decimals(self, db: Session, acme: Supplier) -> None:
        po = make_po(db, acme, "1000", "PO1", due_days_ago=4)
        make_payment(db, acme, "250.5", po=po)
        db.commit()
        db.expire_all()

        result = get_payment_reminders(db, AS_OF)
        assert result["overdue"][0]["amount"] == "749.50"
        assert result["total_overdue"] == "749.50"
        assert result["total_upcoming"] == "0.00"
