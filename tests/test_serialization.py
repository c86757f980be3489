"""Tests for flat serialization."""

import json
from datetime import date, datetime
from decimal import Decimal

import pytest

from site_inventory.exceptions import StoreError
from site_inventory.models import (
    ExtraWorkItem,
    FlatId,
    FlatRecord,
    FlatStatus,
    PaymentEntry,
    PaymentMode,
)
from site_inventory.serialization import (
    flat_from_dict,
    flat_to_dict,
    normalize_id,
    serialize_value,
)


class TestSerializeValue:
    """Tests for serialize_value."""

    def test_scalars(self) -> None:
        assert serialize_value(Decimal("10.50")) == "10.50"
        assert serialize_value(FlatStatus.SOLD) == "Sold"
        assert serialize_value(date(2026, 1, 2)) == "2026-01-02"
        assert serialize_value(datetime(2026, 1, 2, 3, 4)) == "2026-01-02T03:04:00"

    def test_nested(self) -> None:
        assert serialize_value({"a": [Decimal("1")]}) == {"a": ["1"]}


class TestNormalizeId:
    """Tests for normalize_id."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("abc", "abc"),
            (42, "42"),
            ({"_id": "abc"}, "abc"),
            ({"id": 7}, "7"),
            ({"$oid": "65f0"}, "65f0"),
            ({"_id": {"$oid": "65f0"}}, "65f0"),
        ],
    )
    def test_forms(self, raw: object, expected: str) -> None:
        assert normalize_id(raw) == expected

    def test_empty(self) -> None:
        assert normalize_id(None) is None
        assert normalize_id("  ") is None

    def test_unrecognised(self) -> None:
        with pytest.raises(StoreError):
            normalize_id({"uuid": "x"})


class TestFlatDict:
    """Tests for flat_to_dict / flat_from_dict."""

    def test_sold_flat(self) -> None:
        proof = {"name": "bill.pdf", "url": "blob:xyz"}
        flat = FlatRecord(
            flat_id=FlatId("f1"),
            project_id="site-1",
            block="A",
            floor="2",
            flat_number="201",
            status=FlatStatus.SOLD,
            buyer_name="Buyer",
            total_amount=Decimal("100.00"),
            paid_amount=Decimal("40.00"),
            payment_history=[PaymentEntry("p1", Decimal("40.00"), date(2026, 1, 1), PaymentMode.UPI)],
            extra_work=[ExtraWorkItem("Grill", Decimal("5.00"), proof)],
            documents=[proof],
            created_at=datetime(2026, 1, 1, 10, 0),
        )

        data = flat_to_dict(flat)
        json.dumps(data)

        assert data["payment_history"] == [
            {"payment_id": "p1", "amount": "40.00", "paid_on": "2026-01-01", "mode": "UPI"}
        ]
        assert data["extra_work"][0]["proof"] == proof
        assert flat_from_dict(data) == flat

    def test_legacy_camel_case(self) -> None:
        flat = flat_from_dict(
            {
                "id": 17,
                "siteId": "site-9",
                "block": "B",
                "floor": "3",
                "flatNumber": "304",
                "buyerName": "Legacy",
                "totalAmount": "",
                "paidAmount": "abc",
                "area": "",
                "paymentHistory": [{"id": 1700000000000, "amount": "500", "date": "2026-02-03"}],
                "extraWork": [{"description": "Tiles", "cost": "x"}],
                "createdAt": "2026-01-01T00:00:00Z",
            }
        )

        assert flat.flat_id == "17"
        assert flat.project_id == "site-9"
        assert flat.flat_number == "304"
        assert flat.buyer_name == "Legacy"
        assert flat.total_amount == 0
        assert flat.paid_amount == 0
        assert flat.area is None
        assert flat.payment_history[0].payment_id == "1700000000000"
        assert flat.payment_history[0].paid_on == date(2026, 2, 3)
        assert flat.payment_history[0].mode == PaymentMode.CASH
        assert flat.extra_work[0].cost == 0
        assert flat.created_at.year == 2026
