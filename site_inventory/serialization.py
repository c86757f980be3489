"""Conversion between flat records and JSON-compatible dictionaries."""

from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from site_inventory.exceptions import StoreError
from site_inventory.models import (
    ExtraWorkItem,
    FlatId,
    FlatRecord,
    FlatStatus,
    FlatType,
    PaymentEntry,
    PaymentMode,
)
from site_inventory.models.money import parse_amount, to_amount


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def normalize_id(raw: Any) -> FlatId | None:
    """Normalize an external identifier into a ``FlatId``.

    Accepts a plain string or number, a ``{"_id": ...}``/``{"id": ...}``
    wrapper, or a Mongo-style ``{"$oid": ...}`` object.
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        for key in ("$oid", "_id", "id"):
            if key in raw:
                return normalize_id(raw[key])
        raise StoreError(f"Unrecognised identifier: {raw!r}")
    text = str(raw).strip()
    return FlatId(text) if text else None


def flat_to_dict(flat: FlatRecord) -> dict[str, Any]:
    """Convert a flat record to a JSON-compatible dict.

    Uses ``fields()`` + ``getattr`` rather than ``asdict()`` so opaque
    attachment references are passed through as-is instead of deep-copied.
    """
    result = {}
    for f in fields(flat):
        value = getattr(flat, f.name)
        if f.name == "payment_history":
            value = [_payment_to_dict(p) for p in value]
        elif f.name == "extra_work":
            value = [_extra_work_to_dict(w) for w in value]
        result[f.name] = serialize_value(value)
    return result


def _payment_to_dict(payment: PaymentEntry) -> dict[str, Any]:
    return {
        "payment_id": payment.payment_id,
        "amount": payment.amount,
        "paid_on": payment.paid_on,
        "mode": payment.mode,
    }


def _extra_work_to_dict(item: ExtraWorkItem) -> dict[str, Any]:
    return {"description": item.description, "cost": item.cost, "proof": item.proof}


def flat_from_dict(data: dict[str, Any]) -> FlatRecord:
    """Build a flat record from a stored dict.

    Legacy documents are tolerated: camelCase keys are accepted, amounts that
    do not parse become zero, and a missing payment history is left empty so
    ``paid_amount`` stays the source of truth.
    """
    get = _Getter(data)
    return FlatRecord(
        flat_id=normalize_id(get("flat_id", "_id", "id")),
        project_id=str(get("project_id", "siteId") or ""),
        block=_text(get("block")),
        floor=_text(get("floor")),
        flat_number=_text(get("flat_number", "flatNumber")),
        flat_type=FlatType(get("flat_type", "type") or FlatType.TWO_BHK),
        area=parse_amount(get("area")),
        rate=parse_amount(get("rate")),
        status=FlatStatus(get("status") or FlatStatus.AVAILABLE),
        buyer_name=get("buyer_name", "buyerName") or "",
        buyer_address=get("buyer_address", "buyerAddress") or "",
        buyer_mobile=get("buyer_mobile", "buyerMobile") or "",
        total_amount=to_amount(get("total_amount", "totalAmount")),
        paid_amount=to_amount(get("paid_amount", "paidAmount")),
        payment_history=[
            _payment_from_dict(p) for p in get("payment_history", "paymentHistory") or []
        ],
        extra_work=[_extra_work_from_dict(w) for w in get("extra_work", "extraWork") or []],
        documents=list(get("documents") or []),
        created_at=_parse_datetime(get("created_at", "createdAt")),
        updated_at=_parse_datetime(get("updated_at", "updatedAt")),
    )


def _payment_from_dict(data: dict[str, Any]) -> PaymentEntry:
    get = _Getter(data)
    paid_on = get("paid_on", "date")
    return PaymentEntry(
        payment_id=str(get("payment_id", "id", "_id") or ""),
        amount=to_amount(get("amount")),
        paid_on=date.fromisoformat(paid_on[:10]) if isinstance(paid_on, str) else paid_on,
        mode=PaymentMode(get("mode") or PaymentMode.CASH),
    )


def _extra_work_from_dict(data: dict[str, Any]) -> ExtraWorkItem:
    return ExtraWorkItem(
        description=data.get("description") or "",
        cost=to_amount(data.get("cost")),
        proof=data.get("proof"),
    )


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


class _Getter:
    """Look up the first present key among snake_case and legacy aliases."""

    def __init__(self, data: dict[str, Any]) -> None:
        self.data = data

    def __call__(self, *keys: str) -> Any:
        for key in keys:
            if key in self.data:
                return self.data[key]
        return None
