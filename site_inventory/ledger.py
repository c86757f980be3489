"""Per-flat financial ledger: paid, pending and extra-work totals.

All mutations return a new ``FlatRecord`` and leave the input untouched, so
a caller can hold the previous version until the store confirms the write.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from site_inventory.exceptions import ValidationError
from site_inventory.models import (
    AttachmentRef,
    ExtraWorkItem,
    FlatRecord,
    FlatStatus,
    FlatType,
    PaymentEntry,
    PaymentMode,
)
from site_inventory.models.money import ZERO, parse_amount, quantize, to_amount


class LedgerSection(str, Enum):
    BUYER = "buyer"
    BUYER_ADDRESS = "buyer_address"
    DEAL = "deal"
    DOCUMENTS = "documents"
    PAYMENTS = "payments"
    EXTRA_WORK = "extra_work"


_SECTIONS = {
    FlatStatus.AVAILABLE: frozenset(),
    FlatStatus.BOOKED: frozenset({LedgerSection.BUYER}),
    FlatStatus.SOLD: frozenset(LedgerSection),
}

EDITABLE_FIELDS = frozenset(
    {
        "flat_type",
        "area",
        "rate",
        "status",
        "buyer_name",
        "buyer_address",
        "buyer_mobile",
        "total_amount",
        "paid_amount",
    }
)


def total_paid(flat: FlatRecord) -> Decimal:
    """Sum the payment history, or fall back to the legacy ``paid_amount``."""
    if flat.payment_history:
        return sum((to_amount(p.amount) for p in flat.payment_history), ZERO)
    return to_amount(flat.paid_amount)


def extra_work_total(flat: FlatRecord) -> Decimal:
    """Sum the cost of all extra work billed on the flat."""
    return sum((to_amount(item.cost) for item in flat.extra_work), ZERO)


def pending_amount(flat: FlatRecord) -> Decimal:
    """Deal value plus extra work minus what has been paid.

    Negative when the buyer has overpaid.
    """
    return to_amount(flat.total_amount) + extra_work_total(flat) - total_paid(flat)


@dataclass(frozen=True)
class LedgerSummary:
    """Derived financial view of one flat."""

    total_amount: Decimal
    extra_work_total: Decimal
    total_paid: Decimal
    pending: Decimal

    @property
    def balance_label(self) -> str:
        if self.pending > 0:
            return "Pending"
        if self.pending < 0:
            return "Credit"
        return "Settled"

    @property
    def balance_amount(self) -> Decimal:
        """Magnitude of the balance; read with ``balance_label``."""
        return abs(self.pending)


def summarize(flat: FlatRecord) -> LedgerSummary:
    """Compute the ledger summary of a flat."""
    paid = total_paid(flat)
    extra = extra_work_total(flat)
    total = to_amount(flat.total_amount)
    return LedgerSummary(
        total_amount=total,
        extra_work_total=extra,
        total_paid=paid,
        pending=total + extra - paid,
    )


def salient_sections(status: FlatStatus | str) -> frozenset[LedgerSection]:
    """Sections that matter for a flat in the given status.

    Booked flats show buyer name and mobile; sold flats add the address,
    the deal value, documents, payments and extra work.
    """
    return _SECTIONS[FlatStatus(status)]


def append_payment(
    flat: FlatRecord,
    amount: Any,
    paid_on: Any,
    mode: PaymentMode | str = PaymentMode.CASH,
    payment_id: str | None = None,
) -> FlatRecord:
    """Record a payment and resync ``paid_amount`` with the history.

    Raises
    ------
    ValidationError
        If the amount or date is missing, the amount is not a positive
        number, or the mode is unknown.
    """
    value = parse_amount(amount)
    if value is None:
        raise ValidationError("Please enter amount and date", field="amount")
    if value <= 0:
        raise ValidationError("Payment amount must be positive", field="amount")
    entry = PaymentEntry(
        payment_id=payment_id or uuid.uuid4().hex,
        amount=quantize(value),
        paid_on=_parse_date(paid_on),
        mode=_parse_mode(mode),
    )

    history = [*flat.payment_history, entry]
    paid = quantize(sum((to_amount(p.amount) for p in history), ZERO))
    return replace(flat, payment_history=history, paid_amount=paid)


def append_extra_work(
    flat: FlatRecord,
    description: Any,
    cost: Any,
    proof: AttachmentRef = None,
) -> FlatRecord:
    """Bill a piece of extra work on the flat.

    Raises
    ------
    ValidationError
        If the description is blank or the cost is not a non-negative number.
    """
    text = str(description).strip() if description is not None else ""
    if not text:
        raise ValidationError("Please enter description and cost", field="description")
    value = parse_amount(cost)
    if value is None:
        raise ValidationError("Please enter description and cost", field="cost")
    if value < 0:
        raise ValidationError("Extra work cost cannot be negative", field="cost")

    item = ExtraWorkItem(description=text, cost=quantize(value), proof=proof)
    return replace(flat, extra_work=[*flat.extra_work, item])


def attach_proof(flat: FlatRecord, index: int, proof: AttachmentRef) -> FlatRecord:
    """Attach or replace the proof of an existing extra-work item."""
    if not 0 <= index < len(flat.extra_work):
        raise ValidationError(f"No extra work item at position {index}", field="extra_work")
    items = list(flat.extra_work)
    items[index] = replace(items[index], proof=proof)
    return replace(flat, extra_work=items)


def add_document(flat: FlatRecord, document: AttachmentRef) -> FlatRecord:
    """Append an attachment reference to the flat's documents."""
    if document is None:
        raise ValidationError("No document selected", field="documents")
    return replace(flat, documents=[*flat.documents, document])


def change_status(flat: FlatRecord, status: FlatStatus | str) -> FlatRecord:
    """Move a flat to another status.

    Buyer and financial fields are kept as they are, including when the
    flat goes back to Available.
    """
    try:
        return replace(flat, status=FlatStatus(status))
    except ValueError as e:
        raise ValidationError(f"Unknown status: {status}", field="status") from e


def update_details(flat: FlatRecord, **changes: Any) -> FlatRecord:
    """Apply attribute edits to a flat.

    Only descriptive, buyer and deal fields may change; the flat's position
    and its ledger lists are not editable here. ``paid_amount`` can only be
    set by hand on records without a payment history.
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(
            f"Fields not editable: {', '.join(sorted(unknown))}", field=sorted(unknown)[0]
        )

    values: dict[str, Any] = {}
    for name, value in changes.items():
        if name == "flat_type":
            try:
                values[name] = FlatType(value)
            except ValueError as e:
                raise ValidationError(f"Unknown flat type: {value}", field=name) from e
        elif name == "status":
            values[name] = change_status(flat, value).status
        elif name in ("area", "rate"):
            values[name] = _optional_amount(name, value)
        elif name in ("total_amount", "paid_amount"):
            amount = _optional_amount(name, value)
            values[name] = ZERO if amount is None else quantize(amount)
        else:
            values[name] = "" if value is None else str(value).strip()

    if "paid_amount" in values and flat.payment_history:
        if values["paid_amount"] != quantize(total_paid(flat)):
            raise ValidationError(
                "Paid amount is derived from the payment history", field="paid_amount"
            )
        del values["paid_amount"]

    return replace(flat, **values)


def _optional_amount(name: str, value: Any) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    amount = parse_amount(value)
    if amount is None:
        raise ValidationError(f"{name} must be a number", field=name)
    if amount < 0:
        raise ValidationError(f"{name} cannot be negative", field=name)
    return amount


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError("Please enter amount and date", field="date")
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValidationError(f"Invalid date: {text}", field="date") from e


def _parse_mode(value: Any) -> PaymentMode:
    try:
        return PaymentMode(value or PaymentMode.CASH)
    except ValueError as e:
        raise ValidationError(f"Unknown payment mode: {value}", field="mode") from e
