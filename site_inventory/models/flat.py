"""Flat record and its ledger sub-entries."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, NewType

from site_inventory.models.enums import FlatStatus, FlatType, PaymentMode

# Normalized store identifier; raw external forms are converted at the
# store boundary (see site_inventory.serialization.normalize_id).
FlatId = NewType("FlatId", str)

# Attachments (documents, extra-work proofs) are opaque and passed through.
AttachmentRef = Any


@dataclass
class PaymentEntry:
    """One instalment received against a flat."""

    payment_id: str
    amount: Decimal
    paid_on: date
    mode: PaymentMode = PaymentMode.CASH


@dataclass
class ExtraWorkItem:
    """Buyer-requested customization billed on top of the deal value."""

    description: str
    cost: Decimal
    proof: AttachmentRef = None


@dataclass
class FlatRecord:
    """One saleable unit in a block.

    ``(block, floor, flat_number)`` is the flat's position in the
    Building > Floor > Flat hierarchy and does not change after creation.
    ``paid_amount`` mirrors the sum of ``payment_history`` whenever the
    history is non-empty; legacy records without history use it directly.
    """

    block: str
    floor: str
    flat_number: str
    flat_type: FlatType = FlatType.TWO_BHK
    area: Decimal | None = None
    rate: Decimal | None = None
    status: FlatStatus = FlatStatus.AVAILABLE
    buyer_name: str = ""
    buyer_address: str = ""
    buyer_mobile: str = ""
    total_amount: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    payment_history: list[PaymentEntry] = field(default_factory=list)
    extra_work: list[ExtraWorkItem] = field(default_factory=list)
    documents: list[AttachmentRef] = field(default_factory=list)
    flat_id: FlatId | None = None
    project_id: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def position(self) -> tuple[str, str, str]:
        """Return the ``(block, floor, flat_number)`` triple."""
        return (self.block, self.floor, self.flat_number)

    @property
    def label(self) -> str:
        """Return the display label, e.g. ``A-302``."""
        return f"{self.block}-{self.flat_number}"
