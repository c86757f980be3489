"""Domain models for the unit inventory."""

from site_inventory.models.enums import (
    AccessLevel,
    FlatStatus,
    FlatType,
    ItemKind,
    PaymentMode,
    ViewMode,
)
from site_inventory.models.flat import (
    AttachmentRef,
    ExtraWorkItem,
    FlatId,
    FlatRecord,
    PaymentEntry,
)
from site_inventory.models.permission import Capabilities

__all__ = [
    "AccessLevel",
    "AttachmentRef",
    "Capabilities",
    "ExtraWorkItem",
    "FlatId",
    "FlatRecord",
    "FlatStatus",
    "FlatType",
    "ItemKind",
    "PaymentEntry",
    "PaymentMode",
    "ViewMode",
]
