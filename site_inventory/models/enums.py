"""Enumeration types for inventory entities."""

from enum import Enum


class FlatType(str, Enum):
    ONE_BHK = "1BHK"
    TWO_BHK = "2BHK"
    THREE_BHK = "3BHK"
    PENTHOUSE = "Penthouse"


class FlatStatus(str, Enum):
    AVAILABLE = "Available"
    BOOKED = "Booked"
    SOLD = "Sold"


class PaymentMode(str, Enum):
    CASH = "Cash"
    CHEQUE = "Cheque"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"


class ViewMode(str, Enum):
    SETUP = "setup"
    FOLDERS = "folders"
    FLAT_DETAIL = "flat-details"


class ItemKind(str, Enum):
    FOLDER = "folder"
    FLAT = "flat"


class AccessLevel(str, Enum):
    NO_ACCESS = "no_access"
    VIEW_ONLY = "view_only"
    DATA_ENTRY = "data_entry"
    FULL_CONTROL = "full_control"
