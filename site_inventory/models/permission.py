"""Capability set resolved from a user's access level."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from site_inventory.models.enums import AccessLevel


@dataclass(frozen=True)
class Capabilities:
    """What the current user may do in the inventory module.

    ``edit_window`` is set for data-entry users: they may edit or delete
    items they created within that window, and nothing older.
    """

    can_view: bool = False
    can_enter: bool = False
    can_edit_delete: bool = False
    edit_window: timedelta | None = None

    @classmethod
    def from_access_level(
        cls,
        level: AccessLevel | str | None,
        edit_window_minutes: int = 30,
    ) -> "Capabilities":
        """Resolve capabilities from an access level.

        A missing level defaults to view-only; only an explicit
        ``no_access`` hides the module.
        """
        if level is None:
            return cls(can_view=True)
        level = AccessLevel(level)
        if level == AccessLevel.FULL_CONTROL:
            return cls(can_view=True, can_enter=True, can_edit_delete=True)
        if level == AccessLevel.DATA_ENTRY:
            return cls(
                can_view=True,
                can_enter=True,
                edit_window=timedelta(minutes=edit_window_minutes),
            )
        if level == AccessLevel.VIEW_ONLY:
            return cls(can_view=True)
        return cls()

    @classmethod
    def full(cls) -> "Capabilities":
        """Capabilities of a full-control user."""
        return cls.from_access_level(AccessLevel.FULL_CONTROL)

    def can_modify(self, created_at: datetime | None, now: datetime | None = None) -> bool:
        """Check whether an item created at ``created_at`` may be edited or deleted."""
        if self.can_edit_delete:
            return True
        if self.edit_window is None or created_at is None:
            return False
        now = now or datetime.now(created_at.tzinfo)
        return now - created_at <= self.edit_window
