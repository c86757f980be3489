"""Navigation state over the unit hierarchy."""

from dataclasses import dataclass, field
from typing import Sequence

from site_inventory.exceptions import InvalidNavigationError
from site_inventory.hierarchy import MAX_DEPTH, FlatItem, FolderItem, Item, list_items
from site_inventory.models import FlatId, FlatRecord, ViewMode


@dataclass
class Navigator:
    """Tracks the view mode, the open folder path and the selected flat.

    Modes cycle between ``setup``, ``folders`` and ``flat-details`` for the
    whole session; there is no terminal state.
    """

    mode: ViewMode = ViewMode.FOLDERS
    path: list[str] = field(default_factory=list)
    selected_flat_id: FlatId | None = None

    @classmethod
    def initial(cls, flats: Sequence[FlatRecord]) -> "Navigator":
        """Start in setup for an empty project, otherwise at the root folder."""
        return cls(mode=ViewMode.SETUP if not flats else ViewMode.FOLDERS)

    @property
    def can_go_back(self) -> bool:
        return self.mode == ViewMode.FLAT_DETAIL or (
            self.mode == ViewMode.FOLDERS and bool(self.path)
        )

    def items(self, flats: Sequence[FlatRecord]) -> list[Item]:
        """What the folder view should list now; empty outside it."""
        if self.mode != ViewMode.FOLDERS:
            return []
        return list_items(flats, self.path)

    def select(self, item: Item) -> None:
        """Open a folder or a flat from the folder view."""
        self._expect(ViewMode.FOLDERS, "select")
        if isinstance(item, FolderItem):
            if len(self.path) >= MAX_DEPTH:
                raise InvalidNavigationError(f"Cannot open a folder below {self.path}")
            self.path.append(item.key)
        elif isinstance(item, FlatItem):
            if item.flat.flat_id is None:
                raise InvalidNavigationError(f"Flat {item.flat.label} has not been saved")
            self.selected_flat_id = item.flat.flat_id
            self.mode = ViewMode.FLAT_DETAIL
        else:
            raise InvalidNavigationError(f"Cannot select {item!r}")

    def back(self) -> None:
        """Leave the flat detail, or go up one folder level."""
        if self.mode == ViewMode.FLAT_DETAIL:
            self.mode = ViewMode.FOLDERS
            self.selected_flat_id = None
        elif self.mode == ViewMode.FOLDERS and self.path:
            self.path.pop()

    def start_setup(self) -> None:
        """Open the setup wizard to generate another batch."""
        self.mode = ViewMode.SETUP
        self.selected_flat_id = None

    def finish_setup(self) -> None:
        """Return to the folder view after generation or cancel."""
        self._expect(ViewMode.SETUP, "leave setup")
        self.mode = ViewMode.FOLDERS

    def resolve_flat(self, flats: Sequence[FlatRecord]) -> FlatRecord | None:
        """Find the selected flat; ``None`` if it is gone."""
        if self.mode != ViewMode.FLAT_DETAIL:
            return None
        return next((f for f in flats if f.flat_id == self.selected_flat_id), None)

    def title(self, flats: Sequence[FlatRecord] = ()) -> str:
        """Header text for the current view."""
        if self.mode == ViewMode.SETUP:
            return "Project Setup"
        if self.mode == ViewMode.FLAT_DETAIL:
            flat = self.resolve_flat(flats)
            return f"Flat {flat.label}" if flat else "Flat"
        if not self.path:
            return "Inventory Overview"
        return " > ".join(self.path)

    def _expect(self, mode: ViewMode, action: str) -> None:
        if self.mode != mode:
            raise InvalidNavigationError(f"Cannot {action} while in {self.mode.value}")
