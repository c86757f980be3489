"""In-memory flat store."""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Sequence

from site_inventory.exceptions import EntityNotFoundError, StoreError
from site_inventory.models import FlatId, FlatRecord


@dataclass
class InMemoryFlatStore:
    """Dict-backed store keyed by flat id.

    Records are copied on the way in and out so callers never share mutable
    state with the store. A mutation whose ``_changed`` hook fails is undone
    before the error propagates.
    """

    flats: dict[FlatId, FlatRecord] = field(default_factory=dict)

    def list_flats(self, project_id: str) -> list[FlatRecord]:
        """Get all flats for a project in creation order."""
        return [
            copy.deepcopy(flat)
            for flat in self.flats.values()
            if flat.project_id == project_id
        ]

    def create_flat(self, flat: FlatRecord) -> FlatRecord:
        """Persist a new flat and assign its id."""
        if not flat.project_id:
            raise StoreError(f"Flat {flat.label} has no project")

        stored = copy.deepcopy(flat)
        stored.flat_id = FlatId(uuid.uuid4().hex)
        stored.created_at = stored.updated_at = datetime.now()
        previous = dict(self.flats)
        self.flats[stored.flat_id] = stored
        self._persist([stored.project_id], previous)
        return copy.deepcopy(stored)

    def update_flat(self, flat: FlatRecord) -> FlatRecord:
        """Replace a stored flat, keeping its project and creation time."""
        current = self._get(flat.flat_id)
        stored = copy.deepcopy(flat)
        stored.project_id = current.project_id
        stored.created_at = current.created_at
        stored.updated_at = datetime.now()
        previous = dict(self.flats)
        self.flats[current.flat_id] = stored
        self._persist([stored.project_id], previous)
        return copy.deepcopy(stored)

    def delete_flat(self, flat_id: FlatId) -> None:
        """Remove a single flat."""
        flat = self._get(flat_id)
        previous = dict(self.flats)
        del self.flats[flat_id]
        self._persist([flat.project_id], previous)

    def delete_flats(self, flat_ids: Sequence[FlatId]) -> None:
        """Remove several flats; nothing is removed if any id is unknown."""
        missing = [fid for fid in flat_ids if fid not in self.flats]
        if missing:
            raise EntityNotFoundError(f"Flats not found: {', '.join(missing)}")

        unique_ids = list(dict.fromkeys(flat_ids))
        projects = {self.flats[fid].project_id for fid in unique_ids}
        previous = dict(self.flats)
        for fid in unique_ids:
            del self.flats[fid]
        if projects:
            self._persist(sorted(projects), previous)

    def summary(self) -> dict[str, int]:
        """Return flat counts per project."""
        counts: dict[str, int] = {}
        for flat in self.flats.values():
            counts[flat.project_id] = counts.get(flat.project_id, 0) + 1
        return counts

    def _get(self, flat_id: FlatId | None) -> FlatRecord:
        if flat_id is None or flat_id not in self.flats:
            raise EntityNotFoundError(f"Flat {flat_id} not found")
        return self.flats[flat_id]

    def _persist(self, project_ids: list[str], previous: dict[FlatId, FlatRecord]) -> None:
        try:
            self._changed(project_ids)
        except StoreError:
            self.flats = previous
            raise

    def _changed(self, project_ids: list[str]) -> None:
        """Hook called after a mutation; subclasses persist here."""
