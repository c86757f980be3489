"""Contract for the external flat store."""

from typing import Protocol, Sequence

from site_inventory.models import FlatId, FlatRecord


class FlatStore(Protocol):
    """Key-value persistence for flat records.

    Every method raises ``StoreError`` (or ``EntityNotFoundError``) on
    failure. ``delete_flats`` is all-or-nothing: either every id is removed
    or none is.
    """

    def list_flats(self, project_id: str) -> list[FlatRecord]: ...

    def create_flat(self, flat: FlatRecord) -> FlatRecord: ...

    def update_flat(self, flat: FlatRecord) -> FlatRecord: ...

    def delete_flat(self, flat_id: FlatId) -> None: ...

    def delete_flats(self, flat_ids: Sequence[FlatId]) -> None: ...
