"""Inventory workspace: store, capabilities, navigation and ledger edits."""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from site_inventory import ledger
from site_inventory.cascade import CascadeDeleter, CascadeResult
from site_inventory.config import InventoryConfig
from site_inventory.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    PartialBatchFailure,
    StoreError,
    ValidationError,
)
from site_inventory.generators.layout import BatchResult, BuildingLayout, InventoryGenerator
from site_inventory.hierarchy import FolderItem, Item
from site_inventory.ledger import LedgerSection, LedgerSummary
from site_inventory.logging import flat_context
from site_inventory.models import (
    AttachmentRef,
    Capabilities,
    FlatId,
    FlatRecord,
    PaymentMode,
    ViewMode,
)
from site_inventory.navigator import Navigator
from site_inventory.store.base import FlatStore

logger = logging.getLogger(__name__)


@dataclass
class TentativeUpdate:
    """A local flat change waiting for the store to accept it.

    ``apply`` puts ``after`` in the cache; the store write then either
    ``confirm``s with the stored record or ``revert``s to ``before``.
    """

    cache: dict[FlatId, FlatRecord]
    before: FlatRecord
    after: FlatRecord

    def apply(self) -> None:
        self.cache[self.before.flat_id] = self.after

    def confirm(self, stored: FlatRecord) -> None:
        self.cache[self.before.flat_id] = stored

    def revert(self) -> None:
        self.cache[self.before.flat_id] = self.before


class InventoryService:
    """Unit inventory for one project, as seen by one user.

    Parameters
    ----------
    store : FlatStore
        Persistence collaborator.
    capabilities : Capabilities
        What the current user may do; resolved once by the caller.
    config : InventoryConfig | None
        Project id, setup defaults and the folder deletion token.
    project_id : str | None
        Overrides ``config.project_id``.

    Raises
    ------
    AuthorizationError
        If the user may not view the inventory at all.
    """

    def __init__(
        self,
        store: FlatStore,
        capabilities: Capabilities,
        config: InventoryConfig | None = None,
        project_id: str | None = None,
    ) -> None:
        if not capabilities.can_view:
            raise AuthorizationError("You do not have permission to view the Inventory module.")
        self.store = store
        self.capabilities = capabilities
        self.config = config or InventoryConfig()
        self.project_id = project_id or self.config.project_id
        self.generator = InventoryGenerator(self.config.defaults)
        self.deleter = CascadeDeleter(store, self.config.delete_token)
        self._flats: dict[FlatId, FlatRecord] = {}
        self.refresh()
        self.navigator = Navigator.initial(self.flats)

    @property
    def flats(self) -> list[FlatRecord]:
        return list(self._flats.values())

    def refresh(self) -> None:
        """Reload all flats of the project from the store."""
        self._flats = {
            flat.flat_id: flat
            for flat in self.store.list_flats(self.project_id)
            if flat.flat_id is not None
        }

    def get(self, flat_id: FlatId) -> FlatRecord:
        try:
            return self._flats[flat_id]
        except KeyError:
            raise EntityNotFoundError(f"Flat {flat_id} not found") from None

    # --- Navigation ---

    @property
    def mode(self) -> ViewMode:
        return self.navigator.mode

    @property
    def title(self) -> str:
        return self.navigator.title(self.flats)

    def items(self) -> list[Item]:
        return self.navigator.items(self.flats)

    def open(self, item: Item) -> None:
        self.navigator.select(item)

    def back(self) -> None:
        self.navigator.back()

    def current_flat(self) -> FlatRecord | None:
        """The flat open in the detail view.

        Falls back to the folder view if the flat has been deleted.
        """
        flat = self.navigator.resolve_flat(self.flats)
        if flat is None and self.navigator.mode == ViewMode.FLAT_DETAIL:
            self.navigator.back()
        return flat

    # --- Setup ---

    def start_setup(self) -> None:
        self._require(self.capabilities.can_enter, "run a new setup")
        self.navigator.start_setup()

    def cancel_setup(self) -> None:
        self.navigator.finish_setup()

    def prefill(self, buildings: str | Iterable[str]) -> list[BuildingLayout]:
        """Setup step 1: parse building names and pre-fill default counts."""
        self._require(self.capabilities.can_enter, "run a new setup")
        return self.generator.prefill(buildings)

    def generate(
        self,
        buildings: str | Iterable[str],
        floors: Mapping[str, object],
        flats_per_floor: Mapping[str, object],
        strict: bool = False,
    ) -> BatchResult:
        """Setup step 2: create the flats for each building.

        Positions already present in the project are skipped. When some
        flats fail to save, the result lists them per building; with
        ``strict`` a ``PartialBatchFailure`` is raised instead. The setup
        view is left only when every flat was saved.
        """
        self._require(self.capabilities.can_enter, "generate inventory")
        layouts = self.generator.layouts(buildings, floors, flats_per_floor)
        return self.generate_layouts(layouts, strict=strict)

    def generate_layouts(self, layouts: list[BuildingLayout], strict: bool = False) -> BatchResult:
        self._require(self.capabilities.can_enter, "generate inventory")
        result = self.generator.persist(layouts, self.store, self.project_id, self.flats)
        for flat in result.created:
            self._flats[flat.flat_id] = flat

        if result.ok and self.navigator.mode == ViewMode.SETUP:
            self.navigator.finish_setup()
        if strict and not result.ok:
            raise PartialBatchFailure(result)
        return result

    # --- Ledger ---

    def summary(self, flat_id: FlatId) -> LedgerSummary:
        return ledger.summarize(self.get(flat_id))

    def add_payment(
        self,
        flat_id: FlatId,
        amount: Any,
        paid_on: Any,
        mode: PaymentMode | str = PaymentMode.CASH,
    ) -> FlatRecord:
        flat = self._for_ledger(flat_id, LedgerSection.PAYMENTS)
        return self._commit(flat, ledger.append_payment(flat, amount, paid_on, mode))

    def add_extra_work(
        self,
        flat_id: FlatId,
        description: Any,
        cost: Any,
        proof: AttachmentRef = None,
    ) -> FlatRecord:
        flat = self._for_ledger(flat_id, LedgerSection.EXTRA_WORK)
        return self._commit(flat, ledger.append_extra_work(flat, description, cost, proof))

    def attach_proof(self, flat_id: FlatId, index: int, proof: AttachmentRef) -> FlatRecord:
        flat = self._for_ledger(flat_id, LedgerSection.EXTRA_WORK)
        return self._commit(flat, ledger.attach_proof(flat, index, proof))

    def add_document(self, flat_id: FlatId, document: AttachmentRef) -> FlatRecord:
        flat = self._for_ledger(flat_id, LedgerSection.DOCUMENTS)
        return self._commit(flat, ledger.add_document(flat, document))

    def change_status(self, flat_id: FlatId, status: Any) -> FlatRecord:
        return self._edit(flat_id, lambda flat: ledger.change_status(flat, status))

    def update_details(self, flat_id: FlatId, **changes: Any) -> FlatRecord:
        return self._edit(flat_id, lambda flat: ledger.update_details(flat, **changes))

    # --- Deletion ---

    def delete_flat(self, flat_id: FlatId) -> None:
        flat = self.get(flat_id)
        self._require(self.capabilities.can_modify(flat.created_at), "delete this flat")
        self.store.delete_flat(flat_id)
        del self._flats[flat_id]
        logger.info("Deleted flat %s", flat.label, extra=flat_context(flat))
        if self.navigator.selected_flat_id == flat_id:
            self.navigator.back()

    def delete_folder(self, folder: FolderItem | str, token: str | None) -> CascadeResult:
        """Delete a building (at the root) or a floor (inside a building)."""
        self._require(self.capabilities.can_edit_delete, "delete folders")
        if self.navigator.mode != ViewMode.FOLDERS:
            raise ValidationError("Folders can only be deleted from the folder view")
        key = folder.key if isinstance(folder, FolderItem) else folder
        result = self.deleter.delete_folder(self.flats, self.navigator.path, key, token)
        for flat_id in result.flat_ids:
            self._flats.pop(flat_id, None)
        return result

    # --- Internals ---

    def _require(self, allowed: bool, action: str) -> None:
        if not allowed:
            raise AuthorizationError(f"You do not have permission to {action}.")

    def _for_ledger(self, flat_id: FlatId, section: LedgerSection) -> FlatRecord:
        flat = self._editable(flat_id, "edit the ledger")
        if section not in ledger.salient_sections(flat.status):
            raise ValidationError(
                f"Flat {flat.label} is {flat.status.value}; "
                f"{section.value.replace('_', ' ')} is recorded on sold flats",
                field="status",
            )
        return flat

    def _edit(self, flat_id: FlatId, change: Callable[[FlatRecord], FlatRecord]) -> FlatRecord:
        flat = self._editable(flat_id, "edit this flat")
        return self._commit(flat, change(flat))

    def _editable(self, flat_id: FlatId, action: str) -> FlatRecord:
        """Get a flat the user may change; data-entry users only within the edit window."""
        flat = self.get(flat_id)
        self._require(
            self.capabilities.can_enter and self.capabilities.can_modify(flat.created_at),
            action,
        )
        return flat

    def _commit(self, before: FlatRecord, after: FlatRecord) -> FlatRecord:
        update = TentativeUpdate(self._flats, before, after)
        update.apply()
        try:
            stored = self.store.update_flat(after)
        except StoreError:
            update.revert()
            logger.error(
                "Failed to save flat %s; local changes reverted",
                before.label,
                extra=flat_context(before),
            )
            raise
        update.confirm(stored)
        return stored
