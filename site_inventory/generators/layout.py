"""Flat generation from a compact building layout."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

from site_inventory.config import SetupDefaults
from site_inventory.exceptions import GenerationError, StoreError
from site_inventory.logging import flat_context
from site_inventory.models import FlatRecord, FlatStatus
from site_inventory.models.money import MAX_COUNT, parse_amount, to_count
from site_inventory.store.base import FlatStore

logger = logging.getLogger(__name__)

# Flat numbers pad the sequence to two digits; at 100+ flats per floor the
# numbers stay unique within the floor but stop sorting cleanly and can read
# like another floor's numbers ("1101" is floor 1 #101 and floor 11 #01).
MAX_FLATS_PER_FLOOR = 99

Position = tuple[str, str, str]


def parse_building_names(buildings: str | Iterable[str]) -> list[str]:
    """Split a comma-separated building list.

    Entries are trimmed, blanks dropped and repeats collapsed (first wins).
    """
    if isinstance(buildings, str):
        buildings = buildings.split(",")
    names = (str(b).strip() for b in buildings)
    return list(dict.fromkeys(n for n in names if n))


def flat_number(floor: int, seq: int) -> str:
    """Compose a flat number: floor 3, 2nd flat -> ``"302"``."""
    return f"{floor}{seq:02d}"


@dataclass
class BuildingLayout:
    """Floors and flats per floor for one building."""

    block: str
    floors: int = 0
    flats_per_floor: int = 0

    @property
    def flat_count(self) -> int:
        return self.floors * self.flats_per_floor


@dataclass
class BuildingFailure:
    """Flats of one building the store refused to create."""

    block: str
    attempted: int
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class BatchResult:
    """Outcome of persisting a generation batch."""

    created: list[FlatRecord] = field(default_factory=list)
    skipped: list[Position] = field(default_factory=list)
    failures: list[BuildingFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def created_for(self, block: str) -> int:
        """Count created flats in a building."""
        return sum(1 for flat in self.created if flat.block == block)


class InventoryGenerator:
    """Materialize Building > Floor > Flat records from building layouts.

    Parameters
    ----------
    defaults : SetupDefaults | None
        Values used to pre-fill layouts and the flat type of new records.
    """

    def __init__(self, defaults: SetupDefaults | None = None) -> None:
        self.defaults = defaults or SetupDefaults()

    def prefill(self, buildings: str | Iterable[str]) -> list[BuildingLayout]:
        """Parse building names and pre-fill each with the default counts.

        Raises
        ------
        GenerationError
            If no building name remains after trimming.
        """
        names = self._names(buildings)
        return [
            BuildingLayout(name, self.defaults.floors, self.defaults.flats_per_floor)
            for name in names
        ]

    def layouts(
        self,
        buildings: str | Iterable[str],
        floors: Mapping[str, object],
        flats_per_floor: Mapping[str, object],
    ) -> list[BuildingLayout]:
        """Build layouts from per-building counts.

        Missing, non-numeric or out-of-range counts become 0, so that
        building yields no flats while the rest of the request still goes
        through.
        """
        layouts = []
        for name in self._names(buildings):
            for label, counts in (("floors", floors), ("flats per floor", flats_per_floor)):
                requested = parse_amount(counts.get(name))
                if requested is not None and requested > MAX_COUNT:
                    logger.warning(
                        "Tower %s asks for %s %s; counts above %d are treated as 0",
                        name,
                        requested,
                        label,
                        MAX_COUNT,
                    )
            layout = BuildingLayout(
                block=name,
                floors=to_count(floors.get(name)),
                flats_per_floor=to_count(flats_per_floor.get(name)),
            )
            if layout.flats_per_floor > MAX_FLATS_PER_FLOOR:
                logger.warning(
                    "Tower %s has %d flats per floor; flat numbers past %d "
                    "overlap other floors' numbering",
                    name,
                    layout.flats_per_floor,
                    MAX_FLATS_PER_FLOOR,
                )
            layouts.append(layout)
        return layouts

    def generate_for_building(
        self, layout: BuildingLayout, project_id: str = ""
    ) -> Iterator[FlatRecord]:
        """Yield the flats of one building, floor by floor."""
        for floor in range(1, layout.floors + 1):
            for seq in range(1, layout.flats_per_floor + 1):
                yield FlatRecord(
                    block=layout.block,
                    floor=str(floor),
                    flat_number=flat_number(floor, seq),
                    flat_type=self.defaults.flat_type,
                    status=FlatStatus.AVAILABLE,
                    project_id=project_id,
                )

    def plan(
        self,
        layouts: Iterable[BuildingLayout],
        project_id: str = "",
        existing: Iterable[FlatRecord] = (),
    ) -> tuple[list[FlatRecord], list[Position]]:
        """Generate all flats, leaving out positions that already exist.

        Returns
        -------
        tuple[list[FlatRecord], list[Position]]
            New flats, and the positions skipped because a flat is already
            there.
        """
        taken = {flat.position for flat in existing}
        new_flats: list[FlatRecord] = []
        skipped: list[Position] = []
        for layout in layouts:
            for flat in self.generate_for_building(layout, project_id):
                if flat.position in taken:
                    skipped.append(flat.position)
                    continue
                taken.add(flat.position)
                new_flats.append(flat)
        return new_flats, skipped

    def persist(
        self,
        layouts: list[BuildingLayout],
        store: FlatStore,
        project_id: str,
        existing: Iterable[FlatRecord] = (),
    ) -> BatchResult:
        """Create every planned flat through the store, one call per flat.

        A failed ``create_flat`` does not stop the batch; failures are
        counted per building in the result and nothing already created is
        rolled back.
        """
        new_flats, skipped = self.plan(layouts, project_id, existing)
        result = BatchResult(skipped=skipped)
        failures: dict[str, BuildingFailure] = {}

        for flat in new_flats:
            try:
                result.created.append(store.create_flat(flat))
            except StoreError as e:
                failure = failures.get(flat.block)
                if failure is None:
                    attempted = sum(1 for f in new_flats if f.block == flat.block)
                    failure = failures[flat.block] = BuildingFailure(flat.block, attempted)
                failure.failed += 1
                failure.errors.append(f"{flat.label}: {e}")
                logger.debug(
                    "Could not create flat %s: %s", flat.label, e, extra=flat_context(flat)
                )

        result.failures = list(failures.values())

        logger.info(
            "Generated %d flats for project %s (%d skipped, %d failed)",
            len(result.created),
            project_id,
            len(skipped),
            sum(f.failed for f in result.failures),
            extra={"project_id": project_id, "flat_count": len(result.created)},
        )
        for failure in result.failures:
            logger.error(
                "Tower %s: %d of %d flats failed to save",
                failure.block,
                failure.failed,
                failure.attempted,
                extra={"project_id": project_id, "target": failure.block},
            )
        return result

    def _names(self, buildings: str | Iterable[str]) -> list[str]:
        names = parse_building_names(buildings)
        if not names:
            raise GenerationError("Please enter at least one building name")
        return names
