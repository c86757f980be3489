"""Building > Floor > Flat folder tree, derived from the flat list.

Nothing here is cached: every listing is recomputed from the flats passed
in, so adding or removing flats never leaves a stale tree behind.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from site_inventory.exceptions import InvalidNavigationError
from site_inventory.models import FlatRecord, FlatStatus, ItemKind
from site_inventory.models.money import parse_amount

MAX_DEPTH = 2

_DIGITS = re.compile(r"(\d+)")


@dataclass(frozen=True)
class FolderItem:
    """A building or floor folder."""

    key: str
    label: str

    @property
    def kind(self) -> ItemKind:
        return ItemKind.FOLDER


@dataclass(frozen=True)
class FlatItem:
    """A flat leaf inside a floor folder."""

    flat: FlatRecord

    @property
    def kind(self) -> ItemKind:
        return ItemKind.FLAT

    @property
    def key(self) -> str:
        return self.flat.flat_number

    @property
    def label(self) -> str:
        return self.flat.flat_number

    @property
    def status(self) -> FlatStatus:
        return self.flat.status


Item = Union[FolderItem, FlatItem]


def floor_key(floor: object) -> str:
    """Normalize a floor label so ``"01"``, ``1`` and ``"1"`` match."""
    text = str(floor).strip()
    value = parse_amount(text)
    if value is not None and value == value.to_integral_value():
        return str(int(value))
    return text


def natural_key(text: str) -> tuple:
    """Sort key comparing digit runs by value: ``"2"`` < ``"10"``."""
    return tuple(
        (0, int(part), part) if part.isdigit() else (1, 0, part.lower())
        for part in _DIGITS.split(text)
        if part
    )


def _numeric_key(label: str) -> tuple:
    value = parse_amount(label)
    return (0, value, label) if value is not None else (1, 0, label)


def blocks(flats: Iterable[FlatRecord]) -> list[str]:
    """Distinct block names, lexicographically sorted."""
    return sorted({flat.block for flat in flats})


def floors(flats: Iterable[FlatRecord], block: str) -> list[str]:
    """Distinct floors of a block, numerically sorted."""
    found = {floor_key(flat.floor) for flat in flats if flat.block == block}
    return sorted(found, key=_numeric_key)


def flats_under(flats: Iterable[FlatRecord], path: Sequence[str]) -> list[FlatRecord]:
    """All flats below a folder path, in their original order.

    ``[block]`` selects a building and ``[block, floor]`` a floor.
    """
    if not 1 <= len(path) <= MAX_DEPTH:
        raise InvalidNavigationError(f"Not a folder path: {list(path)}")
    block = path[0]
    matches = [flat for flat in flats if flat.block == block]
    if len(path) == MAX_DEPTH:
        floor = floor_key(path[1])
        matches = [flat for flat in matches if floor_key(flat.floor) == floor]
    return matches


def list_items(flats: Sequence[FlatRecord], path: Sequence[str]) -> list[Item]:
    """List what is inside the folder at ``path``.

    Parameters
    ----------
    flats : Sequence[FlatRecord]
        All flats of the active project.
    path : Sequence[str]
        ``[]`` for buildings, ``[block]`` for its floors, ``[block, floor]``
        for its flats.

    Returns
    -------
    list[Item]
        Building folders labelled ``Tower {block}``, floor folders labelled
        ``Floor {floor}``, or flat leaves sorted by flat number.
    """
    if len(path) == 0:
        return [FolderItem(block, f"Tower {block}") for block in blocks(flats)]
    if len(path) == 1:
        return [FolderItem(floor, f"Floor {floor}") for floor in floors(flats, path[0])]
    if len(path) == MAX_DEPTH:
        leaves = sorted(flats_under(flats, path), key=lambda f: natural_key(f.flat_number))
        return [FlatItem(flat) for flat in leaves]
    raise InvalidNavigationError(f"Path too deep: {list(path)}")
