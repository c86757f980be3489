"""Tests for the navigation state machine."""

import pytest

from site_inventory.exceptions import InvalidNavigationError
from site_inventory.hierarchy import FlatItem, FolderItem
from site_inventory.models import FlatId, FlatRecord, ViewMode
from site_inventory.navigator import Navigator


@pytest.fixture
def flats() -> list[FlatRecord]:
    return [
        FlatRecord(flat_id=FlatId(f"id-{b}{n}"), block=b, floor=n[0], flat_number=n)
        for b in ("A", "B")
        for n in ("101", "102", "201", "202")
    ]


class TestInitialState:
    """Tests for the starting mode."""

    def test_empty_project_starts_in_setup(self) -> None:
        assert Navigator.initial([]).mode == ViewMode.SETUP

    def test_existing_flats_start_at_root(self, flats: list[FlatRecord]) -> None:
        nav = Navigator.initial(flats)

        assert nav.mode == ViewMode.FOLDERS
        assert nav.path == []
        assert nav.title(flats) == "Inventory Overview"
        assert not nav.can_go_back


class TestTransitions:
    """Tests for select/back/setup transitions."""

    def test_drill_down_to_flat(self, flats: list[FlatRecord]) -> None:
        nav = Navigator.initial(flats)

        nav.select(FolderItem("A", "Tower A"))
        nav.select(FolderItem("1", "Floor 1"))
        items = nav.items(flats)

        assert nav.path == ["A", "1"]
        assert nav.title(flats) == "A > 1"
        assert [item.label for item in items] == ["101", "102"]

        nav.select(items[1])

        assert nav.mode == ViewMode.FLAT_DETAIL
        assert nav.selected_flat_id == "id-A102"
        assert nav.resolve_flat(flats).flat_number == "102"
        assert nav.title(flats) == "Flat A-102"
        assert nav.items(flats) == []

    def test_back_from_detail_keeps_path(self, flats: list[FlatRecord]) -> None:
        nav = Navigator(path=["A", "1"])
        nav.select(FlatItem(flats[0]))

        nav.back()

        assert nav.mode == ViewMode.FOLDERS
        assert nav.path == ["A", "1"]
        assert nav.selected_flat_id is None

    def test_back_pops_one_level(self) -> None:
        nav = Navigator(path=["A", "1"])

        nav.back()
        assert nav.path == ["A"]
        nav.back()
        assert nav.path == []
        nav.back()
        assert nav.path == []

    def test_cannot_open_folder_below_floor(self) -> None:
        nav = Navigator(path=["A", "1"])

        with pytest.raises(InvalidNavigationError):
            nav.select(FolderItem("x", "x"))
        assert nav.path == ["A", "1"]

    def test_unsaved_flat_cannot_be_opened(self) -> None:
        nav = Navigator(path=["A", "1"])

        with pytest.raises(InvalidNavigationError):
            nav.select(FlatItem(FlatRecord(block="A", floor="1", flat_number="101")))

    def test_setup_round_trip(self, flats: list[FlatRecord]) -> None:
        nav = Navigator(path=["A"])

        nav.start_setup()
        assert nav.mode == ViewMode.SETUP
        assert nav.title() == "Project Setup"
        assert nav.items(flats) == []
        assert not nav.can_go_back

        nav.finish_setup()
        assert nav.mode == ViewMode.FOLDERS

    def test_select_outside_folders_rejected(self, flats: list[FlatRecord]) -> None:
        nav = Navigator.initial([])

        with pytest.raises(InvalidNavigationError):
            nav.select(FolderItem("A", "Tower A"))

    def test_finish_setup_outside_setup_rejected(self) -> None:
        with pytest.raises(InvalidNavigationError):
            Navigator().finish_setup()

    def test_deleted_selection_resolves_to_none(self, flats: list[FlatRecord]) -> None:
        nav = Navigator(path=["A", "1"])
        nav.select(FlatItem(flats[0]))

        assert nav.resolve_flat(flats[1:]) is None
        assert nav.title(flats[1:]) == "Flat"
