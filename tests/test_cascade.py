"""Tests for cascade deletion of buildings and floors."""

from unittest.mock import MagicMock

import pytest

from site_inventory.cascade import CascadeDeleter, resolve_targets
from site_inventory.exceptions import (
    ConfigurationError,
    ConfirmationRejected,
    EntityNotFoundError,
    InvalidNavigationError,
)
from site_inventory.store import InMemoryFlatStore


class TestResolveTargets:
    """Tests for resolve_targets."""

    def test_floor_only(self, populated_store: InMemoryFlatStore, project_id: str) -> None:
        flats = populated_store.list_flats(project_id)

        ids = resolve_targets(flats, ["A"], "1")

        removed = [f for f in flats if f.flat_id in ids]
        assert sorted(f.flat_number for f in removed) == ["101", "102"]
        assert {f.block for f in removed} == {"A"}

    def test_building(self, populated_store: InMemoryFlatStore, project_id: str) -> None:
        flats = populated_store.list_flats(project_id)

        ids = resolve_targets(flats, [], "B")

        assert len(ids) == 4

    def test_empty_folder(self, populated_store: InMemoryFlatStore, project_id: str) -> None:
        assert resolve_targets(populated_store.list_flats(project_id), [], "Z") == []

    def test_flat_level_is_not_a_folder(self) -> None:
        with pytest.raises(InvalidNavigationError):
            resolve_targets([], ["A", "1"], "101")


class TestCascadeDeleter:
    """Tests for CascadeDeleter."""

    def test_deletes_floor(
        self, populated_store: InMemoryFlatStore, project_id: str, delete_token: str
    ) -> None:
        deleter = CascadeDeleter(populated_store, delete_token)
        flats = populated_store.list_flats(project_id)

        result = deleter.delete_folder(flats, ["A"], "1", delete_token)

        assert result.target == ["A", "1"]
        assert len(result.flat_ids) == 2
        remaining = {f.position for f in populated_store.list_flats(project_id)}
        assert ("A", "2", "201") in remaining
        assert ("A", "2", "202") in remaining
        assert not any(p[:2] == ("A", "1") for p in remaining)
        assert len(remaining) == 6

    def test_deletes_building(
        self, populated_store: InMemoryFlatStore, project_id: str, delete_token: str
    ) -> None:
        deleter = CascadeDeleter(populated_store, delete_token)

        deleter.delete_folder(populated_store.list_flats(project_id), [], "A", delete_token)

        assert {f.block for f in populated_store.list_flats(project_id)} == {"B"}

    @pytest.mark.parametrize("token", ["wrong", "", None, "TEST-DELETE-TOKEN"])
    def test_wrong_token_never_deletes(self, token: str | None, delete_token: str) -> None:
        store = MagicMock()
        deleter = CascadeDeleter(store, delete_token)

        with pytest.raises(ConfirmationRejected):
            deleter.delete_folder([], [], "A", token)

        store.delete_flats.assert_not_called()

    def test_unconfigured_token(self) -> None:
        store = MagicMock()
        deleter = CascadeDeleter(store, None)

        with pytest.raises(ConfigurationError):
            deleter.delete_folder([], [], "A", "anything")

        store.delete_flats.assert_not_called()

    def test_empty_folder_is_noop(self, delete_token: str) -> None:
        store = MagicMock()
        deleter = CascadeDeleter(store, delete_token)

        result = deleter.delete_folder([], [], "A", delete_token)

        assert result.flat_ids == []
        store.delete_flats.assert_not_called()

    def test_store_failure_deletes_nothing(
        self, populated_store: InMemoryFlatStore, project_id: str, delete_token: str
    ) -> None:
        flats = populated_store.list_flats(project_id)
        populated_store.delete_flat(flats[0].flat_id)
        deleter = CascadeDeleter(populated_store, delete_token)

        with pytest.raises(EntityNotFoundError):
            deleter.delete_folder(flats, [], "A", delete_token)

        assert len(populated_store.list_flats(project_id)) == 7
