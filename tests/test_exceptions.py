"""Tests for custom exception hierarchy."""

from site_inventory.exceptions import (
    AuthorizationError,
    ConfigurationError,
    ConfirmationRejected,
    EntityNotFoundError,
    GenerationError,
    InvalidNavigationError,
    InventoryError,
    PartialBatchFailure,
    StoreError,
    ValidationError,
)
from site_inventory.generators.layout import BatchResult, BuildingFailure


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_inventory_error_is_exception(self) -> None:
        assert isinstance(InventoryError("test"), Exception)

    def test_entity_not_found_is_store_error(self) -> None:
        err = EntityNotFoundError("test")
        assert isinstance(err, StoreError)
        assert isinstance(err, InventoryError)

    def test_all_errors_share_base(self) -> None:
        for cls in (
            GenerationError,
            AuthorizationError,
            StoreError,
            ConfirmationRejected,
            InvalidNavigationError,
            ConfigurationError,
        ):
            assert isinstance(cls("test"), InventoryError)

    def test_validation_error_carries_field(self) -> None:
        err = ValidationError("Please enter amount and date", field="amount")
        assert err.field == "amount"
        assert str(err) == "Please enter amount and date"

    def test_validation_error_field_optional(self) -> None:
        assert ValidationError("bad").field is None

    def test_partial_batch_failure_names_buildings(self) -> None:
        result = BatchResult(failures=[BuildingFailure("B", attempted=4, failed=2)])
        err = PartialBatchFailure(result)

        assert isinstance(err, InventoryError)
        assert err.result is result
        assert "B (2/4)" in str(err)
