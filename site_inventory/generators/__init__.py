"""Flat generators."""

from site_inventory.generators.layout import (
    BatchResult,
    BuildingFailure,
    BuildingLayout,
    InventoryGenerator,
    flat_number,
    parse_building_names,
)
from site_inventory.generators.sample import SampleSalesGenerator

__all__ = [
    "BatchResult",
    "BuildingFailure",
    "BuildingLayout",
    "InventoryGenerator",
    "SampleSalesGenerator",
    "flat_number",
    "parse_building_names",
]
