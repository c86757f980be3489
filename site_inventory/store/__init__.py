"""Flat store collaborators."""

from site_inventory.store.base import FlatStore
from site_inventory.store.json_file import JsonFileFlatStore
from site_inventory.store.memory import InMemoryFlatStore

__all__ = ["FlatStore", "InMemoryFlatStore", "JsonFileFlatStore"]
