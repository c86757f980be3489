"""Configuration management for site-inventory."""

from dataclasses import dataclass, field
from pathlib import Path

from site_inventory.models.enums import FlatType


@dataclass
class SetupDefaults:
    """Values pre-filled for each building in the setup wizard."""

    floors: int = 5
    flats_per_floor: int = 4
    flat_type: FlatType = FlatType.TWO_BHK


@dataclass
class StorageConfig:
    """File-backed store configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    pretty_json: bool = False

    def project_file(self, project_id: str) -> Path:
        """Get the JSON document path for a project."""
        return self.data_dir / f"{project_id}.json"


@dataclass
class InventoryConfig:
    """Main configuration for site-inventory."""

    project_id: str = "default"
    delete_token: str | None = None
    defaults: SetupDefaults = field(default_factory=SetupDefaults)
    edit_window_minutes: int = 30
    storage: StorageConfig = field(default_factory=StorageConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "InventoryConfig":
        """Create config from environment variables."""
        import os

        defaults = SetupDefaults(
            floors=int(os.getenv("INVENTORY_DEFAULT_FLOORS", "5")),
            flats_per_floor=int(os.getenv("INVENTORY_DEFAULT_FLATS_PER_FLOOR", "4")),
            flat_type=FlatType(os.getenv("INVENTORY_DEFAULT_FLAT_TYPE", "2BHK")),
        )

        storage = StorageConfig(
            data_dir=Path(os.getenv("INVENTORY_DATA_DIR", "data")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            project_id=os.getenv("INVENTORY_PROJECT_ID", "default"),
            delete_token=os.getenv("INVENTORY_DELETE_TOKEN") or None,
            defaults=defaults,
            edit_window_minutes=int(os.getenv("INVENTORY_EDIT_WINDOW_MINUTES", "30")),
            storage=storage,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
