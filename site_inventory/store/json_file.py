"""JSON file store: one document per project."""

import json
import logging
import os
from pathlib import Path

from site_inventory.config import StorageConfig
from site_inventory.exceptions import StoreError
from site_inventory.serialization import flat_from_dict, flat_to_dict
from site_inventory.store.memory import InMemoryFlatStore

logger = logging.getLogger(__name__)


class JsonFileFlatStore(InMemoryFlatStore):
    """Flat store persisted as ``<data_dir>/<project_id>.json`` files.

    All project files are loaded on construction; each mutation rewrites
    the files of the projects it touched. Files are written to a temporary
    sibling first and swapped in only once every touched project has been
    written, so a failed write leaves the previous files in place.
    """

    def __init__(self, config: StorageConfig | None = None) -> None:
        super().__init__()
        self.config = config or StorageConfig()
        try:
            self.config.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create data dir {self.config.data_dir}: {e}") from e
        for path in sorted(self.config.data_dir.glob("*.json")):
            self._load(path)

    def _load(self, path: Path) -> None:
        try:
            with open(path, encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read {path}: {e}") from e

        for data in records:
            data.setdefault("project_id", path.stem)
            flat = flat_from_dict(data)
            if flat.flat_id is None:
                raise StoreError(f"Record without id in {path}")
            self.flats[flat.flat_id] = flat
        logger.debug("Loaded %d flats from %s", len(records), path)

    def _changed(self, project_ids: list[str]) -> None:
        written: list[tuple[Path, Path]] = []
        try:
            for project_id in project_ids:
                path = self.config.project_file(project_id)
                tmp_path = path.with_name(path.name + ".tmp")
                written.append((tmp_path, path))
                self._write(tmp_path, project_id)
            for tmp_path, path in written:
                os.replace(tmp_path, path)
        except OSError as e:
            for tmp_path, _ in written:
                tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Cannot write project files {', '.join(project_ids)}: {e}") from e
        logger.debug("Saved projects %s", ", ".join(project_ids))

    def _write(self, path: Path, project_id: str) -> None:
        data = [
            flat_to_dict(flat)
            for flat in self.flats.values()
            if flat.project_id == project_id
        ]
        with open(path, "w", encoding="utf-8") as f:
            if self.config.pretty_json:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            else:
                json.dump(data, f, ensure_ascii=False, default=str)
