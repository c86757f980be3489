#!/usr/bin/env python3
"""Generate a demo project inventory into a JSON store.

Creates the Building > Floor > Flat structure for the given towers, then
books or sells a share of the flats with sample buyers and payments.
"""

import argparse
import logging
import sys
from collections import Counter
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from site_inventory import ledger
from site_inventory.config import InventoryConfig, StorageConfig
from site_inventory.exceptions import StoreError
from site_inventory.generators import SampleSalesGenerator
from site_inventory.logging import flat_context, setup_logging
from site_inventory.models import Capabilities
from site_inventory.service import InventoryService
from site_inventory.store import JsonFileFlatStore

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--project", default="demo", help="Project id")
    parser.add_argument("--buildings", default="A, B", help="Comma-separated tower names")
    parser.add_argument("--floors", type=int, default=5, help="Floors per tower")
    parser.add_argument("--flats-per-floor", type=int, default=4, help="Flats per floor")
    parser.add_argument("--sold-rate", type=float, default=0.3)
    parser.add_argument("--booked-rate", type=float, default=0.2)
    parser.add_argument("--data-dir", type=Path, default=Path("data"))
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--json-logs", action="store_true", help="Log one JSON object per line")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_logging(args.log_level, "json" if args.json_logs else "standard")

    config = InventoryConfig(
        project_id=args.project,
        storage=StorageConfig(data_dir=args.data_dir, pretty_json=args.pretty),
        seed=args.seed,
    )
    store = JsonFileFlatStore(config.storage)
    service = InventoryService(store, Capabilities.full(), config)

    names = [layout.block for layout in service.prefill(args.buildings)]
    result = service.generate(
        names,
        floors={name: args.floors for name in names},
        flats_per_floor={name: args.flats_per_floor for name in names},
    )
    if not result.ok:
        for failure in result.failures:
            logger.error(
                "Tower %s: %s",
                failure.block,
                "; ".join(failure.errors),
                extra={"project_id": args.project, "target": failure.block},
            )
        return 1

    sample = SampleSalesGenerator(
        seed=config.seed, sold_rate=args.sold_rate, booked_rate=args.booked_rate
    )
    unsaved = 0
    for flat in result.created:
        try:
            store.update_flat(sample.populate(flat))
        except StoreError as e:
            unsaved += 1
            logger.error("Could not save sample sale: %s", e, extra=flat_context(flat))
    service.refresh()

    statuses = Counter(flat.status.value for flat in service.flats)
    pending = sum((ledger.pending_amount(flat) for flat in service.flats), Decimal("0"))
    print(f"Project {args.project}: {len(service.flats)} flats in {config.storage.data_dir}")
    for status, count in sorted(statuses.items()):
        print(f"  {status}: {count}")
    if result.skipped:
        print(f"  skipped (already present): {len(result.skipped)}")
    print(f"  pending balance: {pending:,.2f}")
    if unsaved:
        print(f"  sample sales not saved: {unsaved}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
