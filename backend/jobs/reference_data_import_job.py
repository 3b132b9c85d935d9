from __future__ import annotations

import argparse
import sys
from pathlib import Path

from cath.core.logger import logger
from cath.db.database import SessionLocal
from cath.services.csv_parser import parse_csv
from cath.services.reference_data_service import upsert_locations
from cath.services.reference_data_validation import validate_location_data


def run_reference_data_import(path: Path, dry_run: bool = False) -> dict:
    """
    Parse, validate and (unless dry_run) upsert a locations CSV.
    Returns {"success", "errors", "created", "updated", "rows"}.
    """
    result = parse_csv(path.read_bytes())
    if not result.success:
        return {"success": False, "errors": result.errors, "created": 0, "updated": 0, "rows": len(result.data)}

    db = SessionLocal()
    try:
        errors = [e["text"] for e in validate_location_data(db, result.data)]
        if errors:
            return {"success": False, "errors": errors, "created": 0, "updated": 0, "rows": len(result.data)}

        if dry_run:
            logger.info("Reference data dry run: %d rows valid", len(result.data))
            return {"success": True, "errors": [], "created": 0, "updated": 0, "rows": len(result.data)}

        counts = upsert_locations(db, result.data)
        return {"success": True, "errors": [], "rows": len(result.data), **counts}
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import locations reference data from a CSV file")
    parser.add_argument("csv_file", type=Path, help="Path to the locations CSV")
    parser.add_argument("--dry-run", action="store_true", help="Validate only; do not write")
    args = parser.parse_args(argv)

    if not args.csv_file.is_file():
        parser.error(f"{args.csv_file} does not exist")

    summary = run_reference_data_import(args.csv_file, dry_run=args.dry_run)
    for error in summary["errors"]:
        print(error, file=sys.stderr)
    print(summary)
    return 0 if summary["success"] else 1


if __name__ == "__main__":
    sys.exit(main())
