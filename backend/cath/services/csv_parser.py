# cath/services/csv_parser.py

"""
Locations reference data CSV parser.
"""
import csv
import io
from dataclasses import dataclass, field
from typing import Any, Dict, List

REQUIRED_COLUMNS = [
    "LOCATION_ID",
    "LOCATION_NAME",
    "WELSH_LOCATION_NAME",
    "EMAIL",
    "CONTACT_NO",
    "SUB_JURISDICTION_NAME",
    "REGION_NAME",
]


@dataclass
class ParseResult:
    success: bool
    data: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def _split_multi(value: str) -> List[str]:
    return [part.strip() for part in (value or "").split(";") if part.strip()]


def parse_csv(buffer: bytes) -> ParseResult:
    text = buffer.decode("utf-8-sig", errors="replace")
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return ParseResult(success=False, errors=["CSV file is empty"])

    reader = csv.DictReader(io.StringIO("\n".join(lines)))
    headers = [h.strip() for h in (reader.fieldnames or [])]
    missing = [c for c in REQUIRED_COLUMNS if c not in headers]
    if missing:
        return ParseResult(success=False, errors=[f"Missing required columns: {', '.join(missing)}"])

    data: List[Dict[str, Any]] = []
    errors: List[str] = []

    for row_number, raw in enumerate(reader, start=1):
        row = {(k or "").strip(): (v or "").strip() for k, v in raw.items() if k is not None}
        location_id = row.get("LOCATION_ID", "")
        try:
            parsed_id = int(location_id)
        except ValueError:
            errors.append(f"Row {row_number}: LOCATION_ID must be a valid integer")
            continue

        data.append({
            "locationId": parsed_id,
            "locationName": row.get("LOCATION_NAME", ""),
            "welshLocationName": row.get("WELSH_LOCATION_NAME", ""),
            "email": row.get("EMAIL", ""),
            "contactNo": row.get("CONTACT_NO", ""),
            "subJurisdictionNames": _split_multi(row.get("SUB_JURISDICTION_NAME", "")),
            "regionNames": _split_multi(row.get("REGION_NAME", "")),
        })

    if errors:
        return ParseResult(success=False, data=data, errors=errors)
    return ParseResult(success=True, data=data)
