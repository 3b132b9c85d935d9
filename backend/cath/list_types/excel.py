"""
Generic Excel (.xlsx) to JSON conversion for non-strategic list types.

Each list type describes its columns as FieldConfig entries; rows are mapped
to dicts keyed by field_name. Any failure raises ValueError with a message
that is shown to the uploader as-is.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from io import BytesIO
from typing import Any, Callable, Dict, List, Optional
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from cath.utils.validators import parse_date

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
DDMMYYYY_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")

CellValidator = Callable[[str, int], None]


@dataclass
class FieldConfig:
    header: str
    field_name: str
    required: bool = True
    validators: List[CellValidator] = field(default_factory=list)


def validate_no_html_tags(field_label: str) -> CellValidator:
    def _validate(value: str, row_number: int) -> None:
        if HTML_TAG_PATTERN.search(value):
            raise ValueError(
                f"Invalid content in '{field_label}' in row {row_number}: HTML tags are not allowed"
            )
    return _validate


def validate_date_format(pattern: re.Pattern = DDMMYYYY_PATTERN,
                         fmt: str = "dd/MM/yyyy (e.g., 02/01/2025)") -> CellValidator:
    def _validate(value: str, row_number: int) -> None:
        if not pattern.match(value):
            raise ValueError(f"Invalid date format '{value}' in row {row_number}. Expected format: {fmt}")
        day, month, year = value.split("/")
        if parse_date(day, month, year) is None:
            raise ValueError(f"Invalid date '{value}' in row {row_number}. Date does not exist in calendar")
    return _validate


def _cell_to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _read_rows(buffer: bytes) -> List[tuple]:
    try:
        workbook = load_workbook(BytesIO(buffer), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError, OSError) as exc:
        raise ValueError("Invalid Excel file format") from exc

    try:
        if not workbook.worksheets:
            raise ValueError("Excel file must contain at least one worksheet")
        return list(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()


def convert_excel_to_json(
    buffer: bytes,
    fields: List[FieldConfig],
    min_rows: int = 1,
    min_rows_message: Optional[str] = None,
) -> List[Dict[str, str]]:
    rows = _read_rows(buffer)
    header_row = [_cell_to_text(h).lower() for h in rows[0]] if rows else []

    # (sheet row number, cells); row 1 is the header
    data_rows = [
        (index, row)
        for index, row in enumerate(rows[1:], start=2)
        if any(_cell_to_text(v) for v in row)
    ]

    if len(data_rows) < min_rows:
        raise ValueError(
            min_rows_message
            or f"Excel file must contain at least {min_rows} data row{'s' if min_rows > 1 else ''}"
        )

    missing = [f.header for f in fields if f.header.lower() not in header_row]
    if missing:
        raise ValueError(
            f"Excel file must contain columns: {', '.join(f.header for f in fields)}. "
            f"Missing: {', '.join(missing)}"
        )

    columns = {f.field_name: header_row.index(f.header.lower()) for f in fields}
    results: List[Dict[str, str]] = []

    for row_number, row in data_rows:
        try:
            results.append(_parse_row(row, row_number, fields, columns))
        except ValueError as exc:
            raise ValueError(f"Error in row {row_number}: {exc}") from exc

    return results


def _parse_row(row: tuple, row_number: int, fields: List[FieldConfig],
               columns: Dict[str, int]) -> Dict[str, str]:
    result: Dict[str, str] = {}
    for f in fields:
        index = columns[f.field_name]
        value = _cell_to_text(row[index]) if index < len(row) else ""

        if f.required and not value:
            raise ValueError(f"Missing required field '{f.header}' in row {row_number}")

        if value:
            for validator in f.validators:
                validator(value, row_number)

        result[f.field_name] = value
    return result
