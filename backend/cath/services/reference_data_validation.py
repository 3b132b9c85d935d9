# cath/services/reference_data_validation.py

"""
Validation for the reference data admin forms and the locations CSV upload.
Every function returns a list of {text, href} errors.
"""
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from cath.db.models import Location, Region, SubJurisdiction
from cath.services.location_service import (
    get_jurisdiction_by_id,
    jurisdiction_name_exists,
    region_name_exists,
    sub_jurisdiction_name_exists,
)
from cath.utils.validators import contains_html


def _validate_named_entity(db: Session, form: Dict[str, Any], entity: str, exists) -> List[Dict[str, str]]:
    """Shared rules for jurisdiction and region: both names required, no HTML, unique per language."""
    errors = []
    name = str(form.get("name") or "").strip()
    welsh_name = str(form.get("welshName") or "").strip()
    label = entity.capitalize()

    if not name:
        errors.append({"text": f"Enter {entity} name in English", "href": "#name"})
    elif contains_html(name):
        errors.append({"text": f"{label} name (English) contains HTML tags which are not allowed", "href": "#name"})

    if not welsh_name:
        errors.append({"text": f"Enter {entity} name in Welsh", "href": "#welshName"})
    elif contains_html(welsh_name):
        errors.append({
            "text": f"{label} name (Welsh) contains HTML tags which are not allowed",
            "href": "#welshName",
        })

    if errors:
        return errors

    if exists(db, name):
        errors.append({"text": f"{label} '{name}' already exists in the database", "href": "#name"})
    if exists(db, welsh_name, welsh=True):
        errors.append({
            "text": f"Welsh {entity} name '{welsh_name}' already exists in the database",
            "href": "#welshName",
        })
    return errors


def validate_jurisdiction_data(db: Session, form: Dict[str, Any]) -> List[Dict[str, str]]:
    return _validate_named_entity(db, form, "jurisdiction", jurisdiction_name_exists)


def validate_region_data(db: Session, form: Dict[str, Any]) -> List[Dict[str, str]]:
    return _validate_named_entity(db, form, "region", region_name_exists)


def validate_sub_jurisdiction_data(db: Session, form: Dict[str, Any]) -> List[Dict[str, str]]:
    errors = []
    raw_jurisdiction_id = str(form.get("jurisdictionId") or "").strip()
    name = str(form.get("name") or "").strip()
    welsh_name = str(form.get("welshName") or "").strip()

    jurisdiction_id = None
    if not raw_jurisdiction_id:
        errors.append({"text": "Select a jurisdiction", "href": "#jurisdictionId"})
    elif not raw_jurisdiction_id.isdigit() or get_jurisdiction_by_id(db, int(raw_jurisdiction_id)) is None:
        errors.append({"text": "Invalid jurisdiction selection", "href": "#jurisdictionId"})
    else:
        jurisdiction_id = int(raw_jurisdiction_id)

    if not name:
        errors.append({"text": "Enter Sub Jurisdiction Name in English", "href": "#name"})
    elif contains_html(name):
        errors.append({
            "text": "Sub-jurisdiction name (English) contains HTML tags which are not allowed",
            "href": "#name",
        })

    if not welsh_name:
        errors.append({"text": "Enter Sub Jurisdiction Name in Welsh", "href": "#welshName"})
    elif contains_html(welsh_name):
        errors.append({
            "text": "Sub-jurisdiction name (Welsh) contains HTML tags which are not allowed",
            "href": "#welshName",
        })

    if errors:
        return errors

    if sub_jurisdiction_name_exists(db, jurisdiction_id, name):
        errors.append({
            "text": f"Sub-jurisdiction '{name}' already exists in the selected jurisdiction",
            "href": "#name",
        })
    if sub_jurisdiction_name_exists(db, jurisdiction_id, welsh_name, welsh=True):
        errors.append({
            "text": f"Welsh sub-jurisdiction name '{welsh_name}' already exists in the selected jurisdiction",
            "href": "#welshName",
        })
    return errors


# ============================================================================
# Locations CSV
# ============================================================================

def _row_errors(row: Dict[str, Any], row_number: int) -> List[Dict[str, str]]:
    errors = []
    for key, label in (("locationName", "LOCATION_NAME"), ("welshLocationName", "WELSH_LOCATION_NAME")):
        value = row.get(key) or ""
        if not value:
            errors.append({"text": f"Row {row_number}: {label} is required", "href": "#file"})
        elif contains_html(value):
            errors.append({
                "text": f"Row {row_number}: {label} contains HTML tags which are not allowed",
                "href": "#file",
            })

    for key, label in (("email", "EMAIL"), ("contactNo", "CONTACT_NO")):
        if contains_html(row.get(key) or ""):
            errors.append({
                "text": f"Row {row_number}: {label} contains HTML tags which are not allowed",
                "href": "#file",
            })

    if not row.get("subJurisdictionNames"):
        errors.append({"text": f"Row {row_number}: SUB_JURISDICTION_NAME is required", "href": "#file"})
    if not row.get("regionNames"):
        errors.append({"text": f"Row {row_number}: REGION_NAME is required", "href": "#file"})
    return errors


def _in_file_duplicates(rows: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    errors = []
    for key, label in (("locationName", "Location name"), ("welshLocationName", "Welsh location name")):
        seen: Dict[str, int] = {}
        for row_number, row in enumerate(rows, start=1):
            value = row.get(key)
            if not value:
                continue
            lowered = value.lower()
            if lowered in seen:
                errors.append({
                    "text": (
                        f'{label} "{value}" appears more than once in the file '
                        f"(rows {seen[lowered]} and {row_number})"
                    ),
                    "href": "#file",
                })
            else:
                seen[lowered] = row_number
    return errors


def _database_duplicates(db: Session, rows: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    errors = []
    for row_number, row in enumerate(rows, start=1):
        for key, column, label in (
            ("locationName", Location.name, "Location name"),
            ("welshLocationName", Location.welsh_name, "Welsh location name"),
        ):
            value = row.get(key)
            if not value:
                continue
            clash = (
                db.query(Location)
                .filter(func.lower(column) == value.lower(), Location.location_id != row["locationId"])
                .first()
            )
            if clash:
                errors.append({
                    "text": (
                        f'Row {row_number}: {label} "{value}" already exists in the database '
                        "with a different location ID"
                    ),
                    "href": "#file",
                })
    return errors


def _unknown_names(db: Session, rows: List[Dict[str, Any]], key: str, model, label: str) -> List[Dict[str, str]]:
    wanted = []
    for row in rows:
        for name in row.get(key) or []:
            if name not in wanted:
                wanted.append(name)
    if not wanted:
        return []

    known = {
        n.lower()
        for (n,) in db.query(model.name).filter(func.lower(model.name).in_([w.lower() for w in wanted])).all()
    }
    errors = []
    for name in wanted:
        if name.lower() in known:
            continue
        row_numbers = [str(i) for i, row in enumerate(rows, start=1) if name in (row.get(key) or [])]
        errors.append({
            "text": f'{label} "{name}" not found in reference data (rows: {", ".join(row_numbers)})',
            "href": "#file",
        })
    return errors


def validate_location_data(db: Session, rows: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Rows are numbered from 1 (first data row)."""
    errors: List[Dict[str, str]] = []
    for row_number, row in enumerate(rows, start=1):
        errors.extend(_row_errors(row, row_number))
    errors.extend(_in_file_duplicates(rows))
    errors.extend(_database_duplicates(db, rows))
    errors.extend(_unknown_names(db, rows, "subJurisdictionNames", SubJurisdiction, "Sub-jurisdiction"))
    errors.extend(_unknown_names(db, rows, "regionNames", Region, "Region"))
    return errors
