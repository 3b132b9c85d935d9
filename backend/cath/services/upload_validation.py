# cath/services/upload_validation.py

"""
Form validation for the manual and non-strategic upload pages.
"""
import json
import re
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cath.core.config import settings
from cath.list_types.registry import get_list_type, validate_list_json
from cath.services.location_service import get_location_by_id
from cath.utils.validators import parse_date_input, validate_date_input

MANUAL_UPLOAD_EXTENSIONS = re.compile(r"\.(csv|doc|docx|htm|html|json|pdf)$", re.IGNORECASE)
NON_STRATEGIC_UPLOAD_EXTENSIONS = re.compile(r"\.xlsx$", re.IGNORECASE)


def _validate_file(
    file_name: Optional[str],
    file_data: Optional[bytes],
    list_type: str,
    messages: Dict[str, str],
    non_strategic: bool,
) -> List[Dict[str, str]]:
    if not file_name or file_data is None:
        return [{"text": messages["fileRequired"], "href": "#file"}]

    errors = []
    if len(file_data) > settings.MAX_UPLOAD_SIZE:
        errors.append({"text": messages["fileSize"], "href": "#file"})

    allowed = NON_STRATEGIC_UPLOAD_EXTENSIONS if non_strategic else MANUAL_UPLOAD_EXTENSIONS
    if not allowed.search(file_name):
        errors.append({"text": messages["fileType"], "href": "#file"})

    if not non_strategic and file_name.lower().endswith(".json") and list_type:
        try:
            payload = json.loads(file_data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            errors.append({
                "text": "Invalid JSON file format. Please ensure the file contains valid JSON.",
                "href": "#file",
            })
        else:
            list_type_def = get_list_type(list_type)
            schema_errors = validate_list_json(list_type_def.id, payload) if list_type_def else []
            if schema_errors:
                errors.append({"text": f"Invalid JSON file format. {schema_errors[0]}", "href": "#file"})

    return errors


def _validate_court(db: Session, form: Dict[str, Any], messages: Dict[str, str]) -> Optional[Dict[str, str]]:
    location_id = str(form.get("locationId") or "").strip()
    if not location_id:
        location_name = str(form.get("locationName") or "").strip()
        key = "courtRequired" if len(location_name) >= 3 else "courtTooShort"
        return {"text": messages[key], "href": "#court"}

    if not location_id.isdigit() or get_location_by_id(db, location_id) is None:
        return {"text": messages["courtRequired"], "href": "#court"}
    return None


def validate_upload_form(
    db: Session,
    form: Dict[str, Any],
    file_name: Optional[str],
    file_data: Optional[bytes],
    messages: Dict[str, str],
    non_strategic: bool = False,
) -> List[Dict[str, str]]:
    """
    Errors as {text, href}, in page order. `messages` is the page's
    errorMessages table.
    """
    list_type = str(form.get("listType") or "").strip()
    errors = _validate_file(file_name, file_data, list_type, messages, non_strategic)

    court_error = _validate_court(db, form, messages)
    if court_error:
        errors.append(court_error)

    if not list_type:
        errors.append({"text": messages["listTypeRequired"], "href": "#listType"})

    hearing_error = validate_date_input(
        form.get("hearingStartDate"),
        "hearingStartDate",
        messages["hearingStartDateRequired"],
        messages["hearingStartDateInvalid"],
    )
    if hearing_error:
        errors.append(hearing_error)

    if not form.get("sensitivity"):
        errors.append({"text": messages["sensitivityRequired"], "href": "#sensitivity"})

    if not form.get("language"):
        errors.append({"text": messages["languageRequired"], "href": "#language"})

    display_from_error = validate_date_input(
        form.get("displayFrom"), "displayFrom", messages["displayFromRequired"], messages["displayFromInvalid"]
    )
    if display_from_error:
        errors.append(display_from_error)

    display_to_error = validate_date_input(
        form.get("displayTo"), "displayTo", messages["displayToRequired"], messages["displayToInvalid"]
    )
    if display_to_error:
        errors.append(display_to_error)

    if not display_from_error and not display_to_error:
        display_from = parse_date_input(form.get("displayFrom"))
        display_to = parse_date_input(form.get("displayTo"))
        if display_from and display_to and display_to < display_from:
            errors.append({"text": messages["displayToBeforeFrom"], "href": "#displayTo"})

    return errors
