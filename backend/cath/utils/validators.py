"""
Custom validators
"""
import re
import uuid
from datetime import date
from typing import Optional

HTML_TAG_RE = re.compile(r"<[^<>]*>")
EMAIL_RE = re.compile(r"^[^\s@]{1,253}@[^\s@]{1,253}\.[^\s@]{1,63}$")
USER_ID_RE = re.compile(r"^[a-zA-Z0-9-]{1,50}$")
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$", re.IGNORECASE)


def contains_html(text: Optional[str]) -> bool:
    """True if the text contains anything tag-shaped"""
    return bool(text) and bool(HTML_TAG_RE.search(text))


def validate_email(email: str) -> bool:
    """Validate email format (bounded pattern, max 254 chars)"""
    if not email or len(email) > 254:
        return False
    return bool(EMAIL_RE.match(email))


def validate_user_id(user_id: str) -> bool:
    """Alphanumerics and dashes, up to 50 chars"""
    if not user_id or len(user_id) > 50:
        return False
    return bool(USER_ID_RE.match(user_id))


def is_valid_uuid(value: Optional[str]) -> bool:
    return bool(value) and bool(UUID_RE.match(value.strip()))


def parse_date(day, month, year) -> Optional[date]:
    """
    Build a date from day/month/year parts.
    Returns None for non-numeric parts or dates not on the calendar.
    """
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError):
        return None


def parse_date_input(value: Optional[dict]) -> Optional[date]:
    """
    Parse a GOV.UK date-input triplet {day, month, year}.
    Day and month must be two digits, year four digits.
    """
    if not value:
        return None
    day = str(value.get("day") or "").strip()
    month = str(value.get("month") or "").strip()
    year = str(value.get("year") or "").strip()

    if len(day) != 2 or len(month) != 2 or len(year) != 4:
        return None
    if not (day.isdigit() and month.isdigit() and year.isdigit()):
        return None
    return parse_date(day, month, year)


def is_date_input_complete(value: Optional[dict]) -> bool:
    if not value:
        return False
    return all(str(value.get(part) or "").strip() for part in ("day", "month", "year"))


def validate_date_input(value: Optional[dict], field_name: str,
                        required_message: str, invalid_message: str) -> Optional[dict]:
    """Error dict for a date-input field, or None if it holds a real date"""
    if not is_date_input_complete(value):
        return {"text": required_message, "href": f"#{field_name}"}
    if parse_date_input(value) is None:
        return {"text": invalid_message, "href": f"#{field_name}"}
    return None


def validate_artefact_id(artefact_id) -> None:
    """
    Raise ValueError unless the id is safe to use as a storage key.
    """
    if not isinstance(artefact_id, str) or not artefact_id.strip():
        raise ValueError("Artefact ID must be a non-empty string")
    if ".." in artefact_id or "/" in artefact_id or "\\" in artefact_id:
        raise ValueError("Artefact ID contains invalid characters")
    try:
        uuid.UUID(artefact_id)
    except ValueError:
        raise ValueError("Artefact ID must be a valid UUID format")
