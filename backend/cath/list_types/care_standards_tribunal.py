"""
Care Standards Tribunal Weekly Hearing List (non-strategic, Excel upload).
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from cath.list_types.excel import (
    DDMMYYYY_PATTERN,
    FieldConfig,
    convert_excel_to_json,
    validate_date_format,
    validate_no_html_tags,
)
from cath.list_types.registry import register_list_type_hooks
from cath.utils.helpers import format_date
from cath.utils.validators import contains_html, parse_date

LIST_TYPE_NAME = "CARE_STANDARDS_TRIBUNAL_WEEKLY_HEARING_LIST"

FIELDS = [
    FieldConfig("Date", "date", validators=[validate_date_format()]),
    FieldConfig("Case name", "caseName", validators=[validate_no_html_tags("Case name")]),
    FieldConfig("Hearing length", "hearingLength", validators=[validate_no_html_tags("Hearing length")]),
    FieldConfig("Hearing type", "hearingType", validators=[validate_no_html_tags("Hearing type")]),
    FieldConfig("Venue", "venue", validators=[validate_no_html_tags("Venue")]),
    FieldConfig(
        "Additional information",
        "additionalInformation",
        validators=[validate_no_html_tags("Additional information")],
    ),
]


class CareStandardsTribunalHearing(BaseModel):
    model_config = ConfigDict(extra="forbid")

    date: str
    caseName: str
    hearingLength: str
    hearingType: str
    venue: str
    additionalInformation: str

    @field_validator("date")
    @classmethod
    def check_date(cls, v: str) -> str:
        if not DDMMYYYY_PATTERN.match(v):
            raise ValueError("date must be in dd/MM/yyyy format")
        day, month, year = v.split("/")
        if parse_date(day, month, year) is None:
            raise ValueError("date does not exist in calendar")
        return v

    @field_validator("caseName", "hearingLength", "hearingType", "venue", "additionalInformation")
    @classmethod
    def check_no_html(cls, v: str) -> str:
        if contains_html(v):
            raise ValueError("HTML tags are not allowed")
        return v


def convert_excel(buffer: bytes) -> List[Dict[str, Any]]:
    return convert_excel_to_json(
        buffer,
        FIELDS,
        min_rows=1,
        min_rows_message="Excel file must contain at least one hearing",
    )


def validate_json(payload: Any) -> List[str]:
    """Human-readable schema errors; empty when the payload is a valid list."""
    if not isinstance(payload, list):
        return ["Hearing list must be an array of hearings"]

    errors: List[str] = []
    for index, item in enumerate(payload):
        try:
            CareStandardsTribunalHearing.model_validate(item)
        except ValidationError as exc:
            for err in exc.errors():
                field = ".".join(str(part) for part in err["loc"]) or "hearing"
                errors.append(f"Hearing {index + 1}: {field} {err['msg']}")
    return errors


def build_summary(payload: List[Dict[str, Any]]) -> str:
    """Email case summary: one block per hearing."""
    if not payload:
        return "No cases scheduled."

    blocks = []
    for hearing in payload:
        lines = [
            f"Date - {hearing.get('date', '')}",
            f"Case name - {hearing.get('caseName', '')}",
            f"Venue - {hearing.get('venue', '')}",
        ]
        blocks.append("\n".join(lines))
    return "\n\n---\n\n".join(blocks)


def extract_search_entries(payload: List[Dict[str, Any]]) -> List[Tuple[Optional[str], Optional[str]]]:
    """Case names only; the list carries no case numbers"""
    if not isinstance(payload, list):
        return []
    return [(None, hearing.get("caseName")) for hearing in payload if hearing.get("caseName")]


def _format_hearing_date(value: str, locale: str) -> str:
    day, month, year = value.split("/")
    parsed = parse_date(day, month, year)
    return format_date(parsed, locale) if parsed else value


def _format_time(value: datetime) -> str:
    """9:55am / 2:30pm"""
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    if value.minute:
        return f"{hour}:{value.minute:02d}{suffix}"
    return f"{hour}{suffix}"


def render(payload: List[Dict[str, Any]], options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Page context for the hearing list.

    options: locale, courtName, displayFrom, displayTo, lastReceivedDate, listTitle
    """
    locale = options.get("locale", "en")
    last_received = options.get("lastReceivedDate")

    header = {
        "listTitle": options.get("listTitle", ""),
        "courtName": options.get("courtName", ""),
        "weekCommencingDate": format_date(options.get("displayFrom"), locale),
        "lastUpdatedDate": format_date(last_received, locale) if last_received else "",
        "lastUpdatedTime": _format_time(last_received) if last_received else "",
    }

    hearings = [
        {**hearing, "date": _format_hearing_date(hearing.get("date", ""), locale)}
        for hearing in payload
    ]
    return {"header": header, "hearings": hearings, "template": "list_types/care_standards_tribunal.html"}


register_list_type_hooks(
    LIST_TYPE_NAME,
    converter=convert_excel,
    validator=validate_json,
    summary_builder=build_summary,
    renderer=render,
    search_extractor=extract_search_entries,
)
