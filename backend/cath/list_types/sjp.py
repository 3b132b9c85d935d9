"""
Single Justice Procedure press and public lists (JSON, published through the API).

Both list types share one payload shape:

    document.publicationDate
    courtLists[].courtHouse.courtRoom[].session[].sittings[].hearing[]

Each hearing carries case[].caseUrn, party[] (ACCUSED / PROSECUTOR) and
offence[]. The press list includes the accused's date of birth and address;
the public list drops them.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from cath.list_types.registry import register_list_type_hooks
from cath.utils.helpers import format_date

PRESS_LIST_NAME = "SJP_PRESS_LIST"
PUBLIC_LIST_NAME = "SJP_PUBLIC_LIST"

CASES_PER_PAGE = 50
LONDON_POSTCODE_FILTER = "LONDON_POSTCODES"
LONDON_POSTCODE_AREAS = {"E", "EC", "N", "NW", "SE", "SW", "W", "WC"}

OUTWARD_CODE_PATTERN = re.compile(r"^[A-Z]{1,2}[0-9]{1,2}[A-Z]?$")
POSTCODE_AREA_PATTERN = re.compile(r"^[A-Z]+")
SORT_FIELDS = ("name", "postcode", "offence", "prosecutor", "reference")


# ============================================================================
# Schema
# ============================================================================

class _Document(BaseModel):
    publicationDate: str


class _Hearing(BaseModel):
    model_config = ConfigDict(extra="allow")

    case: List[Dict[str, Any]] = []
    party: List[Dict[str, Any]] = []
    offence: List[Dict[str, Any]] = []


class _Sitting(BaseModel):
    hearing: List[_Hearing]


class _Session(BaseModel):
    sittings: List[_Sitting]


class _CourtRoom(BaseModel):
    session: List[_Session]


class _CourtHouse(BaseModel):
    courtRoom: List[_CourtRoom]


class _CourtList(BaseModel):
    courtHouse: _CourtHouse


class SjpList(BaseModel):
    model_config = ConfigDict(extra="allow")

    document: _Document
    courtLists: List[_CourtList]


def validate_json(payload: Any) -> List[str]:
    try:
        SjpList.model_validate(payload)
    except ValidationError as exc:
        return [
            f"{'.'.join(str(part) for part in err['loc']) or 'list'} {err['msg']}"
            for err in exc.errors()
        ]
    return []


# ============================================================================
# Parsing
# ============================================================================

def iter_hearings(payload: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for court_list in payload.get("courtLists") or []:
        for court_room in (court_list.get("courtHouse") or {}).get("courtRoom") or []:
            for session in court_room.get("session") or []:
                for sitting in session.get("sittings") or []:
                    yield from sitting.get("hearing") or []


def _party(hearing: Dict[str, Any], role: str) -> Optional[Dict[str, Any]]:
    return next((p for p in hearing.get("party") or [] if p.get("partyRole") == role), None)


def _address(accused: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not accused:
        return None
    individual = accused.get("individualDetails") or {}
    organisation = accused.get("organisationDetails") or {}
    return individual.get("address") or organisation.get("address")


def postcode_outward_code(postcode: Optional[str]) -> Optional[str]:
    """BS8 1AB -> BS8. A bare outward code is returned as is."""
    if not postcode:
        return None
    trimmed = postcode.strip()
    if " " in trimmed:
        return trimmed.split(" ", 1)[0]
    return trimmed if OUTWARD_CODE_PATTERN.match(trimmed) else None


def accused_name(accused: Optional[Dict[str, Any]]) -> str:
    if not accused:
        return "Unknown"
    individual = accused.get("individualDetails")
    if individual:
        parts = [individual.get(key) for key in ("title", "forename", "middleName", "surname")]
        return " ".join(part for part in parts if part)
    organisation = accused.get("organisationDetails")
    if organisation:
        return organisation.get("name") or "Unknown"
    return "Unknown"


def _format_address(address: Optional[Dict[str, Any]]) -> Optional[str]:
    if not address:
        return None
    parts = [*(address.get("line") or []), address.get("town"), address.get("county"), address.get("postCode")]
    parts = [part for part in parts if part]
    return ", ".join(parts) if parts else None


def _iso_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _age(born: Optional[date], today: date) -> Optional[int]:
    if born is None:
        return None
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def _case_urn(hearing: Dict[str, Any]) -> Optional[str]:
    cases = hearing.get("case") or []
    return (cases[0].get("caseUrn") or None) if cases else None


def extract_cases(payload: Dict[str, Any], today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Every hearing as a flat case row with the press-only fields included."""
    today = today or date.today()
    cases = []
    for hearing in iter_hearings(payload):
        accused = _party(hearing, "ACCUSED")
        prosecutor = _party(hearing, "PROSECUTOR")
        offences = hearing.get("offence") or []
        born = _iso_date(((accused or {}).get("individualDetails") or {}).get("dateOfBirth"))
        cases.append({
            "name": accused_name(accused),
            "postcode": postcode_outward_code((_address(accused) or {}).get("postCode")),
            "offence": (offences[0].get("offenceTitle") or offences[0].get("offenceWording")) if offences else None,
            "prosecutor": ((prosecutor or {}).get("organisationDetails") or {}).get("name"),
            "reference": _case_urn(hearing),
            "dateOfBirth": born,
            "age": _age(born, today),
            "address": _format_address(_address(accused)),
            "offences": [
                {
                    "offenceTitle": o.get("offenceTitle") or "",
                    "offenceWording": o.get("offenceWording"),
                    "reportingRestriction": o.get("reportingRestriction") is True,
                }
                for o in offences
            ],
            "reportingRestriction": any(o.get("reportingRestriction") is True for o in offences),
        })
    return cases


def determine_list_type(payload: Dict[str, Any]) -> str:
    """press when the first accused has a date of birth or an address, else public"""
    first = next(iter_hearings(payload), None)
    if first is None:
        return "public"
    accused = _party(first, "ACCUSED") or {}
    individual = accused.get("individualDetails") or {}
    if individual.get("dateOfBirth") or _address(accused):
        return "press"
    return "public"


# ============================================================================
# Filtering
# ============================================================================

def postcode_area(postcode: str) -> str:
    match = POSTCODE_AREA_PATTERN.match(postcode.upper())
    return match.group(0) if match else ""


def is_london_postcode(postcode: Optional[str]) -> bool:
    return bool(postcode) and postcode_area(postcode) in LONDON_POSTCODE_AREAS


def apply_filters(
    cases: List[Dict[str, Any]],
    search: Optional[str] = None,
    postcodes: Optional[List[str]] = None,
    prosecutors: Optional[List[str]] = None,
) -> List[Dict[str, Any]]:
    filtered = cases

    if search:
        query = search.strip().lower()
        filtered = [
            c for c in filtered
            if query in c["name"].lower() or (c["reference"] and query in c["reference"].lower())
        ]

    if postcodes:
        wanted = [p.strip().lower() for p in postcodes if p.strip()]
        london = LONDON_POSTCODE_FILTER.lower() in wanted

        def matches(case: Dict[str, Any]) -> bool:
            postcode = case["postcode"]
            if not postcode:
                return False
            if london and is_london_postcode(postcode):
                return True
            return any(postcode.lower().startswith(p) for p in wanted)

        filtered = [c for c in filtered if matches(c)]

    if prosecutors:
        filtered = [c for c in filtered if c["prosecutor"] in prosecutors]

    return filtered


def unique_prosecutors(cases: List[Dict[str, Any]]) -> List[str]:
    return sorted({c["prosecutor"] for c in cases if c["prosecutor"]})


def unique_postcodes(cases: List[Dict[str, Any]]) -> Dict[str, Any]:
    postcodes = sorted({c["postcode"] for c in cases if c["postcode"]})
    london = [p for p in postcodes if is_london_postcode(p)]
    return {"postcodes": postcodes, "londonPostcodes": london, "hasLondonPostcodes": bool(london)}


def sort_cases(cases: List[Dict[str, Any]], sort_by: str = "name", sort_order: str = "asc") -> List[Dict[str, Any]]:
    field = sort_by if sort_by in SORT_FIELDS else "name"
    return sorted(cases, key=lambda c: (c[field] or "").lower(), reverse=sort_order == "desc")


def paginate(cases: List[Dict[str, Any]], page: int) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    total_pages = max(1, math.ceil(len(cases) / CASES_PER_PAGE))
    page = min(max(1, page), total_pages)
    start = (page - 1) * CASES_PER_PAGE
    return cases[start:start + CASES_PER_PAGE], {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCases": len(cases),
    }


# ============================================================================
# Hooks
# ============================================================================

def build_summary(payload: Dict[str, Any]) -> str:
    cases = extract_cases(payload)
    if not cases:
        return "No cases scheduled."
    blocks = [
        "\n".join([
            f"Name - {c['name']}",
            f"Offence - {c['offence'] or ''}",
            f"Prosecutor - {c['prosecutor'] or ''}",
        ])
        for c in cases
    ]
    return "\n\n---\n\n".join(blocks)


def extract_search_entries(payload: Dict[str, Any]) -> List[Tuple[Optional[str], Optional[str]]]:
    """(case URN, accused name) for every hearing"""
    return [
        (_case_urn(hearing), accused_name(_party(hearing, "ACCUSED")))
        for hearing in iter_hearings(payload)
    ]


def _int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def render(payload: Dict[str, Any], options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Page context for either SJP list.

    options: locale, listTitle, listTypeName, lastReceivedDate, query
    query:   search, postcode (list), prosecutor (list), page, sortBy, sortOrder
    """
    locale = options.get("locale", "en")
    query = options.get("query") or {}
    press = options.get("listTypeName") == PRESS_LIST_NAME

    all_cases = extract_cases(payload)
    selected_postcodes = list(query.get("postcode") or [])
    selected_prosecutors = list(query.get("prosecutor") or [])
    sort_by = query.get("sortBy") or "name"
    sort_order = "desc" if query.get("sortOrder") == "desc" else "asc"

    filtered = apply_filters(all_cases, query.get("search"), selected_postcodes, selected_prosecutors)
    cases, pagination = paginate(sort_cases(filtered, sort_by, sort_order), _int(query.get("page"), 1))

    publication_date = (payload.get("document") or {}).get("publicationDate")
    published = _iso_date(publication_date)
    last_received = options.get("lastReceivedDate")

    return {
        "template": "list_types/sjp.html",
        "header": {
            "listTitle": options.get("listTitle", ""),
            "publishedDate": format_date(published, locale) if published else "",
            "lastUpdatedDate": format_date(last_received, locale) if last_received else "",
        },
        "isPressList": press,
        "cases": cases,
        "pagination": pagination,
        "prosecutors": unique_prosecutors(all_cases),
        **unique_postcodes(all_cases),
        "filters": {
            "search": query.get("search") or "",
            "postcodes": selected_postcodes,
            "prosecutors": selected_prosecutors,
        },
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }


for _name in (PRESS_LIST_NAME, PUBLIC_LIST_NAME):
    register_list_type_hooks(
        _name,
        validator=validate_json,
        summary_builder=build_summary,
        renderer=render,
        search_extractor=extract_search_entries,
    )
