"""
List type registry.

Static definitions for every list type the service publishes, plus the
per-list-type hooks (Excel converter, JSON schema, email summary, page
renderer, case search extractor) that list-type modules register on import.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ListTypeDef:
    id: int
    name: str
    english_friendly_name: str
    welsh_friendly_name: str
    provenance: str
    url_path: str
    is_non_strategic: bool = False


LIST_TYPES: List[ListTypeDef] = [
    ListTypeDef(1, "CIVIL_DAILY_CAUSE_LIST", "Civil Daily Cause List", "Civil Daily Cause List",
                "CFT_IDAM", "civil-daily-cause-list"),
    ListTypeDef(2, "FAMILY_DAILY_CAUSE_LIST", "Family Daily Cause List", "Family Daily Cause List",
                "CFT_IDAM", "family-daily-cause-list"),
    ListTypeDef(3, "CRIME_DAILY_LIST", "Crime Daily List", "Crime Daily List",
                "CFT_IDAM", "crime-daily-list"),
    ListTypeDef(4, "MAGISTRATES_PUBLIC_LIST", "Magistrates Public List", "Magistrates Public List",
                "CFT_IDAM", "magistrates-public-list"),
    ListTypeDef(5, "CROWN_WARNED_LIST", "Crown Warned List", "Crown Warned List",
                "CFT_IDAM", "crown-warned-list"),
    ListTypeDef(6, "CROWN_DAILY_LIST", "Crown Daily List", "Crown Daily List",
                "CFT_IDAM", "crown-daily-cause-list"),
    ListTypeDef(7, "CROWN_FIRM_LIST", "Crown Firm List", "Crown Firm List",
                "CFT_IDAM", "crown-firm-list"),
    ListTypeDef(8, "CIVIL_AND_FAMILY_DAILY_CAUSE_LIST", "Civil and Family Daily Cause List",
                "Rhestr Achos Dyddiol Sifil a Theulu", "CFT_IDAM", "civil-and-family-daily-cause-list"),
    ListTypeDef(9, "CARE_STANDARDS_TRIBUNAL_WEEKLY_HEARING_LIST", "Care Standards Tribunal Weekly Hearing List",
                "Rhestr Gwrandawiadau Wythnosol y Tribiwnlys Safonau Gofal", "MANUAL_UPLOAD",
                "care-standards-tribunal-weekly-hearing-list", is_non_strategic=True),
    ListTypeDef(10, "SJP_PRESS_LIST", "Single Justice Procedure Press List",
                "Rhestr y Wasg Gweithdrefn Un Ynad", "CRIME_IDAM", "sjp-press-list"),
    ListTypeDef(11, "SJP_PUBLIC_LIST", "Single Justice Procedure Public List",
                "Rhestr Gyhoeddus Gweithdrefn Un Ynad", "CRIME_IDAM", "sjp-public-list"),
]

_BY_ID: Dict[int, ListTypeDef] = {lt.id: lt for lt in LIST_TYPES}
_BY_NAME: Dict[str, ListTypeDef] = {lt.name: lt for lt in LIST_TYPES}
_BY_URL_PATH: Dict[str, ListTypeDef] = {lt.url_path: lt for lt in LIST_TYPES}


def get_list_type(list_type_id) -> Optional[ListTypeDef]:
    try:
        return _BY_ID.get(int(list_type_id))
    except (TypeError, ValueError):
        return None


def get_list_type_by_name(name: str) -> Optional[ListTypeDef]:
    return _BY_NAME.get(name or "")


def get_list_type_by_url_path(url_path: str) -> Optional[ListTypeDef]:
    return _BY_URL_PATH.get(url_path or "")


def get_list_type_name(list_type_id) -> str:
    """English friendly name, or "Unknown" (used in download filenames)."""
    list_type = get_list_type(list_type_id)
    return list_type.english_friendly_name if list_type else "Unknown"


def friendly_name(list_type: ListTypeDef, locale: str = "en") -> str:
    return list_type.welsh_friendly_name if locale == "cy" else list_type.english_friendly_name


def non_strategic_list_types() -> List[ListTypeDef]:
    return [lt for lt in LIST_TYPES if lt.is_non_strategic]


# ============================================================================
# Per-list-type hooks
# ============================================================================

ExcelConverter = Callable[[bytes], List[Dict[str, Any]]]
JsonValidator = Callable[[Any], List[str]]
SummaryBuilder = Callable[[Any], str]
PageRenderer = Callable[[Any, Dict[str, Any]], Dict[str, Any]]
# (case_number, case_name) pairs indexed for case search
SearchExtractor = Callable[[Any], List[Tuple[Optional[str], Optional[str]]]]

_converters: Dict[int, ExcelConverter] = {}
_validators: Dict[int, JsonValidator] = {}
_summary_builders: Dict[int, SummaryBuilder] = {}
_renderers: Dict[int, PageRenderer] = {}
_search_extractors: Dict[int, SearchExtractor] = {}


def register_list_type_hooks(
    list_type_name: str,
    converter: Optional[ExcelConverter] = None,
    validator: Optional[JsonValidator] = None,
    summary_builder: Optional[SummaryBuilder] = None,
    renderer: Optional[PageRenderer] = None,
    search_extractor: Optional[SearchExtractor] = None,
) -> None:
    list_type = _BY_NAME[list_type_name]
    if converter:
        _converters[list_type.id] = converter
    if validator:
        _validators[list_type.id] = validator
    if summary_builder:
        _summary_builders[list_type.id] = summary_builder
    if renderer:
        _renderers[list_type.id] = renderer
    if search_extractor:
        _search_extractors[list_type.id] = search_extractor


def has_converter_for_list_type(list_type_id: int) -> bool:
    return list_type_id in _converters


def convert_excel_for_list_type(list_type_id: int, buffer: bytes) -> List[Dict[str, Any]]:
    converter = _converters.get(list_type_id)
    if converter is None:
        raise ValueError(f"No converter registered for list type {list_type_id}")
    return converter(buffer)


def validate_list_json(list_type_id: int, payload: Any) -> List[str]:
    """Schema errors for a JSON payload; list types without a schema accept anything."""
    validator = _validators.get(list_type_id)
    if validator is None:
        return []
    return validator(payload)


def get_summary_builder(list_type_id: int) -> Optional[SummaryBuilder]:
    return _summary_builders.get(list_type_id)


def get_renderer(list_type_id: int) -> Optional[PageRenderer]:
    return _renderers.get(list_type_id)


def get_search_extractor(list_type_id: int) -> Optional[SearchExtractor]:
    return _search_extractors.get(list_type_id)
