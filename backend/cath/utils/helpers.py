"""
Utility helper functions
"""
from datetime import date, datetime
from typing import Optional, Union
from urllib.parse import quote
import re

MONTHS_EN = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
MONTHS_CY = [
    "Ionawr", "Chwefror", "Mawrth", "Ebrill", "Mai", "Mehefin",
    "Gorffennaf", "Awst", "Medi", "Hydref", "Tachwedd", "Rhagfyr",
]


def format_date(value: Optional[Union[date, datetime]], locale: str = "en") -> str:
    """15 January 2024 (or 23 Ebrill 2025 in Welsh)"""
    if not value:
        return ""
    months = MONTHS_CY if locale == "cy" else MONTHS_EN
    return f"{value.day} {months[value.month - 1]} {value.year}"


def format_date_range(start, end, locale: str = "en") -> str:
    joiner = "i" if locale == "cy" else "to"
    return f"{format_date(start, locale)} {joiner} {format_date(end, locale)}"


def format_timestamp(value: Optional[datetime]) -> str:
    """dd/MM/yyyy HH:mm:ss"""
    if not value:
        return ""
    return value.strftime("%d/%m/%Y %H:%M:%S")


def format_short_date(value: Optional[Union[date, datetime]]) -> str:
    """dd/MM/yyyy"""
    if not value:
        return ""
    return value.strftime("%d/%m/%Y")


def to_datetime(value: Union[date, datetime]) -> datetime:
    """Midnight datetime for a plain date"""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def title_case_action(action: str) -> str:
    """ADD_JURISDICTION -> Add Jurisdiction"""
    return " ".join(word.capitalize() for word in (action or "").split("_") if word)


def camel_to_title(name: str) -> str:
    """locationId -> Location Id"""
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", name or "")
    return " ".join(part[:1].upper() + part[1:] for part in spaced.split())


def ascii_safe_filename(name: str) -> str:
    """Strip characters that are not safe inside a quoted header value"""
    cleaned = name.encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r'["\\\r\n]', "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned or "download"


def content_disposition(disposition: str, filename: str) -> str:
    """RFC 6266 / RFC 5987 header with an ASCII fallback and a UTF-8 name"""
    return (
        f'{disposition}; filename="{ascii_safe_filename(filename)}"; '
        f"filename*=UTF-8''{quote(filename, safe='')}"
    )
