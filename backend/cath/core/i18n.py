# cath/core/i18n.py

from typing import Any, Dict

from starlette.requests import Request

from cath.locales.cy import cy
from cath.locales.en import en

SUPPORTED_LOCALES = ("en", "cy")
DEFAULT_LOCALE = "en"


def get_locale(request: Request) -> str:
    """
    ?lng=cy|en wins and is remembered in the session; otherwise the session
    value, otherwise English.
    """
    requested = request.query_params.get("lng")
    session = request.scope.get("session")
    if requested in SUPPORTED_LOCALES:
        if session is not None:
            session["locale"] = requested
        return requested
    if session is not None and session.get("locale") in SUPPORTED_LOCALES:
        return session["locale"]
    return DEFAULT_LOCALE


def get_translations(locale: str) -> Dict[str, Any]:
    return cy if locale == "cy" else en


def lng_suffix(locale: str, joiner: str = "?") -> str:
    """Query suffix that keeps Welsh across redirects"""
    return f"{joiner}lng=cy" if locale == "cy" else ""
