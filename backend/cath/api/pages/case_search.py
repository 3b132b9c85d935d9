# cath/api/pages/case_search.py

"""
Subscribe by case: search the indexed publications by case name or case
reference number, pick the matching cases and add them to the pending
subscriptions held in the session.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_verified
from cath.api.pages.common import list_field, redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.templates import render
from cath.db.database import get_db
from cath.db.models import SearchType
from cath.services.case_search_service import search_by_case_name, search_by_case_reference

router = APIRouter()

MIN_CASE_NAME_LENGTH = 3

# search type -> (page key, field name, path, result key the subscription is matched on)
SEARCHES = {
    SearchType.CASE_NAME: ("caseNameSearch", "caseName", "/case-name-search", "caseName"),
    SearchType.CASE_NUMBER: ("caseNumberSearch", "caseNumber", "/case-number-search", "caseNumber"),
}


def _dedupe(results: List[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """One row per distinct value; the same case appears in every list it was published in."""
    seen = set()
    unique = []
    for row in results:
        value = row.get(key)
        if not value or value in seen:
            continue
        seen.add(value)
        unique.append(row)
    return unique


def _search_page(
    request: Request, locale: str, search_type: SearchType, value: str = "", errors=None, status_code: int = 200
):
    page_key, field, path, _ = SEARCHES[search_type]
    return render(
        request,
        "subscriptions/case_search.html",
        {"page": get_translations(locale)[page_key], "field": field, "action": path, "value": value},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


async def _search(request: Request, db: Session, search_type: SearchType):
    locale = get_locale(request)
    page_key, field, path, key = SEARCHES[search_type]
    page = get_translations(locale)[page_key]
    form = await request.form()
    value = text_field(form, field)

    too_short = search_type == SearchType.CASE_NAME and len(value) < MIN_CASE_NAME_LENGTH
    if not value or too_short:
        errors = [{"text": page["errorRequired"], "href": f"#{field}"}]
        return _search_page(request, locale, search_type, value, errors=errors, status_code=400)

    if search_type == SearchType.CASE_NAME:
        results = search_by_case_name(db, value)
    else:
        results = search_by_case_reference(db, value)
    results = _dedupe(results, key)
    if not results:
        errors = [{"text": page["errorNoResults"], "href": f"#{field}"}]
        return _search_page(request, locale, search_type, value, errors=errors, status_code=400)

    request.session["caseSearch"] = {"type": search_type.value, "value": value, "results": results}
    return redirect(f"{path}-results", locale)


@router.get("/case-name-search")
def case_name_search_form(request: Request, user: dict = Depends(require_verified)):
    return _search_page(request, get_locale(request), SearchType.CASE_NAME)


@router.post("/case-name-search")
async def case_name_search(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    return await _search(request, db, SearchType.CASE_NAME)


@router.get("/case-number-search")
def case_number_search_form(request: Request, user: dict = Depends(require_verified)):
    return _search_page(request, get_locale(request), SearchType.CASE_NUMBER)


@router.post("/case-number-search")
async def case_number_search(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    return await _search(request, db, SearchType.CASE_NUMBER)


# ============================================================================
# Results
# ============================================================================

def _stored_search(request: Request, search_type: SearchType):
    stored = request.session.get("caseSearch") or {}
    if stored.get("type") != search_type.value or not stored.get("results"):
        return None
    return stored


def _results_page(request: Request, locale: str, search_type: SearchType, stored, errors=None, status_code=200):
    _, _, path, _ = SEARCHES[search_type]
    return render(
        request,
        "subscriptions/case_search_results.html",
        {
            "page": get_translations(locale)["caseSearchResults"],
            "action": f"{path}-results",
            "results": stored["results"],
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


def _results_form(request: Request, search_type: SearchType):
    locale = get_locale(request)
    stored = _stored_search(request, search_type)
    if stored is None:
        return redirect(SEARCHES[search_type][2], locale)
    return _results_page(request, locale, search_type, stored)


async def _select_results(request: Request, search_type: SearchType):
    locale = get_locale(request)
    stored = _stored_search(request, search_type)
    if stored is None:
        return redirect(SEARCHES[search_type][2], locale)

    form = await request.form()
    selected = set(list_field(form, "caseIds"))
    chosen = [row for row in stored["results"] if row["id"] in selected]
    if not chosen:
        errors = [{"text": get_translations(locale)["caseSearchResults"]["errorNoSelection"], "href": "#caseIds"}]
        return _results_page(request, locale, search_type, stored, errors=errors, status_code=400)

    key = SEARCHES[search_type][3]
    pending = list(request.session.get("pendingCaseSubscriptions") or [])
    queued = {(case["searchType"], case["searchValue"]) for case in pending}
    for row in chosen:
        entry = {
            "id": row["id"],
            "caseName": row.get("caseName"),
            "caseNumber": row.get("caseNumber"),
            "searchType": search_type.value,
            "searchValue": row[key],
        }
        if (entry["searchType"], entry["searchValue"]) not in queued:
            pending.append(entry)
            queued.add((entry["searchType"], entry["searchValue"]))

    request.session["pendingCaseSubscriptions"] = pending
    request.session.pop("caseSearch", None)
    return redirect("/pending-subscriptions", locale)


@router.get("/case-name-search-results")
def case_name_search_results(request: Request, user: dict = Depends(require_verified)):
    return _results_form(request, SearchType.CASE_NAME)


@router.post("/case-name-search-results")
async def case_name_select(request: Request, user: dict = Depends(require_verified)):
    return await _select_results(request, SearchType.CASE_NAME)


@router.get("/case-number-search-results")
def case_number_search_results(request: Request, user: dict = Depends(require_verified)):
    return _results_form(request, SearchType.CASE_NUMBER)


@router.post("/case-number-search-results")
async def case_number_select(request: Request, user: dict = Depends(require_verified)):
    return await _select_results(request, SearchType.CASE_NUMBER)
