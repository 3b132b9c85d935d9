# cath/api/pages/delete_court.py

"""
System admin flow for removing a court: find it, confirm, done. The court
is soft deleted, and only when nobody subscribes to it and it has no
publications still on display.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_system_admin
from cath.api.pages.common import redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.templates import render
from cath.db.database import get_db
from cath.services.location_service import (
    find_location_by_name,
    get_all_locations,
    get_location_by_id,
    get_location_details,
    location_display_name,
    soft_delete_location,
)

router = APIRouter()

# service messages -> locale keys
DELETE_ERRORS = {
    "There are active subscriptions for the given location.": "errorActiveSubscriptions",
    "There are active artefacts for the given location.": "errorActiveArtefacts",
}


def _page(locale: str):
    return get_translations(locale)["deleteCourt"]


def _search_page(request: Request, db: Session, locale: str, query: str = "", errors=None, status_code: int = 200):
    locations = [location_display_name(loc, locale) for loc in get_all_locations(db, locale)]
    return render(
        request,
        "delete_court/search.html",
        {"page": _page(locale), "locations": locations, "query": query},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/delete-court")
def delete_court_form(request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)):
    return _search_page(request, db, get_locale(request))


@router.post("/delete-court")
async def delete_court_search(
    request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    form = await request.form()
    query = text_field(form, "court-search")
    location = get_location_by_id(db, text_field(form, "locationId")) or find_location_by_name(db, query)
    if location is None:
        errors = [{"text": _page(locale)["errorCourtRequired"], "href": "#court-search"}]
        return _search_page(request, db, locale, query=query, errors=errors, status_code=400)

    request.session["deleteCourt"] = {"locationId": location.location_id}
    return redirect("/delete-court-confirm", locale)


def _confirm_page(request: Request, locale: str, court, errors=None, status_code: int = 200):
    return render(
        request,
        "delete_court/confirm.html",
        {
            "page": _page(locale),
            "court": court,
            "courtName": court["welshName"] if locale == "cy" and court["welshName"] else court["name"],
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


def _selected_court(request: Request, db: Session):
    state = request.session.get("deleteCourt") or {}
    if not state.get("locationId"):
        return None
    return get_location_details(db, state["locationId"])


@router.get("/delete-court-confirm")
def delete_court_confirm_form(
    request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    court = _selected_court(request, db)
    if court is None:
        return redirect("/delete-court", locale)
    return _confirm_page(request, locale, court)


@router.post("/delete-court-confirm")
async def delete_court_confirm(
    request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    court = _selected_court(request, db)
    if court is None:
        return redirect("/delete-court", locale)

    form = await request.form()
    answer = text_field(form, "confirmDelete")
    if answer not in ("yes", "no"):
        errors = [{"text": _page(locale)["errorSelectYesNo"], "href": "#confirmDelete"}]
        return _confirm_page(request, locale, court, errors=errors, status_code=400)

    if answer == "no":
        request.session.pop("deleteCourt", None)
        return redirect("/delete-court", locale)

    try:
        soft_delete_location(db, court["locationId"])
    except ValueError as e:
        key = DELETE_ERRORS.get(str(e))
        text = _page(locale)[key] if key else str(e)
        return _confirm_page(request, locale, court, errors=[{"text": text, "href": "#confirmDelete"}], status_code=400)

    request.session.pop("deleteCourt", None)
    request.session["deleteCourtSuccess"] = True
    request.state.audit_metadata = {
        "shouldLog": True,
        "action": "DELETE_COURT",
        "locationId": court["locationId"],
        "courtName": court["name"],
    }
    return redirect("/delete-court-success", locale)


@router.get("/delete-court-success")
def delete_court_success(request: Request, user: dict = Depends(require_system_admin)):
    locale = get_locale(request)
    if not request.session.pop("deleteCourtSuccess", None):
        return redirect("/delete-court", locale)
    return render(request, "delete_court/success.html", {"page": _page(locale)}, locale=locale)
