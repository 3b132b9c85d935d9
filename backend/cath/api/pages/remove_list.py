# cath/api/pages/remove_list.py

"""
Admin flow for taking publications down: pick a court, pick its lists,
confirm.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_admin
from cath.api.pages.common import list_field, redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.templates import render
from cath.db.database import get_db
from cath.services.artefact_service import delete_artefacts, get_artefact_summaries_by_location
from cath.services.location_service import get_all_locations, get_location_by_id, location_display_name

router = APIRouter()


def _page(locale: str):
    return get_translations(locale)["removeList"]


def _search_page(request: Request, db: Session, locale: str, errors=None, status_code: int = 200):
    locations = [
        {"value": str(loc.location_id), "text": location_display_name(loc, locale)}
        for loc in get_all_locations(db, locale)
    ]
    return render(
        request,
        "remove_list/search.html",
        {"page": _page(locale), "locations": locations},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


def _selected(request: Request, db: Session, locale: str):
    location_id = request.session.get("removeListLocationId")
    ids = set(request.session.get("removeListArtefactIds") or [])
    if not location_id or not ids:
        return location_id, []
    summaries = get_artefact_summaries_by_location(db, location_id, locale)
    return location_id, [s for s in summaries if s["artefactId"] in ids]


@router.get("/remove-list-search")
def remove_list_search_form(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return _search_page(request, db, get_locale(request))


@router.post("/remove-list-search")
async def remove_list_search(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()
    location = get_location_by_id(db, text_field(form, "locationId"))
    if location is None:
        errors = [{"text": _page(locale)["courtRequired"], "href": "#locationId"}]
        return _search_page(request, db, locale, errors=errors, status_code=400)

    request.session["removeListLocationId"] = str(location.location_id)
    request.session.pop("removeListArtefactIds", None)
    return redirect(f"/remove-list-search-results?locationId={location.location_id}", locale)


def _results_page(request: Request, db: Session, locale: str, location, errors=None, status_code: int = 200):
    return render(
        request,
        "remove_list/results.html",
        {
            "page": _page(locale),
            "courtName": location_display_name(location, locale),
            "locationId": str(location.location_id),
            "artefacts": get_artefact_summaries_by_location(db, location.location_id, locale),
            "selected": request.session.get("removeListArtefactIds") or [],
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/remove-list-search-results")
def remove_list_search_results(
    request: Request,
    locationId: str = "",
    user: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    location = get_location_by_id(db, locationId or request.session.get("removeListLocationId"))
    if location is None:
        return redirect("/remove-list-search", locale)
    request.session["removeListLocationId"] = str(location.location_id)
    return _results_page(request, db, locale, location)


@router.post("/remove-list-search-results")
async def remove_list_select(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()
    location = get_location_by_id(db, request.session.get("removeListLocationId"))
    if location is None:
        return redirect("/remove-list-search", locale)

    artefact_ids = list_field(form, "artefacts")
    if not artefact_ids:
        errors = [{"text": _page(locale)["selectionRequired"], "href": "#artefacts"}]
        return _results_page(request, db, locale, location, errors=errors, status_code=400)

    request.session["removeListArtefactIds"] = artefact_ids
    return redirect("/remove-list-confirmation", locale)


def _confirmation_page(request: Request, locale: str, artefacts, errors=None, status_code: int = 200):
    return render(
        request,
        "remove_list/confirmation.html",
        {"page": _page(locale), "artefacts": artefacts},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/remove-list-confirmation")
def remove_list_confirmation(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    locale = get_locale(request)
    _, artefacts = _selected(request, db, locale)
    if not artefacts:
        return redirect("/remove-list-search", locale)
    return _confirmation_page(request, locale, artefacts)


@router.post("/remove-list-confirmation")
async def remove_list_confirm(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()
    location_id, artefacts = _selected(request, db, locale)
    if not artefacts:
        return redirect("/remove-list-search", locale)

    answer = text_field(form, "confirm")
    if answer not in ("yes", "no"):
        errors = [{"text": _page(locale)["confirmationRequired"], "href": "#confirm"}]
        return _confirmation_page(request, locale, artefacts, errors=errors, status_code=400)

    if answer == "no":
        return redirect(f"/remove-list-search-results?locationId={location_id}", locale)

    artefact_ids = [a["artefactId"] for a in artefacts]
    removed = delete_artefacts(db, artefact_ids)
    request.session.pop("removeListArtefactIds", None)
    request.session["removeListSuccess"] = True
    request.state.audit_metadata = {
        "shouldLog": True,
        "action": "REMOVE_LIST",
        "locationId": location_id,
        "artefactIds": ", ".join(artefact_ids),
        "removed": removed,
    }
    return redirect("/remove-list-success", locale)


@router.get("/remove-list-success")
def remove_list_success(request: Request, user: dict = Depends(require_admin)):
    locale = get_locale(request)
    if not request.session.pop("removeListSuccess", None):
        return redirect("/remove-list-search", locale)
    request.session.pop("removeListLocationId", None)
    return render(request, "remove_list/success.html", {"page": _page(locale)}, locale=locale)
