# cath/api/pages/public.py

"""
Public pages: start, court search, A-Z court list, summary of publications,
rendered hearing lists and the flat file viewer.

Every publication page checks the viewer against the artefact's sensitivity
(see services/publication_authorisation.py) before anything is read from
storage.
"""
import json
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from cath.api.pages.common import redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import get_db
from cath.db.models import Artefact
from cath.list_types.registry import (
    LIST_TYPES,
    friendly_name,
    get_list_type,
    get_list_type_by_url_path,
    get_renderer,
)
from cath.services import file_storage
from cath.services.artefact_service import get_artefact_by_id, get_published_artefacts_for_location, is_artefact_live
from cath.services.flat_file_service import (
    build_download_filename,
    get_flat_file,
    get_flat_file_for_display,
)
from cath.services.location_service import (
    get_all_jurisdictions,
    get_all_locations,
    get_all_regions,
    get_location_by_id,
    get_locations_grouped_by_letter,
    location_display_name,
    search_locations,
)
from cath.services.publication_authorisation import can_access_publication_data, filter_publications_for_summary
from cath.utils.exceptions import FlatFileError
from cath.utils.helpers import content_disposition

router = APIRouter()


def artefact_not_found(request: Request, locale: str):
    return render(request, "errors/artefact_not_found.html", status_code=404, locale=locale)


def artefact_expired(request: Request, locale: str):
    return render(request, "errors/410.html", status_code=410, locale=locale)


def access_denied(request: Request, locale: str):
    return render(request, "errors/403.html", status_code=403, locale=locale)


def publication_url(artefact: Artefact) -> str:
    """
    Where the summary page links a publication: the list type's own page
    when it has a renderer (flat files only for non-strategic lists, whose
    Excel upload is converted to JSON), else the flat file viewer, else the
    generic hearing list route.
    """
    list_type = get_list_type(artefact.list_type_id)
    artefact_id = str(artefact.artefact_id)
    renderable = list_type is not None and get_renderer(list_type.id) is not None
    if renderable and (not artefact.is_flat_file or list_type.is_non_strategic):
        return f"/{list_type.url_path}?artefactId={artefact_id}"
    if artefact.is_flat_file:
        return f"/file-publication?artefactId={artefact_id}&locationId={artefact.location_id}"
    return f"/hearing-lists/{artefact.location_id}/{artefact_id}"


@router.get("/")
def start(request: Request, db: Session = Depends(get_db)):
    locale = get_locale(request)
    locations = [
        {"value": str(loc.location_id), "text": location_display_name(loc, locale)}
        for loc in get_all_locations(db, locale)
    ]
    return render(
        request,
        "public/start.html",
        {"page": get_translations(locale)["start"], "locations": locations},
        locale=locale,
    )


# ============================================================================
# Finding a court
# ============================================================================

def _search_page(request: Request, locale: str, query: str = "", results=None, errors=None, status_code: int = 200):
    return render(
        request,
        "public/search.html",
        {"page": get_translations(locale)["search"], "query": query, "results": results or []},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/search")
def search(request: Request, locationId: Optional[str] = None, db: Session = Depends(get_db)):
    locale = get_locale(request)
    location = get_location_by_id(db, locationId) if locationId else None
    return _search_page(request, locale, query=location_display_name(location, locale) if location else "")


@router.post("/search")
async def search_submit(request: Request, db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()

    location_id = text_field(form, "locationId")
    if location_id:
        location = get_location_by_id(db, location_id)
        if location is not None:
            return redirect(f"/summary-of-publications?locationId={location.location_id}", locale)

    query = text_field(form, "location")
    matches = search_locations(db, query, locale) if query else []
    if len(matches) == 1:
        return redirect(f"/summary-of-publications?locationId={matches[0].location_id}", locale)
    if not matches:
        errors = [{"text": get_translations(locale)["search"]["noMatch"], "href": "#location"}]
        return _search_page(request, locale, query=query, errors=errors, status_code=400)

    results = [{"locationId": loc.location_id, "name": location_display_name(loc, locale)} for loc in matches]
    return _search_page(request, locale, query=query, results=results)


def _int_list(values) -> list:
    return [int(v) for v in values if str(v).isdigit()]


@router.get("/courts-tribunals-list")
def courts_tribunals_list(request: Request, db: Session = Depends(get_db)):
    locale = get_locale(request)
    selected_regions = _int_list(request.query_params.getlist("region"))
    selected_jurisdictions = _int_list(request.query_params.getlist("jurisdiction"))

    grouped = get_locations_grouped_by_letter(
        db, locale, region_ids=selected_regions or None, jurisdiction_ids=selected_jurisdictions or None
    )
    regions = [
        {"value": str(r.region_id), "text": r.welsh_name if locale == "cy" else r.name,
         "checked": r.region_id in selected_regions}
        for r in get_all_regions(db)
    ]
    jurisdictions = [
        {"value": str(j.jurisdiction_id), "text": j.welsh_name if locale == "cy" else j.name,
         "checked": j.jurisdiction_id in selected_jurisdictions}
        for j in get_all_jurisdictions(db)
    ]
    return render(
        request,
        "public/courts_tribunals_list.html",
        {
            "page": get_translations(locale)["courtsTribunalsList"],
            "groupedLocations": grouped,
            "regions": sorted(regions, key=lambda item: item["text"].lower()),
            "jurisdictions": sorted(jurisdictions, key=lambda item: item["text"].lower()),
        },
        locale=locale,
    )


# ============================================================================
# Publications
# ============================================================================

@router.get("/summary-of-publications")
def summary_of_publications(request: Request, locationId: Optional[str] = None, db: Session = Depends(get_db)):
    locale = get_locale(request)
    t = get_translations(locale)["summaryOfPublications"]
    if not locationId:
        return redirect("/", locale)

    location = get_location_by_id(db, locationId)
    if location is None:
        return render(request, "errors/404.html", status_code=404, locale=locale)

    user = request.session.get("user")
    artefacts = filter_publications_for_summary(user, get_published_artefacts_for_location(db, location.location_id))
    publications = []
    for artefact in artefacts:
        list_type = get_list_type(artefact.list_type_id)
        publications.append({
            "title": friendly_name(list_type, locale) if list_type else f"List type {artefact.list_type_id}",
            "contentDate": artefact.content_date,
            "language": artefact.language.value,
            "url": publication_url(artefact),
        })

    return render(
        request,
        "public/summary_of_publications.html",
        {"page": t, "courtName": location_display_name(location, locale), "publications": publications},
        locale=locale,
    )


def _render_json_list(request: Request, db: Session, artefact: Artefact, locale: str, query=None):
    artefact_id = str(artefact.artefact_id)
    renderer = get_renderer(artefact.list_type_id)
    stored = file_storage.get_file(artefact_id, ".json")
    if renderer is None or stored is None:
        logger.warning("No renderable JSON for artefact %s", artefact_id)
        return artefact_not_found(request, locale)

    try:
        payload = json.loads(stored[0].decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        logger.exception("Stored JSON for artefact %s is unreadable", artefact_id)
        return artefact_not_found(request, locale)

    location = get_location_by_id(db, artefact.location_id)
    list_type = get_list_type(artefact.list_type_id)
    view = renderer(payload, {
        "locale": locale,
        "courtName": location_display_name(location, locale) if location else "",
        "displayFrom": artefact.display_from,
        "displayTo": artefact.display_to,
        "lastReceivedDate": artefact.last_received_date,
        "listTitle": friendly_name(list_type, locale) if list_type else "",
        "listTypeName": list_type.name if list_type else "",
        "query": query or {},
    })
    return render(
        request,
        view["template"],
        {"page": get_translations(locale)["hearingList"], "artefactId": artefact_id, **view},
        locale=locale,
    )


def list_type_page(request: Request, artefactId: Optional[str] = None, db: Session = Depends(get_db)):
    """/<list type url path>?artefactId=..., one route per list type"""
    locale = get_locale(request)
    list_type = get_list_type_by_url_path(request.url.path.strip("/"))
    if not artefactId:
        return PlainTextResponse("Missing artefactId", status_code=400)

    artefact = get_artefact_by_id(db, artefactId)
    if artefact is None or list_type is None or artefact.list_type_id != list_type.id:
        return artefact_not_found(request, locale)
    if not can_access_publication_data(request.session.get("user"), artefact, list_type):
        return access_denied(request, locale)
    if not is_artefact_live(artefact):
        return artefact_expired(request, locale)

    params = request.query_params
    query = {
        "search": params.get("search"),
        "postcode": params.getlist("postcode"),
        "prosecutor": params.getlist("prosecutor"),
        "page": params.get("page"),
        "sortBy": params.get("sortBy"),
        "sortOrder": params.get("sortOrder"),
    }
    return _render_json_list(request, db, artefact, locale, query)


for _list_type in LIST_TYPES:
    router.add_api_route(f"/{_list_type.url_path}", list_type_page, methods=["GET"], name=_list_type.url_path)


@router.get("/hearing-lists/{locationId}/{artefactId}")
def hearing_list(request: Request, locationId: str, artefactId: str, db: Session = Depends(get_db)):
    locale = get_locale(request)
    artefact = get_artefact_by_id(db, artefactId)
    if artefact is None or str(artefact.location_id) != locationId:
        return artefact_not_found(request, locale)
    if not can_access_publication_data(request.session.get("user"), artefact):
        return access_denied(request, locale)
    if not is_artefact_live(artefact):
        return artefact_expired(request, locale)

    url = publication_url(artefact)
    if not url.startswith("/hearing-lists/"):
        return redirect(url, locale)
    return _render_json_list(request, db, artefact, locale)


@router.get("/file-publication")
def file_publication(
    request: Request,
    artefactId: Optional[str] = None,
    locationId: Optional[str] = None,
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    if not artefactId:
        return PlainTextResponse("Missing artefactId", status_code=400)

    artefact = get_artefact_by_id(db, artefactId)
    if artefact is not None and not can_access_publication_data(request.session.get("user"), artefact):
        return access_denied(request, locale)

    try:
        display = get_flat_file_for_display(db, artefactId, locationId, locale)
    except FlatFileError as e:
        if e.code == FlatFileError.EXPIRED:
            return artefact_expired(request, locale)
        return artefact_not_found(request, locale)

    return render(
        request,
        "public/file_publication.html",
        {"page": get_translations(locale)["hearingList"], "file": display},
        locale=locale,
    )


@router.get("/file-publication-data")
def file_publication_data(request: Request, artefactId: Optional[str] = None, db: Session = Depends(get_db)):
    locale = get_locale(request)
    if not artefactId:
        return PlainTextResponse("Missing artefactId", status_code=400)

    artefact = get_artefact_by_id(db, artefactId)
    if artefact is not None and not can_access_publication_data(request.session.get("user"), artefact):
        return access_denied(request, locale)

    try:
        flat_file = get_flat_file(db, artefactId)
    except FlatFileError as e:
        logger.info("Flat file %s unavailable: %s", artefactId, e.code)
        return artefact_not_found(request, locale)

    artefact = flat_file.artefact

    extension = "." + flat_file.file_name.rsplit(".", 1)[-1].lower() if "." in flat_file.file_name else ""
    file_name = build_download_filename(
        artefact.list_type_id, artefact.content_date, artefact.language, extension, locale
    )

    if flat_file.content_type == "application/pdf":
        media_type, disposition = "application/pdf", "inline"
    elif flat_file.content_type == "application/json":
        media_type, disposition = "application/json", "attachment"
    else:
        media_type, disposition = "application/octet-stream", "attachment"

    return Response(
        content=flat_file.data,
        media_type=media_type,
        headers={"Content-Disposition": content_disposition(disposition, file_name)},
    )
