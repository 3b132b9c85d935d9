# cath/api/pages/reference_data_upload.py

"""
Locations reference data CSV upload: upload -> preview -> confirmation.
"""
import math

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_system_admin
from cath.api.pages.common import read_upload, redirect
from cath.core.config import settings
from cath.core.i18n import get_translations
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import get_db
from cath.services.csv_parser import parse_csv
from cath.services.reference_data_service import enrich_location_data, upsert_locations
from cath.services.reference_data_validation import validate_location_data
from cath.services.upload_storage import delete_pending_upload, get_pending_upload, store_pending_upload

router = APIRouter()

ROWS_PER_PAGE = 10
SESSION_KEY = "referenceDataUploadId"


def _page():
    return get_translations("en")["referenceDataUpload"]


def _upload_page(request: Request, errors=None, status_code: int = 200):
    return render(
        request, "reference_data/upload.html", {"page": _page()}, status_code=status_code, errors=errors, locale="en"
    )


def _load_rows(request: Request, db: Session):
    """(rows, errors) for the staged CSV, or (None, errors) when it cannot be used"""
    pending = get_pending_upload(request.session.get(SESSION_KEY))
    if pending is None:
        return None, [{"text": _page()["sessionExpired"], "href": "#file"}]

    result = parse_csv(pending[1])
    if not result.success:
        return None, [{"text": e, "href": "#file"} for e in result.errors]

    errors = validate_location_data(db, result.data)
    if errors:
        return None, errors
    return result.data, []


@router.get("/reference-data-upload")
def reference_data_upload_form(request: Request, user: dict = Depends(require_system_admin)):
    errors = request.session.pop("referenceDataUploadErrors", None)
    return _upload_page(request, errors=errors)


@router.post("/reference-data-upload")
async def reference_data_upload(request: Request, user: dict = Depends(require_system_admin)):
    form = await request.form()
    file_name, file_data, content_type = await read_upload(form)
    page = _page()

    errors = []
    if not file_name:
        errors.append({"text": page["fileRequired"], "href": "#file"})
    else:
        if not file_name.lower().endswith(".csv"):
            errors.append({"text": page["fileType"], "href": "#file"})
        if len(file_data) > settings.MAX_UPLOAD_SIZE:
            errors.append({"text": page["fileSize"], "href": "#file"})

    if errors:
        request.session["referenceDataUploadErrors"] = errors
        return redirect("/reference-data-upload")

    delete_pending_upload(request.session.get(SESSION_KEY))
    request.session[SESSION_KEY] = store_pending_upload(file_data, file_name, content_type, {})
    return redirect("/reference-data-upload-summary")


@router.get("/reference-data-upload-summary")
def reference_data_upload_summary(
    request: Request,
    page: int = 1,
    user: dict = Depends(require_system_admin),
    db: Session = Depends(get_db),
):
    rows, errors = _load_rows(request, db)
    if rows is None:
        return _upload_page(request, errors=errors, status_code=400)

    enriched = enrich_location_data(db, rows)
    total_pages = max(math.ceil(len(enriched) / ROWS_PER_PAGE), 1)
    page = min(max(page, 1), total_pages)
    start = (page - 1) * ROWS_PER_PAGE

    return render(
        request,
        "reference_data/upload_summary.html",
        {
            "page": _page(),
            "rows": enriched[start:start + ROWS_PER_PAGE],
            "totalRows": len(enriched),
            "currentPage": page,
            "totalPages": total_pages,
        },
        locale="en",
    )


@router.post("/reference-data-upload-summary")
def reference_data_upload_confirm(
    request: Request,
    user: dict = Depends(require_system_admin),
    db: Session = Depends(get_db),
):
    rows, errors = _load_rows(request, db)
    if rows is None:
        return _upload_page(request, errors=errors, status_code=400)

    try:
        result = upsert_locations(db, rows)
    except Exception:
        logger.exception("Reference data upload could not be saved")
        return _upload_page(
            request,
            errors=[{"text": "We could not save the reference data. Please try again.", "href": "#file"}],
            status_code=500,
        )

    delete_pending_upload(request.session.pop(SESSION_KEY, None))
    request.session["referenceDataUploadConfirmed"] = True
    request.state.audit_metadata = {
        "shouldLog": True,
        "action": "REFERENCE_DATA_UPLOAD",
        "created": result["created"],
        "updated": result["updated"],
    }
    return redirect("/reference-data-upload-confirmation")


@router.get("/reference-data-upload-confirmation")
def reference_data_upload_confirmation(request: Request, user: dict = Depends(require_system_admin)):
    if not request.session.pop("referenceDataUploadConfirmed", None):
        return redirect("/reference-data-upload")
    return render(request, "reference_data/upload_confirmation.html", {"page": _page()}, locale="en")
