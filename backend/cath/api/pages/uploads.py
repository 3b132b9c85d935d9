# cath/api/pages/uploads.py

"""
Manual upload and non-strategic (Excel) upload flows.

Both are three steps: form -> summary (staged upload) -> success. Errors on
the form step are kept in the session and the browser is redirected back to
the form. Admin pages are English only.
"""
from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from cath.api.deps import require_admin
from cath.api.pages.common import date_field, read_upload, redirect, text_field
from cath.core.i18n import get_translations
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import get_db
from cath.db.models import Language, Provenance, Sensitivity
from cath.list_types.registry import (
    LIST_TYPES,
    convert_excel_for_list_type,
    get_list_type,
    has_converter_for_list_type,
    non_strategic_list_types,
)
from cath.services.location_service import find_location_by_name, get_all_locations, get_location_by_id
from cath.services.publication_service import create_publication, run_publication_processing
from cath.services.upload_storage import delete_pending_upload, get_pending_upload, store_pending_upload
from cath.services.upload_validation import validate_upload_form
from cath.utils.helpers import format_date, format_date_range
from cath.utils.validators import parse_date_input

router = APIRouter()

SENSITIVITY_LABELS = {
    Sensitivity.PUBLIC.value: "Public",
    Sensitivity.PRIVATE.value: "Private",
    Sensitivity.CLASSIFIED.value: "Classified",
}
LANGUAGE_LABELS = {
    Language.ENGLISH.value: "English",
    Language.WELSH.value: "Welsh",
    Language.BILINGUAL.value: "Bilingual",
}


@dataclass(frozen=True)
class UploadFlow:
    path: str
    section: str
    session_key: str
    non_strategic: bool

    @property
    def errors_key(self) -> str:
        return f"{self.session_key}Errors"

    @property
    def form_key(self) -> str:
        return f"{self.session_key}Form"

    @property
    def confirmed_key(self) -> str:
        return f"{self.session_key}Confirmed"

    def list_types(self):
        return non_strategic_list_types() if self.non_strategic else [lt for lt in LIST_TYPES if not lt.is_non_strategic]


MANUAL = UploadFlow("/manual-upload", "manualUpload", "manualUpload", non_strategic=False)
NON_STRATEGIC = UploadFlow("/non-strategic-upload", "nonStrategicUpload", "nonStrategicUpload", non_strategic=True)


def _page_strings(flow: UploadFlow) -> Dict[str, Any]:
    return get_translations("en")[flow.section]


def _options(db: Session, flow: UploadFlow) -> Dict[str, Any]:
    return {
        "locations": [{"value": str(loc.location_id), "text": loc.name} for loc in get_all_locations(db)],
        "listTypes": [{"value": str(lt.id), "text": lt.english_friendly_name} for lt in flow.list_types()],
        "sensitivities": [{"value": k, "text": v} for k, v in SENSITIVITY_LABELS.items()],
        "languages": [{"value": k, "text": v} for k, v in LANGUAGE_LABELS.items()],
    }


def _parse_form(db: Session, form) -> Dict[str, Any]:
    data = {
        "locationId": text_field(form, "locationId"),
        "locationName": text_field(form, "locationName"),
        "listType": text_field(form, "listType"),
        "hearingStartDate": date_field(form, "hearingStartDate"),
        "sensitivity": text_field(form, "sensitivity"),
        "language": text_field(form, "language"),
        "displayFrom": date_field(form, "displayFrom"),
        "displayTo": date_field(form, "displayTo"),
    }
    # no-JS fallback for the court autocomplete
    if not data["locationId"] and len(data["locationName"]) >= 3:
        location = find_location_by_name(db, data["locationName"])
        if location is not None:
            data["locationId"] = str(location.location_id)
    return data


def _summary_rows(db: Session, metadata) -> Dict[str, str]:
    location = get_location_by_id(db, metadata.locationId)
    list_type = get_list_type(metadata.listType)
    return {
        "courtName": location.name if location else metadata.locationId,
        "file": metadata.fileName,
        "listType": list_type.english_friendly_name if list_type else metadata.listType,
        "hearingStartDate": format_date(parse_date_input(metadata.hearingStartDate.model_dump())),
        "sensitivity": SENSITIVITY_LABELS.get(metadata.sensitivity, metadata.sensitivity),
        "language": LANGUAGE_LABELS.get(metadata.language, metadata.language),
        "displayFileDates": format_date_range(
            parse_date_input(metadata.displayFrom.model_dump()),
            parse_date_input(metadata.displayTo.model_dump()),
        ),
    }


def _publication_data(metadata) -> Dict[str, Any]:
    content_date = parse_date_input(metadata.hearingStartDate.model_dump())
    display_from = parse_date_input(metadata.displayFrom.model_dump())
    display_to = parse_date_input(metadata.displayTo.model_dump())
    if not content_date or not display_from or not display_to:
        raise ValueError("Invalid date format")

    return {
        "locationId": metadata.locationId,
        "listTypeId": int(metadata.listType),
        "contentDate": datetime.combine(content_date, time.min),
        "sensitivity": metadata.sensitivity,
        "language": metadata.language,
        "displayFrom": datetime.combine(display_from, time.min),
        # the list stays up for the whole of the last display day
        "displayTo": datetime.combine(display_to, time.max).replace(microsecond=0),
        "isFlatFile": not metadata.fileName.lower().endswith(".json"),
        "provenance": Provenance.MANUAL_UPLOAD.value,
        "noMatch": False,
        "sourceFileName": metadata.fileName,
    }


# ============================================================================
# Handlers (shared by both flows)
# ============================================================================

def _form_get(request: Request, db: Session, flow: UploadFlow):
    errors = request.session.pop(flow.errors_key, None)
    data = request.session.pop(flow.form_key, None) or {}
    return render(
        request,
        "uploads/form.html",
        {"page": _page_strings(flow), "flow": flow, "data": data, **_options(db, flow)},
        errors=errors,
        locale="en",
    )


async def _form_post(request: Request, db: Session, flow: UploadFlow):
    form = await request.form()
    data = _parse_form(db, form)
    file_name, file_data, content_type = await read_upload(form)
    messages = _page_strings(flow)["errorMessages"]

    errors = validate_upload_form(db, data, file_name, file_data, messages, non_strategic=flow.non_strategic)

    if not errors and flow.non_strategic:
        list_type = get_list_type(data["listType"])
        if list_type and has_converter_for_list_type(list_type.id):
            try:
                convert_excel_for_list_type(list_type.id, file_data)
            except ValueError as e:
                errors.append({"text": str(e), "href": "#file"})

    if errors:
        request.session[flow.errors_key] = errors
        request.session[flow.form_key] = data
        return redirect(flow.path)

    upload_id = store_pending_upload(file_data, file_name, content_type, data)
    request.session.pop(flow.errors_key, None)
    request.session.pop(flow.confirmed_key, None)
    return redirect(f"{flow.path}-summary?uploadId={upload_id}")


def _summary_page(request: Request, db: Session, flow: UploadFlow, metadata, errors=None, status_code: int = 200):
    return render(
        request,
        "uploads/summary.html",
        {
            "page": _page_strings(flow),
            "flow": flow,
            "uploadId": metadata.uploadId,
            "rows": _summary_rows(db, metadata),
        },
        status_code=status_code,
        errors=errors,
        locale="en",
    )


def _summary_get(request: Request, db: Session, flow: UploadFlow, upload_id: Optional[str]):
    if not upload_id:
        return PlainTextResponse("Missing uploadId", status_code=400)
    pending = get_pending_upload(upload_id)
    if pending is None:
        return PlainTextResponse("Upload not found", status_code=404)
    return _summary_page(request, db, flow, pending[0])


def _summary_post(
    request: Request,
    db: Session,
    background_tasks: BackgroundTasks,
    flow: UploadFlow,
    upload_id: Optional[str],
):
    if not upload_id:
        return PlainTextResponse("Missing uploadId", status_code=400)
    pending = get_pending_upload(upload_id)
    if pending is None:
        return PlainTextResponse("Upload not found", status_code=404)
    metadata, file_data = pending

    try:
        result = create_publication(db, _publication_data(metadata), metadata.fileName, file_data)
    except Exception as e:
        db.rollback()
        logger.exception("Upload processing error for %s", upload_id)
        errors: List[Dict[str, str]] = [
            {"text": str(e) or "We could not process your upload. Please try again.", "href": "#"}
        ]
        return _summary_page(request, db, flow, metadata, errors=errors)

    background_tasks.add_task(run_publication_processing, result["artefactId"], result["jsonData"], result["pdf"])
    delete_pending_upload(upload_id)

    request.session.pop(flow.form_key, None)
    request.session[flow.confirmed_key] = True
    request.state.audit_metadata = {
        "shouldLog": True,
        "action": flow.path.lstrip("/").replace("-", "_"),
        "artefactId": result["artefactId"],
        "locationId": metadata.locationId,
        "fileName": metadata.fileName,
    }
    return redirect(f"{flow.path}-success")


def _success_get(request: Request, flow: UploadFlow):
    if not request.session.get(flow.confirmed_key):
        return redirect(flow.path)
    return render(request, "uploads/success.html", {"page": _page_strings(flow), "flow": flow}, locale="en")


# ============================================================================
# Manual upload
# ============================================================================

@router.get("/manual-upload")
def manual_upload_form(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return _form_get(request, db, MANUAL)


@router.post("/manual-upload")
async def manual_upload(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return await _form_post(request, db, MANUAL)


@router.get("/manual-upload-summary")
def manual_upload_summary(
    request: Request,
    uploadId: Optional[str] = None,
    user: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _summary_get(request, db, MANUAL, uploadId)


@router.post("/manual-upload-summary")
def manual_upload_confirm(
    request: Request,
    background_tasks: BackgroundTasks,
    uploadId: Optional[str] = None,
    user: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _summary_post(request, db, background_tasks, MANUAL, uploadId)


@router.get("/manual-upload-success")
def manual_upload_success(request: Request, user: dict = Depends(require_admin)):
    return _success_get(request, MANUAL)


# ============================================================================
# Non-strategic upload
# ============================================================================

@router.get("/non-strategic-upload")
def non_strategic_upload_form(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return _form_get(request, db, NON_STRATEGIC)


@router.post("/non-strategic-upload")
async def non_strategic_upload(request: Request, user: dict = Depends(require_admin), db: Session = Depends(get_db)):
    return await _form_post(request, db, NON_STRATEGIC)


@router.get("/non-strategic-upload-summary")
def non_strategic_upload_summary(
    request: Request,
    uploadId: Optional[str] = None,
    user: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _summary_get(request, db, NON_STRATEGIC, uploadId)


@router.post("/non-strategic-upload-summary")
def non_strategic_upload_confirm(
    request: Request,
    background_tasks: BackgroundTasks,
    uploadId: Optional[str] = None,
    user: dict = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _summary_post(request, db, background_tasks, NON_STRATEGIC, uploadId)


@router.get("/non-strategic-upload-success")
def non_strategic_upload_success(request: Request, user: dict = Depends(require_admin)):
    return _success_get(request, NON_STRATEGIC)
