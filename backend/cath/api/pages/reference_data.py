# cath/api/pages/reference_data.py

"""
System admin pages for adding jurisdictions, regions and sub-jurisdictions.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_system_admin
from cath.api.pages.common import redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import get_db
from cath.services.location_service import (
    create_jurisdiction,
    create_region,
    create_sub_jurisdiction,
    get_all_jurisdictions,
)
from cath.services.reference_data_validation import (
    validate_jurisdiction_data,
    validate_region_data,
    validate_sub_jurisdiction_data,
)

router = APIRouter()

# translations section, form path, validator, creator
ENTITIES = {
    "jurisdiction": ("addJurisdiction", "/add-jurisdiction", validate_jurisdiction_data, create_jurisdiction),
    "region": ("addRegion", "/add-region", validate_region_data, create_region),
}


def _form_page(request: Request, entity: str, data=None, errors=None, status_code: int = 200):
    section, path, _, _ = ENTITIES[entity]
    t = get_translations(get_locale(request))
    return render(
        request,
        "reference_data/add_entity.html",
        {"page": t[section], "path": path, "data": data or {}},
        status_code=status_code,
        errors=errors,
    )


async def _submit(request: Request, db: Session, entity: str):
    _, path, validate, create = ENTITIES[entity]
    form = await request.form()
    data = {"name": text_field(form, "name"), "welshName": text_field(form, "welshName")}

    errors = validate(db, data)
    if errors:
        return _form_page(request, entity, data, errors, status_code=400)

    created = create(db, data["name"], data["welshName"])
    logger.info("Added %s %r", entity, created.name)
    request.state.audit_metadata = {"shouldLog": True, "action": f"ADD_{entity.upper()}"}
    return redirect(f"{path}-success", get_locale(request))


def _success_page(request: Request, entity: str):
    section, path, _, _ = ENTITIES[entity]
    t = get_translations(get_locale(request))
    return render(request, "reference_data/success.html", {"page": t[section], "path": path})


# ============================================================================
# Jurisdiction
# ============================================================================

@router.get("/add-jurisdiction")
def add_jurisdiction_form(request: Request, user: dict = Depends(require_system_admin)):
    return _form_page(request, "jurisdiction")


@router.post("/add-jurisdiction")
async def add_jurisdiction(request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)):
    return await _submit(request, db, "jurisdiction")


@router.get("/add-jurisdiction-success")
def add_jurisdiction_success(request: Request, user: dict = Depends(require_system_admin)):
    return _success_page(request, "jurisdiction")


# ============================================================================
# Region
# ============================================================================

@router.get("/add-region")
def add_region_form(request: Request, user: dict = Depends(require_system_admin)):
    return _form_page(request, "region")


@router.post("/add-region")
async def add_region(request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)):
    return await _submit(request, db, "region")


@router.get("/add-region-success")
def add_region_success(request: Request, user: dict = Depends(require_system_admin)):
    return _success_page(request, "region")


# ============================================================================
# Sub-jurisdiction
# ============================================================================

def _sub_jurisdiction_page(request: Request, db: Session, data=None, errors=None, status_code: int = 200):
    t = get_translations(get_locale(request))
    locale = get_locale(request)
    jurisdictions = [
        {"value": str(j.jurisdiction_id), "text": j.welsh_name if locale == "cy" else j.name}
        for j in get_all_jurisdictions(db)
    ]
    return render(
        request,
        "reference_data/add_sub_jurisdiction.html",
        {"page": t["addSubJurisdiction"], "jurisdictions": jurisdictions, "data": data or {}},
        status_code=status_code,
        errors=errors,
    )


@router.get("/add-sub-jurisdiction")
def add_sub_jurisdiction_form(
    request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)
):
    return _sub_jurisdiction_page(request, db)


@router.post("/add-sub-jurisdiction")
async def add_sub_jurisdiction(
    request: Request, user: dict = Depends(require_system_admin), db: Session = Depends(get_db)
):
    form = await request.form()
    data = {
        "jurisdictionId": text_field(form, "jurisdictionId"),
        "name": text_field(form, "name"),
        "welshName": text_field(form, "welshName"),
    }

    errors = validate_sub_jurisdiction_data(db, data)
    if errors:
        return _sub_jurisdiction_page(request, db, data, errors, status_code=400)

    created = create_sub_jurisdiction(db, int(data["jurisdictionId"]), data["name"], data["welshName"])
    logger.info("Added sub-jurisdiction %r to jurisdiction %s", created.name, created.jurisdiction_id)
    request.state.audit_metadata = {"shouldLog": True, "action": "ADD_SUB_JURISDICTION"}
    return redirect("/add-sub-jurisdiction-success", get_locale(request))


@router.get("/add-sub-jurisdiction-success")
def add_sub_jurisdiction_success(request: Request, user: dict = Depends(require_system_admin)):
    t = get_translations(get_locale(request))
    return render(
        request,
        "reference_data/success.html",
        {"page": t["addSubJurisdiction"], "path": "/add-sub-jurisdiction"},
    )
