# cath/api/pages/subscriptions.py

"""
Verified user email subscription pages.

Courts and cases chosen while adding subscriptions wait in the session
(pendingSubscriptions, pendingCaseSubscriptions) until the user confirms
them on /pending-subscriptions. List type subscriptions have their own
three-step flow: list types, language, confirm.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from cath.api.deps import require_verified
from cath.api.pages.common import list_field, redirect, text_field
from cath.core.i18n import get_locale, get_translations
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import get_db
from cath.db.models import ListTypeLanguage, SearchType
from cath.list_types.registry import LIST_TYPES, friendly_name, get_list_type
from cath.services.location_service import get_all_locations, get_location_by_id, location_display_name
from cath.services.subscription_service import (
    create_case_subscription,
    create_list_type_subscriptions,
    delete_list_type_subscription,
    delete_subscriptions_by_ids,
    get_case_subscriptions_by_user_id,
    get_court_subscriptions_by_user_id,
    get_list_type_subscriptions_by_user_id,
    get_subscription_by_id,
    get_subscription_details_for_confirmation,
    remove_subscription,
    replace_user_subscriptions,
)

router = APIRouter()

VIEWS = ("all", "court", "case")


def _view(value: Optional[str]) -> str:
    return value if value in VIEWS else "all"


def _subscriptions(db: Session, user: dict, locale: str):
    return (
        get_court_subscriptions_by_user_id(db, user["id"], locale),
        get_case_subscriptions_by_user_id(db, user["id"], locale),
    )


# ============================================================================
# Management
# ============================================================================

@router.get("/subscription-management")
def subscription_management(
    request: Request,
    view: Optional[str] = None,
    user: dict = Depends(require_verified),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    courts, cases = _subscriptions(db, user, locale)
    return render(
        request,
        "subscriptions/management.html",
        {
            "page": get_translations(locale)["subscriptionManagement"],
            "tabs": get_translations(locale)["subscriptionManagement"],
            "selectable": False,
            "view": _view(view),
            "courtSubscriptions": courts,
            "caseSubscriptions": cases,
            "listTypeSubscriptions": [
                dict(sub, languageLabel=_language_label(sub["language"], locale))
                for sub in get_list_type_subscriptions_by_user_id(db, user["id"], locale)
            ],
            "updated": request.session.pop("subscriptionsUpdated", None),
        },
        locale=locale,
    )


def _add_page(request: Request, db: Session, user: dict, locale: str, errors=None, status_code: int = 200):
    subscribed = {str(s["locationId"]) for s in get_court_subscriptions_by_user_id(db, user["id"], locale)}
    pending = set(request.session.get("pendingSubscriptions") or [])
    locations = [
        {
            "value": str(loc.location_id),
            "text": location_display_name(loc, locale),
            "checked": str(loc.location_id) in subscribed or str(loc.location_id) in pending,
        }
        for loc in get_all_locations(db, locale)
    ]
    return render(
        request,
        "subscriptions/add.html",
        {"page": get_translations(locale)["subscriptionAdd"], "locations": locations},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


# ============================================================================
# Add: choose a method
# ============================================================================

ADD_METHODS = {
    "court": "/subscription-add",
    "caseName": "/case-name-search",
    "caseNumber": "/case-number-search",
    "listType": "/subscription-list-types",
}


def _add_method_page(request: Request, locale: str, errors=None, status_code: int = 200):
    page = get_translations(locale)["subscriptionAddMethod"]
    options = [{"value": key, "text": page[key]} for key in ADD_METHODS]
    return render(
        request,
        "subscriptions/add_method.html",
        {"page": page, "options": options},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/subscription-add-method")
def subscription_add_method_form(request: Request, user: dict = Depends(require_verified)):
    return _add_method_page(request, get_locale(request))


@router.post("/subscription-add-method")
async def subscription_add_method(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    form = await request.form()
    method = text_field(form, "subscriptionMethod")
    if method not in ADD_METHODS:
        errors = [{
            "text": get_translations(locale)["subscriptionAddMethod"]["errorNoSelection"],
            "href": "#subscriptionMethod",
        }]
        return _add_method_page(request, locale, errors=errors, status_code=400)
    return redirect(ADD_METHODS[method], locale)


# ============================================================================
# Add by court, then confirm everything pending
# ============================================================================

@router.get("/subscription-add")
def subscription_add_form(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    return _add_page(request, db, user, get_locale(request))


@router.post("/subscription-add")
async def subscription_add(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()
    location_ids = [loc for loc in list_field(form, "locationIds") if get_location_by_id(db, loc) is not None]
    if not location_ids:
        errors = [{"text": get_translations(locale)["subscriptionAdd"]["errorNoSelection"], "href": "#locationIds"}]
        return _add_page(request, db, user, locale, errors=errors, status_code=400)

    pending = list(request.session.get("pendingSubscriptions") or [])
    pending.extend(loc for loc in location_ids if loc not in pending)
    request.session["pendingSubscriptions"] = pending
    return redirect("/pending-subscriptions", locale)


def _pending(request: Request, db: Session, locale: str):
    """(locations sorted by name, cases sorted by case name) waiting in the session"""
    locations = []
    for location_id in request.session.get("pendingSubscriptions") or []:
        location = get_location_by_id(db, location_id)
        if location is not None:
            locations.append({"locationId": str(location.location_id), "name": location_display_name(location, locale)})
    cases = list(request.session.get("pendingCaseSubscriptions") or [])
    locations.sort(key=lambda loc: loc["name"].lower())
    cases.sort(key=lambda case: (case.get("caseName") or case.get("caseNumber") or "").lower())
    return locations, cases


def _pending_page(request: Request, db: Session, locale: str, errors=None, status_code: int = 200):
    page = get_translations(locale)["pendingSubscriptions"]
    locations, cases = _pending(request, db, locale)
    if not locations and not cases and not errors:
        errors = [{"text": page["errorAtLeastOne"], "href": "#pending"}]
    return render(
        request,
        "subscriptions/pending.html",
        {"page": page, "locations": locations, "cases": cases, "total": len(locations) + len(cases)},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/pending-subscriptions")
def pending_subscriptions(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    return _pending_page(request, db, get_locale(request))


@router.post("/pending-subscriptions")
async def pending_subscriptions_submit(
    request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    form = await request.form()
    action = text_field(form, "action")

    if action == "remove":
        location_id = text_field(form, "locationId")
        request.session["pendingSubscriptions"] = [
            loc for loc in request.session.get("pendingSubscriptions") or [] if loc != location_id
        ]
        return redirect("/pending-subscriptions", locale)

    if action == "removeCase":
        case_id = text_field(form, "caseId")
        request.session["pendingCaseSubscriptions"] = [
            case for case in request.session.get("pendingCaseSubscriptions") or [] if case["id"] != case_id
        ]
        return redirect("/pending-subscriptions", locale)

    pending_courts = list(request.session.get("pendingSubscriptions") or [])
    pending_cases = list(request.session.get("pendingCaseSubscriptions") or [])
    if not pending_courts and not pending_cases:
        return redirect("/subscription-add", locale)

    courts, cases = _subscriptions(db, user, locale)
    existing_courts = [str(sub["locationId"]) for sub in courts]
    existing_cases = {(sub["searchType"], sub["searchValue"]) for sub in cases}
    try:
        replace_user_subscriptions(db, user["id"], existing_courts + pending_courts)
        for case in pending_cases:
            if (case["searchType"], case["searchValue"]) in existing_cases:
                continue
            create_case_subscription(
                db,
                user["id"],
                SearchType(case["searchType"]),
                case["searchValue"],
                case_name=case.get("caseName"),
                case_number=case.get("caseNumber"),
            )
    except ValueError as e:
        return _pending_page(request, db, locale, errors=[{"text": str(e), "href": "#pending"}], status_code=400)

    logger.info(
        "User %s confirmed %d court and %d case subscriptions", user["id"], len(pending_courts), len(pending_cases)
    )
    request.session.pop("pendingSubscriptions", None)
    request.session.pop("pendingCaseSubscriptions", None)
    request.session["subscriptionConfirmed"] = True
    return redirect("/subscription-confirmed", locale)


@router.get("/subscription-confirmed")
def subscription_confirmed(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    if not request.session.pop("subscriptionConfirmed", None):
        return redirect("/subscription-management", locale)
    return render(
        request,
        "subscriptions/confirmed.html",
        {"page": get_translations(locale)["subscriptionConfirmed"]},
        locale=locale,
    )


# ============================================================================
# Add by list type
# ============================================================================

LANGUAGE_OPTIONS = (
    (ListTypeLanguage.ENGLISH, "english"),
    (ListTypeLanguage.WELSH, "welsh"),
    (ListTypeLanguage.BOTH, "both"),
)


def _list_type_session(request: Request) -> dict:
    return dict(request.session.get("listTypeSubscription") or {})


def _list_types_page(request: Request, locale: str, errors=None, status_code: int = 200):
    selected = {str(i) for i in _list_type_session(request).get("selectedListTypeIds") or []}
    grouped: dict = {}
    for list_type in sorted(LIST_TYPES, key=lambda lt: friendly_name(lt, locale).lower()):
        name = friendly_name(list_type, locale)
        grouped.setdefault(name[:1].upper(), []).append({
            "value": str(list_type.id),
            "text": name,
            "checked": str(list_type.id) in selected,
        })
    return render(
        request,
        "subscriptions/list_types.html",
        {"page": get_translations(locale)["subscriptionListTypes"], "groupedListTypes": grouped},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/subscription-list-types")
def subscription_list_types_form(request: Request, user: dict = Depends(require_verified)):
    return _list_types_page(request, get_locale(request))


@router.post("/subscription-list-types")
async def subscription_list_types(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    form = await request.form()
    ids = [int(v) for v in list_field(form, "listTypes") if v.isdigit() and get_list_type(int(v)) is not None]
    if not ids:
        errors = [{
            "text": get_translations(locale)["subscriptionListTypes"]["errorNoSelection"],
            "href": "#list-types",
        }]
        return _list_types_page(request, locale, errors=errors, status_code=400)

    state = _list_type_session(request)
    state["selectedListTypeIds"] = ids
    request.session["listTypeSubscription"] = state
    return redirect("/subscription-list-language", locale)


def _language_page(request: Request, locale: str, errors=None, status_code: int = 200):
    page = get_translations(locale)["subscriptionListLanguage"]
    options = [{"value": language.value, "text": page[key]} for language, key in LANGUAGE_OPTIONS]
    return render(
        request,
        "subscriptions/list_language.html",
        {"page": page, "options": options, "selected": _list_type_session(request).get("language") or ""},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/subscription-list-language")
def subscription_list_language_form(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    if not _list_type_session(request).get("selectedListTypeIds"):
        return redirect("/subscription-list-types", locale)
    return _language_page(request, locale)


@router.post("/subscription-list-language")
async def subscription_list_language(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    state = _list_type_session(request)
    if not state.get("selectedListTypeIds"):
        return redirect("/subscription-list-types", locale)

    form = await request.form()
    language = text_field(form, "language")
    if language not in {lang.value for lang, _ in LANGUAGE_OPTIONS}:
        errors = [{
            "text": get_translations(locale)["subscriptionListLanguage"]["errorNoSelection"],
            "href": "#language",
        }]
        return _language_page(request, locale, errors=errors, status_code=400)

    state["language"] = language
    request.session["listTypeSubscription"] = state
    return redirect("/subscription-confirm", locale)


def _language_label(language: str, locale: str) -> str:
    page = get_translations(locale)["subscriptionListLanguage"]
    return page[dict((lang.value, key) for lang, key in LANGUAGE_OPTIONS).get(language, "both")]


def _confirm_page(request: Request, locale: str, state: dict, errors=None, status_code: int = 200):
    list_types = [
        {"id": list_type.id, "name": friendly_name(list_type, locale)}
        for list_type in (get_list_type(i) for i in state.get("selectedListTypeIds") or [])
        if list_type is not None
    ]
    return render(
        request,
        "subscriptions/confirm.html",
        {
            "page": get_translations(locale)["subscriptionConfirm"],
            "listTypes": list_types,
            "languageLabel": _language_label(state.get("language") or "", locale),
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/subscription-confirm")
def subscription_confirm_form(
    request: Request,
    removeListType: Optional[int] = None,
    user: dict = Depends(require_verified),
):
    locale = get_locale(request)
    state = _list_type_session(request)
    if removeListType is not None:
        state["selectedListTypeIds"] = [i for i in state.get("selectedListTypeIds") or [] if i != removeListType]
        request.session["listTypeSubscription"] = state
    if not state.get("language"):
        return redirect("/subscription-list-types", locale)
    if not state.get("selectedListTypeIds"):
        errors = [{"text": get_translations(locale)["subscriptionConfirm"]["errorNoListTypes"], "href": "#list-types"}]
        return _confirm_page(request, locale, state, errors=errors)
    return _confirm_page(request, locale, state)


@router.post("/subscription-confirm")
async def subscription_confirm(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    locale = get_locale(request)
    state = _list_type_session(request)
    if not state.get("selectedListTypeIds") or not state.get("language"):
        return redirect("/subscription-list-types", locale)

    try:
        create_list_type_subscriptions(
            db, user["id"], state["selectedListTypeIds"], ListTypeLanguage(state["language"])
        )
    except ValueError as e:
        return _confirm_page(request, locale, state, errors=[{"text": str(e), "href": "#list-types"}], status_code=400)

    request.session.pop("listTypeSubscription", None)
    request.session["subscriptionConfirmed"] = True
    return redirect("/subscription-confirmed", locale)


@router.post("/delete-list-type-subscription")
async def delete_list_type_subscription_submit(
    request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    form = await request.form()
    try:
        delete_list_type_subscription(db, text_field(form, "subscriptionId"), user["id"])
    except ValueError:
        logger.info("User %s tried to remove an unknown list type subscription", user["id"])
        return redirect("/subscription-management", locale)
    request.session["subscriptionsUpdated"] = True
    return redirect("/subscription-management", locale)


# ============================================================================
# Single unsubscribe
# ============================================================================

def _delete_page(request: Request, locale: str, subscription_id: str, errors=None, status_code: int = 200):
    return render(
        request,
        "subscriptions/delete.html",
        {"page": get_translations(locale)["deleteSubscription"], "subscriptionId": subscription_id},
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/delete-subscription")
def delete_subscription_form(
    request: Request,
    subscriptionId: str = "",
    user: dict = Depends(require_verified),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    if get_subscription_by_id(db, subscriptionId, user["id"]) is None:
        return redirect("/subscription-management", locale)
    return _delete_page(request, locale, subscriptionId)


@router.post("/delete-subscription")
async def delete_subscription(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    locale = get_locale(request)
    form = await request.form()
    subscription_id = text_field(form, "subscriptionId")
    if get_subscription_by_id(db, subscription_id, user["id"]) is None:
        return redirect("/subscription-management", locale)

    answer = text_field(form, "unsubscribe-confirm")
    if answer not in ("yes", "no"):
        errors = [{
            "text": get_translations(locale)["deleteSubscription"]["errorNoSelection"],
            "href": "#unsubscribe-confirm",
        }]
        return _delete_page(request, locale, subscription_id, errors=errors, status_code=400)

    if answer == "no":
        return redirect("/subscription-management", locale)

    request.session["pendingUnsubscribe"] = subscription_id
    return redirect("/unsubscribe-confirmation", locale)


@router.get("/unsubscribe-confirmation")
def unsubscribe_confirmation(request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)):
    locale = get_locale(request)
    subscription_id = request.session.pop("pendingUnsubscribe", None)
    if not subscription_id:
        return redirect("/subscription-management", locale)

    try:
        remove_subscription(db, subscription_id, user["id"])
    except ValueError:
        return redirect("/subscription-management", locale)

    return render(
        request,
        "subscriptions/unsubscribe_confirmation.html",
        {"page": get_translations(locale)["unsubscribeConfirmation"]},
        locale=locale,
    )


# ============================================================================
# Bulk unsubscribe
# ============================================================================

def _bulk_page(request: Request, db: Session, user: dict, locale: str, view: str, errors=None, status_code=200):
    courts, cases = _subscriptions(db, user, locale)
    return render(
        request,
        "subscriptions/bulk_unsubscribe.html",
        {
            "page": get_translations(locale)["bulkUnsubscribe"],
            "tabs": get_translations(locale)["subscriptionManagement"],
            "view": view,
            "courtSubscriptions": courts,
            "caseSubscriptions": cases,
            "selectable": True,
            "selected": request.session.get("bulkUnsubscribeIds") or [],
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/bulk-unsubscribe")
def bulk_unsubscribe_form(
    request: Request,
    view: Optional[str] = None,
    user: dict = Depends(require_verified),
    db: Session = Depends(get_db),
):
    return _bulk_page(request, db, user, get_locale(request), _view(view))


@router.post("/bulk-unsubscribe")
async def bulk_unsubscribe(
    request: Request,
    view: Optional[str] = None,
    user: dict = Depends(require_verified),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    form = await request.form()
    selected = list_field(form, "subscriptions")
    if not selected:
        errors = [{"text": get_translations(locale)["bulkUnsubscribe"]["errorNoSelection"], "href": "#subscriptions"}]
        return _bulk_page(request, db, user, locale, _view(view), errors=errors, status_code=400)

    request.session["bulkUnsubscribeIds"] = selected
    return redirect("/confirm-bulk-unsubscribe", locale)


def _confirm_bulk_page(request: Request, locale: str, subscriptions, errors=None, status_code: int = 200):
    return render(
        request,
        "subscriptions/confirm_bulk_unsubscribe.html",
        {
            "page": get_translations(locale)["confirmBulkUnsubscribe"],
            "tabs": get_translations(locale)["subscriptionManagement"],
            "subscriptions": subscriptions,
        },
        status_code=status_code,
        errors=errors,
        locale=locale,
    )


@router.get("/confirm-bulk-unsubscribe")
def confirm_bulk_unsubscribe_form(
    request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    ids = request.session.get("bulkUnsubscribeIds") or []
    subscriptions = get_subscription_details_for_confirmation(db, ids, user["id"], locale)
    if not subscriptions:
        return redirect("/bulk-unsubscribe", locale)
    return _confirm_bulk_page(request, locale, subscriptions)


@router.post("/confirm-bulk-unsubscribe")
async def confirm_bulk_unsubscribe(
    request: Request, user: dict = Depends(require_verified), db: Session = Depends(get_db)
):
    locale = get_locale(request)
    form = await request.form()
    ids = request.session.get("bulkUnsubscribeIds") or []
    if not ids:
        return redirect("/bulk-unsubscribe", locale)

    answer = text_field(form, "bulk-unsubscribe-choice")
    if answer not in ("yes", "no"):
        subscriptions = get_subscription_details_for_confirmation(db, ids, user["id"], locale)
        errors = [{
            "text": get_translations(locale)["confirmBulkUnsubscribe"]["errorNoSelection"],
            "href": "#bulk-unsubscribe-choice",
        }]
        return _confirm_bulk_page(request, locale, subscriptions, errors=errors, status_code=400)

    if answer == "no":
        request.session.pop("bulkUnsubscribeIds", None)
        return redirect("/subscription-management", locale)

    try:
        removed = delete_subscriptions_by_ids(db, ids, user["id"])
    except ValueError as e:
        subscriptions = get_subscription_details_for_confirmation(db, ids, user["id"], locale)
        return _confirm_bulk_page(
            request, locale, subscriptions, errors=[{"text": str(e), "href": "#"}], status_code=400
        )

    logger.info("User %s removed %d subscriptions", user["id"], removed)
    request.session.pop("bulkUnsubscribeIds", None)
    request.session["bulkUnsubscribeSuccess"] = True
    return redirect("/bulk-unsubscribe-success", locale)


@router.get("/bulk-unsubscribe-success")
def bulk_unsubscribe_success(request: Request, user: dict = Depends(require_verified)):
    locale = get_locale(request)
    if not request.session.pop("bulkUnsubscribeSuccess", None):
        return redirect("/subscription-management", locale)
    return render(
        request,
        "subscriptions/bulk_unsubscribe_success.html",
        {"page": get_translations(locale)["bulkUnsubscribeSuccess"]},
        locale=locale,
    )
