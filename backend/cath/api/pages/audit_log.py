# cath/api/pages/audit_log.py

"""
System admin audit log viewer.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from cath.api.deps import require_system_admin
from cath.core.i18n import get_locale, get_translations
from cath.core.templates import render
from cath.db.database import get_db
from cath.services.audit_service import get_audit_log_by_id, get_audit_logs, get_available_actions
from cath.utils.validators import parse_date, validate_email, validate_user_id

router = APIRouter()


@router.get("/audit-log-list")
def audit_log_list(
    request: Request,
    email: str = "",
    userId: str = "",
    day: str = "",
    month: str = "",
    year: str = "",
    actions: List[str] = Query(default=[]),
    page: int = 1,
    user: dict = Depends(require_system_admin),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    t = get_translations(locale)["auditLog"]
    email, user_id = email.strip(), userId.strip()
    actions = [a for a in actions if a]

    errors = []
    filters = {"actions": actions}
    if email:
        if validate_email(email):
            filters["email"] = email
        else:
            errors.append({"text": t["invalidEmail"], "href": "#email"})
    if user_id:
        if validate_user_id(user_id):
            filters["userId"] = user_id
        else:
            errors.append({"text": t["invalidUserId"], "href": "#userId"})
    if day or month or year:
        filter_date = parse_date(day, month, year)
        if filter_date:
            filters["date"] = filter_date
        else:
            errors.append({"text": t["invalidDate"], "href": "#date"})

    # invalid filters show an empty table rather than everything
    if errors:
        result = {"logs": [], "totalCount": 0, "currentPage": 1, "pageSize": 20, "totalPages": 0}
    else:
        result = get_audit_logs(db, filters, page=page)

    return render(
        request,
        "audit_log/list.html",
        {
            "page": t,
            "result": result,
            "availableActions": get_available_actions(db),
            "filters": {
                "email": email,
                "userId": user_id,
                "day": day,
                "month": month,
                "year": year,
                "actions": actions,
            },
        },
        errors=errors,
        locale=locale,
    )


@router.get("/audit-log-detail")
def audit_log_detail(
    request: Request,
    id: Optional[str] = None,
    user: dict = Depends(require_system_admin),
    db: Session = Depends(get_db),
):
    locale = get_locale(request)
    t = get_translations(locale)["auditLog"]
    if not id:
        return PlainTextResponse("Missing id", status_code=400)

    log = get_audit_log_by_id(db, id)
    if log is None:
        return render(request, "audit_log/detail.html", {"page": t, "log": None}, status_code=404, locale=locale)
    return render(request, "audit_log/detail.html", {"page": t, "log": log}, locale=locale)
