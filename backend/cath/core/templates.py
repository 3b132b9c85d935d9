# cath/core/templates.py

import os
from typing import Any, Dict, List, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request

from cath.core.i18n import get_locale, get_translations
from cath.core.security import get_csrf_token
from cath.utils.helpers import format_date, format_short_date, format_timestamp

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")
templates = Jinja2Templates(directory=TEMPLATES_DIR)

templates.env.filters["format_date"] = format_date
templates.env.filters["short_date"] = format_short_date
templates.env.filters["timestamp"] = format_timestamp


def render(
    request: Request,
    name: str,
    context: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
    errors: Optional[List[Dict[str, str]]] = None,
    locale: Optional[str] = None,
):
    """
    Render a GOV.UK page. Errors are shown in the error summary and also
    recorded on request.state for the audit log middleware.
    """
    locale = locale or get_locale(request)
    t = get_translations(locale)
    session = request.scope.get("session") or {}

    ctx: Dict[str, Any] = {
        "locale": locale,
        "t": t,
        "common": t["common"],
        "user": session.get("user"),
        "current_path": request.url.path,
        "errors": errors or [],
        "csrf_token": get_csrf_token(request),
    }
    ctx.update(context or {})

    if errors:
        request.state.audit_render = {"errors": [e.get("text", "") for e in errors]}

    return templates.TemplateResponse(request, name, ctx, status_code=status_code)
