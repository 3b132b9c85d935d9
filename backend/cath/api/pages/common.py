# cath/api/pages/common.py

"""
Helpers shared by the GOV.UK page routers.
"""
from typing import Any, Dict, List, Optional

from fastapi.responses import RedirectResponse
from starlette.datastructures import FormData, UploadFile

from cath.core.i18n import lng_suffix


def redirect(url: str, locale: Optional[str] = None) -> RedirectResponse:
    """303 so the browser follows with a GET; keeps ?lng=cy when locale is Welsh."""
    if locale:
        url += lng_suffix(locale, "&" if "?" in url else "?")
    return RedirectResponse(url, status_code=303)


def date_field(form: FormData, name: str) -> Dict[str, str]:
    """GOV.UK date input: <name>-day, <name>-month, <name>-year"""
    return {
        "day": str(form.get(f"{name}-day") or "").strip(),
        "month": str(form.get(f"{name}-month") or "").strip(),
        "year": str(form.get(f"{name}-year") or "").strip(),
    }


def text_field(form: FormData, name: str) -> str:
    value = form.get(name)
    return value.strip() if isinstance(value, str) else ""


def list_field(form: FormData, name: str) -> List[str]:
    return [v for v in form.getlist(name) if isinstance(v, str) and v.strip()]


async def read_upload(form: FormData, name: str = "file"):
    """(file_name, bytes, content_type), or (None, None, None) when nothing was chosen"""
    upload: Any = form.get(name)
    if not isinstance(upload, UploadFile) or not upload.filename:
        return None, None, None
    data = await upload.read()
    return upload.filename, data, upload.content_type or ""
