"""
Audit log middleware
====================
Records state-changing requests (POST/PUT/PATCH/DELETE) made by system
admins. The entry is written once, when the response has been sent, so the
outcome (success, validation failure, cancellation) is known.

Handlers can steer what gets logged through request.state:
  audit_metadata  {"shouldLog", "action", "entityInfo", ...extra fields}
  audit_render    set by cath.core.templates.render when a page is rendered
                  with errors
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cath.db.database import SessionLocal
from cath.db.models import UserRole
from cath.services.audit_service import create_audit_log
from cath.utils.helpers import camel_to_title

logger = logging.getLogger(__name__)

METHODS_TO_LOG = {"POST", "PUT", "PATCH", "DELETE"}
ID_FIELDS = ["id", "locationId", "jurisdictionId", "regionId", "userId", "caseId", "artefactId", "subscriptionId"]
CONTROL_KEYS = {"shouldLog", "action", "entityInfo"}
SKIPPED_SESSION_KEYS = {"cookie", "passport", "user", "locale"}


# ============================================================================
# Outcome and action
# ============================================================================

def _session_errors(session: Dict[str, Any]) -> Optional[List[Any]]:
    for key, value in session.items():
        if (key.endswith("Errors") or key.endswith("errors")) and isinstance(value, list) and value:
            return value
    return None


def determine_redirect_outcome(redirect_url: str, request_path: str, session: Optional[Dict[str, Any]]) -> str:
    url = (redirect_url or "").lower()
    clean_url = url.split("?")[0]

    if session and _session_errors(session):
        return "validation_error"

    # intermediate steps of a multi-page flow
    if "-confirm" in url or "-summary" in url or "-check" in url:
        return "other"

    if "dashboard" in url:
        return "cancelled"

    if clean_url == request_path.lower().split("?")[0]:
        return "cancelled"

    return "other"


def generate_action_name(method: str, path: str, metadata: Dict[str, Any]) -> str:
    action = metadata.get("action")
    if action and isinstance(action, str):
        return re.sub(r"[^A-Z0-9_]", "_", action.upper())

    path_part = re.sub(r"^/", "", path).replace("/", "_").replace("-", "_").upper()
    if method == "POST":
        return path_part
    return f"{method}_{path_part}"


# ============================================================================
# Details
# ============================================================================

def extract_entity_info(
    metadata: Dict[str, Any],
    form: Dict[str, Any],
    path_params: Dict[str, Any],
    session: Dict[str, Any],
) -> Optional[str]:
    """
    Human readable description of what was acted on. Sources in priority
    order: explicit metadata, form body, URL params, session objects. Later
    sources overwrite earlier ones that share a key.
    """
    entity_info = metadata.get("entityInfo")
    if entity_info and isinstance(entity_info, str):
        return entity_info

    entities: Dict[str, str] = {}

    for key, value in metadata.items():
        if key in CONTROL_KEYS or value is None or value == "":
            continue
        entities[key.lower()] = f"{key}: {value}"

    for field, label in (("name", "Name"), ("welshName", "Welsh Name"), ("title", "Title")):
        value = form.get(field)
        if isinstance(value, str) and value.strip():
            entities[field.lower()] = f"{label}: {value.strip()}"

    for field in ID_FIELDS:
        value = form.get(field)
        if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value):
            entities[field.lower()] = f"{camel_to_title(field)}: {value}"

    email = form.get("email")
    if isinstance(email, str) and email.strip():
        entities["email"] = f"Email: {email.strip()}"

    for key, value in (path_params or {}).items():
        if value and isinstance(value, str):
            entities[key.lower()] = f"{camel_to_title(key)}: {value}"

    for key, value in (session or {}).items():
        if key in SKIPPED_SESSION_KEYS or not value or not isinstance(value, dict):
            continue
        label = camel_to_title(key)
        name = value.get("name")
        if isinstance(name, str) and name.strip():
            entities[f"{key}_name".lower()] = f"{label}: {name.strip()}"
        if isinstance(value.get("id"), (str, int)):
            entities[f"{key}_id".lower()] = f"{label} ID: {value['id']}"
        if isinstance(value.get("locationId"), (str, int)):
            entities["locationid"] = f"Location ID: {value['locationId']}"
        if isinstance(value.get("fileName"), str):
            entities[f"{key}_filename".lower()] = f"File: {value['fileName']}"

    parts = list(entities.values())
    return ", ".join(parts) if parts else None


def generate_details(
    outcome: str,
    entity_info: Optional[str],
    uploads: List[Dict[str, Any]],
    render_errors: Optional[List[str]] = None,
    session: Optional[Dict[str, Any]] = None,
) -> Optional[str]:
    details: List[str] = []
    if entity_info:
        details.append(entity_info)

    if outcome == "success":
        details.append("Status: Completed successfully")
    elif outcome == "validation_error":
        details.append("Status: Validation failed")
    elif outcome == "cancelled":
        details.append("Status: Action cancelled by user")

    if len(uploads) == 1:
        details.append(f"File uploaded: {uploads[0]['name']} ({uploads[0]['size']} bytes)")
    elif uploads:
        details.append(f"Files uploaded: {', '.join(u['name'] for u in uploads)}")

    if outcome == "validation_error":
        if render_errors:
            details.append(f"Errors: {'; '.join(render_errors)}")
        session_errors = _session_errors(session or {})
        if session_errors:
            texts = [e.get("text", "") if isinstance(e, dict) else str(e) for e in session_errors]
            details.append(f"Errors: {'; '.join(texts)}")

    return "; ".join(details) if details else None


# ============================================================================
# ASGI middleware
# ============================================================================

class AuditLogMiddleware:
    """
    Pure ASGI so the request body can be buffered and replayed to the app,
    and the response status and headers observed without consuming them.
    Must sit inside SessionMiddleware.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in METHODS_TO_LOG:
            await self.app(scope, receive, send)
            return

        session = scope.get("session") or {}
        user = session.get("user")
        path = scope.get("path", "")
        if not user or user.get("role") != UserRole.SYSTEM_ADMIN.value or "/audit-log" in path:
            await self.app(scope, receive, send)
            return

        body = b""
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                break
            body += message.get("body", b"")
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        response: Dict[str, Any] = {"status": 200, "headers": {}, "logged": False}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                response["status"] = message["status"]
                response["headers"] = {
                    k.decode("latin-1").lower(): v.decode("latin-1") for k, v in message.get("headers", [])
                }
            await send(message)
            if message["type"] == "http.response.body" and not message.get("more_body", False):
                if not response["logged"]:
                    response["logged"] = True
                    await self._log(scope, body, user, response)

        await self.app(scope, replay, send_wrapper)

    async def _log(self, scope: Scope, body: bytes, user: Dict[str, Any], response: Dict[str, Any]) -> None:
        try:
            state = scope.get("state") or {}
            metadata = state.get("audit_metadata") or {}
            session = scope.get("session") or {}
            path = scope.get("path", "")
            status = response["status"]
            headers = response["headers"]

            render_errors: Optional[List[str]] = None
            if 300 <= status < 400 and "location" in headers:
                redirect_outcome = determine_redirect_outcome(headers["location"], path, session)
                explicit = metadata.get("shouldLog") is True
                if not explicit and redirect_outcome not in ("validation_error", "cancelled"):
                    return
                outcome = redirect_outcome if redirect_outcome in ("validation_error", "cancelled") else "success"
            elif headers.get("content-type", "").startswith("text/html"):
                render = state.get("audit_render") or {}
                if not render.get("errors"):
                    return
                outcome = "validation_error"
                render_errors = render["errors"]
            else:
                outcome = "success"

            form, uploads = await self._read_form(scope, body)
            entity_info = extract_entity_info(metadata, form, scope.get("path_params") or {}, session)
            details = generate_details(outcome, entity_info, uploads, render_errors, session)
            action = generate_action_name(scope["method"], path, metadata)

            db = SessionLocal()
            try:
                create_audit_log(db, user, action, details)
            finally:
                db.close()
        except Exception:
            logger.exception("Failed to create completion audit log entry")

    @staticmethod
    async def _read_form(scope: Scope, body: bytes):
        content_type = ""
        for key, value in scope.get("headers", []):
            if key == b"content-type":
                content_type = value.decode("latin-1")
        if not body or not (
            content_type.startswith("application/x-www-form-urlencoded")
            or content_type.startswith("multipart/form-data")
        ):
            return {}, []

        async def receive() -> Message:
            return {"type": "http.request", "body": body, "more_body": False}

        form_data = await Request(scope, receive=receive).form()
        try:
            form: Dict[str, Any] = {}
            uploads: List[Dict[str, Any]] = []
            for key, value in form_data.multi_items():
                if isinstance(value, UploadFile):
                    if value.filename:
                        uploads.append({"name": value.filename, "size": value.size or 0})
                    continue
                form.setdefault(key, value)
            return form, uploads
        finally:
            await form_data.close()
