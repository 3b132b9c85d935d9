"""
FastAPI application entry point
"""
import asyncio

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from cath.api import flat_file as flat_file_route
from cath.api.deps import verify_csrf
from cath.api.pages import audit_log, auth, case_search, delete_court, public, reference_data
from cath.api.pages import reference_data_upload, remove_list, subscriptions, uploads
from cath.api.v1.api import api_router
from cath.core.config import settings
from cath.core.logger import logger
from cath.core.templates import render
from cath.db.database import init_db
from cath.middleware.audit_log import AuditLogMiddleware
from cath.middleware.correlation import CorrelationMiddleware
from cath.services.upload_storage import purge_expired_uploads

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(api_router, prefix="/api/v1")
app.include_router(flat_file_route.router)
for page_router in (
    auth.router,
    public.router,
    uploads.router,
    reference_data.router,
    reference_data_upload.router,
    remove_list.router,
    subscriptions.router,
    case_search.router,
    delete_court.router,
    audit_log.router,
):
    # Form posts must echo the session's CSRF token
    app.include_router(page_router, dependencies=[Depends(verify_csrf)])

# ── Middleware (last added runs first) ────────────────────────────────────────
# Audit logging reads the session, so it sits inside SessionMiddleware
app.add_middleware(AuditLogMiddleware)
app.add_middleware(CorrelationMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE_SECONDS,
    same_site="lax",
    https_only=not settings.DEBUG,
)


# ── Error pages ───────────────────────────────────────────────────────────────

ERROR_TEMPLATES = {
    403: "errors/403.html",
    404: "errors/404.html",
    410: "errors/410.html",
}


def _wants_html(request: Request) -> bool:
    if request.url.path.startswith("/api/"):
        return False
    return "text/html" in request.headers.get("accept", "")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # NotAuthenticatedError
    if exc.status_code in (302, 303) and exc.headers and "Location" in exc.headers:
        return RedirectResponse(exc.headers["Location"], status_code=exc.status_code)

    if _wants_html(request):
        template = ERROR_TEMPLATES.get(exc.status_code)
        if template:
            return render(request, template, status_code=exc.status_code)
        if exc.status_code >= 500:
            return render(request, "errors/500.html", status_code=exc.status_code)

    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if _wants_html(request):
        return render(request, "errors/500.html", status_code=500)
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


# ── Scheduled loops ───────────────────────────────────────────────────────────

async def _pending_upload_cleanup_loop() -> None:
    """Remove staged uploads nobody confirmed."""
    interval = max(1, settings.PENDING_UPLOAD_CLEANUP_INTERVAL_MINUTES) * 60
    while True:
        try:
            await asyncio.sleep(interval)
            removed = purge_expired_uploads()
            if removed:
                logger.info("pending_upload_cleanup: removed %d staged files", removed)
        except asyncio.CancelledError:
            break
        except Exception:
            logger.exception("_pending_upload_cleanup_loop crashed")
            await asyncio.sleep(60)


# ── Startup / Shutdown ────────────────────────────────────────────────────────

@app.on_event("startup")
async def startup_event():
    if settings.DB_AUTO_CREATE:
        init_db()
    logger.info("%s started", settings.APP_NAME)
    app.state.pending_upload_cleanup_task = asyncio.create_task(_pending_upload_cleanup_loop())


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("%s shutdown", settings.APP_NAME)
    task = getattr(app.state, "pending_upload_cleanup_task", None)
    if task:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
