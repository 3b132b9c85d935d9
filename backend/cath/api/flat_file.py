# cath/api/flat_file.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.database import get_db
from cath.db.models import Sensitivity
from cath.services.artefact_service import get_artefact_by_id
from cath.services.flat_file_service import get_flat_file
from cath.services.publication_authorisation import can_access_publication_data
from cath.utils.exceptions import FlatFileError

router = APIRouter()

ERROR_RESPONSES = {
    FlatFileError.NOT_FOUND: (404, "Artefact not found"),
    FlatFileError.EXPIRED: (410, "File has expired"),
    FlatFileError.NOT_FLAT_FILE: (400, "Not a flat file"),
    FlatFileError.FILE_NOT_FOUND: (404, "File not found in storage"),
}


@router.get("/api/flat-file/{artefactId}/download")
def download_flat_file(artefactId: str, request: Request, db: Session = Depends(get_db)):
    """
    Stream a flat-file publication under its stored name. The session user
    must be allowed to see the publication's content.
    """
    if not artefactId.strip():
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    artefact = get_artefact_by_id(db, artefactId)
    if artefact is not None and not can_access_publication_data(request.session.get("user"), artefact):
        logger.info("Flat file download of %s denied", artefactId)
        return JSONResponse({"error": "Access denied"}, status_code=403)

    try:
        flat_file = get_flat_file(db, artefactId)
    except FlatFileError as e:
        status_code, message = ERROR_RESPONSES.get(e.code, (404, "File not found"))
        return JSONResponse({"error": message}, status_code=status_code)
    except Exception:
        logger.exception("Flat file download failed for %s", artefactId)
        return JSONResponse({"error": "File not found"}, status_code=404)

    # Only public lists may sit in shared caches
    public = flat_file.artefact.sensitivity == Sensitivity.PUBLIC
    cache_control = "public, max-age=3600" if public else "private, no-store"
    return Response(
        content=flat_file.data,
        media_type=flat_file.content_type,
        headers={
            "Content-Disposition": f'inline; filename="{flat_file.file_name}"',
            "Cache-Control": cache_control,
        },
    )
