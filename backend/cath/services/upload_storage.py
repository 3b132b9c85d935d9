# cath/services/upload_storage.py

"""
Staging area for uploads waiting on the summary/confirm step.

Each pending upload is two files under UPLOAD_STAGING_PATH: the raw bytes
(<uploadId>.upload) and a metadata sidecar (<uploadId>.json).
"""
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from cath.core.config import settings
from cath.core.logger import logger
from cath.db.schemas import DateInput, PendingUploadMetadata
from cath.utils.validators import is_valid_uuid


def _staging_dir() -> Path:
    path = Path(settings.UPLOAD_STAGING_PATH).resolve()
    path.mkdir(parents=True, exist_ok=True)
    return path


def _date_input(value: Any) -> DateInput:
    value = value or {}
    return DateInput(
        day=str(value.get("day") or ""),
        month=str(value.get("month") or ""),
        year=str(value.get("year") or ""),
    )


def store_pending_upload(
    file_data: bytes,
    file_name: str,
    file_type: str,
    form: Dict[str, Any],
) -> str:
    """Stage the file and its form data; returns the upload id."""
    upload_id = str(uuid.uuid4())
    metadata = PendingUploadMetadata(
        uploadId=upload_id,
        fileName=file_name,
        fileType=file_type or "",
        locationId=str(form.get("locationId") or ""),
        listType=str(form.get("listType") or ""),
        hearingStartDate=_date_input(form.get("hearingStartDate")),
        sensitivity=str(form.get("sensitivity") or ""),
        language=str(form.get("language") or ""),
        displayFrom=_date_input(form.get("displayFrom")),
        displayTo=_date_input(form.get("displayTo")),
        uploadedAt=datetime.utcnow(),
    )

    staging = _staging_dir()
    (staging / f"{upload_id}.upload").write_bytes(file_data)
    (staging / f"{upload_id}.json").write_text(metadata.model_dump_json(), encoding="utf-8")
    logger.info("Staged pending upload %s (%d bytes)", upload_id, len(file_data))
    return upload_id


def get_pending_upload(upload_id: Optional[str]) -> Optional[Tuple[PendingUploadMetadata, bytes]]:
    if not is_valid_uuid(upload_id):
        return None

    staging = _staging_dir()
    meta_path = staging / f"{upload_id}.json"
    data_path = staging / f"{upload_id}.upload"
    if not meta_path.exists() or not data_path.exists():
        return None

    try:
        metadata = PendingUploadMetadata.model_validate_json(meta_path.read_text(encoding="utf-8"))
    except ValidationError:
        logger.warning("Discarding unreadable pending upload metadata %s", upload_id)
        return None
    return metadata, data_path.read_bytes()


def delete_pending_upload(upload_id: Optional[str]) -> None:
    if not is_valid_uuid(upload_id):
        return
    staging = _staging_dir()
    for suffix in (".upload", ".json"):
        (staging / f"{upload_id}{suffix}").unlink(missing_ok=True)


def purge_expired_uploads(ttl_minutes: Optional[int] = None) -> int:
    """Remove staged files older than the TTL; returns the number of files removed."""
    ttl = (ttl_minutes if ttl_minutes is not None else settings.PENDING_UPLOAD_TTL_MINUTES) * 60
    cutoff = time.time() - ttl
    removed = 0
    for path in _staging_dir().iterdir():
        if path.is_file() and path.stat().st_mtime < cutoff:
            path.unlink(missing_ok=True)
            removed += 1
    return removed
