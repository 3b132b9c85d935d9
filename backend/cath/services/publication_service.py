# cath/services/publication_service.py

"""
Shared publication path for manual uploads, non-strategic uploads and the
JSON API: persist the artefact and its files, then notify subscribers.
"""
import json
import os
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from cath.core.logger import logger, redact_emails
from cath.db.database import SessionLocal
from cath.db.models import Artefact
from cath.list_types.registry import (
    convert_excel_for_list_type,
    get_list_type,
    has_converter_for_list_type,
)
from cath.services import file_storage
from cath.services.artefact_service import create_artefact, get_artefact_by_id
from cath.services.case_search_service import index_artefact
from cath.services.location_service import get_location_by_id
from cath.services.notification_service import PublicationEvent, send_publication_notifications


def process_publication(
    db: Session,
    artefact: Artefact,
    json_data: Any = None,
    pdf: Optional[bytes] = None,
    skip_notifications: bool = False,
) -> Dict[str, Any]:
    """
    Notify the publication's subscribers. Never raises: failures are
    logged and reported as success False.
    """
    artefact_id = str(artefact.artefact_id)
    if skip_notifications:
        return {"success": True, "skipped": True}

    try:
        location_id = int(str(artefact.location_id).strip())
    except ValueError:
        logger.error("Invalid location ID for notifications: %s", artefact.location_id)
        return {"success": False, "error": "Invalid location ID"}

    try:
        location = get_location_by_id(db, location_id)
        if location is None:
            logger.warning("Location %s not found for notifications", location_id)
            return {"success": False, "error": "Location not found"}

        list_type = get_list_type(artefact.list_type_id)
        event = PublicationEvent(
            publication_id=artefact_id,
            location_id=str(location_id),
            location_name=location.name,
            hearing_list_name=(
                list_type.english_friendly_name if list_type else f"LIST_TYPE_{artefact.list_type_id}"
            ),
            publication_date=artefact.content_date,
            list_type_id=artefact.list_type_id,
            json_data=json_data,
            pdf_data=pdf,
            pdf_file_name=artefact.source_file_name if pdf is not None else None,
            language=artefact.language.value if artefact.language else None,
        )
        result = send_publication_notifications(db, event)
    except Exception as e:
        logger.error("Failed to send notifications for %s: %s", artefact_id, redact_emails(str(e)))
        return {"success": False, "error": redact_emails(str(e))}

    if result["errors"]:
        logger.error(
            "Notification errors for %s (%d): %s",
            artefact_id, len(result["errors"]), [redact_emails(e) for e in result["errors"]],
        )
    return {
        "success": True,
        "totalSubscriptions": result["totalSubscriptions"],
        "sent": result["sent"],
        "failed": result["failed"],
        "skipped": result["skipped"],
    }


def run_publication_processing(artefact_id: str, json_data: Any = None, pdf: Optional[bytes] = None) -> None:
    """
    BackgroundTask entry point. Opens its own session because the request's
    session is closed once the response has been sent.
    """
    db = SessionLocal()
    try:
        artefact = get_artefact_by_id(db, artefact_id)
        if artefact is None:
            logger.error("run_publication_processing: artefact %s not found", artefact_id)
            return
        process_publication(db, artefact, json_data=json_data, pdf=pdf)
    finally:
        db.close()


def create_publication(
    db: Session,
    data: Dict[str, Any],
    file_name: Optional[str] = None,
    file_data: Optional[bytes] = None,
    json_data: Any = None,
) -> Dict[str, Any]:
    """
    Upsert the artefact, replace its stored files and, for non-strategic
    Excel uploads, store the converted <artefactId>.json alongside. The
    case search index is rebuilt from the JSON payload.

    Returns {artefactId, jsonData, pdf} so the caller can hand the last two
    to process_publication.
    """
    artefact_id = create_artefact(db, data)

    file_storage.delete_files(artefact_id)
    if file_data is not None and file_name:
        file_storage.save_file(artefact_id, file_name, file_data)
        ext = os.path.splitext(file_name)[1].lower()
        if ext == ".json" and json_data is None:
            json_data = json.loads(file_data.decode("utf-8"))
    elif json_data is not None:
        file_storage.save_file(artefact_id, f"{artefact_id}.json", json.dumps(json_data).encode("utf-8"))

    list_type = get_list_type(data["listTypeId"])
    is_excel = bool(file_name) and file_name.lower().endswith(".xlsx")
    if list_type and list_type.is_non_strategic and is_excel and has_converter_for_list_type(list_type.id):
        json_data = convert_excel_for_list_type(list_type.id, file_data)
        file_storage.save_file(artefact_id, f"{artefact_id}.json", json.dumps(json_data).encode("utf-8"))

    index_artefact(db, artefact_id, data["listTypeId"], json_data)

    pdf = file_data if file_name and file_name.lower().endswith(".pdf") else None
    logger.info(
        "Publication %s stored (list type %s, location %s)", artefact_id, data["listTypeId"], data["locationId"]
    )
    return {"artefactId": artefact_id, "jsonData": json_data, "pdf": pdf}
