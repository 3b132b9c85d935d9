# cath/services/artefact_service.py

"""
Artefact (publication) persistence.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import Artefact, Language, Provenance, Sensitivity
from cath.list_types.registry import get_list_type
from cath.services import file_storage


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def create_artefact(db: Session, data: Dict[str, Any]) -> str:
    """
    Insert, or supersede the artefact with the same location, list type,
    content date and language. Returns the artefact id.
    """
    location_id = str(data["locationId"])
    list_type_id = int(data["listTypeId"])
    content_date = data["contentDate"]
    language = Language(data["language"])

    existing = (
        db.query(Artefact)
        .filter(
            Artefact.location_id == location_id,
            Artefact.list_type_id == list_type_id,
            Artefact.content_date == content_date,
            Artefact.language == language,
        )
        .first()
    )

    now = datetime.utcnow()
    if existing:
        existing.sensitivity = Sensitivity(data["sensitivity"])
        existing.display_from = data["displayFrom"]
        existing.display_to = data["displayTo"]
        existing.is_flat_file = bool(data.get("isFlatFile", False))
        existing.provenance = Provenance(data.get("provenance") or Provenance.MANUAL_UPLOAD)
        existing.no_match = bool(data.get("noMatch", False))
        existing.source_file_name = data.get("sourceFileName") or existing.source_file_name
        existing.last_received_date = now
        existing.superseded_count = (existing.superseded_count or 0) + 1
        db.commit()
        logger.info(
            "Superseded artefact %s (count=%s)", existing.artefact_id, existing.superseded_count
        )
        return str(existing.artefact_id)

    artefact = Artefact(
        location_id=location_id,
        list_type_id=list_type_id,
        content_date=content_date,
        sensitivity=Sensitivity(data["sensitivity"]),
        language=language,
        display_from=data["displayFrom"],
        display_to=data["displayTo"],
        is_flat_file=bool(data.get("isFlatFile", False)),
        provenance=Provenance(data.get("provenance") or Provenance.MANUAL_UPLOAD),
        no_match=bool(data.get("noMatch", False)),
        source_file_name=data.get("sourceFileName"),
        last_received_date=now,
        superseded_count=0,
    )
    db.add(artefact)
    db.commit()
    db.refresh(artefact)
    logger.info("Created artefact %s for location %s", artefact.artefact_id, location_id)
    return str(artefact.artefact_id)


def get_artefact_by_id(db: Session, artefact_id) -> Optional[Artefact]:
    artefact_uuid = _as_uuid(artefact_id)
    if artefact_uuid is None:
        return None
    return db.query(Artefact).filter(Artefact.artefact_id == artefact_uuid).first()


def get_artefacts_by_ids(db: Session, artefact_ids: List[str]) -> List[Artefact]:
    ids = [u for u in (_as_uuid(a) for a in artefact_ids) if u is not None]
    if not ids:
        return []
    return db.query(Artefact).filter(Artefact.artefact_id.in_(ids)).all()


def get_artefacts_by_location(db: Session, location_id) -> List[Artefact]:
    return (
        db.query(Artefact)
        .filter(Artefact.location_id == str(location_id))
        .order_by(Artefact.content_date.desc())
        .all()
    )


def get_published_artefacts_for_location(db: Session, location_id, now: Optional[datetime] = None) -> List[Artefact]:
    """Artefacts inside their display window"""
    now = now or datetime.utcnow()
    return (
        db.query(Artefact)
        .filter(
            Artefact.location_id == str(location_id),
            Artefact.display_from <= now,
            Artefact.display_to >= now,
        )
        .order_by(Artefact.content_date.desc())
        .all()
    )


def is_artefact_live(artefact: Artefact, now: Optional[datetime] = None) -> bool:
    now = now or datetime.utcnow()
    return artefact.display_from <= now <= artefact.display_to


def get_artefact_summaries_by_location(db: Session, location_id, locale: str = "en") -> List[Dict[str, Any]]:
    """Rows for the remove-list search results table"""
    summaries = []
    for artefact in get_artefacts_by_location(db, location_id):
        list_type = get_list_type(artefact.list_type_id)
        if list_type is None:
            list_type_name = f"List type {artefact.list_type_id}"
        elif locale == "cy":
            list_type_name = list_type.welsh_friendly_name
        else:
            list_type_name = list_type.english_friendly_name
        summaries.append({
            "artefactId": str(artefact.artefact_id),
            "listType": list_type_name,
            "listTypeId": artefact.list_type_id,
            "contentDate": artefact.content_date,
            "displayFrom": artefact.display_from,
            "displayTo": artefact.display_to,
            "language": artefact.language.value,
            "sensitivity": artefact.sensitivity.value,
        })
    return summaries


def delete_artefacts(db: Session, artefact_ids: List[str]) -> int:
    """
    Delete rows and then their stored files; returns the number of rows
    removed. Stored files are removed only after the commit.
    """
    artefacts = get_artefacts_by_ids(db, artefact_ids)
    deleted_ids = [str(artefact.artefact_id) for artefact in artefacts]
    for artefact in artefacts:
        db.delete(artefact)
    db.commit()

    for artefact_id in deleted_ids:
        file_storage.delete_files(artefact_id)
    logger.info("Deleted %d artefacts", len(artefacts))
    return len(artefacts)
