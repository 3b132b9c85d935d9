# cath/services/case_search_service.py

"""
Case name and case reference search over the artefact_search index. Rows
are written when a publication is stored, from the list type's search
extractor.
"""
import uuid
from typing import Any, Dict, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import ArtefactSearch
from cath.list_types.registry import get_search_extractor


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def index_artefact(db: Session, artefact_id: str, list_type_id: int, json_data: Any) -> int:
    """
    Replace the artefact's search rows with what its list type extracts from
    the payload. Returns the number of rows written.
    """
    artefact_id = _as_uuid(artefact_id)
    db.query(ArtefactSearch).filter(ArtefactSearch.artefact_id == artefact_id).delete(synchronize_session=False)

    extractor = get_search_extractor(list_type_id)
    entries = []
    if extractor is not None and json_data is not None:
        try:
            entries = extractor(json_data)
        except (AttributeError, KeyError, TypeError):
            logger.warning("Could not extract case search entries for artefact %s", artefact_id)
            entries = []

    count = 0
    for case_number, case_name in entries:
        if not case_number and not case_name:
            continue
        db.add(ArtefactSearch(artefact_id=artefact_id, case_number=case_number, case_name=case_name))
        count += 1
    db.commit()
    return count


def _to_dict(row: ArtefactSearch) -> Dict[str, Any]:
    return {
        "id": str(row.id),
        "artefactId": str(row.artefact_id),
        "caseNumber": row.case_number,
        "caseName": row.case_name,
    }


def search_by_case_name(db: Session, case_name: str) -> List[Dict[str, Any]]:
    """Partial, case-insensitive match"""
    case_name = (case_name or "").strip()
    if not case_name:
        raise ValueError("Case name is required")
    rows = (
        db.query(ArtefactSearch)
        .filter(func.lower(ArtefactSearch.case_name).like(f"%{case_name.lower()}%"))
        .order_by(ArtefactSearch.case_name)
        .all()
    )
    return [_to_dict(row) for row in rows]


def search_by_case_reference(db: Session, case_reference: str) -> List[Dict[str, Any]]:
    """Exact match on the case number or URN"""
    case_reference = (case_reference or "").strip()
    if not case_reference:
        raise ValueError("Case reference is required")
    rows = db.query(ArtefactSearch).filter(ArtefactSearch.case_number == case_reference).all()
    return [_to_dict(row) for row in rows]


def get_search_entry(db: Session, entry_id: str) -> Optional[ArtefactSearch]:
    entry_uuid = _as_uuid(entry_id)
    if entry_uuid is None:
        return None
    return db.query(ArtefactSearch).filter(ArtefactSearch.id == entry_uuid).first()


def get_case_numbers_and_names(db: Session, artefact_id: str) -> Tuple[Set[str], Set[str]]:
    """(case numbers, case names) indexed for an artefact, for notification matching"""
    rows = db.query(ArtefactSearch).filter(ArtefactSearch.artefact_id == _as_uuid(artefact_id)).all()
    numbers = {row.case_number for row in rows if row.case_number}
    names = {row.case_name for row in rows if row.case_name}
    return numbers, names
