# cath/services/reference_data_service.py

"""
Locations reference data import: preview enrichment and upsert.
"""
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import Location
from cath.services.location_service import get_region_by_name, get_sub_jurisdiction_by_name


def enrich_location_data(db: Session, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Adds jurisdictionNames, derived from each row's sub-jurisdictions."""
    enriched = []
    for row in rows:
        jurisdiction_names: List[str] = []
        for name in row.get("subJurisdictionNames") or []:
            sub_jurisdiction = get_sub_jurisdiction_by_name(db, name)
            if sub_jurisdiction and sub_jurisdiction.jurisdiction:
                jurisdiction_name = sub_jurisdiction.jurisdiction.name
                if jurisdiction_name not in jurisdiction_names:
                    jurisdiction_names.append(jurisdiction_name)
        enriched.append({**row, "jurisdictionNames": jurisdiction_names})
    return enriched


def upsert_locations(db: Session, rows: List[Dict[str, Any]]) -> Dict[str, int]:
    """
    Create or update each location and replace its region and
    sub-jurisdiction links. Runs in one transaction.
    """
    created = updated = 0
    try:
        for row in rows:
            location = db.query(Location).filter(Location.location_id == row["locationId"]).first()
            if location is None:
                location = Location(location_id=row["locationId"], created_at=datetime.utcnow())
                db.add(location)
                created += 1
            else:
                updated += 1

            location.name = row["locationName"]
            location.welsh_name = row["welshLocationName"]
            location.email = row.get("email") or None
            location.contact_no = row.get("contactNo") or None
            location.updated_at = datetime.utcnow()
            location.deleted_at = None

            location.sub_jurisdictions = [
                sj for sj in (get_sub_jurisdiction_by_name(db, n) for n in row.get("subJurisdictionNames") or []) if sj
            ]
            location.regions = [
                r for r in (get_region_by_name(db, n) for n in row.get("regionNames") or []) if r
            ]
            db.flush()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Reference data upsert failed")
        raise

    logger.info("Reference data upload: %d created, %d updated", created, updated)
    return {"created": created, "updated": updated}
