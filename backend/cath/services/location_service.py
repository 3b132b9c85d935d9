# cath/services/location_service.py

"""
Courts and tribunals plus the reference data they hang off:
jurisdictions, sub-jurisdictions and regions.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import Artefact, Jurisdiction, Location, Region, SearchType, SubJurisdiction, Subscription


def _active_locations(db: Session):
    return db.query(Location).filter(Location.deleted_at.is_(None))


def location_display_name(location: Location, locale: str = "en") -> str:
    if locale == "cy" and location.welsh_name:
        return location.welsh_name
    return location.name


def get_location_by_id(db: Session, location_id) -> Optional[Location]:
    try:
        location_id = int(str(location_id).strip())
    except (TypeError, ValueError):
        return None
    return _active_locations(db).filter(Location.location_id == location_id).first()


def get_all_locations(db: Session, locale: str = "en") -> List[Location]:
    locations = _active_locations(db).all()
    return sorted(locations, key=lambda loc: location_display_name(loc, locale).lower())


def search_locations(db: Session, query: str, locale: str = "en") -> List[Location]:
    """Case-insensitive match on either language's name"""
    query = (query or "").strip()
    if not query:
        return []
    pattern = f"%{query.lower()}%"
    locations = (
        _active_locations(db)
        .filter(or_(func.lower(Location.name).like(pattern), func.lower(Location.welsh_name).like(pattern)))
        .all()
    )
    return sorted(locations, key=lambda loc: location_display_name(loc, locale).lower())


def get_locations_grouped_by_letter(
    db: Session,
    locale: str = "en",
    region_ids: Optional[List[int]] = None,
    jurisdiction_ids: Optional[List[int]] = None,
) -> Dict[str, List[Location]]:
    """A-Z court list, optionally narrowed to regions and jurisdictions"""
    grouped: Dict[str, List[Location]] = {}
    for location in get_all_locations(db, locale):
        if region_ids and not any(r.region_id in region_ids for r in location.regions):
            continue
        if jurisdiction_ids and not any(
            sj.jurisdiction_id in jurisdiction_ids for sj in location.sub_jurisdictions
        ):
            continue
        letter = location_display_name(location, locale)[:1].upper()
        grouped.setdefault(letter, []).append(location)
    return grouped


def find_location_by_name(db: Session, name: str) -> Optional[Location]:
    """Exact, case-insensitive match on either language's name (court autocomplete fallback)"""
    name = (name or "").strip().lower()
    if not name:
        return None
    return (
        _active_locations(db)
        .filter(or_(func.lower(Location.name) == name, func.lower(Location.welsh_name) == name))
        .first()
    )


# ============================================================================
# Reference data lookups
# ============================================================================

def get_all_jurisdictions(db: Session) -> List[Jurisdiction]:
    return db.query(Jurisdiction).order_by(Jurisdiction.name).all()


def get_jurisdiction_by_id(db: Session, jurisdiction_id: int) -> Optional[Jurisdiction]:
    return db.query(Jurisdiction).filter(Jurisdiction.jurisdiction_id == jurisdiction_id).first()


def get_all_regions(db: Session) -> List[Region]:
    return db.query(Region).order_by(Region.name).all()


def get_sub_jurisdictions(db: Session, jurisdiction_id: Optional[int] = None) -> List[SubJurisdiction]:
    query = db.query(SubJurisdiction)
    if jurisdiction_id is not None:
        query = query.filter(SubJurisdiction.jurisdiction_id == jurisdiction_id)
    return query.order_by(SubJurisdiction.name).all()


def get_sub_jurisdiction_by_name(db: Session, name: str) -> Optional[SubJurisdiction]:
    return (
        db.query(SubJurisdiction)
        .filter(func.lower(SubJurisdiction.name) == (name or "").strip().lower())
        .first()
    )


def get_region_by_name(db: Session, name: str) -> Optional[Region]:
    return db.query(Region).filter(func.lower(Region.name) == (name or "").strip().lower()).first()


# ============================================================================
# Duplicate checks (case-insensitive)
# ============================================================================

def jurisdiction_name_exists(db: Session, name: str, welsh: bool = False) -> bool:
    column = Jurisdiction.welsh_name if welsh else Jurisdiction.name
    return db.query(Jurisdiction).filter(func.lower(column) == name.strip().lower()).first() is not None


def region_name_exists(db: Session, name: str, welsh: bool = False) -> bool:
    column = Region.welsh_name if welsh else Region.name
    return db.query(Region).filter(func.lower(column) == name.strip().lower()).first() is not None


def sub_jurisdiction_name_exists(db: Session, jurisdiction_id: int, name: str, welsh: bool = False) -> bool:
    column = SubJurisdiction.welsh_name if welsh else SubJurisdiction.name
    return (
        db.query(SubJurisdiction)
        .filter(
            SubJurisdiction.jurisdiction_id == jurisdiction_id,
            func.lower(column) == name.strip().lower(),
        )
        .first()
        is not None
    )


# ============================================================================
# Creation
# ============================================================================

def _next_id(db: Session, column) -> int:
    current = db.query(func.max(column)).scalar()
    return (current or 0) + 1


def create_jurisdiction(db: Session, name: str, welsh_name: str) -> Jurisdiction:
    jurisdiction = Jurisdiction(
        jurisdiction_id=_next_id(db, Jurisdiction.jurisdiction_id),
        name=name.strip(),
        welsh_name=welsh_name.strip(),
    )
    db.add(jurisdiction)
    db.commit()
    db.refresh(jurisdiction)
    logger.info("Created jurisdiction %s (%s)", jurisdiction.jurisdiction_id, jurisdiction.name)
    return jurisdiction


def create_region(db: Session, name: str, welsh_name: str) -> Region:
    region = Region(
        region_id=_next_id(db, Region.region_id),
        name=name.strip(),
        welsh_name=welsh_name.strip(),
    )
    db.add(region)
    db.commit()
    db.refresh(region)
    logger.info("Created region %s (%s)", region.region_id, region.name)
    return region


def create_sub_jurisdiction(db: Session, jurisdiction_id: int, name: str, welsh_name: str) -> SubJurisdiction:
    sub_jurisdiction = SubJurisdiction(
        sub_jurisdiction_id=_next_id(db, SubJurisdiction.sub_jurisdiction_id),
        jurisdiction_id=jurisdiction_id,
        name=name.strip(),
        welsh_name=welsh_name.strip(),
    )
    db.add(sub_jurisdiction)
    db.commit()
    db.refresh(sub_jurisdiction)
    logger.info(
        "Created sub-jurisdiction %s (%s) under jurisdiction %s",
        sub_jurisdiction.sub_jurisdiction_id, sub_jurisdiction.name, jurisdiction_id,
    )
    return sub_jurisdiction


# ============================================================================
# Deletion (soft)
# ============================================================================

def get_location_details(db: Session, location_id) -> Optional[Dict[str, Any]]:
    """Names plus comma-joined jurisdictions and regions for the delete-court confirmation"""
    location = get_location_by_id(db, location_id)
    if location is None:
        return None
    jurisdictions = []
    for sub_jurisdiction in location.sub_jurisdictions:
        name = sub_jurisdiction.jurisdiction.name if sub_jurisdiction.jurisdiction else None
        if name and name not in jurisdictions:
            jurisdictions.append(name)
    return {
        "locationId": location.location_id,
        "name": location.name,
        "welshName": location.welsh_name,
        "jurisdictions": ", ".join(jurisdictions) or "N/A",
        "regions": ", ".join(region.name for region in location.regions) or "N/A",
    }


def has_active_subscriptions(db: Session, location_id: int) -> bool:
    return (
        db.query(Subscription)
        .filter(Subscription.search_type == SearchType.LOCATION_ID, Subscription.search_value == str(location_id))
        .first()
        is not None
    )


def has_active_artefacts(db: Session, location_id: int, now: Optional[datetime] = None) -> bool:
    """Artefacts still due to be displayed (display_to in the future)"""
    now = now or datetime.utcnow()
    return (
        db.query(Artefact)
        .filter(Artefact.location_id == str(location_id), Artefact.display_to > now)
        .first()
        is not None
    )


def soft_delete_location(db: Session, location_id: int) -> Location:
    """
    Mark a court deleted. Raises ValueError when it is unknown or still has
    subscribers or active publications.
    """
    location = get_location_by_id(db, location_id)
    if location is None:
        raise ValueError("Location not found")
    if has_active_subscriptions(db, location.location_id):
        raise ValueError("There are active subscriptions for the given location.")
    if has_active_artefacts(db, location.location_id):
        raise ValueError("There are active artefacts for the given location.")

    location.deleted_at = datetime.utcnow()
    db.commit()
    logger.info("Soft deleted location %s (%s)", location.location_id, location.name)
    return location
