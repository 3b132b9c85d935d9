"""
Email subscription business logic.

Users subscribe to a court or tribunal (LOCATION_ID), to a case
(CASE_NAME / CASE_NUMBER) or to every publication of a list type in a
chosen language. Business-rule failures raise ValueError with a
message the pages show as-is.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import Language, ListTypeLanguage, ListTypeSubscription, Location, SearchType, Subscription
from cath.list_types.registry import get_list_type
from cath.services.location_service import get_location_by_id, location_display_name

MAX_SUBSCRIPTIONS = 50


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _count_for_user(db: Session, user_id) -> int:
    return db.query(Subscription).filter(Subscription.user_id == _as_uuid(user_id)).count()


def _court_dto(sub: Subscription, location: Location, locale: str) -> Dict[str, Any]:
    return {
        "subscriptionId": str(sub.subscription_id),
        "type": "court",
        "courtOrTribunalName": location_display_name(location, locale),
        "locationId": location.location_id,
        "dateAdded": sub.date_added,
    }


def _case_dto(sub: Subscription) -> Dict[str, Any]:
    return {
        "subscriptionId": str(sub.subscription_id),
        "type": "case",
        "caseName": sub.case_name or "",
        "caseNumber": sub.case_number or "",
        "searchType": sub.search_type.value,
        "searchValue": sub.search_value,
        "dateAdded": sub.date_added,
    }


# ============================================================================
# Create
# ============================================================================

def create_subscription(db: Session, user_id, location_id) -> Subscription:
    location = get_location_by_id(db, location_id)
    if location is None:
        raise ValueError("Invalid location ID")

    user_uuid = _as_uuid(user_id)
    existing = (
        db.query(Subscription)
        .filter(
            Subscription.user_id == user_uuid,
            Subscription.search_type == SearchType.LOCATION_ID,
            Subscription.search_value == str(location.location_id),
        )
        .first()
    )
    if existing:
        raise ValueError("You are already subscribed to this court")

    if _count_for_user(db, user_uuid) >= MAX_SUBSCRIPTIONS:
        raise ValueError(f"Maximum {MAX_SUBSCRIPTIONS} subscriptions allowed")

    subscription = Subscription(
        user_id=user_uuid,
        search_type=SearchType.LOCATION_ID,
        search_value=str(location.location_id),
        date_added=datetime.utcnow(),
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


def create_case_subscription(
    db: Session,
    user_id,
    search_type: SearchType,
    search_value: str,
    case_name: Optional[str] = None,
    case_number: Optional[str] = None,
) -> Subscription:
    search_type = SearchType(search_type)
    if search_type == SearchType.LOCATION_ID:
        raise ValueError("Use create_subscription for court subscriptions")
    search_value = (search_value or "").strip()
    if not search_value:
        raise ValueError("Enter a case name or reference number")

    user_uuid = _as_uuid(user_id)
    existing = (
        db.query(Subscription)
        .filter(
            Subscription.user_id == user_uuid,
            Subscription.search_type == search_type,
            Subscription.search_value == search_value,
        )
        .first()
    )
    if existing:
        raise ValueError("You are already subscribed to this case")

    if _count_for_user(db, user_uuid) >= MAX_SUBSCRIPTIONS:
        raise ValueError(f"Maximum {MAX_SUBSCRIPTIONS} subscriptions allowed")

    subscription = Subscription(
        user_id=user_uuid,
        search_type=search_type,
        search_value=search_value,
        case_name=case_name,
        case_number=case_number,
        date_added=datetime.utcnow(),
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    return subscription


def replace_user_subscriptions(db: Session, user_id, location_ids: List[str]) -> Dict[str, int]:
    """
    Make the user's court subscriptions exactly `location_ids`. Everything is
    validated before any row changes.
    """
    user_uuid = _as_uuid(user_id)
    existing = (
        db.query(Subscription)
        .filter(Subscription.user_id == user_uuid, Subscription.search_type == SearchType.LOCATION_ID)
        .all()
    )
    existing_ids = {sub.location_id for sub in existing if sub.location_id is not None}

    wanted: List[int] = []
    for raw in location_ids:
        try:
            value = int(str(raw).strip())
        except ValueError:
            raise ValueError(f"Invalid location ID: {raw}")
        if value not in wanted:
            wanted.append(value)
    wanted_set = set(wanted)

    to_delete = [sub for sub in existing if sub.location_id not in wanted_set]
    to_add = [loc for loc in wanted if loc not in existing_ids]

    if to_add:
        total = _count_for_user(db, user_uuid) - len(to_delete) + len(to_add)
        if total > MAX_SUBSCRIPTIONS:
            raise ValueError(f"Maximum {MAX_SUBSCRIPTIONS} subscriptions allowed")

    invalid = [loc for loc in to_add if get_location_by_id(db, loc) is None]
    if invalid:
        raise ValueError(f"Invalid location ID: {invalid[0]}")

    try:
        for sub in to_delete:
            db.delete(sub)
        for loc in to_add:
            db.add(Subscription(
                user_id=user_uuid,
                search_type=SearchType.LOCATION_ID,
                search_value=str(loc),
                date_added=datetime.utcnow(),
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"added": len(to_add), "removed": len(to_delete)}


# ============================================================================
# Read
# ============================================================================

def get_subscription_by_id(db: Session, subscription_id, user_id) -> Optional[Subscription]:
    sub_uuid = _as_uuid(subscription_id)
    user_uuid = _as_uuid(user_id)
    if sub_uuid is None or user_uuid is None:
        return None
    return (
        db.query(Subscription)
        .filter(Subscription.subscription_id == sub_uuid, Subscription.user_id == user_uuid)
        .first()
    )


def _court_dtos(db: Session, subscriptions: List[Subscription], locale: str) -> List[Dict[str, Any]]:
    dtos = []
    for sub in subscriptions:
        if sub.search_type != SearchType.LOCATION_ID:
            continue
        location = get_location_by_id(db, sub.search_value)
        if location is None:
            continue
        dtos.append(_court_dto(sub, location, locale))
    return dtos


def _user_subscriptions(db: Session, user_id) -> List[Subscription]:
    return (
        db.query(Subscription)
        .filter(Subscription.user_id == _as_uuid(user_id))
        .order_by(Subscription.date_added.desc())
        .all()
    )


def get_court_subscriptions_by_user_id(db: Session, user_id, locale: str = "en") -> List[Dict[str, Any]]:
    return _court_dtos(db, _user_subscriptions(db, user_id), locale)


def get_case_subscriptions_by_user_id(db: Session, user_id, locale: str = "en") -> List[Dict[str, Any]]:
    return [_case_dto(sub) for sub in _user_subscriptions(db, user_id) if sub.search_type != SearchType.LOCATION_ID]


def get_all_subscriptions_by_user_id(db: Session, user_id, locale: str = "en") -> List[Dict[str, Any]]:
    """Court subscriptions; pages that show both kinds combine this with the case list."""
    return get_court_subscriptions_by_user_id(db, user_id, locale)


def get_subscription_details_for_confirmation(
    db: Session, subscription_ids: List[str], user_id, locale: str = "en"
) -> List[Dict[str, Any]]:
    ids = [u for u in (_as_uuid(s) for s in subscription_ids) if u is not None]
    if not ids:
        return []
    subscriptions = (
        db.query(Subscription)
        .filter(Subscription.subscription_id.in_(ids), Subscription.user_id == _as_uuid(user_id))
        .all()
    )
    courts = _court_dtos(db, subscriptions, locale)
    cases = [_case_dto(sub) for sub in subscriptions if sub.search_type != SearchType.LOCATION_ID]
    return courts + cases


def find_active_subscriptions_by_location(db: Session, location_id) -> List[Subscription]:
    return (
        db.query(Subscription)
        .filter(
            Subscription.search_type == SearchType.LOCATION_ID,
            Subscription.search_value == str(location_id),
        )
        .all()
    )


def find_case_subscriptions(db: Session, case_numbers, case_names) -> List[Subscription]:
    """Case subscribers whose case number or case name appears in a publication"""
    found: List[Subscription] = []
    if case_numbers:
        found += (
            db.query(Subscription)
            .filter(
                Subscription.search_type == SearchType.CASE_NUMBER,
                Subscription.search_value.in_(list(case_numbers)),
            )
            .all()
        )
    if case_names:
        found += (
            db.query(Subscription)
            .filter(
                Subscription.search_type == SearchType.CASE_NAME,
                Subscription.search_value.in_(list(case_names)),
            )
            .all()
        )
    return found


# ============================================================================
# Delete
# ============================================================================

def remove_subscription(db: Session, subscription_id, user_id) -> int:
    subscription = get_subscription_by_id(db, subscription_id, user_id)
    if subscription is None:
        raise ValueError("Subscription not found")
    db.delete(subscription)
    db.commit()
    return 1


def delete_subscriptions_by_ids(db: Session, subscription_ids: List[str], user_id) -> int:
    """
    Delete all or nothing: if any id is missing or belongs to someone else
    the transaction is rolled back.
    """
    if not subscription_ids:
        raise ValueError("No subscriptions provided for deletion")

    ids = [_as_uuid(s) for s in subscription_ids]
    try:
        count = (
            db.query(Subscription)
            .filter(
                Subscription.subscription_id.in_([u for u in ids if u is not None]),
                Subscription.user_id == _as_uuid(user_id),
            )
            .delete(synchronize_session=False)
        )
        if count != len(subscription_ids):
            raise ValueError("Unauthorized: User does not own all selected subscriptions")
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Bulk unsubscribe removed %d subscriptions for user %s", count, user_id)
    return count


# ============================================================================
# List type subscriptions
# ============================================================================

# Artefact language -> subscription languages that receive it
LANGUAGE_MATCHES = {
    Language.ENGLISH: (ListTypeLanguage.ENGLISH, ListTypeLanguage.BOTH),
    Language.WELSH: (ListTypeLanguage.WELSH, ListTypeLanguage.BOTH),
    Language.BILINGUAL: (ListTypeLanguage.ENGLISH, ListTypeLanguage.WELSH, ListTypeLanguage.BOTH),
}


def create_list_type_subscriptions(
    db: Session, user_id, list_type_ids: List[int], language: ListTypeLanguage
) -> List[ListTypeSubscription]:
    """
    One subscription per list type. Every id is checked before anything is
    written.
    """
    language = ListTypeLanguage(language)
    user_uuid = _as_uuid(user_id)

    wanted: List[int] = []
    for raw in list_type_ids:
        list_type = get_list_type(raw)
        if list_type is None:
            raise ValueError(f"Invalid list type: {raw}")
        if list_type.id not in wanted:
            wanted.append(list_type.id)

    existing = db.query(ListTypeSubscription).filter(ListTypeSubscription.user_id == user_uuid).all()
    if len(existing) + len(wanted) > MAX_SUBSCRIPTIONS:
        raise ValueError(f"Maximum {MAX_SUBSCRIPTIONS} list type subscriptions allowed")

    taken = {(sub.list_type_id, sub.language) for sub in existing}
    for list_type_id in wanted:
        if (list_type_id, language) in taken:
            raise ValueError(f"Already subscribed to list type {list_type_id} with language {language.value}")

    created = [
        ListTypeSubscription(
            user_id=user_uuid,
            list_type_id=list_type_id,
            language=language,
            date_added=datetime.utcnow(),
        )
        for list_type_id in wanted
    ]
    try:
        db.add_all(created)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("User %s subscribed to %d list types (%s)", user_id, len(created), language.value)
    return created


def get_list_type_subscriptions_by_user_id(db: Session, user_id, locale: str = "en") -> List[Dict[str, Any]]:
    subscriptions = (
        db.query(ListTypeSubscription)
        .filter(ListTypeSubscription.user_id == _as_uuid(user_id))
        .order_by(ListTypeSubscription.date_added.desc())
        .all()
    )
    dtos = []
    for sub in subscriptions:
        list_type = get_list_type(sub.list_type_id)
        if list_type is None:
            continue
        dtos.append({
            "subscriptionId": str(sub.subscription_id),
            "listTypeId": sub.list_type_id,
            "listTypeName": list_type.welsh_friendly_name if locale == "cy" else list_type.english_friendly_name,
            "language": sub.language.value,
            "dateAdded": sub.date_added,
        })
    return dtos


def delete_list_type_subscription(db: Session, subscription_id, user_id) -> None:
    sub_uuid = _as_uuid(subscription_id)
    user_uuid = _as_uuid(user_id)
    subscription = None
    if sub_uuid is not None and user_uuid is not None:
        subscription = (
            db.query(ListTypeSubscription)
            .filter(ListTypeSubscription.subscription_id == sub_uuid, ListTypeSubscription.user_id == user_uuid)
            .first()
        )
    if subscription is None:
        raise ValueError("Subscription not found")
    db.delete(subscription)
    db.commit()


def find_list_type_subscriptions(db: Session, list_type_id: int, language) -> List[ListTypeSubscription]:
    """Subscribers to a list type whose chosen language covers the artefact's"""
    languages = LANGUAGE_MATCHES.get(Language(language), ())
    return (
        db.query(ListTypeSubscription)
        .filter(
            ListTypeSubscription.list_type_id == list_type_id,
            ListTypeSubscription.language.in_(languages),
        )
        .all()
    )
