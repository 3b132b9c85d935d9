# cath/services/notification_service.py

"""
Subscriber notifications for a new publication.

Recipients come from court subscriptions and case subscriptions matched
against the search index, plus list type subscriptions in a matching
language. A user with several matching subscriptions gets one email.

Each subscriber is handled on its own: a failure is written to the
notification audit log and reported in the result, never retried, and never
stops the rest of the batch.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from cath.core.logger import logger, redact_emails
from cath.db.models import NotificationAuditLog, NotificationStatus, Subscription
from cath.list_types.registry import get_summary_builder
from cath.services.govnotify_client import GovNotifyClient
from cath.services.notification_templates import (
    build_template_parameters,
    build_user_name,
    get_template_id,
)
from cath.services.case_search_service import get_case_numbers_and_names
from cath.services.subscription_service import (
    find_active_subscriptions_by_location,
    find_case_subscriptions,
    find_list_type_subscriptions,
)

MAX_PDF_SIZE_BYTES = 2 * 1024 * 1024


@dataclass
class PublicationEvent:
    publication_id: str
    location_id: str
    location_name: str
    hearing_list_name: str
    publication_date: Union[date, datetime]
    list_type_id: Optional[int] = None
    json_data: Any = None
    pdf_data: Optional[bytes] = None
    pdf_file_name: Optional[str] = None
    language: Optional[str] = None


def validate_publication_event(event: PublicationEvent) -> List[str]:
    errors = []
    if not event.publication_id:
        errors.append("publicationId is required")
    if not event.location_id:
        errors.append("locationId is required")
    if not event.hearing_list_name:
        errors.append("hearingListName is required")
    if not event.publication_date:
        errors.append("publicationDate is required")
    return errors


def _new_audit_log(db: Session, subscription: Subscription, publication_id: str,
                   status: NotificationStatus) -> NotificationAuditLog:
    log = NotificationAuditLog(
        subscription_id=subscription.subscription_id,
        user_id=subscription.user_id,
        publication_id=publication_id,
        status=status,
        created_at=datetime.utcnow(),
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return log


def _collect_subscriptions(db: Session, event: PublicationEvent, location_id: int) -> List[Any]:
    subscriptions: List[Any] = list(find_active_subscriptions_by_location(db, location_id))

    case_numbers, case_names = get_case_numbers_and_names(db, event.publication_id)
    subscriptions += find_case_subscriptions(db, case_numbers, case_names)

    if event.list_type_id is not None and event.language:
        subscriptions += find_list_type_subscriptions(db, event.list_type_id, event.language)

    seen = set()
    unique = []
    for subscription in subscriptions:
        if subscription.user_id in seen:
            continue
        seen.add(subscription.user_id)
        unique.append(subscription)
    return unique


def _update_status(db: Session, log: NotificationAuditLog, status: NotificationStatus,
                   error_message: Optional[str] = None, gov_notify_id: Optional[str] = None) -> None:
    log.status = status
    if status == NotificationStatus.SENT:
        log.sent_at = datetime.utcnow()
    if error_message:
        log.error_message = error_message
    if gov_notify_id:
        log.gov_notify_id = gov_notify_id
    db.commit()


def build_email_content(event: PublicationEvent, client: GovNotifyClient) -> Dict[str, Any]:
    """
    Template id and personalisation. Uses the list type's case summary when
    one is registered and JSON is available; any failure there falls back to
    the standard template.
    """
    builder = get_summary_builder(event.list_type_id) if event.list_type_id is not None else None
    if builder is not None and event.json_data is not None:
        try:
            summary = builder(event.json_data)
            attach_pdf = event.pdf_data is not None and len(event.pdf_data) < MAX_PDF_SIZE_BYTES
            link_to_file = (
                client.prepare_upload(event.pdf_data, event.pdf_file_name) if attach_pdf else None
            )
            return {
                "template_id": get_template_id(has_pdf=attach_pdf, has_summary=True),
                "personalisation": build_template_parameters(
                    hearing_list_name=event.hearing_list_name,
                    publication_date=event.publication_date,
                    location_name=event.location_name,
                    case_summary=summary,
                    link_to_file=link_to_file,
                ),
            }
        except Exception:
            logger.exception("Failed to build enhanced template parameters, using standard template")

    return {
        "template_id": get_template_id(),
        "personalisation": build_template_parameters(
            hearing_list_name=event.hearing_list_name,
            publication_date=event.publication_date,
            location_name=event.location_name,
        ),
    }


def _notify_subscriber(db: Session, subscription: Subscription, event: PublicationEvent,
                       client: GovNotifyClient) -> Dict[str, Any]:
    user = subscription.user
    if user is None or not user.email:
        log = _new_audit_log(db, subscription, event.publication_id, NotificationStatus.SKIPPED)
        _update_status(db, log, NotificationStatus.SKIPPED, error_message="No email address")
        return {"status": "skipped", "error": f"User {subscription.user_id}: No email address"}

    log = _new_audit_log(db, subscription, event.publication_id, NotificationStatus.PENDING)
    try:
        content = build_email_content(event, client)
        user_name = build_user_name(user.first_name, user.surname)
        logger.debug("Sending publication %s notification to %s", event.publication_id, user_name)
        response = client.send_email(
            template_id=content["template_id"],
            email_address=user.email,
            personalisation=content["personalisation"],
            reference=f"{event.publication_id}-{subscription.subscription_id}",
        )
    except Exception as e:
        message = redact_emails(str(e))
        _update_status(db, log, NotificationStatus.FAILED, error_message=message)
        return {"status": "failed", "error": f"User {subscription.user_id}: {message}"}

    _update_status(db, log, NotificationStatus.SENT, gov_notify_id=response.get("id"))
    return {"status": "sent"}


def send_publication_notifications(
    db: Session,
    event: PublicationEvent,
    client: Optional[GovNotifyClient] = None,
) -> Dict[str, Any]:
    """Returns {totalSubscriptions, sent, failed, skipped, errors}."""
    errors = validate_publication_event(event)
    if errors:
        raise ValueError(f"Invalid publication event: {', '.join(errors)}")

    try:
        location_id = int(str(event.location_id).strip())
    except ValueError:
        raise ValueError(f"Invalid location ID: {event.location_id}")

    subscriptions = _collect_subscriptions(db, event, location_id)
    result: Dict[str, Any] = {
        "totalSubscriptions": len(subscriptions),
        "sent": 0,
        "failed": 0,
        "skipped": 0,
        "errors": [],
    }
    if not subscriptions:
        return result

    client = client or GovNotifyClient()
    for subscription in subscriptions:
        try:
            outcome = _notify_subscriber(db, subscription, event, client)
        except Exception as e:
            db.rollback()
            outcome = {"status": "failed", "error": f"User {subscription.user_id}: {redact_emails(str(e))}"}
        result[outcome["status"]] += 1
        if outcome.get("error"):
            result["errors"].append(outcome["error"])

    logger.info(
        "Publication %s notifications: %d sent, %d failed, %d skipped",
        event.publication_id, result["sent"], result["failed"], result["skipped"],
    )
    return result
