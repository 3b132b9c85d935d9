# cath/services/audit_service.py

"""
System admin audit trail: writing entries and the list/detail queries
behind the audit log pages.
"""
import math
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from cath.core.logger import logger
from cath.db.models import AuditLog
from cath.utils.helpers import format_timestamp, title_case_action

DEFAULT_PAGE_SIZE = 20


def create_audit_log(
    db: Session,
    user: Dict[str, Any],
    action: str,
    details: Optional[str] = None,
) -> AuditLog:
    """`user` is the session user dict."""
    entry = AuditLog(
        user_id=str(user.get("id") or "unknown"),
        user_email=user.get("email") or "unknown",
        user_role=user.get("role") or "SYSTEM_ADMIN",
        user_provenance=user.get("provenance") or "SSO",
        action=action,
        details=details,
        timestamp=datetime.utcnow(),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Audit log %s by %s", action, entry.user_id)
    return entry


def format_audit_log(log: AuditLog) -> Dict[str, Any]:
    return {
        "id": str(log.id),
        "timestamp": format_timestamp(log.timestamp),
        "action": title_case_action(log.action),
        "userEmail": log.user_email,
        "userId": log.user_id,
        "userRole": log.user_role,
        "userProvenance": log.user_provenance,
        "details": log.details,
    }


def _filtered_query(db: Session, filters: Dict[str, Any]):
    query = db.query(AuditLog)
    if filters.get("email"):
        query = query.filter(AuditLog.user_email.ilike(f"%{filters['email']}%"))
    if filters.get("userId"):
        query = query.filter(AuditLog.user_id.ilike(f"%{filters['userId']}%"))
    if filters.get("date"):
        day: date = filters["date"]
        start = datetime(day.year, day.month, day.day)
        query = query.filter(AuditLog.timestamp >= start, AuditLog.timestamp < start + timedelta(days=1))
    if filters.get("actions"):
        query = query.filter(AuditLog.action.in_(filters["actions"]))
    return query


def get_audit_logs(
    db: Session,
    filters: Optional[Dict[str, Any]] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> Dict[str, Any]:
    """
    Newest first. Filters: email and userId (partial, case-insensitive),
    date (whole day) and actions (exact values).
    """
    filters = filters or {}
    page = max(page, 1)
    query = _filtered_query(db, filters)
    total_count = query.count()
    logs = (
        query.order_by(AuditLog.timestamp.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return {
        "logs": [format_audit_log(log) for log in logs],
        "totalCount": total_count,
        "currentPage": page,
        "pageSize": page_size,
        "totalPages": math.ceil(total_count / page_size),
    }


def get_audit_log_by_id(db: Session, log_id) -> Optional[Dict[str, Any]]:
    try:
        log_uuid = uuid.UUID(str(log_id))
    except (TypeError, ValueError):
        return None
    log = db.query(AuditLog).filter(AuditLog.id == log_uuid).first()
    return format_audit_log(log) if log else None


def get_available_actions(db: Session) -> List[Dict[str, str]]:
    rows = db.query(AuditLog.action).distinct().order_by(AuditLog.action).all()
    return [{"value": action, "text": title_case_action(action)} for (action,) in rows]
