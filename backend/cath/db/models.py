"""
SQLAlchemy ORM Models
"""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
    TIMESTAMP,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy import Index

from cath.db.database import Base

# ============================================================================
# Enums
# ============================================================================

class UserRole(str, enum.Enum):
    """Roles issued by SSO (staff) and IDAM (verified users)"""
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    INTERNAL_ADMIN_CTSC = "INTERNAL_ADMIN_CTSC"
    INTERNAL_ADMIN_LOCAL = "INTERNAL_ADMIN_LOCAL"
    VERIFIED = "VERIFIED"

class UserProvenance(str, enum.Enum):
    SSO = "SSO"
    CFT_IDAM = "CFT_IDAM"
    B2C_IDAM = "B2C_IDAM"
    CRIME_IDAM = "CRIME_IDAM"

class Sensitivity(str, enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    CLASSIFIED = "CLASSIFIED"

class Language(str, enum.Enum):
    ENGLISH = "ENGLISH"
    WELSH = "WELSH"
    BILINGUAL = "BILINGUAL"

class Provenance(str, enum.Enum):
    """Where a publication came from"""
    MANUAL_UPLOAD = "MANUAL_UPLOAD"
    SNL = "SNL"
    COMMON_PLATFORM = "COMMON_PLATFORM"
    CFT_IDAM = "CFT_IDAM"

class SearchType(str, enum.Enum):
    LOCATION_ID = "LOCATION_ID"
    CASE_NAME = "CASE_NAME"
    CASE_NUMBER = "CASE_NUMBER"

class ListTypeLanguage(str, enum.Enum):
    """Which versions of a list a list type subscriber wants"""
    ENGLISH = "ENGLISH"
    WELSH = "WELSH"
    BOTH = "BOTH"

class NotificationStatus(str, enum.Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"
    SKIPPED = "Skipped"


# ============================================================================
# Users
# ============================================================================

class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(255), nullable=True)
    surname = Column(String(255), nullable=True)
    user_provenance = Column(SQLEnum(UserProvenance), nullable=False)
    # Subject id issued by the identity provider
    user_provenance_id = Column(String(255), nullable=False, unique=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.VERIFIED)

    created_date = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    last_signed_in_date = Column(TIMESTAMP, nullable=True)

    subscriptions = relationship("Subscription", back_populates="user", cascade="all, delete-orphan")
    list_type_subscriptions = relationship(
        "ListTypeSubscription", back_populates="user", cascade="all, delete-orphan"
    )


# ============================================================================
# Reference data
# ============================================================================

location_region = Table(
    "location_region",
    Base.metadata,
    Column("location_id", Integer, ForeignKey("locations.location_id", ondelete="CASCADE"), primary_key=True),
    Column("region_id", Integer, ForeignKey("regions.region_id", ondelete="CASCADE"), primary_key=True),
)

location_sub_jurisdiction = Table(
    "location_sub_jurisdiction",
    Base.metadata,
    Column("location_id", Integer, ForeignKey("locations.location_id", ondelete="CASCADE"), primary_key=True),
    Column(
        "sub_jurisdiction_id",
        Integer,
        ForeignKey("sub_jurisdictions.sub_jurisdiction_id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Jurisdiction(Base):
    __tablename__ = "jurisdictions"

    # Ids are allocated as max + 1 by the service layer
    jurisdiction_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    welsh_name = Column(String(255), nullable=False, unique=True)

    sub_jurisdictions = relationship("SubJurisdiction", back_populates="jurisdiction")


class SubJurisdiction(Base):
    __tablename__ = "sub_jurisdictions"
    __table_args__ = (
        UniqueConstraint("jurisdiction_id", "name", name="uq_sub_jurisdictions_jurisdiction_name"),
    )

    sub_jurisdiction_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    welsh_name = Column(String(255), nullable=False)
    jurisdiction_id = Column(Integer, ForeignKey("jurisdictions.jurisdiction_id"), nullable=False, index=True)

    jurisdiction = relationship("Jurisdiction", back_populates="sub_jurisdictions")
    locations = relationship("Location", secondary=location_sub_jurisdiction, back_populates="sub_jurisdictions")


class Region(Base):
    __tablename__ = "regions"

    region_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    welsh_name = Column(String(255), nullable=False, unique=True)

    locations = relationship("Location", secondary=location_region, back_populates="regions")


class Location(Base):
    """Court or tribunal"""
    __tablename__ = "locations"

    location_id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    welsh_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    contact_no = Column(String(50), nullable=True)

    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    # Soft delete; deleted courts drop out of every lookup
    deleted_at = Column(TIMESTAMP, nullable=True)

    regions = relationship("Region", secondary=location_region, back_populates="locations")
    sub_jurisdictions = relationship(
        "SubJurisdiction", secondary=location_sub_jurisdiction, back_populates="locations"
    )


# ============================================================================
# Publications
# ============================================================================

class Artefact(Base):
    """A published hearing list: flat file or JSON payload plus metadata"""
    __tablename__ = "artefacts"
    __table_args__ = (
        UniqueConstraint(
            "location_id", "list_type_id", "content_date", "language",
            name="uq_artefacts_location_list_date_language",
        ),
        Index("ix_artefacts_location_display", "location_id", "display_from", "display_to"),
    )

    artefact_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Text id; no_match marks ids unknown to reference data
    location_id = Column(String(50), nullable=False, index=True)
    list_type_id = Column(Integer, nullable=False)
    content_date = Column(TIMESTAMP, nullable=False)
    sensitivity = Column(SQLEnum(Sensitivity), nullable=False, default=Sensitivity.PUBLIC)
    language = Column(SQLEnum(Language), nullable=False, default=Language.ENGLISH)
    display_from = Column(TIMESTAMP, nullable=False)
    display_to = Column(TIMESTAMP, nullable=False)
    last_received_date = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    is_flat_file = Column(Boolean, nullable=False, default=False)
    provenance = Column(SQLEnum(Provenance), nullable=False, default=Provenance.MANUAL_UPLOAD)
    no_match = Column(Boolean, nullable=False, default=False)
    superseded_count = Column(Integer, nullable=False, default=0)
    source_file_name = Column(String(255), nullable=True)

    search_entries = relationship(
        "ArtefactSearch", back_populates="artefact", cascade="all, delete-orphan", passive_deletes=True
    )


class ArtefactSearch(Base):
    """Case name / case number pulled out of a publication for case search"""
    __tablename__ = "artefact_search"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    artefact_id = Column(
        UUID(as_uuid=True), ForeignKey("artefacts.artefact_id", ondelete="CASCADE"), nullable=False, index=True
    )
    case_number = Column(String(255), nullable=True, index=True)
    case_name = Column(String(500), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    artefact = relationship("Artefact", back_populates="search_entries")


# ============================================================================
# Subscriptions & notifications
# ============================================================================

class Subscription(Base):
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "search_type", "search_value", name="uq_subscriptions_user_search"),
        Index("ix_subscriptions_search", "search_type", "search_value"),
    )

    subscription_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    search_type = Column(SQLEnum(SearchType), nullable=False, default=SearchType.LOCATION_ID)
    search_value = Column(String(255), nullable=False)
    case_name = Column(String(500), nullable=True)
    case_number = Column(String(255), nullable=True)
    date_added = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="subscriptions")

    @property
    def location_id(self):
        if self.search_type == SearchType.LOCATION_ID and str(self.search_value).isdigit():
            return int(self.search_value)
        return None


class ListTypeSubscription(Base):
    """Every publication of a list type, in the chosen language(s)"""
    __tablename__ = "list_type_subscriptions"
    __table_args__ = (
        UniqueConstraint("user_id", "list_type_id", "language", name="uq_list_type_subscriptions_user_list_language"),
    )

    subscription_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    list_type_id = Column(Integer, nullable=False, index=True)
    language = Column(SQLEnum(ListTypeLanguage), nullable=False, default=ListTypeLanguage.ENGLISH)
    date_added = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    user = relationship("User", back_populates="list_type_subscriptions")


class NotificationAuditLog(Base):
    """Per-subscriber send status for a publication"""
    __tablename__ = "notification_audit_logs"
    __table_args__ = (Index("ix_notification_audit_logs_publication", "publication_id"),)

    notification_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subscription_id = Column(UUID(as_uuid=True), nullable=False)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    publication_id = Column(UUID(as_uuid=True), nullable=False)
    status = Column(SQLEnum(NotificationStatus), nullable=False, default=NotificationStatus.PENDING)
    error_message = Column(Text, nullable=True)
    gov_notify_id = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    sent_at = Column(TIMESTAMP, nullable=True)


# ============================================================================
# Admin audit trail
# ============================================================================

class AuditLog(Base):
    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_timestamp", "timestamp"),
        Index("ix_audit_logs_user_email", "user_email"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_role = Column(String(50), nullable=False)
    user_provenance = Column(String(50), nullable=False)
    action = Column(String(255), nullable=False, index=True)
    details = Column(Text, nullable=True)
    timestamp = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
