"""
Pydantic validation schemas
"""
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cath.db.models import Language, Provenance, Sensitivity

# ============================================================================
# Publication API
# ============================================================================

class PublicationCreate(BaseModel):
    """JSON publication pushed by an upstream system"""
    locationId: str = Field(..., min_length=1, max_length=50)
    listTypeId: int
    contentDate: datetime
    sensitivity: Sensitivity = Sensitivity.PUBLIC
    language: Language = Language.ENGLISH
    displayFrom: datetime
    displayTo: datetime
    provenance: Provenance = Provenance.MANUAL_UPLOAD
    payload: Optional[Any] = None
    isFlatFile: bool = False
    fileName: Optional[str] = None

    @field_validator("locationId")
    @classmethod
    def strip_location(cls, v: str) -> str:
        return v.strip()

    @field_validator("contentDate", "displayFrom", "displayTo")
    @classmethod
    def naive_utc(cls, v: datetime) -> datetime:
        # stored as naive UTC
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_display_window(self):
        if self.displayTo < self.displayFrom:
            raise ValueError("displayTo must not be before displayFrom")
        if not self.isFlatFile and self.payload is None:
            raise ValueError("payload is required unless isFlatFile is set")
        return self


class PublicationResponse(BaseModel):
    artefactId: str
    noMatch: bool


# ============================================================================
# Pending uploads
# ============================================================================

class DateInput(BaseModel):
    day: str = ""
    month: str = ""
    year: str = ""


class PendingUploadMetadata(BaseModel):
    """Sidecar stored next to a staged upload"""
    uploadId: str
    fileName: str
    fileType: str = ""
    locationId: str
    listType: str
    hearingStartDate: DateInput
    sensitivity: str
    language: str
    displayFrom: DateInput
    displayTo: DateInput
    uploadedAt: datetime
