# caselens/schemas/case.py
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, field_validator

from caselens.schemas.analysis import AnalysisOut
from caselens.schemas.base import CamelModel
from caselens.schemas.file import CaseImageOut
from caselens.schemas.location import Coordinates


class Severity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CaseStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    RESOLVED = "Resolved"


def _require_title(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("title must not be empty")
    return value


Title = Annotated[str, AfterValidator(_require_title)]


class CaseCreate(CamelModel):
    title: Title
    description: str = ""
    location_text: str = ""
    date_reported: Optional[datetime] = None
    severity: Severity = Severity.MEDIUM
    status: CaseStatus = CaseStatus.ACTIVE
    status_reason: str = ""
    created_by: Optional[str] = None
    modified_by: Optional[str] = None


class CaseUpdate(CamelModel):
    """Edit-form payload; fields left out keep their stored value."""

    title: Optional[Title] = None
    description: Optional[str] = None
    location_text: Optional[str] = None
    date_reported: Optional[datetime] = None
    severity: Optional[Severity] = None
    status: Optional[CaseStatus] = None
    status_reason: Optional[str] = None
    modified_by: Optional[str] = None

    @field_validator("title", "description", "location_text", "date_reported", "severity", "status", "status_reason")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value


class CaseOut(CamelModel):
    id: str
    title: str
    description: str
    location_text: str
    normalized_location: str
    coordinates: Coordinates
    date_reported: datetime
    severity: Severity
    status: CaseStatus
    status_reason: str
    images: List[CaseImageOut] = []
    analysis: Optional[AnalysisOut] = None
    created_by: str
    modified_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
