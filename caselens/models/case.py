# caselens/models/case.py
import datetime
import uuid

from sqlalchemy import JSON, Column, DateTime, Float, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship

from caselens.db.base import Base

# geographic center of the contiguous United States
DEFAULT_LAT = 39.8283
DEFAULT_LNG = -98.5795


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Case(Base):
    __tablename__ = "cases"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    location_text = Column(Text, nullable=False, default="")
    normalized_location = Column(String(255), nullable=False, default="")
    latitude = Column(Float, nullable=False, default=DEFAULT_LAT)
    longitude = Column(Float, nullable=False, default=DEFAULT_LNG)
    date_reported = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    severity = Column(String(16), nullable=False, default="Medium")
    status = Column(String(16), nullable=False, default="Active", index=True)
    status_reason = Column(Text, nullable=False, default="")

    analysis_summary = Column(Text, nullable=True)
    analysis_insights = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    analyzed_at = Column(DateTime(timezone=True), nullable=True)

    created_by = Column(String(255), nullable=False, default="System")
    modified_by = Column(String(255), nullable=False, default="System")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    images = relationship(
        "CaseImage",
        back_populates="case",
        order_by="CaseImage.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    @property
    def coordinates(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}

    @property
    def analysis(self):
        if self.analyzed_at is None:
            return None
        return {
            "summary": self.analysis_summary or "",
            "insights": list(self.analysis_insights or []),
            "analyzed_at": self.analyzed_at,
        }
