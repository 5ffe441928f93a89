# caselens/models/case_image.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, LargeBinary, String
from sqlalchemy.orm import relationship

from caselens.db.base import Base
from caselens.models.case import new_id, utcnow


class CaseImage(Base):
    __tablename__ = "case_images"

    id = Column(String(32), primary_key=True, default=new_id)
    case_id = Column(String(32), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    remote_url = Column(String, nullable=True)
    secure_remote_url = Column(String, nullable=True)
    original_name = Column(String, nullable=True)
    storage_key = Column(String, nullable=True)
    content_type = Column(String, nullable=True)
    # raw bytes of images stored before the move to object storage
    data = Column(LargeBinary, nullable=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    case = relationship("Case", back_populates="images")
