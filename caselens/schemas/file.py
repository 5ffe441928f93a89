# caselens/schemas/file.py
from datetime import datetime
from typing import List, Optional

from caselens.schemas.base import CamelModel


class CaseImageOut(CamelModel):
    id: str
    remote_url: Optional[str] = None
    secure_remote_url: Optional[str] = None
    original_name: Optional[str] = None
    storage_key: Optional[str] = None
    uploaded_at: datetime


class ImageUploadResponse(CamelModel):
    message: str
    images: List[CaseImageOut]


class MessageResponse(CamelModel):
    message: str
