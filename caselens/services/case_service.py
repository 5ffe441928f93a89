# caselens/services/case_service.py
import logging
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import or_
from sqlalchemy.orm import Session

from caselens.core.config import Settings
from caselens.models.case import Case, utcnow
from caselens.models.case_image import CaseImage
from caselens.schemas.case import CaseCreate, CaseUpdate
from caselens.services.errors import (
    CaseNotFoundError,
    ImageNotFoundError,
    InvalidImageError,
    StorageError,
)
from caselens.services.location_service import LocationNormalizer
from caselens.utils.location_data import DEFAULT_COORDINATES
from caselens.utils.s3 import ImageStore, StoredImage

logger = logging.getLogger(__name__)


class CaseService:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        normalizer: Optional[LocationNormalizer] = None,
        image_store: Optional[ImageStore] = None,
    ):
        self.db = db
        self.settings = settings
        self.normalizer = normalizer
        self.image_store = image_store

    # -------------------
    # Records
    # -------------------
    def list_cases(self, status: Optional[str] = None, severity: Optional[str] = None, search: Optional[str] = None):
        query = self.db.query(Case)
        if status:
            query = query.filter(Case.status == status)
        if severity:
            query = query.filter(Case.severity == severity)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Case.title.ilike(pattern),
                    Case.description.ilike(pattern),
                    Case.location_text.ilike(pattern),
                )
            )
        return query.order_by(Case.created_at.desc()).all()

    def get_case(self, case_id: str) -> Optional[Case]:
        return self.db.query(Case).filter(Case.id == case_id).first()

    def require_case(self, case_id: str) -> Case:
        case = self.get_case(case_id)
        if not case:
            raise CaseNotFoundError(case_id)
        return case

    def create_case(self, payload: CaseCreate) -> Case:
        case = Case(
            title=payload.title,
            description=payload.description,
            severity=payload.severity.value,
            status=payload.status.value,
            status_reason=payload.status_reason,
            created_by=payload.created_by or "System",
            modified_by=payload.modified_by or "System",
        )
        if payload.date_reported:
            case.date_reported = payload.date_reported
        self._apply_location(case, payload.location_text)

        self.db.add(case)
        self.db.commit()
        self.db.refresh(case)
        logger.info("Created case %s (%s)", case.id, case.title)
        return case

    def update_case(self, case_id: str, payload: CaseUpdate) -> Case:
        case = self.require_case(case_id)
        changes = payload.model_dump(exclude_unset=True)

        location_text = changes.pop("location_text", None)
        changes.pop("modified_by", None)
        for field, value in changes.items():
            setattr(case, field, value.value if hasattr(value, "value") else value)

        if location_text is not None and location_text != case.location_text:
            self._apply_location(case, location_text)

        case.modified_by = payload.modified_by or "System"
        self.db.commit()
        self.db.refresh(case)
        return case

    def delete_case(self, case_id: str) -> None:
        case = self.require_case(case_id)
        for image in case.images:
            self._delete_remote(image)
        self.db.delete(case)
        self.db.commit()
        logger.info("Deleted case %s", case_id)

    def _apply_location(self, case: Case, location_text: str) -> None:
        case.location_text = location_text or ""
        if not case.location_text.strip() or self.normalizer is None:
            case.normalized_location = ""
            case.latitude, case.longitude = DEFAULT_COORDINATES
            return
        result = self.normalizer.normalize(case.location_text)
        case.normalized_location = result.normalized_location
        case.latitude = result.coordinates.lat
        case.longitude = result.coordinates.lng

    # -------------------
    # Analysis
    # -------------------
    def save_analysis(self, case: Case, summary: str, insights: List[str]) -> Case:
        # replaces the previous analysis wholesale; concurrent writers: last one wins
        case.analysis_summary = summary
        case.analysis_insights = list(insights)
        case.analyzed_at = utcnow()
        self.db.commit()
        self.db.refresh(case)
        return case

    # -------------------
    # Images
    # -------------------
    def _validate_image(self, upload: UploadFile, data: bytes) -> None:
        name = upload.filename or ""
        extension = Path(name).suffix.lower().lstrip(".")
        subtype = (upload.content_type or "").split("/")[-1].lower()
        allowed = self.settings.allowed_image_types

        if extension not in allowed or subtype not in allowed:
            raise InvalidImageError(f"Only image files are allowed! ({name})")
        if not data:
            raise InvalidImageError(f"Empty file: {name}")
        if len(data) > self.settings.MAX_UPLOAD_SIZE_BYTES:
            limit_mb = self.settings.MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise InvalidImageError(
                f"File too large. Maximum file size is {limit_mb}MB. Please compress or resize your image."
            )

    async def add_images(self, case_id: str, uploads: List[UploadFile]) -> List[CaseImage]:
        if not uploads:
            raise InvalidImageError("No image files provided")
        case = self.require_case(case_id)
        if self.image_store is None:
            raise StorageError("Image storage is not configured")

        # validate the whole batch before anything leaves the server
        batch = []
        for upload in uploads:
            data = await upload.read()
            self._validate_image(upload, data)
            batch.append((upload, data))

        stored: List[StoredImage] = []
        added = []
        try:
            for upload, data in batch:
                ext = Path(upload.filename).suffix.lower()
                key = self.image_store.case_key(case.id, f"{uuid.uuid4().hex}{ext}")
                logger.info("Uploading image %s for case %s", upload.filename, case.id)
                result = await run_in_threadpool(self.image_store.upload, key, data, upload.content_type)
                stored.append(result)
                added.append(
                    CaseImage(
                        remote_url=result.remote_url,
                        secure_remote_url=result.secure_remote_url,
                        original_name=upload.filename,
                        storage_key=result.storage_key,
                        content_type=upload.content_type,
                    )
                )
        except StorageError:
            for result in stored:
                self._delete_key(result.storage_key)
            raise

        for image in added:
            case.images.append(image)
        self.db.commit()
        for image in added:
            self.db.refresh(image)
        return added

    def delete_image(self, case_id: str, image_id: str) -> None:
        case = self.require_case(case_id)
        image = next((img for img in case.images if img.id == image_id), None)
        if image is None:
            raise ImageNotFoundError(image_id)

        self._delete_remote(image)
        case.images.remove(image)
        self.db.commit()

    def _delete_remote(self, image: CaseImage) -> None:
        if image.storage_key:
            self._delete_key(image.storage_key)

    def _delete_key(self, key: str) -> None:
        # best effort: losing the remote copy must not block the local delete
        if self.image_store is None:
            logger.warning("No image store configured; leaving remote image %s in place", key)
            return
        try:
            self.image_store.delete(key)
        except StorageError as e:
            logger.warning("%s", e)
