# caselens/api/v1/cases.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile

from caselens.core.dependencies import get_case_service
from caselens.schemas.case import CaseCreate, CaseOut, CaseStatus, CaseUpdate, Severity
from caselens.schemas.file import ImageUploadResponse, MessageResponse
from caselens.services.case_service import CaseService

router = APIRouter()


@router.get("", response_model=List[CaseOut])
def list_cases(
    status: Optional[CaseStatus] = Query(None),
    severity: Optional[Severity] = Query(None),
    search: Optional[str] = Query(None),
    svc: CaseService = Depends(get_case_service),
):
    """
    List cases, newest first
    """
    return svc.list_cases(
        status=status.value if status else None,
        severity=severity.value if severity else None,
        search=search,
    )


@router.post("", response_model=CaseOut, status_code=201)
def create_case(payload: CaseCreate, svc: CaseService = Depends(get_case_service)):
    return svc.create_case(payload)


@router.get("/{case_id}", response_model=CaseOut)
def get_case(case_id: str, svc: CaseService = Depends(get_case_service)):
    return svc.require_case(case_id)


@router.put("/{case_id}", response_model=CaseOut)
def update_case(case_id: str, payload: CaseUpdate, svc: CaseService = Depends(get_case_service)):
    return svc.update_case(case_id, payload)


@router.delete("/{case_id}", response_model=MessageResponse)
def delete_case(case_id: str, svc: CaseService = Depends(get_case_service)):
    svc.delete_case(case_id)
    return {"message": "Case deleted successfully"}


@router.post("/{case_id}/images", response_model=ImageUploadResponse)
async def upload_images(
    case_id: str,
    images: List[UploadFile] = File(...),
    svc: CaseService = Depends(get_case_service),
):
    added = await svc.add_images(case_id, images)
    return {"message": "Images uploaded successfully", "images": added}


@router.delete("/{case_id}/images/{image_id}", response_model=MessageResponse)
def delete_image(case_id: str, image_id: str, svc: CaseService = Depends(get_case_service)):
    svc.delete_image(case_id, image_id)
    return {"message": "Image deleted successfully"}
