# caselens/api/v1/ai.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends

from caselens.core.dependencies import (
    get_analysis_service,
    get_chat_service,
    get_location_normalizer,
)
from caselens.schemas.analysis import AnalysisOut, AnalyzeResponse
from caselens.schemas.chat import ChatRequest, ChatResponse
from caselens.schemas.location import LocationResult, NormalizeLocationRequest
from caselens.services.analysis_service import CaseAnalysisService
from caselens.services.chat_service import ChatService
from caselens.services.location_service import LocationNormalizer

router = APIRouter()


@router.post("/analyze/{case_id}", response_model=AnalyzeResponse)
def analyze_case(case_id: str, svc: CaseAnalysisService = Depends(get_analysis_service)):
    """
    Run the vision model over every photo of the case and store the result
    """
    analysis = svc.analyze_case(case_id)
    return {"message": "Case analyzed successfully", "analysis": analysis}


@router.get("/analyze/{case_id}", response_model=AnalysisOut)
def get_analysis(case_id: str, svc: CaseAnalysisService = Depends(get_analysis_service)):
    return svc.get_analysis(case_id)


@router.post("/chat/{case_id}", response_model=ChatResponse)
def chat(case_id: str, payload: ChatRequest, svc: ChatService = Depends(get_chat_service)):
    answer = svc.ask_about_case(case_id, payload.question)
    return {
        "answer": answer,
        "question": payload.question,
        "timestamp": datetime.now(timezone.utc),
    }


@router.post("/normalize-location", response_model=LocationResult)
def normalize_location(
    payload: Optional[NormalizeLocationRequest] = None,
    normalizer: LocationNormalizer = Depends(get_location_normalizer),
):
    # always 200: the normalizer degrades instead of failing
    return normalizer.normalize(payload.location if payload else None)
