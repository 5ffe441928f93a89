# caselens/api/api_router.py
from fastapi import APIRouter

from caselens.api.v1 import ai, cases

api_router = APIRouter()
api_router.include_router(cases.router, prefix="/v1/cases", tags=["cases"])
api_router.include_router(ai.router, prefix="/v1/ai", tags=["ai"])


@api_router.get("/health", tags=["health"])
def health():
    return {"status": "ok", "message": "Backend is running"}
