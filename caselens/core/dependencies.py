# caselens/core/dependencies.py
from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from openai import OpenAI
from sqlalchemy.orm import Session

from caselens.core.config import Settings, get_settings
from caselens.db.session import SessionLocal
from caselens.services.analysis_service import CaseAnalysisService
from caselens.services.case_service import CaseService
from caselens.services.chat_service import ChatService
from caselens.services.geocoder import GeocoderClient
from caselens.services.llm import build_openai_client
from caselens.services.location_service import LocationNormalizer, build_location_normalizer
from caselens.utils.s3 import ImageStore


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def _openai_client() -> Optional[OpenAI]:
    return build_openai_client(get_settings())


def get_openai_client() -> Optional[OpenAI]:
    return _openai_client()


@lru_cache
def _geocoder() -> GeocoderClient:
    return GeocoderClient(get_settings())


def get_geocoder() -> GeocoderClient:
    return _geocoder()


@lru_cache
def _image_store() -> ImageStore:
    return ImageStore(get_settings())


def get_image_store() -> ImageStore:
    return _image_store()


def get_location_normalizer(
    settings: Settings = Depends(get_settings),
    client: Optional[OpenAI] = Depends(get_openai_client),
    geocoder: GeocoderClient = Depends(get_geocoder),
) -> LocationNormalizer:
    return build_location_normalizer(settings, client, geocoder)


def get_case_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    normalizer: LocationNormalizer = Depends(get_location_normalizer),
    image_store: ImageStore = Depends(get_image_store),
) -> CaseService:
    return CaseService(db, settings, normalizer=normalizer, image_store=image_store)


def get_analysis_service(
    cases: CaseService = Depends(get_case_service),
    client: Optional[OpenAI] = Depends(get_openai_client),
    settings: Settings = Depends(get_settings),
) -> CaseAnalysisService:
    return CaseAnalysisService(cases, client, settings)


def get_chat_service(
    cases: CaseService = Depends(get_case_service),
    client: Optional[OpenAI] = Depends(get_openai_client),
    settings: Settings = Depends(get_settings),
) -> ChatService:
    return ChatService(cases, client, settings)
