# caselens/schemas/location.py
from typing import Optional

from pydantic import BaseModel

from caselens.schemas.base import CamelModel


class Coordinates(BaseModel):
    lat: float
    lng: float


class NormalizeLocationRequest(BaseModel):
    location: Optional[str] = None


class LocationResult(CamelModel):
    normalized_location: str
    coordinates: Coordinates
    confidence: str = "medium"
    reasoning: str = ""
