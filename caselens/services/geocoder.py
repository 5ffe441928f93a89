# caselens/services/geocoder.py
import logging
from typing import Optional

import requests

from caselens.core.config import Settings
from caselens.schemas.location import Coordinates

logger = logging.getLogger(__name__)


class GeocoderClient:
    """Forward geocoding against a Nominatim-compatible search endpoint.

    Nominatim rejects anonymous clients, so every request carries the configured
    ``User-Agent``. Lookups never raise: any failure is logged and reported as ``None``.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.url = settings.GEOCODER_URL
        self.user_agent = settings.GEOCODER_USER_AGENT
        self.timeout = settings.GEOCODER_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def geocode(self, place: str) -> Optional[Coordinates]:
        if not place or not place.strip():
            return None

        try:
            resp = self.session.get(
                self.url,
                params={"format": "json", "q": place, "limit": 1},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            if not resp.ok:
                logger.warning("Geocoding %r failed with HTTP %s", place, resp.status_code)
                return None

            results = resp.json()
            if not results:
                return None

            first = results[0]
            return Coordinates(lat=float(first["lat"]), lng=float(first["lon"]))
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning("Geocoding error for %r: %s", place, e)
            return None
