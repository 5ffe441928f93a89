# caselens/services/location_service.py
"""Free-text location normalization.

A raw location string is run through an ordered chain of strategies; the first one
that recognises the input decides the canonical name. Coordinates then come from the
static city table, the geocoder, or the national centroid, in that order.

Nothing in here raises to the caller: upstream failures degrade to the best answer
available locally, and the worst case is ``"United States"`` at the centroid.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from openai import OpenAI, OpenAIError

from caselens.core.config import Settings
from caselens.schemas.location import Coordinates, LocationResult
from caselens.services.geocoder import GeocoderClient
from caselens.services.llm import AIProviderNotConfigured, chat_completion
from caselens.utils.location_data import (
    CITY_COORDINATES,
    DEFAULT_COORDINATES,
    DEFAULT_LOCATION,
    LOCATION_ALIASES,
)

logger = logging.getLogger(__name__)

AI_FALLBACK_REASON = "AI service unavailable, using fallback"

LOCATION_SYSTEM_PROMPT = "You are a location normalization expert. Always return valid JSON only."

LOCATION_PROMPT = """You normalize free-text locations for a case management system. Work out the most likely place the input refers to.

Input location: "{location}"

Rules:
1. A US city, state or region is returned as "City, State, USA" or "State, USA".
2. Common abbreviations ("nyc", "la", "sf") are expanded to the full name.
3. Misspelled or partial names ("noah", "hyderabad", "amstredam") are resolved to the most likely intended place:
   - US places as "City, State, USA" or "State, USA"
   - places outside the US as the full name with the country
4. Input that is ambiguous or genuinely unknown becomes "United States".
5. When the input could match several places, prefer the one in the US.
6. Correct common misspellings, e.g. "amstredam" -> "Amsterdam, Netherlands".

Examples:
- "nyc" -> "New York, NY, USA"
- "noah" -> "Noah, AR, USA"
- "hyderabad" -> "Hyderabad, India"

Return ONLY a JSON object of exactly this shape:
{{
  "normalizedLocation": "City, State, USA",
  "confidence": "high|medium|low",
  "reasoning": "brief explanation"
}}"""

_FENCED_JSON = re.compile(r"```json\s*\n([\s\S]*?)\n\s*```")
_BARE_JSON = re.compile(r"\{[\s\S]*\}")
_LOCATION_FIELD = re.compile(r'"normalizedLocation"\s*:\s*"([^"]+)"')


@dataclass
class LocationMatch:
    normalized_location: str
    confidence: str
    reasoning: str = ""
    coordinates: Optional[Coordinates] = None


def default_coordinates() -> Coordinates:
    lat, lng = DEFAULT_COORDINATES
    return Coordinates(lat=lat, lng=lng)


def default_location(confidence: str, reasoning: str = "") -> LocationMatch:
    return LocationMatch(DEFAULT_LOCATION, confidence, reasoning, default_coordinates())


# -- strategies ----------------------------------------------------------


class EmptyInputStrategy:
    name = "empty"

    def match(self, raw: str) -> Optional[LocationMatch]:
        if raw.strip():
            return None
        return default_location("n/a")


class ExactAliasStrategy:
    """Exact, case-insensitive hit on an alias or on a canonical name."""

    name = "exact-alias"

    def __init__(self, aliases: dict = LOCATION_ALIASES):
        self.aliases = aliases

    def match(self, raw: str) -> Optional[LocationMatch]:
        text = raw.strip().lower()
        if text in self.aliases:
            return LocationMatch(self.aliases[text], "high", "Matched known location alias")
        for canonical in self.aliases.values():
            if canonical.lower() == text:
                return LocationMatch(canonical, "high", "Already a known location name")
        return None


class SubstringAliasStrategy:
    """First alias that contains, or is contained in, the input.

    Deliberately loose: short aliases such as "la" also match inside unrelated
    names ("atlanta ga" resolves to Los Angeles). Kept as-is; see DESIGN.md.
    """

    name = "substring-alias"

    def __init__(self, aliases: dict = LOCATION_ALIASES):
        self.aliases = aliases

    def match(self, raw: str) -> Optional[LocationMatch]:
        text = raw.strip().lower()
        if not text:
            return None
        for alias, canonical in self.aliases.items():
            if alias in text or text in alias:
                return LocationMatch(canonical, "medium", f"Partial match on known location {alias!r}")
        return None


class UnknownInputStrategy:
    name = "unknown"

    def match(self, raw: str) -> Optional[LocationMatch]:
        text = raw.strip().lower()
        if "unknown" in text or len(text) < 2:
            return default_location("low", "Location unknown or too short to resolve")
        return None


class AINormalizationStrategy:
    """Asks the language model; always produces a match, even when the call fails."""

    name = "ai"

    def __init__(self, client: Optional[OpenAI], model: str, temperature: float = 0.3):
        self.client = client
        self.model = model
        self.temperature = temperature

    def match(self, raw: str) -> Optional[LocationMatch]:
        location = raw.strip()
        messages = [
            {"role": "system", "content": LOCATION_SYSTEM_PROMPT},
            {"role": "user", "content": LOCATION_PROMPT.format(location=location)},
        ]
        try:
            content = chat_completion(self.client, self.model, messages, self.temperature)
        except (OpenAIError, AIProviderNotConfigured, ValueError) as e:
            logger.warning("AI location normalization failed for %r: %s", location, e)
            return LocationMatch(f"{location}, USA", "low", AI_FALLBACK_REASON)

        return parse_location_response(content, location)


# -- response parsing ----------------------------------------------------


def _json_candidates(content: str) -> Iterable[str]:
    fenced = _FENCED_JSON.search(content)
    if fenced:
        yield fenced.group(1)
    bare = _BARE_JSON.search(content)
    if bare:
        yield bare.group(0)
    yield content


def parse_location_response(content: str, location: str) -> LocationMatch:
    """Turn a model reply into a match, accepting fenced JSON, embedded JSON or a stray field."""
    content = content.strip()
    fallback = f"{location}, USA"

    for candidate in _json_candidates(content):
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return LocationMatch(
                normalized_location=str(data.get("normalizedLocation") or fallback),
                confidence=str(data.get("confidence") or "medium"),
                reasoning=str(data.get("reasoning") or ""),
            )

    logger.warning("Could not parse AI location response as JSON: %r", content[:200])
    field = _LOCATION_FIELD.search(content)
    if field:
        return LocationMatch(field.group(1), "medium")
    return LocationMatch(fallback, "low")


# -- normalizer ----------------------------------------------------------


class LocationNormalizer:
    def __init__(self, strategies: List, geocoder: Optional[GeocoderClient] = None):
        self.strategies = strategies
        self.geocoder = geocoder

    def normalize(self, raw_text: Optional[str]) -> LocationResult:
        raw = raw_text or ""
        for strategy in self.strategies:
            try:
                match = strategy.match(raw)
            except Exception:
                logger.exception("Location strategy %s failed for %r", strategy.name, raw)
                continue
            if match is not None:
                logger.debug("Location %r resolved by %s -> %s", raw, strategy.name, match.normalized_location)
                return self._finish(match)
        return self._finish(default_location("low"))

    def resolve_coordinates(self, normalized_location: str) -> Coordinates:
        known = CITY_COORDINATES.get(normalized_location)
        if known:
            return Coordinates(lat=known[0], lng=known[1])

        if self.geocoder is not None:
            try:
                coords = self.geocoder.geocode(normalized_location)
            except Exception:
                logger.exception("Geocoder raised for %r", normalized_location)
                coords = None
            if coords is not None:
                return coords

        return default_coordinates()

    def _finish(self, match: LocationMatch) -> LocationResult:
        coordinates = match.coordinates or self.resolve_coordinates(match.normalized_location)
        return LocationResult(
            normalized_location=match.normalized_location,
            coordinates=coordinates,
            confidence=match.confidence,
            reasoning=match.reasoning,
        )


def build_location_normalizer(
    settings: Settings,
    client: Optional[OpenAI],
    geocoder: Optional[GeocoderClient],
) -> LocationNormalizer:
    strategies = [
        EmptyInputStrategy(),
        ExactAliasStrategy(),
        SubstringAliasStrategy(),
        UnknownInputStrategy(),
        AINormalizationStrategy(client, settings.LOCATION_MODEL),
    ]
    return LocationNormalizer(strategies, geocoder)
