"""Tests for the location normalization chain."""

import logging
from unittest.mock import MagicMock

import pytest
from openai import APIConnectionError

from caselens.core.config import Settings
from caselens.schemas.location import Coordinates
from caselens.services.location_service import (
    AI_FALLBACK_REASON,
    AINormalizationStrategy,
    ExactAliasStrategy,
    LocationNormalizer,
    SubstringAliasStrategy,
    UnknownInputStrategy,
    build_location_normalizer,
    parse_location_response,
)
from tests.conftest import FakeGeocoder, make_completion

CENTROID = (39.8283, -98.5795)


def _coords(result):
    return (result.coordinates.lat, result.coordinates.lng)


@pytest.fixture
def ai_client():
    return MagicMock()


@pytest.fixture
def fake_geocoder():
    return FakeGeocoder(result=Coordinates(lat=35.1, lng=-92.6))


@pytest.fixture
def normalizer(ai_client, fake_geocoder):
    return build_location_normalizer(Settings(), ai_client, fake_geocoder)


class TestStaticStrategies:

    @pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
    def test_blank_input_is_centroid_without_network(self, normalizer, ai_client, fake_geocoder, raw):
        result = normalizer.normalize(raw)
        assert result.normalized_location == "United States"
        assert _coords(result) == CENTROID
        assert result.confidence == "n/a"
        ai_client.chat.completions.create.assert_not_called()
        assert fake_geocoder.calls == []

    def test_nyc_uses_city_table(self, normalizer, ai_client, fake_geocoder):
        result = normalizer.normalize("nyc")
        assert result.normalized_location == "New York, NY, USA"
        assert _coords(result) == (40.7128, -74.0060)
        assert result.confidence == "high"
        ai_client.chat.completions.create.assert_not_called()
        assert fake_geocoder.calls == []

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("LA", "Los Angeles, CA, USA"),
            ("  Philly ", "Philadelphia, PA, USA"),
            ("Washington D.C.", "Washington, DC, USA"),
            ("TEXAS", "Texas, USA"),
        ],
    )
    def test_exact_alias_is_case_insensitive(self, normalizer, ai_client, raw, expected):
        assert normalizer.normalize(raw).normalized_location == expected
        ai_client.chat.completions.create.assert_not_called()

    def test_canonical_name_matches_itself(self):
        match = ExactAliasStrategy().match("boston, ma, usa")
        assert match.normalized_location == "Boston, MA, USA"

    def test_state_without_city_coordinates_is_geocoded(self, normalizer, fake_geocoder):
        result = normalizer.normalize("florida")
        assert result.normalized_location == "Florida, USA"
        assert fake_geocoder.calls == ["Florida, USA"]
        assert _coords(result) == (35.1, -92.6)

    def test_substring_match(self, normalizer, ai_client):
        result = normalizer.normalize("Downtown Chicago near the river")
        assert result.normalized_location == "Chicago, IL, USA"
        assert result.confidence == "medium"
        ai_client.chat.completions.create.assert_not_called()

    def test_substring_match_input_inside_alias(self):
        match = SubstringAliasStrategy().match("seatt")
        assert match.normalized_location == "Seattle, WA, USA"

    def test_substring_prefers_dictionary_order(self):
        # "la" precedes "atlanta" in the table, so the short alias wins
        match = SubstringAliasStrategy().match("atlanta ga")
        assert match.normalized_location == "Los Angeles, CA, USA"

    @pytest.mark.parametrize("raw", ["location unknownish", "x"])
    def test_unknown_or_short(self, raw):
        match = UnknownInputStrategy().match(raw)
        assert match.normalized_location == "United States"
        assert (match.coordinates.lat, match.coordinates.lng) == CENTROID

    def test_unknown_strategy_passes_on_real_text(self):
        assert UnknownInputStrategy().match("Tulsa") is None


class TestAIStrategy:

    def test_ai_json_result_and_geocode(self, normalizer, ai_client, fake_geocoder):
        ai_client.chat.completions.create.return_value = make_completion(
            '{"normalizedLocation": "Noah, AR, USA", "confidence": "medium", "reasoning": "small town"}'
        )
        result = normalizer.normalize("noah")
        assert result.normalized_location == "Noah, AR, USA"
        assert result.confidence == "medium"
        assert result.reasoning == "small town"
        assert fake_geocoder.calls == ["Noah, AR, USA"]
        assert _coords(result) == (35.1, -92.6)

        kwargs = ai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == Settings().LOCATION_MODEL
        assert '"noah"' in kwargs["messages"][1]["content"]

    def test_ai_result_in_city_table_skips_geocoder(self, normalizer, ai_client, fake_geocoder):
        ai_client.chat.completions.create.return_value = make_completion(
            '{"normalizedLocation": "San Diego, CA, USA", "confidence": "high"}'
        )
        result = normalizer.normalize("sandiego")
        assert _coords(result) == (32.7157, -117.1611)
        assert fake_geocoder.calls == []

    def test_geocoder_miss_falls_back_to_centroid(self, ai_client):
        ai_client.chat.completions.create.return_value = make_completion(
            '{"normalizedLocation": "Nowhere, ZZ", "confidence": "low"}'
        )
        normalizer = build_location_normalizer(Settings(), ai_client, FakeGeocoder(result=None))
        result = normalizer.normalize("nowhere zz")
        assert result.normalized_location == "Nowhere, ZZ"
        assert _coords(result) == CENTROID

    def test_network_failure_degrades(self, normalizer, ai_client):
        ai_client.chat.completions.create.side_effect = APIConnectionError(request=MagicMock())
        result = normalizer.normalize("Hyderbad")
        assert result.normalized_location == "Hyderbad, USA"
        assert result.confidence == "low"
        assert result.reasoning == AI_FALLBACK_REASON

    def test_missing_client_degrades(self, fake_geocoder):
        normalizer = build_location_normalizer(Settings(), None, fake_geocoder)
        result = normalizer.normalize("Tulsa")
        assert result.normalized_location == "Tulsa, USA"
        assert result.reasoning == AI_FALLBACK_REASON

    def test_never_raises_when_geocoder_explodes(self, ai_client):
        class BrokenGeocoder:
            def geocode(self, place):
                raise RuntimeError("boom")

        ai_client.chat.completions.create.return_value = make_completion('{"normalizedLocation": "Tulsa, OK, USA"}')
        normalizer = build_location_normalizer(Settings(), ai_client, BrokenGeocoder())
        result = normalizer.normalize("tulsa")
        assert result.normalized_location == "Tulsa, OK, USA"
        assert _coords(result) == CENTROID

    def test_strategy_calls_model_once(self, ai_client):
        ai_client.chat.completions.create.return_value = make_completion('{"normalizedLocation": "Reno, NV, USA"}')
        match = AINormalizationStrategy(ai_client, "gpt-4o-mini").match("reno")
        assert match.normalized_location == "Reno, NV, USA"
        assert ai_client.chat.completions.create.call_count == 1


class TestParseLocationResponse:

    def test_fenced_json(self):
        content = 'Sure!\n```json\n{"normalizedLocation": "Amsterdam, Netherlands", "confidence": "high"}\n```'
        match = parse_location_response(content, "amstredam")
        assert match.normalized_location == "Amsterdam, Netherlands"
        assert match.confidence == "high"

    def test_bare_json_in_prose(self):
        content = 'Here you go: {"normalizedLocation": "Boise, ID, USA", "reasoning": "capital"} hope it helps'
        match = parse_location_response(content, "boise")
        assert match.normalized_location == "Boise, ID, USA"
        assert match.confidence == "medium"
        assert match.reasoning == "capital"

    def test_field_extraction_from_broken_json(self):
        content = '{"normalizedLocation": "Salem, OR, USA", "confidence": high}'
        match = parse_location_response(content, "salem")
        assert match.normalized_location == "Salem, OR, USA"

    def test_unparseable_reply(self):
        match = parse_location_response("I have no idea.", "zzyzx")
        assert match.normalized_location == "zzyzx, USA"
        assert match.confidence == "low"

    def test_json_without_location_field(self):
        match = parse_location_response('{"confidence": "low"}', "foo bar")
        assert match.normalized_location == "foo bar, USA"
        assert match.confidence == "low"


class _BrokenStrategy:
    name = "broken"

    def match(self, raw):
        raise RuntimeError("lookup table unavailable")


def test_failing_strategy_is_logged_and_skipped(fake_geocoder, caplog):
    normalizer = LocationNormalizer([_BrokenStrategy(), ExactAliasStrategy()], fake_geocoder)

    with caplog.at_level(logging.ERROR, logger="caselens.services.location_service"):
        result = normalizer.normalize("nyc")

    assert result.normalized_location == "New York, NY, USA"
    assert result.confidence == "high"
    assert "Location strategy broken failed" in caplog.text
