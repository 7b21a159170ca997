"""Tests for the WeatherReading model."""

import json

import pytest
from pydantic import ValidationError

from tests.conftest import FORECAST_BODY
from utils.weather_models import WeatherReading


class TestWeatherReading:
    def test_parses_provider_shape(self) -> None:
        reading = WeatherReading.model_validate(FORECAST_BODY)

        assert reading.latitude == 40.71
        assert reading.current.temperature_2m == 5.2
        assert reading.current_units.temperature_2m == "°C"

    def test_serialize_and_parse_back(self) -> None:
        reading = WeatherReading.model_validate(FORECAST_BODY)

        again = WeatherReading.model_validate_json(reading.model_dump_json())

        assert again == reading

    def test_serialized_shape_matches_provider(self) -> None:
        reading = WeatherReading.model_validate(FORECAST_BODY)

        assert json.loads(reading.model_dump_json()) == FORECAST_BODY

    def test_unknown_provider_fields_are_dropped(self) -> None:
        body = {**FORECAST_BODY, "elevation": 51.0, "generationtime_ms": 0.03}

        dumped = json.loads(WeatherReading.model_validate(body).model_dump_json())

        assert "elevation" not in dumped
        assert set(dumped) == {"latitude", "longitude", "timezone", "current", "current_units"}

    def test_humidity_bounds(self) -> None:
        body = {**FORECAST_BODY, "current": {**FORECAST_BODY["current"], "relative_humidity_2m": -1}}

        with pytest.raises(ValidationError):
            WeatherReading.model_validate(body)
