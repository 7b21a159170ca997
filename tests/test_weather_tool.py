"""Tests for the getWeather tool."""

import json

import httpx
import pytest

from registry import CallContext, ToolServices
from results import Err, ErrorKind, Ok
from tests.conftest import FORECAST_BODY, FakeOpenMeteo, make_weather_client
from tools import weather


class TestValidation:
    @pytest.mark.parametrize(
        ("latitude", "longitude", "field", "expected_range"),
        [
            (91, 0, "Latitude", "-90 to 90"),
            (-90.0001, 0, "Latitude", "-90 to 90"),
            (float("nan"), 0, "Latitude", "-90 to 90"),
            (float("inf"), 0, "Latitude", "-90 to 90"),
            (0, 180.5, "Longitude", "-180 to 180"),
            (0, -181, "Longitude", "-180 to 180"),
            (0, float("-inf"), "Longitude", "-180 to 180"),
        ],
    )
    async def test_out_of_range_is_invalid_params(
        self, latitude: float, longitude: float, field: str, expected_range: str
    ) -> None:
        provider = FakeOpenMeteo()
        client = make_weather_client(provider)

        outcome = await weather.get_weather(client, latitude, longitude)

        assert isinstance(outcome, Err)
        assert outcome.kind is ErrorKind.INVALID_PARAMS
        assert field in outcome.message
        assert expected_range in outcome.message
        assert provider.requests == []

    async def test_message_includes_received_value(self) -> None:
        client = make_weather_client(FakeOpenMeteo())

        outcome = await weather.get_weather(client, 91, 0)

        assert isinstance(outcome, Err)
        assert "91" in outcome.message

    @pytest.mark.parametrize("value", [None, "40.7", True, [1]])
    async def test_non_numeric_is_invalid_params(self, value: object) -> None:
        client = make_weather_client(FakeOpenMeteo())

        outcome = await weather.get_weather(client, value, 0)

        assert isinstance(outcome, Err)
        assert outcome.kind is ErrorKind.INVALID_PARAMS


class TestLookup:
    @pytest.mark.parametrize(("latitude", "longitude"), [(-90, -180), (90, 180), (0, 0)])
    async def test_boundary_coordinates_succeed(self, latitude: float, longitude: float) -> None:
        client = make_weather_client(FakeOpenMeteo())

        outcome = await weather.get_weather(client, latitude, longitude)

        assert isinstance(outcome, Ok)

    async def test_success_passes_provider_shape_through(self) -> None:
        client = make_weather_client(FakeOpenMeteo())

        outcome = await weather.get_weather(client, 40.7143, -74.006)

        assert isinstance(outcome, Ok)
        assert json.loads(outcome.text) == FORECAST_BODY

    async def test_upstream_500_becomes_error_payload(self) -> None:
        client = make_weather_client(FakeOpenMeteo(500, {"reason": "service unavailable"}))

        outcome = await weather.get_weather(client, 40.71, -74.01)

        assert isinstance(outcome, Ok)
        payload = json.loads(outcome.text)
        assert payload["error"].startswith("Failed to fetch weather data: ")
        assert "500" in payload["error"]

    async def test_malformed_body_becomes_error_payload(self) -> None:
        client = make_weather_client(FakeOpenMeteo(200, "not json"))

        outcome = await weather.get_weather(client, 40.71, -74.01)

        assert isinstance(outcome, Ok)
        assert json.loads(outcome.text)["error"].startswith("Failed to fetch weather data: ")

    async def test_connection_failure_becomes_error_payload(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_weather_client(refuse)

        outcome = await weather.get_weather(client, 40.71, -74.01)

        assert isinstance(outcome, Ok)
        assert "connection refused" in json.loads(outcome.text)["error"]

    async def test_corrupt_gzip_body_becomes_error_payload(self) -> None:
        def corrupt(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip at all")

        client = make_weather_client(corrupt)

        outcome = await weather.get_weather(client, 1, 2)

        assert isinstance(outcome, Ok)
        assert json.loads(outcome.text)["error"].startswith("Failed to fetch weather data: ")


class TestHandler:
    async def test_handler_uses_injected_client(self, services: ToolServices, fake_provider: FakeOpenMeteo) -> None:
        handle = weather.create_handler(services)

        outcome = await handle({"latitude": 52.52, "longitude": 13.41}, CallContext(deadline=5.0))

        assert isinstance(outcome, Ok)
        assert fake_provider.requests[0].url.params["latitude"] == "52.52"

    def test_tool_spec(self) -> None:
        schema = weather.tool_spec.inputSchema

        assert weather.tool_spec.name == "getWeather"
        assert schema["required"] == ["latitude", "longitude"]
        assert schema["properties"]["latitude"]["minimum"] == -90
        assert schema["properties"]["longitude"]["maximum"] == 180
