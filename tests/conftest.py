"""Shared fixtures: a fake Open-Meteo provider built on httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from registry import ToolServices
from utils.open_meteo import WeatherClient

BASE_URL = "https://api.open-meteo.com"

FORECAST_BODY: Dict[str, Any] = {
    "latitude": 40.71,
    "longitude": -74.01,
    "timezone": "America/New_York",
    "current": {
        "time": "2026-02-25T12:00",
        "temperature_2m": 5.2,
        "wind_speed_10m": 12.3,
        "relative_humidity_2m": 65,
    },
    "current_units": {
        "temperature_2m": "°C",
        "wind_speed_10m": "km/h",
        "relative_humidity_2m": "%",
    },
}


class FakeOpenMeteo:
    """Records every request and answers with a fixed status and body."""

    def __init__(self, status_code: int = 200, body: Optional[Any] = None) -> None:
        self.status_code = status_code
        self.body = FORECAST_BODY if body is None else body
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())


def make_weather_client(handler: Callable[[httpx.Request], Any]) -> WeatherClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return WeatherClient(http_client=http_client)


@pytest.fixture
def fake_provider() -> FakeOpenMeteo:
    return FakeOpenMeteo()


@pytest.fixture
def weather_client(fake_provider: FakeOpenMeteo) -> WeatherClient:
    return make_weather_client(fake_provider)


@pytest.fixture
def services(weather_client: WeatherClient) -> ToolServices:
    return ToolServices(weather_client=weather_client)
