"""Tests for AppServer wiring."""

import pytest
from mcp.types import Tool

from config import Settings
from core import AppServer
from tests.conftest import FakeOpenMeteo, make_weather_client


def _server() -> AppServer:
    return AppServer(settings=Settings(tool_deadline=3.0), weather_client=make_weather_client(FakeOpenMeteo()))


class TestAppServer:
    def test_registers_all_tools_and_freezes(self) -> None:
        server = _server()

        assert [d.name for d in server.registry.descriptors] == ["echo", "getWeather"]
        assert server.registry.frozen

    def test_registry_cannot_change_after_startup(self) -> None:
        server = _server()

        with pytest.raises(RuntimeError):
            server.registry.register(Tool(name="late", inputSchema={"type": "object"}), None)

    def test_dispatcher_uses_settings(self) -> None:
        server = _server()

        assert server.dispatcher.tool_deadline == 3.0
        assert server.dispatcher.server_info.name == "mcp-connector-template"
