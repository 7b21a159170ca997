"""Tests for the echo tool."""

import pytest

from registry import CallContext, ToolServices
from results import Err, ErrorKind, Ok
from tools import echo


class TestEcho:
    @pytest.mark.parametrize(
        "message",
        ["hello", "  padded  ", "안녕하세요 👋", "line1\nline2", "x" * 10_000],
    )
    def test_returns_message_unchanged(self, message: str) -> None:
        assert echo.echo(message) == Ok(message)

    @pytest.mark.parametrize("message", [None, "", "   ", "\t\n", 42])
    def test_rejects_empty_or_missing(self, message: object) -> None:
        outcome = echo.echo(message)

        assert isinstance(outcome, Err)
        assert outcome.kind is ErrorKind.INVALID_ARGUMENT
        assert "message" in outcome.message


class TestHandler:
    async def test_handler_reads_message_argument(self, services: ToolServices) -> None:
        handle = echo.create_handler(services)

        assert await handle({"message": "ping"}, CallContext()) == Ok("ping")

    async def test_handler_missing_argument(self, services: ToolServices) -> None:
        handle = echo.create_handler(services)

        outcome = await handle({}, CallContext())

        assert isinstance(outcome, Err)

    def test_tool_spec(self) -> None:
        assert echo.tool_spec.name == "echo"
        assert echo.tool_spec.inputSchema["required"] == ["message"]
