"""Tests for ToolRegistry."""

import pytest
from mcp.types import Tool

from registry import CallContext, ToolRegistry
from results import Ok


def _tool(name: str) -> Tool:
    return Tool(name=name, description=f"{name} tool", inputSchema={"type": "object", "properties": {}})


async def _noop(arguments: dict, context: CallContext) -> Ok:
    return Ok("")


class TestRegister:
    def test_preserves_registration_order(self) -> None:
        registry = ToolRegistry()
        for name in ("zeta", "alpha", "mid"):
            registry.register(_tool(name), _noop)

        assert [d.name for d in registry.descriptors] == ["zeta", "alpha", "mid"]

    def test_duplicate_name_fails(self) -> None:
        registry = ToolRegistry()
        registry.register(_tool("echo"), _noop)

        with pytest.raises(ValueError, match="Duplicate tool: echo"):
            registry.register(_tool("echo"), _noop)

    def test_names_are_case_sensitive(self) -> None:
        registry = ToolRegistry()
        registry.register(_tool("echo"), _noop)
        registry.register(_tool("Echo"), _noop)

        assert len(registry) == 2
        assert registry.get("ECHO") is None

    def test_frozen_registry_rejects_registration(self) -> None:
        registry = ToolRegistry()
        registry.freeze()

        with pytest.raises(RuntimeError):
            registry.register(_tool("late"), _noop)


class TestLookup:
    def test_get_returns_descriptor(self) -> None:
        registry = ToolRegistry()
        registry.register(_tool("echo"), _noop)

        descriptor = registry.get("echo")

        assert descriptor is not None
        assert descriptor.handler is _noop
        assert "echo" in registry

    def test_get_unknown_returns_none(self) -> None:
        assert ToolRegistry().get("doesNotExist") is None

    def test_listing_hides_handler(self) -> None:
        registry = ToolRegistry()
        registry.register(_tool("echo"), _noop)

        assert registry.listing() == [
            {
                "name": "echo",
                "description": "echo tool",
                "inputSchema": {"type": "object", "properties": {}},
            }
        ]
