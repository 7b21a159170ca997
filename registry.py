"""
Tool Registry
=============

이 모듈은 MCP 서버에서 사용할 **툴 메타데이터(Tool)와 실행 핸들러**를
이름으로 매핑/관리하는 레지스트리를 제공합니다.

설계 요점
---------
- `register(tool, handler)` 로 이름 → `ToolDescriptor`(메타데이터 + 핸들러)를 채웁니다.
- `descriptors` 는 등록 순서를 그대로 유지합니다. 이 순서가 곧 tools/list 노출 순서입니다.
- `listing()` 은 tools/list 응답에 넣을 dict 목록입니다. 핸들러는 절대 노출하지 않습니다.
- `get(name)` 은 미등록 이름이면 None을 돌려주고, 디스패처가 -32602 오류로 바꿉니다.
- 서버 초기화가 끝나면 `freeze()` 로 잠급니다. 이후에는 읽기만 하므로
  동시 요청 사이에서 잠금 없이 공유해도 안전합니다.

간단한 사용 예
--------------
>>> registry = ToolRegistry()
>>> registry.register(echo.tool_spec, echo.create_handler(services))
>>> registry.freeze()
>>> registry.get("echo").name
'echo'
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp.types import Tool

from results import ToolOutcome
from utils.open_meteo import WeatherClient

logger = logging.getLogger("mcp.registry")


@dataclass(frozen=True)
class CallContext:
    """tools/call 한 번에 대한 호출 정보.

    Attributes
    ----------
    deadline : Optional[float]
        이 호출에 허용할 최대 시간(초). None이면 제한 없음(HTTP 타임아웃만 적용).
    session_id : Optional[str]
        전송 계층에서 받은 Mcp-Session-Id. 로그용이며 검증은 HTTP 경계에서 합니다.
    """

    deadline: Optional[float] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class ToolServices:
    """툴 핸들러에 주입되는 외부 협력 객체 묶음."""

    weather_client: WeatherClient


# 비동기 툴 핸들러 시그니처: (arguments, context) → Ok | Err
ToolHandler = Callable[[Dict[str, Any], CallContext], Awaitable[ToolOutcome]]


@dataclass(frozen=True)
class ToolDescriptor:
    tool: Tool
    handler: ToolHandler = field(repr=False)

    @property
    def name(self) -> str:
        return self.tool.name

    @property
    def description(self) -> str:
        return self.tool.description or ""

    @property
    def input_schema(self) -> Dict[str, Any]:
        return self.tool.inputSchema

    def to_listing(self) -> Dict[str, Any]:
        """tools/list 응답 항목. name/description/inputSchema 세 필드만 담습니다."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class ToolRegistry:
    """툴 메타데이터와 실행 핸들러를 이름으로 매핑/관리하는 레지스트리.

    Attributes
    ----------
    _descriptors : Dict[str, ToolDescriptor]
        도구 이름(대소문자 구분) → 디스크립터. dict는 삽입 순서를 보존합니다.
    _frozen : bool
        True가 되면 더 이상 등록을 받지 않습니다.
    """

    def __init__(self) -> None:
        self._descriptors: Dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, tool: Tool, handler: ToolHandler) -> None:
        """도구 하나를 레지스트리에 등록합니다.

        Raises
        ------
        ValueError
            같은 이름의 도구가 이미 등록되어 있는 경우. 서버 시작 단계의 설정 오류입니다.
        RuntimeError
            `freeze()` 이후에 등록을 시도한 경우.
        """
        if self._frozen:
            raise RuntimeError(f"Registry is frozen; cannot register {tool.name!r}")

        name = tool.name
        if name in self._descriptors:
            raise ValueError(f"Duplicate tool: {name}")

        self._descriptors[name] = ToolDescriptor(tool=tool, handler=handler)
        logger.debug("registered tool name=%s", name)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def descriptors(self) -> List[ToolDescriptor]:
        """등록 순서대로 정렬된 디스크립터 목록."""
        return list(self._descriptors.values())

    def listing(self) -> List[Dict[str, Any]]:
        return [d.to_listing() for d in self._descriptors.values()]

    def get(self, name: str) -> Optional[ToolDescriptor]:
        """이름에 해당하는 디스크립터를 반환합니다. 없으면 None."""
        return self._descriptors.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)
