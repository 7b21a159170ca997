"""
JSON-RPC 디스패처(dispatcher.py)
================================

요청 하나를 받아 **파싱 → 메서드 라우팅 → 응답 조립** 까지를 처리합니다.
요청 사이에 공유하는 상태는 (읽기 전용인) ToolRegistry 뿐입니다.

전체 흐름 요약
--------------
1) 파싱: JSON이 깨졌으면 -32700, 봉투가 잘못됐으면 -32600
2) 라우팅
   - initialize  : 프로토콜 버전 협상 + capabilities + serverInfo, 새 세션 ID 발급
   - ping        : 빈 결과 {}
   - tools/list  : 레지스트리의 도구 목록
   - tools/call  : 도구 실행. 결과 문자열은 {"content": [{"type": "text", "text": ...}]} 로 감쌈
   - 그 외       : -32601
3) 알림(id 멤버가 없는 요청)은 처리만 하고 응답 본문을 만들지 않습니다.

오류 변환 규칙
--------------
- 툴이 돌려준 Err(kind, message) → `_ERROR_CODES` 표 한 곳에서 JSON-RPC 코드로 변환
- 툴 실행 중 예기치 못한 예외 → -32603 "Internal error" (내부 메시지는 로그에만 남김)
"""

import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from mcp.types import (
    LATEST_PROTOCOL_VERSION,
    CallToolResult,
    Implementation,
    InitializeResult,
    ServerCapabilities,
    TextContent,
    ToolsCapability,
)

from jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    RpcProtocolError,
    RpcRequest,
    RpcResponse,
)
from registry import CallContext, ToolRegistry
from results import Err, ErrorKind, Ok

logger = logging.getLogger("mcp.dispatcher")

SUPPORTED_PROTOCOL_VERSIONS = tuple(
    dict.fromkeys(["2024-11-05", "2025-03-26", "2025-06-18", LATEST_PROTOCOL_VERSION])
)

# Err.kind → JSON-RPC 오류 코드
_ERROR_CODES: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGUMENT: INVALID_PARAMS,
    ErrorKind.INVALID_PARAMS: INVALID_PARAMS,
}


@dataclass(frozen=True)
class DispatchOutcome:
    """디스패치 결과.

    Attributes
    ----------
    response : Optional[dict]
        직렬화할 JSON-RPC 응답. 알림이면 None(HTTP 202로 응답).
    session_id : Optional[str]
        initialize 성공 시 새로 발급한 세션 ID. 전송 계층이 Mcp-Session-Id 헤더로 내려보냅니다.
    """

    response: Optional[Dict[str, Any]]
    session_id: Optional[str] = None


class RpcDispatcher:
    def __init__(
        self,
        registry: ToolRegistry,
        server_name: str,
        server_version: str,
        tool_deadline: Optional[float] = None,
        supported_versions: Sequence[str] = SUPPORTED_PROTOCOL_VERSIONS,
    ) -> None:
        self.registry = registry
        self.server_info = Implementation(name=server_name, version=server_version)
        self.tool_deadline = tool_deadline
        self.supported_versions = tuple(supported_versions)

    async def dispatch_raw(self, body: Union[bytes, str], session_id: Optional[str] = None) -> DispatchOutcome:
        """HTTP 본문(바이트/문자열)을 그대로 받아 처리합니다."""
        try:
            message = json.loads(body)
        except (ValueError, UnicodeDecodeError, RecursionError):
            # RecursionError: 지나치게 깊이 중첩된 배열/객체
            logger.info("parse error on inbound body")
            return DispatchOutcome(RpcResponse.failure(None, PARSE_ERROR, "Parse error").to_dict())
        return await self.dispatch(message, session_id=session_id)

    async def dispatch(self, message: Any, session_id: Optional[str] = None) -> DispatchOutcome:
        """디코딩된 JSON 값 하나를 처리합니다."""
        try:
            request = RpcRequest.from_message(message)
        except RpcProtocolError as exc:
            return DispatchOutcome(exc.to_response().to_dict())

        new_session: Optional[str] = None
        try:
            if request.method == "initialize":
                result, new_session = self._initialize(request.params)
            elif request.method == "ping":
                result = {}
            elif request.method == "tools/list":
                result = {"tools": self.registry.listing()}
            elif request.method == "tools/call":
                result = await self._call_tool(request.params, CallContext(self.tool_deadline, session_id))
            elif request.is_notification and request.method.startswith("notifications/"):
                logger.debug("notification received method=%s", request.method)
                return DispatchOutcome(None)
            else:
                raise RpcProtocolError(METHOD_NOT_FOUND, f"Method not found: {request.method}")
        except RpcProtocolError as exc:
            response = RpcResponse.failure(request.id, exc.code, exc.message)
        except Exception:
            logger.exception("unhandled error method=%s", request.method)
            response = RpcResponse.failure(request.id, INTERNAL_ERROR, "Internal error")
        else:
            response = RpcResponse.success(request.id, result)

        if request.is_notification:
            return DispatchOutcome(None)
        if response.error is not None:
            new_session = None
        return DispatchOutcome(response.to_dict(), session_id=new_session)

    def _initialize(self, params: Dict[str, Any]):
        requested = params.get("protocolVersion")
        version = requested if requested in self.supported_versions else LATEST_PROTOCOL_VERSION

        client_info = params.get("clientInfo") or {}
        if isinstance(client_info, dict):
            logger.info(
                "initialize client=%s/%s protocol=%s",
                client_info.get("name"),
                client_info.get("version"),
                version,
            )

        result = InitializeResult(
            protocolVersion=version,
            capabilities=ServerCapabilities(tools=ToolsCapability(listChanged=False)),
            serverInfo=self.server_info,
        )
        return result.model_dump(by_alias=True, exclude_none=True, mode="json"), uuid.uuid4().hex

    async def _call_tool(self, params: Dict[str, Any], context: CallContext) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise RpcProtocolError(INVALID_PARAMS, "Invalid params: 'name' must be a non-empty string")

        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, dict):
            raise RpcProtocolError(INVALID_PARAMS, "Invalid params: 'arguments' must be an object")

        descriptor = self.registry.get(name)
        if descriptor is None:
            raise RpcProtocolError(INVALID_PARAMS, f"Unknown tool: '{name}'")

        logger.info("call_tool start name=%s session=%s", name, context.session_id)
        outcome = await descriptor.handler(arguments, context)

        if isinstance(outcome, Err):
            logger.info("call_tool rejected name=%s kind=%s", name, outcome.kind.value)
            raise RpcProtocolError(_ERROR_CODES[outcome.kind], outcome.message)
        if not isinstance(outcome, Ok):
            raise TypeError(f"tool {name!r} returned {type(outcome).__name__}, expected Ok or Err")

        logger.info("call_tool done name=%s size=%s", name, len(outcome.text))
        result = CallToolResult(content=[TextContent(type="text", text=outcome.text)], isError=False)
        return result.model_dump(by_alias=True, exclude_none=True, mode="json")
