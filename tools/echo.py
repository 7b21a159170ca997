"""
MCP Tool: echo

가장 단순한 MCP 도구입니다. 받은 메시지를 **바이트 하나 바꾸지 않고** 그대로 돌려줍니다.
커넥터가 살아 있는지, 클라이언트 ↔ 서버 경로가 제대로 연결됐는지 확인할 때 사용합니다.

구성 요소
--------
1) tool_spec        : LLM이 참고하는 도구의 메타데이터(이름/설명/입력 스키마)
2) create_handler() : 레지스트리에 등록할 비동기 핸들러를 만듭니다

동작
----
- message가 없거나(null), 빈 문자열이거나, 공백뿐이면 INVALID_ARGUMENT 오류.
- 그 외에는 message를 그대로 반환(앞뒤 공백도 자르지 않음).
"""

from typing import Any, Dict

from mcp.types import Tool

from registry import CallContext, ToolHandler, ToolServices
from results import Err, ErrorKind, Ok, ToolOutcome

tool_spec = Tool(
    name="echo",
    description=(
        "Echoes the provided message back unchanged. "
        "Use this tool to verify that the MCP connector is reachable and responding correctly."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "message": {
                "type": "string",
                "description": "The message text to echo back. Must not be empty.",
            }
        },
        "required": ["message"],
    },
)


def echo(message: Any) -> ToolOutcome:
    if not isinstance(message, str) or not message.strip():
        return Err(
            ErrorKind.INVALID_ARGUMENT,
            "The value cannot be an empty string or composed entirely of whitespace. (Parameter 'message')",
        )
    return Ok(message)


def create_handler(services: ToolServices) -> ToolHandler:
    # echo는 외부 서비스를 쓰지 않지만, 다른 툴과 같은 방식으로 등록되도록 services를 받습니다.
    async def handle(arguments: Dict[str, Any], context: CallContext) -> ToolOutcome:
        return echo(arguments.get("message"))

    return handle
