"""
JSON-RPC 2.0 메시지 모델(jsonrpc.py)
====================================

MCP가 쓰는 JSON-RPC 2.0 요청/응답 봉투(envelope)를 pydantic 모델로 정의합니다.
오류 코드는 MCP SDK(`mcp.types`)에 정의된 표준 상수를 그대로 씁니다.

- RpcRequest  : 파싱이 끝난 요청. `from_message()` 로 dict를 검증하며 만듭니다.
- RpcResponse : result 또는 error 중 **정확히 하나만** 가진 응답.
- RpcError    : `mcp.types.ErrorData` (code, message, data)
"""

import math
from typing import Any, Dict, Optional, Union

from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ErrorData,
)
from pydantic import BaseModel, model_validator

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "RequestId",
    "RpcError",
    "RpcProtocolError",
    "RpcRequest",
    "RpcResponse",
]

RequestId = Union[int, float, str, None]
RpcError = ErrorData


class RpcProtocolError(Exception):
    """요청을 처리하기 전에 발견된 프로토콜 수준 오류."""

    def __init__(self, code: int, message: str, request_id: RequestId = None) -> None:
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(message)

    def to_response(self) -> "RpcResponse":
        return RpcResponse.failure(self.request_id, self.code, self.message)


def _is_valid_id(value: Any) -> bool:
    # JSON-RPC id: 문자열, 숫자, null. bool은 int의 하위 타입이라 따로 제외합니다.
    # NaN/Infinity 는 응답 JSON으로 되돌려 보낼 수 없어서 거부합니다.
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    return value is None or isinstance(value, (int, str))


class RpcRequest(BaseModel):
    """검증을 통과한 JSON-RPC 요청.

    `is_notification` 이 True면 id 멤버가 아예 없던 요청(알림)이며 응답하지 않습니다.
    """

    jsonrpc: str = "2.0"
    id: RequestId = None
    method: str
    params: Dict[str, Any] = {}
    is_notification: bool = False

    @classmethod
    def from_message(cls, message: Any) -> "RpcRequest":
        """디코딩된 JSON 값에서 요청을 만듭니다.

        Raises
        ------
        RpcProtocolError
            INVALID_REQUEST: 객체가 아님, jsonrpc != "2.0", method 누락/빈 값, 잘못된 id 타입
            INVALID_PARAMS : params가 객체가 아님
        """
        if not isinstance(message, dict):
            raise RpcProtocolError(INVALID_REQUEST, "Invalid Request: expected a JSON object")

        raw_id = message.get("id")
        request_id = raw_id if _is_valid_id(raw_id) else None

        if message.get("jsonrpc") != "2.0":
            raise RpcProtocolError(INVALID_REQUEST, 'Invalid Request: jsonrpc must be "2.0"', request_id)
        if not _is_valid_id(raw_id):
            raise RpcProtocolError(INVALID_REQUEST, "Invalid Request: id must be a string, number or null")

        method = message.get("method")
        if not isinstance(method, str) or not method:
            raise RpcProtocolError(INVALID_REQUEST, "Invalid Request: method must be a non-empty string", request_id)

        params = message.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, dict):
            raise RpcProtocolError(INVALID_PARAMS, "Invalid params: params must be an object", request_id)

        return cls(
            id=request_id,
            method=method,
            params=params,
            is_notification="id" not in message,
        )


class RpcResponse(BaseModel):
    """JSON-RPC 2.0 응답. result와 error 중 정확히 하나만 채워집니다."""

    jsonrpc: str = "2.0"
    id: RequestId = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[RpcError] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "RpcResponse":
        if (self.result is None) == (self.error is None):
            raise ValueError("a JSON-RPC response carries exactly one of result or error")
        return self

    @classmethod
    def success(cls, request_id: RequestId, result: Dict[str, Any]) -> "RpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId, code: int, message: str, data: Any = None) -> "RpcResponse":
        return cls(id=request_id, error=RpcError(code=code, message=message, data=data))

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        return body
