"""
HTTP 전송 계층(http_app.py)
===========================

디스패처를 Streamable HTTP 방식의 엔드포인트로 노출하는 Starlette 앱을 만듭니다.

엔드포인트
----------
- GET    /health : 컨테이너 오케스트레이션(Docker, Kubernetes 등)용 생존 확인. MCP 규격의 일부가 아님.
- POST   /mcp    : JSON-RPC 요청 본문 → 디스패처 → JSON 응답
- GET    /mcp    : 서버 발신 SSE 스트림 자리. 이 서버는 스트림을 열지 않으므로 405.
- DELETE /mcp    : 클라이언트가 세션을 끝냄. Mcp-Session-Id 를 세션 목록에서 지웁니다.

헤더 규칙
---------
- Accept 에 application/json 과 text/event-stream 이 **둘 다** 있어야 합니다. 아니면 406.
- POST 본문의 Content-Type 은 application/json 이어야 합니다. 아니면 415.
- initialize 성공 응답에는 Mcp-Session-Id 헤더로 새 세션 ID를 내려줍니다.
  이후 요청에 모르는 세션 ID가 오면 404, 헤더가 없으면 그대로 받아줍니다.
- DELETE 는 헤더가 없으면 400, 모르는 세션이면 404, 지우고 나면 200.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Set

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from dispatcher import RpcDispatcher
from jsonrpc import INVALID_REQUEST, RpcResponse

logger = logging.getLogger("mcp.http")

SESSION_HEADER = "mcp-session-id"
JSON_MEDIA_TYPE = "application/json"
SSE_MEDIA_TYPE = "text/event-stream"


def _media_types(header: Optional[str]) -> List[str]:
    # "application/json;q=0.9, text/event-stream" → ["application/json", "text/event-stream"]
    if not header:
        return []
    return [part.split(";", 1)[0].strip().lower() for part in header.split(",") if part.strip()]


def accepts_streamable_http(request: Request) -> bool:
    accepted = _media_types(request.headers.get("accept"))
    return JSON_MEDIA_TYPE in accepted and SSE_MEDIA_TYPE in accepted


def _rpc_error(status_code: int, code: int, message: str) -> JSONResponse:
    body = RpcResponse.failure(None, code, message).to_dict()
    return JSONResponse(body, status_code=status_code)


def create_app(
    dispatcher: RpcDispatcher,
    on_shutdown: Optional[Callable[[], Awaitable[None]]] = None,
) -> Starlette:
    """디스패처를 감싼 Starlette 앱을 만듭니다.

    Parameters
    ----------
    dispatcher : RpcDispatcher
        JSON-RPC 처리기.
    on_shutdown : callable, optional
        앱 종료 시 await 할 정리 함수(예: WeatherClient.aclose).
    """
    sessions: Set[str] = set()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
        )

    async def mcp_post(request: Request) -> Response:
        if not accepts_streamable_http(request):
            return _rpc_error(
                406,
                INVALID_REQUEST,
                "Not Acceptable: Client must accept both application/json and text/event-stream",
            )

        content_type = _media_types(request.headers.get("content-type"))
        if JSON_MEDIA_TYPE not in content_type:
            return _rpc_error(415, INVALID_REQUEST, "Unsupported Media Type: Content-Type must be application/json")

        session_id = request.headers.get(SESSION_HEADER)
        if session_id is not None and session_id not in sessions:
            logger.info("unknown session id=%s", session_id)
            return _rpc_error(404, INVALID_REQUEST, "Session not found")

        body = await request.body()
        outcome = await dispatcher.dispatch_raw(body, session_id=session_id)

        if outcome.response is None:
            return Response(status_code=202)

        headers = {}
        if outcome.session_id is not None:
            sessions.add(outcome.session_id)
            headers[SESSION_HEADER] = outcome.session_id
            logger.info("session issued id=%s", outcome.session_id)
        elif session_id is not None:
            headers[SESSION_HEADER] = session_id

        return JSONResponse(outcome.response, headers=headers)

    async def mcp_get(request: Request) -> Response:
        if SSE_MEDIA_TYPE not in _media_types(request.headers.get("accept")):
            return _rpc_error(406, INVALID_REQUEST, "Not Acceptable: Client must accept text/event-stream")
        return _rpc_error(405, INVALID_REQUEST, "Method Not Allowed: server-initiated streams are not supported")

    async def mcp_delete(request: Request) -> Response:
        session_id = request.headers.get(SESSION_HEADER)
        if session_id is None:
            return _rpc_error(400, INVALID_REQUEST, "Bad Request: Missing session ID")
        if session_id not in sessions:
            return _rpc_error(404, INVALID_REQUEST, "Session not found")
        sessions.discard(session_id)
        logger.info("session terminated id=%s", session_id)
        return Response(status_code=200)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("MCP HTTP server starting")
        try:
            yield
        finally:
            if on_shutdown is not None:
                await on_shutdown()
            logger.info("MCP HTTP server stopped")

    routes = [
        Route("/health", endpoint=health, methods=["GET"]),
        Route("/mcp", endpoint=mcp_post, methods=["POST"]),
        Route("/mcp", endpoint=mcp_get, methods=["GET"]),
        Route("/mcp", endpoint=mcp_delete, methods=["DELETE"]),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.sessions = sessions
    return app
