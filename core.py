"""
MCP 서버 코어(core.py)
======================

이 파일은 **여러 MCP 도구(툴)** 를 한 HTTP 서버에서 제공하기 위한 조립(wiring) 로직을 담고 있습니다.
실제 규칙은 각 모듈에 있고, 여기서는 만들고 연결하는 일만 합니다.

전체 흐름 요약
--------------
1) WeatherClient 생성(외부 API 클라이언트). 툴에는 ToolServices로 주입합니다.
2) ToolRegistry에 tools.ALL 의 툴들을 등록하고 잠급니다(freeze).
3) RpcDispatcher 생성: initialize / tools/list / tools/call 라우팅 담당
4) Starlette 앱 생성: /health, /mcp 엔드포인트
5) `run()`: uvicorn으로 HTTP 서버를 구동합니다.

용어
----
- **MCP**: Model Context Protocol. LLM과 "도구"를 연결해 주는 표준 인터페이스.
- **Tool**: LLM이 호출할 수 있는 기능 단위(예: echo, getWeather).
- **ToolRegistry**: 도구 메타데이터와 실행 함수를 이름으로 보관/조회하는 작은 등록소.
"""

import logging
from typing import Optional

import uvicorn

from config import Settings
from dispatcher import RpcDispatcher
from http_app import create_app
from registry import ToolRegistry, ToolServices
from tools import ALL as TOOL_MODULES
from utils.open_meteo import WeatherClient

logger = logging.getLogger("mcp.core")


class AppServer:
    """여러 MCP 툴을 한 HTTP 서버에서 제공하는 코어 서버.

    Parameters
    ----------
    settings : Settings, optional
        생략하면 환경변수에서 읽습니다.
    weather_client : WeatherClient, optional
        테스트에서 가짜 전송(MockTransport)을 끼운 클라이언트를 주입할 때 사용합니다.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        weather_client: Optional[WeatherClient] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.weather_client = weather_client or WeatherClient(
            base_url=self.settings.weather_base_url,
            timeout=self.settings.weather_timeout,
        )

        self.registry = ToolRegistry()
        self._register_tools(ToolServices(weather_client=self.weather_client))

        self.dispatcher = RpcDispatcher(
            self.registry,
            server_name=self.settings.server_name,
            server_version=self.settings.server_version,
            tool_deadline=self.settings.tool_deadline,
        )
        self.app = create_app(self.dispatcher, on_shutdown=self.weather_client.aclose)

    def _register_tools(self, services: ToolServices) -> None:
        """툴 모듈들을 레지스트리에 등록한 뒤 잠급니다.

        각 모듈은 `tool_spec`(메타데이터)와 `create_handler`(핸들러 생성 함수)를 export 합니다.
        이름이 겹치면 ValueError가 나고 서버는 시작하지 않습니다.
        """
        for mod in TOOL_MODULES:
            self.registry.register(mod.tool_spec, mod.create_handler(services))
        self.registry.freeze()
        logger.info("registered tools: %s", ", ".join(d.name for d in self.registry.descriptors))

    async def run(self) -> None:
        """uvicorn으로 HTTP 서버를 실행합니다. 종료 신호를 받을 때까지 돌아갑니다."""
        config = uvicorn.Config(
            app=self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )
        logger.info("MCP server listening on %s:%s", self.settings.host, self.settings.port)
        await uvicorn.Server(config).serve()
