#!/usr/bin/env python3
"""
엔트리포인트(server.py)
=======================

이 파일은 MCP 서버를 **실행**하는 가장 바깥쪽 진입점입니다.
가능한 한 얇게 유지해서, 실제 서버 조립은 `core.py`에서 하고
여기서는 실행, 로깅, 예외 처리만 담당합니다.

전체 흐름
--------
1) 설정 로딩 + 로깅 설정: `Settings.from_env()` 의 `LOG_LEVEL` 로 로그 레벨을 제어합니다.
2) `AppServer` 생성: 같은 설정으로 툴 등록, 디스패처/HTTP 앱 연결까지 마칩니다.
3) `app.run()` 호출: uvicorn 기반 HTTP 서버(/health, /mcp)를 구동합니다.
4) 예외 처리: 키보드 인터럽트/일반 예외를 잡아 종료 로그를 남깁니다.

팁
--
- 개발 중에는 `LOG_LEVEL=DEBUG python server.py` 로 상세 로그를 보면서 동작을 확인하세요.
- 포트는 `PORT`(기본 8080), 날씨 API 주소는 `OPEN_METEO_BASE_URL` 로 바꿀 수 있습니다.
"""

import asyncio
import logging
import sys
from typing import Optional

from config import Settings
from core import AppServer

# ---------------------------------------------------------------------------
# 로깅 설정
# - 레벨은 Settings.log_level(환경변수 LOG_LEVEL, 기본 INFO)을 따릅니다.
# - 포맷은 [시간 레벨 로거이름 메시지] 형태로 단순하게 지정했습니다.
# ---------------------------------------------------------------------------
logger = logging.getLogger("mcp.entry")  # 엔트리포인트 전용 로거 이름


def configure_logging(settings: Optional[Settings] = None) -> Settings:
    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    return settings


async def main(settings: Optional[Settings] = None):
    """메인 비동기 함수: 서버를 생성하고 실행(run)합니다."""
    app = AppServer(settings=settings)
    await app.run()


def cli() -> None:
    """콘솔 스크립트(mcp-connector) 진입점."""
    try:
        settings = configure_logging()
    except ValueError:
        # 설정값이 잘못되면 로깅 설정 전이라도 기본 포맷으로 남기고 종료합니다.
        logging.basicConfig(level="INFO")
        logger.exception("Invalid configuration")
        sys.exit(1)

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except Exception:
        # 툴 중복 등 시작 단계 실패도 여기서 스택트레이스와 함께 남깁니다.
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    cli()
