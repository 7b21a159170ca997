"""
설정(config.py)
===============

서버 실행에 필요한 값들을 환경변수에서 **한 번만** 읽어 `Settings`로 묶습니다.
엔트리포인트(server.py)가 LOG_LEVEL을 읽는 방식과 같이 `os.getenv`만 사용합니다.

환경변수
--------
- LOG_LEVEL               : 로그 레벨 (기본 INFO)
- HOST / PORT             : HTTP 바인딩 주소 (기본 0.0.0.0:8080)
- OPEN_METEO_BASE_URL     : 날씨 API 주소 (기본 https://api.open-meteo.com)
- WEATHER_TIMEOUT_SECONDS : 날씨 API HTTP 타임아웃(초, 기본 10)
- TOOL_DEADLINE_SECONDS   : tools/call 한 번에 허용할 최대 시간(초, 미설정 시 제한 없음)
- MCP_SERVER_NAME / MCP_SERVER_VERSION : initialize 응답의 serverInfo
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_WEATHER_BASE_URL = "https://api.open-meteo.com"


def _read_float(env: Mapping[str, str], key: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    weather_base_url: str = DEFAULT_WEATHER_BASE_URL
    weather_timeout: float = 10.0
    tool_deadline: Optional[float] = None
    server_name: str = "mcp-connector-template"
    server_version: str = "1.0.0"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """환경변수(또는 테스트용 매핑)에서 설정을 만듭니다.

        Raises
        ------
        ValueError
            숫자여야 하는 값(PORT, *_SECONDS)이 잘못된 경우. 서버 시작 단계에서 바로 실패합니다.
        """
        env = os.environ if env is None else env

        port_raw = env.get("PORT", "8080")
        try:
            port = int(port_raw)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port_raw!r}") from None

        return cls(
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            weather_base_url=env.get("OPEN_METEO_BASE_URL", DEFAULT_WEATHER_BASE_URL),
            weather_timeout=_read_float(env, "WEATHER_TIMEOUT_SECONDS", 10.0),
            tool_deadline=_read_float(env, "TOOL_DEADLINE_SECONDS", None),
            server_name=env.get("MCP_SERVER_NAME", "mcp-connector-template"),
            server_version=env.get("MCP_SERVER_VERSION", "1.0.0"),
        )
