"""
Open-Meteo 날씨 API 클라이언트 모듈

좌표(위도/경도)로 현재 날씨를 조회하는 얇은 비동기 HTTP 클라이언트를 제공합니다.
Open-Meteo는 무료이며 API 키가 필요 없습니다. (문서: https://open-meteo.com/en/docs)

동작 요약
--------
- 조회 1번 = GET 요청 1번. 캐시/재시도/속도 제한은 하지 않습니다.
- 실패는 모두 `WeatherClientError` 하위 예외로 구분해서 올려 보냅니다.
  툴(tools/weather.py)이 이 예외들을 잡아 사용자용 JSON 메시지로 바꿉니다.
"""

import logging
import math
from typing import Optional

import anyio
import httpx
from pydantic import ValidationError

from utils.weather_models import WeatherReading

# 로깅 설정 (요청/실패 추적용)
logger = logging.getLogger("mcp.utils.open_meteo")

DEFAULT_BASE_URL = "https://api.open-meteo.com"
DEFAULT_TIMEOUT_SECONDS = 10.0

# current= 파라미터로 요청할 측정값 목록(순서 고정)
CURRENT_FIELDS = "temperature_2m,wind_speed_10m,relative_humidity_2m"


class WeatherClientError(Exception):
    """날씨 조회 실패의 공통 부모 예외."""


class UpstreamError(WeatherClientError):
    """공급자가 2xx가 아닌 상태 코드를 돌려준 경우."""

    def __init__(self, status: int, body: str, reason: str = "") -> None:
        self.status = status
        self.body = body
        detail = f"{status} ({reason})" if reason else str(status)
        super().__init__(f"Response status code does not indicate success: {detail}.")


class MalformedResponseError(WeatherClientError):
    """성공 응답이지만 본문이 비었거나 예상한 모양이 아닌 경우."""


class RequestCancelledError(WeatherClientError):
    """호출자가 준 마감 시간(deadline)이나 HTTP 타임아웃으로 요청이 중단된 경우."""


class WeatherTransportError(WeatherClientError):
    """연결 실패, 본문 디코딩 실패, 리다이렉트 초과 등 httpx 요청 오류."""


def format_coordinate(value: float) -> str:
    """URL 쿼리에 넣을 좌표 문자열을 만듭니다.

    파이썬의 숫자 포맷은 로캘과 무관하게 항상 소수점(.)을 쓰지만,
    `repr`은 아주 작은 값에 지수 표기(1e-05)를 쓰므로 고정 소수점으로 바꿉니다.

    예시:
        format_coordinate(40.7143)  # "40.7143"
        format_coordinate(-74.0)    # "-74"
        format_coordinate(0.00001)  # "0.00001"
    """
    text = repr(float(value))
    if "e" in text or "E" in text:
        text = f"{value:.10f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def build_forecast_path(latitude: float, longitude: float) -> str:
    """`/v1/forecast` 요청 경로(쿼리 포함)를 만듭니다."""
    return (
        f"/v1/forecast?latitude={format_coordinate(latitude)}"
        f"&longitude={format_coordinate(longitude)}"
        f"&current={CURRENT_FIELDS}"
        f"&timezone=auto"
    )


class WeatherClient:
    """Open-Meteo `/v1/forecast` 호출을 감싼 비동기 클라이언트.

    Parameters
    ----------
    base_url : str
        API 기본 주소. 테스트나 자체 호스팅 인스턴스를 위해 바꿀 수 있습니다.
    timeout : float
        HTTP 타임아웃(초). 기본 10초.
    http_client : httpx.AsyncClient, optional
        미리 구성한 클라이언트(테스트에서는 MockTransport를 끼운 클라이언트)를 주입할 때 사용.
        주입한 클라이언트는 호출자가 닫아야 합니다.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "WeatherClient":
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_current(
        self,
        latitude: float,
        longitude: float,
        deadline: Optional[float] = None,
    ) -> WeatherReading:
        """주어진 좌표의 현재 날씨를 가져옵니다.

        매개변수(Parameters):
            latitude (float): 위도 (-90 ~ 90), 예: 40.7143 (뉴욕)
            longitude (float): 경도 (-180 ~ 180), 예: -74.006 (뉴욕)
            deadline (Optional[float]): 이 호출에 허용할 최대 시간(초). 넘으면 진행 중인 요청을 중단합니다.

        반환값(Returns):
            WeatherReading: 공급자 응답을 그대로 담은 모델

        예외(Raises):
            ValueError: 좌표가 NaN/Infinity인 경우 (요청을 보내기 전에 거부)
            UpstreamError: 2xx가 아닌 응답
            MalformedResponseError: 본문이 비었거나 JSON/모양이 맞지 않음
            RequestCancelledError: deadline 또는 HTTP 타임아웃 초과
            WeatherTransportError: 연결 실패, 본문 디코딩 실패 등 전송 오류
        """
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValueError("Coordinates must be finite numbers.")

        path = build_forecast_path(latitude, longitude)
        logger.debug("GET %s", path)

        try:
            if deadline is None:
                response = await self._client.get(path)
            else:
                try:
                    with anyio.fail_after(deadline):
                        response = await self._client.get(path)
                except TimeoutError:
                    raise RequestCancelledError(
                        f"Request was cancelled after exceeding the {deadline:g}s deadline."
                    ) from None
        except httpx.TimeoutException as exc:
            raise RequestCancelledError(f"Request timed out: {exc}") from exc
        except httpx.RequestError as exc:
            # 연결 실패, 깨진 gzip 본문(DecodingError), 리다이렉트 루프 등
            raise WeatherTransportError(f"Request failed: {exc}") from exc

        if not response.is_success:
            logger.warning("open-meteo returned status=%s", response.status_code)
            raise UpstreamError(response.status_code, response.text, response.reason_phrase)

        if not response.content.strip():
            raise MalformedResponseError("Open-Meteo API returned an empty response.")

        try:
            return WeatherReading.model_validate_json(response.content)
        except ValidationError as exc:
            logger.warning("open-meteo response did not match the expected shape: %s", exc)
            raise MalformedResponseError(
                "Open-Meteo API returned a response that could not be parsed."
            ) from exc
