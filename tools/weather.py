"""
MCP Tool: getWeather

좌표(위도/경도)로 현재 날씨를 조회하는 도구입니다. 실제 조회는
`utils.open_meteo.WeatherClient` 가 담당하고, 이 모듈은 입력 검증과 결과/오류 변환만 합니다.

흐름 개요
---------
1) 입력 검증: latitude ∈ [-90, 90], longitude ∈ [-180, 180], 둘 다 유한한 숫자.
   어긋나면 네트워크 호출 없이 INVALID_PARAMS 오류(→ JSON-RPC -32602)를 돌려줍니다.
2) 날씨 조회: 호출자의 deadline을 그대로 WeatherClient에 넘깁니다.
3) 결과 변환:
   - 성공 → 공급자 응답 모양 그대로의 JSON 문자열
   - 공급자 쪽 실패(HTTP 오류, 깨진 본문, 타임아웃 등) → {"error": "Failed to fetch weather data: ..."}

주의사항
--------
- 공급자 쪽 실패는 **프로토콜 오류가 아닙니다.** LLM이 읽고 대화로 대응할 수 있도록
  성공 결과 안에 오류 메시지를 담아 돌려줍니다. 반면 잘못된 좌표는 호출자 요청 자체가
  잘못된 것이므로 프로토콜 오류로 거부합니다.
"""

import json
import logging
import math
from typing import Any, Dict, Optional, Union

from mcp.types import Tool

from registry import CallContext, ToolHandler, ToolServices
from results import Err, ErrorKind, Ok, ToolOutcome
from utils.open_meteo import WeatherClient, WeatherClientError

logger = logging.getLogger("mcp.tools.weather")

tool_spec = Tool(
    name="getWeather",
    description=(
        "Returns the current weather for a location. "
        "Provide latitude and longitude as decimal degrees. "
        "The response includes temperature, humidity, wind speed, timezone, and units."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "latitude": {
                "type": "number",
                "description": "Latitude in decimal degrees (e.g. 40.7143 for New York).",
                "minimum": -90,
                "maximum": 90,
            },
            "longitude": {
                "type": "number",
                "description": "Longitude in decimal degrees (e.g. -74.006 for New York).",
                "minimum": -180,
                "maximum": 180,
            },
        },
        "required": ["latitude", "longitude"],
    },
)


def _check_coordinate(field: str, value: Any, limit: int) -> Union[float, Err]:
    # bool은 int의 하위 타입이므로 따로 거릅니다.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return Err(
            ErrorKind.INVALID_PARAMS,
            f"{field} is required and must be a number in the range -{limit} to {limit}. Received: {value!r}.",
        )
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number) or not -limit <= number <= limit:
        return Err(
            ErrorKind.INVALID_PARAMS,
            f"{field} must be in the range -{limit} to {limit}. Received: {value}.",
        )
    return number


def error_payload(message: str) -> str:
    return json.dumps({"error": f"Failed to fetch weather data: {message}"})


async def get_weather(
    client: WeatherClient,
    latitude: Any,
    longitude: Any,
    deadline: Optional[float] = None,
) -> ToolOutcome:
    """좌표를 검증하고 현재 날씨 JSON(또는 오류 JSON)을 돌려줍니다.

    Returns
    -------
    Ok
        날씨 JSON 또는 {"error": ...} JSON. 유효한 좌표라면 항상 Ok입니다.
    Err
        좌표가 범위를 벗어났거나 숫자가 아닌 경우(INVALID_PARAMS).
    """
    lat = _check_coordinate("Latitude", latitude, 90)
    if isinstance(lat, Err):
        return lat
    lon = _check_coordinate("Longitude", longitude, 180)
    if isinstance(lon, Err):
        return lon

    try:
        reading = await client.fetch_current(lat, lon, deadline=deadline)
    except WeatherClientError as exc:
        logger.warning("weather lookup failed lat=%s lon=%s err=%s", lat, lon, exc)
        return Ok(error_payload(str(exc)))

    return Ok(reading.model_dump_json())


def create_handler(services: ToolServices) -> ToolHandler:
    client = services.weather_client

    async def handle(arguments: Dict[str, Any], context: CallContext) -> ToolOutcome:
        return await get_weather(
            client,
            arguments.get("latitude"),
            arguments.get("longitude"),
            deadline=context.deadline,
        )

    return handle
