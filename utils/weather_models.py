"""
Open-Meteo 응답 모델

`/v1/forecast` 응답 JSON의 모양을 그대로 옮긴 pydantic 모델입니다.
필드 이름과 중첩 구조는 공급자(Open-Meteo)의 것과 같으며, getWeather 툴은
이 모델을 다시 JSON으로 직렬화해 그대로 돌려줍니다(별도 DTO로 재가공하지 않음).
"""

from pydantic import BaseModel, ConfigDict, Field


class CurrentWeather(BaseModel):
    """current 블록: 실시간 측정값."""

    model_config = ConfigDict(frozen=True)

    time: str
    temperature_2m: float
    wind_speed_10m: float
    relative_humidity_2m: int = Field(ge=0, le=100)


class CurrentUnits(BaseModel):
    """current_units 블록: 각 측정값의 단위 문자열."""

    model_config = ConfigDict(frozen=True)

    temperature_2m: str
    wind_speed_10m: str
    relative_humidity_2m: str


class WeatherReading(BaseModel):
    """`/v1/forecast` 최상위 응답."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    timezone: str
    current: CurrentWeather
    current_units: CurrentUnits

    @property
    def time_iso(self) -> str:
        return self.current.time

    @property
    def temperature_c(self) -> float:
        return self.current.temperature_2m

    @property
    def wind_speed_kmh(self) -> float:
        return self.current.wind_speed_10m

    @property
    def humidity_percent(self) -> int:
        return self.current.relative_humidity_2m
