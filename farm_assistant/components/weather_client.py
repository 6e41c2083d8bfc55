# farm_assistant/components/weather_client.py
"""
Current conditions and a 3-day forecast from Open-Meteo.

Each fetch goes through the open_meteo_api circuit breaker and is retried a
few times with tenacity; an open breaker is not retried.
"""
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from farm_assistant.common.circuit_breaker import CircuitBreaker, CircuitBreakerError, weather_breaker
from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.common.logger import get_logger
from farm_assistant.config.config import (
    RETRY_DELAY,
    WEATHER_BASE_URL,
    WEATHER_MAX_RETRIES,
    WEATHER_TIMEOUT,
)

logger = get_logger(__name__)

CURRENT_FIELDS = "temperature_2m,relative_humidity_2m,precipitation,weather_code,wind_speed_10m"
DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,weather_code"
FORECAST_DAYS = 3

# WMO weather interpretation codes, inclusive ranges
WEATHER_CODE_RANGES = [
    (0, 0, "Clear"),
    (1, 1, "Mainly Clear"),
    (2, 2, "Partly Cloudy"),
    (3, 3, "Cloudy"),
    (45, 48, "Fog"),
    (51, 55, "Drizzle"),
    (56, 57, "Freezing Drizzle"),
    (61, 65, "Rain"),
    (66, 67, "Freezing Rain"),
    (71, 77, "Snow"),
    (80, 82, "Rain Showers"),
    (85, 86, "Snow Showers"),
    (95, 99, "Thunderstorm"),
]


def weather_code_to_condition(code) -> str:
    if code is None:
        return "Unknown"
    for low, high, condition in WEATHER_CODE_RANGES:
        if low <= code <= high:
            return condition
    return "Unknown"


def _round(value) -> int:
    # half up, as the dashboard shows it
    return int(math.floor(float(value) + 0.5))


def format_day(date_string: str, index: int) -> str:
    if index == 0:
        return "Today"
    if index == 1:
        return "Tomorrow"
    return datetime.strptime(date_string, "%Y-%m-%d").strftime("%a")


@dataclass
class WeatherForecast:
    day: str
    condition: str
    high_temp: int
    low_temp: int


@dataclass
class WeatherReport:
    location: str
    current_temp: int
    condition: str
    high_temp: int
    low_temp: int
    humidity: int
    wind_speed: int
    precipitation: float
    forecast: List[WeatherForecast] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class WeatherClient:
    def __init__(
        self,
        base_url: str = WEATHER_BASE_URL,
        timeout: int = WEATHER_TIMEOUT,
        max_retries: int = WEATHER_MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.breaker = breaker or weather_breaker()

    def _request(self, latitude: float, longitude: float) -> Dict[str, Any]:
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "current": CURRENT_FIELDS,
            "daily": DAILY_FIELDS,
            "timezone": "auto",
            "forecast_days": FORECAST_DAYS,
        }
        try:
            response = requests.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamAPIError(f"Weather API request failed: {e}", e)
        if not response.ok:
            raise UpstreamAPIError(f"Weather API error: {response.status_code}", status_code=response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamAPIError("Weather API returned invalid JSON", e)

    def fetch_raw(self, latitude: float, longitude: float) -> Dict[str, Any]:
        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_fixed(self.retry_delay),
            retry=retry_if_exception_type(UpstreamAPIError),
            reraise=True,
        )
        try:
            for attempt in retrying:
                with attempt:
                    return self.breaker.call(self._request, latitude, longitude)
        except CircuitBreakerError as e:
            logger.error(f"Circuit breaker OPEN for Open-Meteo: {str(e)}")
            raise UpstreamAPIError("Weather API temporarily unavailable", e)

    def fetch(self, latitude: float, longitude: float) -> WeatherReport:
        data = self.fetch_raw(latitude, longitude)
        try:
            current = data["current"]
            daily = data["daily"]
            forecast = [
                WeatherForecast(
                    day=format_day(day, i),
                    condition=weather_code_to_condition(daily["weather_code"][i]),
                    high_temp=_round(daily["temperature_2m_max"][i]),
                    low_temp=_round(daily["temperature_2m_min"][i]),
                )
                for i, day in enumerate(daily["time"])
            ]
            report = WeatherReport(
                location="Your Farm",
                current_temp=_round(current["temperature_2m"]),
                condition=weather_code_to_condition(current["weather_code"]),
                high_temp=_round(daily["temperature_2m_max"][0]),
                low_temp=_round(daily["temperature_2m_min"][0]),
                humidity=_round(current["relative_humidity_2m"]),
                wind_speed=_round(current["wind_speed_10m"]),
                precipitation=current.get("precipitation", 0),
                forecast=forecast,
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Unexpected Open-Meteo payload: {e}")
            raise UpstreamAPIError("Unexpected weather data format", e)
        logger.info(f"Weather for ({latitude}, {longitude}): {report.condition}, {report.current_temp}°")
        return report
