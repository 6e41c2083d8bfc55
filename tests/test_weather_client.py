from datetime import date, timedelta

import pytest
import requests

from farm_assistant.common.circuit_breaker import CircuitBreaker
from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.components import weather_client
from farm_assistant.components.weather_client import WeatherClient, format_day, weather_code_to_condition


def _payload():
    start = date(2024, 3, 4)  # a Monday
    return {
        "current": {
            "temperature_2m": 24.5,
            "relative_humidity_2m": 61.4,
            "precipitation": 0.2,
            "weather_code": 2,
            "wind_speed_10m": 11.6,
        },
        "daily": {
            "time": [(start + timedelta(days=i)).isoformat() for i in range(3)],
            "temperature_2m_max": [27.5, 26.2, 25.0],
            "temperature_2m_min": [15.4, 14.5, 13.9],
            "weather_code": [2, 61, 95],
        },
    }


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body

    def json(self):
        return self._body


@pytest.fixture
def responses(monkeypatch):
    calls = []

    def install(*queue):
        pending = list(queue)

        def fake_get(url, **kwargs):
            calls.append({"url": url, **kwargs})
            item = pending.pop(0) if len(pending) > 1 else pending[0]
            if isinstance(item, Exception):
                raise item
            return item

        monkeypatch.setattr(weather_client.requests, "get", fake_get)
        return calls

    return install


def _client(**kwargs):
    kwargs.setdefault("breaker", CircuitBreaker("open_meteo_api", failure_threshold=3, timeout=30))
    return WeatherClient(base_url="https://weather.test/forecast", max_retries=3, retry_delay=0, **kwargs)


def test_report_fields(responses):
    calls = responses(FakeResponse(body=_payload()))

    report = _client().fetch(-1.29, 36.82)

    assert report.location == "Your Farm"
    assert report.current_temp == 25
    assert report.condition == "Partly Cloudy"
    assert (report.high_temp, report.low_temp) == (28, 15)
    assert report.humidity == 61
    assert report.wind_speed == 12
    assert [f.day for f in report.forecast] == ["Today", "Tomorrow", "Wed"]
    assert [f.condition for f in report.forecast] == ["Partly Cloudy", "Rain", "Thunderstorm"]
    assert report.forecast[1].low_temp == 15

    params = calls[0]["params"]
    assert (params["latitude"], params["longitude"]) == (-1.29, 36.82)
    assert params["forecast_days"] == 3
    assert params["timezone"] == "auto"


def test_to_dict_is_json_ready(responses):
    responses(FakeResponse(body=_payload()))
    data = _client().fetch(0, 0).to_dict()
    assert data["forecast"][0] == {"day": "Today", "condition": "Partly Cloudy", "high_temp": 28, "low_temp": 15}


def test_transient_failures_are_retried(responses):
    calls = responses(
        requests.ConnectionError("reset"),
        FakeResponse(status_code=503),
        FakeResponse(body=_payload()),
    )
    report = _client().fetch(0, 0)
    assert report.current_temp == 25
    assert len(calls) == 3


def test_gives_up_after_max_retries(responses):
    calls = responses(FakeResponse(status_code=500))
    client = _client(breaker=CircuitBreaker("open_meteo_api", failure_threshold=10, timeout=30))
    with pytest.raises(UpstreamAPIError, match="Weather API error: 500"):
        client.fetch(0, 0)
    assert len(calls) == 3


def test_open_breaker_is_not_retried(responses):
    calls = responses(FakeResponse(status_code=500))
    client = _client()
    with pytest.raises(UpstreamAPIError):
        client.fetch(0, 0)
    assert len(calls) == 3

    with pytest.raises(UpstreamAPIError) as exc:
        client.fetch(0, 0)
    assert exc.value.user_message == "Weather API temporarily unavailable"
    assert len(calls) == 3


def test_malformed_payload(responses):
    responses(FakeResponse(body={"current": {}}))
    with pytest.raises(UpstreamAPIError) as exc:
        _client().fetch(0, 0)
    assert exc.value.user_message == "Unexpected weather data format"


@pytest.mark.parametrize("code, condition", [
    (0, "Clear"), (1, "Mainly Clear"), (3, "Cloudy"), (45, "Fog"), (48, "Fog"),
    (53, "Drizzle"), (63, "Rain"), (73, "Snow"), (81, "Rain Showers"), (99, "Thunderstorm"),
    (4, "Unknown"), (None, "Unknown"),
])
def test_weather_code_to_condition(code, condition):
    assert weather_code_to_condition(code) == condition


def test_format_day():
    assert format_day("2024-03-06", 0) == "Today"
    assert format_day("2024-03-06", 1) == "Tomorrow"
    assert format_day("2024-03-06", 2) == "Wed"
