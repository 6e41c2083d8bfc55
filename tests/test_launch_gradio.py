import requests

from farm_assistant import launch_gradio


class FakeResponse:
    def __init__(self, body, status_code=200):
        self._body = body
        self.status_code = status_code
        self.ok = status_code < 400

    def json(self):
        return self._body


def test_send_message_renders_backend_messages(monkeypatch):
    body = {
        "session_id": "abc",
        "accepted": True,
        "messages": [
            {"role": "assistant", "text": "Welcome"},
            {"role": "user", "text": "Hi"},
            {"role": "assistant", "text": "Hello farmer"},
        ],
    }
    monkeypatch.setattr(launch_gradio.requests, "post", lambda url, **kw: FakeResponse(body))

    history, cleared, session_id = launch_gradio.send_message(None, "Hi", [])
    assert session_id == "abc"
    assert cleared == ""
    assert history[-1] == {"role": "assistant", "content": "Hello farmer"}


def test_send_message_backend_down_keeps_session(monkeypatch):
    def down(url, **kw):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(launch_gradio.requests, "post", down)
    history, _, session_id = launch_gradio.send_message("abc", "Hi", [])
    assert session_id == "abc"
    assert history[-1]["content"].startswith("⚠ Backend error")


def test_blank_message_is_not_sent(monkeypatch):
    def fail(url, **kw):
        raise AssertionError("should not be called")

    monkeypatch.setattr(launch_gradio.requests, "post", fail)
    assert launch_gradio.send_message("abc", "   ", []) == ([], "", "abc")


def test_http_error_body_is_reported(monkeypatch):
    monkeypatch.setattr(launch_gradio.requests, "get", lambda url, **kw: FakeResponse({"error": "Weather API temporarily unavailable"}, 502))
    assert launch_gradio.load_weather(0, 0) == "⚠ Weather unavailable: Weather API temporarily unavailable"


def test_weather_table(monkeypatch):
    report = {
        "location": "Your Farm", "current_temp": 25, "condition": "Clear", "high_temp": 28, "low_temp": 15,
        "humidity": 60, "wind_speed": 10, "precipitation": 0.0,
        "forecast": [{"day": "Today", "condition": "Clear", "high_temp": 28, "low_temp": 15}],
    }
    monkeypatch.setattr(launch_gradio.requests, "get", lambda url, **kw: FakeResponse(report))
    text = launch_gradio.load_weather(-1.3, 36.8)
    assert text.startswith("### Your Farm: 25° Clear")
    assert "| Today | Clear | 28° | 15° |" in text


def test_load_pests_rows(monkeypatch):
    entries = [{"name": "Aphids", "date": "2024-03-10", "location": "North", "affected_plants": "Kale",
                "treatment_plan": "Neem"}]
    monkeypatch.setattr(launch_gradio.requests, "get", lambda url, **kw: FakeResponse({"entries": entries}))
    assert launch_gradio.load_pests("", "", "") == [["Aphids", "2024-03-10", "North", "Kale", "Neem", ""]]
