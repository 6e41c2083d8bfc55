# farm_assistant/launch_gradio.py
"""
Gradio UI for FarmAssistant
Requirements:
- Flask backend running (see BACKEND_URL)
- Endpoints used:
    POST /api/chat           -> {"session_id","query"} -> {"session_id","accepted","messages"}
    POST /api/identify       -> multipart file + session_id + prompt -> {"record","report_markdown"}
    POST /api/history/notes  -> {"notes"}
    GET  /api/pests          -> ?search=&date=&location= -> {"entries": [...]}
    POST /api/pests          -> pest sighting fields -> {"entry": {...}}
    GET  /api/weather        -> ?lat=&lon= -> weather report
If the backend is down each tab shows the error inline and keeps working.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

import gradio as gr
import requests

from farm_assistant.common.logger import get_logger
from farm_assistant.common.templates import CHAT_WELCOME, IDENTIFY_WELCOME
from farm_assistant.components.pest_tracker import ALL_LOCATIONS
from farm_assistant.components.report_renderer import render_markdown
from farm_assistant.config.config import BACKEND_URL, DEFAULT_LATITUDE, DEFAULT_LONGITUDE

logger = get_logger(__name__)

TIMEOUT = 90  # identification calls can be slow

APP_NAME = "FarmAssistant"
TAGLINE = "FarmAssistant 🌱 Crop advice, pest identification and field records."

MIME_TYPES = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png", ".webp": "image/webp"}


# -------------------------
# HTTP helpers
# -------------------------
def _post(path: str, json_payload: Dict = None, files=None, timeout: int = TIMEOUT) -> Dict:
    url = f"{BACKEND_URL.rstrip('/')}/{path.lstrip('/')}"
    try:
        if files:
            r = requests.post(url, data=json_payload or {}, files=files, timeout=timeout)
        else:
            r = requests.post(url, json=json_payload or {}, timeout=timeout)
        body = r.json()
        if not r.ok:
            return {"_error": body.get("error") or f"HTTP {r.status_code}"}
        return body
    except (requests.RequestException, ValueError) as e:
        logger.debug("POST error %s -> %s", url, e)
        return {"_error": str(e)}


def _get(path: str, params: Dict = None, timeout: int = TIMEOUT) -> Dict:
    url = f"{BACKEND_URL.rstrip('/')}/{path.lstrip('/')}"
    try:
        r = requests.get(url, params=params or {}, timeout=timeout)
        body = r.json()
        if not r.ok:
            return {"_error": body.get("error") or f"HTTP {r.status_code}"}
        return body
    except (requests.RequestException, ValueError) as e:
        logger.debug("GET error %s -> %s", url, e)
        return {"_error": str(e)}


# -------------------------
# Chat tab
# -------------------------
def _chat_history(messages: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    return [{"role": m["role"], "content": m["text"]} for m in messages]


def send_message(session_id: Optional[str], user_text: str, history: List[Dict[str, str]]):
    """Returns (chat history, cleared input, session id)"""
    user_text = (user_text or "").strip()
    if not user_text:
        return history, "", session_id

    resp = _post("/api/chat", json_payload={"session_id": session_id, "query": user_text})
    if resp.get("_error"):
        history = history + [
            {"role": "user", "content": user_text},
            {"role": "assistant", "content": f"⚠ Backend error: {resp['_error']}"},
        ]
        return history, "", session_id
    if not resp.get("accepted"):
        gr.Warning("Still waiting for the previous answer")
    return _chat_history(resp.get("messages", [])), "", resp.get("session_id")


# -------------------------
# Identify tab
# -------------------------
def _report_message(record_markdown: str) -> Dict[str, str]:
    return {"role": "assistant", "content": record_markdown}


def identify_image(session_id: Optional[str], image_path: Optional[str], prompt: str, history: List[Dict[str, str]]):
    """Returns (chat history, session id, last report markdown)"""
    if not image_path:
        gr.Warning("Upload or take a photo first")
        return history, session_id, ""

    path = Path(image_path)
    mime_type = MIME_TYPES.get(path.suffix.lower(), "image/jpeg")
    with open(path, "rb") as fh:
        files = {"file": (path.name, fh, mime_type)}
        payload = {"prompt": prompt or ""}
        if session_id:
            payload["session_id"] = session_id
        resp = _post("/api/identify", json_payload=payload, files=files)

    history = history + [{"role": "user", "content": prompt or "Identify what's in this image"}]
    if resp.get("_error"):
        report = render_markdown("")
        history.append({"role": "assistant", "content": f"⚠ {resp['_error']}"})
        return history, session_id, report

    report = resp.get("report_markdown") or render_markdown("")
    history.append(_report_message(report))
    return history, resp.get("session_id"), report


def save_notes(notes: str) -> str:
    resp = _post("/api/history/notes", json_payload={"notes": notes})
    if resp.get("_error"):
        return f"⚠ {resp['_error']}"
    return "✅ Notes saved to the latest identification."


# -------------------------
# Pest tracker tab
# -------------------------
PEST_COLUMNS = ["Name", "Date", "Location", "Affected plants", "Treatment plan", "Notes"]


def _pest_rows(entries: List[Dict[str, Any]]) -> List[List[str]]:
    return [
        [e.get("name", ""), e.get("date", ""), e.get("location", ""),
         e.get("affected_plants", ""), e.get("treatment_plan", ""), e.get("notes", "")]
        for e in entries
    ]


def load_pests(search: str, date: str, location: str):
    resp = _get("/api/pests", params={"search": search, "date": date, "location": location or ALL_LOCATIONS})
    if resp.get("_error"):
        gr.Warning(resp["_error"])
        return []
    return _pest_rows(resp.get("entries", []))


def load_locations():
    resp = _get("/api/pests/locations")
    choices = resp.get("locations") or [ALL_LOCATIONS]
    return gr.update(choices=choices, value=ALL_LOCATIONS)


def add_pest(name, date, location, affected_plants, treatment_plan, notes):
    resp = _post("/api/pests", json_payload={
        "name": name, "date": date, "location": location,
        "affected_plants": affected_plants, "treatment_plan": treatment_plan, "notes": notes,
    })
    if resp.get("_error"):
        return f"⚠ {resp['_error']}", load_pests("", "", ALL_LOCATIONS)
    return f"✅ Recorded {resp['entry']['name']}", load_pests("", "", ALL_LOCATIONS)


# -------------------------
# Weather tab
# -------------------------
def load_weather(lat: float, lon: float) -> str:
    resp = _get("/api/weather", params={"lat": lat, "lon": lon})
    if resp.get("_error"):
        return f"⚠ Weather unavailable: {resp['_error']}"
    lines = [
        f"### {resp['location']}: {resp['current_temp']}° {resp['condition']}",
        f"High {resp['high_temp']}° / Low {resp['low_temp']}°  ·  Humidity {resp['humidity']}%  ·  "
        f"Wind {resp['wind_speed']} km/h  ·  Precipitation {resp['precipitation']} mm",
        "",
        "| Day | Condition | High | Low |",
        "|---|---|---|---|",
    ]
    for day in resp.get("forecast", []):
        lines.append(f"| {day['day']} | {day['condition']} | {day['high_temp']}° | {day['low_temp']}° |")
    return "\n".join(lines)


# -------------------------
# Gradio UI layout
# -------------------------
def build_ui():
    with gr.Blocks(title=APP_NAME) as ui:
        gr.Markdown(f"## {TAGLINE}")

        with gr.Tab("AI Chat"):
            chat_session = gr.State(None)
            chatbot = gr.Chatbot(
                value=[{"role": "assistant", "content": CHAT_WELCOME}],
                type="messages", label="Chat with FarmAssistant", height=520,
            )
            user_input = gr.Textbox(placeholder="Ask about crops, pests, soil or livestock", lines=2)
            send_btn = gr.Button("Send")
            # inputs lock while a request runs so a second send cannot start
            send_btn.click(send_message, inputs=[chat_session, user_input, chatbot],
                           outputs=[chatbot, user_input, chat_session], concurrency_limit=1)
            user_input.submit(send_message, inputs=[chat_session, user_input, chatbot],
                              outputs=[chatbot, user_input, chat_session], concurrency_limit=1)

        with gr.Tab("AIdentify"):
            identify_session = gr.State(None)
            with gr.Row():
                with gr.Column(scale=2):
                    id_chat = gr.Chatbot(
                        value=[{"role": "assistant", "content": IDENTIFY_WELCOME}],
                        type="messages", label="Identification", height=520,
                    )
                with gr.Column(scale=1):
                    image = gr.Image(type="filepath", label="Photo of the crop, pest or disease",
                                     sources=["upload", "webcam"])
                    prompt = gr.Textbox(label="What would you like to know?", placeholder="Identify what's in this image")
                    identify_btn = gr.Button("Analyze image")
                    notes = gr.Textbox(label="Notes for this identification", lines=2)
                    notes_btn = gr.Button("Save notes")
                    notes_status = gr.Markdown()
            last_report = gr.State("")
            identify_btn.click(identify_image, inputs=[identify_session, image, prompt, id_chat],
                               outputs=[id_chat, identify_session, last_report], concurrency_limit=1)
            notes_btn.click(save_notes, inputs=[notes], outputs=[notes_status])

        with gr.Tab("Pest Tracker"):
            with gr.Row():
                search = gr.Textbox(label="Search name or plant")
                date_filter = gr.Textbox(label="Date (YYYY-MM-DD)")
                location_filter = gr.Dropdown(label="Location", choices=[ALL_LOCATIONS], value=ALL_LOCATIONS)
                filter_btn = gr.Button("Filter")
            pest_table = gr.Dataframe(headers=PEST_COLUMNS, interactive=False)
            with gr.Accordion("Record a pest sighting", open=False):
                p_name = gr.Textbox(label="Pest or disease")
                p_date = gr.Textbox(label="Date", placeholder="March 10th, 2024")
                p_location = gr.Textbox(label="Location")
                p_plants = gr.Textbox(label="Affected plants")
                p_plan = gr.Textbox(label="Treatment plan")
                p_notes = gr.Textbox(label="Notes")
                add_btn = gr.Button("Save")
                add_status = gr.Markdown()
            filter_btn.click(load_pests, inputs=[search, date_filter, location_filter], outputs=[pest_table])
            add_btn.click(add_pest, inputs=[p_name, p_date, p_location, p_plants, p_plan, p_notes],
                          outputs=[add_status, pest_table]).then(load_locations, outputs=[location_filter])

        with gr.Tab("Weather"):
            with gr.Row():
                lat = gr.Number(label="Latitude", value=DEFAULT_LATITUDE)
                lon = gr.Number(label="Longitude", value=DEFAULT_LONGITUDE)
                weather_btn = gr.Button("Refresh")
            weather_md = gr.Markdown()
            weather_btn.click(load_weather, inputs=[lat, lon], outputs=[weather_md])

        ui.load(load_locations, outputs=[location_filter])

    return ui


# -------------------------
# Launch
# -------------------------
if __name__ == "__main__":
    print(f"Starting FarmAssistant Gradio UI (expecting Flask backend at {BACKEND_URL})")
    build_ui().launch(server_name="0.0.0.0", server_port=7860)
