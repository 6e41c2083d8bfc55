# farm_assistant/application.py
import datetime
import random
from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify

from farm_assistant.common.circuit_breaker import gemini_breaker, weather_breaker
from farm_assistant.common.local_store import LocalStore
from farm_assistant.common.logger import get_logger
from farm_assistant.common.services import EXTENSION_KEY, Services
from farm_assistant.common.session_manager import SessionManager
from farm_assistant.common.templates import CHAT_WELCOME, IDENTIFY_WELCOME
from farm_assistant.components.chat_session import ChatSession
from farm_assistant.components.gemini_client import get_chat_llm, get_vision_llm
from farm_assistant.components.identification_history import IdentificationHistory
from farm_assistant.components.identification_normalizer import IdentificationNormalizer
from farm_assistant.components.identification_service import build_identification_provider
from farm_assistant.components.keyword_classifier import KeywordClassifier
from farm_assistant.components.pest_tracker import PestTracker
from farm_assistant.components.settings import UserSettings
from farm_assistant.components.weather_client import WeatherClient
from farm_assistant.config.config import (
    HISTORY_LIMIT,
    LOCAL_STORE_PATH,
    MAX_CONTENT_LENGTH,
    PORT,
    SESSION_TIMEOUT_HOURS,
    USE_LIVE_IDENTIFICATION,
)
from farm_assistant.routes import chat, history, identify, pests, settings, weather

logger = get_logger(__name__)


def build_services(
    store: Optional[LocalStore] = None,
    use_live: bool = USE_LIVE_IDENTIFICATION,
    chat_llm=None,
    identification_provider=None,
    weather_client: Optional[WeatherClient] = None,
    rng: Optional[random.Random] = None,
) -> Services:
    """
    Wire every component once. Live vs mock identification is chosen here and
    nowhere else; tests pass their own fakes for the remote collaborators.
    """
    store = store if store is not None else LocalStore(LOCAL_STORE_PATH)
    rng = rng or random.Random()

    # one breaker per external service, shared by every client of it
    gemini = gemini_breaker()
    weather_cb = weather_breaker()

    chat_llm = chat_llm or get_chat_llm(breaker=gemini)
    if identification_provider is None:
        identification_provider = build_identification_provider(
            use_live, llm=get_vision_llm(breaker=gemini) if use_live else None, rng=rng
        )

    user_settings = UserSettings(store)
    id_history = IdentificationHistory(store, limit=HISTORY_LIMIT)
    normalizer = IdentificationNormalizer(rng=rng)
    classifier = KeywordClassifier()

    def session_factory(welcome):
        def factory():
            return ChatSession(
                chat_llm=chat_llm,
                identification_provider=identification_provider,
                normalizer=normalizer,
                classifier=classifier,
                country=user_settings.country,
                history=id_history,
                welcome=welcome,
            )
        return factory

    timeout = timedelta(hours=SESSION_TIMEOUT_HOURS)
    return Services(
        sessions=SessionManager(session_factory(CHAT_WELCOME), timeout=timeout),
        identify_sessions=SessionManager(session_factory(IDENTIFY_WELCOME), timeout=timeout),
        history=id_history,
        settings=user_settings,
        pests=PestTracker(store),
        weather=weather_client or WeatherClient(breaker=weather_cb),
        breakers=[gemini, getattr(weather_client, "breaker", weather_cb)],
        live_identification=use_live,
    )


def create_app(services: Optional[Services] = None) -> Flask:
    services = services or build_services()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_CONTENT_LENGTH
    app.extensions[EXTENSION_KEY] = services

    for module in (chat, identify, history, pests, weather, settings):
        app.register_blueprint(module.bp)

    @app.route("/health", methods=["GET"])
    def health():
        uptime = (datetime.datetime.now(datetime.timezone.utc) - services.started_at).total_seconds()
        return jsonify({
            "status": "ok",
            "uptime_seconds": int(uptime),
            "live_identification": services.live_identification,
            "active_sessions": services.sessions.get_session_count() + services.identify_sessions.get_session_count(),
            "circuit_breakers": [b.get_status() for b in services.breakers],
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        })

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": "upload too large"}), 413

    logger.info(
        f"FarmAssistant backend ready (identification: {'live' if services.live_identification else 'mock'})"
    )
    return app


# -------------------------
# Run as script
# -------------------------
if __name__ == "__main__":
    logger.info(f"Starting FarmAssistant Flask backend on port {PORT}")
    logger.info(f"Health check: http://127.0.0.1:{PORT}/health")
    create_app().run(host="127.0.0.1", port=PORT, debug=False)
