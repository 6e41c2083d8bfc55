# farm_assistant/config/config.py
import os
from dotenv import load_dotenv

# ====================================================
# Load Environment Variables - MUST BE FIRST
# ====================================================
load_dotenv()

# ====================================================
# Generative model (Gemini)
# ====================================================
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
GEMINI_CHAT_MODEL = os.getenv("GEMINI_CHAT_MODEL", "gemini-2.0-flash-exp")
GEMINI_VISION_MODEL = os.getenv("GEMINI_VISION_MODEL", "gemini-1.5-flash")
API_TIMEOUT = int(os.getenv("API_TIMEOUT", 60))  # seconds

# Live identification only when a key is configured; decided once at startup
USE_LIVE_IDENTIFICATION = bool(GEMINI_API_KEY)

# Static sampling parameters per call site
SAMPLING = {
    "chat": {"temperature": 0.5, "top_k": 40, "top_p": 0.95, "max_output_tokens": 800},
    "identification": {"temperature": 0.2, "top_k": 32, "top_p": 1.0, "max_output_tokens": 2048},
}

# ====================================================
# Weather (Open-Meteo)
# ====================================================
WEATHER_BASE_URL = os.getenv("WEATHER_BASE_URL", "https://api.open-meteo.com/v1/forecast")
WEATHER_TIMEOUT = int(os.getenv("WEATHER_TIMEOUT", 15))
WEATHER_MAX_RETRIES = int(os.getenv("WEATHER_MAX_RETRIES", 3))
RETRY_DELAY = int(os.getenv("RETRY_DELAY", 2))  # seconds
DEFAULT_LATITUDE = float(os.getenv("DEFAULT_LATITUDE", 40.7128))
DEFAULT_LONGITUDE = float(os.getenv("DEFAULT_LONGITUDE", -74.006))

# ====================================================
# Local state
# ====================================================
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "Kenya")
LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", os.path.join("data", "local_store.json"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", 20))
SESSION_TIMEOUT_HOURS = int(os.getenv("SESSION_TIMEOUT_HOURS", 24))

# ====================================================
# Server / UI
# ====================================================
DEBUG = os.getenv("DEBUG", "False").lower() == "true"
PORT = int(os.getenv("PORT", 5000))
BACKEND_URL = os.getenv("BACKEND_URL", f"http://127.0.0.1:{PORT}")
MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", 10485760))  # 10MB uploads
