# farm_assistant/routes/weather.py
from flask import Blueprint, jsonify, request

from farm_assistant.common.custom_exception import UpstreamAPIError
from farm_assistant.common.logger import get_logger
from farm_assistant.common.services import current_services
from farm_assistant.config.config import DEFAULT_LATITUDE, DEFAULT_LONGITUDE

bp = Blueprint("weather", __name__)
logger = get_logger(__name__)


@bp.route("/api/weather", methods=["GET"])
def weather():
    """Query: lat, lon (defaults to the configured farm location)"""
    try:
        lat = request.args.get("lat", DEFAULT_LATITUDE, type=float)
        lon = request.args.get("lon", DEFAULT_LONGITUDE, type=float)
        report = current_services().weather.fetch(lat, lon)
        return jsonify(report.to_dict())
    except UpstreamAPIError as e:
        logger.error(f"Weather lookup failed: {e}")
        return jsonify({"error": e.user_message}), 502
    except Exception as e:
        logger.exception("Weather endpoint error: %s", e)
        return jsonify({"error": str(e)}), 500
