# farm_assistant/routes/settings.py
from flask import Blueprint, jsonify, request

from farm_assistant.common.logger import get_logger
from farm_assistant.common.services import current_services

bp = Blueprint("settings", __name__)
logger = get_logger(__name__)


@bp.route("/api/settings", methods=["GET"])
def get_settings():
    return jsonify(current_services().settings.to_dict())


@bp.route("/api/settings", methods=["POST"])
def update_settings():
    """Body: any of {"location", "farm_name", "units"}"""
    try:
        data = request.get_json(silent=True) or {}
        changes = {k: v for k, v in data.items() if k in ("location", "farm_name", "units")}
        settings = current_services().settings
        settings.update(**changes)
        return jsonify(settings.to_dict())
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Settings update error: %s", e)
        return jsonify({"error": str(e)}), 500
