# farm_assistant/routes/history.py
from flask import Blueprint, jsonify, request

from farm_assistant.common.logger import get_logger
from farm_assistant.common.services import current_services

bp = Blueprint("history", __name__)
logger = get_logger(__name__)


@bp.route("/api/history", methods=["GET"])
def list_history():
    return jsonify({"entries": current_services().history.entries()})


@bp.route("/api/history/notes", methods=["POST"])
def attach_notes():
    """Body: {"notes": "text"}; applies to the latest identification of this run"""
    try:
        data = request.get_json(silent=True) or {}
        notes = (data.get("notes") or "").strip()
        if not notes:
            return jsonify({"error": "notes field required"}), 400
        if not current_services().history.attach_notes(notes):
            return jsonify({"error": "no identification to attach notes to"}), 409
        return jsonify({"ok": True})
    except Exception as e:
        logger.exception("History notes error: %s", e)
        return jsonify({"error": str(e)}), 500
