# farm_assistant/routes/chat.py
from flask import Blueprint, jsonify, request

from farm_assistant.common.logger import get_logger
from farm_assistant.common.services import current_services

bp = Blueprint("chat", __name__)
logger = get_logger(__name__)


def _messages(session):
    return [m.to_dict() for m in session.messages()]


@bp.route("/api/chat", methods=["POST"])
def chat():
    """
    Body: {"session_id": "optional", "query": "text"}
    Returns: {"session_id", "accepted", "messages"}
    """
    try:
        data = request.get_json(silent=True) or {}
        query = (data.get("query") or "").strip()
        session_id, session = current_services().sessions.get_or_create(data.get("session_id"))

        reply = session.send(query)
        return jsonify({
            "session_id": session_id,
            "accepted": reply is not None,
            "reply": reply.to_dict() if reply else None,
            "messages": _messages(session),
        })
    except Exception as e:
        logger.exception("Chat endpoint error: %s", e)
        return jsonify({"error": str(e)}), 500


@bp.route("/api/sessions/<session_id>/messages", methods=["GET"])
def session_messages(session_id):
    session = current_services().sessions.get_session(session_id)
    if session is None:
        return jsonify({"error": "session not found"}), 404
    return jsonify({"session_id": session_id, "state": session.state, "messages": _messages(session)})
