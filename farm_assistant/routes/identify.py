# farm_assistant/routes/identify.py
from flask import Blueprint, jsonify, request

from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import parse_record
from farm_assistant.common.services import current_services
from farm_assistant.components.report_renderer import render_markdown

bp = Blueprint("identify", __name__)
logger = get_logger(__name__)

ALLOWED_MIME_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic", "image/heif"}


def _read_image():
    """(image, mime_type, session_id, prompt) from a multipart or JSON request"""
    if request.files:
        f = request.files.get("file")
        if f is None or f.filename == "":
            return None, None, None, None
        return (
            f.read(),
            f.mimetype or "image/jpeg",
            request.form.get("session_id"),
            request.form.get("prompt", ""),
        )
    data = request.get_json(silent=True) or {}
    image = data.get("image_base64")
    mime_type = data.get("mime_type") or "image/jpeg"
    if isinstance(image, str) and image.startswith("data:") and ";" in image:
        mime_type = image[5:image.index(";")]
    return image or None, mime_type, data.get("session_id"), data.get("prompt", "")


@bp.route("/api/identify", methods=["POST"])
def identify():
    """
    Multipart: file, session_id?, prompt?
    JSON: {"image_base64": "...", "mime_type"?, "session_id"?, "prompt"?}
    Returns: {"session_id", "record", "report_markdown"}
    """
    try:
        image, mime_type, session_id, prompt = _read_image()
        if not image:
            return jsonify({"error": "no image provided"}), 400
        if mime_type not in ALLOWED_MIME_TYPES:
            return jsonify({"error": f"unsupported image type '{mime_type}'"}), 415

        session_id, session = current_services().identify_sessions.get_or_create(session_id)
        reply = session.send(prompt or "", image=image, mime_type=mime_type)
        if reply is None:
            return jsonify({"error": "an identification is already in progress for this session"}), 409

        parsed = parse_record(reply.text)
        return jsonify({
            "session_id": session_id,
            "record": parsed.value.to_dict() if parsed.ok else None,
            "report_markdown": render_markdown(reply.text),
        })
    except Exception as e:
        logger.exception("Identify endpoint error: %s", e)
        return jsonify({"error": str(e)}), 500
