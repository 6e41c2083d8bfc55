# farm_assistant/routes/pests.py
import json

from flask import Blueprint, jsonify, request

from farm_assistant.common.logger import get_logger
from farm_assistant.common.records import parse_record
from farm_assistant.common.services import current_services
from farm_assistant.components.pest_tracker import ALL_LOCATIONS

bp = Blueprint("pests", __name__)
logger = get_logger(__name__)


@bp.route("/api/pests", methods=["GET"])
def list_pests():
    """Query: search, date (YYYY-MM-DD), location"""
    entries = current_services().pests.filter(
        search=request.args.get("search", ""),
        date=request.args.get("date", ""),
        location=request.args.get("location", ALL_LOCATIONS),
    )
    return jsonify({"entries": [e.to_dict() for e in entries]})


@bp.route("/api/pests", methods=["POST"])
def add_pest():
    """
    Body: {"name", "date", "location", "affected_plants", "treatment_plan", "notes"?}
    """
    try:
        data = request.get_json(silent=True) or {}
        entry = current_services().pests.add(
            name=data.get("name", ""),
            date=data.get("date", ""),
            location=data.get("location", ""),
            affected_plants=data.get("affected_plants", ""),
            treatment_plan=data.get("treatment_plan", ""),
            notes=data.get("notes"),
        )
        return jsonify({"entry": entry.to_dict()}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Add pest error: %s", e)
        return jsonify({"error": str(e)}), 500


@bp.route("/api/pests/locations", methods=["GET"])
def pest_locations():
    return jsonify({"locations": current_services().pests.unique_locations()})


@bp.route("/api/pests/from-identification", methods=["POST"])
def track_identification():
    """Body: {"record": <identification record object>}"""
    try:
        data = request.get_json(silent=True) or {}
        parsed = parse_record(json.dumps(data.get("record")))
        if not parsed.ok:
            return jsonify({"error": parsed.reason}), 400
        entry = current_services().pests.record_from_identification(parsed.value)
        return jsonify({"entry": entry.to_dict()}), 201
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.exception("Track identification error: %s", e)
        return jsonify({"error": str(e)}), 500
