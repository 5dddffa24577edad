from __future__ import annotations

import asyncio
import logging
import uuid

from flask import Blueprint, current_app, jsonify, request, session
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from truthguard.generators.report import ReportGenerator
from truthguard.models.errors import AnalysisFailure
from truthguard.models.types import CONTENT_TYPES, AnalyzedContent
from truthguard.models.verdict import verdict

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)

SESSION_KEY = "history_key"


def _get_synthesizer():
    return current_app.config["SYNTHESIZER"]


def _get_history():
    return current_app.config["HISTORY"]


def _get_settings():
    return current_app.config["SETTINGS"]


def _current_session_key() -> str | None:
    return session.get(SESSION_KEY)


def _session_key() -> str:
    key = session.get(SESSION_KEY)
    if key is None:
        key = str(uuid.uuid4())
        session[SESSION_KEY] = key
    return key


def _run_analysis(content: str, content_type: str) -> AnalyzedContent:
    synthesizer = _get_synthesizer()
    retrying = Retrying(
        stop=stop_after_attempt(_get_settings().analysis_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(AnalysisFailure),
        reraise=True,
    )
    return retrying(lambda: asyncio.run(synthesizer.synthesize(content, content_type)))


@api.route("/analyze", methods=["POST"])
def analyze() -> tuple:
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Request body must be JSON"}), 400

    content = data.get("content")
    content_type = data.get("type", "text")

    if not isinstance(content, str) or not content.strip():
        return jsonify({
            "error": "Please enter some text or a URL to analyze",
            "description": "The input field can't be empty",
        }), 400

    if content_type not in CONTENT_TYPES:
        return jsonify({"error": f"Invalid type. Choose from {list(CONTENT_TYPES)}"}), 400

    try:
        result = _run_analysis(content, content_type)
    except AnalysisFailure as exc:
        logger.exception("Analysis error: %s", exc)
        return jsonify({
            "error": "Analysis failed",
            "description": "There was an error analyzing your content. Please try again.",
        }), 500

    try:
        _get_history().add(_session_key(), result)
        summary = verdict(result.truth_score)
        return jsonify({
            "result": result.to_dict(),
            "notification": {
                "message": summary["message"],
                "description": f"Truth score: {summary['percentage']}%",
                "band": summary["band"],
            },
        })
    except Exception as exc:
        logger.exception("Error in analyze: %s", exc)
        return jsonify({"error": str(exc)}), 500


@api.route("/history", methods=["GET"])
def get_history() -> tuple:
    try:
        items = _get_history().items(_current_session_key())
        return jsonify({"items": [item.to_dict() for item in items], "count": len(items)})
    except Exception as exc:
        logger.exception("Error fetching history: %s", exc)
        return jsonify({"error": str(exc)}), 500


@api.route("/history", methods=["DELETE"])
def clear_history() -> tuple:
    try:
        _get_history().clear(_current_session_key())
        return jsonify({"status": "cleared"})
    except Exception as exc:
        logger.exception("Error clearing history: %s", exc)
        return jsonify({"error": str(exc)}), 500


@api.route("/history/report", methods=["GET"])
def get_history_summary() -> tuple:
    try:
        items = _get_history().items(_current_session_key())
        return jsonify({"lines": ReportGenerator().history_lines(items)})
    except Exception as exc:
        logger.exception("Error rendering history: %s", exc)
        return jsonify({"error": str(exc)}), 500


@api.route("/history/<item_id>", methods=["GET"])
def get_history_item(item_id: str) -> tuple:
    item = _get_history().get(_current_session_key(), item_id)
    if item is None:
        return jsonify({"error": "Analysis not found"}), 404
    return jsonify({"result": item.to_dict()})


@api.route("/history/<item_id>/report", methods=["GET"])
def get_history_report(item_id: str) -> tuple:
    item = _get_history().get(_current_session_key(), item_id)
    if item is None:
        return jsonify({"error": "Analysis not found"}), 404
    return jsonify({"lines": ReportGenerator().render(item)})


@api.route("/logs", methods=["GET"])
def get_logs() -> tuple:
    try:
        with open(_get_settings().log_file, "r", encoding="utf-8") as f:
            lines = f.readlines()
        return jsonify({"logs": lines[-50:]})
    except FileNotFoundError:
        return jsonify({"logs": []})
    except Exception as exc:
        logger.exception("Error reading logs: %s", exc)
        return jsonify({"error": str(exc)}), 500
