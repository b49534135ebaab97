"""
Website chat hand-offs to the messenger hub: lead capture and escalation.
"""

from flask import Blueprint, current_app, jsonify, request

from intake.services.intake_service import capture_chat_lead, escalate_chat

chat_bp = Blueprint("chat", __name__)


def _hub_settings():
    return (
        current_app.config["MESSENGER_HUB_URL"],
        current_app.config["MESSENGER_HUB_TIMEOUT"],
    )


@chat_bp.post("/api/chat-lead-capture")
def chat_lead_capture():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        data = {}
    hub_url, timeout = _hub_settings()
    outcome = capture_chat_lead(data, hub_url=hub_url, timeout=timeout)
    return jsonify(outcome.body), outcome.status


@chat_bp.post("/api/chat-escalation")
def chat_escalation():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        data = {}
    hub_url, timeout = _hub_settings()
    outcome = escalate_chat(data, hub_url=hub_url, timeout=timeout)
    return jsonify(outcome.body), outcome.status
