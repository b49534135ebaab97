"""
Inquiry form API: name, company, email, message. Stored, then staff are emailed.
"""

from flask import Blueprint, current_app, jsonify, request

from intake.services.intake_service import submit_inquiry
from intake.utils.rate_limit import limit_submissions

inquiry_bp = Blueprint("inquiry", __name__)


@inquiry_bp.post("/api/inquiry")
@limit_submissions
def create_inquiry_submission():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        data = {}
    outcome = submit_inquiry(
        data, notification_email=current_app.config.get("NOTIFICATION_EMAIL")
    )
    return jsonify(outcome.body), outcome.status
