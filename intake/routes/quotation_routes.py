"""
Quotation request API: contact and company details, preferred solution and
number of music zones.
"""

from flask import Blueprint, current_app, jsonify, request

from intake.services.intake_service import submit_quotation
from intake.utils.rate_limit import limit_submissions

quotation_bp = Blueprint("quotation", __name__)


@quotation_bp.post("/api/quotation")
@limit_submissions
def create_quotation_submission():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        data = {}
    outcome = submit_quotation(
        data, notification_email=current_app.config.get("NOTIFICATION_EMAIL")
    )
    return jsonify(outcome.body), outcome.status
