"""
Lead intake pipelines.

Form submissions (inquiry, quotation) run: honeypot -> validation -> persist ->
notify. Persisting must succeed for the request to succeed; notifying is
attempted afterwards and its result is only logged. Rate limiting runs before
any of this, in the route decorator.

Chat submissions (lead capture, escalation) validate the email and forward a
payload to the messenger hub without storing anything locally.

Every pipeline returns an Outcome; route handlers only serialize it.
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from intake.models.inquiry import create_inquiry
from intake.models.quotation import create_quotation
from intake.services.messenger_hub import (
    build_escalation_payload,
    build_lead_payload,
    forward_escalation,
    forward_lead,
)
from intake.services.notification_service import (
    send_inquiry_notification,
    send_quotation_notification,
)
from intake.utils.db import StoreError, StoreUnavailable, classify_store_error
from intake.utils.spam import HONEYPOT_FIELD, is_honeypot_triggered
from intake.utils.validators import (
    optional_text,
    validate_email,
    validate_inquiry,
    validate_quotation,
)

logger = logging.getLogger(__name__)

SUCCESS = "success"
SPAM_REJECTED = "spam_rejected"
VALIDATION_FAILED = "validation_failed"
PERSISTENCE_UNAVAILABLE = "persistence_unavailable"
PERSISTENCE_FAILED = "persistence_failed"
FORWARD_FAILED = "forward_failed"

DB_UNAVAILABLE_MESSAGE = "Database connection error. Please try again later."


@dataclass
class Outcome:
    kind: str
    status: int
    body: Dict[str, Any]
    record_id: Optional[str] = None
    # None when no notification was attempted
    notified: Optional[bool] = None


@dataclass(frozen=True)
class FormIntake:
    label: str
    validate: Callable[[Mapping[str, Any]], Tuple[Optional[Dict[str, Any]], Optional[str]]]
    success_message: str
    failure_message: str


INQUIRY = FormIntake(
    label="inquiry",
    validate=validate_inquiry,
    success_message="Inquiry submitted successfully",
    failure_message="Failed to submit inquiry. Please try again.",
)

QUOTATION = FormIntake(
    label="quotation",
    validate=validate_quotation,
    success_message="Quotation request submitted successfully",
    failure_message="Failed to submit quotation request. Please try again.",
)


def _invalid(message: str) -> Outcome:
    return Outcome(VALIDATION_FAILED, 400, {"error": message})


def _created(form: FormIntake, record_id: str, kind: str = SUCCESS, notified=None) -> Outcome:
    return Outcome(
        kind,
        201,
        {"success": True, "message": form.success_message, "id": record_id},
        record_id=record_id,
        notified=notified,
    )


def _persist(form: FormIntake, save, fields) -> Tuple[Optional[Dict[str, Any]], Optional[StoreError]]:
    try:
        return save(**fields), None
    except Exception as e:
        err = classify_store_error(e)
        logger.error(
            "[%s] persist failed (%s): %s", form.label, type(err).__name__, err
        )
        return None, err


def _notify(form: FormIntake, notify, record, to_email) -> bool:
    try:
        provider, detail = notify(record, to_email=to_email)
    except Exception as e:
        provider, detail = None, str(e)
    if provider is None:
        logger.error("[%s] notification failed id=%s: %s", form.label, record.get("id"), detail)
        return False
    logger.info("[%s] notification sent id=%s via %s", form.label, record.get("id"), provider)
    return True


def run_form_intake(
    form: FormIntake,
    data: Mapping[str, Any],
    *,
    save,
    notify,
    notification_email: Optional[str],
) -> Outcome:
    if is_honeypot_triggered(data.get(HONEYPOT_FIELD)):
        logger.warning("[%s] honeypot triggered, dropping submission", form.label)
        return _created(form, str(uuid.uuid4()), kind=SPAM_REJECTED)

    fields, err = form.validate(data)
    if err:
        return _invalid(err)

    record, store_err = _persist(form, save, fields)
    if store_err is not None:
        if isinstance(store_err, StoreUnavailable):
            return Outcome(PERSISTENCE_UNAVAILABLE, 503, {"error": DB_UNAVAILABLE_MESSAGE})
        return Outcome(PERSISTENCE_FAILED, 500, {"error": form.failure_message})

    record_id = str(record["id"])
    notified = _notify(form, notify, record, notification_email)
    return _created(form, record_id, notified=notified)


def submit_inquiry(
    data: Mapping[str, Any],
    *,
    notification_email: Optional[str],
    save=None,
    notify=None,
) -> Outcome:
    return run_form_intake(
        INQUIRY,
        data,
        save=create_inquiry if save is None else save,
        notify=send_inquiry_notification if notify is None else notify,
        notification_email=notification_email,
    )


def submit_quotation(
    data: Mapping[str, Any],
    *,
    notification_email: Optional[str],
    save=None,
    notify=None,
) -> Outcome:
    return run_form_intake(
        QUOTATION,
        data,
        save=create_quotation if save is None else save,
        notify=send_quotation_notification if notify is None else notify,
        notification_email=notification_email,
    )


def _chat_contact(data: Mapping[str, Any]) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    email, err = validate_email(data.get("email"))
    if err:
        return None, err
    return (
        {
            "email": email,
            "name": optional_text(data.get("name")),
            "company": optional_text(data.get("company")),
        },
        None,
    )


def capture_chat_lead(
    data: Mapping[str, Any], *, hub_url: str, timeout: float = 10.0, forward=None
) -> Outcome:
    """
    Forward an email collected mid-conversation. Hub failures never reach the
    chat: the response is a success either way.
    """
    contact, err = _chat_contact(data)
    if err:
        return _invalid(err)

    payload = build_lead_payload(
        conversation_summary=data.get("conversationSummary"),
        locale=data.get("locale"),
        **contact,
    )
    if forward is None:
        forward = forward_lead
    try:
        ok, detail = forward(payload, base_url=hub_url, timeout=timeout)
    except Exception as e:
        ok, detail = False, str(e)
    if not ok:
        logger.error("[chat lead] hub forward failed: %s", detail)

    return Outcome(
        SUCCESS, 200, {"success": True, "message": "Lead captured successfully"}, notified=ok
    )


def escalate_chat(
    data: Mapping[str, Any], *, hub_url: str, timeout: float = 10.0, forward=None
) -> Outcome:
    contact, err = _chat_contact(data)
    if err:
        return _invalid(err)

    payload = build_escalation_payload(
        conversation_history=data.get("conversationHistory"),
        locale=data.get("locale"),
        **contact,
    )
    if forward is None:
        forward = forward_escalation
    try:
        ok, detail = forward(payload, base_url=hub_url, timeout=timeout)
    except Exception as e:
        ok, detail = False, str(e)
    if not ok:
        logger.error("[chat escalation] hub forward failed: %s", detail)
        return Outcome(
            FORWARD_FAILED,
            500,
            {"error": "Failed to submit escalation. Please try again."},
            notified=False,
        )

    return Outcome(
        SUCCESS,
        200,
        {"success": True, "message": "Escalation submitted successfully"},
        notified=True,
    )
