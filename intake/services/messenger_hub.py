"""
Client for the messenger hub that receives website chat leads and escalations.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Tuple

import requests

logger = logging.getLogger(__name__)

DEFAULT_HUB_URL = "https://bma-messenger-hub-ooyy.onrender.com"
LEAD_CAPTURE_PATH = "/webhooks/lead-capture"
ESCALATION_PATH = "/webhooks/elevenlabs/escalate"

ESCALATION_REASON = "customer_request"
ESCALATION_SUMMARY = "Website chat escalation - customer requested to speak with team"


def _mask_email(e: str | None) -> str | None:
    if not e:
        return None
    local, _, domain = e.partition("@")
    if not domain:
        return e
    if len(local) <= 2:
        masked = local[0:1] + "***"
    else:
        masked = local[0] + "***" + local[-1]
    return masked + "@" + domain


def _drop_none(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


def build_lead_payload(
    *,
    email: str,
    name: Optional[str],
    company: Optional[str],
    conversation_summary: Any,
    locale: Any,
) -> Dict[str, Any]:
    return _drop_none(
        {
            "email": email,
            "name": name,
            "company": company,
            "conversationSummary": conversation_summary,
            "locale": locale,
            "source": "website_chat",
        }
    )


def build_escalation_payload(
    *,
    email: str,
    name: Optional[str],
    company: Optional[str],
    conversation_history: Any,
    locale: Any,
) -> Dict[str, Any]:
    return _drop_none(
        {
            "customer_email": email,
            "customer_name": name,
            "customer_company": company,
            "conversation_history": conversation_history,
            "escalation_reason": ESCALATION_REASON,
            "issue_summary": ESCALATION_SUMMARY,
            "urgency": "normal",
            "locale": locale,
        }
    )


def post_to_hub(
    base_url: str, path: str, payload: Dict[str, Any], *, timeout: float = 10.0
) -> Tuple[bool, Optional[str]]:
    """
    POST a JSON payload to the hub. Returns (True, None) on a 2xx response,
    otherwise (False, detail).
    """
    url = base_url.rstrip("/") + path
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        return False, f"request failed: {e}"
    if not resp.ok:
        return False, f"hub returned {resp.status_code}: {resp.text[:200]}"
    return True, None


def forward_lead(
    payload: Dict[str, Any], *, base_url: str, timeout: float = 10.0
) -> Tuple[bool, Optional[str]]:
    logger.info(
        "[hub] forwarding lead capture email=%s locale=%s",
        _mask_email(payload.get("email")),
        payload.get("locale"),
    )
    return post_to_hub(base_url, LEAD_CAPTURE_PATH, payload, timeout=timeout)


def forward_escalation(
    payload: Dict[str, Any], *, base_url: str, timeout: float = 10.0
) -> Tuple[bool, Optional[str]]:
    logger.info(
        "[hub] forwarding escalation email=%s locale=%s",
        _mask_email(payload.get("customer_email")),
        payload.get("locale"),
    )
    return post_to_hub(base_url, ESCALATION_PATH, payload, timeout=timeout)
