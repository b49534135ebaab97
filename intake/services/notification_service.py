"""
Staff email notifications for new inquiries and quotation requests.
"""

from __future__ import annotations
import html
from typing import Any, Dict, Optional, Tuple

from intake.utils.email_sender import send_email
from intake.utils.validators import PREFERRED_SOLUTIONS


def _html_lines(value: str) -> str:
    return html.escape(value).replace("\n", "<br>")


def _row(label: str, value_html: str) -> str:
    return (
        '<tr><td style="padding:8px 0;font-weight:bold;width:140px;'
        f'vertical-align:top;">{label}</td><td style="padding:8px 0;">{value_html}</td></tr>'
    )


def solution_label(value: str) -> str:
    return PREFERRED_SOLUTIONS.get(value, value)


def render_inquiry_email(inquiry: Dict[str, Any]) -> Tuple[str, str, str]:
    """Return (subject, body_text, body_html)."""
    subject = f"New Inquiry from {inquiry['name']} - {inquiry['company']}"
    text = (
        "New Music Inquiry\n\n"
        f"Name: {inquiry['name']}\n"
        f"Company: {inquiry['company']}\n"
        f"Email: {inquiry['email']}\n\n"
        f"Message:\n{inquiry['message']}\n\n"
        "---\n"
        "Sent from the website contact form\n"
    )
    email = html.escape(inquiry["email"])
    body_html = (
        "<h1>New Music Inquiry</h1>"
        "<h2>Contact Details</h2><table>"
        + _row("Name:", html.escape(inquiry["name"]))
        + _row("Company:", html.escape(inquiry["company"]))
        + _row("Email:", f'<a href="mailto:{email}">{email}</a>')
        + "</table><h2>Message</h2>"
        f"<div>{_html_lines(inquiry['message'])}</div>"
        "<p>This email was sent from the website contact form.</p>"
    )
    return subject, text, body_html


def render_quotation_email(quotation: Dict[str, Any]) -> Tuple[str, str, str]:
    """Return (subject, body_text, body_html)."""
    full_name = f"{quotation['first_name']} {quotation['last_name']}"
    solution = solution_label(quotation["preferred_solution"])
    subject = f"New Quotation Request from {full_name} - {quotation['company_name']}"
    text = (
        "New Quotation Request\n\n"
        "Contact Details:\n"
        f"- Name: {full_name}\n"
        f"- Email: {quotation['email']}\n"
        f"- Country: {quotation['country']}\n\n"
        "Company Information:\n"
        f"- Company Name: {quotation['company_name']}\n"
        f"- Address: {quotation['company_address']}\n\n"
        "Requirements:\n"
        f"- Preferred Solution: {solution}\n"
        f"- Number of Zones: {quotation['number_of_zones']}\n\n"
        "---\n"
        "Sent from the website quotation form\n"
    )
    email = html.escape(quotation["email"])
    body_html = (
        "<h1>New Quotation Request</h1>"
        "<h2>Contact Details</h2><table>"
        + _row("Name:", html.escape(full_name))
        + _row("Email:", f'<a href="mailto:{email}">{email}</a>')
        + _row("Country:", html.escape(quotation["country"]))
        + "</table><h2>Company Information</h2><table>"
        + _row("Company Name:", html.escape(quotation["company_name"]))
        + _row("Address:", _html_lines(quotation["company_address"]))
        + "</table><h2>Requirements</h2><table>"
        + _row("Solution:", html.escape(solution))
        + _row("Number of Zones:", str(quotation["number_of_zones"]))
        + "</table><p>This email was sent from the website quotation form.</p>"
    )
    return subject, text, body_html


def _deliver(
    to_email: Optional[str], rendered: Tuple[str, str, str]
) -> Tuple[Optional[str], Optional[str]]:
    if not to_email:
        return None, "NOTIFICATION_EMAIL not set"
    subject, text, body_html = rendered
    return send_email(
        to_email=to_email,
        subject=subject,
        body_text=text,
        body_html=body_html,
    )


def send_inquiry_notification(
    inquiry: Dict[str, Any], *, to_email: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    return _deliver(to_email, render_inquiry_email(inquiry))


def send_quotation_notification(
    quotation: Dict[str, Any], *, to_email: Optional[str]
) -> Tuple[Optional[str], Optional[str]]:
    return _deliver(to_email, render_quotation_email(quotation))
