"""
SMTP / SendGrid / SES email sending wrapper.

Configure via env:
- EMAIL_PROVIDER: "smtp" | "sendgrid" | "ses" (default: "smtp" if SMTP_USER set,
  else "sendgrid" if API key set, else "ses" if AWS region set)
- For SMTP: SMTP_HOST (default smtp.gmail.com), SMTP_PORT (587), SMTP_USER,
  SMTP_PASSWORD, SMTP_TIMEOUT (seconds)
- For SendGrid: SENDGRID_API_KEY
- For SES: AWS_REGION, AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY (or default creds)
- FROM_EMAIL, FROM_NAME: sender identity
"""

from __future__ import annotations
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Tuple, Optional


def _default_from_email() -> str:
    return os.getenv("FROM_EMAIL") or os.getenv("SMTP_USER") or "no-reply@example.com"


def _default_from_name() -> str:
    return os.getenv("FROM_NAME", "Website")


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Send an email via SMTP, SendGrid or SES.
    Returns (provider, provider_msg_id) or (None, error_message) on failure.
    """
    from_addr = from_email or _default_from_email()
    from_display = from_name or _default_from_name()

    provider = os.getenv("EMAIL_PROVIDER", "").lower()
    if not provider:
        if os.getenv("SMTP_USER"):
            provider = "smtp"
        elif os.getenv("SENDGRID_API_KEY"):
            provider = "sendgrid"
        elif os.getenv("AWS_REGION") or os.getenv("AWS_ACCESS_KEY_ID"):
            provider = "ses"
        else:
            return None, "EMAIL_PROVIDER not set and no SMTP, SendGrid or AWS creds"

    senders = {
        "smtp": _send_via_smtp,
        "sendgrid": _send_via_sendgrid,
        "ses": _send_via_ses,
    }
    sender = senders.get(provider)
    if sender is None:
        return None, f"Unknown EMAIL_PROVIDER: {provider}"
    return sender(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
        body_html=body_html,
        from_email=from_addr,
        from_name=from_display,
    )


def _send_via_smtp(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str],
    from_email: str,
    from_name: str,
) -> Tuple[Optional[str], Optional[str]]:
    host = os.getenv("SMTP_HOST", "smtp.gmail.com")
    port = int(os.getenv("SMTP_PORT", "587"))
    user = os.getenv("SMTP_USER")
    password = os.getenv("SMTP_PASSWORD")
    timeout = float(os.getenv("SMTP_TIMEOUT", "15"))

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = formataddr((from_name, from_email))
    msg["To"] = to_email
    msg["Message-ID"] = make_msgid()
    msg.attach(MIMEText(body_text, "plain", "utf-8"))
    if body_html:
        msg.attach(MIMEText(body_html, "html", "utf-8"))

    try:
        with smtplib.SMTP(host, port, timeout=timeout) as server:
            server.starttls()
            if user and password:
                server.login(user, password)
            server.sendmail(from_email, [to_email], msg.as_string())
        return "smtp", msg["Message-ID"]
    except (smtplib.SMTPException, OSError) as e:
        return None, str(e)


def _send_via_sendgrid(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str],
    from_email: str,
    from_name: str,
) -> Tuple[Optional[str], Optional[str]]:
    try:
        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail, Email, To, Content

        api_key = os.getenv("SENDGRID_API_KEY", "").strip()
        if not api_key:
            return None, "SENDGRID_API_KEY not set"

        html = body_html if body_html else f"<pre>{body_text}</pre>"
        message = Mail(
            from_email=Email(from_email, from_name),
            to_emails=To(to_email),
            subject=subject,
            plain_text_content=Content("text/plain", body_text),
            html_content=Content("text/html", html),
        )

        sg = SendGridAPIClient(api_key)
        response = sg.send(message)

        msg_id = None
        if response.headers and "X-Message-Id" in response.headers:
            msg_id = response.headers.get("X-Message-Id")
        return "sendgrid", msg_id or str(response.status_code)
    except Exception as e:
        return None, str(e)


def _send_via_ses(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str],
    from_email: str,
    from_name: str,
) -> Tuple[Optional[str], Optional[str]]:
    try:
        import boto3
        from botocore.exceptions import ClientError

        client = boto3.client("ses", region_name=os.getenv("AWS_REGION", "us-east-1"))

        body = {"Text": {"Data": body_text, "Charset": "UTF-8"}}
        if body_html:
            body["Html"] = {"Data": body_html, "Charset": "UTF-8"}

        response = client.send_email(
            Source=formataddr((from_name, from_email)),
            Destination={"ToAddresses": [to_email]},
            Message={
                "Subject": {"Data": subject, "Charset": "UTF-8"},
                "Body": body,
            },
        )
        return "ses", response.get("MessageId") or "unknown"
    except ClientError as e:
        return None, str(e.response.get("Error", {}).get("Message", str(e)))
    except Exception as e:
        return None, str(e)
