"""Email transport backed by the SendGrid REST API."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


class EmailTransport(Protocol):
    def send(self, to: str, subject: str, body: str) -> bool:
        """Hand one HTML message to the provider; ``True`` once it is accepted."""


def describe_sendgrid_error(body: Any) -> str | None:
    """Return the ``errors[].message`` entries of a SendGrid error payload."""

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            return body
    if not isinstance(body, dict):
        return None

    messages = []
    for item in body.get("errors") or []:
        if not isinstance(item, dict) or not item.get("message"):
            continue
        help_link = item.get("help")
        messages.append(
            f"{item['message']} (help: {help_link})" if help_link else str(item["message"])
        )
    return "; ".join(messages) if messages else json.dumps(body, default=str)


def _log_failure(status_code: Any, body: Any, exc: Exception | None = None) -> None:
    details = describe_sendgrid_error(body)
    if status_code and details:
        logger.error("SendGrid API request failed with status %s: %s", status_code, details)
    elif status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
    elif details:
        logger.error("SendGrid API request failed: %s", details)
    else:
        logger.error("Error sending email via SendGrid: %s", exc)


class SendGridEmailTransport:
    """Send HTML notification emails with the configured SendGrid credentials."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def configured(self) -> bool:
        return bool(self.settings.sendgrid_api_key and self.settings.sendgrid_sender)

    def send(self, to: str, subject: str, body: str) -> bool:
        settings = self.settings
        if not (settings.sendgrid_api_key and settings.sendgrid_sender):
            logger.info("SendGrid configuration incomplete; skipping email to %s", to)
            return False

        message = Mail(
            from_email=settings.sendgrid_sender,
            to_emails=to,
            subject=subject,
            html_content=body,
        )
        try:
            response = SendGridAPIClient(settings.sendgrid_api_key).send(message)
        except Exception as exc:  # network and HTTP errors raised by the client
            _log_failure(getattr(exc, "status_code", None), getattr(exc, "body", None), exc)
            return False

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            _log_failure(status_code, getattr(response, "body", None))
            return False
        return True


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    return SendGridEmailTransport().send(recipient, subject, html_content)


__all__ = [
    "EmailTransport",
    "SendGridEmailTransport",
    "describe_sendgrid_error",
    "send_email",
]
