"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from app.config import get_settings
from app.infrastructure.email_templates import (
    CostEmailData,
    DocumentEmailData,
    LargeExpenseEmailData,
    RenderedEmail,
    TimelineEventEmailData,
    render_cost_added,
    render_document_uploaded,
    render_large_expense,
    render_timeline_event,
)

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                help_link = item.get("help")
                if message and help_link:
                    messages.append(f"{message} (help: {help_link})")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        # Fall back to a JSON string for unrecognised payloads
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        try:
            return "; ".join(str(item) for item in parsed)
        except TypeError:
            return None

    return None


class EmailDeliveryError(RuntimeError):
    """Raised when SendGrid refuses or fails to deliver a message."""


def _describe_sendgrid_exception(exc: Exception) -> str:
    """Log a SendGrid API error and return a short description of it."""

    status_code = getattr(exc, "status_code", None)
    body = getattr(exc, "body", None)
    details = _extract_sendgrid_error_details(body)

    if status_code and details:
        logger.error(
            "SendGrid API request failed with status %s: %s", status_code, details
        )
        return f"status {status_code}: {details}"
    if status_code:
        logger.error("SendGrid API request failed with status %s", status_code)
        return f"status {status_code}"
    if details:
        logger.error("SendGrid API request failed: %s", details)
        return details
    logger.error("Error sending email via SendGrid: %s", exc)
    return str(exc) or exc.__class__.__name__


def _describe_unsuccessful_response(response: Any) -> str:
    """Log details from an unsuccessful SendGrid response object."""

    status_code = getattr(response, "status_code", None)
    body = getattr(response, "body", None)
    details = _extract_sendgrid_error_details(body)

    if details:
        logger.error(
            "SendGrid API responded with status %s: %s", status_code, details
        )
        return f"status {status_code}: {details}"
    logger.error("SendGrid API responded with status %s", status_code)
    return f"status {status_code}"


def _extract_message_id(response: Any) -> str | None:
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    try:
        message_id = headers.get("X-Message-Id")
    except AttributeError:
        return None
    return str(message_id) if message_id else None


def send_email(subject: str, html_content: str, recipient: str) -> str | None:
    """Send an email using the configured SendGrid credentials.

    Returns the SendGrid message id when the provider exposes one. When email is
    not configured the message is skipped and ``None`` is returned. Provider
    failures raise :class:`EmailDeliveryError`.
    """

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info(
            "SendGrid configuration incomplete; skipping email '%s' to %s",
            subject,
            recipient,
        )
        return None

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:
        raise EmailDeliveryError(_describe_sendgrid_exception(exc)) from exc

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        raise EmailDeliveryError(_describe_unsuccessful_response(response))

    return _extract_message_id(response)


def _send_rendered(rendered: RenderedEmail, recipient: str) -> str | None:
    return send_email(rendered.subject, rendered.html, recipient)


def send_cost_added_email(data: CostEmailData) -> str | None:
    """Tell a project member that a cost was recorded."""

    return _send_rendered(render_cost_added(data), data.recipient_email)


def send_large_expense_email(data: LargeExpenseEmailData) -> str | None:
    """Alert a project member about a large expense."""

    return _send_rendered(render_large_expense(data), data.recipient_email)


def send_document_uploaded_email(data: DocumentEmailData) -> str | None:
    return _send_rendered(render_document_uploaded(data), data.recipient_email)


def send_timeline_event_email(data: TimelineEventEmailData) -> str | None:
    return _send_rendered(render_timeline_event(data), data.recipient_email)


__all__ = [
    "EmailDeliveryError",
    "send_cost_added_email",
    "send_document_uploaded_email",
    "send_email",
    "send_large_expense_email",
    "send_timeline_event_email",
]
