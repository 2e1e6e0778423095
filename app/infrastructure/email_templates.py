"""HTML templates and payloads for notification emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from html import escape

from app.config import get_settings
from app.utils import get_app_timezone

BRAND = "Real Estate Portfolio"


@dataclass(frozen=True)
class CostEmailData:
    user_name: str
    project_name: str
    project_id: int
    cost_description: str
    amount: int  # cents
    cost_id: str
    recipient_email: str
    unsubscribe_token: str


@dataclass(frozen=True)
class LargeExpenseEmailData(CostEmailData):
    """Same payload as :class:`CostEmailData`, rendered as an alert."""


@dataclass(frozen=True)
class DocumentEmailData:
    user_name: str
    project_name: str
    project_id: int
    file_name: str
    document_id: str
    recipient_email: str
    unsubscribe_token: str


@dataclass(frozen=True)
class TimelineEventEmailData:
    user_name: str
    project_name: str
    project_id: int
    event_title: str
    event_date: datetime
    event_id: str
    recipient_email: str
    unsubscribe_token: str


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def format_aud(amount_in_cents: int) -> str:
    """Format an amount in cents the way the emails display money."""

    amount = Decimal(amount_in_cents) / 100
    sign = "-" if amount < 0 else ""
    return f"{sign}A${abs(amount):,.2f}"


def format_email_date(value: datetime) -> str:
    """Render ``value`` as e.g. ``5 Mar 2025`` in the application timezone."""

    if value.tzinfo is not None:
        value = value.astimezone(get_app_timezone())
    return f"{value.day} {value:%b %Y}"


def _app_url() -> str:
    return get_settings().app_url.rstrip("/")


def unsubscribe_url(token: str) -> str:
    return f"{_app_url()}/unsubscribe/{token}"


def _wrap(title: str, content: str, token: str) -> str:
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="UTF-8">'
        f"<title>{escape(title)}</title></head>"
        '<body style="font-family: Arial, sans-serif; color: #333;">'
        f'<div class="header"><h1>{escape(title)}</h1></div>'
        f'<div class="content">{content}</div>'
        '<div class="footer">'
        f"<p>This email was sent from {BRAND}</p>"
        "<p>You received this email because you are a member of this project.</p>"
        f'<p><a href="{escape(unsubscribe_url(token))}">Unsubscribe from these emails</a></p>'
        "</div></body></html>"
    )


def _button(path: str, label: str) -> str:
    return f'<a class="button" href="{escape(_app_url() + path)}">{escape(label)}</a>'


def render_cost_added(data: CostEmailData) -> RenderedEmail:
    content = "".join(
        (
            f"<p>Hi {escape(data.user_name)},</p>",
            f"<p>A new cost was added to <strong>{escape(data.project_name)}</strong>.</p>",
            '<div class="highlight">',
            f"<p>{escape(data.cost_description)}</p>",
            f'<p class="amount">{format_aud(data.amount)}</p>',
            "</div>",
            _button(f"/projects/{data.project_id}/costs", "View Costs"),
        )
    )
    return RenderedEmail(
        subject=f"New Cost Added to {data.project_name} - {BRAND}",
        html=_wrap("New Cost Added", content, data.unsubscribe_token),
    )


def render_large_expense(data: LargeExpenseEmailData) -> RenderedEmail:
    content = "".join(
        (
            f"<p>Hi {escape(data.user_name)},</p>",
            f"<p>A large expense was recorded on <strong>{escape(data.project_name)}</strong>.</p>",
            '<div class="large-expense">',
            f"<p>{escape(data.cost_description)}</p>",
            f'<p class="amount">{format_aud(data.amount)}</p>',
            "</div>",
            _button(f"/projects/{data.project_id}/costs", "Review Expense"),
        )
    )
    return RenderedEmail(
        subject=f"\U0001f6a8 Large Expense Alert: {data.project_name} - {BRAND}",
        html=_wrap("Large Expense Alert", content, data.unsubscribe_token),
    )


def render_document_uploaded(data: DocumentEmailData) -> RenderedEmail:
    content = "".join(
        (
            f"<p>Hi {escape(data.user_name)},</p>",
            f"<p>A new document was uploaded to <strong>{escape(data.project_name)}</strong>:</p>",
            f'<div class="highlight"><p>{escape(data.file_name)}</p></div>',
            _button(f"/projects/{data.project_id}/documents/{data.document_id}", "View Document"),
        )
    )
    return RenderedEmail(
        subject=f"New Document Uploaded to {data.project_name} - {BRAND}",
        html=_wrap("New Document Uploaded", content, data.unsubscribe_token),
    )


def render_timeline_event(data: TimelineEventEmailData) -> RenderedEmail:
    content = "".join(
        (
            f"<p>Hi {escape(data.user_name)},</p>",
            f"<p>A timeline event was added to <strong>{escape(data.project_name)}</strong>.</p>",
            '<div class="highlight">',
            f"<p>{escape(data.event_title)}</p>",
            f"<p>{format_email_date(data.event_date)}</p>",
            "</div>",
            _button(f"/projects/{data.project_id}/events/{data.event_id}", "View Event"),
        )
    )
    return RenderedEmail(
        subject=f"New Timeline Event: {data.project_name} - {BRAND}",
        html=_wrap("New Timeline Event", content, data.unsubscribe_token),
    )


__all__ = [
    "CostEmailData",
    "DocumentEmailData",
    "LargeExpenseEmailData",
    "RenderedEmail",
    "TimelineEventEmailData",
    "format_aud",
    "render_cost_added",
    "render_document_uploaded",
    "render_large_expense",
    "render_timeline_event",
    "unsubscribe_url",
]
