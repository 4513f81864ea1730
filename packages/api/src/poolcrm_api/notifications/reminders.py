"""
notifications/reminders.py — Appointment reminder sweep.

Two reminders go out per scheduled event: one about a day ahead and one about
two hours ahead. Each has a flag on calendar_events (reminder_24h_sent,
reminder_2h_sent) so a sweep never emails the same reminder twice.

The 24h window stops where the 2h window starts; an event booked less than
two hours ahead only gets the 2h reminder.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from html import escape
from typing import Any

import structlog
from supabase import Client

from poolcrm_shared.models import CalendarEvent
from poolcrm_shared.time_utils import format_duration, format_local, to_iso, utc_now

from poolcrm_api.errors import AppError
from poolcrm_api.notifications.email import NotificationProvider

log = structlog.get_logger(__name__)

EVENT_SELECT = "*, customer:customers!inner(id, name, email)"


@dataclass(frozen=True)
class ReminderWindow:
    name: str
    flag: str
    starts_after: timedelta
    starts_before: timedelta


WINDOWS: tuple[ReminderWindow, ...] = (
    ReminderWindow("24h", "reminder_24h_sent", timedelta(hours=2), timedelta(hours=24)),
    ReminderWindow("2h", "reminder_2h_sent", timedelta(0), timedelta(hours=2)),
)


def render_reminder(event: CalendarEvent, customer_name: str) -> tuple[str, str, str]:
    """Subject, HTML and plain-text bodies for one reminder."""
    when = format_local(event.start_datetime)
    duration = format_duration(event.duration_minutes())
    subject = f"Reminder: {event.title} on {when}"

    lines = [
        f"Hi {customer_name},",
        f"This is a reminder of your {event.type_label().lower()} on {when} ({duration}).",
    ]
    if event.location_url:
        lines.append(f"Location: {event.location_url}")
    lines.append("Reply to this email if you need to reschedule.")

    text = "\n\n".join(lines)
    html = "".join(f"<p>{escape(line)}</p>" for line in lines)
    return subject, html, text


class ReminderService:
    def __init__(
        self,
        client: Client,
        provider: NotificationProvider,
        *,
        now: datetime | None = None,
    ) -> None:
        self._client = client
        self._provider = provider
        self._now = now
        self._log = log.bind(provider=provider.name)

    def due_events(self, window: ReminderWindow, now: datetime) -> list[dict[str, Any]]:
        result = (
            self._client.table("calendar_events")
            .select(EVENT_SELECT)
            .eq("status", "scheduled")
            .eq(window.flag, False)
            .gt("start_datetime", to_iso(now + window.starts_after))
            .lte("start_datetime", to_iso(now + window.starts_before))
            .order("start_datetime")
            .execute()
        )
        return result.data or []

    def _mark_sent(self, event_id: str, window: ReminderWindow) -> None:
        (
            self._client.table("calendar_events")
            .update({window.flag: True})
            .eq("id", event_id)
            .execute()
        )

    async def send_due_reminders(self) -> dict[str, dict[str, int]]:
        """
        Run one sweep over both windows.

        Returns:
            Per-window counts: {"24h": {"sent", "skipped", "failed"}, "2h": {...}}.
        """
        now = self._now or utc_now()
        summary: dict[str, dict[str, int]] = {}

        for window in WINDOWS:
            counts = {"sent": 0, "skipped": 0, "failed": 0}
            for row in self.due_events(window, now):
                customer = row.get("customer") or {}
                email = customer.get("email")
                if not email:
                    counts["skipped"] += 1
                    continue

                event = CalendarEvent.from_db_row(row)
                subject, html, text = render_reminder(event, customer.get("name") or "there")
                try:
                    await self._provider.send(email, subject, html, text)
                except AppError as exc:
                    counts["failed"] += 1
                    self._log.error(
                        "reminder_failed", event_id=event.id, window=window.name, error=exc.message
                    )
                    continue

                self._mark_sent(event.id, window)
                counts["sent"] += 1
                self._log.info("reminder_sent", event_id=event.id, window=window.name)

            summary[window.name] = counts

        self._log.info("reminder_sweep_complete", summary=summary)
        return summary
