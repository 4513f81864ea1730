"""Tests for outbound email and the appointment reminder sweep."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from poolcrm_api.errors import InternalError
from poolcrm_api.notifications.email import ResendEmailProvider
from poolcrm_api.notifications.reminders import WINDOWS, ReminderService, render_reminder
from poolcrm_shared.models import CalendarEvent
from tests.conftest import make_supabase

API_URL = "https://mail.example.com"
NOW = datetime(2025, 3, 2, 15, 0, tzinfo=timezone.utc)


def _provider(**kwargs) -> ResendEmailProvider:
    return ResendEmailProvider(
        api_key=kwargs.pop("api_key", "re_test"),
        api_url=API_URL,
        sender="Pool CRM <crm@example.com>",
        **kwargs,
    )


class TestResendEmailProvider:
    @pytest.mark.asyncio
    async def test_send(self):
        with respx.mock() as router:
            route = router.post(f"{API_URL}/emails").mock(
                return_value=httpx.Response(200, json={"id": "msg_123"})
            )
            message_id = await _provider().send(
                "jane@example.com", "Hello", "<p>Hi</p>", text="Hi"
            )

        assert message_id == "msg_123"
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer re_test"
        assert json.loads(request.content) == {
            "from": "Pool CRM <crm@example.com>",
            "to": ["jane@example.com"],
            "subject": "Hello",
            "html": "<p>Hi</p>",
            "text": "Hi",
        }

    @pytest.mark.asyncio
    async def test_rejected(self):
        with respx.mock() as router:
            router.post(f"{API_URL}/emails").mock(
                return_value=httpx.Response(422, json={"message": "Invalid `to` field"})
            )
            with pytest.raises(InternalError) as exc_info:
                await _provider().send("bad", "Hello", "<p>Hi</p>")

        assert exc_info.value.details == {"status": 422}

    @pytest.mark.asyncio
    async def test_not_configured(self):
        provider = _provider(api_key="")
        assert provider.enabled is False
        with pytest.raises(InternalError):
            await provider.send("jane@example.com", "Hello", "<p>Hi</p>")


class TestReminders:
    def test_windows_do_not_overlap(self):
        day, soon = WINDOWS
        assert day.starts_after == soon.starts_before == timedelta(hours=2)
        assert day.starts_before == timedelta(hours=24)

    def test_render(self, event_row):
        event = CalendarEvent.from_db_row(
            {**event_row, "location_url": "https://maps.example.com/?q=12+Shore"}
        )
        subject, html, text = render_reminder(event, "Jane <Swimmer>")
        assert subject.startswith("Reminder: Opening consultation on ")
        assert "consultation" in text
        assert "(1h)" in text
        assert "Location: https://maps.example.com/?q=12+Shore" in text
        assert "Jane &lt;Swimmer&gt;" in html

    def test_due_events_query(self):
        client = make_supabase()
        service = ReminderService(client, _provider(), now=NOW)
        service.due_events(WINDOWS[0], NOW)

        chain = client.chains["calendar_events"][0]
        chain.eq.assert_any_call("status", "scheduled")
        chain.eq.assert_any_call("reminder_24h_sent", False)
        chain.gt.assert_called_with("start_datetime", "2025-03-02T17:00:00+00:00")
        chain.lte.assert_called_with("start_datetime", "2025-03-03T15:00:00+00:00")

    @pytest.mark.asyncio
    async def test_sweep(self, event_row):
        no_email = {**event_row, "id": "evt-2", "customer": {"id": "c2", "name": "Al", "email": None}}
        client = make_supabase({"calendar_events": [([event_row, no_email], 2), ([], 0)]})
        provider = _provider()
        provider.send = AsyncMock(return_value="msg_1")

        summary = await ReminderService(client, provider, now=NOW).send_due_reminders()

        assert summary == {
            "24h": {"sent": 1, "skipped": 1, "failed": 0},
            "2h": {"sent": 0, "skipped": 0, "failed": 0},
        }
        provider.send.assert_awaited_once()
        assert provider.send.await_args.args[0] == "jane@example.com"
        mark = client.chains["calendar_events"][1]
        mark.update.assert_called_with({"reminder_24h_sent": True})
        mark.eq.assert_called_with("id", event_row["id"])

    @pytest.mark.asyncio
    async def test_failed_send_is_not_marked(self, event_row):
        client = make_supabase({"calendar_events": [([event_row], 1), ([], 0)]})
        provider = _provider()
        provider.send = AsyncMock(side_effect=InternalError("Failed to send email"))

        summary = await ReminderService(client, provider, now=NOW).send_due_reminders()

        assert summary["24h"] == {"sent": 0, "skipped": 0, "failed": 1}
        for chain in client.chains["calendar_events"]:
            chain.update.assert_not_called()
