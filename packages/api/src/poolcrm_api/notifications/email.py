"""
notifications/email.py — Outbound email over the Resend REST API.

Usage:
    provider = ResendEmailProvider()
    message_id = await provider.send(
        to="jane@example.com",
        subject="Reminder: consultation tomorrow",
        html="<p>...</p>",
    )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx
import structlog

from poolcrm_shared.config import settings

from poolcrm_api.errors import InternalError
from poolcrm_api.utils.retry import with_retry

log = structlog.get_logger(__name__)


class NotificationProvider(ABC):
    """A channel that can deliver one message to one recipient."""

    # Override in subclass; used for logging
    name: str = "unknown"

    @abstractmethod
    async def send(
        self, to: str, subject: str, html: str, text: str | None = None
    ) -> str:
        """
        Deliver a message.

        Returns:
            The provider's message id.

        Raises:
            InternalError: the provider refused or failed the request.
        """
        ...


class ResendEmailProvider(NotificationProvider):
    name = "resend"

    def __init__(
        self,
        *,
        api_key: str | None = None,
        api_url: str | None = None,
        sender: str | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.resend_api_key
        self._api_url = (api_url or settings.resend_api_url).rstrip("/")
        self._sender = sender or settings.email_from
        self._timeout = timeout
        self._log = log.bind(provider=self.name)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    @with_retry(max_attempts=3, base_delay=0.5)
    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(f"{self._api_url}/emails", json=payload, headers=headers)

    async def send(
        self, to: str, subject: str, html: str, text: str | None = None
    ) -> str:
        if not self.enabled:
            raise InternalError("Email is not configured (RESEND_API_KEY is empty)")

        payload: dict[str, Any] = {
            "from": self._sender,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        try:
            response = await self._post(payload)
        except httpx.HTTPError as exc:
            self._log.error("email_send_failed", to=to, error=str(exc))
            raise InternalError("Failed to send email") from exc

        if response.is_error:
            self._log.error(
                "email_rejected",
                to=to,
                status=response.status_code,
                body=response.text[:500],
            )
            raise InternalError(
                "Failed to send email",
                details={"status": response.status_code},
            )

        message_id = response.json().get("id", "")
        self._log.info("email_sent", to=to, subject=subject, message_id=message_id)
        return message_id
