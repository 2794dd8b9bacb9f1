"""Out-of-band delivery of password reset links."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
from uuid import uuid4

import httpx

from app.core.logging_safety import safe_email_identifier

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Reset your password"


class ResetLinkDeliveryError(Exception):
    """Raised when the mail service does not accept a reset email."""


class ResetLinkSender(ABC):
    @abstractmethod
    async def deliver(self, *, email: str, link: str) -> None:
        """Send the reset link to the account holder."""


class ResendResetLinkSender(ResetLinkSender):
    """Emails the reset link through the Resend HTTP API."""

    def __init__(
        self,
        *,
        api_key: str,
        from_email: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._from_email = from_email
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport

    async def deliver(self, *, email: str, link: str) -> None:
        payload = {
            "from": self._from_email,
            "to": [email],
            "subject": RESET_EMAIL_SUBJECT,
            "text": (
                "We received a request to reset your password.\n\n"
                f"Open this link within the next hour to choose a new one:\n{link}\n\n"
                "If you did not request a reset, you can ignore this email."
            ),
            # Keeps mail clients from threading separate reset emails together.
            "headers": {"X-Entity-Ref-ID": uuid4().hex},
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self._api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}", "Accept": "application/json"},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise ResetLinkDeliveryError(
                    f"Mail service rejected reset email (HTTP {exc.response.status_code})"
                ) from exc
            except httpx.HTTPError as exc:
                raise ResetLinkDeliveryError(f"Mail service unreachable: {exc}") from exc

        logger.info("password_reset.link_sent recipient=%s", safe_email_identifier(email))


@dataclass(slots=True)
class InMemoryResetLinkSender(ResetLinkSender):
    outbox: list[tuple[str, str]] = field(default_factory=list)

    async def deliver(self, *, email: str, link: str) -> None:
        self.outbox.append((email, link))


__all__ = [
    "InMemoryResetLinkSender",
    "ResendResetLinkSender",
    "ResetLinkDeliveryError",
    "ResetLinkSender",
]
