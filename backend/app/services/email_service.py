"""
Salon Backend — Email Delivery Service
========================================

What:  Sends transactional HTML email and reports how it was delivered.
Why:   Callers only need to know "delivered, delivered via fallback, not
       delivered"; provider details stay here.
How:   Primary path is the Resend HTTP API (httpx). If it fails, or is not
       configured, the message goes out over SMTP as the fallback path.
Who:   Called by StylistService after a stylist is created.

Outcome contract for send():
    SendResult(ok=True,  fallback=False) → delivered by Resend
    SendResult(ok=True,  fallback=True)  → delivered by SMTP
    SendResult(ok=False)                 → no delivery path configured
    raises EmailDeliveryError            → every configured path failed
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

import httpx

from app.config import settings
from app.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


@dataclass
class SendResult:
    ok: bool
    fallback: bool = False
    provider: Optional[str] = None
    error: Optional[str] = None


class EmailService:
    """Resend first, SMTP second. No retries on either path."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    @property
    def configured_paths(self) -> list:
        paths = []
        if settings.resend_configured:
            paths.append("resend")
        if settings.smtp_configured:
            paths.append("smtp")
        return paths

    async def send(self, to: str, subject: str, html: str) -> SendResult:
        if not settings.resend_configured and not settings.smtp_configured:
            logger.warning("Email is not configured; skipping send")
            return SendResult(ok=False, error="email delivery is not configured")

        primary_error: Optional[str] = None

        if settings.resend_configured:
            try:
                await self._send_resend(to, subject, html)
                logger.info("Email delivered via Resend")
                logger.debug("Resend recipient: %s", to)
                return SendResult(ok=True, provider="resend")
            except httpx.HTTPError as e:
                primary_error = str(e) or type(e).__name__
                logger.warning("Resend delivery failed: %s", primary_error)

        if settings.smtp_configured:
            try:
                await asyncio.to_thread(self._send_smtp, to, subject, html)
            except (smtplib.SMTPException, OSError) as e:
                logger.error("SMTP delivery failed: %s", str(e))
                raise EmailDeliveryError(
                    message="All email delivery paths failed",
                    context={"primary_error": primary_error, "fallback_error": str(e)},
                )
            logger.info("Email delivered via SMTP fallback")
            logger.debug("SMTP recipient: %s", to)
            return SendResult(ok=True, fallback=True, provider="smtp")

        raise EmailDeliveryError(
            message="Email delivery failed",
            context={"primary_error": primary_error},
        )

    async def _send_resend(self, to: str, subject: str, html: str) -> None:
        payload = {
            "from": settings.email_from,
            "to": to,
            "subject": subject,
            "html": html,
        }
        headers = {
            "Authorization": f"Bearer {settings.resend_api_key}",
            "Content-Type": "application/json",
        }
        async with httpx.AsyncClient(
            timeout=settings.http_timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(settings.resend_api_url, json=payload, headers=headers)
            response.raise_for_status()

    def _send_smtp(self, to: str, subject: str, html: str) -> None:
        """Blocking SMTP send; run in a worker thread."""
        message = EmailMessage()
        message["From"] = settings.email_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(html, subtype="html")

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.http_timeout) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            if settings.smtp_username:
                smtp.login(settings.smtp_username, settings.smtp_password)
            smtp.send_message(message)


# ── Singleton Instance ────────────────────────────────────────────────────
email_service = EmailService()
