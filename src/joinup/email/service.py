"""
Outbound email for level-up announcements.

Mail is delivered over SMTP with aiosmtplib. When Redis is available, sends
to any one address are capped per hour.
"""

from __future__ import annotations

import hashlib
import ssl
from email.message import EmailMessage
from typing import TYPE_CHECKING

import aiosmtplib
import structlog

from joinup.config import get_settings
from joinup.email.templates import level_up_email

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from joinup.config import Settings

logger = structlog.get_logger()


class SMTPMailer:
    """Deliver rendered messages through the configured SMTP relay."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def build(self, to_email: str, subject: str, html_body: str, text_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = f"{self.settings.email_from_name} <{self.settings.email_from_address}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")
        return msg

    async def deliver(self, msg: EmailMessage) -> None:
        s = self.settings
        await aiosmtplib.send(
            msg,
            hostname=s.smtp_host,
            port=s.smtp_port,
            username=s.smtp_username or None,
            password=s.smtp_password or None,
            start_tls=s.smtp_use_tls,
            tls_context=ssl.create_default_context() if s.smtp_use_tls else None,
        )


class EmailService:
    """Rate-limited sender for gamification mail."""

    RATE_LIMIT_WINDOW = 3600

    def __init__(
        self,
        mailer: SMTPMailer | None = None,
        redis: Redis | None = None,
        rate_limit_max: int | None = None,
    ) -> None:
        self.mailer = mailer or SMTPMailer()
        self._redis = redis
        self.rate_limit_max = rate_limit_max or get_settings().email_rate_limit_per_hour

    async def _within_rate_limit(self, address: str) -> bool:
        if self._redis is None:
            return True
        key = f"email_rate:{hashlib.sha256(address.lower().encode()).hexdigest()}"
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, self.RATE_LIMIT_WINDOW)
        return count <= self.rate_limit_max

    async def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        """Returns True if delivered, False if rate limited or the relay failed."""
        if not await self._within_rate_limit(to):
            logger.warning("email_rate_limited", to=to, subject=subject)
            return False
        try:
            await self.mailer.deliver(self.mailer.build(to, subject, html_body, text_body))
        except (aiosmtplib.SMTPException, OSError):
            logger.exception("email_send_failed", to=to)
            return False
        logger.info("email_sent", to=to, subject=subject)
        return True

    async def send_level_up(
        self,
        to: str,
        *,
        user_name: str | None,
        old_level: int,
        new_level: int,
        level_name: str,
        total_points: int,
    ) -> bool:
        subject, html_body, text_body = level_up_email(
            user_name,
            old_level,
            new_level,
            level_name,
            total_points,
            f"{get_settings().frontend_base_url}/profile",
        )
        return await self.send_email(to, subject, html_body, text_body)


_email_service: EmailService | None = None


def get_email_service(redis: Redis | None = None) -> EmailService:
    """Get or create the email service singleton."""
    global _email_service  # noqa: PLW0603
    if _email_service is None:
        _email_service = EmailService(redis=redis)
    return _email_service


def reset_email_service() -> None:
    global _email_service  # noqa: PLW0603
    _email_service = None
