"""
Notification channels.

Each channel delivers one ticket event through one mechanism and reports the
outcome as a ``ChannelResult``. A channel that has nobody to deliver to for a
particular ticket reports ``skipped``; a delivery failure may either be
returned as an unsuccessful result or raised, the dispatcher absorbs both.
"""

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from enums.notification_event import NotificationEvent
from services.email_service import EmailService
from services.group_chat_service import GroupChatClient
from services.notifications.formatting import (
    display_name,
    format_email_html,
    format_email_subject,
    format_sms_message,
    format_ticket_message,
)
from services.sms_service import TwilioClient
from utils.dates import utcnow

notification_logger = logging.getLogger("tickets.notifications")


@dataclass
class ChannelResult:
    channel: str
    success: bool
    skipped: bool = False
    recipients: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class NotificationChannel(ABC):
    name = "channel"

    @abstractmethod
    async def send(self, event: NotificationEvent, ticket, actor) -> ChannelResult:
        ...

    def skipped(self, reason: str) -> ChannelResult:
        return ChannelResult(channel=self.name, success=False, skipped=True, error=reason)


class LogChannel(NotificationChannel):
    """Writes the notification to the application log. Always enabled."""

    name = "console"

    def __init__(self, logger: logging.Logger = notification_logger):
        self.logger = logger

    async def send(self, event, ticket, actor) -> ChannelResult:
        self.logger.info("%s\n%s", event.value, format_ticket_message(event, ticket, actor))
        return ChannelResult(channel=self.name, success=True)


class FileChannel(NotificationChannel):
    """Appends the notification to a plain-text log file. Always enabled."""

    name = "file"

    def __init__(self, path: str):
        self.path = path

    def _append(self, entry: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as handle:
            handle.write(entry)

    async def send(self, event, ticket, actor) -> ChannelResult:
        entry = (
            f"[{utcnow().isoformat()}Z] {event.value}\n"
            f"{format_ticket_message(event, ticket, actor)}\n"
            f"{'=' * 80}\n"
        )
        await asyncio.to_thread(self._append, entry)

        return ChannelResult(channel=self.name, success=True, recipients=[self.path])


class EmailChannel(NotificationChannel):
    name = "email"

    def __init__(self, email_service: EmailService, fallback_recipient: Optional[str] = None):
        self.email_service = email_service
        self.fallback_recipient = fallback_recipient

    def recipients(self, event, ticket) -> List[tuple]:
        found = []
        worker = getattr(ticket, "assigned_to", None)
        if worker is not None and worker.email and worker.email_notifications:
            found.append((worker.email, display_name(worker)))

        company = getattr(ticket, "company", None)
        if company is not None and company.email:
            found.append((company.email, company.name))

        if not found and event == NotificationEvent.TICKET_CREATED and self.fallback_recipient:
            found.append((self.fallback_recipient, "Maintenance Team"))
        return found

    async def send(self, event, ticket, actor) -> ChannelResult:
        recipients = self.recipients(event, ticket)
        if not recipients:
            return self.skipped("No email recipient for this ticket")

        subject = format_email_subject(event, ticket)
        errors = []
        for address, name in recipients:
            try:
                await self.email_service.send_email(
                    address, subject, format_email_html(event, ticket, name)
                )
            except Exception as e:
                notification_logger.warning("Email to %s failed: %s", address, e)
                errors.append(f"{address}: {e}")

        return ChannelResult(
            channel=self.name,
            success=not errors,
            recipients=[address for address, _ in recipients],
            error="; ".join(errors) or None,
        )


class SmsChannel(NotificationChannel):
    name = "sms"

    def __init__(self, client: TwilioClient):
        self.client = client

    def recipients(self, ticket) -> List[str]:
        found = []
        company = getattr(ticket, "company", None)
        if company is not None and company.phone:
            found.append(company.phone)

        worker = getattr(ticket, "assigned_to", None)
        if worker is not None and worker.phone and worker.sms_notifications:
            found.append(worker.phone)
        return found

    async def send(self, event, ticket, actor) -> ChannelResult:
        recipients = self.recipients(ticket)
        if not recipients:
            return self.skipped("No SMS recipient for this ticket")

        body = format_sms_message(event, ticket)
        errors = []
        for phone in recipients:
            try:
                await self.client.send_sms(phone, body)
            except Exception as e:
                notification_logger.warning("SMS to %s failed: %s", phone, e)
                errors.append(f"{phone}: {e}")

        return ChannelResult(
            channel=self.name,
            success=not errors,
            recipients=recipients,
            error="; ".join(errors) or None,
        )


class GroupChatChannel(NotificationChannel):
    name = "group"

    def __init__(self, client: GroupChatClient, group_id: str, group_name: str = ""):
        self.client = client
        self.group_id = group_id
        self.group_name = group_name

    async def send(self, event, ticket, actor) -> ChannelResult:
        await self.client.send_to_group(
            self.group_id, format_ticket_message(event, ticket, actor)
        )
        return ChannelResult(
            channel=self.name,
            success=True,
            recipients=[self.group_name or self.group_id],
        )
