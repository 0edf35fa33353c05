"""
Best-effort notification fan-out for ticket events.

The dispatcher walks its channels in order and hands each one the event. A
failing channel is logged and recorded in the report; it never stops the
remaining channels and never reaches the caller. There is no retry, queue or
delivery guarantee.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import config
from enums.notification_event import NotificationEvent
from services.email_service import EmailService
from services.group_chat_service import GroupChatClient
from services.sms_service import TwilioClient
from services.notifications.channels import (
    ChannelResult,
    EmailChannel,
    FileChannel,
    GroupChatChannel,
    LogChannel,
    NotificationChannel,
    SmsChannel,
)

logger = logging.getLogger("tickets.notifications")


@dataclass
class DispatchReport:
    event: str
    ticket_id: Optional[int]
    results: List[ChannelResult] = field(default_factory=list)

    @property
    def channels_attempted(self) -> int:
        return sum(1 for result in self.results if not result.skipped)

    @property
    def channels_succeeded(self) -> int:
        return sum(1 for result in self.results if result.success and not result.skipped)

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "ticket_id": self.ticket_id,
            "channels_attempted": self.channels_attempted,
            "channels_succeeded": self.channels_succeeded,
            "results": [result.to_dict() for result in self.results],
        }


class NotificationDispatcher:
    def __init__(self, channels: Sequence[NotificationChannel] = ()):
        self.channels = list(channels)

    async def notify(self, event, ticket, actor) -> DispatchReport:
        ticket_id = getattr(ticket, "id", None)
        try:
            event = NotificationEvent(event)
        except ValueError:
            logger.error("Unknown notification event %r for ticket %s", event, ticket_id)
            return DispatchReport(event=str(event), ticket_id=ticket_id)

        report = DispatchReport(event=event.value, ticket_id=ticket_id)
        for channel in self.channels:
            name = getattr(channel, "name", type(channel).__name__)
            try:
                result = await channel.send(event, ticket, actor)
                if not isinstance(result, ChannelResult):
                    raise TypeError(f"channel returned {type(result).__name__}, not ChannelResult")

                if result.skipped:
                    logger.debug("%s notification skipped for ticket %s: %s", name, ticket_id, result.error)
                elif result.success:
                    logger.info("%s notification sent for ticket %s", name, ticket_id)
                else:
                    logger.warning(
                        "%s notification failed for ticket %s: %s", name, ticket_id, result.error
                    )
            except Exception as e:
                logger.warning(
                    "%s notification failed for ticket %s: %s",
                    name,
                    ticket_id,
                    e,
                    exc_info=True,
                )
                result = ChannelResult(channel=name, success=False, error=str(e))
            report.results.append(result)

        logger.info(
            "Notification summary for ticket %s (%s): %d/%d channels successful",
            ticket_id,
            event.value,
            report.channels_succeeded,
            report.channels_attempted,
        )
        return report

    def status(self) -> dict:
        return {
            "channels": [channel.name for channel in self.channels],
            "total_channels": len(self.channels),
        }


def build_dispatcher() -> NotificationDispatcher:
    """Build the dispatcher from configuration; channels without credentials are left out."""
    channels: List[NotificationChannel] = [
        LogChannel(),
        FileChannel(config.NOTIFICATION_LOG_FILE),
    ]

    if config.EMAIL_SERVER and config.EMAIL_USER and config.EMAIL_PASSWORD:
        channels.append(EmailChannel(EmailService(), config.NOTIFICATION_EMAIL or None))
    else:
        logger.warning("Email credentials not configured. Email notifications disabled.")

    if config.TWILIO_ACCOUNT_SID and config.TWILIO_AUTH_TOKEN and config.TWILIO_PHONE_NUMBER:
        channels.append(SmsChannel(TwilioClient()))
    else:
        logger.warning("Twilio credentials not configured. SMS notifications disabled.")

    if config.GROUP_CHAT_ID:
        channels.append(
            GroupChatChannel(GroupChatClient(), config.GROUP_CHAT_ID, config.GROUP_CHAT_NAME)
        )
    else:
        logger.warning("Group chat not configured. Group broadcasts disabled.")

    logger.info("Notification channels available: %s", ", ".join(c.name for c in channels))
    return NotificationDispatcher(channels)
