from enum import Enum


class NotificationEvent(str, Enum):
    """Enum for ticket events that fan out to notification channels"""

    TICKET_CREATED = "ticket_created"
    TICKET_ASSIGNED = "ticket_assigned"

    def __str__(self):
        return self.value
