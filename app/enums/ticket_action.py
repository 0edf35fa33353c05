from enum import Enum


class TicketAction(str, Enum):
    """Enum for the kinds of entries recorded in a ticket's history"""

    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    ASSIGNED = "assigned"
    COMMENTED = "commented"
    UPDATED = "updated"

    def __str__(self):
        return self.value
