from enum import Enum


class TicketStatus(str, Enum):
    """Enum for the lifecycle statuses of a maintenance ticket"""

    UNASSIGNED = "unassigned"
    IN_PROGRESS = "in_progress"
    WAITING = "waiting"
    COMPLETED = "completed"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value


# A ticket in one of these statuses can no longer be overdue
CLOSED_STATUSES = (TicketStatus.COMPLETED, TicketStatus.RESOLVED, TicketStatus.CANCELLED)
