from enum import Enum


class TicketPriority(str, Enum):
    """Enum for ticket priorities"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    def __str__(self):
        return self.value
