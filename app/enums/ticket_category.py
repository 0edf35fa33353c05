from enum import Enum


class TicketCategory(str, Enum):
    """Enum for the kinds of maintenance a ticket can request"""

    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HEATING = "heating"
    COOLING = "cooling"
    APPLIANCES = "appliances"
    STRUCTURAL = "structural"
    PEST_CONTROL = "pest_control"
    CLEANING = "cleaning"
    SECURITY = "security"
    OTHER = "other"

    def __str__(self):
        return self.value
