from enum import Enum


class CompanyCategory(str, Enum):
    """Enum for the trades an external contractor covers"""

    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    HEATING = "heating"
    COOLING = "cooling"
    APPLIANCES = "appliances"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"
    SECURITY = "security"
    OTHER = "other"

    def __str__(self):
        return self.value
