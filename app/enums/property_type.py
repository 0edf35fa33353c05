from enum import Enum


class PropertyType(str, Enum):
    """Enum for different types of properties"""

    APARTMENT = "apartment"
    HOUSE = "house"
    TOWNHOUSE = "townhouse"
    STUDENT_RESIDENCE = "student_residence"
    COMMERCIAL = "commercial"

    def __str__(self):
        return self.value
