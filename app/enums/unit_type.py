from enum import Enum


class UnitType(str, Enum):
    """Enum for different types of units"""

    STUDIO = "studio"
    ONE_BED = "1bed"
    TWO_BED = "2bed"
    THREE_BED = "3bed"
    FOUR_BED = "4bed"
    SHARED = "shared"

    def __str__(self):
        return self.value
