"""
Utility functions for generating consistent display references for various entities.
"""


def generate_property_id(property_id: int) -> str:
    """
    Generate a formatted property reference in the format PROP-XXXX.

    Args:
        property_id (int): The numeric ID of the property

    Returns:
        str: A formatted property reference (e.g., PROP-0001)
    """
    return f"PROP-{property_id:04d}"


def generate_ticket_id(ticket_id: int) -> str:
    """
    Generate a formatted ticket reference in the format TCK-XXXX.

    Args:
        ticket_id (int): The numeric ID of the ticket

    Returns:
        str: A formatted ticket reference (e.g., TCK-0001)
    """
    return f"TCK-{ticket_id:04d}"


def generate_unit_number(index: int) -> str:
    """
    Generate the unit number for the index-th unit of a new property.

    Units are lettered in blocks of one hundred: A001..A100, B101..B200.

    Args:
        index (int): Zero-based position of the unit within the property

    Returns:
        str: A unit number (e.g., A001)
    """
    return f"{chr(65 + index // 100)}{index + 1:03d}"
