from .user_model import User, admin_properties
from .property_model import Property, Unit
from .company_model import Company, company_properties
from .ticket_model import Ticket, TicketHistory, TicketComment

__all__ = [
    "User",
    "admin_properties",
    "Property",
    "Unit",
    "Company",
    "company_properties",
    "Ticket",
    "TicketHistory",
    "TicketComment",
]
