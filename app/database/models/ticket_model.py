from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from database.init import Base
from enums.ticket_category import TicketCategory
from enums.ticket_priority import TicketPriority
from enums.ticket_status import TicketStatus, CLOSED_STATUSES
from utils.dates import utcnow


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(30), default=TicketCategory.OTHER.value, index=True)
    priority = Column(String(10), default=TicketPriority.MEDIUM.value, index=True)
    status = Column(String(20), default=TicketStatus.UNASSIGNED.value, index=True)

    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    for_tenant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)

    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    unit = Column(String(20), nullable=False)
    room = Column(String(100), nullable=True)

    due_date = Column(DateTime, nullable=True, index=True)
    # Set the first time the ticket reaches "completed", never cleared afterwards
    completed_at = Column(DateTime, nullable=True)
    estimated_cost = Column(Float, default=0)
    actual_cost = Column(Float, default=0)
    is_archived = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Declared before the "property" relationship below, which shadows the builtin
    # for the rest of the class body
    @property
    def is_overdue(self) -> bool:
        if self.due_date is None:
            return False
        closed = {status.value for status in CLOSED_STATUSES}
        return utcnow() > self.due_date and self.status not in closed

    @property
    def days_since_creation(self) -> int:
        if self.created_at is None:
            return 0
        return (utcnow() - self.created_at).days

    created_by = relationship("User", foreign_keys=[created_by_id])
    for_tenant = relationship("User", foreign_keys=[for_tenant_id])
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    company = relationship("Company")
    property = relationship("Property")

    history = relationship(
        "TicketHistory",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketHistory.id",
    )
    comments = relationship(
        "TicketComment",
        back_populates="ticket",
        cascade="all, delete-orphan",
        order_by="TicketComment.id",
    )


class TicketHistory(Base):
    __tablename__ = "ticket_history"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(20), nullable=False)
    status = Column(String(20), nullable=True)
    previous_status = Column(String(20), nullable=True)
    updated_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    notes = Column(String(500), nullable=True)
    timestamp = Column(DateTime, default=utcnow)

    ticket = relationship("Ticket", back_populates="history")
    updated_by = relationship("User")


class TicketComment(Base):
    __tablename__ = "ticket_comments"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(String(500), nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    # Stored for the UI; nothing filters on it yet
    is_internal = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)

    ticket = relationship("Ticket", back_populates="comments")
    author = relationship("User")
