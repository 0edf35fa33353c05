"""
Ticket status transitions.

Statuses form a flat set: every status may move to every other status. All
status writes go through ``apply_status`` so a guarded state machine can be
dropped in by changing ``is_transition_allowed`` alone.
"""

import logging
from typing import Optional, Union

from database.models.ticket_model import Ticket, TicketHistory
from enums.ticket_action import TicketAction
from enums.ticket_status import TicketStatus
from utils.dates import utcnow
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)


def initial_status(assigned_to_id=None, company_id=None) -> TicketStatus:
    """Status a ticket starts in, or falls back to when its assignment changes."""
    if assigned_to_id or company_id:
        return TicketStatus.IN_PROGRESS
    return TicketStatus.UNASSIGNED


def is_transition_allowed(current: Optional[str], new: str) -> bool:
    return True


def apply_status(
    ticket: Ticket,
    new_status: Union[TicketStatus, str],
    actor_id: int,
    notes: Optional[str] = None,
) -> bool:
    """
    Move ``ticket`` to ``new_status`` and record the change in its history.

    Returns True when the status actually changed. ``completed_at`` is stamped the
    first time the ticket reaches "completed" and is never cleared afterwards.
    """
    try:
        target = TicketStatus(new_status).value
    except ValueError:
        raise ValidationError(f"Invalid status: {new_status}")

    previous = ticket.status
    if not is_transition_allowed(previous, target):
        raise ValidationError(f"Cannot move ticket from {previous} to {target}")

    if target == TicketStatus.COMPLETED.value and ticket.completed_at is None:
        ticket.completed_at = utcnow()

    if previous == target:
        return False

    ticket.status = target
    ticket.history.append(
        TicketHistory(
            action=TicketAction.STATUS_CHANGED.value,
            status=target,
            previous_status=previous,
            updated_by_id=actor_id,
            notes=notes,
            timestamp=utcnow(),
        )
    )
    logger.info("Ticket %s status %s -> %s by user %s", ticket.id, previous, target, actor_id)
    return True
