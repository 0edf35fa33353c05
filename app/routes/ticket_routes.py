import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.ticket_category import TicketCategory
from enums.ticket_priority import TicketPriority
from enums.ticket_status import TicketStatus
from schemas.ticket_response import TicketCommentResponse
from schemas.ticket_schema import CommentCreate, TicketCreate, TicketStatusUpdate, TicketUpdate
from services.notifications.dispatcher import NotificationDispatcher
from services.ticket_service import TicketService, format_ticket_response
from utils.dependencies import get_current_user, get_dispatcher
from utils.exceptions import TicketingError

from responses.success import created_response, data_response, success_response
from responses.error import error_from_exception, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


def get_ticket_service(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> TicketService:
    return TicketService(dispatcher)


def _with_notifications(ticket, reports) -> dict:
    data = format_ticket_response(ticket).model_dump(mode="json")
    data["notifications"] = [report.to_dict() for report in reports]
    return data


@router.post("")
async def create_ticket(
    payload: TicketCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket, reports = await ticket_service.create_ticket(db, payload, current_user)
        return created_response(
            _with_notifications(ticket, reports), "Ticket created successfully"
        )
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to create ticket")
        return internal_server_error("Failed to create ticket")


@router.get("")
def get_tickets(
    all_tickets: bool = Query(False, alias="all"),
    status: Optional[TicketStatus] = None,
    priority: Optional[TicketPriority] = None,
    category: Optional[TicketCategory] = None,
    overdue: Optional[bool] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    """Tickets visible to the current user, newest first."""
    try:
        tickets = ticket_service.list_tickets(
            db,
            current_user,
            all_tickets=all_tickets,
            status=status,
            priority=priority,
            category=category,
            overdue=overdue,
            skip=skip,
            limit=limit,
        )
        return data_response(
            [format_ticket_response(ticket) for ticket in tickets],
            "Tickets retrieved successfully",
        )
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        logger.exception("Failed to fetch tickets")
        return internal_server_error("Failed to fetch tickets")


@router.get("/{ticket_id}")
def get_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket = ticket_service.get_ticket(db, ticket_id, current_user)
        return data_response(format_ticket_response(ticket), "Ticket retrieved successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        logger.exception("Failed to fetch ticket %s", ticket_id)
        return internal_server_error("Failed to fetch ticket")


@router.put("/{ticket_id}")
async def update_ticket(
    ticket_id: int,
    payload: TicketUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket, reports = await ticket_service.update_ticket(db, ticket_id, payload, current_user)
        return data_response(_with_notifications(ticket, reports), "Ticket updated successfully")
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to update ticket %s", ticket_id)
        return internal_server_error("Failed to update ticket")


@router.patch("/{ticket_id}/status")
def update_ticket_status(
    ticket_id: int,
    payload: TicketStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    """Status change for the assigned worker; administrators may use it too."""
    try:
        ticket = ticket_service.update_status(
            db, ticket_id, payload.status, current_user, notes=payload.notes
        )
        return data_response(format_ticket_response(ticket), "Ticket status updated successfully")
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to update status of ticket %s", ticket_id)
        return internal_server_error("Failed to update ticket status")


@router.post("/{ticket_id}/comments")
def add_comment(
    ticket_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    try:
        comment = ticket_service.add_comment(
            db, ticket_id, payload.message, current_user, is_internal=payload.is_internal
        )
        return created_response(
            TicketCommentResponse.model_validate(comment), "Comment added successfully"
        )
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to add comment to ticket %s", ticket_id)
        return internal_server_error("Failed to add comment")


@router.delete("/{ticket_id}")
def delete_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    ticket_service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket_service.delete_ticket(db, ticket_id, current_user)
        return success_response("Ticket deleted successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to delete ticket %s", ticket_id)
        return internal_server_error("Failed to delete ticket")
