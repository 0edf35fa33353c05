"""
Ticket lifecycle: create, update, status changes, comments, deletion and
role-scoped listing.

Permission checks go through ``services.access_control`` and every status
write goes through ``services.status_transitions.apply_status``. Notifications
are handed to the injected dispatcher after the ticket is committed, so a
failing channel can never roll back a ticket write.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from database.models import Company, Property, Ticket, TicketComment, TicketHistory, User
from enums.notification_event import NotificationEvent
from enums.ticket_action import TicketAction
from enums.ticket_status import CLOSED_STATUSES
from enums.user_role import UserRole, ADMIN_ROLES
from schemas.ticket_response import TicketResponse
from schemas.ticket_schema import TicketCreate, TicketUpdate
from services.access_control import (
    can_change_status,
    can_delete_ticket,
    can_edit_ticket,
    can_view_ticket,
    is_privileged,
    ticket_access_args,
)
from services.base_service import BaseService
from services.notifications.dispatcher import DispatchReport, NotificationDispatcher
from services.status_transitions import apply_status, initial_status
from utils.dates import utcnow
from utils.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from utils.id_generator import generate_property_id, generate_ticket_id

logger = logging.getLogger(__name__)

COMMENT_MAX_LENGTH = 500

# Fields a tenant may change on a ticket they filed
TENANT_EDITABLE_FIELDS = {"title", "description", "category", "priority", "unit", "room"}

# Columns that reject NULL; an explicit null in an update is ignored for these
REQUIRED_FIELDS = {
    "title",
    "description",
    "category",
    "priority",
    "property_id",
    "unit",
    "estimated_cost",
    "actual_cost",
    "is_archived",
}

PLAIN_FIELDS = (
    "title",
    "description",
    "category",
    "priority",
    "property_id",
    "unit",
    "room",
    "due_date",
    "estimated_cost",
    "actual_cost",
    "is_archived",
)


def _value(field):
    return getattr(field, "value", field)


def format_ticket_response(ticket: Ticket) -> TicketResponse:
    response = TicketResponse.model_validate(ticket)
    response.ticket_id = generate_ticket_id(ticket.id)
    response.property.property_id = generate_property_id(ticket.property_id)
    return response


class TicketService(BaseService):
    not_found_message = "Ticket not found"

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        super().__init__(Ticket)
        self.dispatcher = dispatcher or NotificationDispatcher()

    # Reference validation

    def _get_property(self, db: Session, property_id: int) -> Property:
        prop = db.query(Property).filter(Property.id == property_id).first()
        if prop is None:
            raise NotFoundError(f"Property {property_id} not found")
        return prop

    def _check_unit(self, prop: Property, unit_number: str):
        unit = prop.find_unit(unit_number)
        if unit is None:
            raise NotFoundError(f"Unit {unit_number} not found in property {prop.name}")
        return unit

    def _check_assignee(self, db: Session, user_id: int) -> User:
        worker = db.query(User).filter(User.id == user_id).first()
        if worker is None:
            raise NotFoundError("Assigned worker not found")
        if worker.role != UserRole.WORKER.value:
            raise ValidationError("Tickets can only be assigned to workers")
        if not worker.is_active:
            raise ValidationError("Cannot assign a ticket to a deactivated user")
        return worker

    def _check_company(self, db: Session, company_id: int) -> Company:
        company = db.query(Company).filter(Company.id == company_id).first()
        if company is None:
            raise NotFoundError("Company not found")
        if not company.is_active:
            raise ValidationError("Cannot assign a ticket to an inactive company")
        return company

    # Queries

    def get_ticket(self, db: Session, ticket_id: int, actor: User) -> Ticket:
        ticket = self.get_or_404(db, ticket_id)
        if not can_view_ticket(*ticket_access_args(actor, ticket)):
            logger.warning("User %s denied view of ticket %s", actor.id, ticket_id)
            raise PermissionDeniedError("You do not have access to this ticket")
        return ticket

    def list_tickets(
        self,
        db: Session,
        actor: User,
        all_tickets: bool = False,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        category: Optional[str] = None,
        overdue: Optional[bool] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Ticket]:
        query = db.query(Ticket)

        role = actor.role
        if role == UserRole.OWNER.value or (all_tickets and is_privileged(role)):
            pass
        elif role in {r.value for r in ADMIN_ROLES}:
            managed_ids = [p.id for p in actor.managed_properties]
            if not managed_ids:
                return []
            query = query.filter(Ticket.property_id.in_(managed_ids))
        elif role == UserRole.TENANT.value:
            query = query.filter(
                or_(Ticket.created_by_id == actor.id, Ticket.for_tenant_id == actor.id)
            )
        elif role == UserRole.WORKER.value:
            query = query.filter(Ticket.assigned_to_id == actor.id)
        else:
            return []

        if status:
            query = query.filter(Ticket.status == _value(status))
        if priority:
            query = query.filter(Ticket.priority == _value(priority))
        if category:
            query = query.filter(Ticket.category == _value(category))

        if overdue is not None:
            closed = [s.value for s in CLOSED_STATUSES]
            overdue_clause = and_(
                Ticket.due_date.isnot(None),
                Ticket.due_date < utcnow(),
                Ticket.status.notin_(closed),
            )
            query = query.filter(overdue_clause if overdue else ~overdue_clause)

        return (
            query.order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    # Mutations

    async def create_ticket(
        self, db: Session, payload: TicketCreate, actor: User
    ) -> Tuple[Ticket, List[DispatchReport]]:
        is_tenant = actor.role == UserRole.TENANT.value
        if is_tenant and (payload.assigned_to_id or payload.company_id):
            raise PermissionDeniedError("Tenants cannot assign tickets")

        property_id = payload.property_id
        unit_number = payload.unit
        if is_tenant:
            property_id = property_id or actor.assigned_property_id
            unit_number = unit_number or actor.assigned_unit
        if not property_id or not unit_number:
            raise ValidationError("Property and unit are required")

        prop = self._get_property(db, property_id)
        unit = self._check_unit(prop, unit_number)

        if is_tenant:
            for_tenant_id = actor.id
        elif payload.for_tenant_id:
            tenant = db.query(User).filter(User.id == payload.for_tenant_id).first()
            if tenant is None:
                raise NotFoundError("Tenant not found")
            for_tenant_id = tenant.id
        else:
            for_tenant_id = unit.tenant_id or actor.id

        if payload.assigned_to_id:
            self._check_assignee(db, payload.assigned_to_id)
        if payload.company_id:
            self._check_company(db, payload.company_id)

        status = initial_status(payload.assigned_to_id, payload.company_id)
        ticket = Ticket(
            title=payload.title,
            description=payload.description,
            category=payload.category.value,
            priority=payload.priority.value,
            status=status.value,
            created_by_id=actor.id,
            for_tenant_id=for_tenant_id,
            assigned_to_id=payload.assigned_to_id,
            company_id=payload.company_id,
            property_id=prop.id,
            unit=unit.unit_number,
            room=payload.room,
            due_date=payload.due_date,
            estimated_cost=payload.estimated_cost,
        )
        ticket.history.append(
            TicketHistory(
                action=TicketAction.CREATED.value,
                status=status.value,
                updated_by_id=actor.id,
                notes="Ticket created",
                timestamp=utcnow(),
            )
        )
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
        logger.info(
            "Ticket %s created by user %s with status %s", ticket.id, actor.id, ticket.status
        )

        reports = [await self.dispatcher.notify(NotificationEvent.TICKET_CREATED, ticket, actor)]
        if ticket.assigned_to_id or ticket.company_id:
            reports.append(await self.dispatcher.notify(NotificationEvent.TICKET_ASSIGNED, ticket, actor))
        return ticket, reports

    async def update_ticket(
        self, db: Session, ticket_id: int, payload: TicketUpdate, actor: User
    ) -> Tuple[Ticket, List[DispatchReport]]:
        """
        Apply a partial update.

        Only the fields present in ``payload`` are touched. When the assignment
        changes and no status is supplied, the status is derived again from the
        new assignment; an explicit status always wins.
        """
        ticket = self.get_or_404(db, ticket_id)
        if not can_edit_ticket(*ticket_access_args(actor, ticket)):
            logger.warning("User %s denied update of ticket %s", actor.id, ticket_id)
            raise PermissionDeniedError("You can only update tickets you created")

        changes = payload.model_dump(exclude_unset=True)
        if not is_privileged(actor.role):
            restricted = sorted(set(changes) - TENANT_EDITABLE_FIELDS)
            if restricted:
                logger.warning(
                    "User %s tried to change restricted fields %s on ticket %s",
                    actor.id,
                    restricted,
                    ticket_id,
                )
                raise PermissionDeniedError(
                    f"You are not allowed to change: {', '.join(restricted)}"
                )

        if "property_id" in changes or "unit" in changes:
            prop = self._get_property(db, changes.get("property_id") or ticket.property_id)
            self._check_unit(prop, changes.get("unit") or ticket.unit)
        if changes.get("assigned_to_id"):
            self._check_assignee(db, changes["assigned_to_id"])
        if changes.get("company_id"):
            self._check_company(db, changes["company_id"])

        updated_fields = []
        for field in PLAIN_FIELDS:
            if field not in changes:
                continue
            value = _value(changes[field])
            if value is None and field in REQUIRED_FIELDS:
                continue
            if getattr(ticket, field) != value:
                setattr(ticket, field, value)
                updated_fields.append(field)

        previous_assignment = (ticket.assigned_to_id, ticket.company_id)
        if "assigned_to_id" in changes:
            ticket.assigned_to_id = changes["assigned_to_id"]
        if "company_id" in changes:
            ticket.company_id = changes["company_id"]
        assignment_changed = (ticket.assigned_to_id, ticket.company_id) != previous_assignment

        if assignment_changed:
            ticket.history.append(
                TicketHistory(
                    action=TicketAction.ASSIGNED.value,
                    status=ticket.status,
                    updated_by_id=actor.id,
                    notes=(
                        f"Assignment changed: worker {ticket.assigned_to_id or '-'}, "
                        f"company {ticket.company_id or '-'}"
                    ),
                    timestamp=utcnow(),
                )
            )

        if changes.get("status") is not None:
            apply_status(ticket, changes["status"], actor.id)
        elif assignment_changed:
            apply_status(
                ticket,
                initial_status(ticket.assigned_to_id, ticket.company_id),
                actor.id,
                notes="Status derived from assignment",
            )

        if updated_fields:
            ticket.history.append(
                TicketHistory(
                    action=TicketAction.UPDATED.value,
                    status=ticket.status,
                    updated_by_id=actor.id,
                    notes=f"Updated: {', '.join(updated_fields)}",
                    timestamp=utcnow(),
                )
            )

        db.commit()
        db.refresh(ticket)
        logger.info("Ticket %s updated by user %s", ticket.id, actor.id)

        reports = []
        if assignment_changed and (ticket.assigned_to_id or ticket.company_id):
            reports.append(await self.dispatcher.notify(NotificationEvent.TICKET_ASSIGNED, ticket, actor))
        return ticket, reports

    def update_status(
        self, db: Session, ticket_id: int, status, actor: User, notes: Optional[str] = None
    ) -> Ticket:
        ticket = self.get_or_404(db, ticket_id)
        if not can_change_status(*ticket_access_args(actor, ticket)):
            logger.warning("User %s denied status change on ticket %s", actor.id, ticket_id)
            raise PermissionDeniedError("Only the assigned worker or an administrator can change the status")

        apply_status(ticket, status, actor.id, notes=notes)
        db.commit()
        db.refresh(ticket)
        return ticket

    def add_comment(
        self,
        db: Session,
        ticket_id: int,
        message: Optional[str],
        actor: User,
        is_internal: bool = False,
    ) -> TicketComment:
        ticket = self.get_ticket(db, ticket_id, actor)

        message = (message or "").strip()
        if not message:
            raise ValidationError("Comment message is required")
        if len(message) > COMMENT_MAX_LENGTH:
            raise ValidationError(f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters")

        comment = TicketComment(
            message=message,
            author_id=actor.id,
            is_internal=is_internal,
            created_at=utcnow(),
        )
        ticket.comments.append(comment)
        ticket.history.append(
            TicketHistory(
                action=TicketAction.COMMENTED.value,
                status=ticket.status,
                updated_by_id=actor.id,
                timestamp=utcnow(),
            )
        )
        db.commit()
        db.refresh(comment)
        logger.info("Comment %s added to ticket %s by user %s", comment.id, ticket.id, actor.id)
        return comment

    def delete_ticket(self, db: Session, ticket_id: int, actor: User) -> None:
        ticket = self.get_or_404(db, ticket_id)
        if not can_delete_ticket(*ticket_access_args(actor, ticket)):
            logger.warning("User %s denied delete of ticket %s", actor.id, ticket_id)
            raise PermissionDeniedError("You can only delete tickets you created")

        db.delete(ticket)
        db.commit()
        logger.info("Ticket %s deleted by user %s", ticket_id, actor.id)
