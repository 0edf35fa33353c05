from html import escape

import config
from enums.notification_event import NotificationEvent
from utils.id_generator import generate_ticket_id


def _value(field, default: str = "") -> str:
    if field is None:
        return default
    return getattr(field, "value", field)


def format_location(ticket) -> str:
    prop = getattr(ticket, "property", None)
    property_name = getattr(prop, "name", None) or "Unknown Property"
    unit = getattr(ticket, "unit", None) or ""
    room = getattr(ticket, "room", None) or ""

    if not unit and not room:
        return "Location TBD"

    location = property_name
    if unit:
        location += f" - Unit {unit}"
    if room:
        location += f" ({room})"
    return location


def format_category(ticket) -> str:
    return _value(getattr(ticket, "category", None), "other").replace("_", " ").upper()


def format_priority(ticket) -> str:
    return _value(getattr(ticket, "priority", None), "medium").upper()


def ticket_reference(ticket) -> str:
    ticket_id = getattr(ticket, "id", None)
    return generate_ticket_id(ticket_id) if isinstance(ticket_id, int) else "TCK-NEW"


def ticket_link(ticket) -> str:
    return f"{config.CLIENT_URL}/tickets/{getattr(ticket, 'id', '')}"


def display_name(user) -> str:
    if user is None:
        return "Unknown"
    return getattr(user, "name", None) or getattr(user, "email", None) or "Unknown"


def format_ticket_message(event: NotificationEvent, ticket, actor) -> str:
    """Plain-text body shared by the log, file and group chat channels."""
    if event == NotificationEvent.TICKET_ASSIGNED:
        heading = "MAINTENANCE TICKET ASSIGNED"
        actor_label = "Assigned by"
    else:
        heading = "NEW MAINTENANCE TICKET"
        actor_label = "Created by"

    assignee = getattr(ticket, "assigned_to", None)
    company = getattr(ticket, "company", None)
    created_at = getattr(ticket, "created_at", None)

    lines = [
        heading,
        "",
        f"Title: {getattr(ticket, 'title', '')}",
        f"{actor_label}: {display_name(actor)}",
        f"Priority: {format_priority(ticket)}",
        f"Category: {format_category(ticket)}",
        f"Location: {format_location(ticket)}",
        f"Assigned to: {display_name(assignee) if assignee else 'Unassigned'}",
        f"Company: {getattr(company, 'name', None) or 'None'}",
        "",
        "Description:",
        f"{getattr(ticket, 'description', '')}",
        "",
        f"Ticket: {ticket_reference(ticket)}",
        f"Created: {created_at.isoformat() if created_at else 'just now'}",
        f"View: {ticket_link(ticket)}",
    ]
    return "\n".join(lines)


def format_sms_message(event: NotificationEvent, ticket) -> str:
    prefix = "TICKET ASSIGNED" if event == NotificationEvent.TICKET_ASSIGNED else "NEW TICKET"
    return (
        f"{prefix}: {getattr(ticket, 'title', '')} | Priority: {format_priority(ticket)} | "
        f"Location: {format_location(ticket)} | Category: {format_category(ticket).lower()} | "
        "Contact property manager for details."
    )


def format_email_subject(event: NotificationEvent, ticket) -> str:
    if event == NotificationEvent.TICKET_ASSIGNED:
        return f"New Ticket Assigned: {getattr(ticket, 'title', '')}"
    return f"New Maintenance Ticket: {getattr(ticket, 'title', '')}"


def format_email_html(event: NotificationEvent, ticket, recipient_name: str) -> str:
    intro = (
        "A maintenance ticket has been assigned to you."
        if event == NotificationEvent.TICKET_ASSIGNED
        else "A new maintenance ticket has been logged."
    )
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6;">
        <h2>{escape(format_email_subject(event, ticket))}</h2>
        <p>Hello {escape(recipient_name)},</p>
        <p>{intro}</p>
        <table>
            <tr><td><strong>Ticket</strong></td><td>{ticket_reference(ticket)}</td></tr>
            <tr><td><strong>Priority</strong></td><td>{format_priority(ticket)}</td></tr>
            <tr><td><strong>Category</strong></td><td>{escape(format_category(ticket))}</td></tr>
            <tr><td><strong>Location</strong></td><td>{escape(format_location(ticket))}</td></tr>
        </table>
        <p>{escape(getattr(ticket, 'description', '') or '')}</p>
        <a href="{ticket_link(ticket)}" style="display:inline-block;background:#28a745;color:white;padding:10px 20px;
           text-decoration:none;border-radius:4px;">View Ticket</a>
        <p>Best regards,<br>The Maintenance Team</p>
    </body>
    </html>
    """
