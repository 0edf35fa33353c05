"""
Role based access predicates for tickets.

Every predicate is a pure function of the actor's role and id and the ticket's
creator / assignee / tenant-of-record ids. They never raise: unknown roles,
missing ids or values of the wrong type simply yield ``False``.
"""

from typing import Any, Optional

from enums.user_role import UserRole, PRIVILEGED_ROLES


def _role_value(role: Any) -> Optional[str]:
    if isinstance(role, UserRole):
        return role.value
    if isinstance(role, str):
        return role
    return None


def _same_id(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return False
    try:
        return str(left) == str(right)
    except Exception:
        return False


def is_privileged(role: Any) -> bool:
    """Owners and (senior) admins act on every ticket."""
    value = _role_value(role)
    return value is not None and value in {r.value for r in PRIVILEGED_ROLES}


def can_view_ticket(
    role: Any,
    actor_id: Any,
    created_by_id: Any = None,
    assigned_to_id: Any = None,
    for_tenant_id: Any = None,
) -> bool:
    try:
        if is_privileged(role):
            return True
        value = _role_value(role)
        if value == UserRole.TENANT.value:
            return _same_id(actor_id, created_by_id) or _same_id(actor_id, for_tenant_id)
        if value == UserRole.WORKER.value:
            return _same_id(actor_id, assigned_to_id)
        return False
    except Exception:
        return False


def can_edit_ticket(
    role: Any,
    actor_id: Any,
    created_by_id: Any = None,
    assigned_to_id: Any = None,
    for_tenant_id: Any = None,
) -> bool:
    # Tenant-of-record alone is not enough, the tenant must have filed the ticket
    try:
        if is_privileged(role):
            return True
        if _role_value(role) == UserRole.TENANT.value:
            return _same_id(actor_id, created_by_id)
        return False
    except Exception:
        return False


def can_delete_ticket(
    role: Any,
    actor_id: Any,
    created_by_id: Any = None,
    assigned_to_id: Any = None,
    for_tenant_id: Any = None,
) -> bool:
    try:
        if is_privileged(role):
            return True
        if _role_value(role) not in {r.value for r in UserRole}:
            return False
        return _same_id(actor_id, created_by_id)
    except Exception:
        return False


def can_change_status(
    role: Any,
    actor_id: Any,
    created_by_id: Any = None,
    assigned_to_id: Any = None,
    for_tenant_id: Any = None,
) -> bool:
    """Privileged roles, or the worker the ticket is assigned to."""
    try:
        if is_privileged(role):
            return True
        if _role_value(role) == UserRole.WORKER.value:
            return _same_id(actor_id, assigned_to_id)
        return False
    except Exception:
        return False


def ticket_access_args(user, ticket) -> tuple:
    """Unpack a user and a ticket into the positional arguments of the predicates."""
    return (
        getattr(user, "role", None),
        getattr(user, "id", None),
        getattr(ticket, "created_by_id", None),
        getattr(ticket, "assigned_to_id", None),
        getattr(ticket, "for_tenant_id", None),
    )
