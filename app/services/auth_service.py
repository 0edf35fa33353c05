import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from database.models import Company, Property, Ticket, TicketComment, TicketHistory, User
from enums.user_role import UserRole, ADMIN_ROLES
from schemas.auth_schema import UserCreate, UserUpdate
from services.property_service import occupy_unit, vacate_tenant_unit
from utils.dates import utcnow
from utils.dependencies import hash_password, verify_password
from utils.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError

logger = logging.getLogger(__name__)


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    return db.query(User).filter_by(email=email.lower()).first()


def get_user_by_id(user_id: int, db: Session) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


def get_user_or_404(user_id: int, db: Session) -> User:
    user = get_user_by_id(user_id, db)
    if user is None:
        raise NotFoundError("User not found")
    return user


def authenticate_user(email: str, password: str, db: Session) -> Optional[User]:
    """Return the user for valid credentials and stamp the login time, otherwise None."""
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning("Failed sign-in attempt for %s", email)
        return None
    if not user.is_active:
        logger.warning("Sign-in attempt for deactivated account %s", email)
        return None

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)
    return user


def create_user(payload: UserCreate, db: Session, created_by: User) -> User:
    if get_user_by_email(payload.email, db):
        raise ConflictError("User with this email already exists")

    privileged_target = payload.role in (UserRole.OWNER, *ADMIN_ROLES)
    if privileged_target and created_by.role != UserRole.OWNER.value:
        raise PermissionDeniedError("Only an owner can create owners or admins")

    user = User(
        name=payload.name,
        email=payload.email.lower(),
        phone=payload.phone,
        hashed_password=hash_password(payload.password),
        role=payload.role.value,
        is_active=True,
        email_notifications=payload.email_notifications,
        sms_notifications=payload.sms_notifications,
    )
    db.add(user)

    if payload.property_id and payload.unit and payload.role == UserRole.TENANT:
        prop = db.query(Property).filter(Property.id == payload.property_id).first()
        if prop is None:
            db.rollback()
            raise NotFoundError(f"Property {payload.property_id} not found")
        try:
            occupy_unit(db, prop, payload.unit, user)
        except Exception:
            db.rollback()
            raise

    db.commit()
    db.refresh(user)
    logger.info("User %s (%s) created by user %s", user.id, user.role, created_by.id)
    return user


def get_users(
    db: Session,
    role: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == getattr(role, "value", role))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    return query.order_by(User.id).offset(skip).limit(limit).all()


def update_user(user_id: int, payload: UserUpdate, db: Session, updated_by: User) -> User:
    user = get_user_or_404(user_id, db)
    changes = payload.model_dump(exclude_unset=True)

    if "email" in changes and changes["email"]:
        email = changes["email"].lower()
        existing = get_user_by_email(email, db)
        if existing and existing.id != user.id:
            raise ConflictError("User with this email already exists")
        user.email = email

    if changes.get("role") is not None:
        role = changes["role"].value
        if user.role == UserRole.OWNER.value and role != user.role:
            raise ValidationError("The owner's role cannot be changed")
        if role != UserRole.TENANT.value and user.assigned_property_id:
            vacate_tenant_unit(db, user)
        user.role = role

    if changes.get("is_active") is not None:
        if user.id == updated_by.id and not changes["is_active"]:
            raise ValidationError("You cannot deactivate your own account")
        user.is_active = changes["is_active"]

    for field in ("name", "phone", "email_notifications", "sms_notifications"):
        if field in changes and (changes[field] is not None or field == "phone"):
            setattr(user, field, changes[field])

    db.commit()
    db.refresh(user)
    logger.info("User %s updated by user %s", user.id, updated_by.id)
    return user


def deactivate_user(user_id: int, db: Session, deactivated_by: User) -> User:
    user = get_user_or_404(user_id, db)
    if user.id == deactivated_by.id:
        raise ValidationError("You cannot deactivate your own account")
    if user.role == UserRole.OWNER.value and deactivated_by.role != UserRole.OWNER.value:
        raise PermissionDeniedError("Only an owner can deactivate an owner")

    user.is_active = False
    db.commit()
    db.refresh(user)
    logger.info("User %s deactivated by user %s", user.id, deactivated_by.id)
    return user


def delete_user(user_id: int, db: Session, deleted_by: User) -> None:
    user = get_user_or_404(user_id, db)
    if user.id == deleted_by.id:
        raise ValidationError("You cannot delete your own account")

    referenced = (
        db.query(Ticket)
        .filter(
            or_(
                Ticket.created_by_id == user.id,
                Ticket.for_tenant_id == user.id,
                Ticket.assigned_to_id == user.id,
            )
        )
        .count()
    )
    if referenced:
        raise ConflictError(
            f"User is referenced by {referenced} ticket(s); deactivate the account instead"
        )
    # Comment authors and history actors are rendered on every ticket fetch
    has_activity = (
        db.query(TicketComment).filter(TicketComment.author_id == user.id).count()
        or db.query(TicketHistory).filter(TicketHistory.updated_by_id == user.id).count()
    )
    if has_activity:
        raise ConflictError(
            "User has commented on or updated tickets; deactivate the account instead"
        )
    owns_records = (
        db.query(Property).filter(Property.owner_id == user.id).count()
        or db.query(Company).filter(Company.owner_id == user.id).count()
    )
    if owns_records:
        raise ConflictError("User still owns properties or companies")

    vacate_tenant_unit(db, user)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by user %s", user_id, deleted_by.id)


def assign_admin(user_id: int, db: Session) -> User:
    user = get_user_or_404(user_id, db)
    if user.role == UserRole.OWNER.value:
        raise ValidationError("The owner's role cannot be changed")
    if user.assigned_property_id:
        vacate_tenant_unit(db, user)
    user.role = UserRole.ADMIN.value
    db.commit()
    db.refresh(user)
    logger.info("User %s promoted to admin", user.id)
    return user


def reset_password(user_id: int, new_password: str, db: Session, reset_by: User) -> User:
    user = get_user_or_404(user_id, db)
    if user.role == UserRole.OWNER.value and reset_by.role != UserRole.OWNER.value:
        raise PermissionDeniedError("Only an owner can reset an owner's password")

    user.hashed_password = hash_password(new_password)
    db.commit()
    db.refresh(user)
    logger.info("Password of user %s reset by user %s", user.id, reset_by.id)
    return user


def change_password(user: User, current_password: str, new_password: str, db: Session) -> User:
    if not verify_password(current_password, user.hashed_password):
        raise ValidationError("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    db.commit()
    db.refresh(user)
    return user


def assign_managed_properties(
    user_id: int, property_ids: List[int], db: Session, owner: User
) -> User:
    user = get_user_or_404(user_id, db)
    if user.role not in {r.value for r in ADMIN_ROLES}:
        raise ValidationError("Properties can only be assigned to admins or senior admins")

    properties = []
    if property_ids:
        properties = (
            db.query(Property)
            .filter(Property.id.in_(property_ids), Property.owner_id == owner.id)
            .all()
        )
        if len(properties) != len(set(property_ids)):
            raise NotFoundError("One or more properties not found or not owned by you")

    user.managed_properties = properties
    db.commit()
    db.refresh(user)
    logger.info("User %s now manages properties %s", user.id, [p.id for p in properties])
    return user
