import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.user_role import UserRole
from schemas.auth_schema import (
    AssignPropertiesRequest,
    PasswordReset,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from services.auth_service import (
    assign_admin,
    assign_managed_properties,
    create_user,
    deactivate_user,
    delete_user,
    get_user_or_404,
    get_users,
    reset_password,
    update_user,
)
from utils.dependencies import role_required
from utils.exceptions import TicketingError

from responses.success import created_response, data_response, success_response
from responses.error import conflict_error, error_from_exception, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

owner_only = role_required(UserRole.OWNER)
owner_or_admin = role_required(UserRole.OWNER, UserRole.ADMIN)
privileged = role_required(UserRole.OWNER, UserRole.ADMIN, UserRole.SENIOR_ADMIN)


@router.post("")
def create_user_route(
    payload: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        user = create_user(payload, db, created_by=current_user)
        return created_response(UserResponse.from_user(user), "User created successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except IntegrityError:
        db.rollback()
        return conflict_error("User with this email already exists")
    except Exception:
        db.rollback()
        logger.exception("Failed to create user")
        return internal_server_error("Failed to create user")


@router.get("")
def list_users(
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(privileged),
):
    try:
        users = get_users(db, role=role, search=search, skip=skip, limit=limit)
        return data_response([UserResponse.from_user(user) for user in users])
    except Exception:
        logger.exception("Failed to fetch users")
        return internal_server_error("Failed to fetch users")


@router.get("/{user_id}")
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(privileged),
):
    try:
        return data_response(UserResponse.from_user(get_user_or_404(user_id, db)))
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        logger.exception("Failed to fetch user %s", user_id)
        return internal_server_error("Failed to fetch user")


@router.put("/{user_id}")
def update_user_route(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    try:
        user = update_user(user_id, payload, db, updated_by=current_user)
        return data_response(UserResponse.from_user(user), "User updated successfully")
    except TicketingError as e:
        db.rollback()
        return error_from_exception(e)
    except IntegrityError:
        db.rollback()
        return conflict_error("User with this email already exists")
    except Exception:
        db.rollback()
        logger.exception("Failed to update user %s", user_id)
        return internal_server_error("Failed to update user")


@router.patch("/{user_id}/deactivate")
def deactivate_user_route(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        user = deactivate_user(user_id, db, deactivated_by=current_user)
        return data_response(UserResponse.from_user(user), "User deactivated successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to deactivate user %s", user_id)
        return internal_server_error("Failed to deactivate user")


@router.delete("/{user_id}")
def delete_user_route(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    try:
        delete_user(user_id, db, deleted_by=current_user)
        return success_response("User deleted successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except IntegrityError:
        db.rollback()
        return conflict_error("User is still referenced by other records")
    except Exception:
        db.rollback()
        logger.exception("Failed to delete user %s", user_id)
        return internal_server_error("Failed to delete user")


@router.put("/{user_id}/assign-admin")
def assign_admin_route(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    try:
        user = assign_admin(user_id, db)
        return data_response(UserResponse.from_user(user), "User promoted to admin")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to promote user %s", user_id)
        return internal_server_error("Failed to assign admin role")


@router.put("/{user_id}/reset-password")
def reset_password_route(
    user_id: int,
    payload: PasswordReset,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_or_admin),
):
    try:
        reset_password(user_id, payload.new_password, db, reset_by=current_user)
        return success_response("Password reset successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to reset password of user %s", user_id)
        return internal_server_error("Failed to reset password")


@router.post("/{user_id}/assign-properties")
def assign_properties_route(
    user_id: int,
    payload: AssignPropertiesRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_only),
):
    try:
        user = assign_managed_properties(user_id, payload.property_ids, db, owner=current_user)
        return data_response(UserResponse.from_user(user), "Properties assigned successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Failed to assign properties to user %s", user_id)
        return internal_server_error("Failed to assign properties")
