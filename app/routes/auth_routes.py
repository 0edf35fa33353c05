import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.auth_schema import LoginRequest, PasswordUpdate, UserResponse
from services.auth_service import authenticate_user, change_password
from utils.dependencies import create_access_token, get_current_user
from utils.exceptions import TicketingError

from responses.success import data_response, success_response
from responses.error import error_from_exception, internal_server_error, unauthorized_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signin")
def signin(credentials: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = authenticate_user(credentials.email, credentials.password, db)
        if not user:
            return unauthorized_error("Invalid credentials")

        token = create_access_token({"sub": user.email})
        return data_response(
            {
                "access_token": token,
                "token_type": "bearer",
                "user": UserResponse.from_user(user),
            },
            "Signed in successfully",
        )
    except Exception:
        logger.exception("Sign-in failed for %s", credentials.email)
        return internal_server_error("Failed to sign in")


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    """Profile of the signed-in user."""
    return data_response(UserResponse.from_user(current_user))


@router.patch("/password")
def update_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        change_password(current_user, payload.current_password, payload.new_password, db)
        return success_response("Password updated successfully")
    except TicketingError as e:
        return error_from_exception(e)
    except Exception:
        db.rollback()
        logger.exception("Password change failed for user %s", current_user.id)
        return internal_server_error("Failed to update password")
