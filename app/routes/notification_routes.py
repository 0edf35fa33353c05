from fastapi import APIRouter, Depends

from database.models.user_model import User
from enums.user_role import UserRole
from services.notifications.dispatcher import NotificationDispatcher
from utils.dependencies import get_dispatcher, role_required

from responses.success import data_response

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/status")
def notification_status(
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
    current_user: User = Depends(role_required(UserRole.OWNER, UserRole.ADMIN)),
):
    """Channels the running dispatcher delivers through."""
    return data_response(dispatcher.status(), "Notification channels retrieved")
