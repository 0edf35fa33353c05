from fastapi import status
from .base import build_response
from utils.exceptions import TicketingError


def bad_request_error(error: str = "Bad request", details=None):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        False,
        error="bad_request",
        message=error,
        data=details,
    )


def conflict_error(error: str = "Resource already exists"):
    return build_response(
        status.HTTP_409_CONFLICT,
        False,
        error="conflict",
        message=error,
    )


def not_found_error(error: str = "Resource not found"):
    return build_response(
        status.HTTP_404_NOT_FOUND,
        False,
        error="not_found",
        message=error,
    )


def unauthorized_error(error: str = "Invalid credentials"):
    return build_response(
        status.HTTP_401_UNAUTHORIZED,
        False,
        error="unauthorized",
        message=error,
    )


def internal_server_error(error: str = "Internal server error"):
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        False,
        error="internal_server_error",
        message=error,
    )


def forbidden_error(error: str = "Access denied"):
    return build_response(
        status.HTTP_403_FORBIDDEN,
        False,
        error="forbidden",
        message=error,
    )


def error_from_exception(exc: TicketingError):
    """Map a service-layer error onto the envelope with its own status code."""
    return build_response(
        exc.status_code,
        False,
        error=exc.error_code,
        message=exc.message,
    )
