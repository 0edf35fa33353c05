"""
Domain errors raised by the service layer.

Routes translate them into the response envelope through
``responses.error.error_from_exception``; the status code travels with the error.
"""

from fastapi import status


class TicketingError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "internal_server_error"
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TicketingError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "bad_request"
    default_message = "Validation failed"


class PermissionDeniedError(TicketingError):
    """Role or ownership mismatch for the requested action."""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    default_message = "Access denied"


class NotFoundError(TicketingError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"
    default_message = "Resource not found"


class ConflictError(TicketingError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "conflict"
    default_message = "Resource already exists"
