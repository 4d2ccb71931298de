"""
Domain errors raised by feature services.

Services raise these; routes translate them into HTTPException with the
matching status code (see `status_code` on each class).
"""
from fastapi import status


class AppError(Exception):
    """Base class for expected, client-facing failures."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "The requested resource does not exist."

    def __init__(self, resource: str = "Resource", resource_id: int | str | None = None, message: str | None = None):
        if message is None:
            message = f"{resource} with ID [{resource_id}] does not exist." if resource_id is not None \
                else f"{resource} does not exist."
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(message)


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "There is a record with the same information."


class RoleDeleteBlockedError(AppError):
    """Raised when a role still owns permissions at delete time."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Role cannot be deleted because it has associated permissions."


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"
