# classroom_api/core/errors.py - Service-level error taxonomy
from fastapi import status


class ServiceError(Exception):
    """Base error carrying an HTTP status and a client-safe message"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsertFailedError(ServiceError):
    """Raised when an insert does not hand back the new row's id"""

    def __init__(self, entity: str):
        super().__init__(f"Insert into {entity} returned no id")
        self.entity = entity
