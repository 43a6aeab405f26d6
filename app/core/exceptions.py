from typing import Optional, Union

from fastapi import status


class AppExceptionBase(Exception):
    """Base class for application-specific exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: str = "INTERNAL_SERVER_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class ResourceNotFoundError(AppExceptionBase):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_name: str, resource_id: Union[str, int]):
        message = f"The {resource_name} with ID '{resource_id}' was not found."
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND, code="RESOURCE_NOT_FOUND")


class DatabaseError(AppExceptionBase):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "A database error occurred."):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, code="DATABASE_ERROR")


class ConfigurationError(AppExceptionBase):
    """Raised when there's an issue with the application's configuration."""

    def __init__(self, message: str = "A configuration error occurred."):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, code="CONFIGURATION_ERROR")


class ExternalServiceError(AppExceptionBase):
    """Raised when an external service call fails."""

    def __init__(self, service_name: str, original_message: Optional[str] = None):
        message = f"An error occurred while communicating with {service_name}."
        if original_message:
            message += f" Details: {original_message}"
        super().__init__(message=message, status_code=status.HTTP_502_BAD_GATEWAY, code="EXTERNAL_SERVICE_ERROR")


class BadRequestError(AppExceptionBase):
    """Raised for malformed requests or invalid input."""

    def __init__(self, message: str = "Bad request. Please check your input."):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, code="BAD_REQUEST")


class UserSyncError(AppExceptionBase):
    """Raised when a user lifecycle event could not be applied to the user store.

    Wraps whatever the repository or the identity provider raised so the
    webhook always answers 500 for downstream failures, whatever their origin.
    """

    def __init__(self, message: str = "Failed to synchronize user."):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, code="USER_SYNC_FAILED")
