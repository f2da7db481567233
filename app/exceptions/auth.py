"""Authentication and authorization exceptions."""

from app.exceptions.base import AppException


class AuthenticationError(AppException):
    """Base class for authentication-related errors."""

    pass


class InvalidTokenError(AuthenticationError):
    """Token is invalid, expired, or malformed."""

    def __init__(self, message: str = "Invalid or expired token"):
        """
        Initialize the InvalidTokenError with a descriptive message.

        Parameters:
            message (str): Error message describing the token problem. Defaults to "Invalid or expired token".
        """
        super().__init__(message)


class InsufficientPermissionsError(AuthenticationError):
    """Actor doesn't have required permissions for this action."""

    def __init__(self, action: str = "perform this action"):
        """
        Initialize InsufficientPermissionsError for the denied action.

        Parameters:
            action (str): Short description of what was denied, rendered as "Not allowed to <action>".
        """
        self.action = action
        super().__init__(f"Not allowed to {action}")
