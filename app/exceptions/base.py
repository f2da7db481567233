"""Base exception for the application hierarchy."""


class AppException(Exception):
    """Root of every domain-level error raised by the service layer."""

    def __init__(self, message: str = "An application error occurred"):
        """
        Initialize the exception with a human-readable message.

        Parameters:
            message (str): Description of the failure, exposed as `str(exc)`.
        """
        self.message = message
        super().__init__(message)
