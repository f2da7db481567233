"""
Application exceptions module.

This module provides a clean separation of concerns for error handling:
- Base exceptions define the hierarchy
- CRUD exceptions handle database operations
- Signup exceptions handle the ledger and its status workflow
- Auth exceptions handle authentication/authorization
- HTTP mapping is handled separately in app/core/error_handlers.py
"""

from app.exceptions.base import AppException
from app.exceptions.crud import (
    NotFoundError,
    ValidationError,
)
from app.exceptions.signup import (
    SignupRuleError,
    OpportunityNotOpenError,
    DuplicateSignupError,
    InvalidTransitionError,
    BusyError,
)
from app.exceptions.auth import (
    AuthenticationError,
    InvalidTokenError,
    InsufficientPermissionsError,
)

__all__ = [
    # Base
    "AppException",
    # CRUD
    "NotFoundError",
    "ValidationError",
    # Signup
    "SignupRuleError",
    "OpportunityNotOpenError",
    "DuplicateSignupError",
    "InvalidTransitionError",
    "BusyError",
    # Auth
    "AuthenticationError",
    "InvalidTokenError",
    "InsufficientPermissionsError",
]
