"""Signup ledger and status workflow exceptions."""

from app.exceptions.base import AppException


class SignupRuleError(AppException):
    """A signup request broke a business rule; the caller must change the request."""

    pass


class OpportunityNotOpenError(SignupRuleError):
    """Opportunity is not accepting signups."""

    def __init__(self, opportunity_id: int, status: str):
        """
        Parameters:
            opportunity_id (int): Identifier of the opportunity.
            status (str): The opportunity's current status value.
        """
        self.opportunity_id = opportunity_id
        self.status = status
        super().__init__(
            f"Opportunity '{opportunity_id}' is not accepting signups (status: {status})"
        )


class DuplicateSignupError(SignupRuleError):
    """An active signup already exists for the volunteer, opportunity and date."""

    def __init__(self, volunteer_id: int, opportunity_id: int, scheduled_date=None):
        """
        Parameters:
            volunteer_id (int): Volunteer attempting to sign up.
            opportunity_id (int): Target opportunity.
            scheduled_date (date | None): Scheduled instance, if the opportunity recurs.
        """
        self.volunteer_id = volunteer_id
        self.opportunity_id = opportunity_id
        self.scheduled_date = scheduled_date
        when = f" on {scheduled_date.isoformat()}" if scheduled_date else ""
        super().__init__(
            f"Volunteer '{volunteer_id}' already has an active signup "
            f"for opportunity '{opportunity_id}'{when}"
        )


class InvalidTransitionError(SignupRuleError):
    """Requested status change is not allowed from the signup's current status."""

    def __init__(self, current: str, requested: str):
        """
        Parameters:
            current (str): Status the signup is in.
            requested (str): Status the caller asked for.
        """
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot transition signup from '{current}' to '{requested}'")


class BusyError(AppException):
    """The opportunity is locked by another request; safe to retry."""

    def __init__(self, resource: str, identifier: int | str, timeout: float):
        """
        Parameters:
            resource (str): Kind of locked resource.
            identifier (int | str): Identifier of the locked resource.
            timeout (float): Seconds waited before giving up.
        """
        self.resource = resource
        self.identifier = identifier
        self.timeout = timeout
        super().__init__(
            f"{resource} '{identifier}' is busy, lock not acquired within {timeout:g}s"
        )
