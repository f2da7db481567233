"""Signup status workflow.

Allowed transitions:

    pending     -> confirmed, declined
    waitlisted  -> pending (manual promotion, only into a free slot), declined
    confirmed   -> completed, declined
    declined, completed: terminal

Declining a signup that held a slot (pending or confirmed) promotes the earliest
waitlisted signup of the same opportunity instance to pending, in the same
transaction as the decline. Promotion never confirms: the promoted volunteer goes
through coordinator confirmation again.
"""

from datetime import datetime, timezone
from sqlmodel import Session

from app.models.enums import CAPACITY_HOLDING_STATUSES, SignupStatus
from app.models.opportunity import Opportunity
from app.models.signup import Signup, SignupTransition
from app.models.token import Actor
from app.exceptions import (
    InsufficientPermissionsError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.services import opportunity as opportunity_service
from app.services import waitlist as waitlist_service
from app.services.locks import opportunity_locks
from app.core.telemetry import signup_transitions
from app.utils.logger import logger

ALLOWED_TRANSITIONS: dict[SignupStatus, frozenset[SignupStatus]] = {
    SignupStatus.PENDING: frozenset({SignupStatus.CONFIRMED, SignupStatus.DECLINED}),
    SignupStatus.WAITLISTED: frozenset({SignupStatus.PENDING, SignupStatus.DECLINED}),
    SignupStatus.CONFIRMED: frozenset({SignupStatus.COMPLETED, SignupStatus.DECLINED}),
    SignupStatus.DECLINED: frozenset(),
    SignupStatus.COMPLETED: frozenset(),
}


def ensure_transition_allowed(current: SignupStatus, requested: SignupStatus) -> None:
    """
    Raises:
        InvalidTransitionError: If `requested` is not reachable from `current`.
    """
    if requested not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, requested.value)


def _confirm(signup: Signup, actor: Actor, now: datetime) -> None:
    signup.confirmed_at = now
    signup.confirmed_by = actor.id


def _decline(signup: Signup, transition_in: SignupTransition, now: datetime) -> None:
    signup.declined_at = now
    signup.declined_reason = transition_in.declined_reason


def _complete(signup: Signup, transition_in: SignupTransition, now: datetime) -> None:
    if transition_in.actual_hours is None:
        raise ValidationError(
            "actual_hours is required to complete a signup", field="actual_hours"
        )
    signup.completed_at = now
    signup.actual_hours = transition_in.actual_hours
    signup.feedback = transition_in.feedback
    signup.rating = transition_in.rating


def _promote_manually(
    session: Session, opportunity: Opportunity, signup: Signup, now: datetime
) -> None:
    if not waitlist_service.has_free_slot(session, opportunity, signup.scheduled_date):
        raise ValidationError(
            "Opportunity is at capacity; the signup must stay waitlisted",
            field="status",
        )
    signup.promoted_at = now


def transition_signup(
    session: Session,
    opportunity_id: int,
    signup_id: int,
    transition_in: SignupTransition,
    actor: Actor,
) -> tuple[Signup, Signup | None]:
    """
    Apply a coordinator's status change to a signup.

    Runs under the opportunity's admission lock and row lock. The status change and
    any resulting waitlist promotion are committed together or not at all.

    Args:
        session: Database session
        opportunity_id: Opportunity the signup belongs to
        signup_id: Signup to change
        transition_in: Requested status and its payload
        actor: Caller; must be able to manage the opportunity

    Returns:
        tuple[Signup, Signup | None]: The updated signup and the signup promoted from the
            waitlist as a result, if any

    Raises:
        NotFoundError: If the opportunity or signup doesn't exist
        InsufficientPermissionsError: If the actor cannot manage the opportunity
        InvalidTransitionError: If the transition is not allowed from the current status
        ValidationError: If the payload is incomplete, or a manual promotion has no free slot
        BusyError: If the admission lock is not acquired in time
    """
    requested = transition_in.status

    with opportunity_locks.hold(opportunity_id):
        try:
            opportunity = opportunity_service.lock_opportunity(
                session, opportunity_id, include_inactive=True
            )
            if not opportunity_service.actor_can_manage(opportunity, actor):
                raise InsufficientPermissionsError(
                    "manage signups for this opportunity"
                )

            signup = session.get(Signup, signup_id, populate_existing=True)
            if not signup or signup.id_opportunity != opportunity_id:
                raise NotFoundError("Signup", signup_id)

            previous = signup.status
            ensure_transition_allowed(previous, requested)

            now = datetime.now(timezone.utc)
            if requested == SignupStatus.CONFIRMED:
                _confirm(signup, actor, now)
            elif requested == SignupStatus.DECLINED:
                _decline(signup, transition_in, now)
            elif requested == SignupStatus.COMPLETED:
                _complete(signup, transition_in, now)
            elif requested == SignupStatus.PENDING:
                _promote_manually(session, opportunity, signup, now)

            signup.status = requested
            session.add(signup)
            session.flush()

            promoted = None
            if (
                requested == SignupStatus.DECLINED
                and previous in CAPACITY_HOLDING_STATUSES
            ):
                promoted = waitlist_service.promote_next(
                    session, opportunity, signup.scheduled_date
                )
            session.commit()
        except Exception:
            session.rollback()
            raise

    session.refresh(signup)
    if promoted is not None:
        session.refresh(promoted)
    signup_transitions.add(1, {"status": requested.value})
    logger.info(
        f"Signup {signup_id}: {previous.value} -> {requested.value} by actor {actor.id}"
    )
    return signup, promoted
