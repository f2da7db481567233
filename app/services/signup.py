"""Signup ledger: capacity admission and signup queries."""

from sqlmodel import Session, select

from app.models.enums import ACTIVE_STATUSES, OpportunityStatus, SignupStatus
from app.models.signup import Signup, SignupCreate, SignupPublic
from app.models.volunteer import Volunteer
from app.exceptions import (
    NotFoundError,
    OpportunityNotOpenError,
    DuplicateSignupError,
    ValidationError,
)
from app.services import opportunity as opportunity_service
from app.services import waitlist as waitlist_service
from app.services.locks import opportunity_locks
from app.services.utils import get_or_404, scheduled_date_clause
from app.core.telemetry import signup_outcomes
from app.utils.logger import logger


def _find_active_signup(
    session: Session, opportunity_id: int, signup_in: SignupCreate
) -> Signup | None:
    statement = select(Signup).where(
        Signup.id_opportunity == opportunity_id,
        Signup.id_volunteer == signup_in.id_volunteer,
        Signup.status.in_(list(ACTIVE_STATUSES)),  # type: ignore[attr-defined]
        scheduled_date_clause(signup_in.scheduled_date),
    )
    return session.exec(statement).first()


def create_signup(
    session: Session, opportunity_id: int, signup_in: SignupCreate
) -> Signup:
    """
    Admit a volunteer to an opportunity or place them on its waitlist.

    The capacity check and the insert run as one unit under the opportunity's
    admission lock and row lock, so concurrent requests for the last slot resolve to
    exactly one pending signup and waitlist the rest. Pending signups hold a slot:
    admission counts pending, confirmed and completed signups against
    max_volunteers.

    Args:
        session: Database session
        opportunity_id: Opportunity to sign up for
        signup_in: Volunteer, optional scheduled date and signup details

    Returns:
        Signup: The persisted signup, status PENDING or WAITLISTED

    Raises:
        NotFoundError: If the opportunity is missing or inactive, or the volunteer is missing
        OpportunityNotOpenError: If the opportunity is not open
        ValidationError: If a scheduled date is given for a non-recurring opportunity
        DuplicateSignupError: If the volunteer already holds an active signup for the same date
        BusyError: If the admission lock is not acquired in time
    """
    with opportunity_locks.hold(opportunity_id):
        try:
            opportunity = opportunity_service.lock_opportunity(session, opportunity_id)
            if opportunity.status != OpportunityStatus.OPEN:
                raise OpportunityNotOpenError(opportunity_id, opportunity.status.value)
            if signup_in.scheduled_date is not None and not opportunity.is_recurring:
                raise ValidationError(
                    "scheduled_date is only accepted for recurring opportunities",
                    field="scheduled_date",
                )

            get_or_404(session, Volunteer, signup_in.id_volunteer, "Volunteer")

            if _find_active_signup(session, opportunity_id, signup_in):
                raise DuplicateSignupError(
                    signup_in.id_volunteer, opportunity_id, signup_in.scheduled_date
                )

            availability = opportunity_service.compute_availability(
                session, opportunity, signup_in.scheduled_date
            )
            status = (
                SignupStatus.WAITLISTED if availability.is_full else SignupStatus.PENDING
            )

            signup = Signup.model_validate(
                signup_in.model_dump(),
                update={"id_opportunity": opportunity_id, "status": status},
            )
            session.add(signup)
            session.commit()
        except Exception:
            session.rollback()
            raise

    session.refresh(signup)
    signup_outcomes.add(1, {"status": signup.status.value})
    logger.info(
        f"Signup {signup.id_signup}: volunteer {signup.id_volunteer} -> "
        f"opportunity {opportunity_id} ({signup.status.value})"
    )
    return signup


def get_signup(session: Session, opportunity_id: int, signup_id: int) -> Signup:
    """
    Retrieve a signup that belongs to the given opportunity.

    Raises:
        NotFoundError: If the signup doesn't exist or belongs to another opportunity.
    """
    signup = session.get(Signup, signup_id)
    if not signup or signup.id_opportunity != opportunity_id:
        raise NotFoundError("Signup", signup_id)
    return signup


def list_signups(
    session: Session, opportunity_id: int, status: SignupStatus | None = None
) -> list[Signup]:
    """
    Get the signups of an opportunity, most recent first.

    Args:
        session: Database session
        opportunity_id: Opportunity ID
        status: Optional status filter

    Returns:
        list[Signup]: Matching signups

    Raises:
        NotFoundError: If the opportunity doesn't exist
    """
    opportunity_service.get_opportunity(session, opportunity_id, include_inactive=True)

    statement = select(Signup).where(Signup.id_opportunity == opportunity_id)
    if status:
        statement = statement.where(Signup.status == status)
    statement = statement.order_by(
        Signup.created_at.desc(),  # type: ignore[attr-defined]
        Signup.id_signup.desc(),  # type: ignore[union-attr]
    )
    return list(session.exec(statement).all())


def list_volunteer_signups(
    session: Session, volunteer_id: int, status: SignupStatus | None = None
) -> list[Signup]:
    """
    Get every signup a volunteer has made, most recent first.

    Raises:
        NotFoundError: If the volunteer doesn't exist
    """
    get_or_404(session, Volunteer, volunteer_id, "Volunteer")

    statement = select(Signup).where(Signup.id_volunteer == volunteer_id)
    if status:
        statement = statement.where(Signup.status == status)
    statement = statement.order_by(
        Signup.created_at.desc(),  # type: ignore[attr-defined]
        Signup.id_signup.desc(),  # type: ignore[union-attr]
    )
    return list(session.exec(statement).all())


def to_signup_public(session: Session, signup: Signup) -> SignupPublic:
    """Convert a Signup to SignupPublic, adding its waitlist position."""
    return SignupPublic(
        **signup.model_dump(exclude={"opportunity", "volunteer"}),
        waitlist_position=waitlist_service.get_waitlist_position(session, signup),
    )
