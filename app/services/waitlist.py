"""Waitlist ordering and promotion.

Callers must hold the opportunity's admission lock and commit afterwards; nothing
here commits.
"""

from datetime import date, datetime, timezone
from sqlmodel import Session, select, func, or_, and_

from app.models.enums import CAPACITY_HOLDING_STATUSES, SignupStatus
from app.models.opportunity import Opportunity
from app.models.signup import Signup
from app.services.utils import count_signups, scheduled_date_clause
from app.core.telemetry import waitlist_promotions
from app.utils.logger import logger
from app.utils.validation import ensure_id


def has_free_slot(
    session: Session, opportunity: Opportunity, scheduled_date: date | None
) -> bool:
    """Return True when one more capacity-holding signup fits the instance."""
    if opportunity.max_volunteers is None:
        return True
    held = count_signups(
        session,
        ensure_id(opportunity.id_opportunity, "Opportunity"),
        CAPACITY_HOLDING_STATUSES,
        scheduled_date,
    )
    return held < opportunity.max_volunteers


def _next_waitlisted(
    session: Session, opportunity_id: int, scheduled_date: date | None
) -> Signup | None:
    statement = (
        select(Signup)
        .where(
            Signup.id_opportunity == opportunity_id,
            Signup.status == SignupStatus.WAITLISTED,
            scheduled_date_clause(scheduled_date),
        )
        .order_by(Signup.created_at, Signup.id_signup)  # type: ignore[arg-type]
        .limit(1)
    )
    return session.exec(statement).first()


def promote_next(
    session: Session, opportunity: Opportunity, scheduled_date: date | None
) -> Signup | None:
    """
    Move the earliest waitlisted signup of an instance to pending.

    Promotes at most one signup and only when a slot is actually free, so a capacity
    that was lowered below the current headcount never over-admits.

    Returns:
        Signup | None: The promoted signup, or None when nothing was promoted.
    """
    if not has_free_slot(session, opportunity, scheduled_date):
        return None

    opportunity_id = ensure_id(opportunity.id_opportunity, "Opportunity")
    signup = _next_waitlisted(session, opportunity_id, scheduled_date)
    if signup is None:
        return None

    signup.status = SignupStatus.PENDING
    signup.promoted_at = datetime.now(timezone.utc)
    session.add(signup)
    session.flush()
    waitlist_promotions.add(1)
    logger.info(
        f"Promoted signup {signup.id_signup} from waitlist "
        f"(opportunity {opportunity_id}, date {scheduled_date})"
    )
    return signup


def fill_from_waitlist(session: Session, opportunity: Opportunity) -> list[Signup]:
    """
    Promote waitlisted signups into every free slot, instance by instance.

    Used when the capacity of an opportunity is raised or removed.

    Returns:
        list[Signup]: Promoted signups in promotion order.
    """
    opportunity_id = ensure_id(opportunity.id_opportunity, "Opportunity")
    dates = session.exec(
        select(Signup.scheduled_date)
        .where(
            Signup.id_opportunity == opportunity_id,
            Signup.status == SignupStatus.WAITLISTED,
        )
        .distinct()
    ).all()

    promoted: list[Signup] = []
    for scheduled_date in dates:
        while (signup := promote_next(session, opportunity, scheduled_date)) is not None:
            promoted.append(signup)
    return promoted


def get_waitlist_position(session: Session, signup: Signup) -> int | None:
    """
    Rank of a waitlisted signup in its instance's queue, starting at 1.

    Returns:
        int | None: The 1-based position, or None when the signup is not waitlisted.
    """
    if signup.status != SignupStatus.WAITLISTED:
        return None

    # Signups created before this one, ties broken by id
    ahead = session.exec(
        select(func.count())
        .select_from(Signup)
        .where(
            Signup.id_opportunity == signup.id_opportunity,
            Signup.status == SignupStatus.WAITLISTED,
            scheduled_date_clause(signup.scheduled_date),
            or_(
                Signup.created_at < signup.created_at,
                and_(
                    Signup.created_at == signup.created_at,
                    Signup.id_signup < signup.id_signup,  # type: ignore[operator]
                ),
            ),
        )
    ).one()
    return ahead + 1
