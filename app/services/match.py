"""Match volunteers to open, upcoming opportunities."""

from datetime import datetime, timezone
from sqlmodel import Session, select, or_

from app.models.enums import OpportunityStatus, Urgency
from app.models.opportunity import Opportunity
from app.models.volunteer import Volunteer
from app.services import opportunity as opportunity_service


def search_matching_opportunities(
    session: Session,
    *,
    volunteer_id: int | None = None,
    ministry: str | None = None,
    urgent: bool = False,
) -> list[Opportunity]:
    """
    Find active, open opportunities that have not started yet.

    With a volunteer, an opportunity matches when it requires any of the volunteer's
    skills OR belongs to one of their preferred ministries. The OR favours recall:
    volunteers see more opportunities than a strict filter would show.

    Parameters:
        session: Database session.
        volunteer_id: Volunteer whose skills and ministries drive matching; an unknown id yields no results.
        ministry: Case-insensitive substring match on ministry.
        urgent: Only high and urgent opportunities.

    Returns:
        list[Opportunity]: Matches, most urgent first, then soonest.
    """
    statement = select(Opportunity).where(
        Opportunity.is_active == True,  # noqa: E712
        Opportunity.status == OpportunityStatus.OPEN,
        Opportunity.start_date >= datetime.now(timezone.utc),
    )

    if ministry:
        statement = statement.where(Opportunity.ministry.ilike(f"%{ministry}%"))  # type: ignore[attr-defined]
    if urgent:
        statement = statement.where(
            Opportunity.urgency.in_([Urgency.HIGH, Urgency.URGENT])  # type: ignore[attr-defined]
        )

    if volunteer_id is not None:
        volunteer = session.get(Volunteer, volunteer_id)
        if volunteer is None:
            return []
        statement = statement.where(
            or_(
                opportunity_service.skills_match_clause(volunteer.skills),
                Opportunity.ministry.in_(volunteer.preferred_ministries),  # type: ignore[attr-defined]
            )
        )

    statement = statement.order_by(*opportunity_service.urgency_first_order())
    return list(session.exec(statement).all())
