"""Opportunity catalog: CRUD, filtering, and the derived availability view."""

from datetime import date, datetime, timezone
from sqlalchemy import case
from sqlmodel import Session, select, func, or_

from app.models.opportunity import (
    Availability,
    MinistryCount,
    Opportunity,
    OpportunityCreate,
    OpportunityPublic,
    OpportunityStats,
    OpportunityUpdate,
)
from app.models.opportunity_skill import OpportunitySkill
from app.models.signup import Signup
from app.models.token import Actor
from app.models.enums import (
    ActorRole,
    CAPACITY_HOLDING_STATUSES,
    CONFIRMED_STATUSES,
    OpportunityStatus,
    SignupStatus,
    Urgency,
)
from app.exceptions import NotFoundError, InsufficientPermissionsError, ValidationError
from app.services.locks import opportunity_locks
from app.services import waitlist as waitlist_service
from app.services.utils import count_signups
from app.utils.logger import logger
from app.utils.validation import ensure_id


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def urgency_first_order():
    """ORDER BY clauses shared by listings: most urgent first, then soonest."""
    urgency_rank = case(
        (Opportunity.urgency == Urgency.URGENT, 0),
        (Opportunity.urgency == Urgency.HIGH, 1),
        else_=2,
    )
    return urgency_rank, Opportunity.start_date, Opportunity.id_opportunity


def skills_match_clause(skills: list[str]):
    """Opportunities requiring at least one of `skills`."""
    return Opportunity.id_opportunity.in_(  # type: ignore[union-attr]
        select(OpportunitySkill.id_opportunity).where(
            OpportunitySkill.skill.in_(skills)  # type: ignore[attr-defined]
        )
    )


def _normalize_skills(skills: list[str]) -> list[str]:
    return sorted({s.strip() for s in skills if s and s.strip()})


def _replace_skills(opportunity: Opportunity, skills: list[str]) -> None:
    # Keep rows for unchanged skills; re-inserting the same composite key in one
    # flush would collide with the pending delete.
    wanted = _normalize_skills(skills)
    kept = [s for s in opportunity.skills if s.skill in wanted]
    existing = {s.skill for s in kept}
    opportunity.skills = kept + [
        OpportunitySkill(skill=skill) for skill in wanted if skill not in existing
    ]


def actor_can_manage(opportunity: Opportunity, actor: Actor) -> bool:
    """
    Decide whether an actor may manage an opportunity and its signups.

    Admins manage everything; coordinators manage the opportunities assigned to them.
    """
    if actor.role == ActorRole.ADMIN:
        return True
    return (
        actor.role == ActorRole.COORDINATOR
        and opportunity.id_coordinator is not None
        and opportunity.id_coordinator == actor.id
    )


def create_opportunity(
    session: Session, opportunity_in: OpportunityCreate, actor: Actor
) -> Opportunity:
    """
    Create a new opportunity with its required skills.

    A coordinator creating an opportunity without naming a coordinator becomes its coordinator.

    Parameters:
        session: Database session.
        opportunity_in: Opportunity creation data including the required_skills list.
        actor: Admin or coordinator creating the opportunity.

    Returns:
        Opportunity: The created Opportunity with skills loaded.
    """
    data = opportunity_in.model_dump(exclude={"required_skills"})
    if data.get("id_coordinator") is None and actor.role == ActorRole.COORDINATOR:
        data["id_coordinator"] = actor.id

    opportunity = Opportunity.model_validate(data)
    opportunity.skills = [
        OpportunitySkill(skill=skill)
        for skill in _normalize_skills(opportunity_in.required_skills)
    ]

    session.add(opportunity)
    session.commit()
    session.refresh(opportunity)
    logger.info(f"Created opportunity {opportunity.id_opportunity} '{opportunity.title}'")
    return opportunity


def get_opportunity(
    session: Session, opportunity_id: int, include_inactive: bool = False
) -> Opportunity:
    """
    Retrieve an opportunity by ID.

    Parameters:
        session: Database session.
        opportunity_id: The opportunity's primary key.
        include_inactive: Also return soft-deleted opportunities.

    Returns:
        Opportunity: The opportunity record.

    Raises:
        NotFoundError: If the opportunity doesn't exist, or is inactive and include_inactive is False.
    """
    opportunity = session.get(Opportunity, opportunity_id)
    if not opportunity or (not opportunity.is_active and not include_inactive):
        raise NotFoundError("Opportunity", opportunity_id)
    return opportunity


def lock_opportunity(
    session: Session, opportunity_id: int, include_inactive: bool = False
) -> Opportunity:
    """
    Load an opportunity with a row lock held until the session's transaction ends.

    The row is re-read even if already present in the session so decisions are
    made on committed state.

    Raises:
        NotFoundError: If the opportunity doesn't exist, or is inactive and include_inactive is False.
    """
    statement = (
        select(Opportunity)
        .where(Opportunity.id_opportunity == opportunity_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    opportunity = session.exec(statement).first()
    if not opportunity or (not opportunity.is_active and not include_inactive):
        raise NotFoundError("Opportunity", opportunity_id)
    return opportunity


def list_opportunities(
    session: Session,
    *,
    ministry: str | None = None,
    urgency: Urgency | None = None,
    status: OpportunityStatus | None = None,
    upcoming_only: bool = False,
    required_skills: list[str] | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[Opportunity], int]:
    """
    Filter active opportunities with pagination.

    Parameters:
        session: Database session.
        ministry: Case-insensitive substring match on ministry.
        urgency: Exact urgency.
        status: Exact status.
        upcoming_only: Only opportunities starting now or later.
        required_skills: Opportunities requiring ANY of these skills (OR logic).
        search: Case-insensitive substring over title and description.
        offset: Pagination offset.
        limit: Pagination limit.

    Returns:
        tuple[list[Opportunity], int]: The requested page and the total number of matches.
    """
    statement = select(Opportunity).where(Opportunity.is_active == True)  # noqa: E712

    if ministry:
        statement = statement.where(Opportunity.ministry.ilike(f"%{ministry}%"))  # type: ignore[attr-defined]
    if urgency:
        statement = statement.where(Opportunity.urgency == urgency)
    if status:
        statement = statement.where(Opportunity.status == status)
    if upcoming_only:
        statement = statement.where(
            Opportunity.start_date >= datetime.now(timezone.utc)
        )
    skills = _normalize_skills(required_skills or [])
    if skills:
        statement = statement.where(skills_match_clause(skills))
    if search:
        search_term = f"%{search}%"
        statement = statement.where(
            or_(
                Opportunity.title.ilike(search_term),  # type: ignore[attr-defined]
                Opportunity.description.ilike(search_term),  # type: ignore[attr-defined]
            )
        )

    total = session.exec(
        select(func.count()).select_from(statement.subquery())
    ).one()
    page = session.exec(
        statement.order_by(*urgency_first_order()).offset(offset).limit(limit)
    ).all()
    return list(page), total


def update_opportunity(
    session: Session,
    opportunity_id: int,
    opportunity_update: OpportunityUpdate,
    actor: Actor,
) -> tuple[Opportunity, list[Signup]]:
    """
    Update an opportunity and reoffer freed capacity to the waitlist.

    Runs under the opportunity's admission lock. When max_volunteers is raised or
    cleared, waitlisted signups are promoted to pending in FIFO order until the new
    capacity is used up.

    Parameters:
        session: Database session.
        opportunity_id: Primary key of the opportunity to update.
        opportunity_update: Fields to change (required_skills replaces the skill set).
        actor: Caller; must be able to manage the opportunity.

    Returns:
        tuple[Opportunity, list[Signup]]: The updated opportunity and any promoted signups.

    Raises:
        NotFoundError: If the opportunity doesn't exist or is inactive.
        InsufficientPermissionsError: If the actor cannot manage the opportunity.
        ValidationError: If the resulting end_date falls before start_date.
    """
    with opportunity_locks.hold(opportunity_id):
        try:
            opportunity = lock_opportunity(session, opportunity_id)
            if not actor_can_manage(opportunity, actor):
                raise InsufficientPermissionsError("update this opportunity")

            update_data = opportunity_update.model_dump(exclude_unset=True)
            skills = update_data.pop("required_skills", None)
            if skills is not None:
                _replace_skills(opportunity, skills)
            for key, value in update_data.items():
                setattr(opportunity, key, value)
            if opportunity.end_date is not None and _as_utc(opportunity.end_date) < _as_utc(
                opportunity.start_date
            ):
                raise ValidationError(
                    "end_date must not be before start_date", field="end_date"
                )
            session.add(opportunity)
            session.flush()

            promoted: list[Signup] = []
            if "max_volunteers" in update_data:
                promoted = waitlist_service.fill_from_waitlist(session, opportunity)
            session.commit()
        except Exception:
            session.rollback()
            raise

    session.refresh(opportunity)
    logger.info(
        f"Updated opportunity {opportunity_id}; promoted {len(promoted)} from waitlist"
    )
    return opportunity, promoted


def deactivate_opportunity(session: Session, opportunity_id: int, actor: Actor) -> None:
    """
    Soft-delete an opportunity; its signups are kept for reporting.

    Raises:
        NotFoundError: If the opportunity doesn't exist or is already inactive.
        InsufficientPermissionsError: If the actor cannot manage the opportunity.
    """
    opportunity = get_opportunity(session, opportunity_id)
    if not actor_can_manage(opportunity, actor):
        raise InsufficientPermissionsError("delete this opportunity")

    opportunity.is_active = False
    session.add(opportunity)
    session.commit()
    logger.info(f"Deactivated opportunity {opportunity_id}")


def compute_availability(
    session: Session, opportunity: Opportunity, scheduled_date: date | None = None
) -> Availability:
    """
    Derive the capacity view of one opportunity instance from its signups.

    `held_count` (pending, confirmed and completed) is the figure the signup ledger
    admits against, so `is_full` here agrees with admission decisions.

    Parameters:
        session: Database session.
        opportunity: The opportunity.
        scheduled_date: Instance to scope counts to; None means undated signups.

    Returns:
        Availability: Counts, remaining slots and fullness.
    """
    opportunity_id = ensure_id(opportunity.id_opportunity, "Opportunity")
    confirmed = count_signups(session, opportunity_id, CONFIRMED_STATUSES, scheduled_date)
    held = count_signups(
        session, opportunity_id, CAPACITY_HOLDING_STATUSES, scheduled_date
    )
    waitlisted = count_signups(
        session, opportunity_id, [SignupStatus.WAITLISTED], scheduled_date
    )

    maximum = opportunity.max_volunteers
    return Availability(
        confirmed_count=confirmed,
        held_count=held,
        waitlist_count=waitlisted,
        max_volunteers=maximum,
        available_slots=None if maximum is None else max(0, maximum - held),
        is_full=maximum is not None and held >= maximum,
    )


def get_opportunity_stats(session: Session) -> OpportunityStats:
    """
    Aggregate catalog counts for the coordinator dashboard.

    Returns:
        OpportunityStats: Totals, urgent open opportunities, and breakdowns by ministry (active only) and status.
    """
    total = session.exec(select(func.count()).select_from(Opportunity)).one()
    active = session.exec(
        select(func.count())
        .select_from(Opportunity)
        .where(Opportunity.is_active == True)  # noqa: E712
    ).one()
    open_count = session.exec(
        select(func.count())
        .select_from(Opportunity)
        .where(Opportunity.status == OpportunityStatus.OPEN)
    ).one()
    urgent = session.exec(
        select(func.count())
        .select_from(Opportunity)
        .where(
            Opportunity.urgency == Urgency.URGENT,
            Opportunity.status == OpportunityStatus.OPEN,
        )
    ).one()

    ministry_rows = session.exec(
        select(Opportunity.ministry, func.count())
        .where(Opportunity.is_active == True)  # noqa: E712
        .group_by(Opportunity.ministry)
        .order_by(Opportunity.ministry)
    ).all()
    status_rows = session.exec(
        select(Opportunity.status, func.count()).group_by(Opportunity.status)
    ).all()

    return OpportunityStats(
        total_opportunities=total,
        active_opportunities=active,
        open_opportunities=open_count,
        urgent_opportunities=urgent,
        ministry_breakdown=[
            MinistryCount(ministry=ministry, count=count)
            for ministry, count in ministry_rows
        ],
        status_breakdown={
            OpportunityStatus(status).value: count for status, count in status_rows
        },
    )


def to_opportunity_public(
    session: Session, opportunity: Opportunity, scheduled_date: date | None = None
) -> OpportunityPublic:
    """
    Convert an Opportunity to OpportunityPublic with skills and availability.

    Parameters:
        session: Database session.
        opportunity: Opportunity instance.
        scheduled_date: Instance the availability is computed for.

    Returns:
        OpportunityPublic: Opportunity with required skills and capacity tracking.
    """
    return OpportunityPublic(
        **opportunity.model_dump(exclude={"skills", "signups"}),
        required_skills=sorted(s.skill for s in opportunity.skills),
        availability=compute_availability(session, opportunity, scheduled_date),
    )
