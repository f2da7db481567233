"""Opportunity catalog and matching router."""

from datetime import date
from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.config import get_settings
from app.core.dependencies import get_current_actor, get_current_manager
from app.database.database import get_session
from app.models.enums import OpportunityStatus, Urgency
from app.models.opportunity import (
    Availability,
    OpportunityCreate,
    OpportunityPage,
    OpportunityPublic,
    OpportunityStats,
    OpportunityUpdate,
)
from app.models.token import Actor
from app.services import match as match_service
from app.services import opportunity as opportunity_service

router = APIRouter(prefix="/opportunities", tags=["opportunities"])


@router.get("/", response_model=OpportunityPage)
def list_opportunities(
    session: Annotated[Session, Depends(get_session)],
    ministry: str | None = Query(
        default=None, description="Case-insensitive ministry substring"
    ),
    urgency: Urgency | None = Query(default=None),
    opportunity_status: OpportunityStatus | None = Query(
        default=OpportunityStatus.OPEN,
        alias="status",
        description="Exact status (defaults to open)",
    ),
    upcoming: bool = Query(
        default=False, description="Only opportunities starting now or later"
    ),
    skills: Annotated[
        str | None,
        Query(
            description="Comma-separated skills (OR logic - opportunities requiring ANY skill)",
            examples=["music,childcare"],
        ),
    ] = None,
    search: str | None = Query(
        default=None, description="Text search in title and description"
    ),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=20, ge=1, description="Pagination limit"),
) -> OpportunityPage:
    """
    List active volunteer opportunities with filtering.

    ### Filters:
    - **ministry**: case-insensitive substring
    - **urgency** / **status**: exact match
    - **upcoming**: start date now or later
    - **skills**: opportunities requiring ANY of the listed skills
    - **search**: case-insensitive text search in title and description

    Results are ordered most urgent first, then by start date, and each item carries
    its live availability.
    """
    limit = min(limit, get_settings().OPPORTUNITY_PAGE_SIZE_MAX)
    parsed_skills = None
    if skills:
        parsed_skills = [s.strip() for s in skills.split(",") if s.strip()]

    opportunities, total = opportunity_service.list_opportunities(
        session,
        ministry=ministry,
        urgency=urgency,
        status=opportunity_status,
        upcoming_only=upcoming,
        required_skills=parsed_skills,
        search=search,
        offset=offset,
        limit=limit,
    )
    return OpportunityPage(
        items=[
            opportunity_service.to_opportunity_public(session, o) for o in opportunities
        ],
        total=total,
        offset=offset,
        limit=limit,
    )


@router.post("/", response_model=OpportunityPublic, status_code=status.HTTP_201_CREATED)
def create_opportunity(
    opportunity_in: OpportunityCreate,
    session: Annotated[Session, Depends(get_session)],
    actor: Annotated[Actor, Depends(get_current_manager)],
) -> OpportunityPublic:
    """
    Create a volunteer opportunity.

    ### Authentication Required:
    Coordinator or admin token. A coordinator who does not name a coordinator
    becomes the opportunity's coordinator.
    """
    opportunity = opportunity_service.create_opportunity(session, opportunity_in, actor)
    return opportunity_service.to_opportunity_public(session, opportunity)


@router.get("/stats", response_model=OpportunityStats)
def read_opportunity_stats(
    session: Annotated[Session, Depends(get_session)],
) -> OpportunityStats:
    """Catalog totals with breakdowns by ministry and by status."""
    return opportunity_service.get_opportunity_stats(session)


@router.get("/search", response_model=list[OpportunityPublic])
def search_opportunities(
    session: Annotated[Session, Depends(get_session)],
    volunteer_id: int | None = Query(
        default=None,
        description="Match the volunteer's skills OR preferred ministries",
    ),
    ministry: str | None = Query(
        default=None, description="Case-insensitive ministry substring"
    ),
    urgent: bool = Query(default=False, description="Only high and urgent"),
) -> list[OpportunityPublic]:
    """
    Find open, upcoming opportunities suited to a volunteer.

    An opportunity matches when it requires any of the volunteer's skills or belongs
    to one of their preferred ministries. An unknown volunteer yields an empty list.
    """
    opportunities = match_service.search_matching_opportunities(
        session, volunteer_id=volunteer_id, ministry=ministry, urgent=urgent
    )
    return [opportunity_service.to_opportunity_public(session, o) for o in opportunities]


@router.get("/{opportunity_id}", response_model=OpportunityPublic)
def read_opportunity(
    opportunity_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> OpportunityPublic:
    """
    Get an opportunity with its required skills and availability.

    Raises:
        404 NotFoundError: If the opportunity doesn't exist or was deleted.
    """
    opportunity = opportunity_service.get_opportunity(session, opportunity_id)
    return opportunity_service.to_opportunity_public(session, opportunity)


@router.put("/{opportunity_id}", response_model=OpportunityPublic)
def update_opportunity(
    opportunity_id: int,
    opportunity_update: OpportunityUpdate,
    session: Annotated[Session, Depends(get_session)],
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> OpportunityPublic:
    """
    Update an opportunity.

    Raising or clearing `max_volunteers` promotes waitlisted signups to pending, in
    signup order, until the new capacity is used.

    Raises:
        403 InsufficientPermissionsError: If the actor does not manage the opportunity.
        404 NotFoundError: If the opportunity doesn't exist or was deleted.
    """
    opportunity, _ = opportunity_service.update_opportunity(
        session, opportunity_id, opportunity_update, actor
    )
    return opportunity_service.to_opportunity_public(session, opportunity)


@router.delete("/{opportunity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_opportunity(
    opportunity_id: int,
    session: Annotated[Session, Depends(get_session)],
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> None:
    """
    Soft-delete an opportunity. Signup history is kept.

    Raises:
        403 InsufficientPermissionsError: If the actor does not manage the opportunity.
        404 NotFoundError: If the opportunity doesn't exist or was already deleted.
    """
    opportunity_service.deactivate_opportunity(session, opportunity_id, actor)


@router.get("/{opportunity_id}/availability", response_model=Availability)
def read_availability(
    opportunity_id: int,
    session: Annotated[Session, Depends(get_session)],
    scheduled_date: date | None = Query(
        default=None, description="Instance of a recurring opportunity"
    ),
) -> Availability:
    """
    Live capacity of one opportunity instance.

    `held_count` counts pending, confirmed and completed signups; it is the figure
    new signups are admitted against.
    """
    opportunity = opportunity_service.get_opportunity(session, opportunity_id)
    return opportunity_service.compute_availability(
        session, opportunity, scheduled_date
    )
