"""Opportunity signup router: admission, listing and status changes."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.dependencies import get_current_actor
from app.database.database import get_session
from app.models.enums import SignupStatus
from app.models.signup import (
    SignupCreate,
    SignupPublic,
    SignupTransition,
    SignupTransitionResult,
)
from app.models.token import Actor
from app.services import signup as signup_service
from app.services import signup_workflow

router = APIRouter(prefix="/opportunities", tags=["signups"])


@router.post(
    "/{opportunity_id}/signup",
    response_model=SignupPublic,
    status_code=status.HTTP_201_CREATED,
)
def create_signup(
    opportunity_id: int,
    signup_in: SignupCreate,
    session: Annotated[Session, Depends(get_session)],
) -> SignupPublic:
    """
    Sign a volunteer up for an opportunity.

    The signup is **pending** while the opportunity has room (pending, confirmed and
    completed signups all take a slot) and **waitlisted** once it is full; the
    response carries the waitlist position. Resending the same request while the
    first signup is active fails with DuplicateSignupError, so retries are safe.

    Raises:
        400 OpportunityNotOpenError: If the opportunity is not open.
        400 DuplicateSignupError: If the volunteer already has an active signup for that date.
        404 NotFoundError: If the opportunity or volunteer doesn't exist.
        503 BusyError: If the opportunity stayed locked; retry after `Retry-After` seconds.
    """
    signup = signup_service.create_signup(session, opportunity_id, signup_in)
    return signup_service.to_signup_public(session, signup)


@router.get("/{opportunity_id}/signups", response_model=list[SignupPublic])
def read_signups(
    opportunity_id: int,
    session: Annotated[Session, Depends(get_session)],
    signup_status: SignupStatus | None = Query(default=None, alias="status"),
) -> list[SignupPublic]:
    """
    List an opportunity's signups, most recent first, optionally by status.

    Raises:
        404 NotFoundError: If the opportunity doesn't exist.
    """
    signups = signup_service.list_signups(session, opportunity_id, signup_status)
    return [signup_service.to_signup_public(session, s) for s in signups]


@router.get("/{opportunity_id}/signups/{signup_id}", response_model=SignupPublic)
def read_signup(
    opportunity_id: int,
    signup_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> SignupPublic:
    """
    Get one signup with its current waitlist position.

    Raises:
        404 NotFoundError: If the signup doesn't exist for this opportunity.
    """
    signup = signup_service.get_signup(session, opportunity_id, signup_id)
    return signup_service.to_signup_public(session, signup)


@router.put(
    "/{opportunity_id}/signups/{signup_id}", response_model=SignupTransitionResult
)
def update_signup_status(
    opportunity_id: int,
    signup_id: int,
    transition_in: SignupTransition,
    session: Annotated[Session, Depends(get_session)],
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> SignupTransitionResult:
    """
    Change a signup's status (confirm, decline, complete, or promote from the waitlist).

    ### Transitions:
    - pending -> confirmed | declined
    - waitlisted -> pending (only into a free slot) | declined
    - confirmed -> completed | declined
    - declined and completed are final

    Declining a pending or confirmed signup promotes the earliest waitlisted signup
    to pending; it is returned as `promoted`. Completion requires `actual_hours`.

    ### Response:
    `{"signup": ..., "promoted": ...}`. The updated signup sits under `signup`, so
    clients reading only that key are unaffected; `promoted` is null unless a
    decline freed a slot for the waitlist.

    ### Authentication Required:
    Admin, or the opportunity's coordinator.

    Raises:
        400 InvalidTransitionError: If the change is not allowed from the current status.
        403 InsufficientPermissionsError: If the actor does not manage the opportunity.
        404 NotFoundError: If the opportunity or signup doesn't exist.
        422 ValidationError: If the payload is incomplete or there is no free slot.
        503 BusyError: If the opportunity stayed locked; retry after `Retry-After` seconds.
    """
    signup, promoted = signup_workflow.transition_signup(
        session, opportunity_id, signup_id, transition_in, actor
    )
    return SignupTransitionResult(
        signup=signup_service.to_signup_public(session, signup),
        promoted=(
            signup_service.to_signup_public(session, promoted) if promoted else None
        ),
    )
