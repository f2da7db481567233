"""Volunteer profile router."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.database.database import get_session
from app.models.enums import SignupStatus
from app.models.signup import SignupPublic
from app.models.volunteer import VolunteerBase, VolunteerPublic
from app.services import signup as signup_service
from app.services import volunteer as volunteer_service

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


@router.post("/", response_model=VolunteerPublic, status_code=status.HTTP_201_CREATED)
def create_volunteer(
    volunteer_in: VolunteerBase,
    session: Annotated[Session, Depends(get_session)],
) -> VolunteerPublic:
    """
    Register a volunteer profile with skills and preferred ministries.

    Skills and ministries drive `/opportunities/search` matching.
    """
    volunteer = volunteer_service.create_volunteer(session, volunteer_in)
    return VolunteerPublic.model_validate(volunteer)


@router.get("/{volunteer_id}", response_model=VolunteerPublic)
def read_volunteer(
    volunteer_id: int,
    session: Annotated[Session, Depends(get_session)],
) -> VolunteerPublic:
    """
    Raises:
        `404 NotFoundError`: If no volunteer exists with the given ID.
    """
    return VolunteerPublic.model_validate(
        volunteer_service.get_volunteer(session, volunteer_id)
    )


@router.get("/{volunteer_id}/signups", response_model=list[SignupPublic])
def read_volunteer_signups(
    volunteer_id: int,
    session: Annotated[Session, Depends(get_session)],
    signup_status: SignupStatus | None = Query(default=None, alias="status"),
) -> list[SignupPublic]:
    """
    List a volunteer's signups across opportunities, most recent first.

    Waitlisted signups include their current waitlist position.

    Raises:
        `404 NotFoundError`: If no volunteer exists with the given ID.
    """
    signups = signup_service.list_volunteer_signups(
        session, volunteer_id, signup_status
    )
    return [signup_service.to_signup_public(session, s) for s in signups]
