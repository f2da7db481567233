"""Volunteer profile lookup used for signups and matching."""

from sqlmodel import Session

from app.models.volunteer import Volunteer, VolunteerBase
from app.services.utils import get_or_404


def create_volunteer(session: Session, volunteer_in: VolunteerBase) -> Volunteer:
    """
    Register a volunteer profile.

    Skills and preferred ministries are stored stripped and de-duplicated, in the
    order given.
    """
    data = volunteer_in.model_dump()
    data["skills"] = _dedupe(volunteer_in.skills)
    data["preferred_ministries"] = _dedupe(volunteer_in.preferred_ministries)
    volunteer = Volunteer.model_validate(data)
    session.add(volunteer)
    session.commit()
    session.refresh(volunteer)
    return volunteer


def get_volunteer(session: Session, volunteer_id: int) -> Volunteer:
    """
    Raises:
        NotFoundError: If no volunteer exists with the given ID.
    """
    return get_or_404(session, Volunteer, volunteer_id, "Volunteer")


def _dedupe(values: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        value = value.strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)
