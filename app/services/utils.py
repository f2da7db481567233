"""Shared service layer utilities."""

from collections.abc import Iterable
from datetime import date
from typing import TypeVar, Type
from sqlmodel import Session, select, func

from app.exceptions.crud import NotFoundError
from app.models.enums import SignupStatus
from app.models.signup import Signup

T = TypeVar("T")


def get_or_404(
    session: Session,
    model_class: Type[T],
    entity_id: int,
    entity_name: str | None = None,
) -> T:
    """
    Retrieve an entity by ID or raise NotFoundError.

    More efficient than select().where() as it uses session.get() which
    checks the session identity map before querying the database.

    Parameters:
        session: Database session.
        model_class: SQLModel class to query.
        entity_id: Primary key value.
        entity_name: Optional custom name for error message (defaults to model class name).

    Returns:
        T: The retrieved entity instance.

    Raises:
        NotFoundError: If entity doesn't exist.

    Example:
        volunteer = get_or_404(session, Volunteer, volunteer_id, "Volunteer")
    """
    entity = session.get(model_class, entity_id)
    if not entity:
        name = entity_name or model_class.__name__
        raise NotFoundError(name, entity_id)
    return entity


def scheduled_date_clause(scheduled_date: date | None):
    """
    Build the WHERE clause scoping signups to one scheduled instance.

    Signups without a scheduled date form their own instance, so `None` matches
    `IS NULL` rather than every date.
    """
    if scheduled_date is None:
        return Signup.scheduled_date.is_(None)  # type: ignore[union-attr]
    return Signup.scheduled_date == scheduled_date


def count_signups(
    session: Session,
    opportunity_id: int,
    statuses: Iterable[SignupStatus],
    scheduled_date: date | None = None,
) -> int:
    """
    Count an opportunity's signups in the given statuses for one scheduled instance.

    This is the single source of truth for capacity: availability reads and the
    admission check both go through it.
    """
    statement = (
        select(func.count())
        .select_from(Signup)
        .where(
            Signup.id_opportunity == opportunity_id,
            Signup.status.in_(list(statuses)),  # type: ignore[attr-defined]
            scheduled_date_clause(scheduled_date),
        )
    )
    return session.exec(statement).one()
