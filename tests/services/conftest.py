"""Shared fixtures for service tests."""

import pytest
from sqlmodel import Session

from app.models.signup import Signup, SignupCreate
from app.services import signup as signup_service


# Session, make_volunteer and make_opportunity come from the root conftest.py


@pytest.fixture(name="sign_up")
def sign_up_fixture(session: Session):
    """Sign a volunteer up through the ledger, as the API does."""

    def _sign_up(opportunity, volunteer, scheduled_date=None) -> Signup:
        return signup_service.create_signup(
            session,
            opportunity.id_opportunity,
            SignupCreate(
                id_volunteer=volunteer.id_volunteer, scheduled_date=scheduled_date
            ),
        )

    return _sign_up
