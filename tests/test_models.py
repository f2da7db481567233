import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from app.models.enums import (
    ACTIVE_STATUSES,
    CAPACITY_HOLDING_STATUSES,
    CONFIRMED_STATUSES,
    SignupStatus,
)
from app.models.signup import SignupCreate, SignupTransition


class TestStatusGroups:
    def test_capacity_holding_statuses(self):
        assert CAPACITY_HOLDING_STATUSES == {
            SignupStatus.PENDING,
            SignupStatus.CONFIRMED,
            SignupStatus.COMPLETED,
        }

    def test_confirmed_is_subset_of_capacity_holding(self):
        assert CONFIRMED_STATUSES < CAPACITY_HOLDING_STATUSES

    def test_waitlisted_is_active_but_holds_no_slot(self):
        assert SignupStatus.WAITLISTED in ACTIVE_STATUSES
        assert SignupStatus.WAITLISTED not in CAPACITY_HOLDING_STATUSES

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            SignupStatus("approved")


class TestSignupSchemas:
    def test_signup_time_window(self):
        with pytest.raises(ValidationError):
            SignupCreate(
                id_volunteer=1,
                scheduled_start_time=datetime(2030, 1, 1, 10, tzinfo=timezone.utc),
                scheduled_end_time=datetime(2030, 1, 1, 9, tzinfo=timezone.utc),
            )

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_bounds(self, rating):
        with pytest.raises(ValidationError):
            SignupTransition(status=SignupStatus.COMPLETED, actual_hours=1, rating=rating)

    def test_negative_hours_rejected(self):
        with pytest.raises(ValidationError):
            SignupTransition(status=SignupStatus.COMPLETED, actual_hours=-1)
