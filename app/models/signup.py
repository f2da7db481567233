from datetime import date, datetime, timezone
from typing import TYPE_CHECKING
from pydantic import model_validator
from sqlalchemy import DateTime, Index
from sqlmodel import SQLModel, Field, Relationship
from app.models.enums import SignupStatus

if TYPE_CHECKING:
    from app.models.opportunity import Opportunity
    from app.models.volunteer import Volunteer


class SignupBase(SQLModel):
    id_volunteer: int = Field(foreign_key="volunteer.id_volunteer", index=True)
    # Set when the opportunity recurs; capacity is counted per scheduled date
    scheduled_date: date | None = None
    scheduled_start_time: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    scheduled_end_time: datetime | None = Field(
        default=None, sa_type=DateTime(timezone=True)
    )
    message: str | None = Field(default=None, max_length=1000)
    special_requests: str | None = Field(default=None, max_length=1000)
    estimated_hours: float | None = Field(default=None, ge=0)


class Signup(SignupBase, table=True):
    __table_args__ = (
        Index("ix_signup_opportunity_status", "id_opportunity", "status"),
    )

    id_signup: int | None = Field(default=None, primary_key=True)
    id_opportunity: int = Field(foreign_key="opportunity.id_opportunity")
    status: SignupStatus = SignupStatus.PENDING
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    promoted_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    confirmed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    confirmed_by: int | None = None
    declined_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    declined_reason: str | None = Field(default=None, max_length=500)
    completed_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    actual_hours: float | None = None
    feedback: str | None = Field(default=None, max_length=2000)
    rating: int | None = None

    opportunity: "Opportunity" = Relationship(back_populates="signups")
    volunteer: "Volunteer" = Relationship(back_populates="signups")


class SignupCreate(SignupBase):
    @model_validator(mode="after")
    def check_time_window(self) -> "SignupCreate":
        if (
            self.scheduled_start_time is not None
            and self.scheduled_end_time is not None
            and self.scheduled_end_time < self.scheduled_start_time
        ):
            raise ValueError("scheduled_end_time must not be before scheduled_start_time")
        return self


class SignupTransition(SQLModel):
    """Body of a coordinator status change."""

    status: SignupStatus
    declined_reason: str | None = Field(default=None, max_length=500)
    actual_hours: float | None = Field(default=None, ge=0)
    feedback: str | None = Field(default=None, max_length=2000)
    rating: int | None = Field(default=None, ge=1, le=5)


class SignupPublic(SignupBase):
    id_signup: int
    id_opportunity: int
    status: SignupStatus
    created_at: datetime
    promoted_at: datetime | None = None
    confirmed_at: datetime | None = None
    confirmed_by: int | None = None
    declined_at: datetime | None = None
    declined_reason: str | None = None
    completed_at: datetime | None = None
    actual_hours: float | None = None
    feedback: str | None = None
    rating: int | None = None
    waitlist_position: int | None = None


class SignupTransitionResult(SQLModel):
    signup: SignupPublic
    # The waitlisted signup moved to pending by this change, if any
    promoted: SignupPublic | None = None
