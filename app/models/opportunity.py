from datetime import datetime, timezone
from typing import TYPE_CHECKING
from pydantic import model_validator
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from app.models.enums import OpportunityStatus, Urgency

if TYPE_CHECKING:
    from app.models.opportunity_skill import OpportunitySkill
    from app.models.signup import Signup


class OpportunityBase(SQLModel):
    title: str = Field(max_length=200)
    description: str = Field(default="", max_length=3000)
    ministry: str = Field(max_length=100, index=True)
    location: str | None = Field(default=None, max_length=255)
    start_date: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    end_date: datetime | None = Field(default=None, sa_type=DateTime(timezone=True))
    is_recurring: bool = False
    estimated_hours: float | None = Field(default=None, ge=0)
    # None means unlimited
    max_volunteers: int | None = Field(default=None, ge=1)
    status: OpportunityStatus = OpportunityStatus.OPEN
    urgency: Urgency = Urgency.NORMAL
    id_coordinator: int | None = None


class Opportunity(OpportunityBase, table=True):
    id_opportunity: int | None = Field(default=None, primary_key=True)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
    )
    skills: list["OpportunitySkill"] = Relationship(
        back_populates="opportunity", cascade_delete=True
    )
    signups: list["Signup"] = Relationship(back_populates="opportunity")


class OpportunityCreate(OpportunityBase):
    required_skills: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_schedule_window(self) -> "OpportunityCreate":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class OpportunityUpdate(SQLModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=3000)
    ministry: str | None = Field(default=None, max_length=100)
    location: str | None = Field(default=None, max_length=255)
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_recurring: bool | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    max_volunteers: int | None = Field(default=None, ge=1)
    status: OpportunityStatus | None = None
    urgency: Urgency | None = None
    id_coordinator: int | None = None
    required_skills: list[str] | None = None


class Availability(SQLModel):
    """Capacity view derived from the signup ledger on every read."""

    confirmed_count: int
    held_count: int
    waitlist_count: int
    max_volunteers: int | None
    available_slots: int | None
    is_full: bool


class OpportunityPublic(OpportunityBase):
    id_opportunity: int
    is_active: bool
    created_at: datetime
    required_skills: list[str] = Field(default_factory=list)
    availability: Availability | None = None


class OpportunityPage(SQLModel):
    items: list[OpportunityPublic]
    total: int
    offset: int
    limit: int


class MinistryCount(SQLModel):
    ministry: str
    count: int


class OpportunityStats(SQLModel):
    total_opportunities: int
    active_opportunities: int
    open_opportunities: int
    urgent_opportunities: int
    ministry_breakdown: list[MinistryCount]
    status_breakdown: dict[str, int]
