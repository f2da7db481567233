from typing import TYPE_CHECKING
from sqlalchemy import JSON
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from app.models.signup import Signup


class VolunteerBase(SQLModel):
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str | None = Field(default=None, max_length=255)
    skills: list[str] = Field(default_factory=list, sa_type=JSON)
    preferred_ministries: list[str] = Field(default_factory=list, sa_type=JSON)


class Volunteer(VolunteerBase, table=True):
    id_volunteer: int | None = Field(default=None, primary_key=True)
    is_active: bool = Field(default=True)
    signups: list["Signup"] = Relationship(back_populates="volunteer")


class VolunteerPublic(VolunteerBase):
    id_volunteer: int
    is_active: bool
