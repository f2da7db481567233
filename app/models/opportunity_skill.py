"""Opportunity-Skill junction table for required skills."""

from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship

if TYPE_CHECKING:
    from app.models.opportunity import Opportunity


class OpportunitySkill(SQLModel, table=True):
    """
    Junction table listing the skills an opportunity requires.

    Composite primary key ensures each opportunity-skill pair is unique.
    """

    __tablename__ = "opportunity_skill"

    id_opportunity: int = Field(
        foreign_key="opportunity.id_opportunity", primary_key=True
    )
    skill: str = Field(max_length=100, primary_key=True, index=True)
    opportunity: "Opportunity" = Relationship(back_populates="skills")
