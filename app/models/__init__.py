from app.models.opportunity import Opportunity
from app.models.opportunity_skill import OpportunitySkill
from app.models.signup import Signup
from app.models.volunteer import Volunteer

__all__ = ["Opportunity", "OpportunitySkill", "Signup", "Volunteer"]
