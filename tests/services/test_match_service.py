"""Tests for volunteer-to-opportunity matching."""

from datetime import datetime, timedelta, timezone
from sqlmodel import Session

from app.models.enums import OpportunityStatus, Urgency
from app.services import match as match_service


class TestSearchMatchingOpportunities:
    """Skills OR preferred ministries."""

    def test_without_volunteer_returns_open_upcoming(
        self, session: Session, make_opportunity
    ):
        upcoming = make_opportunity()
        make_opportunity(start_date=datetime.now(timezone.utc) - timedelta(days=1))
        make_opportunity(status=OpportunityStatus.FILLED)
        make_opportunity(is_active=False)

        results = match_service.search_matching_opportunities(session)

        assert [o.id_opportunity for o in results] == [upcoming.id_opportunity]

    def test_matches_skill_or_preferred_ministry(
        self, session: Session, make_opportunity, make_volunteer
    ):
        by_skill = make_opportunity(ministry="Facilities", skills=["carpentry"])
        by_ministry = make_opportunity(ministry="Youth", skills=["driving"])
        make_opportunity(ministry="Music", skills=["piano"])
        volunteer = make_volunteer(skills=["carpentry"], preferred_ministries=["Youth"])

        results = match_service.search_matching_opportunities(
            session, volunteer_id=volunteer.id_volunteer
        )

        assert {o.id_opportunity for o in results} == {
            by_skill.id_opportunity,
            by_ministry.id_opportunity,
        }

    def test_urgent_only(self, session: Session, make_opportunity):
        urgent = make_opportunity(urgency=Urgency.URGENT)
        high = make_opportunity(urgency=Urgency.HIGH)
        make_opportunity(urgency=Urgency.NORMAL)

        results = match_service.search_matching_opportunities(session, urgent=True)

        assert [o.id_opportunity for o in results] == [
            urgent.id_opportunity,
            high.id_opportunity,
        ]

    def test_ministry_substring(self, session: Session, make_opportunity):
        youth = make_opportunity(ministry="Youth Group")
        make_opportunity(ministry="Music")

        results = match_service.search_matching_opportunities(session, ministry="youth")

        assert [o.id_opportunity for o in results] == [youth.id_opportunity]

    def test_unknown_volunteer_yields_nothing(self, session: Session, make_opportunity):
        make_opportunity()

        assert match_service.search_matching_opportunities(session, volunteer_id=999) == []

    def test_volunteer_without_skills_or_ministries_matches_nothing(
        self, session: Session, make_opportunity, make_volunteer
    ):
        make_opportunity(skills=["greeting"])
        volunteer = make_volunteer()

        results = match_service.search_matching_opportunities(
            session, volunteer_id=volunteer.id_volunteer
        )

        assert results == []
