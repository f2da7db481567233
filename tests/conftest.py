import os

# Settings are read at import time by app.database.database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only-min-32-chars")

import pytest
from datetime import datetime, timedelta, timezone
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool
from unittest.mock import MagicMock

from app.core.security import create_access_token
from app.database.database import get_session
from app.main import app
from app.models.enums import ActorRole
from app.models.opportunity import Opportunity
from app.models.opportunity_skill import OpportunitySkill
from app.models.token import Actor
from app.models.volunteer import Volunteer

COORDINATOR_ID = 501
ADMIN_ID = 1


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite engine for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Provide a test database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """TestClient whose requests share the test session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def coordinator() -> Actor:
    return Actor(id=COORDINATOR_ID, role=ActorRole.COORDINATOR)


@pytest.fixture
def admin() -> Actor:
    return Actor(id=ADMIN_ID, role=ActorRole.ADMIN)


@pytest.fixture
def coordinator_headers() -> dict[str, str]:
    token = create_access_token(COORDINATOR_ID, ActorRole.COORDINATOR)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    token = create_access_token(ADMIN_ID, ActorRole.ADMIN)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def volunteer_headers() -> dict[str, str]:
    token = create_access_token(900, ActorRole.VOLUNTEER)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_volunteer(session: Session):
    """Factory creating volunteers with optional skills and ministries."""
    counter = {"n": 0}

    def _make(skills=None, preferred_ministries=None) -> Volunteer:
        counter["n"] += 1
        volunteer = Volunteer(
            first_name=f"Vol{counter['n']}",
            last_name="Tester",
            email=f"vol{counter['n']}@example.com",
            skills=skills or [],
            preferred_ministries=preferred_ministries or [],
        )
        session.add(volunteer)
        session.commit()
        session.refresh(volunteer)
        return volunteer

    return _make


@pytest.fixture
def make_opportunity(session: Session):
    """Factory creating opportunities managed by the test coordinator."""

    def _make(
        max_volunteers: int | None = 2,
        skills: list[str] | None = None,
        **overrides,
    ) -> Opportunity:
        data = {
            "title": "Sunday Welcome Team",
            "description": "Greet guests at the main entrance",
            "ministry": "Hospitality",
            "start_date": datetime.now(timezone.utc) + timedelta(days=7),
            "max_volunteers": max_volunteers,
            "id_coordinator": COORDINATOR_ID,
        }
        data.update(overrides)
        opportunity = Opportunity(**data)
        opportunity.skills = [OpportunitySkill(skill=s) for s in (skills or [])]
        session.add(opportunity)
        session.commit()
        session.refresh(opportunity)
        return opportunity

    return _make


@pytest.fixture(scope="function")
def mock_session():
    """Provide a mock database session."""
    return MagicMock(spec=Session)
