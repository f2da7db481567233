import pytest
from datetime import datetime, timedelta, timezone
import jwt
from fastapi import HTTPException

from app.core.config import get_settings
from app.core.dependencies import get_current_actor, get_current_manager
from app.core.security import create_access_token
from app.models.enums import ActorRole
from app.models.token import Actor


def encode(claims: dict) -> str:
    settings = get_settings()
    claims = {"exp": datetime.now(timezone.utc) + timedelta(minutes=5), **claims}
    return jwt.encode(
        claims, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
    )


class TestGetCurrentActor:
    def test_valid_token(self):
        actor = get_current_actor(create_access_token(7, ActorRole.COORDINATOR))

        assert actor == Actor(id=7, role=ActorRole.COORDINATOR)

    @pytest.mark.parametrize(
        "claims",
        [
            {"role": "admin", "type": "access"},
            {"sub": "1", "type": "access"},
            {"sub": "1", "role": "admin", "type": "refresh"},
            {"sub": "abc", "role": "admin", "type": "access"},
            {"sub": "1", "role": "pastor", "type": "access"},
        ],
    )
    def test_bad_claims_are_401(self, claims):
        with pytest.raises(HTTPException) as exc_info:
            get_current_actor(encode(claims))

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_expired_token_is_401(self):
        token = create_access_token(
            1, ActorRole.ADMIN, expires_delta=timedelta(minutes=-1)
        )

        with pytest.raises(HTTPException) as exc_info:
            get_current_actor(token)

        assert exc_info.value.status_code == 401


class TestGetCurrentManager:
    @pytest.mark.parametrize("role", [ActorRole.ADMIN, ActorRole.COORDINATOR])
    def test_managers_pass(self, role):
        actor = Actor(id=1, role=role)

        assert get_current_manager(actor) is actor

    def test_volunteer_is_403(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_manager(Actor(id=1, role=ActorRole.VOLUNTEER))

        assert exc_info.value.status_code == 403
