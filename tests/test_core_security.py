import pytest
from datetime import timedelta
import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from app.core.config import get_settings
from app.core.security import create_access_token, decode_access_token
from app.models.enums import ActorRole


class TestAccessTokens:
    def test_round_trip_claims(self):
        token = create_access_token(42, ActorRole.COORDINATOR)

        payload = decode_access_token(token)

        assert payload["sub"] == "42"
        assert payload["role"] == "coordinator"
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_expired_token(self):
        token = create_access_token(
            42, ActorRole.ADMIN, expires_delta=timedelta(seconds=-1)
        )

        with pytest.raises(ExpiredSignatureError):
            decode_access_token(token)

    def test_token_signed_with_other_key(self):
        token = jwt.encode(
            {"sub": "1", "role": "admin", "type": "access"},
            "some-other-secret-key-of-sufficient-length",
            algorithm=get_settings().ALGORITHM,
        )

        with pytest.raises(InvalidTokenError):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(InvalidTokenError):
            decode_access_token("not.a.jwt")
