from datetime import datetime, timedelta, timezone

import jwt
from jwt.exceptions import PyJWTError
from fastapi import status
from fastapi.exceptions import HTTPException

from app.core.config import get_settings
from app.models.enums import ActorRole


def create_access_token(
    actor_id: int, role: ActorRole, expires_delta: timedelta | None = None
) -> str:
    """
    Create a JWT access token identifying an actor and its role.

    Tokens are normally minted by the authentication service; this helper exists for
    internal tooling and tests and produces tokens `decode_access_token` accepts.

    Parameters:
        actor_id (int): Identifier of the actor, stored as the `sub` claim.
        role (ActorRole): Role of the actor, stored as the `role` claim.
        expires_delta (timedelta | None): Optional time until expiration. If `None`, ACCESS_TOKEN_EXPIRE_MINUTES from settings is used.

    Returns:
        str: Encoded JWT access token string.

    Raises:
        HTTPException: HTTP 500 error if the token cannot be generated.
    """
    settings = get_settings()
    expires_delta = expires_delta or timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode = {
        "sub": str(actor_id),
        "role": role.value,
        "type": "access",
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    try:
        return jwt.encode(
            to_encode,
            settings.SECRET_KEY.get_secret_value(),
            algorithm=settings.ALGORITHM,
        )
    except PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not generate authentication token.",
        )


def decode_access_token(token: str) -> dict:
    """
    Decode and verify an access JWT.

    Returns:
        dict: The verified claims.

    Raises:
        jwt.exceptions.InvalidTokenError: If the signature, expiry or format is invalid.
    """
    settings = get_settings()
    return jwt.decode(
        token,
        settings.SECRET_KEY.get_secret_value(),
        algorithms=[settings.ALGORITHM],
    )
