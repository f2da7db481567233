from typing import Annotated
from jwt.exceptions import InvalidTokenError
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.security import decode_access_token
from app.models.enums import ActorRole
from app.models.token import Actor


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def get_current_actor(token: Annotated[str, Depends(oauth2_scheme)]) -> Actor:
    """
    Resolve the authenticated actor from an access JWT.

    The token must carry a numeric `sub`, a known `role` and `type` equal to "access".

    Returns:
        actor (Actor): The caller's id and role.

    Raises:
        HTTPException: 401 Unauthorized if the token is invalid, expired, not an access token, or has missing or malformed claims.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
    except InvalidTokenError:
        raise credentials_exception

    subject: str | None = payload.get("sub")
    role: str | None = payload.get("role")
    if subject is None or role is None or payload.get("type") != "access":
        raise credentials_exception
    try:
        return Actor(id=int(subject), role=ActorRole(role))
    except ValueError:
        raise credentials_exception


def get_current_manager(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """
    Require an actor allowed to create opportunities (admin or coordinator).

    Raises:
        HTTPException: 403 Forbidden for volunteers.
    """
    if actor.role not in (ActorRole.ADMIN, ActorRole.COORDINATOR):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Coordinator or admin role required",
        )
    return actor
