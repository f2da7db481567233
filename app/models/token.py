from pydantic import BaseModel
from app.models.enums import ActorRole


class Actor(BaseModel):
    """Authenticated caller resolved from the bearer token claims."""

    id: int
    role: ActorRole
