from enum import Enum


class ActorRole(str, Enum):
    ADMIN = "admin"
    COORDINATOR = "coordinator"
    VOLUNTEER = "volunteer"


class OpportunityStatus(str, Enum):
    OPEN = "open"
    FILLED = "filled"
    CLOSED = "closed"


class Urgency(str, Enum):
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class SignupStatus(str, Enum):
    PENDING = "pending"
    WAITLISTED = "waitlisted"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    COMPLETED = "completed"


# Statuses that count against max_volunteers
CAPACITY_HOLDING_STATUSES = frozenset(
    {SignupStatus.PENDING, SignupStatus.CONFIRMED, SignupStatus.COMPLETED}
)
CONFIRMED_STATUSES = frozenset({SignupStatus.CONFIRMED, SignupStatus.COMPLETED})
# At most one of these per (volunteer, opportunity, scheduled_date)
ACTIVE_STATUSES = frozenset(
    {SignupStatus.PENDING, SignupStatus.WAITLISTED, SignupStatus.CONFIRMED}
)
TERMINAL_STATUSES = frozenset({SignupStatus.DECLINED, SignupStatus.COMPLETED})
