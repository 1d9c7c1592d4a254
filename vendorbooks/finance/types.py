import enum


class ExplicitStatus(str, enum.Enum):
    """Status flag stored on a booking; only changed by an explicit vendor action."""
    ACTIVE = "active"
    CANCELLED = "cancelled"


class DerivedStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentType(str, enum.Enum):
    FULL = "full"
    PARTIAL = "partial"
    ADVANCE = "advance"
    OVERPAID = "overpaid"
    REFUND = "refund"


class Granularity(str, enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
