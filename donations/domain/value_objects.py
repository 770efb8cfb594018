"""Closed value sets for donations and needs.

Members carry their own names as values. The strings stored by the backend
are a separate concern, see donations/stores/codecs.py.
"""

from enum import Enum


class DonationType(Enum):
    """What is being pledged."""

    MONETARY = "MONETARY"
    IN_KIND = "IN_KIND"


class DonationStatus(Enum):
    """Donation lifecycle status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (DonationStatus.COMPLETED, DonationStatus.CANCELLED)


class RecurringFrequency(Enum):
    """How often a recurring donation repeats."""

    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class NeedPriority(Enum):
    """Urgency of a need."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"

    @property
    def rank(self) -> int:
        """Higher is more urgent."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    NeedPriority.LOW: 0,
    NeedPriority.MEDIUM: 1,
    NeedPriority.HIGH: 2,
    NeedPriority.URGENT: 3,
}


class NeedStatus(Enum):
    """Need lifecycle status."""

    ACTIVE = "ACTIVE"
    FULFILLED = "FULFILLED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not NeedStatus.ACTIVE
