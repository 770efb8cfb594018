"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in donations/models.py (persistence layer).
"""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal

from donations.domain.value_objects import (
    DonationStatus,
    DonationType,
    NeedPriority,
    NeedStatus,
    RecurringFrequency,
)

# Precision of stored amounts.
AMOUNT_MAX_DIGITS = 12
AMOUNT_DECIMAL_PLACES = 2


@dataclass(frozen=True)
class Donation:
    """Domain representation of a Donation."""

    id: str
    donor_id: str
    orphanage_id: str
    category_id: str
    amount: Decimal
    currency: str
    donation_type: DonationType
    status: DonationStatus
    created_at: datetime
    need_id: str | None = None
    item_description: str | None = None
    quantity: int | None = None
    note: str | None = None
    is_anonymous: bool = False
    is_recurring: bool = False
    recurring_frequency: RecurringFrequency | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Donation amount cannot be negative")
        if self.quantity is not None and self.quantity <= 0:
            raise ValueError("Donation quantity must be positive")
        if self.donation_type is DonationType.IN_KIND:
            if not (self.item_description or "").strip():
                raise ValueError("In-kind donations require an item description")
            if self.quantity is None:
                raise ValueError("In-kind donations require a quantity")
        if self.is_recurring and self.recurring_frequency is None:
            raise ValueError("Recurring donations require a frequency")
        if (self.completed_at is not None) != (self.status is DonationStatus.COMPLETED):
            raise ValueError("completed_at is set if and only if the donation is completed")

    @property
    def can_delete(self) -> bool:
        return self.status is DonationStatus.PENDING


@dataclass(frozen=True)
class Need:
    """Domain representation of a Need."""

    id: str
    orphanage_id: str
    category_id: str
    item_name: str
    quantity: int
    priority: NeedPriority
    status: NeedStatus
    created_at: datetime
    quantity_fulfilled: int = 0
    description: str = ""

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("Need quantity must be positive")
        if not 0 <= self.quantity_fulfilled <= self.quantity:
            raise ValueError("Fulfilled quantity must be between 0 and quantity")

    @property
    def remaining(self) -> int:
        return self.quantity - self.quantity_fulfilled


@dataclass(frozen=True)
class NewDonation:
    """Validated fields for a donation that has not been persisted yet."""

    donor_id: str
    orphanage_id: str
    category_id: str
    amount: Decimal
    currency: str
    donation_type: DonationType
    need_id: str | None = None
    item_description: str | None = None
    quantity: int | None = None
    note: str | None = None
    is_anonymous: bool = False
    is_recurring: bool = False
    recurring_frequency: RecurringFrequency | None = None


@dataclass(frozen=True)
class NewNeed:
    """Validated fields for a need that has not been persisted yet."""

    orphanage_id: str
    category_id: str
    item_name: str
    quantity: int
    priority: NeedPriority
    description: str = ""


@dataclass(frozen=True)
class NeedChanges:
    """Partial update of a need. ``None`` means "leave unchanged"."""

    item_name: str | None = None
    quantity: int | None = None
    priority: NeedPriority | None = None
    description: str | None = None
    status: NeedStatus | None = None

    def supplied(self) -> dict[str, object]:
        """Return only the fields that carry a value."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.supplied()


@dataclass(frozen=True)
class DonationQuery:
    """Filters for donation lookups. Results are newest first."""

    donor_id: str | None = None
    orphanage_id: str | None = None
    category_id: str | None = None
    status: DonationStatus | None = None
    is_recurring: bool | None = None
    limit: int | None = None


@dataclass(frozen=True)
class NeedQuery:
    """Filters for need lookups. Results are newest first."""

    orphanage_id: str | None = None
    category_id: str | None = None
    status: NeedStatus | None = None


@dataclass(frozen=True)
class DonationStatistics:
    """Derived counts over a set of donations."""

    total_donations: int
    total_amount: Decimal
    pending_donations: int
    completed_donations: int
    monetary_donations: int
    in_kind_donations: int


@dataclass(frozen=True)
class NeedsStatistics:
    """Derived counts over a set of needs."""

    total_needs: int
    active_needs: int
    fulfilled_needs: int
    cancelled_needs: int
    urgent_needs: int
    high_priority_needs: int


@dataclass(frozen=True)
class DonorSummary:
    """Completed giving of one donor."""

    donor_id: str
    total_amount: Decimal
    donation_count: int
