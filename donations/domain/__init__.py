from donations.domain.models import (
    Donation,
    DonationQuery,
    DonationStatistics,
    DonorSummary,
    Need,
    NeedChanges,
    NeedQuery,
    NeedsStatistics,
    NewDonation,
    NewNeed,
)
from donations.domain.result import Failure, Result, Success
from donations.domain.value_objects import (
    DonationStatus,
    DonationType,
    NeedPriority,
    NeedStatus,
    RecurringFrequency,
)

__all__ = [
    "Donation",
    "DonationQuery",
    "DonationStatistics",
    "DonorSummary",
    "Need",
    "NeedChanges",
    "NeedQuery",
    "NeedsStatistics",
    "NewDonation",
    "NewNeed",
    "Failure",
    "Result",
    "Success",
    "DonationStatus",
    "DonationType",
    "NeedPriority",
    "NeedStatus",
    "RecurringFrequency",
]
