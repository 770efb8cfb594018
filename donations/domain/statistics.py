"""Pure aggregations over donation and need sets.

Statistics are never stored; they are recomputed from whatever records the
caller passes in.
"""

from collections.abc import Iterable
from decimal import Decimal

from donations.domain.models import (
    Donation,
    DonationStatistics,
    DonorSummary,
    Need,
    NeedsStatistics,
)
from donations.domain.value_objects import (
    DonationStatus,
    DonationType,
    NeedPriority,
    NeedStatus,
)


def compute_donation_statistics(donations: Iterable[Donation]) -> DonationStatistics:
    donations = list(donations)
    completed = [d for d in donations if d.status is DonationStatus.COMPLETED]
    return DonationStatistics(
        total_donations=len(donations),
        total_amount=sum((d.amount for d in completed), Decimal("0")),
        pending_donations=sum(1 for d in donations if d.status is DonationStatus.PENDING),
        completed_donations=len(completed),
        monetary_donations=sum(1 for d in donations if d.donation_type is DonationType.MONETARY),
        in_kind_donations=sum(1 for d in donations if d.donation_type is DonationType.IN_KIND),
    )


def compute_needs_statistics(needs: Iterable[Need]) -> NeedsStatistics:
    needs = list(needs)
    active = [n for n in needs if n.status is NeedStatus.ACTIVE]
    return NeedsStatistics(
        total_needs=len(needs),
        active_needs=len(active),
        fulfilled_needs=sum(1 for n in needs if n.status is NeedStatus.FULFILLED),
        cancelled_needs=sum(1 for n in needs if n.status is NeedStatus.CANCELLED),
        urgent_needs=sum(1 for n in active if n.priority is NeedPriority.URGENT),
        high_priority_needs=sum(1 for n in active if n.priority is NeedPriority.HIGH),
    )


def rank_top_donors(donations: Iterable[Donation], limit: int) -> list[DonorSummary]:
    """Group completed donations by donor, largest total first."""
    totals: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    for donation in donations:
        if donation.status is not DonationStatus.COMPLETED:
            continue
        totals[donation.donor_id] = totals.get(donation.donor_id, Decimal("0")) + donation.amount
        counts[donation.donor_id] = counts.get(donation.donor_id, 0) + 1

    summaries = [
        DonorSummary(donor_id=donor_id, total_amount=total, donation_count=counts[donor_id])
        for donor_id, total in totals.items()
    ]
    summaries.sort(key=lambda s: s.total_amount, reverse=True)
    return summaries[:limit]


def sort_needs_by_priority(needs: Iterable[Need]) -> list[Need]:
    """Most urgent first; newest first within a priority."""
    return sorted(needs, key=lambda n: (n.priority.rank, n.created_at), reverse=True)
