"""Donation service - donation lifecycle rules live here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants and status transitions
- Perform orchestration and error mapping
- Return ``Result`` values, never raise across their public methods
"""

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from django.utils import timezone

from donations.conf import DonationsConfig, get_config
from donations.domain import (
    Donation,
    DonationQuery,
    DonationStatistics,
    DonationStatus,
    DonorSummary,
    Failure,
    Result,
)
from donations.domain.errors import DeletionNotAllowedError, ErrorCode, IllegalTransitionError
from donations.domain.lifecycle import ensure_donation_transition
from donations.domain.result import as_result, failure_from, map_success
from donations.domain.statistics import compute_donation_statistics, rank_top_donors
from donations.stores.interfaces import DonationRepository
from donations.validation import NewDonationSerializer, flatten_errors

logger = logging.getLogger(__name__)


class DonationService:
    """Service for donation lifecycle operations."""

    def __init__(
        self,
        repository: DonationRepository,
        *,
        config: DonationsConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository = repository
        self._config = config or get_config()
        self._clock = clock or timezone.now

    @as_result("Failed to create donation")
    async def create_donation(self, fields: Mapping[str, Any]) -> Result[Donation]:
        """Validate the form and persist a PENDING donation.

        Returns the stored record so server-assigned id and timestamps are
        visible to the caller.
        """
        serializer = NewDonationSerializer(
            data=fields,
            context={"default_currency": self._config.default_currency},
        )
        if not serializer.is_valid():
            errors = flatten_errors(serializer.errors)
            logger.info("Rejected donation form, invalid fields: %s", ", ".join(sorted(errors)))
            return Failure(
                message=next(iter(errors.values())),
                code=ErrorCode.INVALID_FORM,
                field_errors=errors,
            )

        result = await self._repository.create_donation_record(serializer.save())
        if isinstance(result, Failure):
            logger.error("Donation insert failed: %s", result.message)
        else:
            logger.info("Created donation %s", result.data.id)
        return result

    @as_result("Failed to fetch donation")
    async def get_donation(self, donation_id: str) -> Result[Donation]:
        return await self._repository.fetch_donation(donation_id)

    @as_result("Failed to confirm donation")
    async def confirm_donation(self, donation_id: str) -> Result[Donation]:
        """PENDING -> CONFIRMED."""
        return await self._transition(donation_id, DonationStatus.CONFIRMED)

    @as_result("Failed to complete donation")
    async def complete_donation(self, donation_id: str) -> Result[Donation]:
        """CONFIRMED -> COMPLETED, stamping ``completed_at``."""
        return await self._transition(donation_id, DonationStatus.COMPLETED)

    @as_result("Failed to cancel donation")
    async def cancel_donation(self, donation_id: str) -> Result[Donation]:
        """PENDING or CONFIRMED -> CANCELLED."""
        return await self._transition(donation_id, DonationStatus.CANCELLED)

    @as_result("Failed to delete donation")
    async def delete_donation(self, donation_id: str) -> Result[None]:
        """Delete a donation that is still PENDING."""
        current = await self._repository.fetch_donation(donation_id)
        if isinstance(current, Failure):
            return current
        if not current.data.can_delete:
            logger.warning(
                "Refused to delete donation %s in status %s",
                donation_id,
                current.data.status.name,
            )
            raise DeletionNotAllowedError()

        result = await self._repository.delete_donation_record(donation_id)
        if not isinstance(result, Failure):
            logger.info("Deleted donation %s", donation_id)
        return result

    async def _transition(self, donation_id: str, target: DonationStatus) -> Result[Donation]:
        current = await self._repository.fetch_donation(donation_id)
        if isinstance(current, Failure):
            return current

        previous = current.data.status
        try:
            ensure_donation_transition(previous, target)
        except IllegalTransitionError as exc:
            logger.warning("Donation %s: %s", donation_id, exc.message)
            return failure_from(exc)

        completed_at = self._clock() if target is DonationStatus.COMPLETED else None
        written = await self._repository.update_donation_status(donation_id, target, completed_at)
        if isinstance(written, Failure):
            return written

        logger.info("Donation %s moved %s -> %s", donation_id, previous.name, target.name)
        return await self._repository.fetch_donation(donation_id)

    # Listings

    @as_result("Failed to fetch donations")
    async def list_donor_donations(self, donor_id: str) -> Result[list[Donation]]:
        return await self._repository.fetch_donations_by_donor(donor_id)

    @as_result("Failed to fetch donations")
    async def list_orphanage_donations(self, orphanage_id: str) -> Result[list[Donation]]:
        return await self._repository.fetch_donations_by_orphanage(orphanage_id)

    @as_result("Failed to fetch donations by status")
    async def list_donations_by_status(
        self,
        status: DonationStatus,
        donor_id: str | None = None,
        orphanage_id: str | None = None,
    ) -> Result[list[Donation]]:
        return await self._repository.query_donations(
            DonationQuery(status=status, donor_id=donor_id, orphanage_id=orphanage_id)
        )

    async def list_pending_donations(self, donor_id: str) -> Result[list[Donation]]:
        return await self.list_donations_by_status(DonationStatus.PENDING, donor_id=donor_id)

    async def list_completed_donations(self, donor_id: str) -> Result[list[Donation]]:
        return await self.list_donations_by_status(DonationStatus.COMPLETED, donor_id=donor_id)

    @as_result("Failed to fetch recent donations")
    async def list_recent_donations(
        self,
        donor_id: str | None = None,
        orphanage_id: str | None = None,
        limit: int | None = None,
    ) -> Result[list[Donation]]:
        return await self._repository.query_donations(
            DonationQuery(
                donor_id=donor_id,
                orphanage_id=orphanage_id,
                limit=self._config.recent_donations_limit if limit is None else limit,
            )
        )

    @as_result("Failed to fetch recurring donations")
    async def list_recurring_donations(self, donor_id: str) -> Result[list[Donation]]:
        """Completed donations flagged as recurring."""
        return await self._repository.query_donations(
            DonationQuery(
                donor_id=donor_id,
                is_recurring=True,
                status=DonationStatus.COMPLETED,
            )
        )

    @as_result("Failed to fetch donations by category")
    async def list_donations_by_category(
        self,
        category_id: str,
        donor_id: str | None = None,
        orphanage_id: str | None = None,
    ) -> Result[list[Donation]]:
        return await self._repository.query_donations(
            DonationQuery(category_id=category_id, donor_id=donor_id, orphanage_id=orphanage_id)
        )

    # Aggregates

    @as_result("Failed to fetch statistics")
    async def get_donor_statistics(self, donor_id: str) -> Result[DonationStatistics]:
        donations = await self._repository.fetch_donations_by_donor(donor_id)
        return map_success(donations, compute_donation_statistics)

    @as_result("Failed to fetch statistics")
    async def get_orphanage_statistics(self, orphanage_id: str) -> Result[DonationStatistics]:
        donations = await self._repository.fetch_donations_by_orphanage(orphanage_id)
        return map_success(donations, compute_donation_statistics)

    @as_result("Failed to fetch top donors")
    async def get_top_donors(
        self, orphanage_id: str, limit: int | None = None
    ) -> Result[list[DonorSummary]]:
        donations = await self._repository.query_donations(
            DonationQuery(orphanage_id=orphanage_id, status=DonationStatus.COMPLETED)
        )
        if limit is None:
            limit = self._config.top_donors_limit
        return map_success(donations, lambda items: rank_top_donors(items, limit))
