"""Unit tests for DonationService.

These test transition rules, validation short-circuits and failure mapping
against an in-memory repository.
Run with: pytest tests/test_donation_service.py -v
"""

from decimal import Decimal

import pytest

from donations.domain import (
    DonationStatistics,
    DonationStatus,
    DonationType,
    DonorSummary,
    Failure,
    RecurringFrequency,
    Success,
)
from donations.domain.errors import ErrorCode
from donations.validation import AMOUNT_ERROR

from conftest import FIXED_NOW

pytestmark = pytest.mark.asyncio


async def _created(service, fields) -> str:
    result = await service.create_donation(fields)
    assert isinstance(result, Success), result
    return result.data.id


class TestCreateDonation:
    """Tests for DonationService.create_donation."""

    async def test_creates_pending_donation(self, donation_service, donation_fields, repository):
        """Given a valid form, returns a PENDING donation with the default currency."""
        result = await donation_service.create_donation(donation_fields)

        assert isinstance(result, Success)
        donation = result.data
        assert donation.status is DonationStatus.PENDING
        assert donation.amount == Decimal("25.50")
        assert donation.currency == "USD"
        assert donation.completed_at is None
        assert repository.donations[donation.id] == donation

    async def test_invalid_form_never_reaches_repository(
        self, donation_service, donation_fields, repository
    ):
        """Given a zero amount, returns the field errors without touching the repository."""
        donation_fields["amount"] = "0"

        result = await donation_service.create_donation(donation_fields)

        assert isinstance(result, Failure)
        assert result.code is ErrorCode.INVALID_FORM
        assert result.field_errors == {"amount": AMOUNT_ERROR}
        assert result.message == AMOUNT_ERROR
        assert repository.calls == []

    @pytest.mark.parametrize("amount", ["0.001", "1e20"])
    async def test_unstorable_amount_never_reaches_repository(
        self, donation_service, donation_fields, repository, amount
    ):
        """Given an amount the column cannot hold exactly, returns an amount error."""
        donation_fields["amount"] = amount

        result = await donation_service.create_donation(donation_fields)

        assert result.field_errors == {"amount": AMOUNT_ERROR}
        assert repository.donations == {}

    async def test_backend_message_passes_through(self, donation_service, donation_fields, repository):
        """Given a backend failure, returns its message verbatim."""
        repository.fail_on["create_donation_record"] = "duplicate key value violates constraint"

        result = await donation_service.create_donation(donation_fields)

        assert result == Failure(
            "duplicate key value violates constraint", code=ErrorCode.BACKEND_ERROR
        )

    async def test_unexpected_exception_becomes_failure(
        self, donation_service, donation_fields, repository, monkeypatch
    ):
        """Given an exception without a message, returns the operation's fallback message."""

        async def explode(new):
            raise ConnectionError()

        monkeypatch.setattr(repository, "create_donation_record", explode)

        result = await donation_service.create_donation(donation_fields)

        assert result == Failure("Failed to create donation", code=ErrorCode.BACKEND_ERROR)

    async def test_recurring_in_kind_donation(self, donation_service, donation_fields):
        """Given a recurring in-kind form, returns a donation with a zero amount and the frequency."""
        donation_fields.update(
            donation_type="in_kind",
            amount="",
            item_description="Winter coats",
            quantity="15",
            is_recurring=True,
            recurring_frequency="quarterly",
            is_anonymous=True,
        )

        result = await donation_service.create_donation(donation_fields)

        donation = result.data
        assert donation.donation_type is DonationType.IN_KIND
        assert donation.amount == Decimal("0")
        assert donation.quantity == 15
        assert donation.recurring_frequency is RecurringFrequency.QUARTERLY
        assert donation.is_anonymous is True


class TestDonationLifecycle:
    """Tests for confirm, complete and cancel."""

    async def test_in_kind_scenario(self, donation_service, donation_fields):
        """create -> confirm -> complete, after which deletion is refused."""
        donation_fields.update(
            donation_type="in_kind", amount=0, item_description="50kg rice", quantity=50
        )
        created = await donation_service.create_donation(donation_fields)
        assert created.data.status is DonationStatus.PENDING
        donation_id = created.data.id

        confirmed = await donation_service.confirm_donation(donation_id)
        assert confirmed.data.status is DonationStatus.CONFIRMED

        completed = await donation_service.complete_donation(donation_id)
        assert completed.data.status is DonationStatus.COMPLETED
        assert completed.data.completed_at == FIXED_NOW

        deleted = await donation_service.delete_donation(donation_id)
        assert deleted == Failure(
            "Can only delete pending donations", code=ErrorCode.ILLEGAL_TRANSITION
        )

    async def test_complete_requires_confirmation(self, donation_service, donation_fields, repository):
        """Given a PENDING donation, complete returns an illegal transition without writing."""
        donation_id = await _created(donation_service, donation_fields)

        result = await donation_service.complete_donation(donation_id)

        assert isinstance(result, Failure)
        assert result.code is ErrorCode.ILLEGAL_TRANSITION
        assert result.message == "Cannot change donation status from pending to completed"
        assert "update_donation_status" not in repository.calls

    async def test_confirm_twice_is_rejected(self, donation_service, donation_fields):
        """Given a CONFIRMED donation, confirm returns an illegal transition."""
        donation_id = await _created(donation_service, donation_fields)
        await donation_service.confirm_donation(donation_id)

        result = await donation_service.confirm_donation(donation_id)

        assert isinstance(result, Failure)
        assert result.code is ErrorCode.ILLEGAL_TRANSITION

    @pytest.mark.parametrize("confirm_first", [False, True])
    async def test_cancel_from_pending_or_confirmed(
        self, donation_service, donation_fields, confirm_first
    ):
        """Given a PENDING or CONFIRMED donation, cancel returns it CANCELLED."""
        donation_id = await _created(donation_service, donation_fields)
        if confirm_first:
            await donation_service.confirm_donation(donation_id)

        result = await donation_service.cancel_donation(donation_id)

        assert result.data.status is DonationStatus.CANCELLED
        assert result.data.completed_at is None

    async def test_cancelled_donation_cannot_complete(self, donation_service, donation_fields):
        """Given a CANCELLED donation, complete returns a Failure."""
        donation_id = await _created(donation_service, donation_fields)
        await donation_service.cancel_donation(donation_id)

        result = await donation_service.complete_donation(donation_id)

        assert isinstance(result, Failure)

    async def test_transition_on_missing_donation(self, donation_service):
        """Given an unknown id, returns Donation not found."""
        result = await donation_service.confirm_donation("missing")

        assert result == Failure("Donation not found", code=ErrorCode.DONATION_NOT_FOUND)

    async def test_status_write_failure_is_returned(
        self, donation_service, donation_fields, repository
    ):
        """Given a failing status write, returns the backend message and keeps the status."""
        donation_id = await _created(donation_service, donation_fields)
        repository.fail_on["update_donation_status"] = "timeout"

        result = await donation_service.confirm_donation(donation_id)

        assert result.message == "timeout"
        assert repository.donations[donation_id].status is DonationStatus.PENDING


class TestDeleteDonation:
    """Tests for DonationService.delete_donation."""

    async def test_deletes_pending_donation(self, donation_service, donation_fields, repository):
        """Given a PENDING donation, deletes it."""
        donation_id = await _created(donation_service, donation_fields)

        result = await donation_service.delete_donation(donation_id)

        assert result == Success(None)
        assert donation_id not in repository.donations

    @pytest.mark.parametrize(
        "status", [DonationStatus.CONFIRMED, DonationStatus.COMPLETED, DonationStatus.CANCELLED]
    )
    async def test_refuses_non_pending(self, donation_service, make_donation, seed, repository, status):
        """Given a non-PENDING donation, returns a Failure and keeps the record."""
        (donation,) = seed(make_donation(status=status))

        result = await donation_service.delete_donation(donation.id)

        assert isinstance(result, Failure)
        assert result.message == "Can only delete pending donations"
        assert donation.id in repository.donations

    async def test_missing_donation(self, donation_service):
        """Given an unknown id, returns Donation not found."""
        result = await donation_service.delete_donation("missing")

        assert result.message == "Donation not found"


class TestDonationListings:
    """Tests for the donation read operations."""

    async def test_status_listings(self, donation_service, make_donation, seed):
        """Pending and completed listings return only the donor's donations in that status."""
        pending, completed, _ = seed(
            make_donation(),
            make_donation(status=DonationStatus.COMPLETED),
            make_donation(donor_id="donor-2", status=DonationStatus.COMPLETED),
        )

        assert (await donation_service.list_pending_donations("donor-1")).data == [pending]
        assert (await donation_service.list_completed_donations("donor-1")).data == [completed]

    async def test_recent_donations_uses_configured_limit(self, donation_service, donation_fields):
        """Without a limit, returns the configured number of newest donations."""
        for _ in range(5):
            await donation_service.create_donation(donation_fields)

        result = await donation_service.list_recent_donations(donor_id="donor-1")

        assert len(result.data) == 3
        created = [d.created_at for d in result.data]
        assert created == sorted(created, reverse=True)

    async def test_recent_donations_zero_limit(self, donation_service, donation_fields):
        """Given limit=0, returns no donations instead of the configured default."""
        await donation_service.create_donation(donation_fields)

        result = await donation_service.list_recent_donations(donor_id="donor-1", limit=0)

        assert result == Success([])

    async def test_recurring_lists_completed_recurring_only(
        self, donation_service, make_donation, seed
    ):
        """Recurring listing returns COMPLETED recurring donations only."""
        recurring = {"is_recurring": True, "recurring_frequency": RecurringFrequency.MONTHLY}
        wanted, *_ = seed(
            make_donation(status=DonationStatus.COMPLETED, **recurring),
            make_donation(**recurring),
            make_donation(status=DonationStatus.COMPLETED),
        )

        result = await donation_service.list_recurring_donations("donor-1")

        assert result.data == [wanted]

    async def test_by_category(self, donation_service, make_donation, seed):
        """Category listing returns donations in that category only."""
        food, _ = seed(make_donation(category_id="food"), make_donation(category_id="books"))

        result = await donation_service.list_donations_by_category("food", donor_id="donor-1")

        assert result.data == [food]

    async def test_listing_failure(self, donation_service, repository):
        """Given a failing query, returns the backend message."""
        repository.fail_on["query_donations"] = "relation does not exist"

        result = await donation_service.list_orphanage_donations("orphanage-1")

        assert result.message == "relation does not exist"


class TestDonationAggregates:
    """Tests for statistics and top donors."""

    async def test_donor_statistics(self, donation_service, make_donation, seed):
        """Donor statistics cover that donor's donations only."""
        seed(
            make_donation(amount=Decimal("10")),
            make_donation(amount=Decimal("20"), status=DonationStatus.COMPLETED),
            make_donation(
                donation_type=DonationType.IN_KIND,
                item_description="Books",
                quantity=4,
                amount=Decimal("0"),
                status=DonationStatus.COMPLETED,
            ),
            make_donation(donor_id="someone-else", status=DonationStatus.COMPLETED),
        )

        result = await donation_service.get_donor_statistics("donor-1")

        assert result.data == DonationStatistics(
            total_donations=3,
            total_amount=Decimal("20"),
            pending_donations=1,
            completed_donations=2,
            monetary_donations=2,
            in_kind_donations=1,
        )

    async def test_orphanage_statistics_failure(self, donation_service, repository):
        """Given a failing query, returns the backend message."""
        repository.fail_on["query_donations"] = "network unreachable"

        result = await donation_service.get_orphanage_statistics("orphanage-1")

        assert isinstance(result, Failure)
        assert result.message == "network unreachable"

    async def test_top_donors(self, donation_service, make_donation, seed):
        """Without a limit, returns the configured number of donors by completed total."""
        done = DonationStatus.COMPLETED
        seed(
            make_donation(donor_id="a", amount=Decimal("5"), status=done),
            make_donation(donor_id="b", amount=Decimal("50"), status=done),
            make_donation(donor_id="a", amount=Decimal("10"), status=done),
            make_donation(donor_id="c", amount=Decimal("1"), status=done),
            make_donation(donor_id="c", amount=Decimal("500")),
        )

        result = await donation_service.get_top_donors("orphanage-1")

        assert result.data == [
            DonorSummary(donor_id="b", total_amount=Decimal("50"), donation_count=1),
            DonorSummary(donor_id="a", total_amount=Decimal("15"), donation_count=2),
        ]

    async def test_top_donors_zero_limit(self, donation_service, make_donation, seed):
        """Given limit=0, returns no donors instead of the configured default."""
        seed(make_donation(status=DonationStatus.COMPLETED))

        result = await donation_service.get_top_donors("orphanage-1", limit=0)

        assert result == Success([])
