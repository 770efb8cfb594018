"""Pytest configuration and shared fixtures."""

import uuid
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from donations.conf import DonationsConfig
from donations.domain import (
    Donation,
    DonationQuery,
    DonationStatus,
    DonationType,
    Failure,
    Need,
    NeedPriority,
    NeedQuery,
    NeedStatus,
    Success,
)
from donations.domain.errors import ErrorCode
from donations.services import DonationService, NeedService
from donations.stores.interfaces import Repository

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


class InMemoryRepository(Repository):
    """Repository double keeping domain objects in dicts.

    ``fail_on[method_name] = message`` makes that method return a Failure
    once, the way a backend error would surface.
    """

    def __init__(self) -> None:
        self.donations: dict[str, Donation] = {}
        self.needs: dict[str, Need] = {}
        self.categories: dict[str, str] = {}
        self.fail_on: dict[str, str] = {}
        self.calls: list[str] = []
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return FIXED_NOW + timedelta(seconds=self._tick)

    def _enter(self, name: str) -> Failure | None:
        self.calls.append(name)
        if name in self.fail_on:
            return Failure(self.fail_on.pop(name), code=ErrorCode.BACKEND_ERROR)
        return None

    def add_category(self, name: str) -> str:
        category_id = str(uuid.uuid4())
        self.categories[name] = category_id
        return category_id

    async def create_donation_record(self, new):
        if failure := self._enter("create_donation_record"):
            return failure
        donation = Donation(
            id=str(uuid.uuid4()),
            status=DonationStatus.PENDING,
            created_at=self._now(),
            **vars(new),
        )
        self.donations[donation.id] = donation
        return Success(donation)

    async def fetch_donation(self, donation_id):
        if failure := self._enter("fetch_donation"):
            return failure
        if donation_id not in self.donations:
            return Failure("Donation not found", code=ErrorCode.DONATION_NOT_FOUND)
        return Success(self.donations[donation_id])

    async def fetch_donations_by_donor(self, donor_id):
        return await self.query_donations(DonationQuery(donor_id=donor_id))

    async def fetch_donations_by_orphanage(self, orphanage_id):
        return await self.query_donations(DonationQuery(orphanage_id=orphanage_id))

    async def query_donations(self, query):
        if failure := self._enter("query_donations"):
            return failure
        rows = [
            d
            for d in self.donations.values()
            if (query.donor_id is None or d.donor_id == query.donor_id)
            and (query.orphanage_id is None or d.orphanage_id == query.orphanage_id)
            and (query.category_id is None or d.category_id == query.category_id)
            and (query.status is None or d.status is query.status)
            and (query.is_recurring is None or d.is_recurring == query.is_recurring)
        ]
        rows.sort(key=lambda d: d.created_at, reverse=True)
        return Success(rows if query.limit is None else rows[: query.limit])

    async def update_donation_status(self, donation_id, status, completed_at=None):
        if failure := self._enter("update_donation_status"):
            return failure
        if donation_id not in self.donations:
            return Failure("Donation not found", code=ErrorCode.DONATION_NOT_FOUND)
        if status is DonationStatus.COMPLETED:
            completed_at = completed_at or self._now()
        else:
            completed_at = None
        self.donations[donation_id] = replace(
            self.donations[donation_id], status=status, completed_at=completed_at
        )
        return Success(None)

    async def delete_donation_record(self, donation_id):
        if failure := self._enter("delete_donation_record"):
            return failure
        if self.donations.pop(donation_id, None) is None:
            return Failure("Donation not found", code=ErrorCode.DONATION_NOT_FOUND)
        return Success(None)

    async def create_need_record(self, new):
        if failure := self._enter("create_need_record"):
            return failure
        need = Need(
            id=str(uuid.uuid4()),
            status=NeedStatus.ACTIVE,
            created_at=self._now(),
            **vars(new),
        )
        self.needs[need.id] = need
        return Success(need)

    async def fetch_need(self, need_id):
        if failure := self._enter("fetch_need"):
            return failure
        if need_id not in self.needs:
            return Failure("Need not found", code=ErrorCode.NEED_NOT_FOUND)
        return Success(self.needs[need_id])

    async def fetch_needs_by_orphanage(self, orphanage_id):
        return await self.query_needs(NeedQuery(orphanage_id=orphanage_id))

    async def query_needs(self, query):
        if failure := self._enter("query_needs"):
            return failure
        rows = [
            n
            for n in self.needs.values()
            if (query.orphanage_id is None or n.orphanage_id == query.orphanage_id)
            and (query.category_id is None or n.category_id == query.category_id)
            and (query.status is None or n.status is query.status)
        ]
        rows.sort(key=lambda n: n.created_at, reverse=True)
        return Success(rows)

    async def update_need_record(self, need_id, changes):
        if failure := self._enter("update_need_record"):
            return failure
        if need_id not in self.needs:
            return Failure("Need not found", code=ErrorCode.NEED_NOT_FOUND)
        self.needs[need_id] = replace(self.needs[need_id], **changes.supplied())
        return Success(None)

    async def delete_need_record(self, need_id):
        if failure := self._enter("delete_need_record"):
            return failure
        if self.needs.pop(need_id, None) is None:
            return Failure("Need not found", code=ErrorCode.NEED_NOT_FOUND)
        return Success(None)

    async def resolve_category_id_by_name(self, name):
        self.calls.append("resolve_category_id_by_name")
        return self.categories.get(name)


@pytest.fixture
def repository() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture
def config() -> DonationsConfig:
    return DonationsConfig(default_currency="USD", recent_donations_limit=3, top_donors_limit=2)


@pytest.fixture
def donation_service(repository, config) -> DonationService:
    return DonationService(repository, config=config, clock=lambda: FIXED_NOW)


@pytest.fixture
def need_service(repository) -> NeedService:
    return NeedService(repository)


@pytest.fixture
def donation_fields() -> dict:
    """A valid monetary donation as submitted by the donation form."""
    return {
        "donor_id": "donor-1",
        "orphanage_id": "orphanage-1",
        "category_id": str(uuid.uuid4()),
        "donation_type": "monetary",
        "amount": "25.50",
    }


@pytest.fixture
def make_donation():
    """Build a Donation directly, bypassing the service."""

    def _make(**overrides) -> Donation:
        fields = {
            "id": str(uuid.uuid4()),
            "donor_id": "donor-1",
            "orphanage_id": "orphanage-1",
            "category_id": "category-1",
            "amount": Decimal("10"),
            "currency": "USD",
            "donation_type": DonationType.MONETARY,
            "status": DonationStatus.PENDING,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        if fields["status"] is DonationStatus.COMPLETED:
            fields.setdefault("completed_at", FIXED_NOW)
        return Donation(**fields)

    return _make


@pytest.fixture
def make_need():
    """Build a Need directly, bypassing the service."""

    def _make(**overrides) -> Need:
        fields = {
            "id": str(uuid.uuid4()),
            "orphanage_id": "orphanage-1",
            "category_id": "category-1",
            "item_name": "Rice",
            "quantity": 10,
            "priority": NeedPriority.MEDIUM,
            "status": NeedStatus.ACTIVE,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return Need(**fields)

    return _make


@pytest.fixture
def seed(repository):
    """Insert ready-made domain objects into the in-memory repository."""

    def _seed(*items):
        for item in items:
            target = repository.donations if isinstance(item, Donation) else repository.needs
            target[item.id] = item
        return items

    return _seed


