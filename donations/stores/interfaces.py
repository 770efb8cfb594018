"""Store interfaces (repository pattern).

Stores must be swappable and return domain models wrapped in ``Result``.
Every method is a coroutine; implementations never raise for expected
failures (not found, backend errors) and report them as ``Failure``.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from donations.domain import (
    Donation,
    DonationQuery,
    DonationStatus,
    Need,
    NeedChanges,
    NeedQuery,
    NewDonation,
    NewNeed,
    Result,
)


class DonationRepository(ABC):
    """Interface for donation persistence operations."""

    @abstractmethod
    async def create_donation_record(self, new: NewDonation) -> Result[Donation]:
        """Persist a PENDING donation and return it as stored."""
        ...

    @abstractmethod
    async def fetch_donation(self, donation_id: str) -> Result[Donation]:
        """Return a donation by ID, or Failure("Donation not found")."""
        ...

    @abstractmethod
    async def fetch_donations_by_donor(self, donor_id: str) -> Result[list[Donation]]:
        """Return all donations of a donor, newest first."""
        ...

    @abstractmethod
    async def fetch_donations_by_orphanage(self, orphanage_id: str) -> Result[list[Donation]]:
        """Return all donations to an orphanage, newest first."""
        ...

    @abstractmethod
    async def query_donations(self, query: DonationQuery) -> Result[list[Donation]]:
        """Return donations matching every supplied filter, newest first."""
        ...

    @abstractmethod
    async def update_donation_status(
        self,
        donation_id: str,
        status: DonationStatus,
        completed_at: datetime | None = None,
    ) -> Result[None]:
        """Overwrite the status; ``completed_at`` is kept only for COMPLETED."""
        ...

    @abstractmethod
    async def delete_donation_record(self, donation_id: str) -> Result[None]:
        """Delete a donation unconditionally."""
        ...


class NeedRepository(ABC):
    """Interface for need persistence operations."""

    @abstractmethod
    async def create_need_record(self, new: NewNeed) -> Result[Need]:
        """Persist an ACTIVE need and return it as stored."""
        ...

    @abstractmethod
    async def fetch_need(self, need_id: str) -> Result[Need]:
        """Return a need by ID, or Failure("Need not found")."""
        ...

    @abstractmethod
    async def fetch_needs_by_orphanage(self, orphanage_id: str) -> Result[list[Need]]:
        """Return every need of an orphanage regardless of status, newest first."""
        ...

    @abstractmethod
    async def query_needs(self, query: NeedQuery) -> Result[list[Need]]:
        """Return needs matching every supplied filter, newest first."""
        ...

    @abstractmethod
    async def update_need_record(self, need_id: str, changes: NeedChanges) -> Result[None]:
        """Write only the supplied fields of ``changes``."""
        ...

    @abstractmethod
    async def delete_need_record(self, need_id: str) -> Result[None]:
        """Delete a need unconditionally."""
        ...

    @abstractmethod
    async def resolve_category_id_by_name(self, name: str) -> str | None:
        """Return the backend id of the named category, or None."""
        ...


class Repository(DonationRepository, NeedRepository, ABC):
    """The full backend contract used by the lifecycle services."""
