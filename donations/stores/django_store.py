"""Django ORM implementation of the Repository.

Rows are converted to domain models here and nowhere else; enum columns go
through donations/stores/codecs.py.
"""

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from asgiref.sync import sync_to_async
from django.db import DatabaseError, models, transaction
from django.utils import timezone

from donations import models as orm
from donations.domain import (
    Donation,
    DonationQuery,
    DonationStatus,
    DonationType,
    Need,
    NeedChanges,
    NeedPriority,
    NeedQuery,
    NeedStatus,
    NewDonation,
    NewNeed,
    RecurringFrequency,
    Result,
    Success,
)
from donations.domain.errors import DonationNotFoundError, InvalidIdError, NeedNotFoundError
from donations.domain.result import as_result
from donations.stores.codecs import decode, encode
from donations.stores.interfaces import Repository

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Decode errors (ValueError) and decimal conversion errors surface as backend
# failures too.
BACKEND_ERRORS = (DatabaseError, ValueError, ArithmeticError)


def _parse_uuid(value: str, entity: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidIdError(entity) from None


def _to_donation(row: orm.Donation) -> Donation:
    return Donation(
        id=str(row.pk),
        donor_id=row.donor_id,
        orphanage_id=row.orphanage_id,
        category_id=str(row.category_id),
        need_id=str(row.need_id) if row.need_id else None,
        amount=row.amount,
        currency=row.currency,
        donation_type=decode(DonationType, row.donation_type),
        item_description=row.item_description,
        quantity=row.quantity,
        status=decode(DonationStatus, row.status),
        note=row.note,
        is_anonymous=row.is_anonymous,
        is_recurring=row.is_recurring,
        recurring_frequency=(
            decode(RecurringFrequency, row.recurring_frequency)
            if row.recurring_frequency
            else None
        ),
        created_at=row.created_at,
        completed_at=row.completed_at,
    )


def _to_need(row: orm.Need) -> Need:
    return Need(
        id=str(row.pk),
        orphanage_id=row.orphanage_id,
        category_id=str(row.category_id),
        item_name=row.item_name,
        quantity=row.quantity,
        quantity_fulfilled=row.quantity_fulfilled,
        priority=decode(NeedPriority, row.priority),
        description=row.description or "",
        status=decode(NeedStatus, row.status),
        created_at=row.created_at,
    )


def _insert_row(model: type[models.Model], mapper: Callable[[Any], T], **columns: Any) -> T:
    """Insert a row and map its re-read copy; a failure in either rolls back."""
    with transaction.atomic():
        row = model.objects.create(**columns)
        logger.debug("Inserted %s row %s", model.__name__, row.pk)
        return mapper(model.objects.get(pk=row.pk))


class DjangoRepository(Repository):
    """Relational store using the Django ORM's async query API."""

    # Donations

    @as_result("Failed to create donation", BACKEND_ERRORS)
    async def create_donation_record(self, new: NewDonation) -> Result[Donation]:
        donation = await sync_to_async(_insert_row)(
            orm.Donation,
            _to_donation,
            donor_id=new.donor_id,
            orphanage_id=new.orphanage_id,
            category_id=_parse_uuid(new.category_id, "category"),
            need_id=_parse_uuid(new.need_id, "need") if new.need_id else None,
            amount=new.amount,
            currency=new.currency,
            donation_type=encode(new.donation_type),
            item_description=new.item_description,
            quantity=new.quantity,
            status=encode(DonationStatus.PENDING),
            note=new.note,
            is_anonymous=new.is_anonymous,
            is_recurring=new.is_recurring,
            recurring_frequency=(
                encode(new.recurring_frequency) if new.recurring_frequency else None
            ),
        )
        return Success(donation)

    @as_result("Failed to fetch donation", BACKEND_ERRORS)
    async def fetch_donation(self, donation_id: str) -> Result[Donation]:
        row = await orm.Donation.objects.filter(pk=_parse_uuid(donation_id, "donation")).afirst()
        if row is None:
            raise DonationNotFoundError()
        return Success(_to_donation(row))

    async def fetch_donations_by_donor(self, donor_id: str) -> Result[list[Donation]]:
        return await self.query_donations(DonationQuery(donor_id=donor_id))

    async def fetch_donations_by_orphanage(self, orphanage_id: str) -> Result[list[Donation]]:
        return await self.query_donations(DonationQuery(orphanage_id=orphanage_id))

    @as_result("Failed to fetch donations", BACKEND_ERRORS)
    async def query_donations(self, query: DonationQuery) -> Result[list[Donation]]:
        rows = orm.Donation.objects.all()
        if query.donor_id is not None:
            rows = rows.filter(donor_id=query.donor_id)
        if query.orphanage_id is not None:
            rows = rows.filter(orphanage_id=query.orphanage_id)
        if query.category_id is not None:
            rows = rows.filter(category_id=_parse_uuid(query.category_id, "category"))
        if query.status is not None:
            rows = rows.filter(status=encode(query.status))
        if query.is_recurring is not None:
            rows = rows.filter(is_recurring=query.is_recurring)
        rows = rows.order_by("-created_at")
        if query.limit is not None:
            rows = rows[: query.limit]
        return Success([_to_donation(row) async for row in rows])

    @as_result("Failed to update donation status", BACKEND_ERRORS)
    async def update_donation_status(
        self,
        donation_id: str,
        status: DonationStatus,
        completed_at: datetime | None = None,
    ) -> Result[None]:
        if status is DonationStatus.COMPLETED:
            completed_at = completed_at or timezone.now()
        else:
            completed_at = None
        updated = await orm.Donation.objects.filter(
            pk=_parse_uuid(donation_id, "donation")
        ).aupdate(
            status=encode(status),
            completed_at=completed_at,
            updated_at=timezone.now(),
        )
        if not updated:
            raise DonationNotFoundError()
        return Success(None)

    @as_result("Failed to delete donation", BACKEND_ERRORS)
    async def delete_donation_record(self, donation_id: str) -> Result[None]:
        deleted, _ = await orm.Donation.objects.filter(
            pk=_parse_uuid(donation_id, "donation")
        ).adelete()
        if not deleted:
            raise DonationNotFoundError()
        return Success(None)

    # Needs

    @as_result("Failed to create need", BACKEND_ERRORS)
    async def create_need_record(self, new: NewNeed) -> Result[Need]:
        need = await sync_to_async(_insert_row)(
            orm.Need,
            _to_need,
            orphanage_id=new.orphanage_id,
            category_id=_parse_uuid(new.category_id, "category"),
            item_name=new.item_name,
            quantity=new.quantity,
            priority=encode(new.priority),
            description=new.description,
            status=encode(NeedStatus.ACTIVE),
        )
        return Success(need)

    @as_result("Failed to fetch need", BACKEND_ERRORS)
    async def fetch_need(self, need_id: str) -> Result[Need]:
        row = await orm.Need.objects.filter(pk=_parse_uuid(need_id, "need")).afirst()
        if row is None:
            raise NeedNotFoundError()
        return Success(_to_need(row))

    async def fetch_needs_by_orphanage(self, orphanage_id: str) -> Result[list[Need]]:
        return await self.query_needs(NeedQuery(orphanage_id=orphanage_id))

    @as_result("Failed to fetch needs", BACKEND_ERRORS)
    async def query_needs(self, query: NeedQuery) -> Result[list[Need]]:
        rows = orm.Need.objects.all()
        if query.orphanage_id is not None:
            rows = rows.filter(orphanage_id=query.orphanage_id)
        if query.category_id is not None:
            rows = rows.filter(category_id=_parse_uuid(query.category_id, "category"))
        if query.status is not None:
            rows = rows.filter(status=encode(query.status))
        rows = rows.order_by("-created_at")
        return Success([_to_need(row) async for row in rows])

    @as_result("Failed to update need", BACKEND_ERRORS)
    async def update_need_record(self, need_id: str, changes: NeedChanges) -> Result[None]:
        pk = _parse_uuid(need_id, "need")
        columns = {
            name: encode(value) if isinstance(value, (NeedPriority, NeedStatus)) else value
            for name, value in changes.supplied().items()
        }
        if not columns:
            return Success(None)
        updated = await orm.Need.objects.filter(pk=pk).aupdate(
            **columns, updated_at=timezone.now()
        )
        if not updated:
            raise NeedNotFoundError()
        return Success(None)

    @as_result("Failed to delete need", BACKEND_ERRORS)
    async def delete_need_record(self, need_id: str) -> Result[None]:
        deleted, _ = await orm.Need.objects.filter(pk=_parse_uuid(need_id, "need")).adelete()
        if not deleted:
            raise NeedNotFoundError()
        return Success(None)

    async def resolve_category_id_by_name(self, name: str) -> str | None:
        try:
            category = await orm.Category.objects.filter(name=name).afirst()
        except DatabaseError:
            logger.exception("Failed to resolve category %r", name)
            return None
        return str(category.pk) if category else None
