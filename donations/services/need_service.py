"""Need service - orphanage need lifecycle.

Needs are ACTIVE until fulfilled or cancelled; both are terminal. Edits never
touch the status, and deletes are unconditional.
"""

import logging
from collections.abc import Mapping
from typing import Any

from donations.domain import (
    Failure,
    Need,
    NeedChanges,
    NeedQuery,
    NeedsStatistics,
    NeedStatus,
    NewNeed,
    Result,
)
from donations.domain.errors import ErrorCode, IllegalTransitionError, InvalidCategoryError
from donations.domain.lifecycle import ensure_need_transition
from donations.domain.result import as_result, failure_from, map_success
from donations.domain.statistics import compute_needs_statistics, sort_needs_by_priority
from donations.stores.interfaces import NeedRepository
from donations.validation import NeedFormSerializer, flatten_errors

logger = logging.getLogger(__name__)

QUANTITY_BELOW_FULFILLED = "Quantity cannot be less than the quantity already fulfilled"


def _form_failure(serializer: NeedFormSerializer) -> Failure:
    errors = flatten_errors(serializer.errors)
    return Failure(
        message=next(iter(errors.values())),
        code=ErrorCode.INVALID_FORM,
        field_errors=errors,
    )


class NeedService:
    """Service for orphanage need operations."""

    def __init__(self, repository: NeedRepository) -> None:
        self._repository = repository

    @as_result("Failed to create need")
    async def create_need(self, orphanage_id: str, form: Mapping[str, Any]) -> Result[Need]:
        """Validate the form, resolve the category by name and persist an ACTIVE need."""
        serializer = NeedFormSerializer(data=form)
        if not serializer.is_valid():
            logger.info("Rejected need form for orphanage %s", orphanage_id)
            return _form_failure(serializer)

        data = serializer.validated_data
        category_name = data["category_id"].strip()
        category_id = await self._repository.resolve_category_id_by_name(category_name)
        if category_id is None:
            raise InvalidCategoryError(category_name)

        result = await self._repository.create_need_record(
            NewNeed(
                orphanage_id=orphanage_id,
                category_id=category_id,
                item_name=data["item_name"],
                quantity=data["quantity"],
                priority=data["priority"],
                description=data.get("description") or "",
            )
        )
        if not isinstance(result, Failure):
            logger.info("Created need %s for orphanage %s", result.data.id, orphanage_id)
        return result

    @as_result("Failed to fetch need")
    async def get_need(self, need_id: str) -> Result[Need]:
        return await self._repository.fetch_need(need_id)

    @as_result("Failed to update need")
    async def update_need(self, need_id: str, changes: Mapping[str, Any]) -> Result[Need]:
        """Write only the supplied fields; the status is never changed here."""
        serializer = NeedFormSerializer(data=changes, partial=True)
        if not serializer.is_valid():
            return _form_failure(serializer)
        patch = serializer.to_changes()

        current = await self._repository.fetch_need(need_id)
        if isinstance(current, Failure) or patch.is_empty:
            return current
        if patch.quantity is not None and patch.quantity < current.data.quantity_fulfilled:
            return Failure(
                message=QUANTITY_BELOW_FULFILLED,
                code=ErrorCode.INVALID_FORM,
                field_errors={"quantity": QUANTITY_BELOW_FULFILLED},
            )

        written = await self._repository.update_need_record(need_id, patch)
        if isinstance(written, Failure):
            return written
        logger.info("Updated need %s: %s", need_id, ", ".join(sorted(patch.supplied())))
        return await self._repository.fetch_need(need_id)

    @as_result("Failed to mark need as fulfilled")
    async def mark_need_fulfilled(self, need_id: str) -> Result[Need]:
        return await self._set_status(need_id, NeedStatus.FULFILLED)

    @as_result("Failed to cancel need")
    async def cancel_need(self, need_id: str) -> Result[Need]:
        return await self._set_status(need_id, NeedStatus.CANCELLED)

    @as_result("Failed to delete need")
    async def delete_need(self, need_id: str) -> Result[None]:
        result = await self._repository.delete_need_record(need_id)
        if not isinstance(result, Failure):
            logger.info("Deleted need %s", need_id)
        return result

    async def _set_status(self, need_id: str, target: NeedStatus) -> Result[Need]:
        current = await self._repository.fetch_need(need_id)
        if isinstance(current, Failure) or current.data.status is target:
            return current

        try:
            ensure_need_transition(current.data.status, target)
        except IllegalTransitionError as exc:
            logger.warning("Need %s: %s", need_id, exc.message)
            return failure_from(exc)

        written = await self._repository.update_need_record(need_id, NeedChanges(status=target))
        if isinstance(written, Failure):
            return written
        logger.info("Need %s moved %s -> %s", need_id, current.data.status.name, target.name)
        return await self._repository.fetch_need(need_id)

    # Listings

    @as_result("Failed to fetch needs")
    async def list_active_needs(self, orphanage_id: str | None = None) -> Result[list[Need]]:
        """Active needs, most urgent first."""
        needs = await self._repository.query_needs(
            NeedQuery(orphanage_id=orphanage_id, status=NeedStatus.ACTIVE)
        )
        return map_success(needs, sort_needs_by_priority)

    @as_result("Failed to fetch needs")
    async def list_needs_by_category(self, category_id: str) -> Result[list[Need]]:
        return await self._repository.query_needs(
            NeedQuery(category_id=category_id, status=NeedStatus.ACTIVE)
        )

    @as_result("Failed to fetch statistics")
    async def get_needs_statistics(self, orphanage_id: str) -> Result[NeedsStatistics]:
        needs = await self._repository.fetch_needs_by_orphanage(orphanage_id)
        return map_success(needs, compute_needs_statistics)
