"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.core.validators import MinValueValidator
from django.db import models

from donations.domain.models import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS
from donations.domain.value_objects import (
    DonationStatus,
    DonationType,
    NeedPriority,
    NeedStatus,
    RecurringFrequency,
)
from donations.stores.codecs import choices, encode


class Category(models.Model):
    """Persistence model for donation/need categories."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    icon_name = models.CharField(max_length=100, blank=True)
    color = models.CharField(max_length=7, blank=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name


class Need(models.Model):
    """Persistence model for orphanage needs."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    orphanage_id = models.CharField(max_length=64)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="needs")
    item_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    quantity_fulfilled = models.PositiveIntegerField(default=0)
    priority = models.CharField(
        max_length=10,
        choices=choices(NeedPriority),
        default=encode(NeedPriority.MEDIUM),
    )
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=10,
        choices=choices(NeedStatus),
        default=encode(NeedStatus.ACTIVE),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["orphanage_id", "status"]),
            models.Index(fields=["category", "status"]),
        ]

    def __str__(self) -> str:
        return f"{self.item_name} x{self.quantity}"


class Donation(models.Model):
    """Persistence model for donations."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor_id = models.CharField(max_length=64)
    orphanage_id = models.CharField(max_length=64)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name="donations")
    need = models.ForeignKey(
        Need, on_delete=models.SET_NULL, null=True, blank=True, related_name="donations"
    )
    amount = models.DecimalField(
        max_digits=AMOUNT_MAX_DIGITS, decimal_places=AMOUNT_DECIMAL_PLACES, default=0
    )
    currency = models.CharField(max_length=3, default="USD")
    donation_type = models.CharField(
        max_length=10,
        choices=choices(DonationType),
        default=encode(DonationType.MONETARY),
    )
    item_description = models.CharField(max_length=500, blank=True, null=True)
    quantity = models.PositiveIntegerField(blank=True, null=True)
    status = models.CharField(
        max_length=10,
        choices=choices(DonationStatus),
        default=encode(DonationStatus.PENDING),
    )
    note = models.TextField(blank=True, null=True)
    is_anonymous = models.BooleanField(default=False)
    is_recurring = models.BooleanField(default=False)
    recurring_frequency = models.CharField(
        max_length=10, choices=choices(RecurringFrequency), blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["donor_id", "-created_at"]),
            models.Index(fields=["orphanage_id", "-created_at"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"{self.donation_type} donation {self.id} ({self.status})"
