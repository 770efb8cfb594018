"""Form validation for donation and need input.

Serializers validate raw UI values (strings, numbers, bools or enum members)
and produce typed data. The ``validate_*`` helpers flatten serializer errors
into one human-readable message per field; an empty dict means valid.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from rest_framework import serializers

from donations.domain import (
    DonationType,
    NeedChanges,
    NeedPriority,
    NewDonation,
    RecurringFrequency,
)
from donations.domain.models import AMOUNT_DECIMAL_PLACES, AMOUNT_MAX_DIGITS

FieldErrors = dict[str, str]

AMOUNT_ERROR = "Please enter a valid amount"
ITEM_DESCRIPTION_ERROR = "Please describe the items you're donating"
QUANTITY_ERROR = "Please enter a valid quantity"
RECURRING_FREQUENCY_ERROR = "Please select a recurring frequency"
CATEGORY_ERROR = "Please select a category"
ITEM_NAME_ERROR = "Please enter item name"


def parse_amount(value: Any) -> Decimal | None:
    """Parse a decimal amount; None when missing or not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def fits_amount_column(amount: Decimal) -> bool:
    """True when ``amount`` can be stored without rounding or overflow."""
    exponent = amount.normalize().as_tuple().exponent
    places = max(-exponent, 0)
    whole_digits = max(amount.adjusted() + 1, 0)
    return (
        places <= AMOUNT_DECIMAL_PLACES
        and whole_digits <= AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES
    )


def parse_positive_int(value: Any) -> int | None:
    """Parse a strictly positive integer; None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).strip())
        except ValueError:
            return None
    return number if number > 0 else None


def _is_blank(value: Any) -> bool:
    return value is None or not str(value).strip()


class RawValueField(serializers.Field):
    """Passes the submitted value through untouched; parsed in ``validate``."""

    def to_internal_value(self, data: Any) -> Any:
        return data

    def to_representation(self, value: Any) -> Any:
        return value


class EnumChoiceField(serializers.Field):
    """Accepts an enum member or its name, case-insensitively."""

    default_error_messages = {
        "invalid_choice": '"{input}" is not a valid choice.',
    }

    def __init__(self, enum_cls: type[Enum], allow_blank: bool = False, **kwargs: Any) -> None:
        self.enum_cls = enum_cls
        self.allow_blank = allow_blank
        super().__init__(**kwargs)

    def to_internal_value(self, data: Any) -> Enum | None:
        if isinstance(data, self.enum_cls):
            return data
        if isinstance(data, str):
            text = data.strip()
            if not text and self.allow_blank:
                return None
            member = self.enum_cls.__members__.get(text.upper())
            if member is not None:
                return member
        self.fail("invalid_choice", input=data)

    def to_representation(self, value: Enum) -> str:
        return value.name


class DonationFormSerializer(serializers.Serializer):
    """User-entered donation fields."""

    donation_type = EnumChoiceField(DonationType, default=DonationType.MONETARY)
    amount = RawValueField(required=False, allow_null=True)
    item_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    quantity = RawValueField(required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    is_anonymous = serializers.BooleanField(default=False)
    is_recurring = serializers.BooleanField(default=False)
    recurring_frequency = EnumChoiceField(
        RecurringFrequency, required=False, allow_null=True, allow_blank=True
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        errors: FieldErrors = {}
        amount = parse_amount(attrs.get("amount"))
        quantity = parse_positive_int(attrs.get("quantity"))
        description = (attrs.get("item_description") or "").strip()

        if attrs["donation_type"] is DonationType.MONETARY:
            if amount is None or amount <= 0 or not fits_amount_column(amount):
                errors["amount"] = AMOUNT_ERROR
        else:
            if not description:
                errors["item_description"] = ITEM_DESCRIPTION_ERROR
            if quantity is None:
                errors["quantity"] = QUANTITY_ERROR
            # Amount is optional for goods; keep it only as an estimated value.
            if amount is None or amount < 0 or not fits_amount_column(amount):
                amount = Decimal("0")

        if attrs["is_recurring"] and attrs.get("recurring_frequency") is None:
            errors["recurring_frequency"] = RECURRING_FREQUENCY_ERROR

        if errors:
            raise serializers.ValidationError(errors)

        attrs["amount"] = amount
        attrs["quantity"] = quantity
        attrs["item_description"] = description or None
        attrs["note"] = (attrs.get("note") or "").strip() or None
        if not attrs["is_recurring"]:
            attrs["recurring_frequency"] = None
        return attrs


class NewDonationSerializer(DonationFormSerializer):
    """Donation form plus the identifiers supplied by the calling screen.

    ``save()`` returns a ``NewDonation``; nothing is persisted here.
    """

    donor_id = serializers.CharField()
    orphanage_id = serializers.CharField()
    category_id = serializers.CharField()
    need_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    currency = serializers.CharField(required=False, min_length=3, max_length=3)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        attrs = super().validate(attrs)
        attrs["need_id"] = (attrs.get("need_id") or "").strip() or None
        attrs["currency"] = (
            attrs.get("currency") or self.context.get("default_currency", "USD")
        ).upper()
        return attrs

    def create(self, validated_data: dict[str, Any]) -> NewDonation:
        return NewDonation(**validated_data)


class NeedFormSerializer(serializers.Serializer):
    """Need fields. With ``partial=True`` only the supplied fields are checked."""

    category_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    item_name = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    quantity = RawValueField(required=False, allow_null=True)
    priority = EnumChoiceField(NeedPriority, default=NeedPriority.MEDIUM)
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )

    def _checks(self, name: str, attrs: dict[str, Any]) -> bool:
        return not self.partial or name in attrs

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:
        errors: FieldErrors = {}
        if self._checks("category_id", attrs) and _is_blank(attrs.get("category_id")):
            errors["category_id"] = CATEGORY_ERROR
        if self._checks("item_name", attrs) and _is_blank(attrs.get("item_name")):
            errors["item_name"] = ITEM_NAME_ERROR
        if self._checks("quantity", attrs):
            quantity = parse_positive_int(attrs.get("quantity"))
            if quantity is None:
                errors["quantity"] = QUANTITY_ERROR
            else:
                attrs["quantity"] = quantity

        if errors:
            raise serializers.ValidationError(errors)

        if "description" in attrs:
            attrs["description"] = (attrs["description"] or "").strip()
        return attrs

    def to_changes(self) -> NeedChanges:
        data = self.validated_data
        return NeedChanges(
            item_name=data.get("item_name"),
            quantity=data.get("quantity"),
            priority=data.get("priority"),
            description=data.get("description"),
        )


def flatten_errors(errors: Mapping[str, Any]) -> FieldErrors:
    """Keep the first message reported for each field."""
    flat: FieldErrors = {}
    for name, messages in errors.items():
        if isinstance(messages, (list, tuple)) and messages:
            flat[name] = str(messages[0])
        else:
            flat[name] = str(messages)
    return flat


def _errors_for(serializer: serializers.Serializer) -> FieldErrors:
    if serializer.is_valid():
        return {}
    return flatten_errors(serializer.errors)


def validate_donation_form(form: Mapping[str, Any]) -> FieldErrors:
    return _errors_for(DonationFormSerializer(data=form))


def validate_need_form(form: Mapping[str, Any]) -> FieldErrors:
    return _errors_for(NeedFormSerializer(data=form))
