"""Encode/decode boundary between domain enums and stored strings.

Every table is exhaustive over its enum; a missing member fails at import.
Unknown stored values raise ValueError.
"""

from enum import Enum
from typing import TypeVar

from donations.domain.value_objects import (
    DonationStatus,
    DonationType,
    NeedPriority,
    NeedStatus,
    RecurringFrequency,
)

E = TypeVar("E", bound=Enum)

DONATION_TYPE_CODES = {
    DonationType.MONETARY: "monetary",
    DonationType.IN_KIND: "in_kind",
}

DONATION_STATUS_CODES = {
    DonationStatus.PENDING: "pending",
    DonationStatus.CONFIRMED: "confirmed",
    DonationStatus.COMPLETED: "completed",
    DonationStatus.CANCELLED: "cancelled",
}

RECURRING_FREQUENCY_CODES = {
    RecurringFrequency.WEEKLY: "weekly",
    RecurringFrequency.MONTHLY: "monthly",
    RecurringFrequency.QUARTERLY: "quarterly",
    RecurringFrequency.YEARLY: "yearly",
}

NEED_PRIORITY_CODES = {
    NeedPriority.LOW: "LOW",
    NeedPriority.MEDIUM: "MEDIUM",
    NeedPriority.HIGH: "HIGH",
    NeedPriority.URGENT: "URGENT",
}

NEED_STATUS_CODES = {
    NeedStatus.ACTIVE: "active",
    NeedStatus.FULFILLED: "fulfilled",
    NeedStatus.CANCELLED: "cancelled",
}

_TABLES: dict[type[Enum], dict] = {
    DonationType: DONATION_TYPE_CODES,
    DonationStatus: DONATION_STATUS_CODES,
    RecurringFrequency: RECURRING_FREQUENCY_CODES,
    NeedPriority: NEED_PRIORITY_CODES,
    NeedStatus: NEED_STATUS_CODES,
}

for _enum, _table in _TABLES.items():
    if set(_table) != set(_enum):
        raise RuntimeError(f"Codec table for {_enum.__name__} is not exhaustive")

_REVERSE: dict[type[Enum], dict[str, Enum]] = {
    enum_cls: {code: member for member, code in table.items()}
    for enum_cls, table in _TABLES.items()
}


def encode(member: Enum) -> str:
    """Return the stored string for an enum member."""
    return _TABLES[type(member)][member]


def decode(enum_cls: type[E], code: str) -> E:
    """Return the enum member stored as ``code``."""
    try:
        return _REVERSE[enum_cls][code]
    except KeyError:
        raise ValueError(f"Unknown {enum_cls.__name__} value: {code!r}") from None


def choices(enum_cls: type[Enum]) -> list[tuple[str, str]]:
    """Django ``choices`` for a stored enum column."""
    return [(code, member.name.replace("_", " ").title()) for member, code in _TABLES[enum_cls].items()]
