"""Status transition tables for donations and needs."""

from donations.domain.errors import IllegalTransitionError
from donations.domain.value_objects import DonationStatus, NeedStatus

DONATION_TRANSITIONS: dict[DonationStatus, frozenset[DonationStatus]] = {
    DonationStatus.PENDING: frozenset({DonationStatus.CONFIRMED, DonationStatus.CANCELLED}),
    DonationStatus.CONFIRMED: frozenset({DonationStatus.COMPLETED, DonationStatus.CANCELLED}),
    DonationStatus.COMPLETED: frozenset(),
    DonationStatus.CANCELLED: frozenset(),
}

NEED_TRANSITIONS: dict[NeedStatus, frozenset[NeedStatus]] = {
    NeedStatus.ACTIVE: frozenset({NeedStatus.FULFILLED, NeedStatus.CANCELLED}),
    NeedStatus.FULFILLED: frozenset(),
    NeedStatus.CANCELLED: frozenset(),
}


def can_transition_donation(current: DonationStatus, target: DonationStatus) -> bool:
    return target in DONATION_TRANSITIONS[current]


def can_transition_need(current: NeedStatus, target: NeedStatus) -> bool:
    return target in NEED_TRANSITIONS[current]


def ensure_donation_transition(current: DonationStatus, target: DonationStatus) -> None:
    """Raise IllegalTransitionError unless ``current -> target`` is allowed."""
    if not can_transition_donation(current, target):
        raise IllegalTransitionError("donation", current, target)


def ensure_need_transition(current: NeedStatus, target: NeedStatus) -> None:
    """Raise IllegalTransitionError unless ``current -> target`` is allowed."""
    if not can_transition_need(current, target):
        raise IllegalTransitionError("need", current, target)
