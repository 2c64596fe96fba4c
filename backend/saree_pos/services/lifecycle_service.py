# Overview: Item status state machine; the only place a status field is changed.

"""
Item Lifecycle Service

STATE MACHINE:
    available <-> sold

    available: On the stall, can be added to a cart and sold
    sold:      Sold through checkout (or a direct one-line sell)

RULES:
1. available -> sold only via checkout/sell
2. sold -> available only via return
3. Same-state transitions are rejected with a typed error naming the
   current state (AlreadySold / AlreadyAvailable)
"""

from __future__ import annotations
from typing import Literal

from ..models import Item, ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD
from .exceptions import AlreadyAvailableError, AlreadySoldError


VALID_STATUSES = {ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD}
ItemStatus = Literal["available", "sold"]


class LifecycleError(ValueError):
    """Raised when a status value is not part of the state machine."""


class InvalidStatusError(LifecycleError):
    code = "INVALID_STATUS"


def validate_status(status: str) -> None:
    if status not in VALID_STATUSES:
        raise InvalidStatusError(
            f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VALID_STATUSES))}"
        )


def can_transition(from_status: str, to_status: str) -> bool:
    """
    Valid transitions:
    - available -> sold
    - sold -> available
    """
    validate_status(from_status)
    validate_status(to_status)

    valid_transitions = {
        (ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD),
        (ITEM_STATUS_SOLD, ITEM_STATUS_AVAILABLE),
    }
    return (from_status, to_status) in valid_transitions


def ensure_can_transition(item: Item, to_status: str) -> None:
    """Raise the typed failure for an illegal move without touching the item."""
    if can_transition(item.status, to_status):
        return
    if item.status == ITEM_STATUS_SOLD:
        raise AlreadySoldError(item.code)
    raise AlreadyAvailableError(item.code)


def transition(item: Item, to_status: str) -> Item:
    ensure_can_transition(item, to_status)
    item.status = to_status
    return item


def mark_sold(item: Item) -> Item:
    return transition(item, ITEM_STATUS_SOLD)


def mark_available(item: Item) -> Item:
    return transition(item, ITEM_STATUS_AVAILABLE)
