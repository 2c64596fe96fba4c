# Overview: Transient point-of-sale cart; never persisted.

"""
Cart Service

A cart exists only between entering scan mode and completing a sale. Lines
hold a snapshot of the item taken when it was added plus the chosen price
tier. Adding never raises: the caller gets a tagged CartResult it can turn
into a toast.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
from typing import Any

from ..models import Item
from saree_pos.validation import to_amount


PRICE_LIST = "ListPrice"
PRICE_ALTERNATE = "AlternatePrice"
PRICE_CUSTOM = "Custom"
VALID_PRICE_SELECTIONS = (PRICE_LIST, PRICE_ALTERNATE, PRICE_CUSTOM)

REASON_NOT_FOUND = "not_found"
REASON_ALREADY_SOLD = "already_sold"
REASON_ALREADY_IN_CART = "already_in_cart"


@dataclass
class CartLine:
    item: Item
    priceSelection: str = PRICE_LIST
    customPrice: Any = None

    @property
    def code(self) -> str:
        return self.item.code

    def effective_price(self) -> int | float:
        if self.priceSelection == PRICE_ALTERNATE:
            return self.item.altPrice
        if self.priceSelection == PRICE_CUSTOM:
            return to_amount(self.customPrice)
        return self.item.listPrice

    def to_dict(self) -> dict:
        return {
            "item": self.item.to_dict(),
            "priceSelection": self.priceSelection,
            "customPrice": self.customPrice,
            "effectivePrice": self.effective_price(),
        }


@dataclass(frozen=True)
class CartResult:
    ok: bool
    code: str
    reason: str | None = None
    line: CartLine | None = None

    @property
    def message(self) -> str:
        if self.ok:
            return f"{self.code} added to cart"
        if self.reason == REASON_NOT_FOUND:
            return f"Code {self.code} not found in inventory!"
        if self.reason == REASON_ALREADY_SOLD:
            return f"Alert: {self.code} is already marked as SOLD!"
        return f"{self.code} is already in the cart"


class Cart:
    def __init__(self):
        self.lines: list[CartLine] = []

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def is_empty(self) -> bool:
        return not self.lines

    def codes(self) -> list[str]:
        return [line.code for line in self.lines]

    def add(self, item: Item | None, code: str = "") -> CartResult:
        """
        Stage an item for sale. ``item`` is the ledger lookup result for
        ``code`` (None when the code is unknown).
        """
        if item is None:
            return CartResult(ok=False, code=code, reason=REASON_NOT_FOUND)
        if not item.is_available:
            return CartResult(ok=False, code=item.code, reason=REASON_ALREADY_SOLD)
        if item.code in self.codes():
            return CartResult(ok=False, code=item.code, reason=REASON_ALREADY_IN_CART)

        line = CartLine(item=deepcopy(item))
        self.lines.append(line)
        return CartResult(ok=True, code=item.code, line=line)

    def update_selection(self, index: int, selection: str, custom_value: Any = None) -> CartLine:
        if selection not in VALID_PRICE_SELECTIONS:
            raise ValueError(
                f"Invalid price selection '{selection}'. Must be one of: {', '.join(VALID_PRICE_SELECTIONS)}"
            )
        line = self.lines[index]
        line.priceSelection = selection
        if custom_value is not None or selection != PRICE_CUSTOM:
            line.customPrice = custom_value
        return line

    def remove_line(self, index: int) -> CartLine:
        return self.lines.pop(index)

    def clear(self) -> None:
        self.lines.clear()

    def total(self) -> int | float:
        return to_amount(sum(line.effective_price() for line in self.lines))

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "count": len(self.lines),
            "total": self.total(),
        }
