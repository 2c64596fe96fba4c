from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from saree_pos.validation import to_amount


PAYMENT_CASH = "Cash"
PAYMENT_UPI = "UPI"
VALID_PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_UPI)


@dataclass
class Sale:
    """
    A completed transaction line.

    sareeCode references an item code but does not own the item: the item may
    later be removed from stock while its sale stays in the log.
    """
    id: str
    sareeCode: str
    salePrice: int | float
    paymentMethod: str
    saleDate: str

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sareeCode": self.sareeCode,
            "salePrice": self.salePrice,
            "paymentMethod": self.paymentMethod,
            "saleDate": self.saleDate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Sale":
        method = str(data.get("paymentMethod") or PAYMENT_CASH)
        return cls(
            id=str(data.get("id") or ""),
            sareeCode=str(data.get("sareeCode") or "").strip().upper(),
            salePrice=to_amount(data.get("salePrice", data.get("price"))),
            paymentMethod=method if method in VALID_PAYMENT_METHODS else PAYMENT_CASH,
            saleDate=str(data.get("saleDate") or ""),
        )
