from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from saree_pos.validation import TEXT_NOT_AVAILABLE, TEXT_UNKNOWN_SHOP, to_amount, to_text


ITEM_STATUS_AVAILABLE = "available"
ITEM_STATUS_SOLD = "sold"


@dataclass
class Item:
    """
    One unit of sellable stock.

    Field order is the serialized (and exported) column order. Key names stay
    camelCase so collections written by older builds decode unchanged.
    """
    id: str
    code: str
    name: str = TEXT_NOT_AVAILABLE
    type: str = TEXT_NOT_AVAILABLE
    shopName: str = TEXT_UNKNOWN_SHOP
    shopCode: str = TEXT_NOT_AVAILABLE
    costPrice: int | float = 0
    listPrice: int | float = 0
    altPrice: int | float = 0
    status: str = ITEM_STATUS_AVAILABLE
    dateAdded: str = ""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @property
    def is_available(self) -> bool:
        return self.status == ITEM_STATUS_AVAILABLE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "type": self.type,
            "shopName": self.shopName,
            "shopCode": self.shopCode,
            "costPrice": self.costPrice,
            "listPrice": self.listPrice,
            "altPrice": self.altPrice,
            "status": self.status,
            "dateAdded": self.dateAdded,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        # Early builds stored a single "price" per saree
        list_price = data.get("listPrice", data.get("mrp", data.get("price")))
        status = str(data.get("status") or ITEM_STATUS_AVAILABLE).lower()
        return cls(
            id=str(data.get("id") or ""),
            code=str(data.get("code") or "").strip().upper(),
            name=to_text(data.get("name"), TEXT_NOT_AVAILABLE),
            type=to_text(data.get("type"), TEXT_NOT_AVAILABLE),
            shopName=to_text(data.get("shopName"), TEXT_UNKNOWN_SHOP),
            shopCode=to_text(data.get("shopCode"), TEXT_NOT_AVAILABLE),
            costPrice=to_amount(data.get("costPrice")),
            listPrice=to_amount(list_price),
            altPrice=to_amount(data.get("altPrice")),
            status=ITEM_STATUS_SOLD if status == ITEM_STATUS_SOLD else ITEM_STATUS_AVAILABLE,
            dateAdded=str(data.get("dateAdded") or ""),
        )
