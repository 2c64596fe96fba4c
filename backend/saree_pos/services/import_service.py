# Overview: Bulk stock import; parses a text table and plans the items to add.

"""
Import Service

Three phases, each usable on its own:

1. parse_table(text)          -> header + rows (delimiter auto-detected)
2. resolve_columns(header)    -> ColumnMap (field -> column index or None)
3. plan_import(rows, columns, existing_codes) -> ImportPlan

Nothing here touches ledger state. The ledger commits an ImportPlan in one
step, so an import either adds every accepted row or none of them.
"""

from __future__ import annotations

import csv
import io
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..models import Item, ITEM_STATUS_AVAILABLE, ITEM_STATUS_SOLD
from saree_pos.time_utils import to_utc_z, utcnow
from saree_pos.validation import TEXT_NOT_AVAILABLE, TEXT_UNKNOWN_SHOP, to_amount, to_text
from .exceptions import ImportValidationError, MissingRequiredColumnError
from .identifier_service import normalize_code


PIPE = "|"
COMMA = ","

SHOP_NAME_HEADERS = {"shop_name", "shop name", "shopname"}
SHOP_CODE_HEADERS = {"shop_code", "shop code", "shopcode"}
PRODUCT_CODE_HEADERS = {"product_code", "product code", "productcode", "code"}
NAME_HEADERS = {"name", "design", "saree name"}
TYPE_HEADERS = {"type", "material"}


@dataclass(frozen=True)
class ColumnMap:
    code: int
    shop_name: int | None = None
    shop_code: int | None = None
    name: int | None = None
    type: int | None = None
    cost_price: int | None = None
    list_price: int | None = None
    alt_price: int | None = None
    status: int | None = None


@dataclass
class ImportPlan:
    items: list[Item] = field(default_factory=list)
    duplicates: int = 0
    blank: int = 0

    @property
    def added(self) -> int:
        return len(self.items)

    def to_dict(self) -> dict:
        return {
            "addedCount": self.added,
            "duplicateCount": self.duplicates,
            "blankCount": self.blank,
        }


def decode_table(raw: bytes) -> str:
    """Decode an uploaded import file. A leading UTF-8 BOM is dropped."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ImportValidationError("Import file must be UTF-8 text") from exc


def detect_delimiter(text: str) -> str:
    return PIPE if PIPE in text else COMMA


def parse_table(text: str) -> tuple[list[str], list[list[str]]]:
    """
    Split raw import text into a header row and data rows.

    Quoted cells with doubled quotes are honoured for whichever delimiter was
    detected. Blank lines are dropped.
    """
    if text is None or not text.strip():
        raise ImportValidationError("Import file is empty")
    delimiter = detect_delimiter(text)
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")), delimiter=delimiter)
    table = [row for row in reader if any(cell.strip() for cell in row)]
    if not table:
        raise ImportValidationError("Import file is empty")
    return table[0], table[1:]


def _first(headers: Sequence[str], matches) -> int | None:
    for index, header in enumerate(headers):
        if matches(header):
            return index
    return None


def resolve_columns(header: Sequence[str]) -> ColumnMap:
    headers = [h.replace('"', "").strip().lower() for h in header]

    code = _first(headers, lambda h: h in PRODUCT_CODE_HEADERS)
    if code is None:
        raise MissingRequiredColumnError("product code")

    return ColumnMap(
        code=code,
        shop_name=_first(headers, lambda h: h in SHOP_NAME_HEADERS),
        shop_code=_first(headers, lambda h: h in SHOP_CODE_HEADERS),
        name=_first(headers, lambda h: h in NAME_HEADERS),
        type=_first(headers, lambda h: h in TYPE_HEADERS),
        cost_price=_first(headers, lambda h: h == "cp" or "cost" in h),
        list_price=_first(headers, lambda h: h == "mrp"),
        alt_price=_first(headers, lambda h: "asp60" in h or h == "asp"),
        status=_first(headers, lambda h: "status" in h),
    )


def _cell(row: Sequence[str], index: int | None) -> str | None:
    if index is None or index >= len(row):
        return None
    return row[index].strip()


def status_from_text(value: str | None) -> str:
    if value and "sold" in value.lower():
        return ITEM_STATUS_SOLD
    return ITEM_STATUS_AVAILABLE


def build_item(row: Sequence[str], columns: ColumnMap, code: str, date_added: str) -> Item:
    return Item(
        id=uuid.uuid4().hex,
        code=code,
        name=to_text(_cell(row, columns.name), TEXT_NOT_AVAILABLE),
        type=to_text(_cell(row, columns.type), TEXT_NOT_AVAILABLE),
        shopName=to_text(_cell(row, columns.shop_name), TEXT_UNKNOWN_SHOP),
        shopCode=to_text(_cell(row, columns.shop_code), TEXT_NOT_AVAILABLE),
        costPrice=to_amount(_cell(row, columns.cost_price)),
        listPrice=to_amount(_cell(row, columns.list_price)),
        altPrice=to_amount(_cell(row, columns.alt_price)),
        status=status_from_text(_cell(row, columns.status)),
        dateAdded=date_added,
    )


def plan_import(
    rows: Iterable[Sequence[str]],
    columns: ColumnMap,
    existing_codes: Iterable[str],
) -> ImportPlan:
    """
    Decide which rows become items. Duplicates are counted against the
    existing stock and against rows seen earlier in this same batch.
    """
    plan = ImportPlan()
    seen = set(existing_codes)
    date_added = to_utc_z(utcnow())

    for row in rows:
        code = normalize_code(_cell(row, columns.code))
        if not code:
            plan.blank += 1
            continue
        if code in seen:
            plan.duplicates += 1
            continue
        seen.add(code)
        plan.items.append(build_item(row, columns, code, date_added))

    return plan
