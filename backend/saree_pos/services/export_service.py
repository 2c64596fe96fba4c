# Overview: CSV export of the inventory and sales collections.

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, Sequence

from saree_pos.time_utils import export_date_stamp


INVENTORY_EXPORT_NAME = "Inventory_Master"
SALES_EXPORT_NAME = "Sales_Log"


def export_collection(records: Iterable, fieldnames: Sequence[str]) -> str:
    """
    Serialize records (anything with to_dict()) in their current order.

    Header first, then one row per record. Every cell is quoted and embedded
    quotes are doubled, so names with commas or quotes survive a round trip.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(fieldnames)
    for record in records:
        data = record.to_dict()
        writer.writerow(["" if data.get(name) is None else str(data.get(name)) for name in fieldnames])
    return buffer.getvalue()


def export_filename(collection_name: str, when: datetime | None = None) -> str:
    return f"{collection_name}_{export_date_stamp(when)}.csv"


def parse_export(text: str) -> list[dict[str, str]]:
    """Read an exported table back into dicts keyed by header."""
    return list(csv.DictReader(io.StringIO(text)))
