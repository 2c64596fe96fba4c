# Overview: Inventory & sales ledger; owns both collections and their invariants.

"""
Ledger Service

The ledger is the single owner of the item and sale collections. Every
operation follows the same two steps:

1. validate and compute the change in memory (nothing mutated on failure)
2. apply it, then request a persist of the affected collection(s)

The in-memory collections are the source of truth for the session. Persist
requests are fire-and-forget full-collection rewrites; a failed write is
logged and the operator keeps selling. Until load() has finished, persist
requests are ignored so an empty startup state can never overwrite real data.

INVARIANTS:
- item codes are unique (upper-case) across the collection
- status changes only through lifecycle_service (available <-> sold)
- a return deletes every sale that references the returned code
- collections are kept newest-first
"""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from ..models import Item, Sale, ITEM_STATUS_SOLD, PAYMENT_CASH, VALID_PAYMENT_METHODS
from saree_pos.time_utils import local_timestamp, to_utc_z, utcnow
from . import export_service
from .cart_service import Cart
from .exceptions import (
    AlreadySoldError,
    DuplicateCodeError,
    IncorrectPinError,
    InvalidPaymentMethodError,
    ItemNotFoundError,
    LedgerError,
    NothingToExportError,
    StorageUnavailable,
)
from .identifier_service import generate_unique_code, normalize_code
from .import_service import ColumnMap, ImportPlan, parse_table, plan_import, resolve_columns
from .legacy_service import LegacyStore, migrate_key
from .lifecycle_service import ensure_can_transition, mark_available, mark_sold


logger = logging.getLogger(__name__)

COLLECTION_INVENTORY = "inventory"
COLLECTION_SALES = "sales"


@dataclass(frozen=True)
class LedgerConfig:
    reset_pin: int
    namespace: str
    inventory_key: str = "saree_inventory"
    sales_key: str = "saree_sales"

    @classmethod
    def from_mapping(cls, config) -> "LedgerConfig":
        return cls(
            reset_pin=int(config["RESET_PIN"]),
            namespace=config["STORE_NAMESPACE"],
            inventory_key=config["INVENTORY_KEY"],
            sales_key=config["SALES_KEY"],
        )


class Ledger:
    def __init__(self, config: LedgerConfig, store, legacy_store: LegacyStore | None = None):
        self.config = config
        self.store = store
        self.legacy_store = legacy_store
        self.items: list[Item] = []
        self.sales: list[Sale] = []
        self.loaded = False
        self._unreadable: set[str] = set()
        self._lock = threading.RLock()

    # =========================================================================
    # STARTUP & PERSISTENCE
    # =========================================================================

    def load(self) -> None:
        """
        Read both collections from the durable store, migrating any key the
        store lacks from the legacy store. Always ends with loaded=True.

        Each key is read on its own. A key that cannot be read stays empty in
        memory and is never written back this session, so the stored copy
        survives until the store is readable again.
        """
        with self._lock:
            for collection in (COLLECTION_INVENTORY, COLLECTION_SALES):
                key = self._key_for(collection)
                try:
                    records = migrate_key(self.store, self.legacy_store, key)
                except StorageUnavailable:
                    logger.exception("Database load error")
                    self._unreadable.add(collection)
                    continue
                if not records:
                    continue
                if collection == COLLECTION_INVENTORY:
                    self.items = [Item.from_dict(d) for d in records if isinstance(d, dict)]
                else:
                    self.sales = [Sale.from_dict(d) for d in records if isinstance(d, dict)]
            self.loaded = True
            logger.info("Ledger loaded: %d items, %d sales", len(self.items), len(self.sales))

    def _key_for(self, collection: str) -> str:
        if collection == COLLECTION_INVENTORY:
            return self.config.inventory_key
        if collection == COLLECTION_SALES:
            return self.config.sales_key
        raise LedgerError(f"Unknown collection '{collection}'")

    def _snapshot(self, collection: str) -> list[dict]:
        records = self.items if collection == COLLECTION_INVENTORY else self.sales
        return [record.to_dict() for record in records]

    def request_persist(self, *collections: str, force: bool = False) -> list[Future]:
        """Queue a full rewrite of each named collection. Returns the write futures."""
        if not self.loaded and not force:
            logger.debug("Skipping persist of %s before initial load", ", ".join(collections))
            return []
        futures = []
        for collection in collections:
            if collection in self._unreadable and not force:
                logger.warning("Not persisting %s: it could not be read at startup", collection)
                continue
            key = self._key_for(collection)
            future = self.store.put(key, self._snapshot(collection))
            future.add_done_callback(lambda f, key=key: self._log_write_failure(key, f))
            futures.append(future)
        return futures

    @staticmethod
    def _log_write_failure(key: str, future: Future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("Failed to persist %s: %s", key, exc)

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def _codes(self) -> set[str]:
        return {item.code for item in self.items}

    def get_item(self, code: str) -> Item | None:
        code = normalize_code(code)
        for item in self.items:
            if item.code == code:
                return item
        return None

    def _require_item(self, code: str) -> Item:
        item = self.get_item(code)
        if item is None:
            raise ItemNotFoundError(normalize_code(code))
        return item

    def list_items(self, status: str | None = None) -> list[Item]:
        if status is None:
            return list(self.items)
        return [item for item in self.items if item.status == status]

    def list_sales(self, item_code: str | None = None) -> list[Sale]:
        if item_code is None:
            return list(self.sales)
        code = normalize_code(item_code)
        return [sale for sale in self.sales if sale.sareeCode == code]

    # =========================================================================
    # STOCK
    # =========================================================================

    def add_item(self, fields: dict[str, Any]) -> Item:
        """
        Register a new available item. A blank code gets a generated
        SAR-<TYPE>-NNNN code; an existing code raises DuplicateCodeError.
        """
        with self._lock:
            code = normalize_code(fields.get("code"))
            if not code:
                code = generate_unique_code(fields.get("type"), self._codes())
            elif code in self._codes():
                raise DuplicateCodeError(code)

            data = dict(fields)
            data.update(
                id=uuid.uuid4().hex,
                code=code,
                status="available",
                dateAdded=to_utc_z(utcnow()),
            )
            item = Item.from_dict(data)
            self.items = [item] + self.items
            self.request_persist(COLLECTION_INVENTORY)
            logger.info("Added item %s", code)
            return item

    def remove_item(self, code: str) -> Item:
        """Take an item off the books. Its sales, if any, stay in the log."""
        with self._lock:
            item = self._require_item(code)
            self.items = [i for i in self.items if i is not item]
            self.request_persist(COLLECTION_INVENTORY)
            logger.info("Removed item %s", item.code)
            return item

    # =========================================================================
    # SELLING
    # =========================================================================

    @staticmethod
    def _validate_payment_method(payment_method: str) -> str:
        if payment_method not in VALID_PAYMENT_METHODS:
            raise InvalidPaymentMethodError(
                f"Invalid payment method '{payment_method}'. Must be one of: {', '.join(VALID_PAYMENT_METHODS)}"
            )
        return payment_method

    def checkout(self, cart: Cart, payment_method: str) -> list[Sale]:
        """
        Turn every cart line into a Sale and mark its item sold.

        All lines are resolved and checked before anything changes, so the
        batch applies completely or raises with state untouched. An empty
        cart is a no-op.
        """
        with self._lock:
            if cart.is_empty():
                return []
            method = self._validate_payment_method(payment_method)

            planned: list[tuple[Item, int | float]] = []
            seen: set[str] = set()
            for line in cart:
                item = self._require_item(line.code)
                if item.code in seen:
                    raise AlreadySoldError(item.code)
                ensure_can_transition(item, ITEM_STATUS_SOLD)
                seen.add(item.code)
                planned.append((item, line.effective_price()))

            sale_date = local_timestamp()
            new_sales = [
                Sale(
                    id=uuid.uuid4().hex,
                    sareeCode=item.code,
                    salePrice=price,
                    paymentMethod=method,
                    saleDate=sale_date,
                )
                for item, price in planned
            ]

            for item, _ in planned:
                mark_sold(item)
            self.sales = new_sales + self.sales
            cart.clear()
            self.request_persist(COLLECTION_INVENTORY, COLLECTION_SALES)
            logger.info("Checkout: %d item(s) via %s", len(new_sales), method)
            return new_sales

    def sell(self, code: str, payment_method: str = PAYMENT_CASH) -> Sale:
        """Sell one item at list price; a one-line checkout."""
        with self._lock:
            item = self._require_item(code)
            ensure_can_transition(item, ITEM_STATUS_SOLD)
            cart = Cart()
            cart.add(item)
            return self.checkout(cart, payment_method)[0]

    def process_return(self, code: str) -> Item:
        """
        Put a sold item back in stock and erase its sale records.

        The sale lines are deleted rather than reversed; the log only ever
        holds sales whose item is still out of stock (or was since removed).
        """
        with self._lock:
            item = self._require_item(code)
            mark_available(item)
            self.sales = [sale for sale in self.sales if sale.sareeCode != item.code]
            self.request_persist(COLLECTION_INVENTORY, COLLECTION_SALES)
            logger.info("Returned item %s", item.code)
            return item

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def import_batch(self, rows: Iterable[Sequence[str]], columns: ColumnMap) -> ImportPlan:
        with self._lock:
            plan = plan_import(rows, columns, self._codes())
            if plan.items:
                # Last row ends up first, matching newest-first for the whole batch
                self.items = list(reversed(plan.items)) + self.items
                self.request_persist(COLLECTION_INVENTORY)
            logger.info(
                "Import: %d added, %d duplicates, %d blank codes",
                plan.added, plan.duplicates, plan.blank,
            )
            return plan

    def import_table(self, text: str) -> ImportPlan:
        header, rows = parse_table(text)
        columns = resolve_columns(header)
        return self.import_batch(rows, columns)

    def export(self, collection: str) -> tuple[str, str]:
        """Return (filename, csv_text) for the named collection."""
        if collection == COLLECTION_INVENTORY:
            records, fieldnames, name = self.items, Item.field_names(), export_service.INVENTORY_EXPORT_NAME
        elif collection == COLLECTION_SALES:
            records, fieldnames, name = self.sales, Sale.field_names(), export_service.SALES_EXPORT_NAME
        else:
            raise LedgerError(f"Unknown collection '{collection}'")
        if not records:
            raise NothingToExportError("No data available to export!")
        return export_service.export_filename(name), export_service.export_collection(records, fieldnames)

    # =========================================================================
    # FACTORY RESET
    # =========================================================================

    def _pin_matches(self, pin: Any) -> bool:
        try:
            return int(str(pin).strip()) == self.config.reset_pin
        except (TypeError, ValueError):
            return False

    def factory_reset(self, pin: Any) -> None:
        """
        Wipe both collections, store empty ones, and delete the legacy keys.
        Callers must have confirmed with the operator first.
        """
        with self._lock:
            if not self._pin_matches(pin):
                raise IncorrectPinError()
            self.items = []
            self.sales = []
            self.request_persist(COLLECTION_INVENTORY, COLLECTION_SALES, force=True)
            self._unreadable.clear()
            if self.legacy_store is not None:
                self.legacy_store.remove(self.config.inventory_key)
                self.legacy_store.remove(self.config.sales_key)
            logger.warning("Factory reset completed")

    def flush(self, timeout: float | None = None) -> None:
        """Wait for outstanding store writes; used at shutdown and in tests."""
        self.store.drain(timeout)
