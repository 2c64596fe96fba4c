# Overview: Legacy flat string store and the one-time forward migration out of it.

"""
Legacy Store

Early builds kept both collections as JSON strings in a synchronous,
string-only key-value file. The durable store replaced it; at startup any key
the durable store lacks is copied forward from here once, after which the
durable store is authoritative. A factory reset removes the legacy keys so an
old copy can never be migrated back in.
"""

from __future__ import annotations

import dbm
import json
import logging
from concurrent.futures import Future
from typing import Any


logger = logging.getLogger(__name__)


class LegacyStore:
    """Synchronous string-to-string store backed by a dbm file."""

    def __init__(self, path: str):
        self.path = str(path)

    def get(self, key: str) -> str | None:
        try:
            with dbm.open(self.path, "r") as handle:
                raw = handle.get(key.encode("utf-8"))
        except dbm.error:
            # No legacy file on this device
            return None
        return raw.decode("utf-8") if raw is not None else None

    def set(self, key: str, value: str) -> None:
        with dbm.open(self.path, "c") as handle:
            handle[key.encode("utf-8")] = str(value).encode("utf-8")

    def remove(self, key: str) -> None:
        try:
            with dbm.open(self.path, "w") as handle:
                if key.encode("utf-8") in handle:
                    del handle[key.encode("utf-8")]
        except dbm.error:
            return


def migrate_key(durable_store, legacy_store: LegacyStore | None, key: str) -> Any:
    """
    Load one top-level value, migrating it from the legacy store if needed.

    Returns the value to use in memory (None when neither store holds it).
    The forward write is awaited so a crash right after startup cannot lose
    the migrated copy.
    """
    value = durable_store.get(key).result()
    if value is not None or legacy_store is None:
        return value

    raw = legacy_store.get(key)
    if raw is None:
        return None

    try:
        value = json.loads(raw)
    except ValueError:
        logger.warning("Legacy value for %s is not valid JSON; ignoring it", key)
        return None

    write: Future = durable_store.put(key, value)
    write.result()
    logger.info("Migrated %s from legacy storage (%d records)", key, len(value) if isinstance(value, list) else 1)
    return value
