"""
Pytest fixtures for the stall ledger tests.

Provides an in-memory store double for fast ledger tests and a fully wired
Flask app (in-memory SQLite, temporary legacy store) for store, migration and
route tests.
"""

import copy
from concurrent.futures import Future

import pytest

from saree_pos import create_app
from saree_pos.extensions import LEDGER_EXTENSION, POS_SESSION_EXTENSION
from saree_pos.services.exceptions import StorageUnavailable
from saree_pos.services.legacy_service import LegacyStore
from saree_pos.services.ledger_service import Ledger, LedgerConfig


TEST_PIN = 4321


def _resolved(value=None, exc=None) -> Future:
    future = Future()
    if exc is not None:
        future.set_exception(exc)
    else:
        future.set_result(value)
    return future


class MemoryStore:
    """Synchronous stand-in for DurableStore; futures are already resolved."""

    def __init__(self, data=None, fail_reads=False, fail_writes=False, unreadable=()):
        self.data = copy.deepcopy(data) if data else {}
        self.fail_reads = fail_reads
        self.unreadable = set(unreadable)
        self.fail_writes = fail_writes
        self.writes = []

    def get(self, key):
        if self.fail_reads or key in self.unreadable:
            return _resolved(exc=StorageUnavailable("store offline"))
        return _resolved(copy.deepcopy(self.data.get(key)))

    def put(self, key, value):
        self.writes.append(key)
        if self.fail_writes:
            return _resolved(exc=StorageUnavailable("disk full"))
        self.data[key] = copy.deepcopy(value)
        return _resolved()

    def delete(self, key):
        self.data.pop(key, None)
        return _resolved()

    def drain(self, timeout=None):
        return None


@pytest.fixture
def ledger_config():
    return LedgerConfig(reset_pin=TEST_PIN, namespace="test")


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def legacy_store(tmp_path):
    return LegacyStore(str(tmp_path / "legacy"))


@pytest.fixture
def ledger(ledger_config, memory_store, legacy_store):
    """Loaded ledger over an empty in-memory store."""
    ledger = Ledger(ledger_config, memory_store, legacy_store)
    ledger.load()
    return ledger


@pytest.fixture
def add_saree(ledger):
    def _add(code, list_price=500, alt_price=400, **fields):
        return ledger.add_item({"code": code, "listPrice": list_price, "altPrice": alt_price, **fields})
    return _add


@pytest.fixture
def app_factory(tmp_path):
    """Build apps on demand so a test can seed the legacy store first."""
    apps = []

    def _make(**overrides):
        config = {
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'SQLALCHEMY_TRACK_MODIFICATIONS': False,
            'LEGACY_STORE_PATH': str(tmp_path / "legacy"),
            'STORE_NAMESPACE': 'test',
            'RESET_PIN': TEST_PIN,
        }
        config.update(overrides)
        app = create_app(config)
        apps.append(app)
        return app

    yield _make

    for app in apps:
        app.extensions[LEDGER_EXTENSION].store.shutdown()


@pytest.fixture
def app(app_factory):
    return app_factory()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ledger(app):
    return app.extensions[LEDGER_EXTENSION]


@pytest.fixture
def pos_session(app):
    return app.extensions[POS_SESSION_EXTENSION]
