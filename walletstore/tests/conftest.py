import os

import pytest

from walletstore.core.address_store import AddressStore, MissingCategoryPolicy
from walletstore.core.blockchain import BlockchainState
from walletstore.core.events import EventBus


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep WALLETSTORE_* settings from the host out of the tests"""
    for key in list(os.environ):
        if key.startswith("WALLETSTORE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("WALLETSTORE_ENDPOINT", "https://wallet.example")


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def blockchain():
    return BlockchainState("https://wallet.example", current_block_height=105)


@pytest.fixture
def store(bus, blockchain):
    address_store = AddressStore(blockchain=blockchain,
                                 missing_category_policy=MissingCategoryPolicy.ABORT_BATCH)
    address_store.bind(bus)
    return address_store


@pytest.fixture
def recorded(bus):
    """Collects every payload dispatched for an event name"""
    events = {}

    def watch(name):
        events.setdefault(name, [])
        bus.subscribe(name, lambda payload: events[name].append(payload))
        return events[name]

    return watch
