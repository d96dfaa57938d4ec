"""Shared fixtures for the TV Italia tests."""

import os
import sys

# Keep the default engine off the real data directory
os.environ.setdefault("DATABASE_URL", "sqlite://")
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tv_italia.catalog import ChannelCatalog
from tv_italia.models import init_db
from tv_italia.player import create_handler
from tv_italia.store import CatalogStore


class FakeStreamClient:
    """Stream client that reports only what the test tells it to."""

    def __init__(self, registry):
        self.registry = registry
        self.url = None
        self.on_ready = None
        self.on_error = None
        self.destroyed = False
        registry.acquired += 1
        registry.clients.append(self)

    def load(self, url, on_ready, on_error):
        self.url = url
        self.on_ready = on_ready
        self.on_error = on_error
        if self.registry.auto_ready:
            on_ready()

    def destroy(self):
        if not self.destroyed:
            self.destroyed = True
            self.registry.released += 1

    # Test helpers
    def ready(self):
        self.on_ready()

    def fail(self, message="manifest load error", fatal=True):
        self.on_error(message, fatal)


class StreamClients:
    def __init__(self):
        self.acquired = 0
        self.released = 0
        self.auto_ready = False
        self.clients = []

    def create(self):
        return FakeStreamClient(self)

    def handler_factory(self, classification):
        return create_handler(classification, client_factory=self.create)

    @property
    def last(self):
        return self.clients[-1]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory):
    return CatalogStore(session_factory)


@pytest.fixture
def catalog(store):
    catalog = ChannelCatalog(store, key="test_catalog")
    catalog.load()
    return catalog


@pytest.fixture
def stream_clients():
    return StreamClients()
