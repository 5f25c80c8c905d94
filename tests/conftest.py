"""pytest configuration and fixtures for catalog-browser tests."""

import time

import pytest
from PyQt6.QtCore import QCoreApplication

from catalog_browser.io import InMemoryDocumentStore
from catalog_browser.protocols import (
    CatalogConfig,
    set_catalog_config,
    register_semantic_search_service,
)


@pytest.fixture(scope="session")
def qapp():
    """Create QCoreApplication instance for tests."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_registries():
    """Keep global config and service registrations from leaking between tests."""
    yield
    set_catalog_config(None)
    register_semantic_search_service(None)


@pytest.fixture
def wait_until(qapp):
    """Pump the event loop until a condition holds or the timeout expires."""
    def _wait_until(condition, timeout_ms=2000):
        deadline = time.monotonic() + timeout_ms / 1000
        while time.monotonic() < deadline:
            qapp.processEvents()
            if condition():
                return True
            time.sleep(0.005)
        qapp.processEvents()
        return condition()
    return _wait_until


@pytest.fixture
def pump_events(qapp):
    """Pump the event loop for a fixed duration."""
    def _pump(duration_ms):
        deadline = time.monotonic() + duration_ms / 1000
        while time.monotonic() < deadline:
            qapp.processEvents()
            time.sleep(0.005)
        qapp.processEvents()
    return _pump


@pytest.fixture
def config():
    """Config with short notification timings so timer tests stay fast."""
    return CatalogConfig(notification_duration_ms=80, notification_fade_ms=30)


@pytest.fixture
def store():
    """Two items and two categories, as in the basic catalog scenario."""
    store = InMemoryDocumentStore()
    store.put("categories", "c1", {"name": "Fruit", "createdAt": 1})
    store.put("categories", "c2", {"name": "Tools", "createdAt": 2})
    store.put("items", "1", {
        "title": "Apple Widget",
        "imageUrl": "https://example.com/apple.png",
        "link": "https://example.com/apple",
        "categoryId": "c1",
        "createdAt": 2,
    })
    store.put("items", "2", {
        "title": "Banana Tool",
        "imageUrl": "",
        "link": "https://example.com/banana",
        "categoryId": "c2",
        "createdAt": 1,
    })
    return store


class FakeSemanticService:
    """Semantic service double returning canned ids or raising a canned error."""

    def __init__(self, item_ids=None, error=None):
        self.item_ids = list(item_ids or [])
        self.error = error
        self.calls = []

    def find_matching_item_ids(self, query, candidates):
        self.calls.append((query, list(candidates)))
        if self.error is not None:
            raise self.error
        return list(self.item_ids)


class ManualTaskManager:
    """Task manager double: queues work until the test completes it."""

    def __init__(self):
        self.pending = []
        self.cleaned_up = False

    @property
    def is_running(self):
        return bool(self.pending)

    def run(self, target, args=(), on_success=None, on_error=None):
        self.pending.append((target, args, on_success, on_error))
        return None

    def complete(self, index=0):
        target, args, on_success, on_error = self.pending.pop(index)
        try:
            result = target(*args)
        except Exception as e:
            if on_error:
                on_error(e)
            return
        if on_success:
            on_success(result)

    def cleanup(self):
        self.cleaned_up = True


@pytest.fixture
def semantic_service():
    return FakeSemanticService()


@pytest.fixture
def task_manager():
    return ManualTaskManager()
