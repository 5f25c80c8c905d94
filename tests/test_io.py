"""Tests for the document source boundary."""


def test_subscribe_pushes_ordered_snapshot_immediately(store):
    snapshots = []
    store.subscribe("items", "createdAt", True, snapshots.append, lambda e: None)

    assert len(snapshots) == 1
    assert [doc.id for doc in snapshots[0]] == ["1", "2"]
    assert snapshots[0][0].get("title") == "Apple Widget"


def test_ascending_order_and_missing_order_field_last(store):
    store.put("categories", "c0", {"createdAt": 0})
    snapshot = store.snapshot("categories", "name", descending=False)
    assert [doc.id for doc in snapshot] == ["c1", "c2", "c0"]

    snapshot = store.snapshot("categories", "name", descending=True)
    assert [doc.id for doc in snapshot] == ["c2", "c1", "c0"]


def test_every_change_pushes_full_snapshot(store):
    snapshots = []
    store.subscribe("items", "createdAt", True, snapshots.append, lambda e: None)

    store.put("items", "3", {"title": "Cherry", "createdAt": 3})
    store.delete("items", "1")

    assert [doc.id for doc in snapshots[-2]] == ["3", "1", "2"]
    assert [doc.id for doc in snapshots[-1]] == ["3", "2"]


def test_unsubscribe_stops_delivery(store):
    snapshots = []
    unsubscribe = store.subscribe("items", "createdAt", True, snapshots.append, lambda e: None)
    assert store.subscriber_count("items") == 1

    unsubscribe()
    unsubscribe()
    store.put("items", "3", {"title": "Cherry", "createdAt": 3})

    assert store.subscriber_count("items") == 0
    assert len(snapshots) == 1


def test_fail_reaches_only_that_collection(store):
    from catalog_browser.io import DocumentSourceError

    item_errors, category_errors = [], []
    store.subscribe("items", "createdAt", True, lambda docs: None, item_errors.append)
    store.subscribe("categories", "name", False, lambda docs: None, category_errors.append)

    store.fail("items", DocumentSourceError("permission denied"))

    assert len(item_errors) == 1
    assert category_errors == []


def test_replace_all(store):
    from catalog_browser.io import Document

    store.replace_all("items", [Document("9", {"title": "Only", "createdAt": 1})])
    assert [doc.id for doc in store.snapshot("items", "createdAt", True)] == ["9"]


def test_mixed_type_order_field_still_publishes(store):
    snapshots = []
    store.subscribe("items", "createdAt", False, snapshots.append, lambda e: None)

    store.put("items", "3", {"title": "Cherry", "createdAt": "2024-01-01"})

    assert [doc.id for doc in snapshots[-1]] == ["2", "1", "3"]
    snapshot = store.snapshot("items", "createdAt", descending=True)
    assert [doc.id for doc in snapshot] == ["3", "1", "2"]


def test_fail_wraps_foreign_errors_in_document_source_error(store):
    from catalog_browser.io import DocumentSourceError, SemanticSearchError

    errors = []
    store.subscribe("items", "createdAt", True, lambda docs: None, errors.append)

    cause = ConnectionError("socket closed")
    store.fail("items", cause)
    catalog_error = SemanticSearchError("already a catalog error")
    store.fail("items", catalog_error)

    assert isinstance(errors[0], DocumentSourceError)
    assert errors[0].__cause__ is cause
    assert "items" in str(errors[0])
    assert errors[1] is catalog_error
