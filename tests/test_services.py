"""Tests for the collection mirror, notification queue and catalog view model."""

import threading

import pytest


# ========== Collection mirror ==========

def test_mirror_applies_snapshots_and_clears_loading(qapp, store, config):
    from catalog_browser.services import CollectionMirror

    mirror = CollectionMirror(store, config)
    assert mirror.loading
    mirror.start()

    assert not mirror.loading
    assert [item.id for item in mirror.items] == ["1", "2"]
    assert [category.name for category in mirror.categories] == ["Fruit", "Tools"]

    store.put("items", "3", {"title": "Cherry", "categoryId": "c1", "createdAt": 3})
    assert [item.id for item in mirror.items] == ["3", "1", "2"]
    mirror.stop()


def test_mirror_errors_keep_previous_data(qapp, store, config):
    from catalog_browser.services import CollectionMirror

    messages = []
    mirror = CollectionMirror(store, config)
    mirror.error_occurred.connect(messages.append)
    mirror.start()

    store.fail("items", RuntimeError("network down"))
    store.fail("categories", RuntimeError("network down"))

    assert messages == ["Failed to load content.", "Failed to load categories."]
    assert [item.id for item in mirror.items] == ["1", "2"]
    assert len(mirror.categories) == 2
    mirror.stop()


def test_mirror_error_before_first_snapshot_clears_loading(qapp, config):
    from catalog_browser.io import InMemoryDocumentStore
    from catalog_browser.services import CollectionMirror

    class FailingSource(InMemoryDocumentStore):
        def subscribe(self, collection, order_by, descending, on_snapshot, on_error):
            on_error(RuntimeError("denied"))
            return lambda: None

    mirror = CollectionMirror(FailingSource(), config)
    mirror.start()
    assert not mirror.loading
    assert mirror.items == []


def test_mirror_stop_releases_subscriptions(qapp, store, config):
    from catalog_browser.services import CollectionMirror

    mirror = CollectionMirror(store, config)
    mirror.start()
    mirror.start()
    assert store.subscriber_count("items") == 1
    assert store.subscriber_count("categories") == 1

    mirror.stop()
    mirror.stop()
    assert store.subscriber_count("items") == 0
    assert store.subscriber_count("categories") == 0
    assert not mirror.is_active


# ========== Notification queue ==========

def test_notification_expires_after_duration(qapp, config, wait_until):
    from catalog_browser.services import NotificationQueue, NotificationSeverity

    queue = NotificationQueue(config)
    changes, fades = [], []
    queue.notification_changed.connect(changes.append)
    queue.fading.connect(fades.append)

    notification = queue.error("Failed to load content.")
    assert queue.current is notification
    assert notification.severity is NotificationSeverity.ERROR

    assert wait_until(lambda: queue.current is None, timeout_ms=1000)
    assert fades == [notification]
    assert changes == [notification, None]


def test_new_notification_replaces_and_restarts_timer(qapp, pump_events, wait_until):
    from catalog_browser.protocols import CatalogConfig
    from catalog_browser.services import NotificationQueue

    queue = NotificationQueue(CatalogConfig(notification_duration_ms=200, notification_fade_ms=50))
    queue.success("Saved.")
    pump_events(120)
    second = queue.error("Failed.")
    pump_events(120)

    # First notification's lifetime would have ended by now
    assert queue.current is second
    assert wait_until(lambda: queue.current is None, timeout_ms=1000)


def test_dismiss_clears_immediately(qapp, config, pump_events):
    from catalog_browser.services import NotificationQueue

    queue = NotificationQueue(config)
    changes = []
    queue.notification_changed.connect(changes.append)

    queue.success("Saved.")
    queue.dismiss()
    queue.dismiss()
    pump_events(120)

    assert queue.current is None
    assert changes[-1] is None
    assert changes.count(None) == 1


# ========== Catalog view model ==========

@pytest.fixture
def view_model(qapp, store, config, semantic_service, task_manager):
    from catalog_browser.services import CatalogViewModel

    view_model = CatalogViewModel(store, semantic_service=semantic_service,
                                  config=config, task_manager=task_manager)
    view_model.start()
    yield view_model
    view_model.close()


def _ids(items):
    return [item.id for item in items]


def test_lexical_scenarios(view_model):
    view_model.set_query_text("widget")
    assert _ids(view_model.filtered_items) == ["1"]
    assert view_model.highlight_term == "widget"

    view_model.set_query_text("")
    view_model.select_category("c2")
    assert _ids(view_model.filtered_items) == ["2"]


def test_semantic_result_overrides_lexical_inputs(view_model, semantic_service, task_manager):
    from catalog_browser.services import SearchMode

    semantic_service.item_ids = ["2"]
    view_model.select_category("c1")
    view_model.set_query_text("something yellow")
    assert view_model.filtered_items == []

    assert view_model.submit_semantic_search()
    assert view_model.searching
    assert view_model.search_button_label == "Searching..."
    task_manager.complete()

    assert _ids(view_model.filtered_items) == ["2"]
    assert view_model.search_mode is SearchMode.SEMANTIC
    assert view_model.highlight_term == ""
    assert not view_model.category_filter_enabled
    assert view_model.can_clear_search
    assert view_model.result_summary == "Showing 1 result from AI search."

    query, candidates = semantic_service.calls[0]
    assert query == "something yellow"
    assert [c.to_dict() for c in candidates] == [
        {"id": "1", "title": "Apple Widget", "category": "Fruit"},
        {"id": "2", "title": "Banana Tool", "category": "Tools"},
    ]


def test_semantic_empty_result_shows_no_items(view_model, task_manager):
    view_model.set_query_text("nothing")
    view_model.submit_semantic_search()
    task_manager.complete()

    assert view_model.filtered_items == []
    assert view_model.total_pages == 0
    assert view_model.result_summary == "Showing 0 results from AI search."
    assert view_model.empty_message == "No items found."


def test_semantic_failure_notifies_and_falls_back_to_lexical(view_model, semantic_service, task_manager):
    from catalog_browser.io import SemanticSearchError
    from catalog_browser.services import NotificationSeverity, SearchMode

    semantic_service.error = SemanticSearchError("malformed reply")
    view_model.select_category("c1")
    view_model.set_query_text("apple")
    view_model.submit_semantic_search()
    task_manager.complete()

    assert view_model.notification.severity is NotificationSeverity.ERROR
    assert view_model.notification.message == "AI search failed. Please try again."
    assert view_model.search_mode is SearchMode.LEXICAL
    assert not view_model.searching
    assert view_model.semantic_failed
    assert view_model.result_summary == "AI search failed. Showing keyword matches instead."
    assert _ids(view_model.filtered_items) == ["1"]


def test_editing_query_after_semantic_search_uses_new_text(view_model, semantic_service, task_manager):
    from catalog_browser.services import SearchMode

    semantic_service.item_ids = ["2"]
    view_model.set_query_text("yellow")
    view_model.submit_semantic_search()
    task_manager.complete()
    assert view_model.search_mode is SearchMode.SEMANTIC

    view_model.set_query_text("apple")
    assert view_model.search_mode is SearchMode.LEXICAL
    assert _ids(view_model.filtered_items) == ["1"]
    assert view_model.highlight_term == "apple"


def test_empty_query_submission_is_rejected(view_model, semantic_service, task_manager):
    view_model.set_query_text("   ")
    assert not view_model.submit_semantic_search()

    assert task_manager.pending == []
    assert semantic_service.calls == []
    assert view_model.notification.message == "Please enter a search query."


def test_resubmission_while_in_flight_is_rejected(view_model, task_manager):
    view_model.set_query_text("apple")
    assert view_model.submit_semantic_search()
    assert not view_model.submit_semantic_search()
    assert len(task_manager.pending) == 1


def test_typing_during_search_discards_its_result(view_model, semantic_service, task_manager):
    from catalog_browser.services import SearchMode

    semantic_service.item_ids = ["2"]
    view_model.set_query_text("yellow")
    view_model.submit_semantic_search()
    view_model.set_query_text("apple")
    task_manager.complete()

    assert not view_model.searching
    assert view_model.search_mode is SearchMode.LEXICAL
    assert _ids(view_model.filtered_items) == ["1"]


def test_clear_search_resets_everything(view_model, semantic_service, task_manager):
    semantic_service.item_ids = ["2"]
    view_model.select_category("c1")
    view_model.set_query_text("yellow")
    view_model.submit_semantic_search()
    task_manager.complete()

    view_model.clear_search()
    assert view_model.query_text == ""
    assert view_model.selected_category == ""
    assert view_model.category_filter_enabled
    assert not view_model.can_clear_search
    assert _ids(view_model.filtered_items) == ["1", "2"]


def test_missing_semantic_service_reports_error(qapp, store, config):
    from catalog_browser.services import CatalogViewModel

    view_model = CatalogViewModel(store, config=config)
    view_model.start()
    view_model.set_query_text("apple")

    assert not view_model.submit_semantic_search()
    assert view_model.notification.message == "AI search failed. Please try again."
    view_model.close()


def test_registered_semantic_service_is_used(qapp, store, config, semantic_service, task_manager):
    from catalog_browser.protocols import register_semantic_search_service
    from catalog_browser.services import CatalogViewModel

    register_semantic_search_service(semantic_service)
    view_model = CatalogViewModel(store, config=config, task_manager=task_manager)
    view_model.start()
    view_model.set_query_text("apple")
    assert view_model.submit_semantic_search()
    task_manager.complete()
    assert len(semantic_service.calls) == 1
    view_model.close()


@pytest.fixture
def big_store():
    from catalog_browser.io import InMemoryDocumentStore

    store = InMemoryDocumentStore()
    store.put("categories", "c1", {"name": "Things"})
    for i in range(45):
        store.put("items", f"i{i:02d}", {"title": f"Item {i:02d}", "categoryId": "c1", "createdAt": i})
    return store


@pytest.fixture
def big_view_model(qapp, big_store, config, task_manager):
    from catalog_browser.services import CatalogViewModel

    view_model = CatalogViewModel(big_store, config=config, task_manager=task_manager)
    view_model.start()
    yield view_model
    view_model.close()


def test_pagination_scenario(big_view_model):
    assert big_view_model.total_pages == 3
    assert big_view_model.current_page == 1
    assert len(big_view_model.visible_items) == 20

    assert big_view_model.set_page(3)
    assert len(big_view_model.visible_items) == 5
    assert not big_view_model.set_page(4)
    assert big_view_model.current_page == 3
    assert big_view_model.page_state.has_previous


def test_filter_change_resets_to_first_page(big_view_model):
    big_view_model.next_page()
    assert big_view_model.current_page == 2

    # "Item" still matches all 45 items, page 2 would still exist
    big_view_model.set_query_text("Item")
    assert big_view_model.current_page == 1

    big_view_model.next_page()
    big_view_model.select_category("c1")
    assert big_view_model.current_page == 1


def test_unchanged_filter_inputs_keep_page(big_view_model, big_store):
    big_view_model.set_page(2)
    big_view_model.select_category("")
    assert big_view_model.current_page == 2

    # New pushes from the source do not move the page either
    big_store.put("items", "new", {"title": "Item new", "categoryId": "c1", "createdAt": 99})
    assert big_view_model.current_page == 2
    assert big_view_model.total_pages == 3
    assert big_view_model.previous_page()
    assert big_view_model.visible_items[0].id == "new"


def test_view_model_presentation_helpers(view_model, store):
    apple, banana = view_model.filtered_items

    assert view_model.category_name_for(apple) == "Fruit"
    assert view_model.image_url_for(apple) == "https://example.com/apple.png"
    assert view_model.image_url_for(banana) == "https://picsum.photos/400/300?grayscale"

    view_model.set_query_text("widget")
    assert [span.text for span in view_model.highlighted_title(apple) if span.matched] == ["Widget"]

    store.put("items", "3", {"title": "Stray", "categoryId": "deleted", "createdAt": 5})
    stray = view_model.items[0]
    assert view_model.category_name_for(stray) == ""


def test_items_before_categories_render_with_blank_category(qapp, config):
    from catalog_browser.io import InMemoryDocumentStore
    from catalog_browser.services import CatalogViewModel

    store = InMemoryDocumentStore()
    store.put("items", "1", {"title": "Apple Widget", "categoryId": "c1", "createdAt": 1})
    view_model = CatalogViewModel(store, config=config)
    view_model.start()

    item = view_model.visible_items[0]
    assert view_model.category_name_for(item) == ""

    store.put("categories", "c1", {"name": "Fruit"})
    assert view_model.category_name_for(item) == "Fruit"
    view_model.close()


def test_source_error_surfaces_as_notification(view_model, store):
    store.fail("items", RuntimeError("permission denied"))

    assert view_model.notification.message == "Failed to load content."
    assert not view_model.loading
    assert _ids(view_model.filtered_items) == ["1", "2"]


def test_pushes_from_another_thread_apply_on_owner_thread(view_model, store, wait_until):
    applied_on = []
    view_model.changed.connect(lambda: applied_on.append(threading.current_thread()))

    writer = threading.Thread(
        target=store.put,
        args=("items", "3", {"title": "Cherry", "categoryId": "c1", "createdAt": 3}),
    )
    writer.start()
    writer.join()

    assert _ids(view_model.items) == ["1", "2"]
    assert applied_on == []

    assert wait_until(lambda: len(view_model.items) == 3)
    assert _ids(view_model.items) == ["3", "1", "2"]
    assert applied_on and all(thread is threading.main_thread() for thread in applied_on)


def test_changed_signal_fires_on_updates(view_model):
    fired = []
    view_model.changed.connect(lambda: fired.append(1))

    view_model.set_query_text("apple")
    view_model.set_query_text("apple")
    assert len(fired) == 1


def test_close_tears_down_and_drops_late_results(qapp, store, config, semantic_service, task_manager):
    from catalog_browser.services import CatalogViewModel, SearchMode

    view_model = CatalogViewModel(store, semantic_service=semantic_service,
                                  config=config, task_manager=task_manager)
    view_model.start()
    semantic_service.item_ids = ["2"]
    view_model.set_query_text("yellow")
    view_model.submit_semantic_search()
    view_model.notifications.success("Saved.")

    view_model.close()
    task_manager.complete()

    assert task_manager.cleaned_up
    assert store.subscriber_count("items") == 0
    assert store.subscriber_count("categories") == 0
    assert view_model.notification is None
    assert view_model.search_mode is SearchMode.LEXICAL
    assert not view_model.submit_semantic_search()
    with pytest.raises(RuntimeError):
        view_model.start()


def test_view_model_with_real_background_tasks(qapp, store, config, semantic_service, wait_until):
    from catalog_browser.services import CatalogViewModel

    semantic_service.item_ids = ["1"]
    view_model = CatalogViewModel(store, semantic_service=semantic_service, config=config)
    view_model.start()
    view_model.set_query_text("red fruit")
    assert view_model.submit_semantic_search()

    assert wait_until(lambda: not view_model.searching)
    assert _ids(view_model.filtered_items) == ["1"]
    view_model.close()
