"""
Property-based tests for the saved search store.

These tests verify ordering, eviction, the authentication gate, defensive
copies and storage failure handling.
"""

import json
from datetime import datetime, timedelta
from itertools import count

import pytest
from hypothesis import given, settings, strategies as st

from facet_search.error_handling import NotAuthenticatedError, SavedSearchStorageError
from facet_search.models import SearchFilters
from facet_search.saved import (
    FILTER_PRESETS,
    AuthContext,
    InMemorySavedSearchRepository,
    JsonFileSavedSearchRepository,
    SavedSearchStore,
    create_repository,
)


SIGNED_IN = AuthContext(is_authenticated=True, user_id="user-1")


class SteppingClock:
    """Clock advancing one minute per reading."""

    def __init__(self, start=datetime(2024, 3, 1, 9, 0)):
        self.current = start

    def __call__(self):
        self.current += timedelta(minutes=1)
        return self.current


def make_store(repository=None, max_saved=10):
    ids = count(1)
    return SavedSearchStore(
        auth=SIGNED_IN,
        repository=repository or InMemorySavedSearchRepository(),
        max_saved=max_saved,
        clock=SteppingClock(),
        id_factory=lambda: f"s{next(ids)}",
    )


@given(saves=st.integers(min_value=0, max_value=30), cap=st.integers(min_value=1, max_value=12))
@settings(max_examples=100)
def test_list_bounded_and_most_recent_first(saves, cap):
    """
    **Property: Bounded, most-recent-first**

    After any number of saves the store keeps at most cap entries, newest
    first, having evicted the oldest.
    """
    store = make_store(max_saved=cap)
    for i in range(saves):
        store.save(f"search {i}", SearchFilters(query=str(i)))

    names = [s.name for s in store.list_saved()]
    assert names == [f"search {i}" for i in reversed(range(saves))][:cap]


def test_eleven_saves_keep_ten():
    store = make_store()
    first = store.save("My Search", SearchFilters())
    for i in range(10):
        store.save(f"Search {i}", SearchFilters(query=f"q{i}"))

    saved = store.list_saved()
    assert len(saved) == 10
    assert first.id not in {s.id for s in saved}


def test_save_sets_timestamps_and_defaults():
    store = make_store()

    saved = store.save("Desks", SearchFilters(query="desk"))

    assert saved.created_at == saved.last_used_at
    assert saved.alerts_enabled is False
    assert saved.filters.query == "desk"


def test_blank_name_falls_back_to_query_then_date():
    store = make_store()

    assert store.save("  ", SearchFilters(query="garden hose")).name == "garden hose"
    assert store.save("", SearchFilters()).name.startswith("Search 03/01/2024")


def test_apply_updates_last_used_and_returns_copy():
    store = make_store()
    saved = store.save("Gadgets", SearchFilters(custom_fields={"tags": ["usb"]}))

    filters = store.apply(saved.id)
    filters.custom_fields["tags"].append("mutated")

    stored = store.list_saved()[0]
    assert stored.last_used_at > saved.last_used_at
    assert stored.filters.custom_fields == {"tags": ["usb"]}
    assert store.apply(saved.id).custom_fields == {"tags": ["usb"]}


def test_apply_unknown_id_raises_key_error():
    with pytest.raises(KeyError):
        make_store().apply("missing")


def test_remove_is_noop_for_unknown_id():
    store = make_store()
    saved = store.save("Lamps", SearchFilters(query="lamp"))

    store.remove("missing")
    assert len(store.list_saved()) == 1

    store.remove(saved.id)
    assert store.list_saved() == []


def test_set_alerts():
    store = make_store()
    saved = store.save("Deals", SearchFilters(on_sale_only=True))

    updated = store.set_alerts(saved.id, True)

    assert updated.alerts_enabled is True
    assert store.list_saved()[0].alerts_enabled is True


@pytest.mark.parametrize('auth', [
    AuthContext(),
    AuthContext(is_authenticated=True, user_id=None),
    AuthContext(is_authenticated=False, user_id="user-1"),
])
def test_save_requires_authenticated_session(auth):
    store = SavedSearchStore(auth=auth)

    with pytest.raises(NotAuthenticatedError):
        store.save("Anything", SearchFilters())


def test_searches_are_scoped_per_user():
    repository = InMemorySavedSearchRepository()
    alice = SavedSearchStore(auth=AuthContext(True, "alice"), repository=repository)
    bob = SavedSearchStore(auth=AuthContext(True, "bob"), repository=repository)

    alice.save("Alice's", SearchFilters())

    assert bob.list_saved() == []
    assert [s.name for s in alice.list_saved()] == ["Alice's"]


def test_presets_are_static():
    store = make_store()
    store.save("Mine", SearchFilters())

    presets = store.list_presets()

    assert presets is FILTER_PRESETS
    assert [p.name for p in presets] == [
        "Best Deals", "New & Popular", "Premium Products", "Quick Delivery",
    ]
    with pytest.raises(TypeError):
        presets[0].filters["rating"] = 1


def test_json_file_repository_round_trip(tmp_path):
    repository = JsonFileSavedSearchRepository(base_dir=str(tmp_path))
    store = make_store(repository=repository)
    filters = SearchFilters(
        query="running shoes",
        brands=frozenset({"Nike", "Asics"}),
        price_range=(20, 150),
    )

    saved = store.save("Shoes", filters)
    reloaded = JsonFileSavedSearchRepository(base_dir=str(tmp_path)).load("user-1")

    assert [s.id for s in reloaded] == [saved.id]
    assert reloaded[0].filters == filters
    assert reloaded[0].created_at == saved.created_at


def test_json_file_repository_tolerates_corrupt_file(tmp_path):
    (tmp_path / "user-1.json").write_text("{not json")

    assert JsonFileSavedSearchRepository(base_dir=str(tmp_path)).load("user-1") == []


def test_json_file_repository_discards_malformed_records(tmp_path):
    (tmp_path / "user-1.json").write_text(json.dumps([{"id": "x"}]))

    assert JsonFileSavedSearchRepository(base_dir=str(tmp_path)).load("user-1") == []


def test_failed_write_leaves_list_unchanged(tmp_path):
    repository = JsonFileSavedSearchRepository(base_dir=str(tmp_path))
    store = make_store(repository=repository)
    store.save("Kept", SearchFilters())

    with pytest.raises(SavedSearchStorageError):
        store.save("Broken", SearchFilters(custom_fields={"when": object()}))

    assert [s.name for s in store.list_saved()] == ["Kept"]
    assert [p.name for p in tmp_path.iterdir()] == ["user-1.json"]


def test_create_repository():
    assert isinstance(create_repository("memory"), InMemorySavedSearchRepository)
    assert isinstance(create_repository("file", "/tmp/x"), JsonFileSavedSearchRepository)
    with pytest.raises(ValueError):
        create_repository("s3")
