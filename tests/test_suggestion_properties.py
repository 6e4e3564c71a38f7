"""
Property-based tests for suggestion generation.

These tests verify the cap, determinism, minimum query length and ordering
rules of generated suggestions, and the recent query history they use.
"""

from hypothesis import given, settings, strategies as st

from facet_search.catalog import build_index
from facet_search.models import CatalogEntry, SuggestionKind
from facet_search.suggestions import RecentQueries, SuggestionGenerator, generate, idle_suggestions


words = st.sampled_from(["phone", "case", "charger", "cable", "lamp", "desk", "pro", "mini"])

product_names = st.lists(words, min_size=1, max_size=3).map(" ".join)

entries = st.builds(
    CatalogEntry,
    id=st.uuids().map(str),
    name=product_names,
    category=st.sampled_from(["Phones", "Accessories", "Home Office", "Lighting"]),
    price=st.integers(min_value=1, max_value=900),
    seller_name=st.sampled_from(["Phone Depot", "CaseCo", "DeskWorks"]),
)

catalogs = st.lists(entries, max_size=80)
recent_lists = st.lists(product_names, max_size=6)
queries = st.text(alphabet="acehilnoprs ", max_size=6)


@given(catalog=catalogs, query=queries, recent=recent_lists)
@settings(max_examples=100)
def test_suggestions_never_exceed_cap(catalog, query, recent):
    """
    **Property: Cap**

    No catalog size or query commonality yields more than 8 suggestions.
    """
    suggestions = generate(query, build_index(catalog), recent)

    assert len(suggestions) <= 8


@given(catalog=catalogs, query=queries, recent=recent_lists)
@settings(max_examples=100)
def test_generation_is_deterministic(catalog, query, recent):
    """
    **Property: Determinism**

    Identical inputs produce an identical ordered list.
    """
    index = build_index(catalog)

    assert generate(query, index, recent) == generate(query, index, recent)


@given(catalog=catalogs, query=st.text(max_size=1), recent=recent_lists)
@settings(max_examples=50)
def test_short_queries_yield_nothing(catalog, query, recent):
    assert generate(query, build_index(catalog), recent) == []


@given(catalog=catalogs, query=queries.filter(lambda q: len(q) >= 2), recent=recent_lists)
@settings(max_examples=100)
def test_matching_recent_queries_always_kept(catalog, query, recent):
    """
    **Property: Recent queries survive the cap**

    Every distinct recent query containing the text is suggested, however
    many catalog matches compete for the slots.
    """
    suggestions = generate(query, build_index(catalog), recent)

    expected = []
    for item in recent:
        if query.lower() in item.lower() and item not in expected:
            expected.append(item)
    recent_values = [s.value for s in suggestions if s.is_recent_query]
    assert recent_values == expected[:8]


@given(catalog=catalogs, query=queries.filter(lambda q: len(q) >= 2))
@settings(max_examples=100)
def test_kinds_follow_discovery_order(catalog, query):
    order = [SuggestionKind.PRODUCT, SuggestionKind.CATEGORY, SuggestionKind.BRAND, SuggestionKind.QUERY]

    kinds = [order.index(s.kind) for s in generate(query, build_index(catalog), [])]

    assert kinds == sorted(kinds)


def test_category_suggestion_embeds_count():
    catalog = [
        CatalogEntry(id="1", name="Phone", category="Electronics", price=300),
        CatalogEntry(id="2", name="Tablet", category="Electronics", price=400),
        CatalogEntry(id="3", name="Novel", category="Books", price=12),
    ]

    suggestions = generate("elec", build_index(catalog), [])

    assert len(suggestions) == 1
    assert suggestions[0].kind == SuggestionKind.CATEGORY
    assert "Electronics" in suggestions[0].label
    assert "2 products" in suggestions[0].label
    assert suggestions[0].match_count == 2


def test_category_count_from_category_only_records():
    index = build_index([
        {"category": "Electronics"},
        {"category": "Electronics"},
        {"category": "Books"},
    ])

    suggestions = generate("elec", index, [])

    assert [s.label for s in suggestions] == ["Electronics (2 products)"]


def test_records_with_null_text_fields_do_not_break_generation():
    index = build_index([
        {"id": 1, "name": None, "category": "Books", "price": 3},
        {"id": 2, "name": "Bookend", "category": None, "price": 9, "sellerName": None},
    ])

    suggestions = generate("bo", index, [])

    assert [(s.kind, s.value) for s in suggestions] == [
        (SuggestionKind.PRODUCT, "Bookend"),
        (SuggestionKind.CATEGORY, "Books"),
    ]


def test_matching_is_case_insensitive_and_covers_all_kinds():
    catalog = [
        CatalogEntry(id="1", name="Sony Headphones", category="Audio", price=199, brand="Sony"),
        CatalogEntry(id="2", name="Walkman", category="Sony Classics", price=50, seller_name="Retro"),
    ]

    suggestions = generate("SONY", build_index(catalog), ["sony earbuds", "lamp"])

    assert [(s.kind, s.value) for s in suggestions] == [
        (SuggestionKind.PRODUCT, "Sony Headphones"),
        (SuggestionKind.CATEGORY, "Sony Classics"),
        (SuggestionKind.BRAND, "Sony"),
        (SuggestionKind.QUERY, "sony earbuds"),
    ]
    assert suggestions[-1].is_recent_query is True
    assert suggestions[2].label == "Sony (1 products)"


def test_duplicate_product_names_suggested_once():
    catalog = [
        CatalogEntry(id=str(i), name="USB Cable", category="Accessories", price=5)
        for i in range(3)
    ]

    suggestions = generate("usb", build_index(catalog), [])

    assert [s.value for s in suggestions] == ["USB Cable"]


def test_recent_queries_reserve_slots_before_products():
    catalog = [
        CatalogEntry(id=str(i), name=f"lamp model {i}", category="Lighting", price=20)
        for i in range(20)
    ]
    recent = ["desk lamp", "lamp shade"]

    suggestions = generate("lamp", build_index(catalog), recent)

    assert len(suggestions) == 8
    assert [s.value for s in suggestions[-2:]] == recent
    assert all(s.kind == SuggestionKind.PRODUCT for s in suggestions[:6])


def test_custom_limits():
    generator = SuggestionGenerator(min_query_length=3, max_suggestions=2)
    catalog = [
        CatalogEntry(id=str(i), name=f"mug {i}", category="Kitchen", price=8)
        for i in range(5)
    ]
    index = build_index(catalog)

    assert generator.generate("mu", index) == []
    assert len(generator.generate("mug", index)) == 2


def test_idle_suggestions_prefer_recent_then_popular():
    recent = idle_suggestions(["lamp"], ["coffee maker"])
    popular = idle_suggestions([], ["coffee maker", "laptop stand"])

    assert [(s.value, s.is_recent_query) for s in recent] == [("lamp", True)]
    assert [(s.value, s.is_recent_query) for s in popular] == [
        ("coffee maker", False),
        ("laptop stand", False),
    ]


def test_recent_queries_most_recent_first_and_bounded():
    history = RecentQueries(limit=3)
    for query in ["tv", "lamp", "desk", "tv", "chair", "  "]:
        history.record(query)

    assert history.as_list() == ["chair", "tv", "desk"]

    history.remove("tv")
    assert history.as_list() == ["chair", "desk"]
