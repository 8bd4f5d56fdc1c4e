# tests/base/test_search_specification.py

from datetime import datetime

import pytest

from query_request import (
    ALWAYS_TRUE,
    InvalidDataTypeError,
    KeyNotFoundError,
    Ordering,
    PageRequest,
    QueryFilter,
    QueryLogical,
    QueryOperator,
    QueryOptions,
    SearchRequest,
    SearchSpecification,
    SortRequest,
)


def _request(filters=(), sorts=(), page=None, size=None) -> SearchRequest:
    return SearchRequest(filters=list(filters), sorts=list(sorts), page=page, size=size)


def test_empty_request_compiles_to_match_all(schema):
    predicate, orderings = SearchSpecification(_request()).compile(schema)
    assert predicate is ALWAYS_TRUE
    assert orderings == []


def test_single_filter_is_not_wrapped(schema, make_filter):
    spec = SearchSpecification(_request([make_filter("name", "EQUAL", "STRING", "web-1")]))
    assert spec.to_predicate(schema) == QueryFilter("name", QueryOperator.EQ, "web-1")


def test_filters_are_anded_in_declared_order(schema, make_filter):
    request = _request(
        [
            make_filter("active", "EQUAL", "BOOLEAN", "true"),
            make_filter("uptime", "BETWEEN", "LONG", "10", "20"),
            make_filter("os.name", "LIKE", "STRING", "deb"),
        ]
    )
    predicate = SearchSpecification(request).to_predicate(schema)
    # Nested ANDs are flattened into one conjunction.
    assert predicate == QueryLogical(
        "and",
        [
            QueryFilter("active", QueryOperator.EQ, True),
            QueryFilter("uptime", QueryOperator.GTE, 10),
            QueryFilter("uptime", QueryOperator.LTE, 20),
            QueryFilter("os.name", QueryOperator.LIKE, "%DEB%"),
        ],
    )


def test_nested_keys_resolve_to_full_path(schema, make_filter, find_filters):
    request = _request(
        [
            make_filter("os.kernel.version", "IN", "STRING", values=["5.13", "5.8"]),
            make_filter("os.kernel.build", "NOT_EQUAL", "INTEGER", 7),
        ]
    )
    predicate = SearchSpecification(request).to_predicate(schema)
    assert find_filters(predicate, QueryFilter, "os.kernel.version", QueryOperator.IN)
    assert find_filters(predicate, QueryFilter, "os.kernel.build", QueryOperator.NE)


def test_between_on_char_leaves_predicate_untouched(schema, make_filter):
    request = _request([make_filter("grade", "BETWEEN", "CHAR", "a", "c")])
    assert SearchSpecification(request).to_predicate(schema) is ALWAYS_TRUE


@pytest.mark.parametrize(
    "operator, field_type, kwargs",
    [
        ("EQUAL", "STRING", {"value": "x"}),
        ("NOT_EQUAL", "STRING", {"value": "x"}),
        ("LIKE", "STRING", {"value": "x"}),
        ("IN", "STRING", {"values": ["x"]}),
        ("BETWEEN", "INTEGER", {"value": 1, "value_to": 2}),
        ("BETWEEN", "CHAR", {"value": "a", "value_to": "b"}),
    ],
)
def test_unknown_filter_key_fails_for_every_operator(
    schema, make_filter, operator, field_type, kwargs
):
    request = _request([make_filter("nonexistent", operator, field_type, **kwargs)])
    with pytest.raises(KeyNotFoundError) as exc_info:
        SearchSpecification(request).to_predicate(schema)
    assert exc_info.value.key == "nonexistent"
    assert str(exc_info.value) == "nonexistent is invalid Key"


def test_bad_value_fails_compilation(schema, make_filter):
    request = _request(
        [
            make_filter("name", "EQUAL", "STRING", "web-1"),
            make_filter("usages", "EQUAL", "INTEGER", "abc"),
        ]
    )
    with pytest.raises(InvalidDataTypeError):
        SearchSpecification(request).compile(schema)


def test_key_is_resolved_before_value_is_parsed(schema, make_filter):
    request = _request([make_filter("nonexistent", "EQUAL", "INTEGER", "abc")])
    with pytest.raises(KeyNotFoundError):
        SearchSpecification(request).to_predicate(schema)


def test_orderings_keep_declared_order(schema):
    request = _request(
        sorts=[
            SortRequest(key="os.name", direction="DESC"),
            SortRequest(key="created", direction="ASC"),
            SortRequest(key="load", direction="DESC"),
        ]
    )
    assert SearchSpecification(request).to_orderings(schema) == [
        Ordering("os.name", descending=True),
        Ordering("created"),
        Ordering("load", descending=True),
    ]


def test_unknown_sort_key_fails(schema):
    request = _request(sorts=[SortRequest(key="os.kernel", direction="ASC")])
    with pytest.raises(KeyNotFoundError) as exc_info:
        SearchSpecification(request).to_orderings(schema)
    assert exc_info.value.key == "os.kernel"


def test_compile_is_repeatable(schema, make_filter):
    spec = SearchSpecification(
        _request(
            [make_filter("created", "BETWEEN", "DATE", "01-01-2021 00:00:00", "01-02-2021 00:00:00")],
            [SortRequest(key="created", direction="DESC")],
        )
    )
    assert spec.compile(schema) == spec.compile(schema)
    predicate, _ = spec.compile(schema)
    assert predicate.conditions[0].value == datetime(2021, 1, 1)


def test_compile_accepts_plain_mapping(make_filter):
    request = _request([make_filter("count", "EQUAL", "INTEGER", "3")])
    predicate, _ = SearchSpecification(request).compile({"count": int})
    assert predicate == QueryFilter("count", QueryOperator.EQ, 3)


@pytest.mark.parametrize(
    "page, size, expected",
    [
        (None, None, (0, 100)),
        (2, 10, (2, 10)),
        (None, 25, (0, 25)),
        (3, None, (3, 100)),
        (0, 100000, (0, 100000)),
    ],
)
def test_pagination_of(page, size, expected):
    page_request = SearchSpecification.pagination_of(page, size)
    assert isinstance(page_request, PageRequest)
    assert page_request == expected


@pytest.mark.parametrize(
    "page, size, message",
    [
        (-1, 10, "Page"),
        (0, 0, "Size"),
        (0, -5, "Size"),
        (True, 10, "Page"),
        (0, True, "Size"),
        ("1", 10, "Page"),
    ],
)
def test_pagination_of_rejects_out_of_range(page, size, message):
    with pytest.raises(ValueError, match=message):
        SearchSpecification.pagination_of(page, size)


def test_page_request_offset():
    assert PageRequest(page=3, size=20).offset == 60
    assert PageRequest(page=3, size=20).limit == 20


def test_build_returns_query_options(schema, make_filter):
    request = _request(
        [make_filter("active", "EQUAL", "BOOLEAN", "false")],
        [SortRequest(key="name", direction="ASC")],
        page=2,
        size=10,
    )
    options = SearchSpecification(request).build(schema)
    assert isinstance(options, QueryOptions)
    assert options.expression == QueryFilter("active", QueryOperator.EQ, False)
    assert options.order_by == [Ordering("name")]
    assert (options.page, options.size) == (2, 10)
    assert (options.offset, options.limit) == (20, 10)


def test_build_applies_default_pagination(schema):
    options = SearchSpecification(_request()).build(schema)
    assert (options.page, options.size, options.offset) == (0, 100, 0)


def test_rejects_non_request():
    with pytest.raises(TypeError, match="requires a SearchRequest"):
        SearchSpecification({"filters": []})
