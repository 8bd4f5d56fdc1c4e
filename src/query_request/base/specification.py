# src/query_request/base/specification.py
import logging
from typing import Any, List, Optional, Tuple

from .query import (
    ALWAYS_TRUE,
    DEFAULT_PAGE,
    DEFAULT_SIZE,
    Ordering,
    PageRequest,
    QueryExpression,
    QueryOptions,
)
from .request import SearchRequest
from .schema import Schema

# --- Setup Logging ---
log = logging.getLogger(__name__)


class SearchSpecification:
    """
    Compiles a SearchRequest against an entity schema.

    Filters are folded into one predicate, starting from ALWAYS_TRUE and
    ANDing each filter in declared order. Sorts become an ordering list in
    declared order, so the first sort is the primary key. Nothing is cached:
    every call resolves and parses the request again.

    Usage:
        spec = SearchSpecification(request)
        predicate, orderings = spec.compile(OperatingSystem)
        page = SearchSpecification.pagination_of(request.page, request.size)
    """

    request: SearchRequest

    def __init__(self, request: SearchRequest):
        if not isinstance(request, SearchRequest):
            raise TypeError(
                f"SearchSpecification requires a SearchRequest, got {type(request).__name__}"
            )
        self.request = request

    def to_predicate(self, schema: Any) -> QueryExpression:
        """
        Folds every filter into a single predicate.

        Raises:
            KeyNotFoundError: If a filter key does not resolve on ``schema``.
            InvalidDataTypeError: If a filter value cannot be parsed.
        """
        schema = Schema.of(schema)
        predicate: QueryExpression = ALWAYS_TRUE
        for filter_request in self.request.filters:
            log.debug(
                f"Applying filter key={filter_request.key!r} "
                f"operator={filter_request.operator.name} "
                f"field_type={filter_request.field_type.name} "
                f"value={filter_request.value!r} value_to={filter_request.value_to!r} "
                f"values={filter_request.values!r}"
            )
            accessor = schema.resolve(filter_request.key)
            predicate = filter_request.operator.build(
                accessor, filter_request, predicate
            )
        log.debug(f"Compiled predicate: {predicate!r}")
        return predicate

    def to_orderings(self, schema: Any) -> List[Ordering]:
        """
        Builds the ordering list in declared order.

        Raises:
            KeyNotFoundError: If a sort key does not resolve on ``schema``.
        """
        schema = Schema.of(schema)
        orderings: List[Ordering] = []
        for sort_request in self.request.sorts:
            log.debug(
                f"Applying sort key={sort_request.key!r} "
                f"direction={sort_request.direction.name}"
            )
            accessor = schema.resolve(sort_request.key)
            orderings.append(sort_request.direction.build(accessor, sort_request))
        return orderings

    def compile(self, schema: Any) -> Tuple[QueryExpression, List[Ordering]]:
        """Returns the predicate and the ordering list for ``schema``."""
        schema = Schema.of(schema)
        return self.to_predicate(schema), self.to_orderings(schema)

    @staticmethod
    def pagination_of(page: Optional[int], size: Optional[int]) -> PageRequest:
        """
        Normalizes page and size, defaulting to page 0 and size 100.

        No upper bound is applied to ``size``.
        """
        page = DEFAULT_PAGE if page is None else page
        size = DEFAULT_SIZE if size is None else size
        if isinstance(page, bool) or not isinstance(page, int) or page < 0:
            raise ValueError("Page must be a non-negative integer.")
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError("Size must be a positive integer.")
        return PageRequest(page=page, size=size)

    def build(self, schema: Any) -> QueryOptions:
        """Compiles the request into the QueryOptions handed to a repository."""
        predicate, orderings = self.compile(schema)
        page_request = self.pagination_of(self.request.page, self.request.size)
        options = QueryOptions(
            expression=predicate,
            order_by=orderings,
            page=page_request.page,
            size=page_request.size,
        )
        log.info(f"Built query options: {options!r}")
        return options

    def __repr__(self) -> str:
        return (
            f"SearchSpecification(filters={len(self.request.filters)}, "
            f"sorts={len(self.request.sorts)})"
        )
