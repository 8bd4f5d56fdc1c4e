# src/query_request/base/query.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Literal, NamedTuple, Optional

# --- Setup Logging ---
log = logging.getLogger(__name__)

# --- Pagination Defaults ---
DEFAULT_PAGE = 0
DEFAULT_SIZE = 100


# --- Query Operator Enum ---
class QueryOperator(Enum):
    """Comparison kinds a compiled predicate can contain."""

    # Comparison
    EQ = "eq"
    NE = "ne"
    GTE = "ge"
    LTE = "le"
    # Membership
    IN = "in"
    # String
    LIKE = "like"


# --- Structured Query Expression Classes ---
class QueryExpression:
    """Base class for compiled predicate nodes."""

    def __and__(self, other: "QueryExpression") -> "QueryExpression":
        return conjoin(self, other)


class _AlwaysTrue(QueryExpression):
    """Identity predicate; matches every entity."""

    _instance: Optional["_AlwaysTrue"] = None

    def __new__(cls) -> "_AlwaysTrue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALWAYS_TRUE"


ALWAYS_TRUE = _AlwaysTrue()


@dataclass(frozen=True)
class QueryFilter(QueryExpression):
    """
    A single condition ``field_path <operator> value``.

    For LIKE the value is a SQL-style pattern (``%`` and ``_`` wildcards) that
    is matched against the upper-cased field. For IN the value is a list.
    """

    field_path: str
    operator: QueryOperator
    value: Any


@dataclass(frozen=True)
class QueryLogical(QueryExpression):
    """Conjunction of expressions, kept in the order they were added."""

    operator: Literal["and"]
    conditions: List[QueryExpression] = field(default_factory=list)


def conjoin(left: QueryExpression, right: QueryExpression) -> QueryExpression:
    """
    ANDs two expressions.

    ALWAYS_TRUE is the identity, so folding from it never leaves a TRUE node
    in the tree. Nested conjunctions are flattened into a single QueryLogical.
    """
    if left is ALWAYS_TRUE:
        return right
    if right is ALWAYS_TRUE:
        return left
    conditions: List[QueryExpression] = []
    for expr in (left, right):
        if isinstance(expr, QueryLogical) and expr.operator == "and":
            conditions.extend(expr.conditions)
        else:
            conditions.append(expr)
    log.debug(f"Combining expressions with AND: {left!r} & {right!r}")
    return QueryLogical(operator="and", conditions=conditions)


# --- Ordering ---
@dataclass(frozen=True)
class Ordering:
    """One sort key; a list of these forms a multi-key ORDER BY."""

    field_path: str
    descending: bool = False

    def __repr__(self) -> str:
        direction = "DESC" if self.descending else "ASC"
        return f"Ordering({self.field_path!r}, {direction})"


# --- Pagination ---
class PageRequest(NamedTuple):
    """Normalized 0-indexed page number and page size."""

    page: int
    size: int

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size


# --- Query Options ---
@dataclass
class QueryOptions:
    """Everything the execution backend needs to run one compiled search."""

    expression: QueryExpression = ALWAYS_TRUE
    order_by: List[Ordering] = field(default_factory=list)
    page: int = DEFAULT_PAGE
    size: int = DEFAULT_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size

    def __repr__(self) -> str:
        parts = []
        if self.expression is not ALWAYS_TRUE:
            parts.append(f"expression={self.expression!r}")
        if self.order_by:
            parts.append(f"order_by={self.order_by!r}")
        parts.append(f"page={self.page!r}")
        parts.append(f"size={self.size!r}")
        return f"QueryOptions({', '.join(parts)})"
