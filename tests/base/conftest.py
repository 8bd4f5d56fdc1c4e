from datetime import datetime
from typing import List, Optional, Type, TypeVar

import pytest

from query_request import (
    FilterRequest,
    QueryExpression,
    QueryLogical,
    QueryOperator,
    Schema,
)

# Explicit schema shared by the unit tests; "os" is a nested level.
SERVER_SCHEMA = {
    "name": str,
    "active": bool,
    "grade": str,
    "usages": int,
    "uptime": int,
    "load": float,
    "created": datetime,
    "os": {
        "name": str,
        "kernel": {"version": str, "build": int},
    },
}


@pytest.fixture
def schema() -> Schema:
    return Schema(SERVER_SCHEMA, name="Server")


@pytest.fixture
def make_filter():
    """Factory for FilterRequest objects using wire names."""

    def _make(key, operator, field_type, value=None, value_to=None, values=None):
        return FilterRequest(
            key=key,
            operator=operator,
            field_type=field_type,
            value=value,
            value_to=value_to,
            values=values,
        )

    return _make


# --- Helper Functions ---
OpT = TypeVar("OpT", bound=QueryExpression)


def find_expression(
    expression: Optional[QueryExpression],
    op_type: Type[OpT],
    field_path: Optional[str] = None,
    operator: Optional[QueryOperator] = None,
) -> List[OpT]:
    found: List[OpT] = []
    if expression is None: return found
    if isinstance(expression, op_type):
        match_field = field_path is None or getattr(expression, "field_path", None) == field_path
        match_op = operator is None or getattr(expression, "operator", None) == operator
        if match_field and match_op: found.append(expression)
    if isinstance(expression, QueryLogical):
        for condition in expression.conditions:
            found.extend(find_expression(condition, op_type, field_path, operator))
    return found


@pytest.fixture
def find_filters():
    """Returns a finder for nodes of a given type inside a compiled predicate."""
    return find_expression
