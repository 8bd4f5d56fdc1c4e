# src/query_request/base/operator.py
import logging
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, get_origin

from .exceptions import InvalidDataTypeError
from .field_type import FieldType
from .query import QueryExpression, QueryFilter, QueryOperator, conjoin
from .schema import FieldAccessor

if TYPE_CHECKING:
    from .request import FilterRequest

# --- Setup Logging ---
log = logging.getLogger(__name__)


def _parse(field_type: FieldType, raw: Any, upper_case: bool = False) -> Any:
    """
    Parses one raw request value, re-signalling every failure as
    InvalidDataTypeError. A missing value and a DATE that does not match the
    wire format are failures too.
    """
    if raw is None:
        raise InvalidDataTypeError()
    try:
        text = str(raw).upper() if upper_case else raw
        parsed = field_type.parse(text)
    except (ValueError, TypeError, IndexError) as e:
        raise InvalidDataTypeError() from e
    if parsed is None:
        raise InvalidDataTypeError()
    return parsed


def _is_compatible(python_type: Any, value: Any) -> bool:
    """
    True when ``value`` can be compared with a field declared as
    ``python_type``. Untyped and generic fields accept anything.
    """
    if python_type is Any or not isinstance(python_type, type):
        return True
    if get_origin(python_type) is not None:
        return True
    # datetime subclasses date but the two cannot be ordered against each other.
    if issubclass(python_type, date) and not issubclass(python_type, datetime):
        return isinstance(value, date) and not isinstance(value, datetime)
    if isinstance(value, python_type) or issubclass(python_type, type(value)):
        return True
    # INTEGER and DOUBLE values compare with any numeric field.
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and issubclass(python_type, (int, float))
        and not issubclass(python_type, bool)
    )


def _parse_for(accessor: FieldAccessor, request: "FilterRequest", raw: Any) -> Any:
    """Parses ``raw`` and checks it against the type of the resolved field."""
    value = _parse(request.field_type, raw)
    if not _is_compatible(accessor.python_type, value):
        type_name = getattr(accessor.python_type, "__name__", accessor.python_type)
        log.info(
            f"{request.field_type.name} value {value!r} does not match field "
            f"'{accessor.path}' of type {type_name}"
        )
        raise InvalidDataTypeError()
    return value


def _build_equal(
    accessor: FieldAccessor, request: "FilterRequest", predicate: QueryExpression
) -> QueryExpression:
    value = _parse_for(accessor, request, request.value)
    return conjoin(predicate, QueryFilter(accessor.path, QueryOperator.EQ, value))


def _build_not_equal(
    accessor: FieldAccessor, request: "FilterRequest", predicate: QueryExpression
) -> QueryExpression:
    value = _parse_for(accessor, request, request.value)
    return conjoin(predicate, QueryFilter(accessor.path, QueryOperator.NE, value))


def _build_like(
    accessor: FieldAccessor, request: "FilterRequest", predicate: QueryExpression
) -> QueryExpression:
    value = _parse(request.field_type, request.value, upper_case=True)
    # The pattern is matched against the field's upper-cased text.
    pattern = f"%{str(value).upper()}%"
    return conjoin(predicate, QueryFilter(accessor.path, QueryOperator.LIKE, pattern))


def _build_in(
    accessor: FieldAccessor, request: "FilterRequest", predicate: QueryExpression
) -> QueryExpression:
    if not request.values:
        raise InvalidDataTypeError(
            f"Operator IN on '{request.key}' requires a non-empty values list"
        )
    values: List[Any] = [_parse_for(accessor, request, item) for item in request.values]
    return conjoin(predicate, QueryFilter(accessor.path, QueryOperator.IN, values))


def _build_between(
    accessor: FieldAccessor, request: "FilterRequest", predicate: QueryExpression
) -> QueryExpression:
    if not request.field_type.is_ordered:
        log.info(f"Can not use between for {request.field_type.name} field type.")
        return predicate
    start = _parse_for(accessor, request, request.value)
    end = _parse_for(accessor, request, request.value_to)
    range_expr = conjoin(
        QueryFilter(accessor.path, QueryOperator.GTE, start),
        QueryFilter(accessor.path, QueryOperator.LTE, end),
    )
    return conjoin(predicate, range_expr)


class Operator(Enum):
    """Comparison a filter applies between its field and its value(s)."""

    EQUAL = "EQUAL"
    NOT_EQUAL = "NOT_EQUAL"
    LIKE = "LIKE"
    IN = "IN"
    BETWEEN = "BETWEEN"

    def build(
        self,
        accessor: FieldAccessor,
        request: "FilterRequest",
        predicate: QueryExpression,
    ) -> QueryExpression:
        """
        Builds this operator's condition for ``request`` on the resolved field
        and ANDs it into ``predicate``.

        Raises:
            InvalidDataTypeError: If a value is missing, cannot be parsed
                under ``request.field_type`` or cannot be compared with the
                resolved field.
        """
        return _BUILDERS[self](accessor, request, predicate)


_BUILDERS: Dict[Operator, Callable[..., QueryExpression]] = {
    Operator.EQUAL: _build_equal,
    Operator.NOT_EQUAL: _build_not_equal,
    Operator.LIKE: _build_like,
    Operator.IN: _build_in,
    Operator.BETWEEN: _build_between,
}
