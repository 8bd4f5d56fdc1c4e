# src/query_request/base/sort.py
from enum import Enum
from typing import TYPE_CHECKING

from .query import Ordering
from .schema import FieldAccessor

if TYPE_CHECKING:
    from .request import SortRequest


class SortDirection(Enum):
    """Direction of one sort key."""

    ASC = "ASC"
    DESC = "DESC"

    def build(self, accessor: FieldAccessor, request: "SortRequest") -> Ordering:
        return Ordering(accessor.path, descending=self is SortDirection.DESC)
