# src/query_request/base/request.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .field_type import FieldType
from .operator import Operator
from .sort import SortDirection


class FilterRequest(BaseModel):
    """
    One filter clause of a search request.

    ``value``, ``value_to`` and ``values`` are kept exactly as received and
    only parsed when the operator is built, under the declared
    ``field_type``. ``value_to`` is used by BETWEEN, ``values`` by IN.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    operator: Operator
    field_type: FieldType
    value: Optional[Any] = None
    value_to: Optional[Any] = None
    values: Optional[List[Any]] = None


class SortRequest(BaseModel):
    """One sort clause: the field key and its direction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str
    direction: SortDirection


class SearchRequest(BaseModel):
    """
    The complete search request body.

    Example:
        {
          "filters": [{"key": "name", "operator": "EQUAL",
                       "field_type": "STRING", "value": "CentOS"}],
          "sorts": [{"key": "releaseDate", "direction": "ASC"}],
          "page": 0,
          "size": 10
        }
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    filters: List[FilterRequest] = Field(default_factory=list)
    sorts: List[SortRequest] = Field(default_factory=list)
    page: Optional[int] = Field(default=None, ge=0)
    size: Optional[int] = Field(default=None, ge=1)

    @field_validator("filters", "sorts", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        # An explicit null in the body means "no clauses".
        if value is None:
            return []
        return value
