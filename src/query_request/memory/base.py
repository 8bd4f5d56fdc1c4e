import asyncio
import copy
import re
from dataclasses import asdict, is_dataclass
from logging import LoggerAdapter
from typing import (
    Any,
    AsyncGenerator,
    Dict,
    Generic,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from query_request.base.interfaces import Page, SearchRepository
from query_request.base.query import (
    ALWAYS_TRUE,
    Ordering,
    QueryExpression,
    QueryFilter,
    QueryLogical,
    QueryOperator,
    QueryOptions,
)
from query_request.base.schema import Schema

T = TypeVar("T")


def _like_to_regex(pattern: str) -> "re.Pattern[str]":
    """
    Translates a SQL LIKE pattern ("%" any run, "_" one character) to a regex.
    """
    parts = []
    for char in pattern:
        if char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def _get_nested_value(entity_dict: Dict[str, Any], nested_field: str) -> Any:
    """
    Get a value from a nested field using dot notation.
    """
    curr: Any = entity_dict
    for part in nested_field.split("."):
        if isinstance(curr, dict):
            if part not in curr:
                return None
            curr = curr[part]
        elif curr is not None and hasattr(curr, part):
            curr = getattr(curr, part)
        else:
            return None
    return curr


class MemoryRepository(SearchRepository[T], Generic[T]):
    """
    In-memory search backend using Python lists and dictionaries.

    Entities are kept in insertion order, which is also the result order when
    a search has no orderings.
    """

    def __init__(self, entity_cls: Type[T], schema: Optional[Schema] = None):
        self._entity_cls = entity_cls
        self._schema = schema
        self._records: List[Tuple[Dict[str, Any], T]] = []

    @property
    def entity_type(self) -> Type[T]:
        return self._entity_cls

    @property
    def schema(self) -> Schema:
        if self._schema is None:
            self._schema = Schema.from_model(self._entity_cls)
        return self._schema

    async def store(self, entity: T, logger: LoggerAdapter) -> None:
        """
        Store a copy of an entity.

        Raises:
            ValueError: If the entity is not of the expected type.
        """
        if not isinstance(entity, self._entity_cls):
            raise ValueError(
                f"Entity must be of type {self._entity_cls.__name__}, "
                f"got {type(entity).__name__}"
            )
        entity_copy = copy.deepcopy(entity)
        self._records.append((self._entity_to_dict(entity_copy), entity_copy))
        logger.debug(f"Stored {self._entity_cls.__name__} #{len(self._records)}")

    async def store_many(self, entities: List[T], logger: LoggerAdapter) -> None:
        for entity in entities:
            await self.store(entity, logger)

    async def find_all(
        self,
        options: QueryOptions,
        logger: LoggerAdapter,
        timeout: Optional[float] = None,
    ) -> Page[T]:
        logger.debug(
            f"Finding {self._entity_cls.__name__} with options: {options!r}"
        )
        await asyncio.sleep(0)
        filtered = self._filter_records(options.expression)
        sorted_records = self._sort_records(filtered, options.order_by)
        page_records = sorted_records[options.offset : options.offset + options.limit]
        return Page(
            content=[copy.deepcopy(entity) for _, entity in page_records],
            total_elements=len(filtered),
            page=options.page,
            size=options.size,
        )

    async def list(
        self, logger: LoggerAdapter, options: Optional[QueryOptions] = None
    ) -> AsyncGenerator[T, None]:
        options = options or QueryOptions()
        page = await self.find_all(options, logger)
        for entity in page.content:
            yield entity

    async def count(
        self, logger: LoggerAdapter, options: Optional[QueryOptions] = None
    ) -> int:
        options = options or QueryOptions()
        await asyncio.sleep(0)
        return len(self._filter_records(options.expression))

    def _filter_records(
        self, expression: QueryExpression
    ) -> List[Tuple[Dict[str, Any], T]]:
        return [
            record
            for record in self._records
            if self._matches_expression(record[0], expression)
        ]

    def _matches_expression(
        self, entity_dict: Dict[str, Any], expr: QueryExpression
    ) -> bool:
        if expr is ALWAYS_TRUE:
            return True
        if isinstance(expr, QueryLogical):
            if expr.operator != "and":
                raise ValueError(f"Unsupported logical operator: {expr.operator}")
            return all(
                self._matches_expression(entity_dict, sub_expr)
                for sub_expr in expr.conditions
            )
        if isinstance(expr, QueryFilter):
            entity_value = _get_nested_value(entity_dict, expr.field_path)
            return self._check_operator(expr.operator, entity_value, expr.value)
        raise TypeError(f"Unsupported expression type: {type(expr).__name__}")

    def _check_operator(
        self, operator: QueryOperator, entity_value: Any, filter_value: Any
    ) -> bool:
        # A missing field never matches, like NULL in SQL.
        if entity_value is None:
            return False
        if operator is QueryOperator.EQ:
            return entity_value == filter_value
        elif operator is QueryOperator.NE:
            return entity_value != filter_value
        elif operator is QueryOperator.GTE:
            return entity_value >= filter_value
        elif operator is QueryOperator.LTE:
            return entity_value <= filter_value
        elif operator is QueryOperator.IN:
            return entity_value in filter_value
        elif operator is QueryOperator.LIKE:
            regex = _like_to_regex(str(filter_value))
            return bool(regex.fullmatch(str(entity_value).upper()))
        else:
            raise ValueError(f"Unsupported operator: {operator}")

    def _sort_records(
        self,
        records: List[Tuple[Dict[str, Any], T]],
        order_by: List[Ordering],
    ) -> List[Tuple[Dict[str, Any], T]]:
        sorted_records = list(records)
        # Stable sorts applied from the last key to the first leave the first
        # ordering as the primary key. None sorts before any value.
        for ordering in reversed(order_by):
            sorted_records.sort(
                key=lambda record: self._sort_key(record[0], ordering.field_path),
                reverse=ordering.descending,
            )
        return sorted_records

    @staticmethod
    def _sort_key(entity_dict: Dict[str, Any], field_path: str) -> Tuple[bool, Any]:
        value = _get_nested_value(entity_dict, field_path)
        return (value is not None, value if value is not None else 0)

    def _entity_to_dict(self, entity: T) -> Dict[str, Any]:
        if hasattr(entity, "model_dump"):
            return entity.model_dump()
        if is_dataclass(entity) and not isinstance(entity, type):
            return asdict(entity)
        if isinstance(entity, dict):
            return dict(entity)
        return dict(entity.__dict__)
