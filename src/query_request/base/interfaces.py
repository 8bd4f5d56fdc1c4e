# src/query_request/base/interfaces.py

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import LoggerAdapter
from typing import Generic, Iterator, List, Optional, Type, TypeVar

from query_request.base.query import QueryOptions
from query_request.base.request import SearchRequest
from query_request.base.schema import Schema
from query_request.base.specification import SearchSpecification

# Type variable for any entity
T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of search results plus the total number of matches."""

    content: List[T]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return not self.has_next

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    def __iter__(self) -> Iterator[T]:
        return iter(self.content)

    def __len__(self) -> int:
        return len(self.content)


class SearchRepository(Generic[T], ABC):
    """
    Execution backend for compiled searches.

    Implementations only have to run QueryOptions (`find_all`); `search`
    compiles a SearchRequest against the repository's schema first, so every
    KeyNotFoundError or InvalidDataTypeError is raised before anything is
    executed.
    """

    @property
    @abstractmethod
    def entity_type(self) -> Type[T]:
        """The entity type this repository manages."""
        pass

    @property
    def schema(self) -> Schema:
        """Schema the search keys are resolved against. Can be overridden."""
        return Schema.from_model(self.entity_type)

    @abstractmethod
    async def find_all(
        self,
        options: QueryOptions,
        logger: LoggerAdapter,
        timeout: Optional[float] = None,
    ) -> Page[T]:
        """
        Run compiled query options and return one page of entities.

        Args:
            options: Predicate, orderings and page parameters.
            logger: Logger adapter for recording operations.
            timeout: Optional timeout for the operation.

        Returns:
            The requested page together with the total number of matches.
        """
        pass

    async def search(
        self,
        request: SearchRequest,
        logger: LoggerAdapter,
        timeout: Optional[float] = None,
    ) -> Page[T]:
        """
        Compile ``request`` and run it.

        Raises:
            KeyNotFoundError: If a filter or sort key does not resolve.
            InvalidDataTypeError: If a filter value cannot be parsed.
        """
        specification = SearchSpecification(request)
        options = specification.build(self.schema)
        logger.debug(
            f"Searching {self.entity_type.__name__} with options: {options!r}"
        )
        return await self.find_all(options, logger, timeout)
