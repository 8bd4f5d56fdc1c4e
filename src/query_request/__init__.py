# src/query_request/__init__.py

"""
Query Request Library Initialization.

This package compiles declarative search requests (filters, sorts and
pagination, usually received as a JSON body) into a backend-agnostic predicate
tree, an ordered list of orderings and normalized page parameters.

It initializes a logger with a NullHandler and makes the request models, the
specification compiler, the exceptions and the in-memory repository available
at the top level.
"""

import logging

# --------------------------------------------------------------------------
# Logging Setup
# --------------------------------------------------------------------------
# Library logs are discarded unless the consuming application configures
# logging for the "query_request" logger.
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
logger.propagate = False

# --------------------------------------------------------------------------
# Exception Exports
# --------------------------------------------------------------------------
from .base.exceptions import (
    SearchRequestError,
    KeyNotFoundError,
    InvalidDataTypeError,
)

# --------------------------------------------------------------------------
# Request Model Exports
# --------------------------------------------------------------------------
# FieldType, Operator and SortDirection are the closed sets a request can use.
from .base.field_type import FieldType
from .base.operator import Operator
from .base.sort import SortDirection
from .base.request import FilterRequest, SortRequest, SearchRequest

# --------------------------------------------------------------------------
# Compilation Exports
# --------------------------------------------------------------------------
from .base.schema import Schema, FieldAccessor, resolve_path
from .base.query import (
    ALWAYS_TRUE,
    Ordering,
    PageRequest,
    QueryExpression,
    QueryFilter,
    QueryLogical,
    QueryOperator,
    QueryOptions,
)
from .base.specification import SearchSpecification

# --------------------------------------------------------------------------
# Repository Exports
# --------------------------------------------------------------------------
from .base.interfaces import SearchRepository, Page
from .memory.base import MemoryRepository

__all__ = [
    # Exceptions
    "SearchRequestError",
    "KeyNotFoundError",
    "InvalidDataTypeError",
    # Request
    "FieldType",
    "Operator",
    "SortDirection",
    "FilterRequest",
    "SortRequest",
    "SearchRequest",
    # Compilation
    "Schema",
    "FieldAccessor",
    "resolve_path",
    "ALWAYS_TRUE",
    "Ordering",
    "PageRequest",
    "QueryExpression",
    "QueryFilter",
    "QueryLogical",
    "QueryOperator",
    "QueryOptions",
    "SearchSpecification",
    # Repositories
    "SearchRepository",
    "MemoryRepository",
    "Page",
    # Logging
    "logger",
]

__version__ = "0.1.0"
