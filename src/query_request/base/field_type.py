# src/query_request/base/field_type.py
import logging
import re
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict

# --- Setup Logging ---
log = logging.getLogger(__name__)

# Wire format for DATE literals, e.g. "01-03-2022 00:10:00".
DATE_FORMAT = "%d-%m-%Y %H:%M:%S"

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")
_INT32_RANGE = (-(2**31), 2**31 - 1)
_INT64_RANGE = (-(2**63), 2**63 - 1)


def _as_text(raw: Any) -> str:
    """Renders a raw request value the way it appears in a JSON body."""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    return str(raw)


def _parse_boolean(raw: str) -> bool:
    # Anything other than "true" is False, there is no failure case.
    return raw.lower() == "true"


def _parse_char(raw: str) -> str:
    if not raw:
        raise ValueError("CHAR value cannot be empty")
    return raw[0]


def _parse_date(raw: str) -> Any:
    try:
        return datetime.strptime(raw, DATE_FORMAT)
    except ValueError as e:
        log.info(f"Failed parse field type DATE {e}")
        return None


def _parse_double(raw: str) -> float:
    return float(raw)


def _parse_bounded_integer(raw: str, bounds, type_name: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(raw):
        raise ValueError(f"'{raw}' is not a valid {type_name}")
    value = int(raw)
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{value} is out of range for {type_name}")
    return value


def _parse_integer(raw: str) -> int:
    return _parse_bounded_integer(raw, _INT32_RANGE, "INTEGER")


def _parse_long(raw: str) -> int:
    return _parse_bounded_integer(raw, _INT64_RANGE, "LONG")


def _parse_string(raw: str) -> str:
    return raw


class FieldType(Enum):
    """Declared type of a filter value; decides how the raw value is parsed."""

    BOOLEAN = "BOOLEAN"
    CHAR = "CHAR"
    DATE = "DATE"
    DOUBLE = "DOUBLE"
    INTEGER = "INTEGER"
    LONG = "LONG"
    STRING = "STRING"

    def parse(self, raw: Any) -> Any:
        """
        Parses a raw request value into the Python value for this type.

        Non-string raw values (JSON numbers and booleans) are rendered to text
        first. DATE returns None instead of raising when the text does not
        match DATE_FORMAT; every other type raises ValueError on bad input.
        """
        return _PARSERS[self](_as_text(raw))

    @property
    def is_numeric(self) -> bool:
        return self in (FieldType.DOUBLE, FieldType.INTEGER, FieldType.LONG)

    @property
    def is_ordered(self) -> bool:
        """True for the types BETWEEN can build a range for."""
        return self is FieldType.DATE or self.is_numeric


_PARSERS: Dict[FieldType, Callable[[str], Any]] = {
    FieldType.BOOLEAN: _parse_boolean,
    FieldType.CHAR: _parse_char,
    FieldType.DATE: _parse_date,
    FieldType.DOUBLE: _parse_double,
    FieldType.INTEGER: _parse_integer,
    FieldType.LONG: _parse_long,
    FieldType.STRING: _parse_string,
}
