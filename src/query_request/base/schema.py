# src/query_request/base/schema.py
import logging
from dataclasses import dataclass, is_dataclass
from datetime import date, datetime
from inspect import isclass
from typing import (
    Any,
    ClassVar,
    Dict,
    Mapping,
    Optional,
    Type,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from .exceptions import KeyNotFoundError

# --- Setup Logging ---
log = logging.getLogger(__name__)

# Leaf types that are never descended into, even though some carry annotations.
_SCALAR_TYPES = (str, int, float, bool, bytes, date, datetime)


def _is_none_type(t: Any) -> bool:
    return t is type(None)


def _unwrap_optional(t: Any) -> Any:
    """Optional[X] -> X; any other type is returned unchanged."""
    if get_origin(t) is Union:
        non_none = [a for a in get_args(t) if not _is_none_type(a)]
        if len(non_none) == 1:
            return non_none[0]
    return t


def _is_structured(t: Any) -> bool:
    """True for classes whose annotated fields form a nested schema."""
    if not isclass(t) or issubclass(t, _SCALAR_TYPES):
        return False
    return (
        hasattr(t, "model_fields")
        or is_dataclass(t)
        or bool(getattr(t, "__annotations__", None))
    )


def _model_hints(cls: Type) -> Dict[str, Any]:
    """Field name -> annotation, taken from pydantic metadata when present."""
    model_fields = getattr(cls, "model_fields", None)
    if model_fields:
        return {name: info.annotation for name, info in model_fields.items()}
    try:
        return get_type_hints(cls)
    except (TypeError, NameError) as e:
        raise TypeError(f"Could not get hints for {cls.__name__}: {e}") from e


def _field_aliases(cls: Type) -> Dict[str, str]:
    """Maps pydantic aliases to field names."""
    aliases: Dict[str, str] = {}
    model_fields = getattr(cls, "model_fields", None)
    if model_fields:
        for name, info in model_fields.items():
            if info.alias and info.alias != name:
                aliases[info.alias] = name
    return aliases


@dataclass(frozen=True)
class FieldAccessor:
    """A resolved reference to a (possibly nested) scalar field."""

    path: str
    python_type: Any = Any

    def __repr__(self) -> str:
        return f"FieldAccessor({self.path!r})"


class Schema:
    """
    Static description of an entity's fields.

    Each field maps to either a scalar type (any Python type) or a nested
    Schema. Aliases let a request address a field by an alternative name,
    e.g. ``releaseDate`` for ``release_date``; the resolved path always uses
    the field names.
    """

    name: str
    fields: Dict[str, Union[Any, "Schema"]]
    aliases: Dict[str, str]

    def __init__(
        self,
        fields: Mapping[str, Any],
        name: str = "Schema",
        aliases: Optional[Mapping[str, str]] = None,
    ):
        self.name = name
        self.fields = {}
        for field_name, field_type in fields.items():
            if isinstance(field_type, Mapping):
                field_type = Schema(field_type, name=f"{name}.{field_name}")
            self.fields[field_name] = field_type
        self.aliases = dict(aliases or {})

    @classmethod
    def from_model(cls, model_cls: Type) -> "Schema":
        """
        Builds a schema from the type hints of a pydantic model, dataclass or
        plain annotated class. Optional fields are unwrapped and nested
        structured classes become nested schemas. Collections stay scalar
        leaves and cannot be traversed.
        """
        return cls._from_model(model_cls, seen=())

    @classmethod
    def _from_model(cls, model_cls: Type, seen: tuple) -> "Schema":
        if not isclass(model_cls):
            raise TypeError(
                f"model_cls must be a class, received {type(model_cls)}."
            )
        log.debug(f"Generating schema for {model_cls.__name__}")
        fields: Dict[str, Any] = {}
        for field_name, hint in _model_hints(model_cls).items():
            if field_name.startswith("_") or get_origin(hint) is ClassVar:
                continue
            field_type = _unwrap_optional(hint)
            # Self-referencing models stop at the first repetition.
            if _is_structured(field_type) and field_type not in seen:
                fields[field_name] = cls._from_model(
                    field_type, seen=seen + (model_cls,)
                )
            else:
                fields[field_name] = field_type
        return cls(fields, name=model_cls.__name__, aliases=_field_aliases(model_cls))

    @classmethod
    def of(cls, schema_or_model: Any) -> "Schema":
        """Accepts a Schema, a plain mapping or a model class."""
        if isinstance(schema_or_model, Schema):
            return schema_or_model
        if isinstance(schema_or_model, Mapping):
            return cls(schema_or_model)
        return cls.from_model(schema_or_model)

    def field_names(self):
        return list(self.fields)

    def _lookup(self, segment: str) -> Optional[str]:
        if segment in self.fields:
            return segment
        return self.aliases.get(segment)

    def resolve(self, key: str) -> FieldAccessor:
        """
        Resolves a dotted key such as ``"os.kernel.version"`` to a scalar field.

        Raises KeyNotFoundError carrying the whole key as soon as a segment is
        missing at the current level, when a scalar would have to be
        descended into, or when the key ends on a nested schema.
        """
        log.debug(f"Resolving key '{key}' against schema {self.name}")
        if not isinstance(key, str) or not key:
            raise KeyNotFoundError(str(key))

        current: Schema = self
        resolved_parts = []
        segments = key.split(".")
        for index, segment in enumerate(segments):
            field_name = current._lookup(segment)
            if field_name is None:
                log.debug(
                    f"  Segment '{segment}' does not exist in {current.name}"
                )
                raise KeyNotFoundError(key)
            resolved_parts.append(field_name)
            field_type = current.fields[field_name]
            is_last = index == len(segments) - 1

            if isinstance(field_type, Schema):
                if is_last:
                    log.debug(f"  Key '{key}' ends on nested schema {field_type.name}")
                    raise KeyNotFoundError(key)
                current = field_type
                continue

            if not is_last:
                log.debug(f"  Cannot descend into scalar field '{field_name}'")
                raise KeyNotFoundError(key)

            accessor = FieldAccessor(".".join(resolved_parts), field_type)
            log.debug(f"  Resolved '{key}' to {accessor!r}")
            return accessor

        # Unreachable, split always yields at least one segment.
        raise KeyNotFoundError(key)

    def __contains__(self, key: str) -> bool:
        try:
            self.resolve(key)
        except KeyNotFoundError:
            return False
        return True

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, fields={self.field_names()!r})"


def resolve_path(schema: Any, key: str) -> FieldAccessor:
    """Resolves ``key`` against a Schema, mapping or model class."""
    return Schema.of(schema).resolve(key)
