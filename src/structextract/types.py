"""Record and field descriptors for the structextract library."""

from __future__ import annotations

import dataclasses
import sys
from dataclasses import dataclass, field
from types import NoneType, UnionType
from typing import Annotated, Any, Iterator, Union, get_args, get_origin, get_type_hints

from structextract.errors import InvalidTargetError
from structextract.tags import StructTag

# Keys used in dataclasses.field(metadata=...)
TAG_KEY = "tag"
EMBEDDED_KEY = "embedded"

# Zero values for scalar hints; containers are built fresh by calling the type
_SCALAR_ZEROS: dict[type, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
}
_CONTAINER_TYPES = (list, dict, tuple, set, frozenset)


def tagged(tag: str, **kwargs: Any) -> Any:
    """Declare a dataclass field carrying a tag string.

    Example:
        name: str = tagged('json:"name" db:"name"', default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return field(metadata=metadata, **kwargs)


def embedded(record_type: type, **kwargs: Any) -> Any:
    """Declare an embedded record field.

    The fields of an embedded record are promoted into the parent record
    when embedded flattening is enabled.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[EMBEDDED_KEY] = record_type
    if "default" not in kwargs:
        kwargs.setdefault("default_factory", record_type)
    return field(metadata=metadata, **kwargs)


def is_record_type(obj: Any) -> bool:
    """Check whether obj is a record (dataclass) type."""
    return isinstance(obj, type) and dataclasses.is_dataclass(obj)


def is_record(obj: Any) -> bool:
    """Check whether obj is a record (dataclass) instance."""
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def check_record(obj: Any) -> None:
    """Raise InvalidTargetError unless obj is a record instance."""
    if obj is None:
        raise InvalidTargetError("record passed is not valid, got None")
    if isinstance(obj, type):
        raise InvalidTargetError(
            f"record passed is not valid, an instance was expected, got type {obj.__name__}"
        )
    if not dataclasses.is_dataclass(obj):
        raise InvalidTargetError(
            f"record passed is not valid, a dataclass instance was expected, "
            f"got {type(obj).__name__}"
        )


def set_field(instance: Any, name: str, value: Any) -> None:
    """Assign a field on a record instance, frozen or not."""
    object.__setattr__(instance, name, value)


def strip_annotated(hint: Any) -> Any:
    """Remove Annotated[...] wrappers from a type hint."""
    while get_origin(hint) is Annotated:
        hint = get_args(hint)[0]
    return hint


def split_optional(hint: Any) -> tuple[Any, bool]:
    """Split Optional[X] / X | None into (X, True); other hints into (hint, False).

    Unions of several non-None members are returned unchanged.
    """
    hint = strip_annotated(hint)
    if get_origin(hint) not in (Union, UnionType):
        return hint, False
    args = get_args(hint)
    members = [a for a in args if a is not NoneType]
    nullable = len(members) != len(args)
    if len(members) == 1:
        return strip_annotated(members[0]), nullable
    return hint, nullable


def hint_name(hint: Any) -> str:
    """Human readable name for a type hint."""
    if hint is Any:
        return "Any"
    if isinstance(hint, type) and get_origin(hint) is None:
        return hint.__name__
    return str(hint).replace("typing.", "")


@dataclass
class FieldDescriptor:
    """Definition of a field within a record type."""

    name: str
    hint: Any
    tag: StructTag
    embedded: RecordDescriptor | None = None
    init: bool = True

    @property
    def is_embedded(self) -> bool:
        return self.embedded is not None

    def zero(self) -> Any:
        """Return the zero value for this field."""
        if self.embedded is not None:
            return self.embedded.zero()
        return zero_value(self.hint)

    def is_zero(self, value: Any) -> bool:
        """Check whether value equals this field's zero value."""
        zero = self.zero()
        if zero is None:
            return value is None
        return bool(value == zero)


@dataclass
class RecordDescriptor:
    """Descriptor table for a record (dataclass) type.

    Fields are kept in declaration order. Embedded records carry their own
    nested descriptor, so the whole record shape forms a tree that can be
    walked depth-first.
    """

    record_type: type
    fields: list[FieldDescriptor] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.record_type.__name__

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Get a directly declared field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def walk(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], FieldDescriptor]]:
        """Yield (path, field) for every non-embedded field, depth-first.

        The path holds the names of the embedding fields followed by the
        field's own name.
        """
        for f in self.fields:
            path = prefix + (f.name,)
            if f.embedded is not None:
                yield from f.embedded.walk(path)
            else:
                yield path, f

    def zero(self) -> Any:
        """Create a zero-valued instance of the record type."""
        kwargs = {f.name: f.zero() for f in self.fields if f.init}
        instance = self.record_type(**kwargs)
        for f in self.fields:
            if not f.init and not hasattr(instance, f.name):
                set_field(instance, f.name, f.zero())
        return instance


class DescriptorRegistry:
    """Registry of record descriptors, built once per record type."""

    def __init__(self) -> None:
        self._descriptors: dict[type, RecordDescriptor] = {}

    def get(self, record_type: type) -> RecordDescriptor | None:
        """Get a cached descriptor, or None."""
        return self._descriptors.get(record_type)

    def describe(self, record_type: type) -> RecordDescriptor:
        """Get the descriptor for a record type, building it on first use."""
        descriptor = self._descriptors.get(record_type)
        if descriptor is not None:
            return descriptor

        if not is_record_type(record_type):
            raise InvalidTargetError(
                f"{record_type!r} is not a record type, a dataclass was expected"
            )

        descriptor = self._build(record_type)
        self._descriptors[record_type] = descriptor
        return descriptor

    def describe_record(self, record: Any) -> RecordDescriptor:
        """Get the descriptor for a record instance."""
        check_record(record)
        return self.describe(type(record))

    def _build(self, record_type: type) -> RecordDescriptor:
        try:
            hints = get_type_hints(record_type, include_extras=True)
        except NameError:
            # Some annotation does not resolve; resolve field by field below
            hints = {}

        descriptor = RecordDescriptor(record_type=record_type)
        for f in dataclasses.fields(record_type):
            hint = hints[f.name] if f.name in hints else _field_hint(record_type, f)
            nested = None
            embedded_type = f.metadata.get(EMBEDDED_KEY)
            if embedded_type is not None:
                if embedded_type is True:
                    embedded_type = strip_annotated(hint)
                if not is_record_type(embedded_type):
                    raise TypeError(
                        f"Embedded field '{f.name}' of '{record_type.__name__}' "
                        f"must be a record type, got {hint_name(embedded_type)}"
                    )
                if f.default is None:
                    raise TypeError(
                        f"Embedded field '{f.name}' of '{record_type.__name__}' "
                        "cannot default to None"
                    )
                nested = self.describe(embedded_type)

            descriptor.fields.append(
                FieldDescriptor(
                    name=f.name,
                    hint=hint,
                    tag=StructTag(f.metadata.get(TAG_KEY, "")),
                    embedded=nested,
                    init=f.init,
                )
            )
        return descriptor

    def list_types(self) -> list[str]:
        """List the names of all described record types."""
        return [t.__name__ for t in self._descriptors]

    def __contains__(self, record_type: type) -> bool:
        return record_type in self._descriptors


def _field_hint(record_type: type, f: dataclasses.Field) -> Any:
    """Resolve the type hint of one field, or Any when it does not resolve."""
    embedded_type = f.metadata.get(EMBEDDED_KEY)
    if is_record_type(embedded_type):
        return embedded_type
    if not isinstance(f.type, str):
        return f.type

    # Module names shadow class attributes, as in get_type_hints
    module = sys.modules.get(record_type.__module__)
    module_ns = dict(vars(module)) if module is not None else {}
    try:
        return eval(f.type, dict(vars(record_type)), module_ns)
    except (NameError, AttributeError, SyntaxError, TypeError):
        return Any


default_registry = DescriptorRegistry()


def zero_value(hint: Any, registry: DescriptorRegistry | None = None) -> Any:
    """Return the zero value for a type hint.

    Optional, Any and unknown hints are None; record types are zero instances.
    """
    hint, nullable = split_optional(hint)
    if nullable or hint is Any:
        return None

    origin = get_origin(hint)
    if origin in (Union, UnionType):
        return zero_value(get_args(hint)[0], registry)
    if origin is not None:
        hint = origin

    if not isinstance(hint, type):
        return None
    if is_record_type(hint):
        return (registry or default_registry).describe(hint).zero()
    if hint in _SCALAR_ZEROS:
        return _SCALAR_ZEROS[hint]
    if hint in _CONTAINER_TYPES:
        return hint()
    return None
