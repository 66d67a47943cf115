"""JSON codec used to decode update maps into record instances."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ConfigDict, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from structextract.errors import DecodeError
from structextract.types import (
    DescriptorRegistry,
    FieldDescriptor,
    RecordDescriptor,
    default_registry,
    hint_name,
    is_record,
    is_record_type,
    set_field,
    split_optional,
)

# bytes travel as base64 text in both directions
_ADAPTER_CONFIG = ConfigDict(
    ser_json_bytes="base64",
    val_json_bytes="base64",
    arbitrary_types_allowed=True,
)

# (key, path, field) triples, shallowest fields first
KeyTable = list[tuple[str, tuple[str, ...], FieldDescriptor]]


class JsonCodec:
    """Encode keyed data as JSON and decode it into typed record instances.

    Record fields are matched by their ``json`` tag name, or by their field
    name when they have no such tag. An exact key match wins over a
    case-insensitive one, embedded record fields are promoted into their
    parent, fields tagged ``json:"-"`` are never decoded and unknown keys
    are ignored.

    Field values are validated with pydantic in strict JSON mode, so a value
    decodes into a field when it is the JSON form of the field's type: ISO
    strings for datetimes, dates and UUIDs, base64 text for bytes, enum
    values for enums. Nested records are decoded by key like the top-level
    record.
    """

    def __init__(self, registry: DescriptorRegistry | None = None, tag_key: str = "json") -> None:
        self.registry = registry or default_registry
        self.tag_key = tag_key
        self._key_tables: dict[type, KeyTable] = {}
        self._adapters: dict[Any, TypeAdapter] = {}

    # ---- encoding ----

    def encode(self, data: Mapping[str, Any]) -> str:
        """Encode a mapping as a JSON document.

        Raises:
            DecodeError: If a value cannot be represented as JSON.
        """
        try:
            return json.dumps(dict(data), default=self._encode_default)
        except (TypeError, ValueError, PydanticSerializationError) as e:
            raise DecodeError(f"Cannot encode update: {e}") from e

    def _encode_default(self, obj: Any) -> Any:
        if is_record(obj):
            return self.to_dict(obj)
        return to_jsonable_python(obj, bytes_mode="base64")

    def to_dict(self, record: Any) -> dict[str, Any]:
        """Convert a record to a dict keyed by the codec's key convention."""
        descriptor = self.registry.describe_record(record)
        out: dict[str, Any] = {}
        for key, path, _ in self._key_table(descriptor):
            if key in out:
                continue
            value = record
            for step in path:
                value = getattr(value, step)
            out[key] = value
        return out

    # ---- decoding ----

    def decode(self, payload: str | bytes, record_type: type) -> Any:
        """Decode a JSON document into a new zero-valued record_type instance.

        Raises:
            DecodeError: If the payload is not a JSON object or a value does
                not fit the type of the field it maps to.
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Invalid JSON: {e}") from e

        descriptor = self.registry.describe(record_type)
        if not isinstance(data, dict):
            raise DecodeError(
                f"Cannot decode {type(data).__name__} into record {descriptor.name}"
            )

        instance = descriptor.zero()
        self.decode_into(descriptor, instance, data)
        return instance

    def decode_into(self, descriptor: RecordDescriptor, instance: Any, data: Mapping[str, Any]) -> None:
        """Populate instance from data, field by field."""
        table = self._key_table(descriptor)
        for key, value in data.items():
            match = self._match(table, key)
            if match is None:
                continue
            path, field = match

            # null into a non-nullable field leaves it untouched
            if value is None and not _accepts_none(field.hint):
                continue

            target = instance
            for step in path[:-1]:
                target = getattr(target, step)
            set_field(target, path[-1], self._decode_value(value, field.hint, path))

    def _key_table(self, descriptor: RecordDescriptor) -> KeyTable:
        table = self._key_tables.get(descriptor.record_type)
        if table is not None:
            return table

        table = []
        for path, field in descriptor.walk():
            name, options, found = field.tag.lookup(self.tag_key)
            if found and name == "-" and not options:
                continue
            table.append((name if found and name else field.name, path, field))
        # Shallower fields shadow promoted ones of the same key
        table.sort(key=lambda entry: len(entry[1]))

        self._key_tables[descriptor.record_type] = table
        return table

    def _match(self, table: KeyTable, key: str) -> tuple[tuple[str, ...], FieldDescriptor] | None:
        for name, path, field in table:
            if name == key:
                return path, field
        folded = key.casefold()
        for name, path, field in table:
            if name.casefold() == folded:
                return path, field
        return None

    def _decode_value(self, value: Any, hint: Any, path: tuple[str, ...]) -> Any:
        base, _ = split_optional(hint)
        if base is Any or base is object:
            return value
        if value is not None and is_record_type(base):
            if not isinstance(value, dict):
                raise _mismatch(value, hint, path)
            nested = self.registry.describe(base)
            instance = nested.zero()
            self.decode_into(nested, instance, value)
            return instance

        try:
            return self._adapter(hint).validate_json(json.dumps(value), strict=True)
        except ValidationError as e:
            raise _mismatch(value, hint, path) from e

    def _adapter(self, hint: Any) -> TypeAdapter:
        adapter = self._adapters.get(hint)
        if adapter is None:
            adapter = TypeAdapter(hint, config=_ADAPTER_CONFIG)
            self._adapters[hint] = adapter
        return adapter


def _accepts_none(hint: Any) -> bool:
    base, nullable = split_optional(hint)
    return nullable or base is Any or base is object


def _mismatch(value: Any, hint: Any, path: tuple[str, ...]) -> DecodeError:
    return DecodeError(
        f"Cannot decode {type(value).__name__} value {value!r} into field "
        f"'{'.'.join(path)}' of type {hint_name(hint)}"
    )
