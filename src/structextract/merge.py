"""Merging sparse updates into records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from structextract.codec import JsonCodec
from structextract.resolver import ResolvedField
from structextract.types import (
    DescriptorRegistry,
    RecordDescriptor,
    default_registry,
    set_field,
)


def touched_fields(
    fields: Iterable[ResolvedField],
    data: Mapping[str, Any],
    input_tag: str = "",
) -> set[str]:
    """Return the names of the fields addressed by data.

    A field's lookup key is its declared name when input_tag is empty,
    otherwise its tag name for input_tag; fields without that tag are
    never touched.
    """
    touched: set[str] = set()
    for field in fields:
        if input_tag:
            key, found = field.lookup(input_tag)
            if not found:
                continue
        else:
            key = field.name

        if key in data:
            touched.add(field.name)
    return touched


def partially_apply(
    descriptor: RecordDescriptor,
    source: Any,
    target: Any,
    touched: set[str],
) -> None:
    """Copy every field not in touched from source to target.

    Embedded records are always descended into. source and target must be
    instances of the same record type.
    """
    for field in descriptor.fields:
        if field.embedded is not None:
            partially_apply(
                field.embedded,
                getattr(source, field.name),
                getattr(target, field.name),
                touched,
            )
            continue

        # Already set from the update
        if field.name in touched:
            continue

        set_field(target, field.name, getattr(source, field.name))


class MergeEngine:
    """Builds a new record from an original record and a sparse update."""

    def __init__(
        self,
        registry: DescriptorRegistry | None = None,
        codec: JsonCodec | None = None,
    ) -> None:
        self.registry = registry or default_registry
        self.codec = codec or JsonCodec(self.registry)

    def apply(
        self,
        record: Any,
        fields: Iterable[ResolvedField],
        data: Mapping[str, Any],
        input_tag: str = "",
    ) -> Any:
        """Merge data into a fresh copy of record.

        Fields addressed by data take the decoded update value; every other
        field, including fields the resolver did not reach, keeps the value
        it has in record.

        Args:
            record: The original record instance. It is not modified.
            fields: The resolved fields that may be addressed by data.
            data: The sparse update.
            input_tag: Tag key used to match data keys; empty to match
                declared field names.

        Raises:
            InvalidTargetError: If record is not a record instance.
            DecodeError: If data cannot be decoded into the record type.
        """
        descriptor = self.registry.describe_record(record)
        touched = touched_fields(fields, data, input_tag)

        # Some values decode differently into a typed field than they would
        # into a plain mapping, so the update goes through the codec as a whole
        out = self.codec.decode(self.codec.encode(data), descriptor.record_type)

        partially_apply(descriptor, record, out, touched)
        return out
