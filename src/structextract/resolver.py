"""Field resolution: walking a record's fields in declaration order."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any

from structextract.tags import StructTag
from structextract.types import (
    DescriptorRegistry,
    FieldDescriptor,
    RecordDescriptor,
    default_registry,
)


@dataclass(frozen=True)
class ResolvedField:
    """A field reached by the resolver, with its current value."""

    name: str
    tag: StructTag
    value: Any
    descriptor: FieldDescriptor

    def lookup(self, key: str, omit_empty: bool = False) -> tuple[str, bool]:
        """Look up the tag name for key.

        With omit_empty, a tag carrying the ``omitempty`` option on a field
        holding its zero value is reported as not found.
        """
        entry = self.tag.entry(key)
        if entry is None:
            return "", False
        if omit_empty and entry.omit_empty and self.descriptor.is_zero(self.value):
            return "", False
        return entry.name, True


class FieldResolver:
    """Resolves the ordered field list of a record instance."""

    def __init__(self, registry: DescriptorRegistry | None = None) -> None:
        self.registry = registry or default_registry

    def resolve(
        self,
        record: Any,
        ignored: Collection[str] = (),
        use_embedded: bool = False,
    ) -> list[ResolvedField]:
        """Return the record's fields in declaration order.

        Ignored names are skipped entirely, embedded records included.
        Embedded records are skipped unless use_embedded is set, in which case
        their own fields are spliced in at the position of the embedding field.

        Raises:
            InvalidTargetError: If record is not a record instance.
        """
        descriptor = self.registry.describe_record(record)
        return self._fields(descriptor, record, ignored, use_embedded)

    def _fields(
        self,
        descriptor: RecordDescriptor,
        record: Any,
        ignored: Collection[str],
        use_embedded: bool,
    ) -> list[ResolvedField]:
        fields: list[ResolvedField] = []
        for field in descriptor.fields:
            if field.name in ignored:
                continue

            value = getattr(record, field.name)
            if field.embedded is not None:
                if use_embedded:
                    fields.extend(self._fields(field.embedded, value, ignored, use_embedded))
                continue

            fields.append(
                ResolvedField(name=field.name, tag=field.tag, value=value, descriptor=field)
            )
        return fields

    def is_field_name_valid(
        self,
        record: Any,
        name: str,
        ignored: Collection[str] = (),
        use_embedded: bool = False,
    ) -> bool:
        """Check whether name is the declared name of a currently reachable field."""
        return any(f.name == name for f in self.resolve(record, ignored, use_embedded))
