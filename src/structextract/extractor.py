"""Extractor: field names, tags and values of a record instance."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from structextract.codec import JsonCodec
from structextract.merge import MergeEngine
from structextract.resolver import FieldResolver, ResolvedField
from structextract.types import DescriptorRegistry, default_registry, is_record


class Extractor:
    """Extracts data from a record (dataclass) instance.

    Configuration calls return the extractor, so they can be chained::

        ext = Extractor(business).ignore_field("ID", "DateModified")
        columns = ext.names_from_tag("db")

    Every read operation raises InvalidTargetError when the bound value is
    not a record instance.
    """

    def __init__(
        self,
        record: Any,
        registry: DescriptorRegistry | None = None,
        codec: JsonCodec | None = None,
    ) -> None:
        self.record = record
        self.registry = registry or default_registry
        self._resolver = FieldResolver(self.registry)
        self._merger = MergeEngine(self.registry, codec)
        self._ignored_fields: list[str] = []
        self._use_embedded_structs = False

    @property
    def ignored_fields(self) -> tuple[str, ...]:
        return tuple(self._ignored_fields)

    @property
    def embedded_structs(self) -> bool:
        return self._use_embedded_structs

    # ---- configuration ----

    def ignore_field(self, *names: str) -> Extractor:
        """Add fields to the ignore list.

        Names that do not match a reachable field are dropped silently, and
        nothing is ignored when the bound value is not a record instance.
        """
        if not self.is_valid():
            return self
        for name in names:
            if self._is_field_name_valid(name):
                self._ignored_fields.append(name)
        return self

    def use_embedded_structs(self, use: bool = True) -> Extractor:
        """Toggle flattening of embedded records."""
        self._use_embedded_structs = use
        return self

    # ---- names ----

    def names(self) -> list[str]:
        """Return the field names in declaration order."""
        return [f.name for f in self._fields()]

    def names_from_tag(self, tag: str) -> list[str]:
        """Return the tag names of the fields carrying tag."""
        out = []
        for f in self._fields():
            name, ok = f.lookup(tag, omit_empty=True)
            if ok:
                out.append(name)
        return out

    def names_from_tag_with_prefix(self, tag: str, prefix: str) -> list[str]:
        """Return the tag names of the fields carrying tag, prefixed with prefix."""
        out = []
        for f in self._fields():
            name, ok = f.lookup(tag, omit_empty=True)
            if ok:
                out.append((prefix + name).strip())
        return out

    # ---- values ----

    def values(self) -> list[Any]:
        """Return the field values in declaration order."""
        return [f.value for f in self._fields()]

    def values_from_tag(self, tag: str) -> list[Any]:
        """Return the values of the fields carrying tag."""
        out = []
        for f in self._fields():
            _, ok = f.lookup(tag, omit_empty=True)
            if ok:
                out.append(f.value)
        return out

    def field_value_map(self) -> dict[str, Any]:
        """Return a mapping of field name to value."""
        return {f.name: f.value for f in self._fields()}

    def field_value_from_tag_map(self, tag: str) -> dict[str, Any]:
        """Return a mapping of tag name to value for the fields carrying tag."""
        out = {}
        for f in self._fields():
            name, ok = f.lookup(tag, omit_empty=True)
            if ok:
                out[name] = f.value
        return out

    # ---- tag translation ----

    def tag_mapping(self, from_tag: str, to_tag: str) -> dict[str, str]:
        """Map the from_tag names of the fields to their to_tag names.

        Useful to translate partial JSON objects into another naming, such
        as SQL columns. Fields missing either tag are left out.
        """
        out = {}
        for f in self._fields():
            from_name, from_ok = f.lookup(from_tag)
            to_name, to_ok = f.lookup(to_tag)
            if from_ok and to_ok:
                out[from_name] = to_name
        return out

    def get_changeset_for_tag(
        self,
        data: Mapping[str, Any],
        input_tag: str,
        output_tag: str,
    ) -> dict[str, Any]:
        """Re-key data from input_tag names to output_tag names.

        Helpful to build partial updates of a database row from a partial
        API payload. Only keys belonging to a field that carries both tags
        are kept.
        """
        out = {}
        for f in self._fields():
            input_name, ok = f.lookup(input_tag)
            if not ok:
                continue
            output_name, ok = f.lookup(output_tag)
            if not ok:
                continue
            if input_name in data:
                out[output_name] = data[input_name]
        return out

    # ---- merging ----

    def apply_map(self, data: Mapping[str, Any], input_tag: str = "") -> Any:
        """Apply data to a new copy of the bound record.

        Keys are matched against the input_tag names of the fields, or the
        field names when input_tag is empty. Matched fields take the decoded
        update value, every other field (ignored fields included) keeps its
        current value. The bound record is not modified.

        Raises:
            InvalidTargetError: If the bound value is not a record instance.
            DecodeError: If data cannot be decoded into the record type.
        """
        return self._merger.apply(self.record, self._fields(), data, input_tag)

    # ---- helpers ----

    def is_valid(self) -> bool:
        """Check whether the bound value is a record instance."""
        return is_record(self.record)

    def _fields(self) -> list[ResolvedField]:
        return self._resolver.resolve(
            self.record, self._ignored_fields, self._use_embedded_structs
        )

    def _is_field_name_valid(self, name: str) -> bool:
        return self._resolver.is_field_name_valid(
            self.record, name, self._ignored_fields, self._use_embedded_structs
        )

    def __repr__(self) -> str:
        return f"Extractor({type(self.record).__name__}, ignored={self._ignored_fields!r})"
