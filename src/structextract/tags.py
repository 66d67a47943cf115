"""Field tags: parsed ``key:"value,opt"`` annotations."""

from __future__ import annotations

from dataclasses import dataclass, field

from structextract.parsing import TagParser

OMIT_EMPTY = "omitempty"

_parser: TagParser | None = None


def parse_tag(raw: str) -> list[tuple[str, str]]:
    """Parse a raw tag string with the shared parser."""
    global _parser
    if _parser is None:
        _parser = TagParser()
    return _parser.parse(raw)


@dataclass(frozen=True)
class TagEntry:
    """One ``key:"name,opt,..."`` pair of a tag."""

    key: str
    name: str
    options: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_pair(cls, key: str, value: str) -> TagEntry:
        name, *options = value.split(",")
        return cls(key=key, name=name, options=tuple(options))

    @property
    def omit_empty(self) -> bool:
        return OMIT_EMPTY in self.options


class StructTag:
    """The parsed tag attached to a record field.

    A tag is a space separated list of ``key:"value"`` pairs. The value is
    split on commas into a name and a list of options, e.g.
    ``json:"created_at,omitempty"`` has the name ``created_at`` and the
    option ``omitempty``. When a key is repeated the first pair wins.

    A malformed tag string raises TagSyntaxError here, so a record type with
    a bad tag fails when it is first described rather than reporting its
    keys as missing.
    """

    def __init__(self, raw: str = "") -> None:
        self.raw = raw
        self._entries: dict[str, TagEntry] = {}
        for key, value in parse_tag(raw):
            if key not in self._entries:
                self._entries[key] = TagEntry.from_pair(key, value)

    def lookup(self, key: str) -> tuple[str, tuple[str, ...], bool]:
        """Look up a tag key.

        Returns:
            A ``(name, options, found)`` triple. A missing key yields
            ``("", (), False)``.
        """
        entry = self._entries.get(key)
        if entry is None:
            return "", (), False
        return entry.name, entry.options, True

    def entry(self, key: str) -> TagEntry | None:
        """Get the entry for a key, or None."""
        return self._entries.get(key)

    def get(self, key: str) -> str:
        """Get the tag name for a key, or an empty string."""
        name, _, _ = self.lookup(key)
        return name

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"StructTag({self.raw!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructTag):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(tuple(self._entries.values()))
