"""Tool for printing the field descriptor table of a record type."""

from __future__ import annotations

import argparse
import importlib
import sys
from typing import Any

from structextract.errors import InvalidTargetError, TagSyntaxError
from structextract.types import (
    DescriptorRegistry,
    RecordDescriptor,
    default_registry,
    hint_name,
)


def load_record_type(target: str) -> type:
    """Import a record type from a ``package.module:Name`` string."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Expected 'module:Name', got {target!r}")

    obj: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj


def format_descriptor(descriptor: RecordDescriptor, indent: int = 0) -> list[str]:
    """Render a descriptor as one line per field, embedded records nested."""
    prefix = "  " * indent
    lines = []
    if indent == 0:
        lines.append(descriptor.name)

    width = max((len(f.name) for f in descriptor.fields), default=0)
    for f in descriptor.fields:
        if f.embedded is not None:
            lines.append(f"{prefix}  {f.name.ljust(width)}  (embedded {f.embedded.name})")
            lines.extend(format_descriptor(f.embedded, indent + 1))
            continue
        line = f"{prefix}  {f.name.ljust(width)}  {hint_name(f.hint)}"
        if f.tag:
            line += f"  {f.tag}"
        lines.append(line)
    return lines


def tag_names(
    descriptor: RecordDescriptor,
    tag: str,
    use_embedded: bool = False,
) -> list[tuple[str, str]]:
    """Return (field name, tag name) pairs for the fields carrying tag.

    The order and the embedded handling follow the field resolver.
    """
    out = []
    for f in descriptor.fields:
        if f.embedded is not None:
            if use_embedded:
                out.extend(tag_names(f.embedded, tag, use_embedded))
            continue
        name, _, found = f.tag.lookup(tag)
        if found:
            out.append((f.name, name))
    return out


def describe(
    record_type: type,
    tag: str | None = None,
    use_embedded: bool = False,
    registry: DescriptorRegistry | None = None,
) -> str:
    """Describe a record type as text."""
    descriptor = (registry or default_registry).describe(record_type)
    if tag is None:
        return "\n".join(format_descriptor(descriptor))

    pairs = tag_names(descriptor, tag, use_embedded)
    if not pairs:
        return f"{descriptor.name} has no fields tagged '{tag}'"
    width = max(len(field_name) for field_name, _ in pairs)
    return "\n".join(f"{field_name.ljust(width)}  {name}" for field_name, name in pairs)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print the fields and tags of a record type"
    )
    parser.add_argument(
        "target",
        help="Record type to describe, as 'package.module:Name'",
    )
    parser.add_argument(
        "-t", "--tag",
        default=None,
        help="Only list the names the fields carry under this tag key",
    )
    parser.add_argument(
        "-e", "--embedded",
        action="store_true",
        help="Include the fields of embedded records when listing tag names",
    )

    args = parser.parse_args(argv)

    try:
        record_type = load_record_type(args.target)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: Cannot load {args.target}: {e}", file=sys.stderr)
        return 1

    try:
        print(describe(record_type, args.tag, args.embedded))
    except (InvalidTargetError, TagSyntaxError, TypeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
