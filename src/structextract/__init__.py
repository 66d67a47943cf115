"""structextract - Field names, tags and values of dataclass records."""

from structextract.codec import JsonCodec
from structextract.errors import (
    DecodeError,
    InvalidTargetError,
    StructExtractError,
    TagSyntaxError,
)
from structextract.extractor import Extractor
from structextract.merge import MergeEngine
from structextract.resolver import FieldResolver, ResolvedField
from structextract.tags import StructTag, TagEntry
from structextract.types import (
    DescriptorRegistry,
    FieldDescriptor,
    RecordDescriptor,
    default_registry,
    embedded,
    tagged,
)

__all__ = [
    # Main API
    "Extractor",
    "tagged",
    "embedded",
    # Descriptors
    "DescriptorRegistry",
    "RecordDescriptor",
    "FieldDescriptor",
    "StructTag",
    "TagEntry",
    "default_registry",
    # Engines
    "FieldResolver",
    "ResolvedField",
    "MergeEngine",
    "JsonCodec",
    # Errors
    "StructExtractError",
    "InvalidTargetError",
    "DecodeError",
    "TagSyntaxError",
]

__version__ = "0.1.0"
