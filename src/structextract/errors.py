"""Exceptions raised by structextract."""


class StructExtractError(Exception):
    """Base class for all structextract errors."""


class InvalidTargetError(StructExtractError, TypeError):
    """The bound value is not a record (dataclass) instance."""


class DecodeError(StructExtractError, ValueError):
    """An update map could not be encoded or decoded into a record type."""


class TagSyntaxError(StructExtractError, ValueError):
    """A field tag string is malformed."""
