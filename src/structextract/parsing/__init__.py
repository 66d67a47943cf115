"""Parsing module for field tag strings."""

from structextract.parsing.tag_lexer import TagLexer
from structextract.parsing.tag_parser import TagParser

__all__ = [
    "TagLexer",
    "TagParser",
]
