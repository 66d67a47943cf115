"""Parser for field tag strings."""

from __future__ import annotations

from typing import Any

import ply.yacc as yacc

from structextract.errors import TagSyntaxError
from structextract.parsing.tag_lexer import TagLexer


class TagParser:
    """Parser turning a tag string into an ordered list of (key, value) pairs."""

    tokens = TagLexer.tokens

    def __init__(self) -> None:
        self.lexer = TagLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    def p_tag(self, p: yacc.YaccProduction) -> None:
        """tag : pair_list"""
        p[0] = p[1]

    def p_pair_list_single(self, p: yacc.YaccProduction) -> None:
        """pair_list : pair"""
        p[0] = [p[1]]

    def p_pair_list_multiple(self, p: yacc.YaccProduction) -> None:
        """pair_list : pair_list pair"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_pair(self, p: yacc.YaccProduction) -> None:
        """pair : KEY COLON STRING"""
        p[0] = (p[1], p[3])

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise TagSyntaxError(f"Syntax error at {p.value!r} (position {p.lexpos})")
        else:
            raise TagSyntaxError("Syntax error at end of tag")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> list[tuple[str, str]]:
        """Parse a tag string and return its (key, value) pairs in order."""
        if not data.strip():
            return []

        if self.parser is None:
            self.build(debug=False, write_tables=False)

        return self.parser.parse(data, lexer=self.lexer.lexer)
