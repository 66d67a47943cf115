"""Tests for the tag lexer, parser and StructTag."""

import pytest

from structextract.errors import TagSyntaxError
from structextract.parsing import TagParser
from structextract.parsing.tag_lexer import TagLexer, unquote
from structextract.tags import StructTag, TagEntry


class TestTagLexer:
    """Tests for the tag lexer."""

    def test_tokenize_single_pair(self):
        lexer = TagLexer()
        lexer.build()

        tokens = lexer.tokenize('json:"field_1"')
        token_types = [t.type for t in tokens]

        assert token_types == ["KEY", "COLON", "STRING"]
        assert tokens[0].value == "json"
        assert tokens[2].value == "field_1"

    def test_tokenize_multiple_pairs(self):
        lexer = TagLexer()
        lexer.build()

        tokens = lexer.tokenize('json:"field_1" db:"field1"')
        token_types = [t.type for t in tokens]

        assert token_types == ["KEY", "COLON", "STRING", "KEY", "COLON", "STRING"]

    def test_string_keeps_commas(self):
        lexer = TagLexer()
        lexer.build()

        tokens = lexer.tokenize('custom:"stringType,omitempty"')

        assert tokens[2].value == "stringType,omitempty"

    def test_escaped_quote_in_string(self):
        lexer = TagLexer()
        lexer.build()

        tokens = lexer.tokenize(r'doc:"say \"hi\""')

        assert tokens[2].value == 'say "hi"'

    def test_illegal_character(self):
        lexer = TagLexer()
        lexer.build()

        with pytest.raises(TagSyntaxError):
            lexer.tokenize('json:"unterminated')


class TestUnquote:
    def test_plain(self):
        assert unquote('"abc"') == "abc"

    def test_escapes(self):
        assert unquote(r'"a\tb\\c"') == "a\tb\\c"

    def test_empty(self):
        assert unquote('""') == ""


class TestTagParser:
    """Tests for the tag parser."""

    def test_parse_pairs_in_order(self):
        parser = TagParser()

        pairs = parser.parse('json:"fieldA" sql:"field_a"')

        assert pairs == [("json", "fieldA"), ("sql", "field_a")]

    def test_parse_empty(self):
        parser = TagParser()

        assert parser.parse("") == []
        assert parser.parse("   ") == []

    def test_parse_extra_whitespace(self):
        parser = TagParser()

        pairs = parser.parse('  json:"a"    db:"b"  ')

        assert pairs == [("json", "a"), ("db", "b")]

    def test_parse_reuses_parser(self):
        parser = TagParser()

        assert parser.parse('a:"1"') == [("a", "1")]
        assert parser.parse('b:"2"') == [("b", "2")]

    @pytest.mark.parametrize(
        "raw",
        [
            'json',
            'json:',
            'json:field',
            ':"value"',
            'json "value"',
        ],
    )
    def test_malformed(self, raw):
        parser = TagParser()

        with pytest.raises(TagSyntaxError):
            parser.parse(raw)

    def test_parser_recovers_after_error(self):
        parser = TagParser()

        with pytest.raises(TagSyntaxError):
            parser.parse("json:")
        assert parser.parse('json:"ok"') == [("json", "ok")]


class TestStructTag:
    """Tests for StructTag lookups."""

    def test_lookup_found(self):
        tag = StructTag('json:"field_1" db:"field1"')

        assert tag.lookup("json") == ("field_1", (), True)
        assert tag.lookup("db") == ("field1", (), True)

    def test_lookup_missing(self):
        tag = StructTag('json:"field_1"')

        assert tag.lookup("sql") == ("", (), False)

    def test_lookup_options(self):
        tag = StructTag('custom:"stringType,omitempty"')

        name, options, found = tag.lookup("custom")

        assert found
        assert name == "stringType"
        assert options == ("omitempty",)
        assert tag.entry("custom").omit_empty

    def test_empty_name_with_options(self):
        tag = StructTag('json:",omitempty"')

        assert tag.lookup("json") == ("", ("omitempty",), True)

    def test_first_pair_wins(self):
        tag = StructTag('json:"first" json:"second"')

        assert tag.get("json") == "first"

    def test_empty_tag(self):
        tag = StructTag()

        assert not tag
        assert tag.keys() == []
        assert "json" not in tag
        assert str(tag) == ""

    def test_keys_and_contains(self):
        tag = StructTag('json:"a" db:"b"')

        assert tag.keys() == ["json", "db"]
        assert "db" in tag
        assert str(tag) == 'json:"a" db:"b"'

    def test_equality(self):
        assert StructTag('json:"a"') == StructTag('json:"a"')
        assert StructTag('json:"a"') != StructTag('json:"b"')

    def test_malformed_tag_raises(self):
        with pytest.raises(TagSyntaxError):
            StructTag("json:nope")


class TestTagEntry:
    def test_from_pair(self):
        entry = TagEntry.from_pair("json", "name,omitempty,string")

        assert entry.key == "json"
        assert entry.name == "name"
        assert entry.options == ("omitempty", "string")
        assert entry.omit_empty

    def test_without_options(self):
        entry = TagEntry.from_pair("json", "name")

        assert entry.options == ()
        assert not entry.omit_empty
