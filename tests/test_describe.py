"""Tests for the record describe tool."""

from dataclasses import dataclass

import pytest

from structextract import DescriptorRegistry, embedded, tagged
from structextract.describe import describe, format_descriptor, load_record_type, main, tag_names


@dataclass
class Customer:
    Name: str = tagged('json:"name" db:"customer_name"', default="")
    Email: str = tagged('json:"email"', default="")


@dataclass
class Order:
    ID: int = tagged('json:"id" db:"order_id"', default=0)
    Customer: Customer = embedded(Customer)
    Total: float = 0.0


@dataclass
class Broken:
    Name: str = tagged("json:name", default="")


NOT_A_RECORD = str


@pytest.fixture
def registry():
    return DescriptorRegistry()


class TestLoadRecordType:
    """Tests for importing record types by path."""

    def test_load(self):
        assert load_record_type(f"{__name__}:Order") is Order

    def test_load_dotted_attribute(self):
        assert load_record_type(f"{__name__}:Order.__mro__") == Order.__mro__

    @pytest.mark.parametrize("target", ["Order", ":Order", f"{__name__}:"])
    def test_bad_format(self, target):
        with pytest.raises(ValueError):
            load_record_type(target)


class TestFormatDescriptor:
    def test_table(self, registry):
        lines = format_descriptor(registry.describe(Order))

        assert lines == [
            "Order",
            '  ID        int  json:"id" db:"order_id"',
            "  Customer  (embedded Customer)",
            '    Name   str  json:"name" db:"customer_name"',
            '    Email  str  json:"email"',
            "  Total     float",
        ]


class TestTagNames:
    def test_top_level_only(self, registry):
        assert tag_names(registry.describe(Order), "db") == [("ID", "order_id")]

    def test_with_embedded(self, registry):
        pairs = tag_names(registry.describe(Order), "db", use_embedded=True)

        assert pairs == [("ID", "order_id"), ("Name", "customer_name")]

    def test_missing_tag(self, registry):
        assert tag_names(registry.describe(Order), "xml", use_embedded=True) == []


class TestDescribe:
    def test_full_table(self, registry):
        out = describe(Order, registry=registry)

        assert out.splitlines()[0] == "Order"
        assert "(embedded Customer)" in out

    def test_tag(self, registry):
        out = describe(Order, "db", use_embedded=True, registry=registry)

        assert out == "ID    order_id\nName  customer_name"

    def test_tag_without_fields(self, registry):
        assert describe(Order, "xml", registry=registry) == "Order has no fields tagged 'xml'"


class TestMain:
    """Tests for the main entry point."""

    def test_main_describes_record(self, capsys):
        """Test printing the field table."""
        result = main([f"{__name__}:Order"])
        assert result == 0

        captured = capsys.readouterr()
        assert captured.out.splitlines()[0] == "Order"
        assert "  Total     float" in captured.out

    def test_main_tag(self, capsys):
        """Test listing the names under one tag."""
        result = main([f"{__name__}:Order", "--tag", "json", "--embedded"])
        assert result == 0

        captured = capsys.readouterr()
        assert captured.out.splitlines() == [
            "ID     id",
            "Name   name",
            "Email  email",
        ]

    @pytest.mark.parametrize(
        "target",
        [
            "no_colon",
            "structextract_no_such_module:Order",
            f"{__name__}:Missing",
        ],
    )
    def test_main_cannot_load(self, capsys, target):
        """Test error when the target cannot be imported."""
        result = main([target])
        assert result == 1

        captured = capsys.readouterr()
        assert "Cannot load" in captured.err

    def test_main_not_a_record(self, capsys):
        """Test error when the target is not a record type."""
        result = main([f"{__name__}:NOT_A_RECORD"])
        assert result == 1

        assert capsys.readouterr().err.startswith("Error:")

    def test_main_malformed_tag(self, capsys):
        """Test error when a field carries a malformed tag."""
        result = main([f"{__name__}:Broken"])
        assert result == 1

        assert "Error:" in capsys.readouterr().err
