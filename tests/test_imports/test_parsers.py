"""Tests for CSV parsing."""

from app.imports.parsers import (
    EVENT_REQUIRED_HEADERS,
    MATERIAL_REQUIRED_HEADERS,
    missing_headers,
    parse_csv,
    row_number,
    split_fields,
)


class TestParseHeaders:
    """Header line handling."""

    def test_headers_trimmed_and_lowercased(self):
        """Header names are trimmed and lower-cased, order preserved."""
        parsed = parse_csv(" School , DATE,Grade_Level ,title,LINK\nwlhs,2025-09-01,10,A,B")

        assert parsed.headers == ["school", "date", "grade_level", "title", "link"]

    def test_header_roundtrip(self):
        """Re-joining parsed headers reproduces the normalized header line."""
        header_line = "school,date,grade_level,title,link"
        parsed = parse_csv(header_line + "\nwlhs,2025-09-01,10,A,B\n")

        assert ",".join(parsed.headers) == header_line

    def test_empty_input(self):
        """Empty or blank input yields no headers and no rows."""
        assert parse_csv("").headers == []
        assert parse_csv("\n  \n\n").rows == []

    def test_leading_blank_lines_skipped(self):
        """The first non-blank line is the header."""
        parsed = parse_csv("\n\n  \nschool,title\nwlhs,Hello")

        assert parsed.headers == ["school", "title"]
        assert parsed.rows == [{"school": "wlhs", "title": "Hello"}]


class TestParseRows:
    """Data line handling."""

    def test_basic_rows(self):
        parsed = parse_csv("school,date\nwlhs,2025-09-01\nwvhs,2025-09-02\n")

        assert parsed.rows == [
            {"school": "wlhs", "date": "2025-09-01"},
            {"school": "wvhs", "date": "2025-09-02"},
        ]

    def test_quoted_comma_kept_in_field(self):
        """Commas inside double quotes do not split the field."""
        parsed = parse_csv('school,title,description\nwlhs,"Hello, World","a, b, c"')

        assert parsed.rows[0]["title"] == "Hello, World"
        assert parsed.rows[0]["description"] == "a, b, c"

    def test_values_trimmed(self):
        parsed = parse_csv("school,title\n  wlhs  ,   Spaced Title   ")

        assert parsed.rows[0] == {"school": "wlhs", "title": "Spaced Title"}

    def test_blank_lines_inside_data_dropped(self):
        """Blank lines between rows are removed before numbering."""
        parsed = parse_csv("a,b\n1,2\n\n   \n3,4\n")

        assert len(parsed.rows) == 2
        assert parsed.rows[1] == {"a": "3", "b": "4"}

    def test_missing_trailing_fields_are_empty(self):
        parsed = parse_csv("a,b,c\n1")

        assert parsed.rows[0] == {"a": "1", "b": "", "c": ""}

    def test_extra_fields_dropped(self):
        parsed = parse_csv("a\n1,2,3")

        assert parsed.rows[0] == {"a": "1"}

    def test_crlf_line_endings(self):
        """Windows line endings leave no stray carriage returns."""
        parsed = parse_csv("a,b\r\n1,2\r\n")

        assert parsed.headers == ["a", "b"]
        assert parsed.rows == [{"a": "1", "b": "2"}]

    def test_unbalanced_quote_does_not_raise(self):
        """An unterminated quote swallows the remaining separators."""
        parsed = parse_csv('a,b\n"x,y')

        assert parsed.rows == [{"a": "x,y", "b": ""}]


class TestHelpers:
    def test_split_fields_drops_quotes(self):
        assert split_fields('"a",b,"c, d"') == ["a", "b", "c, d"]

    def test_split_fields_empty_line(self):
        assert split_fields("") == [""]

    def test_row_number_offsets_header(self):
        """First data row is display row 2."""
        assert row_number(0) == 2
        assert row_number(9) == 11

    def test_missing_headers_materials(self):
        assert missing_headers(["school", "date", "title"], MATERIAL_REQUIRED_HEADERS) == [
            "grade_level",
            "link",
        ]

    def test_missing_headers_none(self):
        assert missing_headers(["title", "date", "school", "extra"], EVENT_REQUIRED_HEADERS) == []
