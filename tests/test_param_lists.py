"""
Tests for adapters/param_lists

Tests cover:
- JSON array parsing (order, empty list, malformed input)
- CSV parsing
- Format detection from the location
- load_parameters with an injected reader
"""
from __future__ import annotations

import pytest

from adapters.param_lists import ParamFormat, load_parameters, parse_parameters
from core.errors import LoadError, ParseError


class TestJsonParameters:

    def test_preserves_order_and_content(self):
        assert parse_parameters('["b", "a", "c", "a"]') == ["b", "a", "c", "a"]

    def test_empty_array_is_valid(self):
        assert parse_parameters("[]") == []

    def test_keeps_whitespace_and_unicode(self):
        assert parse_parameters('[" x ", "ñandú"]') == [" x ", "ñandú"]

    @pytest.mark.parametrize("text", ['"not an array"', '{"a": 1}', "42", "null"])
    def test_non_array_is_parse_error(self, text):
        with pytest.raises(ParseError, match="JSON array"):
            parse_parameters(text)

    def test_truncated_json_is_parse_error(self):
        with pytest.raises(ParseError, match="not valid JSON"):
            parse_parameters('["a", "b"')

    @pytest.mark.parametrize("text", ['["a", 1]', '["a", null]', '[["a"]]', '[true]'])
    def test_non_string_elements_are_rejected(self, text):
        with pytest.raises(ParseError, match="only contain strings"):
            parse_parameters(text)

    def test_parse_error_is_a_load_error(self):
        assert issubclass(ParseError, LoadError)


class TestCsvParameters:

    def test_first_column_per_row(self):
        text = "a,ignored\nb\n\nc\n"
        assert parse_parameters(text, ParamFormat.CSV) == ["a", "b", "c"]

    def test_values_are_kept_raw_like_json(self):
        text = " x ,y\n\n\tz\n"
        assert parse_parameters(text, ParamFormat.CSV) == [" x ", "\tz"]
        assert parse_parameters('[" x ", "\\tz"]') == [" x ", "\tz"]

    def test_quoted_values(self):
        assert parse_parameters('"x,y"\nz\n', ParamFormat.CSV) == ["x,y", "z"]


class TestFormatDetection:

    @pytest.mark.parametrize("location, expected", [
        ("gs://bucket/params.json", ParamFormat.JSON),
        ("gs://bucket/params.CSV", ParamFormat.CSV),
        ("https://host/list.csv?token=1", ParamFormat.CSV),
        ("/tmp/params", ParamFormat.JSON),
    ])
    def test_from_location(self, location, expected):
        assert ParamFormat.from_location(location) is expected


class TestLoadParameters:

    def test_reads_once_and_returns_values(self, fake_reader):
        reader = fake_reader({"gs://b/p.json": '["a","b"]'})
        assert load_parameters("gs://b/p.json", reader) == ["a", "b"]
        assert reader.reads == ["gs://b/p.json"]

    def test_csv_location(self, fake_reader):
        reader = fake_reader({"gs://b/p.csv": "1\n2\n"})
        assert load_parameters("gs://b/p.csv", reader) == ["1", "2"]

    def test_missing_object(self, fake_reader):
        with pytest.raises(LoadError):
            load_parameters("gs://b/missing.json", fake_reader({}))

    def test_empty_location(self, fake_reader):
        with pytest.raises(LoadError, match="empty"):
            load_parameters("  ", fake_reader({}))
