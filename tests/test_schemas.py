"""Tests for YAML record schemas."""

import os.path

import pytest

from better_debug.errors import (
    DanglingSkipIfNoneError,
    DuplicateFieldError,
    SchemaError,
    UnresolvedFormatterError,
)
from better_debug.registry.formatter_registry import get_formatter_registry
from better_debug.registry.record_registry import format_record, get_record_registry
from better_debug.schemas import build_records, load_schema, parse_schema


class TestParseSchema:
    """Tests for schema layout parsing."""

    def test_parse_fields_and_options(self):
        data = {
            "records": {
                "Credentials": {
                    "fields": ["username", {"name": "password", "secret": None}],
                }
            }
        }
        parsed = parse_schema(data)
        assert parsed == {"Credentials": [("username", []), ("password", [("secret", None)])]}

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"records": []},
            {"records": {"A": {"fields": "username"}}},
            {"records": {"A": {"fields": [{"secret": True}]}}},
            {"records": {"A": {"fields": [42]}}},
        ],
    )
    def test_malformed_layout(self, data):
        with pytest.raises(SchemaError):
            parse_schema(data)

    @pytest.mark.parametrize("name", ["1abc", "with-dash", "__dunder", "class", ""])
    def test_invalid_field_names(self, name):
        with pytest.raises(SchemaError):
            parse_schema({"records": {"A": {"fields": [name]}}})

    def test_invalid_record_name(self):
        with pytest.raises(SchemaError):
            parse_schema({"records": {"Not Valid": {"fields": []}}})

    def test_duplicate_field(self):
        with pytest.raises(DuplicateFieldError):
            parse_schema({"records": {"A": {"fields": ["a", {"name": "a"}]}}})


class TestLoadSchema:
    """Tests for building records from schema files."""

    def test_load_and_render(self, schema_file):
        classes = load_schema(schema_file)

        assert set(classes) == {"Credentials", "Empty"}
        credentials = classes["Credentials"](username="alice", password="x", session="s")
        assert repr(credentials) == "Credentials { username: 'alice', Pwd: <SECRET> }"
        assert format_record(classes["Empty"]()) == "Empty { }"

    def test_missing_values_default_to_none(self, schema_file):
        classes = load_schema(schema_file)
        assert repr(classes["Credentials"]()) == "Credentials { username: None, Pwd: <SECRET> }"

    def test_records_are_registered(self, schema_file):
        load_schema(schema_file)
        assert get_record_registry().list_records() == ["Credentials", "Empty"]

    def test_named_formatter(self):
        get_formatter_registry().register_formatter("shout", lambda r: r.name.upper())
        classes = build_records(
            {"records": {"Person": {"fields": [{"name": "name", "cust_formatter": "shout"}]}}}
        )
        assert repr(classes["Person"](name="bob")) == "Person { name: BOB }"

    def test_import_path_formatter(self):
        """module:function references are imported."""
        classes = build_records(
            {
                "records": {
                    "FileRef": {
                        "fields": [{"name": "value", "cust_formatter": "os.path:basename"}]
                    }
                }
            }
        )
        plan = get_record_registry().get_plan(classes["FileRef"])
        assert plan.entries[0].action.formatter is os.path.basename

    def test_unresolved_formatter(self):
        with pytest.raises(UnresolvedFormatterError):
            build_records(
                {"records": {"A": {"fields": [{"name": "a", "cust_formatter": "nope"}]}}}
            )

    def test_invalid_directives(self):
        with pytest.raises(DanglingSkipIfNoneError):
            build_records(
                {
                    "records": {
                        "A": {"fields": [{"name": "a", "cust_formatter_skip_if_none": True}]}
                    }
                }
            )

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schema(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("records: [unclosed")
        with pytest.raises(SchemaError):
            load_schema(path)

    def test_record_without_body(self, tmp_path):
        """A record with no body, or an empty ``fields:`` key, has no fields."""
        path = tmp_path / "empty.yaml"
        path.write_text("records:\n  Bare:\n  Blank:\n    fields:\n")

        classes = load_schema(path)

        assert repr(classes["Bare"]()) == "Bare { }"
        assert repr(classes["Blank"]()) == "Blank { }"

    def test_non_mapping_body(self):
        with pytest.raises(SchemaError, match="record body"):
            parse_schema({"records": {"A": ["username"]}})

    def test_failed_build_registers_nothing(self):
        """An invalid record leaves none of the schema's records registered."""
        data = {
            "records": {
                "Valid": {"fields": ["a"]},
                "Invalid": {"fields": [{"name": "b", "cust_formatter_skip_if_none": True}]},
            }
        }
        with pytest.raises(DanglingSkipIfNoneError):
            build_records(data)
        assert get_record_registry().list_records() == []
