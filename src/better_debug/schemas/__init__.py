"""
YAML record schemas.

Describes record types and their field directives in an external file,
for records that are not declared in Python source:

    records:
      Credentials:
        fields:
          - username
          - name: password
            secret:
            rename_to: Pwd
          - name: token
            cust_formatter: myapp.formatters:mask_token
            cust_formatter_skip_if_none: true

Each record becomes a dataclass (every field defaulting to None) registered
with the record registry.
"""

from __future__ import annotations

import dataclasses
import keyword
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from better_debug.config.settings import RenderSettings
from better_debug.errors import ConfigError, DuplicateFieldError, SchemaError
from better_debug.record import better_debug
from better_debug.registry.record_registry import get_record_registry

logger = logging.getLogger(__name__)

# Record and field names must be valid Python identifiers
_VALID_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_name(name: Any, resource_type: str, type_name: str | None = None) -> str:
    """Validate a record or field name against the identifier pattern."""
    if not isinstance(name, str) or not name:
        raise SchemaError(f"{resource_type} name must be a non-empty string", type_name=type_name)
    if not _VALID_NAME_PATTERN.match(name) or name.startswith("__") or keyword.iskeyword(name):
        raise SchemaError(
            f"Invalid {resource_type} name '{name}': must match pattern "
            f"'^[A-Za-z_][A-Za-z0-9_]*$' and not be a keyword or start with '__'",
            type_name=type_name,
        )
    return name


def _parse_field(entry: Any, type_name: str) -> tuple[str, list[tuple[str, Any]]]:
    if isinstance(entry, str):
        return _validate_name(entry, "field", type_name), []
    if not isinstance(entry, dict) or "name" not in entry:
        raise SchemaError(
            "each field must be a name or a mapping with a 'name' key", type_name=type_name
        )
    name = _validate_name(entry["name"], "field", type_name)
    options = [(key, value) for key, value in entry.items() if key != "name"]
    return name, options


def parse_schema(data: Any) -> dict[str, list[tuple[str, list[tuple[str, Any]]]]]:
    """Parse loaded YAML data into ``{record: [(field, option pairs), ...]}``.

    Raises:
        SchemaError: The document does not follow the schema layout.
        DuplicateFieldError: A record declares the same field twice.
    """
    if not isinstance(data, dict) or not isinstance(data.get("records"), dict):
        raise SchemaError("schema must be a mapping with a 'records' mapping")

    records: dict[str, list[tuple[str, list[tuple[str, Any]]]]] = {}
    for type_name, body in data["records"].items():
        _validate_name(type_name, "record")
        # A record with no body, or with an empty `fields:` key, has no fields
        if body is None:
            body = {}
        if not isinstance(body, dict):
            raise SchemaError("record body must be a mapping", type_name=type_name)
        raw_fields = body.get("fields")
        if raw_fields is None:
            raw_fields = []
        if not isinstance(raw_fields, list):
            raise SchemaError("'fields' must be a list", type_name=type_name)

        fields = []
        seen: set[str] = set()
        for entry in raw_fields:
            name, options = _parse_field(entry, type_name)
            if name in seen:
                raise DuplicateFieldError(
                    "field declared more than once", type_name=type_name, field_name=name
                )
            seen.add(name)
            fields.append((name, options))
        records[type_name] = fields
    return records


def build_records(data: Any, *, settings: RenderSettings | None = None) -> dict[str, type]:
    """Create and register one dataclass per schema record.

    Either every record is registered or, if one of them is invalid, none is.
    """
    registry = get_record_registry()
    classes: dict[str, type] = {}
    try:
        for type_name, fields in parse_schema(data).items():
            cls = dataclasses.make_dataclass(
                type_name,
                [(name, Any, dataclasses.field(default=None)) for name, _ in fields],
            )
            options = {name: pairs for name, pairs in fields if pairs}
            classes[type_name] = better_debug(options=options, settings=settings)(cls)
            logger.debug("Built schema record %s with %d field(s)", type_name, len(fields))
    except ConfigError:
        for cls in classes.values():
            registry.unregister(cls)
        raise
    return classes


def load_schema(path: Path | str, *, settings: RenderSettings | None = None) -> dict[str, type]:
    """Load a YAML schema file and register its records.

    Args:
        path: Path to the YAML file.
        settings: Render settings captured into every record's plan.

    Returns:
        Mapping of record name to the generated record class.

    Raises:
        FileNotFoundError: If the schema file doesn't exist
        SchemaError: If the file is not valid YAML or not a valid schema
        ConfigError: If a record's directives are invalid
    """
    schema_path = Path(path)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    try:
        data = yaml.safe_load(schema_path.read_text())
    except yaml.YAMLError as e:
        raise SchemaError(f"invalid YAML in {schema_path}: {e}") from e

    classes = build_records(data, settings=settings)
    logger.info("Loaded %d record(s) from %s", len(classes), schema_path)
    return classes


__all__ = ["build_records", "load_schema", "parse_schema"]
