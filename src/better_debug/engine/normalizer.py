"""
Directive Normalizer.

Turns the raw per-field option pairs delivered by a front end (decorator
metadata, class options mapping, YAML schema) into typed ``FieldDirective``
objects. Option names follow the attribute vocabulary:

    secret                         flag
    cust_formatter                 callable or formatter name
    cust_formatter_skip_if_none    flag
    rename_to                      display label
    exclude / ignore               flag
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Union

from better_debug.errors import (
    ConfigError,
    DuplicateFieldError,
    DuplicateOptionError,
    InvalidOptionValueError,
    UnknownOptionError,
    UnresolvedFormatterError,
)
from better_debug.protocol.types import FieldDirective, Formatter, RecordSpec

if TYPE_CHECKING:
    from better_debug.registry.formatter_registry import FormatterRegistry

logger = logging.getLogger(__name__)

OPT_SECRET = "secret"
OPT_CUST_FORMATTER = "cust_formatter"
OPT_SKIP_IF_NONE = "cust_formatter_skip_if_none"
OPT_RENAME_TO = "rename_to"
OPT_EXCLUDE = "exclude"
OPT_IGNORE = "ignore"

# Option name -> canonical option it sets
KNOWN_OPTIONS: dict[str, str] = {
    OPT_SECRET: OPT_SECRET,
    OPT_CUST_FORMATTER: OPT_CUST_FORMATTER,
    OPT_SKIP_IF_NONE: OPT_SKIP_IF_NONE,
    OPT_RENAME_TO: OPT_RENAME_TO,
    OPT_EXCLUDE: OPT_EXCLUDE,
    OPT_IGNORE: OPT_EXCLUDE,
}

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "off", "0"})

RawOptions = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]


def iter_option_pairs(options: RawOptions | None) -> list[tuple[str, Any]]:
    """Flatten a mapping or pair sequence into a list of (key, value) pairs."""
    if options is None:
        return []
    if isinstance(options, Mapping):
        return list(options.items())
    return [(key, value) for key, value in options]


def _coerce_flag(field_name: str, key: str, value: Any) -> bool:
    # A bare flag (``secret`` with no value) arrives as None
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise InvalidOptionValueError(
        f"expected a boolean flag, got {value!r}", field_name=field_name, key=key
    )


def _coerce_label(field_name: str, key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidOptionValueError(
            f"expected a string label, got {type(value).__name__}",
            field_name=field_name,
            key=key,
        )
    if not value.strip():
        raise InvalidOptionValueError("label must not be empty", field_name=field_name, key=key)
    return value


def _resolve_formatter(
    field_name: str,
    key: str,
    value: Any,
    resolver: FormatterRegistry,
    owner: type | None,
) -> Formatter:
    if isinstance(value, str):
        func = resolver.resolve(value, owner=owner)
        if func is None:
            raise UnresolvedFormatterError(
                f"formatter '{value}' does not resolve to a callable",
                field_name=field_name,
                key=key,
            )
        return func
    if callable(value):
        return value
    raise InvalidOptionValueError(
        f"expected a callable or formatter name, got {type(value).__name__}",
        field_name=field_name,
        key=key,
    )


def normalize_directive(
    field_name: str,
    options: RawOptions | None = None,
    *,
    resolver: FormatterRegistry | None = None,
    owner: type | None = None,
) -> FieldDirective:
    """Build a FieldDirective from raw option pairs.

    Args:
        field_name: Declared field identifier.
        options: Mapping or sequence of (option name, value) pairs. Passing
            pairs lets duplicate keys be detected.
        resolver: Registry used to resolve string formatter references.
        owner: Record class, used as a lookup scope for formatter names.

    Returns:
        The normalized, immutable directive.

    Raises:
        UnknownOptionError: An option name is not recognized.
        DuplicateOptionError: An option (or its alias) is given twice.
        InvalidOptionValueError: An option value has the wrong type.
        UnresolvedFormatterError: A formatter name resolves to nothing.
    """
    seen: dict[str, str] = {}
    values: dict[str, Any] = {}

    for key, value in iter_option_pairs(options):
        canonical = KNOWN_OPTIONS.get(key)
        if canonical is None:
            known = ", ".join(sorted(KNOWN_OPTIONS))
            raise UnknownOptionError(
                f"unknown option (known: {known})", field_name=field_name, key=key
            )
        if canonical in seen:
            previous = seen[canonical]
            detail = "given more than once" if previous == key else f"duplicates '{previous}'"
            raise DuplicateOptionError(detail, field_name=field_name, key=key)
        seen[canonical] = key
        values[canonical] = value

    formatter: Formatter | None = None
    if OPT_CUST_FORMATTER in values:
        if resolver is None:
            from better_debug.registry.formatter_registry import get_formatter_registry

            resolver = get_formatter_registry()
        formatter = _resolve_formatter(
            field_name,
            seen[OPT_CUST_FORMATTER],
            values[OPT_CUST_FORMATTER],
            resolver,
            owner,
        )

    rename = None
    if OPT_RENAME_TO in values:
        rename = _coerce_label(field_name, OPT_RENAME_TO, values[OPT_RENAME_TO])

    def flag(option: str) -> bool:
        if option not in values:
            return False
        return _coerce_flag(field_name, seen[option], values[option])

    return FieldDirective(
        field_name=field_name,
        is_secret=flag(OPT_SECRET),
        custom_formatter=formatter,
        skip_if_none=flag(OPT_SKIP_IF_NONE),
        excluded=flag(OPT_EXCLUDE),
        rename=rename,
    )


def normalize_record(
    type_name: str,
    fields: Iterable[tuple[str, RawOptions | None]],
    *,
    resolver: FormatterRegistry | None = None,
    owner: type | None = None,
) -> RecordSpec:
    """Normalize every field of a record, keeping declaration order."""
    directives: list[FieldDirective] = []
    names: set[str] = set()

    for field_name, options in fields:
        if field_name in names:
            raise DuplicateFieldError(
                "field declared more than once", type_name=type_name, field_name=field_name
            )
        names.add(field_name)
        try:
            directives.append(
                normalize_directive(field_name, options, resolver=resolver, owner=owner)
            )
        except ConfigError as e:
            e.with_type_name(type_name)
            raise

    logger.debug("Normalized %d field(s) for %s", len(directives), type_name)
    return RecordSpec(type_name=type_name, directives=tuple(directives))
