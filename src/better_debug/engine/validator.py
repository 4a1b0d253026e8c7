"""
Directive Validator.

Rejects directive combinations that cannot be rendered meaningfully before a
plan is built:

- ``cust_formatter_skip_if_none`` needs a ``cust_formatter``.
- ``exclude`` cannot be combined with any other directive.
- ``secret`` with ``cust_formatter``: secrecy wins and the formatter is never
  called. In strict mode the combination is rejected instead.
"""

from __future__ import annotations

import logging

from better_debug.errors import (
    ConfigError,
    ConflictingDirectivesError,
    DanglingSkipIfNoneError,
    DuplicateFieldError,
)
from better_debug.protocol.types import FieldDirective, RecordSpec

logger = logging.getLogger(__name__)


def validate_directive(directive: FieldDirective, *, strict_secrets: bool = False) -> None:
    """Check one field's directives.

    Raises:
        DanglingSkipIfNoneError: skip_if_none set without a custom formatter.
        ConflictingDirectivesError: exclude combined with anything else, or
            secret combined with a custom formatter in strict mode.
    """
    name = directive.field_name

    if directive.excluded:
        others = [d for d in directive.describe() if d != "exclude"]
        if others:
            raise ConflictingDirectivesError(
                f"'exclude' cannot be combined with {', '.join(others)}", field_name=name
            )
        return

    if directive.skip_if_none and directive.custom_formatter is None:
        raise DanglingSkipIfNoneError(
            "'cust_formatter_skip_if_none' requires 'cust_formatter'", field_name=name
        )

    if directive.is_secret and directive.custom_formatter is not None:
        if strict_secrets:
            raise ConflictingDirectivesError(
                "'secret' cannot be combined with 'cust_formatter' in strict mode",
                field_name=name,
            )
        logger.warning(
            "Field '%s' is secret and declares a custom formatter; "
            "the formatter will never be called",
            name,
        )


def validate_spec(spec: RecordSpec, *, strict_secrets: bool = False) -> None:
    """Check every field of a record spec, in declaration order."""
    seen: set[str] = set()
    for directive in spec.directives:
        if directive.field_name in seen:
            raise DuplicateFieldError(
                "field declared more than once",
                type_name=spec.type_name,
                field_name=directive.field_name,
            )
        seen.add(directive.field_name)
        try:
            validate_directive(directive, strict_secrets=strict_secrets)
        except ConfigError as e:
            e.with_type_name(spec.type_name)
            raise
