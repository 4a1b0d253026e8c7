"""
Plan Builder.

Resolves each field directive of a validated RecordSpec into exactly one
render action. Precedence, highest first:

    exclude -> OMIT
    secret -> REDACT
    cust_formatter -> INVOKE
    otherwise -> DEFAULT

The plan keeps declaration order and captures the render settings in effect
when it was built.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from better_debug.config.settings import RenderSettings, get_settings
from better_debug.engine.normalizer import RawOptions, normalize_record
from better_debug.engine.validator import validate_spec
from better_debug.protocol.types import (
    FieldDirective,
    PlanEntry,
    RecordSpec,
    RenderAction,
    RenderPlan,
)

if TYPE_CHECKING:
    from better_debug.registry.formatter_registry import FormatterRegistry

logger = logging.getLogger(__name__)


def resolve_action(directive: FieldDirective) -> RenderAction:
    """Pick the single action for a field."""
    if directive.excluded:
        return RenderAction.omit()
    if directive.is_secret:
        return RenderAction.redact()
    if directive.custom_formatter is not None:
        return RenderAction.invoke(directive.custom_formatter, directive.skip_if_none)
    return RenderAction.default()


def build_plan(spec: RecordSpec, *, settings: RenderSettings | None = None) -> RenderPlan:
    """Validate a RecordSpec and derive its RenderPlan.

    Args:
        spec: Directives in declaration order.
        settings: Render settings to capture; defaults to the process settings.

    Raises:
        ConfigError: The spec fails validation.
    """
    settings = settings or get_settings()
    validate_spec(spec, strict_secrets=settings.strict_secrets)

    entries = tuple(
        PlanEntry(field_name=d.field_name, label=d.label, action=resolve_action(d))
        for d in spec.directives
    )
    plan = RenderPlan(
        type_name=spec.type_name,
        entries=entries,
        redaction_marker=settings.redaction_marker,
        value_style=settings.value_style,
    )
    logger.debug(
        "Built render plan for %s: %s",
        spec.type_name,
        ", ".join(f"{e.field_name}={e.action.kind.value}" for e in entries),
    )
    return plan


def compile_record(
    type_name: str,
    fields: Iterable[tuple[str, RawOptions | None]],
    *,
    settings: RenderSettings | None = None,
    resolver: FormatterRegistry | None = None,
    owner: type | None = None,
) -> tuple[RecordSpec, RenderPlan]:
    """Run normalization, validation and plan building for one record."""
    spec = normalize_record(type_name, fields, resolver=resolver, owner=owner)
    return spec, build_plan(spec, settings=settings)
