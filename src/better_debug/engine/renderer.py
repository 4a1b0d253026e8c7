"""
Render Engine.

Executes a cached RenderPlan against a record instance. Rendering is a pure,
single pass over the plan: it never mutates the plan or the instance, and it
does not catch exceptions raised by custom formatters.
"""

from __future__ import annotations

from typing import Any

from better_debug.protocol.types import ActionKind, PlanEntry, RenderPlan


def _format_value(plan: RenderPlan, instance: Any, entry: PlanEntry) -> str:
    return plan.value_style.apply(getattr(instance, entry.field_name))


def render_entry(plan: RenderPlan, instance: Any, entry: PlanEntry) -> str | None:
    """Render one plan entry as ``label: value``, or None when it is omitted."""
    action = entry.action

    if action.kind is ActionKind.OMIT:
        return None

    if action.kind is ActionKind.REDACT:
        return f"{entry.label}: {plan.redaction_marker}"

    if action.kind is ActionKind.INVOKE and action.formatter is not None:
        result = action.formatter(instance)
        if result is not None:
            text = result if isinstance(result, str) else plan.value_style.apply(result)
            return f"{entry.label}: {text}"
        if action.skip_if_none:
            return None

    return f"{entry.label}: {_format_value(plan, instance, entry)}"


def render(plan: RenderPlan, instance: Any) -> str:
    """Render an instance as ``TypeName { label: value, ... }``."""
    parts = []
    for entry in plan.entries:
        text = render_entry(plan, instance, entry)
        if text is not None:
            parts.append(text)

    if not parts:
        return f"{plan.type_name} {{ }}"
    return f"{plan.type_name} {{ {', '.join(parts)} }}"
