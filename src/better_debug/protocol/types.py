"""
Protocol types for better-debug.

Defines the directive models produced at definition time (``FieldDirective``,
``RecordSpec``) and the resolved render plan consumed at render time
(``RenderAction``, ``PlanEntry``, ``RenderPlan``). All of them are immutable
once built and safe to share between threads.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from better_debug.config.settings import DEFAULT_REDACTION_MARKER, ValueStyle

# A custom formatter receives the whole record and returns the text to show,
# or None to fall back to (or skip) default formatting.
Formatter = Callable[[Any], Any]


class FieldDirective(BaseModel):
    """Resolved rendering directives for one declared field."""

    model_config = ConfigDict(frozen=True)

    field_name: str = Field(..., min_length=1, description="Declared field identifier")
    is_secret: bool = Field(default=False, description="Never emit the field's value")
    custom_formatter: Formatter | None = Field(
        default=None,
        description="Callable receiving the record, returning text or None",
    )
    skip_if_none: bool = Field(
        default=False,
        description="Omit the field when the custom formatter returns None",
    )
    excluded: bool = Field(default=False, description="Never render the field")
    rename: str | None = Field(default=None, description="Display label override")

    @property
    def label(self) -> str:
        """Label shown in the output for this field."""
        return self.rename if self.rename is not None else self.field_name

    def describe(self) -> list[str]:
        """Short names of the directives set on this field."""
        parts = []
        if self.excluded:
            parts.append("exclude")
        if self.is_secret:
            parts.append("secret")
        if self.custom_formatter is not None:
            name = getattr(self.custom_formatter, "__qualname__", repr(self.custom_formatter))
            parts.append(f"cust_formatter={name}")
        if self.skip_if_none:
            parts.append("cust_formatter_skip_if_none")
        if self.rename is not None:
            parts.append(f"rename_to={self.rename}")
        return parts


class RecordSpec(BaseModel):
    """Ordered field directives for one record type, in declaration order."""

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(..., min_length=1, description="Name shown before the braces")
    directives: tuple[FieldDirective, ...] = Field(default=())

    @property
    def field_names(self) -> list[str]:
        return [d.field_name for d in self.directives]


class ActionKind(str, Enum):
    """What the render engine does for one plan entry."""

    OMIT = "omit"  # Contribute nothing
    REDACT = "redact"  # Emit the redaction marker, never read the value
    INVOKE = "invoke"  # Call the custom formatter
    DEFAULT = "default"  # Format the field value with the plan's value style


@dataclass(frozen=True)
class RenderAction:
    """Resolved instruction for one field."""

    kind: ActionKind
    formatter: Formatter | None = None
    skip_if_none: bool = False

    @classmethod
    def omit(cls) -> RenderAction:
        return cls(ActionKind.OMIT)

    @classmethod
    def redact(cls) -> RenderAction:
        return cls(ActionKind.REDACT)

    @classmethod
    def invoke(cls, formatter: Formatter, skip_if_none: bool = False) -> RenderAction:
        return cls(ActionKind.INVOKE, formatter=formatter, skip_if_none=skip_if_none)

    @classmethod
    def default(cls) -> RenderAction:
        return cls(ActionKind.DEFAULT)


@dataclass(frozen=True)
class PlanEntry:
    """A field's display label paired with its resolved action."""

    field_name: str
    label: str
    action: RenderAction


@dataclass(frozen=True)
class RenderPlan:
    """Ordered render actions for one record type."""

    type_name: str
    entries: tuple[PlanEntry, ...] = ()
    redaction_marker: str = DEFAULT_REDACTION_MARKER
    value_style: ValueStyle = ValueStyle.REPR

    @property
    def labels(self) -> list[str]:
        """Labels of every entry that can appear in the output."""
        return [e.label for e in self.entries if e.action.kind is not ActionKind.OMIT]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display and JSON output."""
        return {
            "type_name": self.type_name,
            "redaction_marker": self.redaction_marker,
            "value_style": self.value_style.value,
            "entries": [
                {
                    "field": e.field_name,
                    "label": e.label,
                    "action": e.action.kind.value,
                    "skip_if_none": e.action.skip_if_none,
                }
                for e in self.entries
            ],
        }
