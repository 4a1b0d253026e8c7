"""
Protocol definitions for better-debug.

Includes the directive models and the render plan types.
"""

from better_debug.protocol.types import (
    ActionKind,
    FieldDirective,
    Formatter,
    PlanEntry,
    RecordSpec,
    RenderAction,
    RenderPlan,
)

__all__ = [
    "ActionKind",
    "FieldDirective",
    "Formatter",
    "PlanEntry",
    "RecordSpec",
    "RenderAction",
    "RenderPlan",
]
