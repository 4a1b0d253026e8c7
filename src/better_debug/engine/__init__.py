"""
better-debug engine - directive resolution and rendering.

The engine runs in two stages:
1. Definition time: normalize raw options, validate them, build a render plan
2. Render time: execute the cached plan against an instance
"""

from better_debug.engine.normalizer import (
    KNOWN_OPTIONS,
    normalize_directive,
    normalize_record,
)
from better_debug.engine.planner import build_plan, compile_record, resolve_action
from better_debug.engine.renderer import render, render_entry
from better_debug.engine.validator import validate_directive, validate_spec

__all__ = [
    # Normalizer
    "KNOWN_OPTIONS",
    "normalize_directive",
    "normalize_record",
    # Validator
    "validate_directive",
    "validate_spec",
    # Plan builder
    "build_plan",
    "compile_record",
    "resolve_action",
    # Render engine
    "render",
    "render_entry",
]
