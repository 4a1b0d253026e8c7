"""Field discovery for record classes.

Collects a class's fields in declaration order together with the raw
directive options attached to each one. Options can come from:

- dataclass field metadata under the ``better_debug`` key (see ``debug_field``),
- a class-level ``__better_debug__`` mapping of field name to options,
- an explicit ``options`` mapping passed by the caller.

Options from several sources are concatenated, so setting the same option
twice for a field is reported as a duplicate instead of silently overridden.
Across a class hierarchy it is the other way round: a subclass inherits the
options of its bases and may override them option by option.
"""

from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Mapping
from typing import Any

from better_debug.engine.normalizer import RawOptions, iter_option_pairs
from better_debug.errors import UnknownFieldError

METADATA_KEY = "better_debug"
CLASS_OPTIONS_ATTR = "__better_debug__"


def _is_pydantic_model(cls: type) -> bool:
    return isinstance(getattr(cls, "model_fields", None), dict) and hasattr(cls, "model_dump")


def _annotated_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, annotation in inspect.get_annotations(klass).items():
            if name.startswith("__") or name in names:
                continue
            if "ClassVar" in str(annotation):
                continue
            names.append(name)
    return names


def merge_options(
    *sources: Mapping[str, RawOptions] | None,
) -> dict[str, list[tuple[str, Any]]]:
    """Merge per-field options, later sources overriding earlier ones per option."""
    merged: dict[str, list[tuple[str, Any]]] = {}
    for source in sources:
        if not source:
            continue
        for name, raw in source.items():
            pairs = iter_option_pairs(raw)
            overridden = {key for key, _ in pairs}
            kept = [(k, v) for k, v in merged.get(name, []) if k not in overridden]
            merged[name] = kept + pairs
    return merged


def class_options(cls: type) -> dict[str, list[tuple[str, Any]]]:
    """``__better_debug__`` options of *cls* and its bases, nearest class last."""
    return merge_options(
        *(klass.__dict__.get(CLASS_OPTIONS_ATTR) for klass in reversed(cls.__mro__))
    )


def declared_fields(cls: type) -> list[tuple[str, RawOptions | None]]:
    """Return ``(field_name, metadata options)`` pairs in declaration order."""
    if dataclasses.is_dataclass(cls):
        return [(f.name, f.metadata.get(METADATA_KEY)) for f in dataclasses.fields(cls)]
    if _is_pydantic_model(cls):
        return [(name, None) for name in cls.model_fields]
    return [(name, None) for name in _annotated_names(cls)]


def collect_fields(
    cls: type, options: Mapping[str, RawOptions] | None = None
) -> list[tuple[str, list[tuple[str, Any]]]]:
    """Collect fields and their merged raw option pairs.

    Raises:
        UnknownFieldError: Options were given for a field the class doesn't declare.
    """
    fields = declared_fields(cls)
    merged: dict[str, list[tuple[str, Any]]] = {
        name: iter_option_pairs(raw) for name, raw in fields
    }

    for source in (class_options(cls), options):
        if not source:
            continue
        for name, raw in source.items():
            if name not in merged:
                raise UnknownFieldError(
                    "options given for an undeclared field",
                    type_name=cls.__name__,
                    field_name=name,
                )
            merged[name].extend(iter_option_pairs(raw))

    return [(name, merged[name]) for name, _ in fields]
