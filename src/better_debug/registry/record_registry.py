"""Global registry of compiled record types."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from threading import RLock
from typing import Any

from better_debug.config.settings import RenderSettings
from better_debug.engine.normalizer import RawOptions
from better_debug.engine.planner import compile_record
from better_debug.engine.renderer import render
from better_debug.introspection import collect_fields, merge_options
from better_debug.protocol.types import RecordSpec, RenderPlan
from better_debug.registry.formatter_registry import FormatterRegistry

_log = logging.getLogger(__name__)

# Class attribute holding the compiled entry of a decorated class
RECORD_ATTR = "__better_debug_record__"


@dataclass(frozen=True)
class RegisteredRecord:
    """A record type with its compiled spec and cached plan.

    ``options``, ``type_name`` and ``settings`` keep what was passed to
    ``register`` (merged with the values inherited from a registered base) so
    subclasses compiled later inherit them.
    """

    cls: type
    spec: RecordSpec
    plan: RenderPlan
    options: Mapping[str, list[tuple[str, Any]]] = field(default_factory=dict)
    type_name: str | None = None
    settings: RenderSettings | None = None

    def render(self, instance: Any) -> str:
        return render(self.plan, instance)


class RecordRegistry:
    """Singleton registry mapping record classes to their compiled plans.

    Each class is compiled at most once: compilation happens under the
    registry lock and the result is memoized, so racing threads all observe
    the same fully built plan. Classes that were never registered explicitly
    are compiled on first lookup from their declared fields.
    """

    _instance: RecordRegistry | None = None
    _instance_lock: RLock = RLock()

    def __new__(cls) -> RecordRegistry:
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    _initialized: bool = False

    def __init__(self) -> None:
        if self._initialized:
            return
        self._records: dict[type, RegisteredRecord] = {}
        self._lock: RLock = RLock()
        self._initialized = True

    def register(
        self,
        cls: type,
        fields: Iterable[tuple[str, RawOptions | None]] | None = None,
        *,
        options: Mapping[str, RawOptions] | None = None,
        type_name: str | None = None,
        settings: RenderSettings | None = None,
        resolver: FormatterRegistry | None = None,
    ) -> RegisteredRecord:
        """Compile and register a record class.

        Registering a class that is already registered returns the existing
        entry unchanged.

        Args:
            cls: The record class.
            fields: Explicit ``(field_name, options)`` pairs in declaration
                order. Discovered from the class when omitted.
            options: Extra per-field options merged into discovered fields.
            type_name: Name printed before the braces (default: class name).
            settings: Render settings captured into the plan.
            resolver: Registry used for string formatter references.

        Raises:
            ConfigError: The directives are invalid; nothing is registered.
        """
        if not isinstance(cls, type):
            raise TypeError("Only classes can be registered as records.")

        with self._lock:
            existing = self._records.get(cls)
            if existing is not None:
                _log.debug("Record '%s' already registered.", cls.__qualname__)
                return existing

            if fields is not None and options:
                raise ValueError("Pass either explicit fields or options, not both.")

            effective_options: Mapping[str, list[tuple[str, Any]]]
            if fields is not None:
                fields = list(fields)
                effective_options = merge_options(dict(fields))
            else:
                base = self._registered_base(cls)
                if base is not None:
                    _log.debug(
                        "Record '%s' inherits directives from '%s'.",
                        cls.__qualname__,
                        base.cls.__qualname__,
                    )
                    effective_options = merge_options(base.options, options)
                    type_name = type_name or base.type_name
                    settings = settings or base.settings
                else:
                    effective_options = merge_options(options)
                fields = collect_fields(cls, effective_options)

            spec, plan = compile_record(
                type_name or cls.__name__,
                fields,
                settings=settings,
                resolver=resolver,
                owner=cls,
            )
            entry = RegisteredRecord(
                cls=cls,
                spec=spec,
                plan=plan,
                options=effective_options,
                type_name=type_name,
                settings=settings,
            )
            self._records[cls] = entry
            _log.debug(
                "Registered record '%s' with %d field(s).", spec.type_name, len(plan.entries)
            )
            return entry

    def _registered_base(self, cls: type) -> RegisteredRecord | None:
        """Return the entry of the nearest registered base class, if any."""

        for base in cls.__mro__[1:]:
            entry = self._records.get(base)
            if entry is None:
                entry = base.__dict__.get(RECORD_ATTR)
            if isinstance(entry, RegisteredRecord):
                return entry
        return None

    def get(self, cls: type) -> RegisteredRecord:
        """Return the compiled entry for *cls*, compiling it on first use."""

        entry = self._records.get(cls)
        if entry is not None:
            return entry
        adopted = cls.__dict__.get(RECORD_ATTR)
        if isinstance(adopted, RegisteredRecord):
            with self._lock:
                return self._records.setdefault(cls, adopted)
        return self.register(cls)

    def get_plan(self, cls: type) -> RenderPlan:
        return self.get(cls).plan

    def is_registered(self, cls: type) -> bool:
        with self._lock:
            return cls in self._records

    def unregister(self, cls: type) -> None:
        """Forget a compiled class; unknown classes are ignored."""

        with self._lock:
            self._records.pop(cls, None)

    def list_records(self) -> list[str]:
        """Return a sorted list of registered record type names."""

        with self._lock:
            return sorted(entry.spec.type_name for entry in self._records.values())

    def clear(self) -> None:
        with self._lock:
            self._records.clear()


def get_record_registry() -> RecordRegistry:
    """Return the global record registry singleton."""

    return RecordRegistry()


def format_record(instance: Any) -> str:
    """Render *instance* using the cached plan of its type."""

    return get_record_registry().get(type(instance)).render(instance)
