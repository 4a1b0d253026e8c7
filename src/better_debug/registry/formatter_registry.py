"""Global registry for named custom formatters."""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Callable, Iterable
from importlib import metadata
from threading import RLock
from typing import Any

from better_debug.protocol.types import Formatter

_ENTRY_POINT_GROUP = "better_debug.formatters"
_log = logging.getLogger(__name__)


class FormatterRegistry:
    """Singleton registry mapping formatter names to callables.

    A string ``cust_formatter`` reference is resolved, in order, against:

    1. names registered here (explicitly or through the
       ``better_debug.formatters`` entry point group),
    2. an import path of the form ``package.module:function``,
    3. an attribute of the record class,
    4. a global of the module that defines the record class,
    5. a dotted import path ``package.module.function``.
    """

    _instance: FormatterRegistry | None = None
    _instance_lock: RLock = RLock()

    def __new__(cls) -> FormatterRegistry:
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    _initialized: bool = False

    def __init__(self) -> None:
        if self._initialized:
            return
        self._formatters: dict[str, Formatter] = {}
        self._lock: RLock = RLock()
        self._initialized = True
        self._discover_entry_points()

    def register_formatter(self, name: str, func: Formatter) -> None:
        """Register a formatter callable under the given name."""

        normalized = name.strip()
        if not normalized:
            raise ValueError("Formatter name must be a non-empty string.")
        if not callable(func):
            raise TypeError("Formatter must be callable.")
        with self._lock:
            existing = self._formatters.get(normalized)
            if existing is not None and existing is not func:
                raise ValueError(
                    f"Formatter '{normalized}' is already registered to "
                    f"{getattr(existing, '__qualname__', existing)!r}."
                )
            self._formatters[normalized] = func
        _log.debug("Registered formatter '%s'.", normalized)

    def unregister_formatter(self, name: str) -> None:
        """Remove a named formatter; unknown names are ignored."""

        with self._lock:
            self._formatters.pop(name.strip(), None)

    def get_formatter(self, name: str) -> Formatter | None:
        """Return the formatter registered under *name*, if any."""

        with self._lock:
            return self._formatters.get(name.strip())

    def list_formatters(self) -> list[str]:
        """Return a sorted list of registered formatter names."""

        with self._lock:
            return sorted(self._formatters.keys())

    def resolve(self, name: str, owner: type | None = None) -> Formatter | None:
        """Resolve a formatter reference to a callable, or None if nothing matches."""

        reference = name.strip()
        if not reference:
            return None

        registered = self.get_formatter(reference)
        if registered is not None:
            return registered

        if ":" in reference:
            module_name, _, attr_path = reference.partition(":")
            return _callable_or_none(_import_attribute(module_name, attr_path))

        if owner is not None:
            candidate = _callable_or_none(_lookup_attr_path(owner, reference))
            if candidate is not None:
                return candidate

            module = sys.modules.get(owner.__module__)
            if module is not None:
                candidate = _callable_or_none(_lookup_attr_path(module, reference))
                if candidate is not None:
                    return candidate

        if "." in reference:
            module_name, _, attr = reference.rpartition(".")
            return _callable_or_none(_import_attribute(module_name, attr))

        return None

    def _discover_entry_points(self) -> None:
        """Load and register formatters from entry points."""

        try:
            entry_points = metadata.entry_points()
        except Exception:  # pragma: no cover
            _log.debug("Failed to read formatter entry points.", exc_info=True)
            return

        group = self._select_entry_points(entry_points, _ENTRY_POINT_GROUP)

        for entry_point in group:
            try:
                func = entry_point.load()
            except Exception:
                _log.warning(
                    "Failed to load formatter entry point '%s'.", entry_point.name, exc_info=True
                )
                continue

            if not callable(func):
                _log.debug(
                    "Formatter entry point '%s' resolved to non-callable %r; skipping.",
                    entry_point.name,
                    func,
                )
                continue

            try:
                self.register_formatter(entry_point.name, func)
            except ValueError:
                _log.debug(
                    "Failed to register formatter entry point '%s'.",
                    entry_point.name,
                    exc_info=True,
                )
                continue

    @staticmethod
    def _select_entry_points(entry_points: Any, group: str) -> Iterable[Any]:
        """Select entry points for *group*; anything without ``select`` yields nothing."""

        select = getattr(entry_points, "select", None)
        if callable(select):
            result: Iterable[Any] = select(group=group)
            return result

        return []


def _lookup_attr_path(obj: Any, path: str) -> Any:
    for part in path.split("."):
        if not part:
            return None
        obj = getattr(obj, part, None)
        if obj is None:
            return None
    return obj


def _import_attribute(module_name: str, attr_path: str) -> Any:
    if not module_name or not attr_path:
        return None
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        _log.debug("Could not import formatter module '%s'.", module_name, exc_info=True)
        return None
    return _lookup_attr_path(module, attr_path)


def _callable_or_none(candidate: Any) -> Formatter | None:
    return candidate if callable(candidate) else None


def get_formatter_registry() -> FormatterRegistry:
    """Return the global formatter registry singleton."""

    return FormatterRegistry()


def formatter(name: str | None = None) -> Callable[[Formatter], Formatter]:
    """Decorator registering a function as a named custom formatter.

    Example::

        @formatter("mask_token")
        def mask_token(record):
            return record.token[:4] + "..." if record.token else None
    """

    def decorator(func: Formatter) -> Formatter:
        get_formatter_registry().register_formatter(name or func.__name__, func)
        return func

    return decorator
