from __future__ import annotations

import os.path
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import pytest

from better_debug.registry.formatter_registry import (
    FormatterRegistry,
    formatter,
    get_formatter_registry,
)


def upper_name(record: Any) -> str:
    return record.name.upper()


class _Owner:
    @staticmethod
    def mask(record: Any) -> str:
        return "***"

    not_callable = "text"


def _reset_registry_singleton() -> None:
    FormatterRegistry._instance = None


def test_registry_is_singleton() -> None:
    _reset_registry_singleton()
    r1 = FormatterRegistry()
    r2 = get_formatter_registry()
    assert r1 is r2


def test_register_and_get_formatter() -> None:
    registry = FormatterRegistry()

    registry.register_formatter(" upper ", upper_name)
    assert registry.get_formatter("upper") is upper_name
    assert registry.list_formatters() == ["upper"]


def test_register_same_callable_twice_is_noop() -> None:
    registry = FormatterRegistry()

    registry.register_formatter("upper", upper_name)
    registry.register_formatter("upper", upper_name)
    assert registry.list_formatters() == ["upper"]


def test_register_duplicate_name_rejected() -> None:
    registry = FormatterRegistry()

    registry.register_formatter("upper", upper_name)
    with pytest.raises(ValueError, match="already registered"):
        registry.register_formatter("upper", str.upper)


def test_register_invalid_arguments() -> None:
    registry = FormatterRegistry()

    with pytest.raises(ValueError):
        registry.register_formatter("  ", upper_name)
    with pytest.raises(TypeError):
        registry.register_formatter("x", "not callable")  # type: ignore[arg-type]


def test_unregister_formatter() -> None:
    registry = FormatterRegistry()

    registry.register_formatter("upper", upper_name)
    registry.unregister_formatter("upper")
    registry.unregister_formatter("never-registered")
    assert registry.get_formatter("upper") is None


def test_resolve_order() -> None:
    """Registered names win over class attributes and module globals."""
    registry = FormatterRegistry()

    assert registry.resolve("mask", owner=_Owner) is _Owner.mask
    assert registry.resolve("upper_name", owner=_Owner) is upper_name

    registry.register_formatter("mask", upper_name)
    assert registry.resolve("mask", owner=_Owner) is upper_name


def test_resolve_import_paths() -> None:
    registry = FormatterRegistry()

    assert registry.resolve("os.path:basename") is os.path.basename
    assert registry.resolve("os.path.basename") is os.path.basename


def test_resolve_misses_return_none() -> None:
    registry = FormatterRegistry()

    assert registry.resolve("") is None
    assert registry.resolve("missing") is None
    assert registry.resolve("not_callable", owner=_Owner) is None
    assert registry.resolve("no_such_module_xyz:func") is None
    assert registry.resolve("os.path:no_such_attr") is None


def test_formatter_decorator() -> None:
    @formatter()
    def shout(record: Any) -> str:
        return "!"

    @formatter("quiet")
    def whisper(record: Any) -> str:
        return "."

    registry = get_formatter_registry()
    assert registry.get_formatter("shout") is shout
    assert registry.get_formatter("quiet") is whisper


@dataclass(frozen=True)
class _FakeEntryPoint:
    name: str
    value: Any

    def load(self) -> Any:
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


class _FakeEntryPoints:
    def __init__(self, items: Iterable[_FakeEntryPoint]) -> None:
        self._items = list(items)

    def select(self, *, group: str) -> list[_FakeEntryPoint]:
        # The registry uses `select(group=...)`; we don't filter by group in this stub.
        return list(self._items)


def test_entry_point_auto_discovery(monkeypatch: pytest.MonkeyPatch) -> None:
    _reset_registry_singleton()

    from better_debug.registry import formatter_registry as registry_module

    def fake_entry_points() -> _FakeEntryPoints:
        return _FakeEntryPoints(
            [
                _FakeEntryPoint(name="upper", value=upper_name),
                _FakeEntryPoint(name="broken", value=ImportError("boom")),
                _FakeEntryPoint(name="constant", value=42),
            ]
        )

    monkeypatch.setattr(registry_module.metadata, "entry_points", fake_entry_points)

    registry = FormatterRegistry()
    assert registry.list_formatters() == ["upper"]
