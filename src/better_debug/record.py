"""Runtime front end: attach directives to a class and install its ``__repr__``.

Example::

    @better_debug
    @dataclass
    class Credentials:
        username: str
        password: str = debug_field(secret=True, rename_to="Pwd")

    repr(Credentials("alice", "hunter2"))
    # "Credentials { username: 'alice', Pwd: <SECRET> }"

Apply ``@better_debug`` above ``@dataclass`` so the dataclass fields exist
when the directives are compiled.
"""

from __future__ import annotations

import dataclasses
import reprlib
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from better_debug.config.settings import RenderSettings
from better_debug.engine.normalizer import (
    OPT_CUST_FORMATTER,
    OPT_EXCLUDE,
    OPT_RENAME_TO,
    OPT_SECRET,
    OPT_SKIP_IF_NONE,
    RawOptions,
)
from better_debug.introspection import METADATA_KEY
from better_debug.protocol.types import Formatter
from better_debug.registry.record_registry import (
    RECORD_ATTR,
    RegisteredRecord,
    format_record,
    get_record_registry,
)

T = TypeVar("T", bound=type)


def debug_options(
    *,
    secret: bool = False,
    exclude: bool = False,
    rename_to: str | None = None,
    cust_formatter: Formatter | str | None = None,
    cust_formatter_skip_if_none: bool = False,
) -> dict[str, Any]:
    """Build a raw options mapping containing only the directives that are set."""
    options: dict[str, Any] = {}
    if secret:
        options[OPT_SECRET] = True
    if exclude:
        options[OPT_EXCLUDE] = True
    if rename_to is not None:
        options[OPT_RENAME_TO] = rename_to
    if cust_formatter is not None:
        options[OPT_CUST_FORMATTER] = cust_formatter
    if cust_formatter_skip_if_none:
        options[OPT_SKIP_IF_NONE] = True
    return options


def debug_field(
    *,
    secret: bool = False,
    exclude: bool = False,
    rename_to: str | None = None,
    cust_formatter: Formatter | str | None = None,
    cust_formatter_skip_if_none: bool = False,
    metadata: Mapping[str, Any] | None = None,
    **field_kwargs: Any,
) -> Any:
    """``dataclasses.field`` carrying debug directives in its metadata.

    Any other keyword (``default``, ``default_factory``, ``init``...) is passed
    through to ``dataclasses.field``.
    """
    merged = dict(metadata or {})
    merged[METADATA_KEY] = debug_options(
        secret=secret,
        exclude=exclude,
        rename_to=rename_to,
        cust_formatter=cust_formatter,
        cust_formatter_skip_if_none=cust_formatter_skip_if_none,
    )
    return dataclasses.field(metadata=merged, **field_kwargs)


def _install_repr(cls: type, entry: RegisteredRecord) -> None:
    @reprlib.recursive_repr()
    def __repr__(self: Any) -> str:
        # Subclasses get their own plan on first use, inheriting these directives
        if type(self) is cls:
            return entry.render(self)
        return format_record(self)

    __repr__.__qualname__ = f"{cls.__qualname__}.__repr__"
    cls.__repr__ = __repr__  # type: ignore[method-assign]
    # pydantic models format str() from their fields, bypassing __repr__
    if getattr(cls.__str__, "__module__", "").startswith("pydantic"):
        cls.__str__ = __repr__  # type: ignore[method-assign]
    setattr(cls, RECORD_ATTR, entry)


def better_debug(
    cls: T | None = None,
    *,
    options: Mapping[str, RawOptions] | None = None,
    type_name: str | None = None,
    settings: RenderSettings | None = None,
) -> T | Callable[[T], T]:
    """Class decorator compiling a record's directives and installing ``__repr__``.

    Compilation happens immediately, so an invalid combination of directives
    raises ``ConfigError`` at class definition time.

    Args:
        cls: The class when used as a bare ``@better_debug``.
        options: Per-field raw options, merged with field metadata and the
            class's ``__better_debug__`` mapping.
        type_name: Name printed before the braces (default: class name).
        settings: Render settings to capture instead of the process settings.
    """

    def wrap(klass: T) -> T:
        entry = get_record_registry().register(
            klass, options=options, type_name=type_name, settings=settings
        )
        _install_repr(klass, entry)
        return klass

    if cls is None:
        return wrap
    return wrap(cls)
