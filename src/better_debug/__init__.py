"""better-debug package."""

from .config.settings import RenderSettings, ValueStyle, get_settings
from .engine import build_plan, compile_record, normalize_directive, normalize_record, render
from .errors import (
    ConfigError,
    ConfigErrorType,
    ConflictingDirectivesError,
    DanglingSkipIfNoneError,
    DuplicateFieldError,
    DuplicateOptionError,
    InvalidOptionValueError,
    SchemaError,
    UnknownFieldError,
    UnknownOptionError,
    UnresolvedFormatterError,
)
from .protocol.types import (
    ActionKind,
    FieldDirective,
    PlanEntry,
    RecordSpec,
    RenderAction,
    RenderPlan,
)
from .record import better_debug, debug_field, debug_options
from .registry import (
    FormatterRegistry,
    RecordRegistry,
    format_record,
    formatter,
    get_formatter_registry,
    get_record_registry,
)
from .schemas import load_schema

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "ActionKind",
    "ConfigError",
    "ConfigErrorType",
    "ConflictingDirectivesError",
    "DanglingSkipIfNoneError",
    "DuplicateFieldError",
    "DuplicateOptionError",
    "FieldDirective",
    "FormatterRegistry",
    "InvalidOptionValueError",
    "PlanEntry",
    "RecordRegistry",
    "RecordSpec",
    "RenderAction",
    "RenderPlan",
    "RenderSettings",
    "SchemaError",
    "UnknownFieldError",
    "UnknownOptionError",
    "UnresolvedFormatterError",
    "ValueStyle",
    "better_debug",
    "build_plan",
    "compile_record",
    "debug_field",
    "debug_options",
    "format_record",
    "formatter",
    "get_formatter_registry",
    "get_record_registry",
    "get_settings",
    "load_schema",
    "normalize_directive",
    "normalize_record",
    "render",
]
