"""
Formatter and Record Registries.

Named custom formatters and the process-wide cache of compiled record plans.
"""

from better_debug.registry.formatter_registry import (
    FormatterRegistry,
    formatter,
    get_formatter_registry,
)
from better_debug.registry.record_registry import (
    RecordRegistry,
    RegisteredRecord,
    format_record,
    get_record_registry,
)

__all__ = [
    "FormatterRegistry",
    "RecordRegistry",
    "RegisteredRecord",
    "format_record",
    "formatter",
    "get_formatter_registry",
    "get_record_registry",
]
