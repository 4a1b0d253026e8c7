"""Definition-time errors for better-debug.

Every error here is raised while a record type is being compiled (decorated,
registered or loaded from a schema). Rendering never raises one of these.
"""

from __future__ import annotations

from enum import Enum


class ConfigErrorType(str, Enum):
    """Classification of directive configuration failures."""

    UNKNOWN_OPTION = "unknown_option"
    DUPLICATE_OPTION = "duplicate_option"
    DUPLICATE_FIELD = "duplicate_field"
    UNKNOWN_FIELD = "unknown_field"
    INVALID_VALUE = "invalid_value"
    UNRESOLVED_FORMATTER = "unresolved_formatter"
    DANGLING_SKIP_IF_NONE = "dangling_skip_if_none"
    CONFLICTING_DIRECTIVES = "conflicting_directives"
    SCHEMA = "schema"


class ConfigError(ValueError):
    """A record's directives cannot be compiled into a render plan."""

    kind: ConfigErrorType = ConfigErrorType.INVALID_VALUE

    def __init__(
        self,
        message: str,
        *,
        type_name: str | None = None,
        field_name: str | None = None,
        key: str | None = None,
    ) -> None:
        self.message = message
        self.type_name = type_name
        self.field_name = field_name
        self.key = key
        super().__init__(self._compose())

    def _compose(self) -> str:
        location = []
        if self.type_name:
            location.append(f"record '{self.type_name}'")
        if self.field_name:
            location.append(f"field '{self.field_name}'")
        if self.key:
            location.append(f"option '{self.key}'")
        if not location:
            return self.message
        return f"{', '.join(location)}: {self.message}"

    def with_type_name(self, type_name: str) -> ConfigError:
        """Attach the owning record name if it is not known yet."""
        if self.type_name is None:
            self.type_name = type_name
            self.args = (self._compose(),)
        return self


class UnknownOptionError(ConfigError):
    kind = ConfigErrorType.UNKNOWN_OPTION


class DuplicateOptionError(ConfigError):
    kind = ConfigErrorType.DUPLICATE_OPTION


class DuplicateFieldError(ConfigError):
    kind = ConfigErrorType.DUPLICATE_FIELD


class UnknownFieldError(ConfigError):
    kind = ConfigErrorType.UNKNOWN_FIELD


class InvalidOptionValueError(ConfigError):
    kind = ConfigErrorType.INVALID_VALUE


class UnresolvedFormatterError(ConfigError):
    kind = ConfigErrorType.UNRESOLVED_FORMATTER


class DanglingSkipIfNoneError(ConfigError):
    kind = ConfigErrorType.DANGLING_SKIP_IF_NONE


class ConflictingDirectivesError(ConfigError):
    kind = ConfigErrorType.CONFLICTING_DIRECTIVES


class SchemaError(ConfigError):
    """The external YAML description file is malformed."""

    kind = ConfigErrorType.SCHEMA
