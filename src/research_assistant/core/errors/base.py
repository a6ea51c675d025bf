"""Error record, kind tags, and the PluginError exception.

The taxonomy is a tagged variant: every failure raised by the plugin is a
single ``PluginError`` carrying an immutable ``ErrorRecord`` whose ``kind``
field selects the branch (Plugin, Service, Network, Configuration,
Validation). Specialization is expressed through ``ErrorKind.parent`` rather
than through exception subclasses.

Usage:
    from research_assistant.core.errors import network_error, ErrorKind

    try:
        await fetch()
    except PluginError as exc:
        if exc.kind.is_a(ErrorKind.SERVICE):
            ...
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ErrorKind(str, Enum):
    """Taxonomy branch of an error record."""

    PLUGIN = "PluginError"
    SERVICE = "ServiceError"
    NETWORK = "NetworkError"
    CONFIGURATION = "ConfigurationError"
    VALIDATION = "ValidationError"

    @property
    def parent(self) -> Optional["ErrorKind"]:
        """The kind this one specializes, or None for the root."""
        return _KIND_PARENTS.get(self)

    @property
    def fallback_key(self) -> str:
        """Key used to look up substitute values (e.g. ``"networkerror"``)."""
        return self.value.lower()

    def is_a(self, other: "ErrorKind") -> bool:
        """Return True if this kind is ``other`` or specializes it."""
        kind: Optional[ErrorKind] = self
        while kind is not None:
            if kind is other:
                return True
            kind = kind.parent
        return False

    def lineage(self) -> list["ErrorKind"]:
        """This kind followed by its ancestors, most specific first."""
        chain = []
        kind: Optional[ErrorKind] = self
        while kind is not None:
            chain.append(kind)
            kind = kind.parent
        return chain


_KIND_PARENTS: Dict[ErrorKind, ErrorKind] = {
    ErrorKind.SERVICE: ErrorKind.PLUGIN,
    ErrorKind.VALIDATION: ErrorKind.PLUGIN,
    ErrorKind.NETWORK: ErrorKind.SERVICE,
    ErrorKind.CONFIGURATION: ErrorKind.SERVICE,
}


class ErrorSeverity(str, Enum):
    """How loudly an error should be logged and reported."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_CODES: Dict[ErrorKind, str] = {
    ErrorKind.PLUGIN: "PLUGIN_ERROR",
    ErrorKind.SERVICE: "SERVICE_ERROR",
    ErrorKind.NETWORK: "NETWORK_ERROR",
    ErrorKind.CONFIGURATION: "CONFIGURATION_ERROR",
    ErrorKind.VALIDATION: "VALIDATION_ERROR",
}

DEFAULT_SEVERITIES: Dict[ErrorKind, ErrorSeverity] = {
    ErrorKind.PLUGIN: ErrorSeverity.MEDIUM,
    ErrorKind.SERVICE: ErrorSeverity.HIGH,
    ErrorKind.NETWORK: ErrorSeverity.MEDIUM,
    ErrorKind.CONFIGURATION: ErrorSeverity.HIGH,
    ErrorKind.VALIDATION: ErrorSeverity.LOW,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorRecord(BaseModel):
    """Immutable description of a single failure.

    Kind-specific fields are left as None on branches that do not use them:
    ``service`` for Service/Network/Configuration, ``field`` and ``value``
    for Validation, ``status`` and ``url`` for Network, ``config_key`` for
    Configuration.

    ``details`` is held as a read-only mapping; ``to_dict`` returns a copy.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: ErrorKind = ErrorKind.PLUGIN
    message: str
    code: str
    details: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    timestamp: datetime = Field(default_factory=_utcnow)
    recoverable: bool = True
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    requires_user_action: bool = False

    service: Optional[str] = None
    field: Optional[str] = None
    value: Any = None
    status: Optional[int] = None
    url: Optional[str] = None
    config_key: Optional[str] = None

    @field_validator("code")
    @classmethod
    def _code_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("error code must be a non-empty string")
        return value

    @field_validator("details", mode="after")
    @classmethod
    def _freeze_details(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("details")
    def _dump_details(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return copy.deepcopy(dict(value))

    def to_dict(self) -> Dict[str, Any]:
        """Dump every field, with the timestamp rendered as ISO-8601."""
        data = self.model_dump()
        data["kind"] = self.kind.value
        data["severity"] = self.severity.value
        data["timestamp"] = self.timestamp.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ErrorRecord":
        """Rebuild a record from ``to_dict()`` output."""
        return cls.model_validate(data)

    def with_details(self, **extra: Any) -> "ErrorRecord":
        """Return a copy whose details are merged with ``extra``."""
        return self.model_copy(update={"details": MappingProxyType({**self.details, **extra})})


class PluginError(Exception):
    """The one exception type raised by the plugin's error framework.

    Attributes:
        record: Immutable ErrorRecord describing the failure.
    """

    def __init__(self, record: ErrorRecord):
        super().__init__(record.message)
        self.record = record

    @property
    def kind(self) -> ErrorKind:
        return self.record.kind

    @property
    def code(self) -> str:
        return self.record.code

    @property
    def message(self) -> str:
        return self.record.message

    @property
    def details(self) -> Mapping[str, Any]:
        return self.record.details

    @property
    def timestamp(self) -> datetime:
        return self.record.timestamp

    @property
    def recoverable(self) -> bool:
        return self.record.recoverable

    @property
    def severity(self) -> ErrorSeverity:
        return self.record.severity

    @property
    def requires_user_action(self) -> bool:
        return self.record.requires_user_action

    def is_a(self, kind: ErrorKind) -> bool:
        return self.record.kind.is_a(kind)

    def to_dict(self) -> Dict[str, Any]:
        return self.record.to_dict()

    def replace_record(self, record: ErrorRecord) -> None:
        """Swap in an enriched record while keeping exception identity."""
        self.record = record

    def __repr__(self) -> str:
        return f"PluginError(kind={self.kind.value!r}, code={self.code!r}, message={self.message!r})"


def normalize_error(exc: Exception) -> PluginError:
    """Return ``exc`` unchanged if native, else wrap it as a Plugin-kind error.

    The wrapped error keeps the original's type and message in ``details``
    and chains the original as ``__cause__``.
    """
    if isinstance(exc, PluginError):
        return exc

    wrapped = PluginError(
        ErrorRecord(
            kind=ErrorKind.PLUGIN,
            message=str(exc) or type(exc).__name__,
            code="UNEXPECTED_ERROR",
            details={
                "original_type": type(exc).__name__,
                "original_message": str(exc),
            },
            severity=DEFAULT_SEVERITIES[ErrorKind.PLUGIN],
        )
    )
    wrapped.__cause__ = exc
    wrapped.__suppress_context__ = True
    return wrapped
