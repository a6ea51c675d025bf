"""Constructors for each error kind.

Each function builds an ErrorRecord for its branch of the taxonomy and wraps
it in a PluginError ready to raise. ``code`` defaults per kind when omitted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from research_assistant.core.errors.base import (
    DEFAULT_CODES,
    DEFAULT_SEVERITIES,
    ErrorKind,
    ErrorRecord,
    ErrorSeverity,
    PluginError,
)


def _build(
    kind: ErrorKind,
    message: str,
    code: Optional[str],
    details: Optional[Dict[str, Any]],
    recoverable: bool,
    severity: Optional[ErrorSeverity],
    **fields: Any,
) -> PluginError:
    record = ErrorRecord(
        kind=kind,
        message=message,
        code=code or DEFAULT_CODES[kind],
        details=dict(details or {}),
        recoverable=recoverable,
        severity=severity or DEFAULT_SEVERITIES[kind],
        **fields,
    )
    return PluginError(record)


def plugin_error(
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    recoverable: bool = True,
    *,
    severity: Optional[ErrorSeverity] = None,
) -> PluginError:
    """Generic plugin failure (code ``PLUGIN_ERROR``)."""
    return _build(ErrorKind.PLUGIN, message, code, details, recoverable, severity)


def service_error(
    message: str,
    service: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    recoverable: bool = True,
    *,
    severity: Optional[ErrorSeverity] = None,
) -> PluginError:
    """A named upstream dependency failed (code ``SERVICE_ERROR``).

    Args:
        message: Technical description of the failure.
        service: Name of the unavailable dependency (e.g. ``"api"``).
        code: Override for the default code.
        details: Diagnostic payload, carried unparsed.
        recoverable: Whether retrying could plausibly succeed.
        severity: Override for the default severity.
    """
    return _build(ErrorKind.SERVICE, message, code, details, recoverable, severity, service=service)


def validation_error(
    message: str,
    field: str,
    value: Any,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    recoverable: bool = False,
    *,
    severity: Optional[ErrorSeverity] = None,
) -> PluginError:
    """An input failed a rule (code ``VALIDATION_ERROR``, not recoverable)."""
    return _build(
        ErrorKind.VALIDATION,
        message,
        code,
        details,
        recoverable,
        severity,
        field=field,
        value=value,
    )


def network_error(
    message: str,
    status: Optional[int] = None,
    url: Optional[str] = None,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    recoverable: bool = True,
    *,
    severity: Optional[ErrorSeverity] = None,
) -> PluginError:
    """A request failed (code ``NETWORK_ERROR``).

    Args:
        message: Technical description, often upstream error text.
        status: HTTP status code, if a response was received.
        url: Requested URL or endpoint path.
        code: Override for the default code.
        details: Diagnostic payload, carried unparsed.
        recoverable: Whether retrying could plausibly succeed.
        severity: Override for the default severity.
    """
    return _build(
        ErrorKind.NETWORK,
        message,
        code,
        details,
        recoverable,
        severity,
        service="network",
        status=status,
        url=url,
    )


def configuration_error(
    message: str,
    config_key: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    recoverable: bool = True,
    *,
    severity: Optional[ErrorSeverity] = None,
) -> PluginError:
    """A required setting is missing or invalid (code ``CONFIGURATION_ERROR``)."""
    return _build(
        ErrorKind.CONFIGURATION,
        message,
        code,
        details,
        recoverable,
        severity,
        service="configuration",
        config_key=config_key,
    )
