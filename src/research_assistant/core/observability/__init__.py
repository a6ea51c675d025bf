"""
Observability utilities for the research assistant plugin.

Provides audit logging for error-handling events. The error handler's
default escalation reporter writes through ``get_audit_logger()``:

    from research_assistant.core.observability import audit_log

    audit_log("fallback_applied", component="PluginService", code="NETWORK_ERROR")
"""

from research_assistant.core.observability.audit import (
    AuditEvent,
    AuditEventType,
    AuditLogger,
    audit_log,
    get_audit_logger,
)

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditLogger",
    "audit_log",
    "get_audit_logger",
]
