"""Audit logging for error-handling events.

Escalated errors, retries and applied fallbacks are written as structured
audit events to a dedicated logger so hosts can route them separately from
diagnostic logs.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of audit events emitted by the error handler."""

    ERROR_HANDLED = "error_handled"
    ERROR_ESCALATED = "error_escalated"
    RETRY_ATTEMPT = "retry_attempt"
    FALLBACK_APPLIED = "fallback_applied"
    USER_ACTION_REQUIRED = "user_action_required"


@dataclass
class AuditEvent:
    """Structured audit event."""

    event_type: AuditEventType
    details: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    component: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp,
            "details": self.details,
        }
        if self.component:
            result["component"] = self.component
        return result


class AuditLogger:
    """
    Structured audit logging for error-handling events.

    Audit logs are written to a separate logger for easy filtering.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._logger.info(f"AUDIT: {event.event_type.value}", extra={"audit": event.to_dict()})

    def error_escalated(self, error: Dict[str, Any], component: Optional[str] = None, **details: Any) -> None:
        """Log an error that was escalated for reporting."""
        self.log(
            AuditEvent(
                event_type=AuditEventType.ERROR_ESCALATED,
                component=component,
                details={"error": error, **details},
            )
        )


# Global audit logger
_audit = AuditLogger()


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger."""
    return _audit


def audit_log(event_type: str, **details: Any) -> None:
    """
    Convenience function for audit logging.

    Args:
        event_type: Type of event (error_handled, error_escalated, retry_attempt,
                    fallback_applied, user_action_required)
        **details: Additional details to include in the audit log
    """
    try:
        event_enum = AuditEventType(event_type)
    except ValueError:
        event_enum = AuditEventType.ERROR_HANDLED
        details["original_event_type"] = event_type

    component = details.pop("component", None)
    _audit.log(AuditEvent(event_type=event_enum, details=details, component=component))
